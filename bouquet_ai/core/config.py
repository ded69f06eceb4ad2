from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict

PROJECT_ROOT = Path(__file__).resolve().parents[2]

PORT = 8790
BUDGET_FLOOR = 35
DEFAULT_MAX_BODY_BYTES = 2 * 1024 * 1024


def env_truthy(name: str, default: str = "0") -> bool:
    value = (os.getenv(name, default) or "").strip().lower()
    return value in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    try:
        return int(raw)
    except ValueError:
        return default


class Settings(BaseModel):
    """Process-wide configuration, read once at startup and never mutated."""

    model_config = ConfigDict(frozen=True)

    asset_storage: str = "auto"
    asset_folder: str = "bouquets"
    asset_upload_required: bool = True
    max_body_bytes: int = DEFAULT_MAX_BODY_BYTES
    static_dir: Path = PROJECT_ROOT / "public"

    @classmethod
    def from_env(cls) -> "Settings":
        asset_storage = (os.getenv("ASSET_STORAGE") or "auto").strip().lower() or "auto"
        asset_folder = (os.getenv("ASSET_FOLDER") or "").strip().strip("/") or "bouquets"

        max_body_bytes = env_int("MAX_BODY_BYTES", DEFAULT_MAX_BODY_BYTES)
        if max_body_bytes < 1:
            max_body_bytes = DEFAULT_MAX_BODY_BYTES

        static_raw = (os.getenv("STATIC_DIR") or "").strip()
        static_dir = Path(static_raw) if static_raw else PROJECT_ROOT / "public"

        return cls(
            asset_storage=asset_storage,
            asset_folder=asset_folder,
            asset_upload_required=env_truthy("ASSET_UPLOAD_REQUIRED", "1"),
            max_body_bytes=max_body_bytes,
            static_dir=static_dir,
        )
