from __future__ import annotations

import base64
import binascii
from typing import Protocol

_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/webp": "webp",
}


class AssetStorage(Protocol):
    name: str

    def upload_data_uri(self, data_uri: str, *, folder: str) -> str:
        """Upload the image and return its canonical URL (sync, run in a worker thread)."""
        ...


def to_data_uri(b64: str, *, content_type: str = "image/png") -> str:
    return f"data:{content_type};base64,{b64}"


def parse_data_uri(data_uri: str) -> tuple[str, bytes]:
    """Split a base64 data URI into (content_type, raw bytes)."""

    header, sep, payload = data_uri.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ValueError("Expected a base64 data URI")

    content_type = header[len("data:") : -len(";base64")] or "application/octet-stream"
    try:
        data = base64.b64decode(payload, validate=True)
    except binascii.Error as exc:
        raise ValueError("Invalid base64 payload in data URI") from exc
    return content_type, data


def extension_for(content_type: str) -> str:
    return _EXTENSIONS.get(content_type, "bin")
