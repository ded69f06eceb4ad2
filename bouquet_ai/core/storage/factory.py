from __future__ import annotations

import logging

from bouquet_ai.core.config import Settings, env_truthy
from bouquet_ai.core.errors.exceptions import AppError
from bouquet_ai.core.storage.base import AssetStorage
from bouquet_ai.core.storage.cloudinary_storage import CloudinarySettings, CloudinaryStorage
from bouquet_ai.core.storage.r2 import R2Storage

logger = logging.getLogger(__name__)


def create_storage(settings: Settings) -> AssetStorage | None:
    """Build the configured asset storage, or None when uploads are disabled.

    Cloudinary is picked when its credentials are present, then R2 when
    R2_ENABLED is set. ASSET_STORAGE forces one of them (or "none").
    """

    choice = settings.asset_storage
    if choice in {"none", "off", "disabled"}:
        return None

    if choice == "cloudinary":
        return CloudinaryStorage.from_env()

    if choice == "r2":
        return R2Storage.from_env()

    if choice != "auto":
        raise AppError(
            code="ASSET_STORAGE_UNKNOWN",
            details=f"Unknown ASSET_STORAGE value: {choice!r}",
            http_status=500,
        )

    cloudinary_settings = CloudinarySettings.from_env_optional()
    if cloudinary_settings is not None:
        return CloudinaryStorage(settings=cloudinary_settings)

    if env_truthy("R2_ENABLED", "0"):
        return R2Storage.from_env()

    logger.info("No asset storage configured; image_url will be omitted")
    return None
