from __future__ import annotations

import os
from dataclasses import dataclass

import cloudinary.uploader

from bouquet_ai.core.errors.exceptions import AppError


@dataclass(frozen=True)
class CloudinarySettings:
    cloud_name: str
    api_key: str
    api_secret: str

    @classmethod
    def _read_env(cls) -> tuple[str, str, str]:
        return (
            (os.getenv("CLOUDINARY_CLOUD_NAME") or "").strip(),
            (os.getenv("CLOUDINARY_API_KEY") or "").strip(),
            (os.getenv("CLOUDINARY_API_SECRET") or "").strip(),
        )

    @classmethod
    def from_env_optional(cls) -> "CloudinarySettings | None":
        cloud_name, api_key, api_secret = cls._read_env()
        if not (cloud_name and api_key and api_secret):
            return None
        return cls(cloud_name=cloud_name, api_key=api_key, api_secret=api_secret)

    @classmethod
    def from_env(cls) -> "CloudinarySettings":
        cloud_name, api_key, api_secret = cls._read_env()

        missing: list[str] = []
        if not cloud_name:
            missing.append("CLOUDINARY_CLOUD_NAME")
        if not api_key:
            missing.append("CLOUDINARY_API_KEY")
        if not api_secret:
            missing.append("CLOUDINARY_API_SECRET")

        if missing:
            raise AppError(
                code="CLOUDINARY_CONFIG_MISSING",
                details=f"Missing Cloudinary configuration: {', '.join(missing)}",
                http_status=500,
            )

        return cls(cloud_name=cloud_name, api_key=api_key, api_secret=api_secret)


class CloudinaryStorage:
    name = "cloudinary"

    def __init__(self, *, settings: CloudinarySettings) -> None:
        self.settings = settings

    @classmethod
    def from_env(cls) -> "CloudinaryStorage":
        return cls(settings=CloudinarySettings.from_env())

    def upload_data_uri(self, data_uri: str, *, folder: str) -> str:
        # Credentials go with each call so no global cloudinary.config() is mutated.
        result = cloudinary.uploader.upload(
            data_uri,
            folder=folder,
            resource_type="image",
            cloud_name=self.settings.cloud_name,
            api_key=self.settings.api_key,
            api_secret=self.settings.api_secret,
            secure=True,
        )

        url = result.get("secure_url") or result.get("url")
        if not url:
            raise RuntimeError("Cloudinary upload returned no URL")
        return str(url)
