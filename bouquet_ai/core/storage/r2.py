from __future__ import annotations

import os
import uuid
from dataclasses import dataclass
from typing import Any

import boto3
from botocore.client import Config

from bouquet_ai.core.errors.exceptions import AppError
from bouquet_ai.core.storage.base import extension_for, parse_data_uri

PRESIGNED_URL_EXPIRES_IN = 7 * 86400


@dataclass(frozen=True)
class R2Settings:
    account_id: str
    access_key_id: str
    secret_access_key: str
    bucket_name: str
    endpoint_url: str
    public_base_url: str | None = None

    @classmethod
    def from_env(cls) -> "R2Settings":
        account_id = (os.getenv("R2_ACCOUNT_ID") or "").strip()
        access_key_id = (os.getenv("R2_ACCESS_KEY_ID") or "").strip()
        secret_access_key = (os.getenv("R2_SECRET_ACCESS_KEY") or "").strip()
        bucket_name = (os.getenv("R2_BUCKET_NAME") or "").strip()

        endpoint_url = (os.getenv("R2_ENDPOINT_URL") or "").strip()
        if not endpoint_url and account_id:
            endpoint_url = f"https://{account_id}.r2.cloudflarestorage.com"

        # Public bucket domain (r2.dev or custom); without it URLs are presigned.
        public_base_url = (os.getenv("R2_PUBLIC_BASE_URL") or "").strip().rstrip("/") or None

        missing: list[str] = []
        if not account_id and not endpoint_url:
            missing.append("R2_ACCOUNT_ID (or R2_ENDPOINT_URL)")
        if not access_key_id:
            missing.append("R2_ACCESS_KEY_ID")
        if not secret_access_key:
            missing.append("R2_SECRET_ACCESS_KEY")
        if not bucket_name:
            missing.append("R2_BUCKET_NAME")

        if missing:
            raise AppError(
                code="R2_CONFIG_MISSING",
                details=f"Missing Cloudflare R2 configuration: {', '.join(missing)}",
                http_status=500,
            )

        return cls(
            account_id=account_id,
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            bucket_name=bucket_name,
            endpoint_url=endpoint_url,
            public_base_url=public_base_url,
        )


class R2Storage:
    name = "r2"

    def __init__(self, *, settings: R2Settings, client: Any | None = None) -> None:
        self.settings = settings
        self.client = client or boto3.client(
            "s3",
            endpoint_url=settings.endpoint_url,
            aws_access_key_id=settings.access_key_id,
            aws_secret_access_key=settings.secret_access_key,
            config=Config(signature_version="s3v4"),
        )

    @classmethod
    def from_env(cls) -> "R2Storage":
        return cls(settings=R2Settings.from_env())

    @property
    def bucket(self) -> str:
        return self.settings.bucket_name

    def upload_bytes(
        self,
        *,
        key: str,
        data: bytes,
        content_type: str | None = None,
        cache_control: str | None = None,
    ) -> None:
        extra: dict[str, Any] = {}
        if content_type:
            extra["ContentType"] = content_type
        if cache_control:
            extra["CacheControl"] = cache_control

        self.client.put_object(Bucket=self.bucket, Key=key, Body=data, **extra)

    def presigned_get_url(self, *, key: str, expires_in: int = PRESIGNED_URL_EXPIRES_IN) -> str:
        if expires_in < 1:
            raise ValueError("expires_in must be >= 1")

        return self.client.generate_presigned_url(
            ClientMethod="get_object",
            Params={"Bucket": self.bucket, "Key": key},
            ExpiresIn=expires_in,
        )

    def url_for(self, key: str) -> str:
        if self.settings.public_base_url:
            return f"{self.settings.public_base_url}/{key}"
        return self.presigned_get_url(key=key)

    def upload_data_uri(self, data_uri: str, *, folder: str) -> str:
        content_type, data = parse_data_uri(data_uri)

        folder = folder.strip("/")
        name = f"{uuid.uuid4()}.{extension_for(content_type)}"
        key = f"{folder}/{name}" if folder else name

        self.upload_bytes(
            key=key,
            data=data,
            content_type=content_type,
            cache_control="public, max-age=31536000, immutable",
        )
        return self.url_for(key)
