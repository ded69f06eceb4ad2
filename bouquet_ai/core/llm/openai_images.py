from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

from openai import OpenAI

from bouquet_ai.core.errors.exceptions import ProviderShapeError

DEFAULT_IMAGE_MODEL = "gpt-image-1"
DEFAULT_IMAGE_SIZE = "1024x1024"


@dataclass(frozen=True)
class OpenAISettings:
    api_key: str | None
    image_model: str
    image_size: str
    base_url: str | None

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(cls) -> "OpenAISettings":
        # A missing key is not fatal at startup; each request reports it instead.
        api_key = (os.getenv("OPENAI_API_KEY") or "").strip() or None

        image_model = (os.getenv("OPENAI_IMAGE_MODEL") or "").strip() or DEFAULT_IMAGE_MODEL
        image_size = (os.getenv("OPENAI_IMAGE_SIZE") or "").strip() or DEFAULT_IMAGE_SIZE

        base_url = (os.getenv("OPENAI_BASE_URL") or "").strip() or None
        return cls(api_key=api_key, image_model=image_model, image_size=image_size, base_url=base_url)


def create_client(settings: OpenAISettings) -> OpenAI | None:
    if not settings.configured:
        return None

    client_kwargs: dict[str, object] = {"api_key": settings.api_key}
    if settings.base_url:
        client_kwargs["base_url"] = settings.base_url
    return OpenAI(**client_kwargs)


def extract_b64_json(resp: Any) -> str | None:
    """Return the base64 payload of the first artifact, or None if it is missing."""

    data = getattr(resp, "data", None)
    if not data:
        return None
    try:
        first = data[0]
    except (IndexError, KeyError, TypeError):
        return None

    if isinstance(first, dict):
        b64 = first.get("b64_json")
    else:
        b64 = getattr(first, "b64_json", None)

    if not isinstance(b64, str) or not b64:
        return None
    return b64


def generate_image_b64(client: OpenAI, settings: OpenAISettings, *, prompt: str) -> str:
    """Generate one image and return its base64 payload.

    This is a sync function (run it in a worker thread).
    """

    resp = client.images.generate(
        model=settings.image_model,
        prompt=prompt,
        size=settings.image_size,
    )

    b64 = extract_b64_json(resp)
    if b64 is None:
        raise ProviderShapeError()
    return b64
