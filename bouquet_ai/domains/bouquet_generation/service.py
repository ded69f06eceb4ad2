from __future__ import annotations

import json
import logging
from functools import partial
from typing import Any

import anyio
from fastapi import Request
from pydantic import ValidationError as PydanticValidationError

from bouquet_ai.core.errors.exceptions import (
    AppError,
    ConfigurationError,
    PayloadTooLargeError,
    ProviderCallError,
    ValidationError,
    provider_error_details,
)
from bouquet_ai.core.llm.openai_images import generate_image_b64
from bouquet_ai.core.storage.base import to_data_uri
from bouquet_ai.domains.bouquet_generation.schemas import BouquetRequest, BouquetResponse
from bouquet_ai.domains.bouquet_generation.templates import normalize_budget, render_prompt, render_text

logger = logging.getLogger(__name__)


async def _read_payload(request: Request) -> BouquetRequest:
    settings = request.app.state.settings

    body = await request.body()
    if len(body) > settings.max_body_bytes:
        logger.warning(
            "Rejected generation request: body of %s bytes exceeds %s",
            len(body),
            settings.max_body_bytes,
        )
        raise PayloadTooLargeError(settings.max_body_bytes)

    data: Any = {}
    if body.strip():
        try:
            data = json.loads(body)
        except ValueError as exc:
            logger.warning("Rejected generation request: body is not valid JSON (%s)", exc)
            raise ValidationError() from exc

    # A JSON array or scalar carries none of the expected fields.
    if not isinstance(data, dict):
        data = {}

    try:
        return BouquetRequest.model_validate(data)
    except PydanticValidationError as exc:
        logger.warning("Rejected generation request: %s", exc.errors())
        raise ValidationError() from exc


async def _upload_image(request: Request, b64: str) -> str | None:
    state = request.app.state
    storage = state.asset_storage
    if storage is None:
        return None

    settings = state.settings
    upload = partial(storage.upload_data_uri, to_data_uri(b64), folder=settings.asset_folder)
    try:
        # Storage SDKs are sync; run in worker thread.
        return await anyio.to_thread.run_sync(upload)
    except Exception as exc:
        details = provider_error_details(exc)
        if settings.asset_upload_required:
            logger.error("Asset upload to %s failed: %s", storage.name, details, exc_info=exc)
            raise ProviderCallError(details, cause=exc) from exc

        logger.warning(
            "Asset upload to %s failed, replying without image_url: %s",
            storage.name,
            details,
            exc_info=exc,
        )
        return None


async def generate_bouquet(request: Request) -> BouquetResponse:
    state = request.app.state
    openai_settings = state.openai_settings
    client = state.openai_client

    if not openai_settings.configured or client is None:
        logger.warning("Rejected generation request: OPENAI_API_KEY is not configured")
        raise ConfigurationError()

    payload = await _read_payload(request)
    if not payload.style or payload.budget is None:
        logger.warning(
            "Rejected generation request: missing style or budget (style=%r, budget=%r)",
            payload.style,
            payload.budget,
        )
        raise ValidationError()

    budget = normalize_budget(payload.budget)
    text = render_text(payload, budget)
    prompt = render_prompt(payload, budget)

    try:
        b64 = await anyio.to_thread.run_sync(
            partial(generate_image_b64, client, openai_settings, prompt=prompt)
        )
    except AppError as exc:
        logger.error("Image generation returned an unexpected response: %s", exc)
        raise
    except Exception as exc:
        details = provider_error_details(exc)
        logger.error("Image generation failed: %s", details, exc_info=exc)
        raise ProviderCallError(details, cause=exc) from exc

    image_url = await _upload_image(request, b64)
    return BouquetResponse(text=text, image_base64=b64, image_url=image_url)
