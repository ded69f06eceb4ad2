from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI

from bouquet_ai.core.config import Settings
from bouquet_ai.core.llm.openai_images import OpenAISettings, create_client
from bouquet_ai.core.storage.factory import create_storage

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings

    # One credentialed client for the whole process; a missing key is reported per request.
    openai_settings = OpenAISettings.from_env()
    app.state.openai_settings = openai_settings
    app.state.openai_client = create_client(openai_settings)
    if app.state.openai_client is None:
        logger.warning("OPENAI_API_KEY is not set; /api/generate will answer 400")
    else:
        logger.info("Initialized OpenAI client (model=%s)", openai_settings.image_model)

    # Optional asset storage. Misconfiguration of an explicitly enabled backend fails startup.
    app.state.asset_storage = await anyio.to_thread.run_sync(create_storage, settings)
    if app.state.asset_storage is not None:
        logger.info(
            "Initialized %s asset storage (folder=%s)",
            app.state.asset_storage.name,
            settings.asset_folder,
        )

    yield

    client = app.state.openai_client
    if client is not None:
        client.close()
