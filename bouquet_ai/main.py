import logging
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse

from bouquet_ai.core.config import PROJECT_ROOT, Settings
from bouquet_ai.core.errors.exceptions import AppError, PayloadTooLargeError
from bouquet_ai.core.errors.handlers import error_response, register_exception_handlers
from bouquet_ai.domains.bouquet_generation.router import router as bouquet_router
from bouquet_ai.lifespan import lifespan

logger = logging.getLogger(__name__)

# Load project-root .env if present.
# Note: Uvicorn does not automatically load it unless started with --env-file.
_env_path = PROJECT_ROOT / ".env"
if _env_path.exists():
    # Variables already exported in the shell win over .env values.
    load_dotenv(dotenv_path=_env_path, override=False)


def create_app(settings: Settings | None = None) -> FastAPI:
    app = FastAPI(title="Bouquet AI", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings or Settings.from_env()

    register_exception_handlers(app)

    @app.middleware("http")
    async def limit_body_size(request: Request, call_next):
        limit = app.state.settings.max_body_bytes
        declared = request.headers.get("content-length")
        if declared is not None and declared.isdigit() and int(declared) > limit:
            logger.warning(
                "Rejected request to %s: body of %s bytes exceeds %s",
                request.url.path,
                declared,
                limit,
            )
            return error_response(PayloadTooLargeError(limit))
        return await call_next(request)

    # Added last so it wraps the limiter and its 413 still carries CORS headers.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(bouquet_router)

    @app.get("/", include_in_schema=False)
    async def index():
        index_path = Path(app.state.settings.static_dir) / "index.html"
        if not index_path.is_file():
            raise AppError(code="NOT_FOUND", details="Landing page not found", http_status=404)
        return FileResponse(index_path)

    @app.get("/health")
    async def health():
        return {"ok": True}

    @app.get("/readyz")
    async def readyz():
        storage = getattr(app.state, "asset_storage", None)
        openai_settings = getattr(app.state, "openai_settings", None)
        return {
            "openai_configured": bool(openai_settings and openai_settings.configured),
            "asset_storage": storage.name if storage is not None else None,
        }

    return app


app = create_app()
