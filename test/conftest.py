from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from bouquet_ai.core.config import Settings
from bouquet_ai.main import create_app

PROVIDER_ENV = [
    "OPENAI_API_KEY",
    "OPENAI_IMAGE_MODEL",
    "OPENAI_IMAGE_SIZE",
    "OPENAI_BASE_URL",
    "ASSET_STORAGE",
    "ASSET_FOLDER",
    "ASSET_UPLOAD_REQUIRED",
    "CLOUDINARY_CLOUD_NAME",
    "CLOUDINARY_API_KEY",
    "CLOUDINARY_API_SECRET",
    "R2_ENABLED",
    "R2_ACCOUNT_ID",
    "R2_ACCESS_KEY_ID",
    "R2_SECRET_ACCESS_KEY",
    "R2_BUCKET_NAME",
    "R2_ENDPOINT_URL",
    "R2_PUBLIC_BASE_URL",
    "MAX_BODY_BYTES",
    "STATIC_DIR",
]

FAKE_B64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8z8BQDwAEhQGAhKmMIQAAAABJRU5ErkJggg=="


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep a developer's shell or .env from leaking provider credentials into tests."""
    for name in PROVIDER_ENV:
        monkeypatch.delenv(name, raising=False)


def images_response(*items):
    return SimpleNamespace(data=list(items))


@pytest.fixture
def openai_client():
    client = MagicMock()
    client.images.generate.return_value = images_response(SimpleNamespace(b64_json=FAKE_B64))
    return client


@pytest.fixture
def make_client(monkeypatch, openai_client):
    """Build a started app whose shared provider clients are replaced by mocks."""
    started = []

    def _make(*, api_key="sk-test", storage=None, **settings_kwargs):
        if api_key:
            monkeypatch.setenv("OPENAI_API_KEY", api_key)
        else:
            monkeypatch.delenv("OPENAI_API_KEY", raising=False)

        app = create_app(Settings(**settings_kwargs))
        client = TestClient(app)
        client.__enter__()
        started.append(client)

        if api_key:
            app.state.openai_client = openai_client
        app.state.asset_storage = storage
        return client

    yield _make

    for client in started:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client):
    return make_client()
