import base64
from unittest.mock import MagicMock

import pytest

from bouquet_ai.core.config import Settings
from bouquet_ai.core.errors.exceptions import AppError
from bouquet_ai.core.storage.base import parse_data_uri, to_data_uri
from bouquet_ai.core.storage.cloudinary_storage import CloudinarySettings, CloudinaryStorage
from bouquet_ai.core.storage.factory import create_storage
from bouquet_ai.core.storage.r2 import R2Settings, R2Storage

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake"
PNG_B64 = base64.b64encode(PNG_BYTES).decode("ascii")


def _r2_settings(**overrides):
    values = dict(
        account_id="acc",
        access_key_id="key",
        secret_access_key="secret",
        bucket_name="flowers",
        endpoint_url="https://acc.r2.cloudflarestorage.com",
    )
    values.update(overrides)
    return R2Settings(**values)


def _set_cloudinary_env(monkeypatch):
    monkeypatch.setenv("CLOUDINARY_CLOUD_NAME", "demo")
    monkeypatch.setenv("CLOUDINARY_API_KEY", "123")
    monkeypatch.setenv("CLOUDINARY_API_SECRET", "shh")


def _set_r2_env(monkeypatch):
    monkeypatch.setenv("R2_ENABLED", "1")
    monkeypatch.setenv("R2_ACCOUNT_ID", "acc")
    monkeypatch.setenv("R2_ACCESS_KEY_ID", "key")
    monkeypatch.setenv("R2_SECRET_ACCESS_KEY", "secret")
    monkeypatch.setenv("R2_BUCKET_NAME", "flowers")


def test_data_uri_helpers():
    data_uri = to_data_uri(PNG_B64)

    assert data_uri == f"data:image/png;base64,{PNG_B64}"
    assert parse_data_uri(data_uri) == ("image/png", PNG_BYTES)


@pytest.mark.parametrize("bad", ["not a data uri", "data:image/png,abc", "data:image/png;base64,@@@"])
def test_parse_data_uri_rejects_bad_input(bad):
    with pytest.raises(ValueError):
        parse_data_uri(bad)


def test_cloudinary_upload_sends_data_uri_to_folder(mocker):
    upload = mocker.patch(
        "cloudinary.uploader.upload",
        return_value={"secure_url": "https://res.cloudinary.com/demo/image/upload/v1/bouquets/x.png"},
    )
    storage = CloudinaryStorage(settings=CloudinarySettings(cloud_name="demo", api_key="123", api_secret="shh"))

    url = storage.upload_data_uri(to_data_uri(PNG_B64), folder="bouquets")

    assert url == "https://res.cloudinary.com/demo/image/upload/v1/bouquets/x.png"
    args, kwargs = upload.call_args
    assert args == (f"data:image/png;base64,{PNG_B64}",)
    assert kwargs["folder"] == "bouquets"
    assert kwargs["cloud_name"] == "demo"
    assert kwargs["api_secret"] == "shh"


def test_cloudinary_upload_without_url_fails(mocker):
    mocker.patch("cloudinary.uploader.upload", return_value={})
    storage = CloudinaryStorage(settings=CloudinarySettings(cloud_name="demo", api_key="123", api_secret="shh"))

    with pytest.raises(RuntimeError):
        storage.upload_data_uri(to_data_uri(PNG_B64), folder="bouquets")


def test_cloudinary_settings_report_missing_variables(monkeypatch):
    monkeypatch.setenv("CLOUDINARY_CLOUD_NAME", "demo")

    assert CloudinarySettings.from_env_optional() is None
    with pytest.raises(AppError) as excinfo:
        CloudinarySettings.from_env()
    assert "CLOUDINARY_API_KEY" in excinfo.value.details
    assert "CLOUDINARY_API_SECRET" in excinfo.value.details


def test_r2_upload_uses_public_base_url():
    s3 = MagicMock()
    storage = R2Storage(settings=_r2_settings(public_base_url="https://cdn.example.com"), client=s3)

    url = storage.upload_data_uri(to_data_uri(PNG_B64), folder="/bouquets/")

    kwargs = s3.put_object.call_args.kwargs
    assert kwargs["Bucket"] == "flowers"
    assert kwargs["Body"] == PNG_BYTES
    assert kwargs["ContentType"] == "image/png"
    assert kwargs["Key"].startswith("bouquets/")
    assert kwargs["Key"].endswith(".png")
    assert url == f"https://cdn.example.com/{kwargs['Key']}"
    s3.generate_presigned_url.assert_not_called()


def test_r2_upload_falls_back_to_presigned_url():
    s3 = MagicMock()
    s3.generate_presigned_url.return_value = "https://acc.r2.cloudflarestorage.com/flowers/signed"
    storage = R2Storage(settings=_r2_settings(), client=s3)

    url = storage.upload_data_uri(to_data_uri(PNG_B64), folder="bouquets")

    assert url == "https://acc.r2.cloudflarestorage.com/flowers/signed"
    key = s3.put_object.call_args.kwargs["Key"]
    assert s3.generate_presigned_url.call_args.kwargs["Params"] == {"Bucket": "flowers", "Key": key}


def test_r2_settings_report_missing_variables(monkeypatch):
    monkeypatch.setenv("R2_ACCOUNT_ID", "acc")

    with pytest.raises(AppError) as excinfo:
        R2Settings.from_env()
    assert excinfo.value.code == "R2_CONFIG_MISSING"
    assert "R2_BUCKET_NAME" in excinfo.value.details


def test_factory_without_configuration_returns_none():
    assert create_storage(Settings()) is None


def test_factory_prefers_cloudinary(monkeypatch, mocker):
    boto_client = mocker.patch("bouquet_ai.core.storage.r2.boto3.client")
    _set_cloudinary_env(monkeypatch)
    _set_r2_env(monkeypatch)

    storage = create_storage(Settings())

    assert isinstance(storage, CloudinaryStorage)
    boto_client.assert_not_called()


def test_factory_uses_r2_when_enabled(monkeypatch, mocker):
    mocker.patch("bouquet_ai.core.storage.r2.boto3.client")
    _set_r2_env(monkeypatch)

    storage = create_storage(Settings())

    assert isinstance(storage, R2Storage)
    assert storage.bucket == "flowers"


def test_factory_honours_explicit_choice(monkeypatch, mocker):
    mocker.patch("bouquet_ai.core.storage.r2.boto3.client")
    _set_cloudinary_env(monkeypatch)
    _set_r2_env(monkeypatch)

    assert isinstance(create_storage(Settings(asset_storage="r2")), R2Storage)
    assert create_storage(Settings(asset_storage="none")) is None
    with pytest.raises(AppError):
        create_storage(Settings(asset_storage="ftp"))
