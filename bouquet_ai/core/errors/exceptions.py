from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

# Single client-facing label shared by every failure response.
ERROR_LABEL = "Errore generazione AI"


@dataclass
class AppError(Exception):
    code: str
    details: str
    http_status: int = 400
    cause: Exception | None = None

    def __str__(self) -> str:
        return f"{self.code}: {self.details}"

    def to_dict(self) -> dict[str, Any]:
        return {"error": ERROR_LABEL, "details": self.details}


class ConfigurationError(AppError):
    def __init__(self, details: str = "Manca OPENAI_API_KEY nel file .env"):
        super().__init__(code="CONFIGURATION_ERROR", details=details, http_status=400)


class ValidationError(AppError):
    def __init__(self, details: str = "Dati mancanti: servono almeno style e budget"):
        super().__init__(code="VALIDATION_ERROR", details=details, http_status=400)


class ProviderShapeError(AppError):
    def __init__(
        self,
        details: str = "OpenAI ha risposto ma non ha fornito b64_json (risposta inattesa).",
    ):
        super().__init__(code="PROVIDER_SHAPE_ERROR", details=details, http_status=500)


class ProviderCallError(AppError):
    def __init__(self, details: str, *, cause: Exception | None = None):
        super().__init__(code="PROVIDER_CALL_ERROR", details=details, http_status=500, cause=cause)


class PayloadTooLargeError(AppError):
    def __init__(self, limit: int):
        super().__init__(
            code="PAYLOAD_TOO_LARGE",
            details=f"Richiesta troppo grande (limite {limit} byte)",
            http_status=413,
        )


def _message_from(payload: Any) -> str | None:
    if not isinstance(payload, Mapping):
        return None
    # OpenAI style: {"error": {"message": ...}}; S3 style: {"Error": {"Message": ...}}.
    for key, message_key in (("error", "message"), ("Error", "Message")):
        nested = payload.get(key)
        if isinstance(nested, Mapping) and nested.get(message_key):
            return str(nested[message_key])
    if payload.get("message"):
        return str(payload["message"])
    return None


def provider_error_details(exc: BaseException) -> str:
    """Best-effort human readable message for an exception raised by a provider SDK."""

    body = getattr(exc, "body", None)
    response = getattr(exc, "response", None)
    if body is None and response is not None:
        if isinstance(response, Mapping):
            body = response
        else:
            try:
                body = response.json()
            except Exception:
                body = None

    message = _message_from(body)
    if message:
        return message

    message = _message_from({"error": getattr(exc, "error", None)})
    if message:
        return message

    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message

    return str(exc) or repr(exc)
