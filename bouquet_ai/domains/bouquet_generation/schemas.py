from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class BouquetRequest(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    occasion: str | None = None
    palette: str | None = None
    style: str | None = None
    # Left untyped: anything is accepted here and normalized later.
    budget: Any = None
    size: str | None = None

    @field_validator("occasion", "palette", "style", "size", mode="before")
    @classmethod
    def _numbers_as_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class BouquetResponse(BaseModel):
    text: str
    image_base64: str
    image_url: str | None = None
