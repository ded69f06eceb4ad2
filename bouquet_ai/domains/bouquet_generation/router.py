from __future__ import annotations

from fastapi import APIRouter, Request

from bouquet_ai.domains.bouquet_generation.schemas import BouquetRequest, BouquetResponse
from bouquet_ai.domains.bouquet_generation.service import generate_bouquet

router = APIRouter(tags=["bouquet-generation"])


# The body is parsed inside the service so the credential check always runs first.
@router.post(
    "/api/generate",
    response_model=BouquetResponse,
    response_model_exclude_none=True,
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": BouquetRequest.model_json_schema()}},
        }
    },
)
async def generate_bouquet_endpoint(request: Request):
    return await generate_bouquet(request)
