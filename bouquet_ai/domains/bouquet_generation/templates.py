from __future__ import annotations

import math
from typing import Any

from bouquet_ai.core.config import BUDGET_FLOOR
from bouquet_ai.domains.bouquet_generation.schemas import BouquetRequest

PLACEHOLDER = "—"
CLOSING_LINE = "Una composizione armoniosa, elegante e pensata per emozionare."

PROMPT_STYLE_DIRECTIVES = (
    "Natural seasonal flowers, premium wrap, soft daylight, neutral background.\n"
    "Luxury floral photography, shallow depth of field, ultra realistic."
)


def normalize_budget(value: Any, *, floor: int = BUDGET_FLOOR) -> int | float:
    """Coerce a raw budget to a number no lower than `floor`.

    Falsy, non-numeric and non-finite input all fall back to `floor`.
    """

    if not value:
        return floor

    if isinstance(value, str):
        value = value.strip()
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return floor

    if not math.isfinite(number):
        return floor

    number = max(float(floor), number)
    if number.is_integer():
        return int(number)
    return number


def render_text(payload: BouquetRequest, budget: int | float) -> str:
    style = str(payload.style).lower()
    lines = [
        f"Bouquet {style}.",
        f"Occasione: {payload.occasion or PLACEHOLDER}",
        f"Palette: {payload.palette or PLACEHOLDER}",
        f"Dimensione: {payload.size or PLACEHOLDER}",
        f"Budget: {budget}€.",
        "",
        CLOSING_LINE,
    ]
    return "\n".join(lines)


def render_prompt(payload: BouquetRequest, budget: int | float) -> str:
    style = str(payload.style).lower()
    lines = [
        f"Ultra realistic professional florist photograph of a {style} bouquet.",
        f"Occasion: {payload.occasion or 'gift'}.",
        f"Color palette: {payload.palette or 'powder pink and sage'}.",
        f"Bouquet size: {payload.size or 'medium'}.",
        f"Visual richness consistent with a {budget} EUR bouquet.",
        PROMPT_STYLE_DIRECTIVES,
    ]
    return "\n".join(lines)
