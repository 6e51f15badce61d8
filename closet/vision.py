"""Recover a valid clothing-attribute record from free-form vision model replies.

The model is asked for JSON but routinely wraps it in prose, uses single
quotes or leaves keys bare. Replies go through four stages:

1. extract the outermost ``{...}`` span,
2. strict JSON parse,
3. one repair pass (quote bare keys, swap single quotes) and a second parse,
4. sanitize each field against the closed enumerations, substituting defaults.

Only the first three stages can fail; sanitizing always yields a usable record.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from pydantic import BaseModel

from closet.api.vision_client import VisionClient, image_to_data_url
from closet.domain.enums import (
    CATEGORY_VALUES,
    COLOR_VALUES,
    MATERIAL_VALUES,
    Category,
    Color,
    Material,
)
from closet.errors import MalformedResponse, NoModelResponse

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = Category.TOP
DEFAULT_COLORS = (Color.MULTI,)
DEFAULT_MATERIAL = Material.MEDIUM

CLASSIFICATION_PROMPT = """Analyze this clothing item and provide the following information in JSON format:
{
  "category": "Top" or "Bottom" or "Shoe",
  "colors": ["array of dominant colors (choose from: Black, White, Gray, Brown, Beige, Red, Pink, Orange, Yellow, Green, Blue, Purple, Pattern, Multi)"],
  "material": "Heavy" or "Medium" or "Light"
}

Category rules:
- Top: Shirts, blouses, sweaters, jackets, coats, hoodies, tops
- Bottom: Pants, jeans, shorts, skirts
- Shoe: Sneakers, boots, sandals, heels, any footwear

Material rules:
- Heavy: Sweaters, coats, jackets, thick fabric items
- Medium: Regular shirts, pants, jeans, standard clothing
- Light: T-shirts, shorts, thin fabric items

Respond with ONLY the JSON, no additional text."""

_OBJECT_SPAN = re.compile(r"\{.*\}", re.DOTALL)
_BARE_KEY = re.compile(r"(\w+):")


class ClothingAttributes(BaseModel):
    """Validated attributes ready to be stored on a clothing item."""

    category: Category
    colors: list[Color]
    material: Material


def extract_object_span(text: str) -> str | None:
    """Return the greedy first-``{`` to last-``}`` span, or ``None``."""

    match = _OBJECT_SPAN.search(text)
    return match.group(0) if match else None


def parse_object(raw: str) -> tuple[dict[str, Any] | None, json.JSONDecodeError | None]:
    """Strictly parse ``raw``; returns ``(payload, None)`` or ``(None, error)``."""

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        return None, exc
    if not isinstance(payload, dict):
        return None, json.JSONDecodeError("Expected a JSON object", raw, 0)
    return payload, None


def repair_json(raw: str) -> str:
    """Quote bare identifier keys and convert single quotes to double quotes."""

    return _BARE_KEY.sub(r'"\1":', raw).replace("'", '"')


def sanitize_attributes(payload: dict[str, Any]) -> ClothingAttributes:
    """Coerce a parsed payload onto the closed enumerations, never failing."""

    category = payload.get("category")
    if not isinstance(category, str) or category not in CATEGORY_VALUES:
        logger.debug("Replacing invalid category %r with %s", category, DEFAULT_CATEGORY.value)
        category = DEFAULT_CATEGORY.value

    raw_colors = payload.get("colors")
    if isinstance(raw_colors, list):
        # Colours are a set; keep the first occurrence of each.
        colors = list(dict.fromkeys(color for color in raw_colors if isinstance(color, str) and color in COLOR_VALUES))
        if len(colors) != len(raw_colors):
            logger.debug("Dropped unknown or repeated colours from %r", raw_colors)
    else:
        colors = []
    if not colors:
        colors = [color.value for color in DEFAULT_COLORS]

    material = payload.get("material")
    if not isinstance(material, str) or material not in MATERIAL_VALUES:
        logger.debug("Replacing invalid material %r with %s", material, DEFAULT_MATERIAL.value)
        material = DEFAULT_MATERIAL.value

    return ClothingAttributes.model_validate(
        {"category": category, "colors": colors, "material": material},
    )


def normalize_vision_reply(text: str | None) -> ClothingAttributes:
    """Turn a raw model reply into validated clothing attributes.

    Raises :class:`NoModelResponse` for an empty reply and
    :class:`MalformedResponse` when no JSON object survives one repair pass.
    """

    if not text or not text.strip():
        raise NoModelResponse("No response from AI")

    span = extract_object_span(text)
    if span is None:
        raise MalformedResponse("Invalid AI response format")

    payload, error = parse_object(span)
    if payload is None:
        logger.info("Vision reply is not strict JSON, attempting one repair pass")
        payload, error = parse_object(repair_json(span))
    if payload is None:
        raise MalformedResponse(f"Could not parse AI response: {error}") from error

    return sanitize_attributes(payload)


class ClothingAnalyzer:
    """Classifies a clothing photo via the vision model."""

    def __init__(self, client: VisionClient, prompt: str = CLASSIFICATION_PROMPT) -> None:
        self._client = client
        self._prompt = prompt

    async def analyze(self, image: bytes | str) -> ClothingAttributes:
        """Return sanitized attributes for ``image`` (data URL or raw image bytes)."""

        image_url = image_to_data_url(image)
        reply = await self._client.describe_image(image_url, self._prompt)
        attributes = normalize_vision_reply(reply)
        logger.info(
            "Classified clothing as %s / %s / %s",
            attributes.category.value,
            ",".join(color.value for color in attributes.colors),
            attributes.material.value,
        )
        return attributes


__all__ = [
    "CLASSIFICATION_PROMPT",
    "ClothingAttributes",
    "ClothingAnalyzer",
    "extract_object_span",
    "parse_object",
    "repair_json",
    "sanitize_attributes",
    "normalize_vision_reply",
]
