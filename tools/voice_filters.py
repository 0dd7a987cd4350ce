"""Turn a transcribed voice request into structured catalog filters."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from models.product import ActiveFilters
from styleai_app.logging_config import get_logger, log_event
from tools.gemini import TextModel, extract_json_object, generate_text

LOGGER = get_logger(__name__)

ANY_COLOR = "Any Color"
CLOTHING_TYPE_WORDS = ("pants", "jeans", "trousers", "shirt", "sweater", "scarf")
FALLBACK_RESPONSE = (
    "I'm not sure what you want to do. Try asking for specific clothing items like "
    "'Show me red pants' or 'Find blue t-shirts'."
)

FILTER_PROMPT = """
You are "FilterBuilder", a function-style assistant that MUST follow these rules:
1. Return ONLY a JSON object with these exact keys:
{
  "color": null | "Any Color" | "Beige" | "Black" | "Blue" | "Brown" | "Burgundy" | "Cream" | "Gray" | "Green" | "Navy" | "Purple" | "Red" | "White" | "Yellow",
  "type": null | "t-shirt" | "sweater" | "scarf" | "long sleeve" | "pants",
  "priceMin": null | number,
  "priceMax": null | number,
  "store": null | "Uniqlo" | "Zara" | "H&M" | "Gap" | "Patagonia",
  "inStockMin": null | number,
  "material": null | "Acrylic Blend" | "Bamboo" | "Cashmere" | "Cotton" | "Cotton Blend" | "Cotton Knit" | "Merino Wool" | "Modal" | "Organic Cotton" | "Silk" | "Wool",
  "occasion": null | "Casual" | "Work" | "Party" | "Weekend",
  "season": null | "Spring" | "Summer"
}

2. CRITICAL RULES:
- When ANY clothing type is mentioned (pants, shirt, etc), you MUST set both:
  - "type" field to the matching type
  - "color" field if a color is mentioned
- ALWAYS map clothing types to their exact values:
  - "pants", "trousers", "jeans", "slacks", "bottoms" -> set type: "pants"
  - "shirt", "tee", "tshirt" -> set type: "t-shirt"
  - "jumper", "pullover" -> set type: "sweater"
  - "wrap", "shawl" -> set type: "scarf"
  - "longsleeve", "long sleeve shirt" -> set type: "long sleeve"

3. EXAMPLES (you must follow this exact format):
"Show me red pants" -> {"color": "Red", "type": "pants", "priceMin": null, "priceMax": null, "store": null, "inStockMin": null, "material": null, "occasion": null, "season": null}
"I want blue jeans" -> {"color": "Blue", "type": "pants", "priceMin": null, "priceMax": null, "store": null, "inStockMin": null, "material": null, "occasion": null, "season": null}
"Find me trousers" -> {"color": null, "type": "pants", "priceMin": null, "priceMax": null, "store": null, "inStockMin": null, "material": null, "occasion": null, "season": null}

USER REQUEST: {request}
""".strip()


class VoiceFilters(BaseModel):
    """Filters extracted from one spoken request; ``None`` means not mentioned."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    color: Optional[str] = None
    type: Optional[str] = None
    price_min: Optional[float] = Field(None, alias="priceMin")
    price_max: Optional[float] = Field(None, alias="priceMax")
    store: Optional[str] = None
    in_stock_min: Optional[int] = Field(None, alias="inStockMin")
    material: Optional[str] = None
    occasion: Optional[str] = None
    season: Optional[str] = None

    def set_fields(self) -> Dict[str, Any]:
        return {key: value for key, value in self.model_dump(by_alias=True).items() if value is not None}

    def to_active_filters(self, base: ActiveFilters | None = None) -> ActiveFilters:
        """Merge into ``base``; fields left unset keep the base value."""

        merged = (base or ActiveFilters()).model_copy(deep=True)
        updates: Dict[str, Any] = {}
        if self.color is not None:
            updates["colors"] = [] if self.color == ANY_COLOR else [self.color]
        if self.type is not None:
            updates["types"] = [self.type]
        if self.store is not None:
            updates["stores"] = [self.store]
        if self.material is not None:
            updates["materials"] = [self.material]
        if self.occasion is not None:
            updates["occasions"] = [self.occasion]
        if self.season is not None:
            updates["seasons"] = [self.season]
        if self.price_min is not None:
            updates["price_min"] = self.price_min
        if self.price_max is not None:
            updates["price_max"] = self.price_max
        if self.in_stock_min is not None:
            updates["in_stock"] = self.in_stock_min > 0
        return merged.model_copy(update=updates)


def mentions_clothing_type(request: str) -> bool:
    lowered = request.lower()
    return any(word in lowered for word in CLOTHING_TYPE_WORDS)


class VoiceFilterParser:
    """Asks the text model to fill the FilterBuilder schema for a request."""

    def __init__(self, model: TextModel | None) -> None:
        self.model = model

    def build_prompt(self, request: str) -> str:
        return FILTER_PROMPT.replace("{request}", request)

    def parse(self, latest_turns: Sequence[str]) -> Optional[VoiceFilters]:
        """Parse the most recent turn; ``None`` when no usable filters came back."""

        if not latest_turns:
            return None
        if self.model is None:
            log_event(LOGGER, logging.WARNING, "voice_filters_unavailable", reason="missing_api_key")
            return None

        request = latest_turns[-1]
        try:
            raw = generate_text(self.model, self.build_prompt(request))
        except Exception as exc:
            log_event(LOGGER, logging.ERROR, "voice_filters_model_failed", details=str(exc))
            return None

        try:
            filters = VoiceFilters.model_validate(extract_json_object(raw))
        except (json.JSONDecodeError, ValidationError) as exc:
            log_event(LOGGER, logging.WARNING, "voice_filters_unparsable", details=str(exc))
            return None

        if mentions_clothing_type(request) and not filters.type:
            log_event(LOGGER, logging.WARNING, "voice_filters_missing_type")
            return None

        log_event(
            LOGGER,
            logging.INFO,
            "voice_filters_parsed",
            set_fields=sorted(filters.set_fields()),
        )
        return filters


def on_transcription(parser: VoiceFilterParser, transcript: str, turns: List[str] | None = None) -> Dict[str, Any]:
    """Handle a finished transcript and build the assistant's spoken reply."""

    filters = parser.parse([*(turns or []), transcript])
    if filters is not None:
        summary = ", ".join(f"{key}: {value}" for key, value in filters.set_fields().items())
        return {"response": f"Setting filters: {summary}", "should_continue": True, "filters": filters}
    return {"response": FALLBACK_RESPONSE, "should_continue": True, "filters": None}


__all__ = [
    "ANY_COLOR",
    "FALLBACK_RESPONSE",
    "VoiceFilterParser",
    "VoiceFilters",
    "mentions_clothing_type",
    "on_transcription",
]
