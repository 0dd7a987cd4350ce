"""Pick a color-coordinated top and bottom from the user's closet."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from memory.closet_store import ClosetItem
from styleai_app.logging_config import get_logger, log_event
from tools.gemini import TextModel, extract_json_object, generate_text

LOGGER = get_logger(__name__)

TOP_TYPES = {"t-shirt", "shirt", "sweater", "long sleeve", "blouse", "top"}
BOTTOM_TYPES = {"pants", "jeans", "trousers", "bottoms", "shorts"}

RECOMMENDATION_PROMPT = """
You are a professional fashion stylist. I need you to recommend the BEST color-coordinated outfit from my closet items.

AVAILABLE SHIRTS/TOPS:
{shirts}

AVAILABLE PANTS/BOTTOMS:
{pants}

TASK: Choose ONE shirt and ONE pant that would look great together based on color coordination and style matching.

RULES:
1. Focus primarily on color harmony (complementary, analogous, or neutral combinations)
2. Consider the style/formality level (casual with casual, dressy with dressy)
3. Return ONLY a JSON object with this exact format:

{{
  "shirtId": "ID_of_chosen_shirt",
  "pantId": "ID_of_chosen_pant",
  "reasoning": "Brief explanation of why these colors and styles work well together"
}}

EXAMPLES of good color combinations:
- Navy/Blue with White, Beige, Gray, or Khaki
- Black with White, Gray, or any bright color
- White with any color
- Brown/Tan with Cream, White, or Navy
- Gray with any color (neutral)

Choose the BEST combination from my available items:
""".strip()


@dataclass
class OutfitRecommendation:
    shirt: ClosetItem
    pant: ClosetItem
    reasoning: str


def split_closet(items: Sequence[ClosetItem]) -> tuple[List[ClosetItem], List[ClosetItem]]:
    tops = [item for item in items if item.type.lower() in TOP_TYPES]
    bottoms = [item for item in items if item.type.lower() in BOTTOM_TYPES]
    return tops, bottoms


def _describe(items: Sequence[ClosetItem]) -> str:
    return "\n".join(
        f"ID: {item.id}, Type: {item.type}, Color: {item.color}, Description: {item.description}"
        for item in items
    )


class ClosetRecommender:
    """Asks the text model to choose one top and one bottom."""

    def __init__(self, model: TextModel | None) -> None:
        self.model = model

    def build_prompt(self, tops: Sequence[ClosetItem], bottoms: Sequence[ClosetItem]) -> str:
        return RECOMMENDATION_PROMPT.format(shirts=_describe(tops), pants=_describe(bottoms))

    def recommend(self, items: Sequence[ClosetItem]) -> Optional[OutfitRecommendation]:
        """Return a recommendation, or ``None`` when the closet or the model can't supply one."""

        tops, bottoms = split_closet(items)
        log_event(
            LOGGER,
            logging.INFO,
            "closet_recommendation_started",
            top_count=len(tops),
            bottom_count=len(bottoms),
        )
        if not tops or not bottoms:
            return None
        if self.model is None:
            log_event(LOGGER, logging.WARNING, "closet_recommendation_unavailable", reason="missing_api_key")
            return None

        try:
            raw = generate_text(self.model, self.build_prompt(tops, bottoms))
        except Exception as exc:
            log_event(LOGGER, logging.ERROR, "closet_recommendation_model_failed", details=str(exc))
            return None

        try:
            payload = extract_json_object(raw)
        except json.JSONDecodeError as exc:
            log_event(LOGGER, logging.WARNING, "closet_recommendation_unparsable", details=str(exc))
            return None

        shirt = next((item for item in tops if item.id == str(payload.get("shirtId"))), None)
        pant = next((item for item in bottoms if item.id == str(payload.get("pantId"))), None)
        if shirt is None or pant is None:
            log_event(LOGGER, logging.WARNING, "closet_recommendation_unknown_items")
            return None

        return OutfitRecommendation(shirt=shirt, pant=pant, reasoning=str(payload.get("reasoning", "")))


__all__ = ["BOTTOM_TYPES", "ClosetRecommender", "OutfitRecommendation", "TOP_TYPES", "split_closet"]
