"""Distance-based matching between garment colors and a skin tone profile."""

from __future__ import annotations

import logging
import math
import re
from typing import Iterable, List, Optional, Protocol, TypeVar

from models.color_names import resolve_color_hex
from models.skin_tone import RGB, SkinToneProfile

logger = logging.getLogger(__name__)

MATCH_THRESHOLD = 150.0
STRICT_MATCH_THRESHOLD = 80.0
AVOID_THRESHOLD = 60.0
# Distance reported when either color cannot be parsed.
UNPARSABLE_DISTANCE = 100.0

_HEX_PATTERN = re.compile(r"#?([a-f\d]{2})([a-f\d]{2})([a-f\d]{2})", re.IGNORECASE)


class HasColor(Protocol):
    color: str


T = TypeVar("T", bound=HasColor)


def hex_to_rgb(value: str) -> Optional[RGB]:
    """Parse ``#rrggbb`` (leading ``#`` optional); ``None`` for anything else."""

    if not isinstance(value, str):
        return None
    match = _HEX_PATTERN.fullmatch(value)
    if not match:
        return None
    return (int(match.group(1), 16), int(match.group(2), 16), int(match.group(3), 16))


def color_distance(color1: str, color2: str) -> float:
    """Euclidean distance between two hex colors in RGB space."""

    rgb1 = hex_to_rgb(color1)
    rgb2 = hex_to_rgb(color2)
    if rgb1 is None or rgb2 is None:
        return UNPARSABLE_DISTANCE
    return math.sqrt(sum((a - b) ** 2 for a, b in zip(rgb1, rgb2)))


def _is_close(distance: float, threshold: float) -> bool:
    return distance == 0 or distance < threshold


def is_color_match(
    clothing_color_hex: str, profile: SkinToneProfile, threshold: float = MATCH_THRESHOLD
) -> bool:
    """True when the color is near at least one recommended color.

    Identical colors always match, so a recommended color matches itself even
    with a zero threshold. Avoid colors are not consulted.
    """

    return any(
        _is_close(color_distance(clothing_color_hex, recommended), threshold)
        for recommended in profile.recommended_colors
    )


def is_color_match_strict(
    clothing_color_hex: str,
    profile: SkinToneProfile,
    threshold: float = STRICT_MATCH_THRESHOLD,
    avoid_threshold: float = AVOID_THRESHOLD,
) -> bool:
    """Near a recommended color and at least ``avoid_threshold`` from every avoid color."""

    if not is_color_match(clothing_color_hex, profile, threshold):
        return False
    return all(
        color_distance(clothing_color_hex, avoid) >= avoid_threshold for avoid in profile.avoid_colors
    )


def matches_color_name(color_name: str, profile: SkinToneProfile, threshold: float = MATCH_THRESHOLD) -> bool:
    return is_color_match(resolve_color_hex(color_name), profile, threshold)


def filter_by_skin_tone(
    items: Iterable[T], profile: SkinToneProfile, threshold: float = MATCH_THRESHOLD
) -> List[T]:
    """Keep the catalog items whose named color flatters ``profile``."""

    candidates = list(items)
    kept = [item for item in candidates if matches_color_name(item.color, profile, threshold)]
    logger.info(
        "Skin tone matching kept %d of %d items for season=%s",
        len(kept),
        len(candidates),
        profile.season,
    )
    return kept


__all__ = [
    "AVOID_THRESHOLD",
    "MATCH_THRESHOLD",
    "STRICT_MATCH_THRESHOLD",
    "UNPARSABLE_DISTANCE",
    "color_distance",
    "filter_by_skin_tone",
    "hex_to_rgb",
    "is_color_match",
    "is_color_match_strict",
    "matches_color_name",
]
