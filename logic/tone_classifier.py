"""Undertone and color-season classification with seasonal palettes.

A neutral undertone follows the cool branch when picking a season, so it
always lands in summer or winter.
"""

from __future__ import annotations

import logging
from typing import Dict, List, NamedTuple, Sequence

from logic.skin_sampler import ImageInput, sample_skin_color
from models.skin_tone import RGB, Season, SkinToneProfile, Undertone, rgb_to_hex

logger = logging.getLogger(__name__)

UNDERTONE_MARGIN = 20
LIGHT_BRIGHTNESS = 140
FALLBACK_SEASON = "autumn"


class Palette(NamedTuple):
    recommended: List[str]
    avoid: List[str]


SEASON_PALETTES: Dict[str, Palette] = {
    # Warm and bright
    "spring": Palette(
        recommended=[
            "#FF6B6B", "#4ECDC4", "#45B7D1", "#96CEB4", "#FECA57", "#FF9FF3", "#54A0FF",
            "#FF0000", "#FFA500", "#FFFF00", "#FFD700", "#FF7F50", "#FF69B4", "#00FF00",
            "#32CD32", "#ADFF2F", "#00CED1", "#1E90FF", "#FF1493", "#FF6347", "#FFA502",
            "#F39C12", "#E74C3C", "#E67E22", "#2ECC71", "#3498DB", "#9B59B6", "#F1C40F",
            "#FF8C00", "#DC143C", "#00BFFF", "#FF4500", "#DA70D6", "#20B2AA", "#87CEEB",
            "#FFB6C1", "#98FB98", "#DDA0DD", "#F0E68C", "#FA8072", "#40E0D0", "#EE82EE",
        ],
        avoid=[],
    ),
    # Soft and cool
    "summer": Palette(
        recommended=[
            "#A8E6CF", "#88D8C0", "#FFD3A5", "#FD99A9", "#C7CEEA", "#B8B8D4",
            "#E6E6FA", "#B0C4DE", "#87CEEB", "#F0F8FF", "#E0FFFF", "#F5FFFA",
            "#FFF8DC", "#FFFACD", "#FFEFD5", "#F5F5DC", "#FAF0E6", "#FDF5E6",
            "#FFFFF0", "#F0FFF0", "#F5FFFA", "#FFFAFA", "#F8F8FF", "#F0F8FF",
            "#ADD8E6", "#B0E0E6", "#87CEFA", "#00BFFF", "#1E90FF", "#6495ED",
            "#4169E1", "#0000CD", "#00008B", "#000080", "#191970", "#8A2BE2",
            "#9400D3", "#9932CC", "#BA55D3", "#DA70D6", "#DDA0DD", "#EE82EE",
        ],
        avoid=[],
    ),
    # Rich and warm
    "autumn": Palette(
        recommended=[
            "#D63031", "#E17055", "#FDCB6E", "#E84393", "#6C5CE7", "#A29BFE",
            "#8B4513", "#A0522D", "#CD853F", "#D2691E", "#B22222", "#DC143C",
            "#800000", "#8B0000", "#FF6347", "#FF4500", "#FF8C00", "#FFA500",
            "#FFD700", "#FFFF00", "#9ACD32", "#32CD32", "#228B22", "#006400",
            "#556B2F", "#808000", "#6B8E23", "#BDB76B", "#F0E68C", "#EEE8AA",
            "#DAA520", "#B8860B", "#CD853F", "#D2B48C", "#F4A460", "#DEB887",
            "#BC8F8F", "#F5DEB3", "#FFDAB9", "#FFE4B5", "#FFEFD5", "#FFF8DC",
        ],
        avoid=[],
    ),
    # Bold and cool
    "winter": Palette(
        recommended=[
            "#2D3436", "#636E72", "#0984E3", "#6C5CE7", "#E84393", "#FDCB6E",
            "#000000", "#2F3640", "#2C2C54", "#40407A", "#706FD3", "#3742FA",
            "#2ED573", "#7BED9F", "#70A1FF", "#5352ED", "#FF6B6B", "#FF7675",
            "#FDCB6E", "#E17055", "#00D2D3", "#00CEC9", "#6C5CE7", "#A29BFE",
            "#FD79A8", "#FDCB6E", "#E84393", "#00B894", "#74B9FF", "#0984E3",
            "#FFFFFF", "#F8F9FA", "#E9ECEF", "#DEE2E6", "#CED4DA", "#ADB5BD",
            "#495057", "#343A40", "#212529", "#FF0000", "#0000FF", "#800080",
        ],
        avoid=[],
    ),
}


def determine_undertone(r: int, g: int, b: int) -> Undertone:
    yellowness = (r + g) - b
    pinkness = (r + b) - g
    if yellowness > pinkness + UNDERTONE_MARGIN:
        return "warm"
    if pinkness > yellowness + UNDERTONE_MARGIN:
        return "cool"
    return "neutral"


def determine_season(r: int, g: int, b: int, undertone: str) -> Season:
    brightness = (r + g + b) / 3
    is_light = brightness > LIGHT_BRIGHTNESS
    if undertone == "warm":
        return "spring" if is_light else "autumn"
    return "summer" if is_light else "winter"


def get_color_recommendations(season: str) -> Palette:
    """Return copies of the palette lists for ``season`` (autumn when unknown)."""

    palette = SEASON_PALETTES.get(season, SEASON_PALETTES[FALLBACK_SEASON])
    return Palette(recommended=list(palette.recommended), avoid=list(palette.avoid))


def classify_skin_tone(rgb: Sequence[int]) -> SkinToneProfile:
    """Build a :class:`SkinToneProfile` from a sampled skin color."""

    r, g, b = (int(channel) for channel in rgb)
    undertone = determine_undertone(r, g, b)
    season = determine_season(r, g, b, undertone)
    palette = get_color_recommendations(season)
    logger.info("Classified skin tone rgb=%s undertone=%s season=%s", (r, g, b), undertone, season)
    return SkinToneProfile(
        skin_hex=rgb_to_hex(r, g, b),
        undertone=undertone,
        season=season,
        recommended_colors=palette.recommended,
        avoid_colors=palette.avoid,
    )


def analyze_skin_tone(source: ImageInput) -> SkinToneProfile:
    """Sample a photo and classify the resulting skin color."""

    rgb: RGB = sample_skin_color(source)
    return classify_skin_tone(rgb)


__all__ = [
    "LIGHT_BRIGHTNESS",
    "Palette",
    "SEASON_PALETTES",
    "UNDERTONE_MARGIN",
    "analyze_skin_tone",
    "classify_skin_tone",
    "determine_season",
    "determine_undertone",
    "get_color_recommendations",
]
