"""Skin tone profile data model."""

from __future__ import annotations

from typing import Dict, List, Literal, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

Undertone = Literal["warm", "cool", "neutral"]
Season = Literal["spring", "summer", "autumn", "winter"]

UNDERTONES: Tuple[str, ...] = ("warm", "cool", "neutral")
SEASONS: Tuple[str, ...] = ("spring", "summer", "autumn", "winter")

SEASON_DESCRIPTIONS: Dict[str, str] = {
    "spring": "Bright & Warm",
    "summer": "Soft & Cool",
    "autumn": "Rich & Warm",
    "winter": "Bold & Cool",
}

RGB = Tuple[int, int, int]


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Format an RGB triple as a lowercase ``#rrggbb`` string."""

    return "#{:02x}{:02x}{:02x}".format(int(r), int(g), int(b))


class SkinToneProfile(BaseModel):
    """The result of analysing a selfie.

    Serialises with the camelCase keys used by the web client
    (``skinHex``, ``recommendedColors`` and ``avoidColors``) and is immutable;
    a new analysis replaces the whole profile.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    skin_hex: str = Field(alias="skinHex", pattern=r"^#[0-9a-fA-F]{6}$")
    undertone: Undertone
    season: Season
    recommended_colors: List[str] = Field(default_factory=list, alias="recommendedColors")
    avoid_colors: List[str] = Field(default_factory=list, alias="avoidColors")

    @field_validator("skin_hex")
    @classmethod
    def _lower_hex(cls, value: str) -> str:
        return value.lower()

    @property
    def skin_rgb(self) -> RGB:
        value = self.skin_hex.lstrip("#")
        return (int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))

    @property
    def description(self) -> str:
        """Label shown next to the skin swatch, e.g. ``Bright & Warm (warm)``."""

        return f"{SEASON_DESCRIPTIONS[self.season]} ({self.undertone})"

    def to_storage(self) -> Dict[str, object]:
        return self.model_dump(by_alias=True)


__all__ = [
    "RGB",
    "SEASONS",
    "SEASON_DESCRIPTIONS",
    "Season",
    "SkinToneProfile",
    "UNDERTONES",
    "Undertone",
    "rgb_to_hex",
]
