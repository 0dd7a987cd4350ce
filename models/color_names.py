"""Garment color vocabulary resolved to hex codes for skin tone matching."""

from typing import Dict

DEFAULT_COLOR_HEX = "#6B46C1"

COLOR_NAME_TO_HEX: Dict[str, str] = {
    # Basic colors
    "black": "#000000",
    "white": "#FFFFFF",
    "red": "#FF0000",
    "blue": "#0000FF",
    "green": "#008000",
    "yellow": "#FFFF00",
    "pink": "#FFC0CB",
    "purple": "#800080",
    "orange": "#FFA500",
    "brown": "#A52A2A",
    "gray": "#808080",
    "grey": "#808080",
    # Extended variations
    "navy": "#000080",
    "beige": "#F5F5DC",
    "cream": "#FFFDD0",
    "tan": "#D2B48C",
    "gold": "#FFD700",
    "silver": "#C0C0C0",
    "burgundy": "#800020",
    "maroon": "#800000",
    "olive": "#808000",
    "teal": "#008080",
    "turquoise": "#40E0D0",
    "coral": "#FF7F50",
    "salmon": "#FA8072",
    "khaki": "#F0E68C",
    "mint": "#98FB98",
    "lavender": "#E6E6FA",
    "ivory": "#FFFFF0",
    # Fashion vocabulary
    "crimson": "#DC143C",
    "scarlet": "#FF2400",
    "rose": "#FF66CC",
    "fuchsia": "#FF00FF",
    "magenta": "#FF00FF",
    "violet": "#8A2BE2",
    "indigo": "#4B0082",
    "cyan": "#00FFFF",
    "aqua": "#00FFFF",
    "lime": "#00FF00",
    "forest": "#228B22",
    "emerald": "#50C878",
    "jade": "#00A86B",
    "chartreuse": "#7FFF00",
    "amber": "#FFBF00",
    "bronze": "#CD7F32",
    "copper": "#B87333",
    "rust": "#B7410E",
    "mahogany": "#C04000",
    "chestnut": "#954535",
    "coffee": "#6F4E37",
    "chocolate": "#D2691E",
    "camel": "#C19A6B",
    "sand": "#C2B280",
    "wheat": "#F5DEB3",
    "pearl": "#F0EAD6",
    "champagne": "#F7E7CE",
    "nude": "#E3BC9A",
    "blush": "#DE5D83",
    "mauve": "#E0B0FF",
    "plum": "#DDA0DD",
    "lilac": "#C8A2C8",
    "periwinkle": "#CCCCFF",
    "slate": "#708090",
    "charcoal": "#36454F",
    "steel": "#4682B4",
    "cobalt": "#0047AB",
    "sapphire": "#0F52BA",
    "royal": "#4169E1",
    "midnight": "#191970",
    "denim": "#1560BD",
    "powder": "#B0E0E6",
    "sky": "#87CEEB",
    "ice": "#F0F8FF",
    "mint green": "#98FB98",
    "sea green": "#2E8B57",
    "pine": "#01796F",
    "sage": "#9CAF88",
    "moss": "#8A9A5B",
    "hunter": "#355E3B",
}


def resolve_color_hex(color_name: str | None) -> str:
    """Return the hex code for a catalog color name.

    Lookup is case-insensitive and ignores surrounding whitespace. Names that
    are not in the table resolve to :data:`DEFAULT_COLOR_HEX`.
    """

    if not color_name:
        return DEFAULT_COLOR_HEX
    return COLOR_NAME_TO_HEX.get(color_name.strip().lower(), DEFAULT_COLOR_HEX)


__all__ = ["COLOR_NAME_TO_HEX", "DEFAULT_COLOR_HEX", "resolve_color_hex"]
