"""Model package exports."""

from models.color_names import COLOR_NAME_TO_HEX, DEFAULT_COLOR_HEX, resolve_color_hex
from models.product import ActiveFilters, FilterOptions, Product, ProductAttributes
from models.skin_tone import SEASONS, UNDERTONES, SkinToneProfile

__all__ = [
    "ActiveFilters",
    "COLOR_NAME_TO_HEX",
    "DEFAULT_COLOR_HEX",
    "FilterOptions",
    "Product",
    "ProductAttributes",
    "SEASONS",
    "SkinToneProfile",
    "UNDERTONES",
    "resolve_color_hex",
]
