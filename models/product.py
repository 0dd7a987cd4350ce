"""Catalog product models and the attribute map used for filtering."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

StockStatus = Literal["inStock", "outOfStock", "lowStock"]
STOCK_STATUSES: List[str] = ["inStock", "outOfStock", "lowStock"]
LOW_STOCK_LIMIT = 5


class Product(BaseModel):
    """A product as served by the catalog backend."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str
    image_path: str = ""
    description: str = ""
    type: str = ""
    color: str = ""
    graphic: str = ""
    variant: str = ""
    stock: int = 0
    price: float = 0.0
    created_at: str = ""


@dataclass
class ProductAttributes:
    """Filterable attributes of a single product.

    ``material``, ``occasion`` and ``season`` start empty and are filled in
    later by model-driven enrichment.
    """

    color: str
    price: float
    store: str
    in_stock: int
    type: str = ""
    material: str = ""
    occasion: str = ""
    season: str = ""

    @classmethod
    def from_product(cls, product: Product) -> "ProductAttributes":
        # The catalog has no store field yet; its type column stands in.
        return cls(
            color=product.color,
            price=product.price,
            store=product.type,
            in_stock=product.stock,
            type=product.type,
        )

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ProductAttributes":
        return cls(
            color=str(payload.get("color", "")),
            price=float(payload.get("price", 0) or 0),
            store=str(payload.get("store", "")),
            in_stock=int(payload.get("inStock", payload.get("in_stock", 0)) or 0),
            type=str(payload.get("type", "") or ""),
            material=str(payload.get("material", "") or ""),
            occasion=str(payload.get("occasion", "") or ""),
            season=str(payload.get("season", "") or ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "color": self.color,
            "price": self.price,
            "store": self.store,
            "inStock": self.in_stock,
            "type": self.type,
            "material": self.material,
            "occasion": self.occasion,
            "season": self.season,
        }


@dataclass
class PriceRange:
    min: float = 0.0
    max: float = 0.0


@dataclass
class FilterOptions:
    """Distinct values available to the filter UI."""

    colors: List[str] = field(default_factory=list)
    price_range: PriceRange = field(default_factory=PriceRange)
    stores: List[str] = field(default_factory=list)
    types: List[str] = field(default_factory=list)
    stock_status: List[str] = field(default_factory=lambda: list(STOCK_STATUSES))
    materials: List[str] = field(default_factory=list)
    occasions: List[str] = field(default_factory=list)
    seasons: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "colors": list(self.colors),
            "priceRange": {"min": self.price_range.min, "max": self.price_range.max},
            "stores": list(self.stores),
            "types": list(self.types),
            "stockStatus": list(self.stock_status),
            "materials": list(self.materials),
            "occasions": list(self.occasions),
            "seasons": list(self.seasons),
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "FilterOptions":
        price_range = payload.get("priceRange") or {}
        return cls(
            colors=list(payload.get("colors", [])),
            price_range=PriceRange(
                min=float(price_range.get("min", 0) or 0), max=float(price_range.get("max", 0) or 0)
            ),
            stores=list(payload.get("stores", [])),
            types=list(payload.get("types", [])),
            stock_status=list(payload.get("stockStatus", STOCK_STATUSES)),
            materials=list(payload.get("materials", [])),
            occasions=list(payload.get("occasions", [])),
            seasons=list(payload.get("seasons", [])),
        )


class ActiveFilters(BaseModel):
    """Filters currently applied to the swipe deck.

    Empty lists mean "any value". ``price_min``/``price_max`` bound the price
    inclusively and ``in_stock`` requires at least one unit.
    """

    model_config = ConfigDict(populate_by_name=True)

    colors: List[str] = Field(default_factory=list)
    types: List[str] = Field(default_factory=list, alias="type")
    stores: List[str] = Field(default_factory=list)
    stock_status: List[StockStatus] = Field(default_factory=list, alias="stockStatus")
    materials: List[str] = Field(default_factory=list)
    occasions: List[str] = Field(default_factory=list)
    seasons: List[str] = Field(default_factory=list)
    price_min: float = Field(0.0, alias="priceMin")
    price_max: Optional[float] = Field(None, alias="priceMax")
    in_stock: bool = Field(False, alias="inStock")


def create_default_active_filters(options: FilterOptions) -> ActiveFilters:
    return ActiveFilters(price_min=options.price_range.min, price_max=options.price_range.max)


__all__ = [
    "ActiveFilters",
    "FilterOptions",
    "LOW_STOCK_LIMIT",
    "PriceRange",
    "Product",
    "ProductAttributes",
    "STOCK_STATUSES",
    "StockStatus",
    "create_default_active_filters",
]
