"""Deterministic catalog filtering over the product attribute map."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Optional

from logic.color_matcher import filter_by_skin_tone
from models.product import (
    LOW_STOCK_LIMIT,
    ActiveFilters,
    FilterOptions,
    PriceRange,
    Product,
    ProductAttributes,
)
from models.skin_tone import SkinToneProfile

logger = logging.getLogger(__name__)

ProductFiltersMap = Dict[str, ProductAttributes]
LLM_FIELDS = ("material", "occasion", "season")


def stock_status(stock: int) -> str:
    if stock == 0:
        return "outOfStock"
    if stock <= LOW_STOCK_LIMIT:
        return "lowStock"
    return "inStock"


def build_filters_map(products: Iterable[Product]) -> ProductFiltersMap:
    return {product.id: ProductAttributes.from_product(product) for product in products}


def _distinct(values: Iterable[str]) -> List[str]:
    return sorted({value for value in values if value})


def generate_filter_options(filters_map: ProductFiltersMap) -> FilterOptions:
    attributes = list(filters_map.values())
    prices = [attr.price for attr in attributes]
    return FilterOptions(
        colors=_distinct(attr.color for attr in attributes),
        price_range=PriceRange(min=min(prices, default=0.0), max=max(prices, default=0.0)),
        stores=_distinct(attr.store for attr in attributes),
        types=_distinct(attr.type for attr in attributes),
        materials=_distinct(attr.material for attr in attributes),
        occasions=_distinct(attr.occasion for attr in attributes),
        seasons=_distinct(attr.season for attr in attributes),
    )


def _allowed(selected: List[str], value: str) -> bool:
    return not selected or value in selected


def matches_filters(attributes: ProductAttributes, filters: ActiveFilters) -> bool:
    """True when a product's attributes satisfy every active filter."""

    if not _allowed(filters.colors, attributes.color):
        return False
    if not _allowed(filters.types, attributes.type):
        return False
    if not _allowed(filters.stores, attributes.store):
        return False
    if not _allowed(filters.materials, attributes.material):
        return False
    if not _allowed(filters.occasions, attributes.occasion):
        return False
    if not _allowed(filters.seasons, attributes.season):
        return False
    if attributes.price < filters.price_min:
        return False
    if filters.price_max is not None and attributes.price > filters.price_max:
        return False
    if filters.in_stock and attributes.in_stock <= 0:
        return False
    if filters.stock_status and stock_status(attributes.in_stock) not in filters.stock_status:
        return False
    return True


class ProductFilterManager:
    """Owns the attribute map and the filter options derived from it."""

    def __init__(
        self, filters_map: ProductFiltersMap, filter_options: Optional[FilterOptions] = None
    ) -> None:
        self.filters_map: ProductFiltersMap = dict(filters_map)
        self.filter_options = filter_options or generate_filter_options(self.filters_map)
        logger.info("Loaded filters map with %d products", len(self.filters_map))

    def get_product_attributes(self, product_id: str) -> Optional[ProductAttributes]:
        return self.filters_map.get(product_id)

    def filter_products(self, product_ids: Iterable[str], active_filters: ActiveFilters) -> List[str]:
        kept = []
        for product_id in product_ids:
            attributes = self.filters_map.get(product_id)
            if attributes is None:
                logger.debug("No attributes found for product %s", product_id)
                continue
            if matches_filters(attributes, active_filters):
                kept.append(product_id)
        return kept

    def update_llm_attributes(self, product_id: str, updates: Dict[str, str]) -> bool:
        """Overwrite material/occasion/season for one product in memory."""

        current = self.filters_map.get(product_id)
        if current is None:
            return False
        allowed = {key: value for key, value in updates.items() if key in LLM_FIELDS}
        self.filters_map[product_id] = replace(current, **allowed)
        logger.info("Updated enrichment attributes for product %s: %s", product_id, sorted(allowed))
        return True

    def bulk_update_llm_attributes(self, updates: Dict[str, Dict[str, str]]) -> int:
        updated = 0
        for product_id, attrs in updates.items():
            if self.update_llm_attributes(product_id, attrs):
                updated += 1
        self._refresh_filter_options()
        logger.info("Bulk updated enrichment attributes for %d products", updated)
        return updated

    def _refresh_filter_options(self) -> None:
        refreshed = generate_filter_options(self.filters_map)
        self.filter_options = replace(
            self.filter_options,
            materials=refreshed.materials,
            occasions=refreshed.occasions,
            seasons=refreshed.seasons,
        )


def apply_catalog_filters(
    products: Iterable[Product],
    filters_map: ProductFiltersMap,
    active_filters: Optional[ActiveFilters] = None,
    profile: Optional[SkinToneProfile] = None,
    skin_tone_matching: bool = False,
) -> List[Product]:
    """Run skin tone matching (when enabled) and then the attribute filters."""

    candidates = list(products)
    if skin_tone_matching and profile is not None:
        candidates = filter_by_skin_tone(candidates, profile)

    if active_filters is None:
        return candidates

    kept = [
        product
        for product in candidates
        if product.id in filters_map and matches_filters(filters_map[product.id], active_filters)
    ]
    logger.info("Catalog filtering kept %d of %d products", len(kept), len(candidates))
    return kept


__all__ = [
    "ProductFilterManager",
    "ProductFiltersMap",
    "apply_catalog_filters",
    "build_filters_map",
    "generate_filter_options",
    "matches_filters",
    "stock_status",
]
