"""Catalog filtering tests."""

from __future__ import annotations

import pytest

from logic.product_filters import (
    ProductFilterManager,
    apply_catalog_filters,
    build_filters_map,
    generate_filter_options,
    matches_filters,
    stock_status,
)
from models.product import (
    ActiveFilters,
    FilterOptions,
    Product,
    ProductAttributes,
    create_default_active_filters,
)
from models.skin_tone import SkinToneProfile


@pytest.fixture()
def products():
    return [
        Product(id=1, type="pants", color="Burgundy", stock=10, price=40),
        Product(id="2", type="shirt", color="chartreuse", stock=3, price=15.5),
        Product(id="3", type="shirt", color="ultraviolet-mist", stock=0, price=22),
        Product(id="4", type="sweater", color="Maroon", stock=5, price=60),
    ]


@pytest.mark.parametrize("stock, expected", [(0, "outOfStock"), (1, "lowStock"), (5, "lowStock"), (6, "inStock")])
def test_stock_status(stock, expected) -> None:
    assert stock_status(stock) == expected


def test_product_ids_are_strings(products) -> None:
    assert products[0].id == "1"


def test_filter_options_are_sorted_and_distinct(products) -> None:
    options = generate_filter_options(build_filters_map(products))
    assert options.colors == ["Burgundy", "Maroon", "chartreuse", "ultraviolet-mist"]
    assert options.types == ["pants", "shirt", "sweater"]
    assert (options.price_range.min, options.price_range.max) == (15.5, 60)
    assert options.stock_status == ["inStock", "outOfStock", "lowStock"]
    assert options.materials == []


def test_empty_catalog_options() -> None:
    options = generate_filter_options({})
    assert (options.price_range.min, options.price_range.max) == (0, 0)


def test_filter_options_dict_round_trip(products) -> None:
    options = generate_filter_options(build_filters_map(products))
    payload = options.to_dict()
    assert set(payload) >= {"colors", "priceRange", "stockStatus", "types"}
    assert FilterOptions.from_dict(payload) == options


def test_attributes_dict_uses_in_stock_key() -> None:
    attrs = ProductAttributes(color="Red", price=10, store="pants", in_stock=2, type="pants")
    assert attrs.to_dict()["inStock"] == 2
    assert ProductAttributes.from_dict(attrs.to_dict()) == attrs


def test_matches_filters_combines_every_filter() -> None:
    attrs = ProductAttributes(color="Red", price=30, store="pants", in_stock=3, type="pants")
    assert matches_filters(attrs, ActiveFilters())
    assert matches_filters(attrs, ActiveFilters(colors=["Red", "Blue"], types=["pants"]))
    assert not matches_filters(attrs, ActiveFilters(colors=["Blue"]))
    assert matches_filters(attrs, ActiveFilters(price_min=30, price_max=30))
    assert not matches_filters(attrs, ActiveFilters(price_max=29.99))
    assert not matches_filters(attrs, ActiveFilters(price_min=31))
    assert matches_filters(attrs, ActiveFilters(stock_status=["lowStock"]))
    assert not matches_filters(attrs, ActiveFilters(stock_status=["inStock"]))
    assert not matches_filters(attrs, ActiveFilters(materials=["wool"]))


def test_active_filters_accept_camel_case() -> None:
    filters = ActiveFilters.model_validate({"type": ["pants"], "priceMax": 50, "inStock": True})
    assert filters.types == ["pants"]
    assert filters.price_max == 50
    assert filters.in_stock


def test_in_stock_filter_drops_sold_out(products) -> None:
    kept = apply_catalog_filters(products, build_filters_map(products), ActiveFilters(in_stock=True))
    assert [product.id for product in kept] == ["1", "2", "4"]


def test_default_active_filters_cover_price_range(products) -> None:
    options = generate_filter_options(build_filters_map(products))
    filters = create_default_active_filters(options)
    kept = apply_catalog_filters(products, build_filters_map(products), filters)
    assert len(kept) == len(products)


def test_skin_tone_matching_runs_before_attribute_filters(products, burgundy_profile: SkinToneProfile) -> None:
    filters_map = build_filters_map(products)
    matched = apply_catalog_filters(products, filters_map, None, burgundy_profile, skin_tone_matching=True)
    assert [product.id for product in matched] == ["1", "4"]

    narrowed = apply_catalog_filters(
        products, filters_map, ActiveFilters(types=["sweater"]), burgundy_profile, skin_tone_matching=True
    )
    assert [product.id for product in narrowed] == ["4"]


def test_skin_tone_matching_needs_a_profile(products) -> None:
    kept = apply_catalog_filters(products, build_filters_map(products), None, None, skin_tone_matching=True)
    assert kept == products


def test_products_missing_from_map_are_dropped(products) -> None:
    filters_map = build_filters_map(products[:2])
    kept = apply_catalog_filters(products, filters_map, ActiveFilters())
    assert [product.id for product in kept] == ["1", "2"]


def test_manager_filters_ids_and_updates_enrichment(products) -> None:
    manager = ProductFilterManager(build_filters_map(products))
    assert manager.filter_products(["1", "2", "missing"], ActiveFilters(types=["shirt"])) == ["2"]

    assert manager.update_llm_attributes("2", {"material": "cotton", "color": "Blue"})
    attrs = manager.get_product_attributes("2")
    assert attrs.material == "cotton"
    assert attrs.color == "chartreuse"
    assert not manager.update_llm_attributes("missing", {"material": "wool"})


def test_bulk_update_refreshes_options(products) -> None:
    manager = ProductFilterManager(build_filters_map(products))
    updated = manager.bulk_update_llm_attributes(
        {"1": {"occasion": "work"}, "4": {"season": "winter", "occasion": "casual"}, "9": {"season": "summer"}}
    )
    assert updated == 2
    assert manager.filter_options.occasions == ["casual", "work"]
    assert manager.filter_options.seasons == ["winter"]
    assert manager.filter_products(["1", "4"], ActiveFilters(occasions=["work"])) == ["1"]
