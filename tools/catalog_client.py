"""Client for the product catalog backend and the static filter files built from it."""

from __future__ import annotations

import argparse
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

import requests
from pydantic import TypeAdapter, ValidationError

from logic.product_filters import ProductFiltersMap, build_filters_map, generate_filter_options
from models.product import FilterOptions, Product, ProductAttributes
from tools.observability import instrument_tool

logger = logging.getLogger(__name__)

FILTERS_MAP_FILE = "product-filters-map.json"
FILTER_OPTIONS_FILE = "filter-options.json"
FILTERS_METADATA_FILE = "filters-metadata.json"
FILTERS_VERSION = "1.0.0"

_PRODUCT_LIST = TypeAdapter(List[Product])


class CatalogFetchError(RuntimeError):
    """Raised when the catalog backend cannot be read."""


class CatalogClient:
    """Reads products from the catalog backend."""

    def __init__(self, base_url: str, timeout_seconds: float = 30.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    @instrument_tool("fetch_products")
    def fetch_products(self) -> List[Product]:
        url = f"{self.base_url}/products"
        try:
            response = requests.get(url, timeout=self.timeout_seconds)
        except requests.RequestException as exc:
            raise CatalogFetchError(f"Network error fetching products: {exc}") from exc

        if not 200 <= response.status_code < 300:
            raise CatalogFetchError(f"Failed to fetch products: HTTP {response.status_code}")

        try:
            products = _PRODUCT_LIST.validate_python(response.json())
        except (ValueError, ValidationError) as exc:
            raise CatalogFetchError("Catalog payload failed schema validation") from exc
        logger.info("Fetched %d products", len(products))
        return products

    def generate_filters_files(self, out_dir: str | Path = "data") -> Dict[str, Any]:
        """Fetch the catalog and write the filters map, options and metadata files."""

        products = self.fetch_products()
        filters_map = build_filters_map(products)
        options = generate_filter_options(filters_map)
        metadata = {
            "generatedAt": datetime.now(timezone.utc).isoformat(),
            "totalProducts": len(filters_map),
            "apiUrl": self.base_url,
            "version": FILTERS_VERSION,
        }
        target = Path(out_dir)
        target.mkdir(parents=True, exist_ok=True)
        _write_json(target / FILTERS_MAP_FILE, {pid: attrs.to_dict() for pid, attrs in filters_map.items()})
        _write_json(target / FILTER_OPTIONS_FILE, options.to_dict())
        _write_json(target / FILTERS_METADATA_FILE, metadata)
        logger.info(
            "Generated filter files",
            extra={"product_count": len(filters_map), "out_dir": str(target)},
        )
        return metadata


def _write_json(path: Path, payload: Any) -> None:
    path.write_text(json.dumps(payload, indent=2))


def load_filters_map(path: str | Path) -> ProductFiltersMap:
    """Load a filters map written by :meth:`CatalogClient.generate_filters_files`."""

    map_path = Path(path)
    if not map_path.exists():
        logger.warning("Filters map not found", extra={"path": str(map_path)})
        return {}
    raw = json.loads(map_path.read_text())
    return {str(pid): ProductAttributes.from_dict(attrs) for pid, attrs in raw.items()}


def load_filter_options(path: str | Path) -> FilterOptions | None:
    options_path = Path(path)
    if not options_path.exists():
        return None
    return FilterOptions.from_dict(json.loads(options_path.read_text()))


def main(argv: List[str] | None = None) -> int:
    from styleai_app.config import AppConfig
    from styleai_app.logging_config import configure_logging

    parser = argparse.ArgumentParser(description="Regenerate the static product filter files.")
    parser.add_argument("--out-dir", default="data")
    parser.add_argument("--api-url", default=None)
    args = parser.parse_args(argv)

    configure_logging()
    config = AppConfig.from_env()
    client = CatalogClient(args.api_url or config.catalog_api_url, config.request_timeout_seconds)
    try:
        client.generate_filters_files(args.out_dir)
    except CatalogFetchError:
        logger.exception("Error generating filters map")
        return 1
    return 0


__all__ = [
    "CatalogClient",
    "CatalogFetchError",
    "load_filter_options",
    "load_filters_map",
]


if __name__ == "__main__":
    raise SystemExit(main())
