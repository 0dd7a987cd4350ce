"""StyleAI service bootstrap."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from logic.product_filters import ProductFilterManager, apply_catalog_filters, build_filters_map
from logic.skin_sampler import ImageInput
from memory.closet_store import ClosetItem, ClosetStore
from memory.skin_tone_store import SkinToneStore
from memory.storage import JSONKeyValueStorage, KeyValueStorage
from models.product import ActiveFilters, Product
from models.skin_tone import SkinToneProfile
from styleai_app.config import AppConfig
from styleai_app.logging_config import configure_logging, get_logger, log_event, operation_context
from tools.catalog_client import CatalogClient, load_filter_options, load_filters_map
from tools.closet_recommender import ClosetRecommender, OutfitRecommendation
from tools.gemini import TextModel, build_model
from tools.tryon_client import FashnTryOnClient
from tools.voice_filters import VoiceFilterParser, on_transcription

ACTIVE_FILTERS_KEY = "activeFilters"
FILTER_OPTIONS_FILENAME = "filter-options.json"

LOGGER = get_logger(__name__)


class StyleAIApp:
    """Wires storage, the skin tone engine, catalog filtering and external clients."""

    def __init__(
        self,
        config: AppConfig | None = None,
        storage: KeyValueStorage | None = None,
        text_model: TextModel | None = None,
        catalog_client: CatalogClient | None = None,
        tryon_client: FashnTryOnClient | None = None,
    ) -> None:
        self.config = config or AppConfig.from_env()
        configure_logging()

        self.storage = storage or JSONKeyValueStorage(self.config.storage_path)
        self.skin_tone_store = SkinToneStore(self.storage)
        self.closet_store = ClosetStore(self.storage)

        model = text_model or build_model(self.config.gemini_api_key, self.config.gemini_model)
        self.voice_parser = VoiceFilterParser(model)
        self.closet_recommender = ClosetRecommender(model)

        self.catalog_client = catalog_client or CatalogClient(
            self.config.catalog_api_url, timeout_seconds=self.config.request_timeout_seconds
        )
        self.tryon_client = tryon_client or FashnTryOnClient(
            api_key=self.config.fashn_api_key,
            base_url=self.config.fashn_base_url,
            timeout_seconds=self.config.request_timeout_seconds,
        )

        self._products: Optional[List[Product]] = None
        self._filter_manager: Optional[ProductFilterManager] = None

    # Skin tone

    def analyze_skin_tone(self, image: ImageInput) -> SkinToneProfile:
        with operation_context("app:analyze_skin_tone"):
            profile = self.skin_tone_store.analyze_and_store(image)
            log_event(
                LOGGER,
                logging.INFO,
                "skin_tone_analyzed",
                season=profile.season,
                undertone=profile.undertone,
                recommended_count=len(profile.recommended_colors),
            )
            return profile

    def get_skin_tone(self) -> Optional[SkinToneProfile]:
        return self.skin_tone_store.get_profile()

    def reset_skin_tone(self) -> None:
        self.skin_tone_store.clear()

    # Catalog

    def load_catalog(self, products: List[Product] | None = None) -> List[Product]:
        """Use ``products`` as the catalog, or fetch it from the backend once."""

        if products is not None:
            self._products = list(products)
            self._filter_manager = None
        elif self._products is None:
            self._products = self.catalog_client.fetch_products()
        return self._products

    @property
    def filter_manager(self) -> ProductFilterManager:
        if self._filter_manager is None:
            filters_map = load_filters_map(self.config.catalog_path)
            options = None
            if filters_map:
                options = load_filter_options(Path(self.config.catalog_path).parent / FILTER_OPTIONS_FILENAME)
            else:
                filters_map = build_filters_map(self.load_catalog())
            self._filter_manager = ProductFilterManager(filters_map, options)
        return self._filter_manager

    def get_active_filters(self) -> Optional[ActiveFilters]:
        raw = self.storage.get_item(ACTIVE_FILTERS_KEY)
        if not raw:
            return None
        try:
            return ActiveFilters.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError):
            LOGGER.warning("Stored active filters are unreadable", exc_info=True)
            return None

    def set_active_filters(self, filters: ActiveFilters) -> ActiveFilters:
        self.storage.set_item(ACTIVE_FILTERS_KEY, filters.model_dump_json(by_alias=True))
        return filters

    def filter_catalog(
        self, active_filters: ActiveFilters | None = None, skin_tone_matching: bool = False
    ) -> List[Product]:
        """Products to show in the swipe deck under the given filters."""

        with operation_context("app:filter_catalog"):
            products = self.load_catalog()
            filters = active_filters if active_filters is not None else self.get_active_filters()
            profile = self.get_skin_tone() if skin_tone_matching else None
            result = apply_catalog_filters(
                products,
                self.filter_manager.filters_map,
                active_filters=filters,
                profile=profile,
                skin_tone_matching=skin_tone_matching,
            )
            log_event(
                LOGGER,
                logging.INFO,
                "catalog_filtered",
                product_count=len(products),
                result_count=len(result),
                skin_tone_matching=skin_tone_matching and profile is not None,
            )
            return result

    # Voice

    def handle_transcript(self, transcript: str, turns: List[str] | None = None) -> Dict[str, Any]:
        """Parse a voice request and persist the resulting filters."""

        with operation_context("app:handle_transcript"):
            reply = on_transcription(self.voice_parser, transcript, turns)
            filters = reply.get("filters")
            if filters is not None:
                active = filters.to_active_filters(self.get_active_filters())
                self.set_active_filters(active)
                reply["active_filters"] = active
            return reply

    # Closet

    def list_closet(self) -> List[ClosetItem]:
        return self.closet_store.list_items()

    def add_to_closet(self, item: ClosetItem) -> bool:
        return self.closet_store.add_item(item)

    def remove_from_closet(self, item_id: str) -> bool:
        return self.closet_store.remove_item(item_id)

    def recommend_outfit(self) -> Optional[OutfitRecommendation]:
        with operation_context("app:recommend_outfit"):
            return self.closet_recommender.recommend(self.closet_store.list_items())


__all__ = ["ACTIVE_FILTERS_KEY", "StyleAIApp"]
