"""Closet persistence on top of the client key-value storage."""
from __future__ import annotations

import json
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from memory.storage import KeyValueStorage
from styleai_app.logging_config import get_logger

CLOSET_KEY = "closetItems"

LOGGER = get_logger(__name__)


class ClosetItem(BaseModel):
    """A garment the user saved from the swipe deck."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    name: str = ""
    type: str = ""
    color: str = ""
    image: str = ""
    price: str = ""
    description: str = ""


_CLOSET_ITEMS = TypeAdapter(List[ClosetItem])


class ClosetStore:
    """Ordered list of closet items; ids are unique."""

    def __init__(self, storage: KeyValueStorage) -> None:
        self.storage = storage

    def list_items(self) -> List[ClosetItem]:
        raw = self.storage.get_item(CLOSET_KEY)
        if not raw:
            return []
        try:
            return _CLOSET_ITEMS.validate_python(json.loads(raw))
        except (json.JSONDecodeError, ValidationError):
            LOGGER.warning("Stored closet is unreadable, treating it as empty", exc_info=True)
            return []

    def _save(self, items: List[ClosetItem]) -> None:
        self.storage.set_item(CLOSET_KEY, json.dumps([item.model_dump() for item in items]))

    def add_item(self, item: ClosetItem) -> bool:
        """Append ``item``; returns ``False`` if an item with the same id exists."""

        items = self.list_items()
        if any(existing.id == item.id for existing in items):
            return False
        items.append(item)
        self._save(items)
        LOGGER.info("Added closet item", extra={"item_id": item.id, "item_count": len(items)})
        return True

    def remove_item(self, item_id: str) -> bool:
        items = self.list_items()
        kept = [item for item in items if item.id != item_id]
        if len(kept) == len(items):
            return False
        self._save(kept)
        return True

    def clear(self) -> None:
        self.storage.remove_item(CLOSET_KEY)

    def find_similar(self, product_type: str, color: str) -> Optional[ClosetItem]:
        """First closet item with the same type and color, ignoring case."""

        for item in self.list_items():
            if item.type.lower() == product_type.lower() and item.color.lower() == color.lower():
                return item
        return None


__all__ = ["CLOSET_KEY", "ClosetItem", "ClosetStore"]
