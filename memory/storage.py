"""Key-value storage backends for client-scoped state."""
from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Dict, Optional

from styleai_app.logging_config import get_logger, log_event

LOGGER = get_logger(__name__)


class KeyValueStorage:
    """Interface for string key-value persistence."""

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError


class InMemoryStorage(KeyValueStorage):
    """Process-local storage used by tests and ephemeral runs."""

    def __init__(self, initial: Dict[str, str] | None = None) -> None:
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JSONKeyValueStorage(KeyValueStorage):
    """A single JSON document on disk holding every key."""

    def __init__(self, path: str | Path = "data/styleai_storage.json") -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            payload = json.loads(self.path.read_text())
        except json.JSONDecodeError as exc:
            log_event(
                LOGGER,
                logging.WARNING,
                "storage_file_unreadable",
                path=str(self.path),
                details=str(exc),
            )
            return {}
        if not isinstance(payload, dict):
            log_event(LOGGER, logging.WARNING, "storage_file_unreadable", path=str(self.path))
            return {}
        return payload

    def _save(self, payload: Dict[str, str]) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(payload, indent=2))
        tmp_path.replace(self.path)

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            payload = self._load()
            payload[key] = value
            self._save(payload)

    def remove_item(self, key: str) -> None:
        with self._lock:
            payload = self._load()
            if payload.pop(key, None) is not None:
                self._save(payload)


__all__ = ["InMemoryStorage", "JSONKeyValueStorage", "KeyValueStorage"]
