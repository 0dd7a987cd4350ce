"""The single active skin tone profile, persisted and observable."""
from __future__ import annotations

import json
import logging
import threading
from typing import Callable, List, Optional

from pydantic import ValidationError

from logic.skin_sampler import ImageInput
from logic.tone_classifier import analyze_skin_tone
from memory.storage import KeyValueStorage
from models.skin_tone import SkinToneProfile
from styleai_app.logging_config import get_logger, log_event

SKIN_TONE_KEY = "styleai-skin-tone-analysis"

LOGGER = get_logger(__name__)

ProfileListener = Callable[[Optional[SkinToneProfile]], None]


class SkinToneStore:
    """Holds the active :class:`SkinToneProfile` for a client.

    Writers replace the profile wholesale through :meth:`set_profile` or
    :meth:`clear`; every subscriber is called with the new value (``None``
    after a clear) once the write has been persisted.
    """

    def __init__(self, storage: KeyValueStorage) -> None:
        self.storage = storage
        self._listeners: List[ProfileListener] = []
        self._lock = threading.RLock()

    def analyze_and_store(self, image: ImageInput) -> SkinToneProfile:
        profile = analyze_skin_tone(image)
        self.set_profile(profile)
        return profile

    def set_profile(self, profile: SkinToneProfile) -> SkinToneProfile:
        with self._lock:
            self.storage.set_item(SKIN_TONE_KEY, json.dumps(profile.to_storage()))
            log_event(
                LOGGER,
                logging.INFO,
                "skin_tone_stored",
                season=profile.season,
                undertone=profile.undertone,
            )
            self._notify(profile)
        return profile

    def get_profile(self) -> Optional[SkinToneProfile]:
        raw = self.storage.get_item(SKIN_TONE_KEY)
        if not raw:
            return None
        try:
            return SkinToneProfile.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as exc:
            log_event(
                LOGGER,
                logging.WARNING,
                "skin_tone_load_failed",
                details=str(exc),
            )
            return None

    def clear(self) -> None:
        with self._lock:
            self.storage.remove_item(SKIN_TONE_KEY)
            log_event(LOGGER, logging.INFO, "skin_tone_cleared")
            self._notify(None)

    def subscribe(self, listener: ProfileListener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that unregisters it."""

        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, profile: Optional[SkinToneProfile]) -> None:
        for listener in list(self._listeners):
            listener(profile)


__all__ = ["SKIN_TONE_KEY", "ProfileListener", "SkinToneStore"]
