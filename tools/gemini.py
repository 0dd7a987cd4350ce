"""Gemini text-generation helpers shared by the voice and closet tools."""

from __future__ import annotations

import json
import re
from typing import Any, Optional, Protocol

import google.generativeai as genai

_FENCE_PATTERN = re.compile(r"```(?:json)?", re.IGNORECASE)


class TextModel(Protocol):
    """The slice of ``genai.GenerativeModel`` the tools depend on."""

    def generate_content(self, contents: Any) -> Any: ...


def build_model(api_key: Optional[str], model_name: str) -> Optional[TextModel]:
    """Return a configured Gemini model, or ``None`` when no key is available."""

    if not api_key:
        return None
    genai.configure(api_key=api_key)
    return genai.GenerativeModel(model_name)


def generate_text(model: TextModel, prompt: str) -> str:
    response = model.generate_content(prompt)
    return (response.text or "").strip()


def extract_json_object(raw: str) -> Any:
    """Parse the first JSON object in a model reply, tolerating code fences and chatter.

    Raises :class:`ValueError` (``json.JSONDecodeError``) when nothing parses.
    """

    cleaned = _FENCE_PATTERN.sub("", raw).strip()
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end < start:
        raise json.JSONDecodeError("No JSON object in model response", cleaned, 0)
    return json.loads(cleaned[start : end + 1])


__all__ = ["TextModel", "build_model", "extract_json_object", "generate_text"]
