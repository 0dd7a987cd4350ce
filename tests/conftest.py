"""Shared fixtures for the StyleAI test suite."""

from __future__ import annotations

import base64
import io
import sys
from pathlib import Path
from typing import List, Tuple

import pytest
from PIL import Image, ImageDraw

sys.path.append(str(Path(__file__).resolve().parents[1]))

from models.skin_tone import SkinToneProfile


class FakeResponse:
    def __init__(self, text: str) -> None:
        self.text = text


class FakeTextModel:
    """Stands in for ``genai.GenerativeModel`` and records prompts."""

    def __init__(self, replies: List[str] | None = None, error: Exception | None = None) -> None:
        self.replies = list(replies or [])
        self.error = error
        self.prompts: List[str] = []

    def generate_content(self, prompt: str) -> FakeResponse:
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return FakeResponse(self.replies.pop(0))


def solid_image(color: Tuple[int, int, int], size: Tuple[int, int] = (100, 100), mode: str = "RGB") -> Image.Image:
    fill = color if mode == "RGB" else (*color, 255)
    return Image.new(mode, size, fill)


def framed_image(border: Tuple[int, int, int], center: Tuple[int, int, int]) -> Image.Image:
    """100x100 image whose 20%-80% center square is ``center``."""

    image = solid_image(border)
    ImageDraw.Draw(image).rectangle((20, 20, 79, 79), fill=center)
    return image


def to_data_url(image: Image.Image) -> str:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")


@pytest.fixture()
def burgundy_profile() -> SkinToneProfile:
    return SkinToneProfile(
        skin_hex="#c29a6c",
        undertone="cool",
        season="winter",
        recommended_colors=["#800020"],
        avoid_colors=[],
    )
