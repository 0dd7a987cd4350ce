"""Skin sampler tests."""

from __future__ import annotations

import base64
import io

import numpy as np
import pytest
from PIL import Image, ImageDraw

from conftest import framed_image, solid_image, to_data_url
from logic.skin_sampler import (
    DEFAULT_SKIN_RGB,
    ImageDecodeError,
    average_skin_color,
    center_region,
    is_skin_like,
    prepare_pixels,
    sample_skin_color,
)


@pytest.mark.parametrize(
    "pixel, expected",
    [
        ((220, 180, 140), True),
        ((96, 41, 21), True),
        ((95, 41, 21), False),  # red floor
        ((200, 40, 30), False),  # green floor
        ((200, 150, 20), False),  # blue floor
        ((128, 128, 128), False),  # gray
        ((150, 140, 130), False),  # red too close to green
        ((120, 60, 130), False),  # blue dominant
        ((30, 60, 200), False),
    ],
)
def test_skin_heuristic(pixel, expected) -> None:
    assert is_skin_like(*pixel) is expected


def test_blue_image_falls_back_to_default_tone() -> None:
    assert sample_skin_color(solid_image((0, 0, 255))) == DEFAULT_SKIN_RGB
    assert DEFAULT_SKIN_RGB == (194, 154, 108)


def test_solid_skin_image_returns_its_color() -> None:
    assert sample_skin_color(solid_image((220, 180, 140))) == (220, 180, 140)


def test_only_center_region_is_sampled() -> None:
    image = framed_image(border=(240, 120, 90), center=(200, 150, 110))
    assert sample_skin_color(image) == (200, 150, 110)


def test_center_region_bounds() -> None:
    pixels = prepare_pixels(solid_image((10, 10, 10)))
    assert pixels.shape == (100, 100, 3)
    assert center_region(pixels).shape == (60, 60, 3)


def test_non_skin_pixels_are_excluded_from_average() -> None:
    image = solid_image((0, 0, 255))
    draw = ImageDraw.Draw(image)
    draw.rectangle((20, 20, 79, 49), fill=(200, 150, 100))
    draw.rectangle((20, 50, 79, 79), fill=(0, 255, 0))
    assert sample_skin_color(image) == (200, 150, 100)


def test_average_is_per_channel_mean_rounded_half_up() -> None:
    pixels = np.array([[[200, 150, 100], [201, 151, 101]]], dtype=np.int32)
    assert average_skin_color(pixels) == (201, 151, 101)

    image = solid_image((0, 0, 255))
    draw = ImageDraw.Draw(image)
    draw.rectangle((20, 20, 79, 49), fill=(200, 150, 100))
    draw.rectangle((20, 50, 79, 79), fill=(220, 170, 120))
    assert sample_skin_color(image) == (210, 160, 110)


def test_large_rgba_image_is_downsampled() -> None:
    image = solid_image((220, 180, 140), size=(640, 480), mode="RGBA")
    assert sample_skin_color(image) == (220, 180, 140)


def test_accepts_data_url_base64_and_bytes() -> None:
    image = solid_image((220, 180, 140))
    data_url = to_data_url(image)
    raw = base64.b64decode(data_url.split(",", 1)[1])

    assert sample_skin_color(data_url) == (220, 180, 140)
    assert sample_skin_color(data_url.split(",", 1)[1]) == (220, 180, 140)
    assert sample_skin_color(raw) == (220, 180, 140)


def test_sampling_is_deterministic() -> None:
    image = framed_image(border=(0, 0, 0), center=(205, 160, 120))
    assert sample_skin_color(image) == sample_skin_color(image.copy())


def test_undecodable_input_raises_decode_error() -> None:
    with pytest.raises(ImageDecodeError):
        sample_skin_color("data:image/png;base64,not-base64!!")
    with pytest.raises(ImageDecodeError):
        sample_skin_color(base64.b64encode(b"definitely not an image").decode("ascii"))
    with pytest.raises(ImageDecodeError):
        sample_skin_color(io.BytesIO(b"wrong type"))  # type: ignore[arg-type]


def test_oversized_image_raises_decode_error(monkeypatch) -> None:
    payload = to_data_url(solid_image((220, 180, 140)))
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)
    with pytest.raises(ImageDecodeError):
        sample_skin_color(payload)
