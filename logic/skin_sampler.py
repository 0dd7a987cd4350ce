"""Estimate a representative skin color from a captured selfie."""

from __future__ import annotations

import base64
import binascii
import io
import logging
from typing import Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from models.skin_tone import RGB

logger = logging.getLogger(__name__)

SAMPLE_SIZE = 100
# Inner rectangle of the frame where a selfie usually places the face.
ROI_START = 0.2
ROI_END = 0.8

MIN_RED = 95
MIN_GREEN = 40
MIN_BLUE = 20
MIN_CHROMA = 15
MIN_RED_GREEN_GAP = 15

DEFAULT_SKIN_RGB: RGB = (194, 154, 108)

ImageInput = Union[Image.Image, bytes, str]


class ImageDecodeError(ValueError):
    """Raised when the provided photo cannot be decoded into pixels."""


def decode_image(source: ImageInput) -> Image.Image:
    """Decode a PIL image, raw bytes, a base64 string or a ``data:`` URL."""

    if isinstance(source, Image.Image):
        return source
    if isinstance(source, str):
        payload = source.split(",", 1)[1] if source.startswith("data:") else source
        try:
            source = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ImageDecodeError("Image payload is not valid base64") from exc
    if not isinstance(source, (bytes, bytearray)):
        raise ImageDecodeError(f"Unsupported image input type: {type(source).__name__}")
    try:
        image = Image.open(io.BytesIO(source))
        image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        raise ImageDecodeError("Could not decode image data") from exc
    return image


def prepare_pixels(image: Image.Image) -> np.ndarray:
    """Downsample to the working resolution and return an ``(h, w, 3)`` int array."""

    working = image.convert("RGB").resize((SAMPLE_SIZE, SAMPLE_SIZE))
    return np.asarray(working, dtype=np.int32)


def center_region(pixels: np.ndarray) -> np.ndarray:
    height, width = pixels.shape[:2]
    start_x, end_x = int(width * ROI_START), int(width * ROI_END)
    start_y, end_y = int(height * ROI_START), int(height * ROI_END)
    return pixels[start_y:end_y, start_x:end_x]


def skin_mask(pixels: np.ndarray) -> np.ndarray:
    """Boolean mask of skin-like pixels for an ``(..., 3)`` RGB array."""

    r, g, b = pixels[..., 0], pixels[..., 1], pixels[..., 2]
    chroma = pixels.max(axis=-1) - pixels.min(axis=-1)
    return (
        (r > MIN_RED)
        & (g > MIN_GREEN)
        & (b > MIN_BLUE)
        & (chroma > MIN_CHROMA)
        & (np.abs(r - g) > MIN_RED_GREEN_GAP)
        & (r > g)
        & (r > b)
    )


def is_skin_like(r: int, g: int, b: int) -> bool:
    return bool(skin_mask(np.array([r, g, b], dtype=np.int32)))


def _round_half_up(value: float) -> int:
    return int(np.floor(value + 0.5))


def average_skin_color(pixels: np.ndarray) -> RGB:
    """Mean color of the skin-like pixels, or the default tone when none qualify."""

    skin = pixels[skin_mask(pixels)]
    if skin.size == 0:
        logger.info("No skin-like pixels found, using default skin tone")
        return DEFAULT_SKIN_RGB
    means = skin.mean(axis=0)
    logger.debug("Averaged %d skin-like pixels", len(skin))
    return (_round_half_up(means[0]), _round_half_up(means[1]), _round_half_up(means[2]))


def sample_skin_color(source: ImageInput) -> RGB:
    """Return the representative skin RGB for a photo."""

    image = decode_image(source)
    pixels = prepare_pixels(image)
    return average_skin_color(center_region(pixels))


__all__ = [
    "DEFAULT_SKIN_RGB",
    "ImageDecodeError",
    "ImageInput",
    "SAMPLE_SIZE",
    "average_skin_color",
    "center_region",
    "decode_image",
    "is_skin_like",
    "prepare_pixels",
    "sample_skin_color",
    "skin_mask",
]
