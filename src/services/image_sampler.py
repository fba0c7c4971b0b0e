"""
Image Colour Sampler for the Action Wizard.

Two ways to get colours out of a user-supplied image:

1. Point pick (eyedropper): map a click on the displayed image back to
   the full-resolution pixel and read its RGB.
2. Dominant colours (logo/brand detection): shrink the image, drop
   transparent and background-like pixels, snap channels to a coarse
   grid, and rank the resulting colours by pixel count.

Decode failures raise ImageDecodeError. They are never swallowed.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from io import BytesIO

import numpy as np
import structlog
from PIL import Image, UnidentifiedImageError

from src.config.policy import (
    ALPHA_THRESHOLD,
    MAX_DOMINANT_COLORS,
    NEAR_BLACK_BRIGHTNESS,
    NEAR_WHITE_BRIGHTNESS,
    QUANTIZATION_STEP,
    SAMPLE_MAX_DIMENSION,
)
from src.lib.color_math import Rgb, rgb_to_hex
from src.lib.exceptions import ImageDecodeError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class DominantColors:
    """Ranked colour candidates from one image (most frequent first)."""

    candidates: tuple[str, ...]

    @property
    def primary(self) -> str | None:
        return self.candidates[0] if self.candidates else None

    @property
    def secondary(self) -> str | None:
        return self.candidates[1] if len(self.candidates) >= 2 else None

    @property
    def is_empty(self) -> bool:
        return not self.candidates


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


class ImageColorSampler:
    """
    Extract colours from images using Pillow and numpy.

    Args:
        max_dimension: Longest side of the working copy for extraction
        alpha_threshold: Pixels with lower alpha are skipped
        near_white: Pixels brighter than this (channel mean) are skipped
        near_black: Pixels darker than this (channel mean) are skipped
        quantization_step: Channel grid size
        max_colors: Number of candidates returned
    """

    def __init__(
        self,
        max_dimension: int = SAMPLE_MAX_DIMENSION,
        alpha_threshold: int = ALPHA_THRESHOLD,
        near_white: int = NEAR_WHITE_BRIGHTNESS,
        near_black: int = NEAR_BLACK_BRIGHTNESS,
        quantization_step: int = QUANTIZATION_STEP,
        max_colors: int = MAX_DOMINANT_COLORS,
    ) -> None:
        self.max_dimension = max_dimension
        self.alpha_threshold = alpha_threshold
        self.near_white = near_white
        self.near_black = near_black
        self.quantization_step = quantization_step
        self.max_colors = max_colors

    # =========================================================================
    # Decoding
    # =========================================================================

    def load_image(self, data: bytes) -> Image.Image:
        """
        Decode raw bytes into a Pillow image.

        Raises:
            ImageDecodeError: If the bytes are empty or not a readable image
        """
        if not data:
            raise ImageDecodeError("Image data is empty")
        try:
            img = Image.open(BytesIO(data))
            img.load()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
            logger.warning("image_decode_failed", size=len(data), error=str(e))
            raise ImageDecodeError(f"Could not decode image: {e}") from e
        return img

    def _as_image(self, source: bytes | Image.Image) -> Image.Image:
        if isinstance(source, Image.Image):
            return source
        return self.load_image(source)

    # =========================================================================
    # Point Pick
    # =========================================================================

    def sample_point(
        self,
        source: bytes | Image.Image,
        display_size: tuple[float, float],
        point: tuple[float, float],
    ) -> Rgb:
        """
        Read the pixel under a click on a scaled display of the image.

        Args:
            source: Image or raw image bytes
            display_size: On-screen (width, height) of the image
            point: Click position relative to the displayed image's top-left

        Returns:
            RGB of the natural-resolution pixel (alpha ignored)

        Raises:
            ValueError: If the display size is not positive or the click
                falls outside the displayed image
            ImageDecodeError: If raw bytes cannot be decoded
        """
        disp_w, disp_h = display_size
        if disp_w <= 0 or disp_h <= 0:
            raise ValueError(f"Display size must be positive, got {display_size}")
        x, y = point
        if not (0 <= x <= disp_w and 0 <= y <= disp_h):
            raise ValueError(f"Point {point} lies outside the displayed image {display_size}")

        img = self._as_image(source)
        nat_w, nat_h = img.size
        scale_x = nat_w / disp_w
        scale_y = nat_h / disp_h

        # A click on the far edge maps to width/height, one past the last pixel
        px = min(nat_w - 1, max(0, _round_half_up(x * scale_x)))
        py = min(nat_h - 1, max(0, _round_half_up(y * scale_y)))

        r, g, b, _alpha = img.convert("RGBA").getpixel((px, py))
        return Rgb(int(r), int(g), int(b))

    # =========================================================================
    # Dominant Colours
    # =========================================================================

    def extract_dominant_colors(self, source: bytes | Image.Image) -> DominantColors:
        """
        Rank the most common colours of an image.

        Raises:
            ImageDecodeError: If raw bytes cannot be decoded
        """
        img = self._downscale(self._as_image(source).convert("RGBA"))

        pixels = np.asarray(img, dtype=np.int32).reshape(-1, 4)
        rgb = pixels[:, :3]
        alpha = pixels[:, 3]
        mean = rgb.mean(axis=1)

        keep = (alpha >= self.alpha_threshold) & (mean <= self.near_white) & (mean >= self.near_black)
        kept = rgb[keep]
        if kept.size == 0:
            logger.debug("dominant_colors_empty", width=img.width, height=img.height)
            return DominantColors(candidates=())

        quantized = self._quantize(kept)
        keys = (quantized[:, 0] << 16) | (quantized[:, 1] << 8) | quantized[:, 2]

        unique_keys, first_index, counts = np.unique(keys, return_index=True, return_counts=True)
        # Most pixels first; equal counts keep scan order
        order = np.lexsort((first_index, -counts))
        top = unique_keys[order][: self.max_colors]

        candidates = tuple(
            rgb_to_hex(((int(key) >> 16) & 0xFF, (int(key) >> 8) & 0xFF, int(key) & 0xFF))
            for key in top
        )
        logger.debug("dominant_colors_extracted", buckets=len(unique_keys), candidates=len(candidates))
        return DominantColors(candidates=candidates)

    def _downscale(self, img: Image.Image) -> Image.Image:
        """Shrink so neither side exceeds max_dimension, keeping aspect ratio."""
        longest = max(img.size)
        if longest <= self.max_dimension:
            return img
        ratio = self.max_dimension / longest
        new_size = (
            max(1, min(self.max_dimension, round(img.width * ratio))),
            max(1, min(self.max_dimension, round(img.height * ratio))),
        )
        return img.resize(new_size, Image.Resampling.BOX)

    def _quantize(self, rgb: np.ndarray) -> np.ndarray:
        """Snap each channel to the nearest grid multiple (half up, capped at 255)."""
        step = self.quantization_step
        snapped = np.floor(rgb / step + 0.5) * step
        return np.clip(snapped, 0, 255).astype(np.int32)
