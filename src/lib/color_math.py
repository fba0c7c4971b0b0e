"""
RGB colour helpers shared by the matcher and the image sampler.
"""

from __future__ import annotations

import math
import re
from typing import NamedTuple

_HEX_PATTERN = re.compile(r"^#?([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$")


class Rgb(NamedTuple):
    """An 8-bit RGB triple."""

    r: int
    g: int
    b: int

    def to_dict(self) -> dict[str, int]:
        return {"r": self.r, "g": self.g, "b": self.b}


def hex_to_rgb(hex_value: str) -> Rgb:
    """
    Parse "#RRGGBB" (leading # optional, any case) into an Rgb.

    Raises:
        ValueError: If the string is not a 6-digit hex colour
    """
    match = _HEX_PATTERN.match(hex_value.strip())
    if not match:
        raise ValueError(f"Invalid hex color: {hex_value!r}")
    return Rgb(*(int(part, 16) for part in match.groups()))


def rgb_to_hex(rgb: tuple[int, int, int]) -> str:
    """Format an RGB triple as upper-case "#RRGGBB", clamping each channel."""
    r, g, b = (max(0, min(255, int(round(c)))) for c in rgb)
    return f"#{r:02X}{g:02X}{b:02X}"


def euclidean_distance(a: tuple[int, int, int], b: tuple[int, int, int]) -> float:
    """Straight-line distance between two colours in RGB space (0 to ~441.7)."""
    return math.sqrt((b[0] - a[0]) ** 2 + (b[1] - a[1]) ** 2 + (b[2] - a[2]) ** 2)


def brightness(rgb: tuple[int, int, int]) -> float:
    """Mean of the three channels."""
    return (rgb[0] + rgb[1] + rgb[2]) / 3
