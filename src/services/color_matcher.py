"""
Colour Matcher for the Action Wizard.

Maps a sampled RGB colour onto the nearest palette entry and grades the
match. Pure functions over a PaletteStore; nothing here touches session
state.

Matching rules:
- Distance is plain Euclidean distance in RGB space
- The whole palette is scanned; ties keep the earlier entry
- Manual code entry bypasses distance (distance 0, tier "excellent")
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from src.config.policy import (
    FALLBACK_QUALITY_TIER,
    PICKER_MATCH_COUNT,
    QUALITY_TIER_THRESHOLDS,
)
from src.lib.color_math import Rgb, euclidean_distance, hex_to_rgb, rgb_to_hex
from src.lib.exceptions import PaletteCodeNotFoundError
from src.services.palette_store import PaletteEntry, PaletteStore


class QualityTier(StrEnum):
    """How close a sampled colour is to its palette match, best first."""

    EXCELLENT = "excellent"
    VERY_CLOSE = "very_close"
    GOOD = "good"
    APPROXIMATE = "approximate"
    NOT_RECOMMENDED = "not_recommended"


@dataclass(frozen=True)
class ColorMatch:
    """Result of matching one colour against the palette."""

    entry: PaletteEntry
    distance: float
    quality_tier: QualityTier

    def to_dict(self) -> dict[str, object]:
        return {
            "entry": self.entry.to_dict(),
            "distance": round(self.distance, 2),
            "quality_tier": self.quality_tier.value,
        }


def quality_tier(distance: float) -> QualityTier:
    """Bucket a distance using inclusive upper bounds from the policy table."""
    for upper_bound, tier_name in QUALITY_TIER_THRESHOLDS:
        if distance <= upper_bound:
            return QualityTier(tier_name)
    return QualityTier(FALLBACK_QUALITY_TIER)


def nearest_match(rgb: tuple[int, int, int], palette: PaletteStore) -> ColorMatch:
    """
    Find the palette entry closest to an RGB colour.

    Args:
        rgb: Sampled colour, channels in 0..255
        palette: Reference palette (scanned in order)

    Returns:
        ColorMatch with the winning entry, its distance, and its tier

    Raises:
        ValueError: If the palette has no entries
    """
    best_entry: PaletteEntry | None = None
    best_distance = float("inf")
    for entry in palette:
        distance = euclidean_distance(rgb, entry.rgb)
        # strict < keeps the first entry on ties
        if distance < best_distance:
            best_entry = entry
            best_distance = distance

    if best_entry is None:
        raise ValueError("Cannot match against an empty palette")
    return ColorMatch(entry=best_entry, distance=best_distance, quality_tier=quality_tier(best_distance))


def nearest_matches(
    rgb: tuple[int, int, int],
    palette: PaletteStore,
    count: int = PICKER_MATCH_COUNT,
) -> list[ColorMatch]:
    """Rank the closest `count` palette entries (stable for equal distances)."""
    scored = [(euclidean_distance(rgb, entry.rgb), entry) for entry in palette]
    scored.sort(key=lambda pair: pair[0])
    return [
        ColorMatch(entry=entry, distance=distance, quality_tier=quality_tier(distance))
        for distance, entry in scored[: max(0, count)]
    ]


def match_palette_code(code: str, palette: PaletteStore) -> ColorMatch:
    """
    Resolve a manually typed palette code.

    Raises:
        PaletteCodeNotFoundError: If no entry matches the code
    """
    entry = palette.find_by_code(code)
    if entry is None:
        raise PaletteCodeNotFoundError(code)
    return ColorMatch(entry=entry, distance=0.0, quality_tier=QualityTier.EXCELLENT)


def search_palette(query: str, palette: PaletteStore) -> list[PaletteEntry]:
    """Entries whose code or name contains the query; empty query lists everything."""
    return palette.search(query)


def match_hex(hex_value: str, palette: PaletteStore) -> ColorMatch:
    """Convenience wrapper for callers holding a hex string."""
    return nearest_match(hex_to_rgb(hex_value), palette)


def describe_match(rgb: Rgb, match: ColorMatch) -> str:
    """One-line summary used in notifications."""
    return (
        f"{rgb_to_hex(rgb)} -> {match.entry.code} ({match.entry.name}), "
        f"{match.quality_tier.value.replace('_', ' ')}"
    )
