"""
Tests for nearest-colour matching and quality grading.

Covers:
- Nearest match equals a brute-force scan (first entry wins ties)
- Inclusive tier boundaries
- Manual code resolution
- Ranked matches for the picker
"""

import random

import pytest

from src.lib.color_math import Rgb, euclidean_distance
from src.lib.exceptions import PaletteCodeNotFoundError
from src.services.color_matcher import (
    QualityTier,
    describe_match,
    match_hex,
    match_palette_code,
    nearest_match,
    nearest_matches,
    quality_tier,
    search_palette,
)
from src.services.palette_store import PaletteStore


def _brute_force(rgb, palette):
    best = None
    for entry in palette:
        distance = euclidean_distance(rgb, entry.rgb)
        if best is None or distance < best[0]:
            best = (distance, entry)
    return best


# =============================================================================
# Nearest Match
# =============================================================================


class TestNearestMatch:
    def test_exact_palette_colour_matches_itself(self, palette: PaletteStore) -> None:
        match = nearest_match((228, 0, 43), palette)
        assert match.entry.code == "185 C"
        assert match.distance == 0.0
        assert match.quality_tier is QualityTier.EXCELLENT

    def test_matches_brute_force_scan(self, palette: PaletteStore) -> None:
        rng = random.Random(1234)
        for _ in range(200):
            rgb = (rng.randint(0, 255), rng.randint(0, 255), rng.randint(0, 255))
            distance, entry = _brute_force(rgb, palette)
            match = nearest_match(rgb, palette)
            assert match.entry is entry
            assert match.distance == pytest.approx(distance)

    def test_no_entry_is_strictly_closer(self, palette: PaletteStore) -> None:
        match = nearest_match((10, 120, 200), palette)
        assert all(euclidean_distance((10, 120, 200), entry.rgb) >= match.distance for entry in palette)

    def test_ties_resolve_to_first_entry(self) -> None:
        rows = [("A", "Alpha", "#000000"), ("B", "Beta", "#000002")]
        assert nearest_match((0, 0, 1), PaletteStore.from_rows(rows)).entry.code == "A"
        assert nearest_match((0, 0, 1), PaletteStore.from_rows(reversed(rows))).entry.code == "B"

    def test_empty_palette_raises(self) -> None:
        with pytest.raises(ValueError, match="empty palette"):
            nearest_match((0, 0, 0), [])

    def test_match_hex(self, palette: PaletteStore) -> None:
        assert match_hex("#C8102E", palette).entry.code == "186 C"

    def test_describe_match(self, palette: PaletteStore) -> None:
        match = nearest_match((228, 0, 43), palette)
        assert describe_match(Rgb(228, 0, 43), match) == "#E4002B -> 185 C (Red), excellent"


class TestNearestMatches:
    def test_ranked_by_distance(self, palette: PaletteStore) -> None:
        matches = nearest_matches((0, 80, 160), palette, count=5)
        assert len(matches) == 5
        assert matches[0].entry.code == "300 C"
        distances = [m.distance for m in matches]
        assert distances == sorted(distances)

    def test_first_ranked_equals_nearest(self, palette: PaletteStore) -> None:
        rgb = (120, 40, 200)
        assert nearest_matches(rgb, palette)[0].entry is nearest_match(rgb, palette).entry

    def test_negative_count_returns_nothing(self, palette: PaletteStore) -> None:
        assert nearest_matches((0, 0, 0), palette, count=-1) == []


# =============================================================================
# Quality Tiers
# =============================================================================


class TestQualityTier:
    @pytest.mark.parametrize(
        ("distance", "tier"),
        [
            (0.0, QualityTier.EXCELLENT),
            (16.0, QualityTier.EXCELLENT),
            (16.01, QualityTier.VERY_CLOSE),
            (32.0, QualityTier.VERY_CLOSE),
            (48.0, QualityTier.GOOD),
            (48.5, QualityTier.APPROXIMATE),
            (80.0, QualityTier.APPROXIMATE),
            (80.01, QualityTier.NOT_RECOMMENDED),
            (441.7, QualityTier.NOT_RECOMMENDED),
        ],
    )
    def test_boundaries_are_inclusive(self, distance: float, tier: QualityTier) -> None:
        assert quality_tier(distance) is tier

    def test_tiers_never_improve_with_distance(self) -> None:
        order = list(QualityTier)
        ranks = [order.index(quality_tier(d / 2)) for d in range(0, 300)]
        assert ranks == sorted(ranks)


# =============================================================================
# Manual Entry
# =============================================================================


class TestManualCode:
    def test_code_lookup_is_exact_and_excellent(self, palette: PaletteStore) -> None:
        match = match_palette_code("185 c", palette)
        assert match.entry.hex == "#E4002B"
        assert match.distance == 0.0
        assert match.quality_tier is QualityTier.EXCELLENT

    def test_unknown_code_raises(self, palette: PaletteStore) -> None:
        with pytest.raises(PaletteCodeNotFoundError) as exc_info:
            match_palette_code("999 Z", palette)
        assert exc_info.value.code == "999 Z"

    def test_search_palette_delegates_to_store(self, palette: PaletteStore) -> None:
        assert [e.code for e in search_palette("scarlet", palette)] == ["485 C"]
