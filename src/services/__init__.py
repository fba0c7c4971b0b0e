"""
Services for the Action Wizard.

Stateless building blocks used by the actions:
    - PaletteStore: Reference palette, loaded once per process
    - Colour matching: Nearest palette entry and quality tier
    - ImageColorSampler: Eyedropper pick and dominant colours (Pillow + numpy)
    - Quote calculator: Decimal line-item, tax, and margin arithmetic
    - PersistenceGateway: Async boundary to the business API (httpx)
"""

from .color_matcher import (
    ColorMatch,
    QualityTier,
    match_palette_code,
    nearest_match,
    nearest_matches,
    quality_tier,
    search_palette,
)
from .gateway import HttpPersistenceGateway, PersistenceGateway, upload_asset
from .image_sampler import DominantColors, ImageColorSampler
from .palette_store import PaletteEntry, PaletteStore, get_palette_store
from .quote_calculator import LineItem, QuoteTotals, summarize

__all__ = [
    # Palette
    "PaletteEntry",
    "PaletteStore",
    "get_palette_store",
    # Matching
    "ColorMatch",
    "QualityTier",
    "quality_tier",
    "nearest_match",
    "nearest_matches",
    "match_palette_code",
    "search_palette",
    # Sampling
    "ImageColorSampler",
    "DominantColors",
    # Quotes
    "LineItem",
    "QuoteTotals",
    "summarize",
    # Gateway
    "PersistenceGateway",
    "HttpPersistenceGateway",
    "upload_asset",
]
