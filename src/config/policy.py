"""
Policy Tables for the Action Wizard.

Every tunable number used by colour matching, image sampling, and quote
arithmetic lives here so it can be changed and tested on its own.
Nothing in this module has behavior beyond simple lookups.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Literal

# =============================================================================
# Colour Matching
# =============================================================================

QualityTierName = Literal["excellent", "very_close", "good", "approximate", "not_recommended"]

# (inclusive upper bound on RGB distance, tier). Checked in order.
QUALITY_TIER_THRESHOLDS: tuple[tuple[float, QualityTierName], ...] = (
    (16.0, "excellent"),
    (32.0, "very_close"),
    (48.0, "good"),
    (80.0, "approximate"),
)

# Tier for anything beyond the last threshold
FALLBACK_QUALITY_TIER: QualityTierName = "not_recommended"

# Ranked matches offered by the picker next to the best one
PICKER_MATCH_COUNT = 24

# Maximum live colours per wizard session
MAX_SESSION_COLORS = 6

# =============================================================================
# Image Sampling
# =============================================================================

# Longest side of the working copy used for dominant-colour extraction
SAMPLE_MAX_DIMENSION = 100

# Pixels with alpha below this are treated as transparent background
ALPHA_THRESHOLD = 128

# Mean-of-channels brightness cutoffs (exclusive) for background removal
NEAR_WHITE_BRIGHTNESS = 240
NEAR_BLACK_BRIGHTNESS = 15

# Each channel is snapped to the nearest multiple of this value
QUANTIZATION_STEP = 32

# Candidates returned by dominant-colour extraction
MAX_DOMINANT_COLORS = 6

# =============================================================================
# Quotes
# =============================================================================

TAX_RATE = Decimal("0.08")

# Quotes are valid for this many days after creation
QUOTE_VALIDITY_DAYS = 30

# Money values sent to the gateway are rounded to cents
MONEY_QUANTUM = Decimal("0.01")


@dataclass(frozen=True)
class MarginGuardrail:
    """Acceptable margin band for one pricing category."""

    label: str
    min: Decimal
    max: Decimal


MarginType = Literal["wholesale", "event_retail"]

MARGIN_GUARDRAILS: dict[str, MarginGuardrail] = {
    "wholesale": MarginGuardrail(label="Wholesale", min=Decimal("0.42"), max=Decimal("0.50")),
    "event_retail": MarginGuardrail(label="Event / Retail", min=Decimal("0.55"), max=Decimal("0.65")),
}

DEFAULT_MARGIN_TYPE: MarginType = "wholesale"


def get_guardrail(margin_type: str) -> MarginGuardrail:
    """
    Look up the guardrail for a margin type.

    Raises:
        KeyError: If the margin type is not in the policy table
    """
    try:
        return MARGIN_GUARDRAILS[margin_type]
    except KeyError:
        raise KeyError(f"Unknown margin type: {margin_type!r}") from None


# =============================================================================
# Design Jobs & Catalogue
# =============================================================================

# Briefs longer than this are truncated before submission
BRIEF_MAX_LENGTH = 1000

# Pinned actions shown per hub
MAX_PINNED_ACTIONS = 4
