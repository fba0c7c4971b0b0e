"""
Shared test fixtures for the Action Wizard.

This module provides common fixtures used across all test modules:
- Environment setup (dev mode, local gateway URL)
- The reference palette
- A mocked PersistenceGateway (AsyncMock)
- In-memory PNG images built with Pillow
- Sample picked items (orders, clients, events)

Usage:
    All fixtures are automatically available to any test in the tests/ directory.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from io import BytesIO
from unittest.mock import AsyncMock

import pytest
from PIL import Image

# ---------------------------------------------------------------------------
# 1. Environment setup -- must run before any application imports
# ---------------------------------------------------------------------------

os.environ.setdefault("WIZARD_DEV_MODE", "1")
os.environ.setdefault("WIZARD_GATEWAY_URL", "http://gateway.test/api")

# ---------------------------------------------------------------------------
# Application imports (after env vars are set)
# ---------------------------------------------------------------------------

from src.api.schemas import (  # noqa: E402
    AIGenerationResult,
    AssetUploadTicket,
    ColorAssignmentRecord,
    ContactRecord,
    DesignJobRecord,
    FulfillmentOrderRecord,
    MerchBundleRecord,
    OrganizationRecord,
    QuoteRecord,
)
from src.services.palette_store import PaletteStore, get_palette_store  # noqa: E402

# ---------------------------------------------------------------------------
# 2. Palette
# ---------------------------------------------------------------------------


@pytest.fixture()
def palette() -> PaletteStore:
    """The built-in reference palette."""
    return get_palette_store()


# ---------------------------------------------------------------------------
# 3. Gateway -- every method is an AsyncMock returning a plausible record
# ---------------------------------------------------------------------------


@pytest.fixture()
def gateway() -> AsyncMock:
    """A PersistenceGateway stand-in with canned successful responses."""
    mock = AsyncMock()
    mock.create_quote.return_value = QuoteRecord(id=101, quote_code="Q-0101", status="draft")
    mock.create_design_job.return_value = DesignJobRecord(id=7, job_code="DJ-0007", status="pending")
    mock.create_organization.return_value = OrganizationRecord(id=55, name="Lincoln High")
    mock.create_contact.return_value = ContactRecord(id=900, org_id=55)
    mock.create_fulfillment_order.return_value = FulfillmentOrderRecord(
        id=3, external_order_id="PF-3", status="pending"
    )
    mock.create_merch_bundle.return_value = MerchBundleRecord(
        id=12, bundle_code="MB-12", status="active", total_allocated=60
    )
    mock.create_color_assignments.return_value = ColorAssignmentRecord(order_id=42, assigned=2)
    mock.generate_ai_content.return_value = AIGenerationResult(content="Draft generated by AI")
    mock.request_upload.return_value = AssetUploadTicket(
        upload_url="https://storage.test/logos/abc.png?sig=123",
        upload_id="up-1",
        sanitized_filename="abc.png",
    )
    mock.put_asset_bytes.return_value = None
    return mock


# ---------------------------------------------------------------------------
# 4. Images
# ---------------------------------------------------------------------------


def image_bytes(image: Image.Image, fmt: str = "PNG") -> bytes:
    buffer = BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture()
def encode_image() -> Callable[..., bytes]:
    """Encoder for Pillow images built inside a test."""
    return image_bytes


@pytest.fixture()
def make_png() -> Callable[..., bytes]:
    """Factory: make_png((w, h), (r, g, b, a)) -> PNG bytes of a solid image."""

    def _make(size: tuple[int, int] = (10, 10), color: tuple[int, ...] = (228, 0, 43, 255)) -> bytes:
        mode = "RGBA" if len(color) == 4 else "RGB"
        return image_bytes(Image.new(mode, size, color))

    return _make


@pytest.fixture()
def two_tone_png() -> bytes:
    """80x40 logo: left 3/4 red, right 1/4 navy, on an opaque canvas."""
    img = Image.new("RGBA", (80, 40), (228, 0, 43, 255))
    for x in range(60, 80):
        for y in range(40):
            img.putpixel((x, y), (0, 38, 100, 255))
    return image_bytes(img)


# ---------------------------------------------------------------------------
# 5. Picked items
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_order() -> dict:
    return {
        "id": 42,
        "order_code": "ORD-042",
        "order_name": "Spring Uniforms",
        "org_id": 55,
        "salesperson_id": "sp-9",
        "items": [
            {"id": 1, "name": "Home Jersey", "quantity": 20, "unit_price": "35.00"},
            {"id": 2, "name": "Shorts", "quantity": 20, "unit_price": "18.50"},
        ],
    }


@pytest.fixture()
def sample_client() -> dict:
    return {"id": 55, "name": "Lincoln High"}


@pytest.fixture()
def sample_event() -> dict:
    return {"id": 8, "name": "Fall Classic"}
