"""
Tests for the gateway payload schemas.
"""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from src.api.schemas import (
    ColorAssignment,
    ColorAssignmentCreate,
    DesignJobCreate,
    FulfillmentOrderCreate,
    OrganizationCreate,
    QuoteCreate,
    QuoteRecord,
)


def color(code: str = "185 C") -> ColorAssignment:
    return ColorAssignment(
        hex="#E4002B", palette_code=code, palette_name="Red", distance=0, quality_tier="excellent", source="manual"
    )


class TestWireFormat:
    def test_payload_uses_camel_case_and_drops_none(self):
        payload = QuoteCreate(
            name="Q",
            valid_until=date(2024, 3, 1),
            margin_type="Wholesale",
            subtotal=Decimal("1"),
            tax=Decimal("0.08"),
            total=Decimal("1.08"),
            overall_margin=Decimal("0"),
        ).to_payload()
        assert payload["validUntil"] == "2024-03-01"
        assert payload["marginType"] == "Wholesale"
        assert "orgId" not in payload
        assert payload["lineItems"] == []

    def test_records_accept_camel_case_and_extra_fields(self):
        record = QuoteRecord.model_validate({"id": "q1", "quoteCode": "Q-1", "createdAt": "now"})
        assert record.quote_code == "Q-1"
        assert record.status == "draft"
        assert record.model_extra == {"createdAt": "now"}

    def test_snake_case_input_is_accepted(self):
        assert QuoteRecord(id=1, quote_code="Q-2").quote_code == "Q-2"


class TestDesignJobCreate:
    def test_long_brief_is_truncated(self):
        job = DesignJobCreate(title="Logo", brief="x" * 1500)
        assert len(job.brief) == 1000

    def test_brief_is_stripped(self):
        assert DesignJobCreate(title="Logo", brief="  bold  ").brief == "bold"

    def test_unknown_urgency_is_rejected(self):
        with pytest.raises(ValidationError):
            DesignJobCreate(title="Logo", brief="b", urgency="yesterday")

    def test_empty_brief_is_rejected(self):
        with pytest.raises(ValidationError):
            DesignJobCreate(title="Logo", brief="")


class TestOrganizationCreate:
    def test_blank_name_is_rejected(self):
        with pytest.raises(ValidationError):
            OrganizationCreate(name="   ")

    def test_brand_colours_must_be_hex(self):
        with pytest.raises(ValidationError):
            OrganizationCreate(name="Lincoln", brand_primary_color="red")
        org = OrganizationCreate(name=" Lincoln ", brand_primary_color="#E00020")
        assert org.name == "Lincoln"


class TestCollections:
    def test_colour_assignment_caps_at_six(self):
        ColorAssignmentCreate(order_id=1, colors=[color()] * 6)
        with pytest.raises(ValidationError):
            ColorAssignmentCreate(order_id=1, colors=[color()] * 7)

    def test_colour_assignment_needs_one(self):
        with pytest.raises(ValidationError):
            ColorAssignmentCreate(order_id=1, colors=[])

    def test_fulfillment_order_needs_items(self):
        with pytest.raises(ValidationError):
            FulfillmentOrderCreate(order_id=1, items=[], shipping_method="standard")
