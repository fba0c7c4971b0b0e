"""
Pydantic Schemas for the Action Wizard persistence gateway.

Defines request/response payloads for every gateway call. Field names
are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from src.config.policy import BRIEF_MAX_LENGTH, MAX_SESSION_COLORS


class WizardModel(BaseModel):
    """Base model: camelCase aliases, accepts either spelling on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict with wire (camelCase) keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class RecordModel(WizardModel):
    """Gateway responses may carry extra fields we don't model."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


# =============================================================================
# Common Schemas
# =============================================================================


class APIError(BaseModel):
    """Standard API error response."""

    code: str
    message: str
    details: dict[str, Any] | None = None


# =============================================================================
# Quote Schemas
# =============================================================================


class QuoteLineSummary(WizardModel):
    """Condensed line item sent with a quote."""

    name: str
    description: str = ""
    quantity: int = Field(..., ge=1)
    unit_cost: Decimal = Field(..., ge=0)
    unit_price: Decimal = Field(..., ge=0)
    line_total: Decimal = Field(..., ge=0)


class QuoteCreate(WizardModel):
    """Request schema for creating a draft quote."""

    name: str = Field(..., min_length=1, max_length=200)
    org_id: int | str | None = None
    order_id: int | str | None = None
    contact_id: int | str | None = None
    salesperson_id: int | str | None = None
    status: str = "draft"
    valid_until: date
    notes: str | None = None
    margin_type: str
    line_items: list[QuoteLineSummary] = Field(default_factory=list)
    subtotal: Decimal
    discount: Decimal = Field(Decimal("0"), ge=0)
    tax: Decimal
    total: Decimal
    overall_margin: Decimal


class QuoteRecord(RecordModel):
    """Response schema for a created quote."""

    id: int | str
    quote_code: str
    status: str = "draft"


# =============================================================================
# Design Job Schemas
# =============================================================================


class DesignJobCreate(WizardModel):
    """Request schema for creating a design job.

    Briefs longer than BRIEF_MAX_LENGTH are truncated, not rejected.
    """

    title: str = Field(..., min_length=1, max_length=200)
    org_id: int | str | None = None
    order_id: int | str | None = None
    brief: str = Field(..., min_length=1)
    requirements: str | None = Field(None, max_length=2000)
    urgency: Literal["low", "normal", "high", "rush"] = "normal"
    designer_id: int | str | None = None
    status: str = "pending"

    @field_validator("brief")
    @classmethod
    def truncate_brief(cls, v: str) -> str:
        """Trim whitespace and cap the brief length."""
        return v.strip()[:BRIEF_MAX_LENGTH]


class DesignJobRecord(RecordModel):
    """Response schema for a created design job."""

    id: int | str
    job_code: str
    status: str


# =============================================================================
# Organization & Contact Schemas
# =============================================================================


class OrganizationCreate(WizardModel):
    """Request schema for creating a client organization."""

    name: str = Field(..., min_length=1, max_length=200)
    client_type: str | None = None
    city: str | None = None
    state: str | None = None
    phone: str | None = None
    email: str | None = None
    website: str | None = None
    brand_primary_color: str | None = Field(None, pattern=r"^#[0-9A-Fa-f]{6}$")
    brand_secondary_color: str | None = Field(None, pattern=r"^#[0-9A-Fa-f]{6}$")
    logo_url: str | None = None
    notes: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Reject whitespace-only names."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("name must not be blank")
        return stripped


class OrganizationRecord(RecordModel):
    """Response schema for a created organization."""

    id: int | str
    name: str


class ContactCreate(WizardModel):
    """Request schema for adding a contact to an organization."""

    org_id: int | str
    name: str = Field(..., min_length=1, max_length=200)
    email: str | None = None
    phone: str | None = None
    role: str = "primary"


class ContactRecord(RecordModel):
    """Response schema for a created contact."""

    id: int | str
    org_id: int | str | None = None


# =============================================================================
# Fulfillment Schemas
# =============================================================================


class FulfillmentItem(WizardModel):
    """One order line mapped to a fulfillment product."""

    line_item_id: int | str
    product_id: int | str
    quantity: int = Field(..., ge=1)


class FulfillmentOrderCreate(WizardModel):
    """Request schema for pushing order items to fulfillment."""

    order_id: int | str
    items: list[FulfillmentItem] = Field(..., min_length=1)
    shipping_method: str = Field(..., min_length=1)
    gift_message: str | None = Field(None, max_length=500)


class FulfillmentOrderRecord(RecordModel):
    """Response schema for a submitted fulfillment order."""

    id: int | str
    external_order_id: str | None = None
    status: str


# =============================================================================
# Merchandise Bundle Schemas
# =============================================================================


class MerchAllocation(WizardModel):
    """Units of one product set aside for an event."""

    product_id: int | str
    quantity: int = Field(..., ge=1)


class MerchBundleCreate(WizardModel):
    """Request schema for an event merchandise bundle."""

    event_id: int | str
    name: str = Field(..., min_length=1, max_length=200)
    allocations: list[MerchAllocation] = Field(..., min_length=1)
    design_style: str | None = Field(None, max_length=100)
    team_store: bool = False


class MerchBundleRecord(RecordModel):
    """Response schema for a created merchandise bundle."""

    id: int | str
    bundle_code: str
    status: str
    total_allocated: int = 0


# =============================================================================
# Colour Assignment Schemas
# =============================================================================


class ColorAssignment(WizardModel):
    """A sampled colour and the palette entry it was matched to."""

    hex: str = Field(..., pattern=r"^#[0-9A-Fa-f]{6}$")
    palette_code: str
    palette_name: str
    distance: float = Field(..., ge=0)
    quality_tier: str
    source: Literal["eyedropper", "manual", "logo"]


class ColorAssignmentCreate(WizardModel):
    """Request schema for attaching colours to an order."""

    order_id: int | str
    colors: list[ColorAssignment] = Field(..., min_length=1, max_length=MAX_SESSION_COLORS)


class ColorAssignmentRecord(RecordModel):
    """Response schema for saved colour assignments."""

    order_id: int | str
    assigned: int


# =============================================================================
# AI Generation Schemas
# =============================================================================


class AIGenerationRequest(WizardModel):
    """Request schema for AI-generated preview content."""

    action_id: str
    hub_id: str
    context: dict[str, Any] = Field(default_factory=dict)


class AIGenerationResult(RecordModel):
    """Response schema for AI-generated content."""

    content: str = ""


# =============================================================================
# Asset Upload Schemas
# =============================================================================


class AssetUploadRequest(WizardModel):
    """Request schema for reserving an upload slot."""

    filename: str = Field(..., min_length=1, max_length=255)
    content_type: str
    size: int = Field(..., ge=1)


class AssetUploadTicket(RecordModel):
    """Response schema with a one-shot upload URL."""

    upload_url: str
    upload_id: str
    sanitized_filename: str
