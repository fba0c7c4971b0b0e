"""
Quote Calculator for the Action Wizard.

Pure Decimal arithmetic over a list of line items and a margin type.
Nothing is cached: every derived value (line totals, margins, tax,
totals) is recomputed from the items on each call, so a value can never
go stale after an edit.

Key rules:
- line_total = quantity * unit_price
- margin = (price - cost) / price, or 0 when price is 0
- overall margin is computed from aggregated cost and revenue,
  NOT as an average of per-line margins
- an empty quote never trips the guardrail warning
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, replace
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from src.config.policy import (
    DEFAULT_MARGIN_TYPE,
    MONEY_QUANTUM,
    TAX_RATE,
    MarginGuardrail,
    get_guardrail,
)

ZERO = Decimal("0")


def to_decimal(value: Any) -> Decimal:
    """
    Coerce user input (str, int, float, Decimal) into a Decimal.

    Floats go through str() so 0.1 stays 0.1.

    Raises:
        ValueError: If the value is not a finite number
    """
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError) as e:
            raise ValueError(f"Not a number: {value!r}") from e
    if not result.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return result


def money(value: Decimal) -> Decimal:
    """Round to cents (half up) for display and submission."""
    return value.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


# =============================================================================
# Line Items
# =============================================================================


@dataclass(frozen=True)
class LineItem:
    """One priced row of a quote. Derived values are properties."""

    id: str
    name: str
    quantity: int
    unit_cost: Decimal
    unit_price: Decimal
    description: str = ""

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError(f"Quantity must be at least 1, got {self.quantity}")
        if self.unit_cost < 0 or self.unit_price < 0:
            raise ValueError("Unit cost and unit price must not be negative")

    @property
    def line_total(self) -> Decimal:
        return self.quantity * self.unit_price

    @property
    def line_cost(self) -> Decimal:
        return self.quantity * self.unit_cost

    @property
    def margin(self) -> Decimal:
        return line_margin(self.unit_cost, self.unit_price)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "quantity": self.quantity,
            "unit_cost": str(self.unit_cost),
            "unit_price": str(self.unit_price),
            "line_total": str(self.line_total),
            "margin": str(self.margin),
        }


def line_margin(cost: Decimal, price: Decimal) -> Decimal:
    """Fraction of revenue kept after cost; 0 when there is no revenue."""
    if price == 0:
        return ZERO
    return (price - cost) / price


def new_line_item(
    name: str,
    quantity: Any = 1,
    unit_cost: Any = 0,
    unit_price: Any = 0,
    description: str = "",
    item_id: str | None = None,
) -> LineItem:
    """Create a line item from raw form input."""
    return LineItem(
        id=item_id or str(uuid.uuid4()),
        name=name.strip(),
        description=description.strip(),
        quantity=max(1, int(quantity)),
        unit_cost=max(ZERO, to_decimal(unit_cost)),
        unit_price=max(ZERO, to_decimal(unit_price)),
    )


_EDITABLE_FIELDS = frozenset({"name", "description", "quantity", "unit_cost", "unit_price"})


def edit_line_item(item: LineItem, field_name: str, value: Any) -> LineItem:
    """
    Return a copy of the item with one field changed.

    Quantity is clamped to at least 1 and money fields to at least 0.
    Derived fields (line_total, margin) cannot be edited.

    Raises:
        ValueError: If the field is not editable or the value is not a number
    """
    if field_name not in _EDITABLE_FIELDS:
        raise ValueError(f"Field {field_name!r} cannot be edited")

    if field_name == "quantity":
        try:
            quantity = int(value)
        except (TypeError, ValueError):
            quantity = 1
        return replace(item, quantity=max(1, quantity))
    if field_name in ("unit_cost", "unit_price"):
        return replace(item, **{field_name: max(ZERO, to_decimal(value))})
    return replace(item, **{field_name: str(value)})


def update_line_item(items: Sequence[LineItem], item_id: str, field_name: str, value: Any) -> list[LineItem]:
    """Apply edit_line_item to the item with the given id; other items are untouched."""
    return [edit_line_item(item, field_name, value) if item.id == item_id else item for item in items]


def remove_line_item(items: Sequence[LineItem], item_id: str) -> list[LineItem]:
    return [item for item in items if item.id != item_id]


def line_items_from_order(order: Mapping[str, Any]) -> list[LineItem]:
    """
    Seed quote lines from an order's items.

    Order items carry quantity and unit price; cost is unknown until the
    user fills it in, so it starts at 0.
    """
    items: list[LineItem] = []
    for raw in order.get("items") or order.get("line_items") or []:
        name = raw.get("name") or raw.get("product_name") or "Item"
        items.append(
            new_line_item(
                name=str(name),
                quantity=raw.get("quantity", 1),
                unit_cost=raw.get("unit_cost", 0),
                unit_price=raw.get("unit_price", 0),
                description=str(raw.get("description", "")),
            )
        )
    return items


# =============================================================================
# Aggregates
# =============================================================================


def subtotal(items: Iterable[LineItem]) -> Decimal:
    return sum((item.line_total for item in items), ZERO)


def total_cost(items: Iterable[LineItem]) -> Decimal:
    return sum((item.line_cost for item in items), ZERO)


def tax(subtotal_value: Decimal) -> Decimal:
    return subtotal_value * TAX_RATE


def total(subtotal_value: Decimal, discount: Decimal = ZERO) -> Decimal:
    """subtotal - discount + tax (tax is charged on the undiscounted subtotal)."""
    if discount < 0:
        raise ValueError("Discount must not be negative")
    return subtotal_value - discount + tax(subtotal_value)


def overall_margin(items: Sequence[LineItem]) -> Decimal:
    """Margin of the whole quote from aggregated cost and revenue."""
    return line_margin(total_cost(items), subtotal(items))


def below_guardrail(items: Sequence[LineItem], margin_type: str = DEFAULT_MARGIN_TYPE) -> bool:
    """True when a non-empty quote's margin is under the guardrail minimum."""
    guardrail = get_guardrail(margin_type)
    return len(items) > 0 and overall_margin(items) < guardrail.min


@dataclass(frozen=True)
class QuoteTotals:
    """Every derived figure for a quote, computed together."""

    subtotal: Decimal
    discount: Decimal
    tax: Decimal
    total: Decimal
    total_cost: Decimal
    overall_margin: Decimal
    margin_type: str
    guardrail: MarginGuardrail
    below_guardrail: bool
    above_guardrail: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "subtotal": str(money(self.subtotal)),
            "discount": str(money(self.discount)),
            "tax": str(money(self.tax)),
            "total": str(money(self.total)),
            "total_cost": str(money(self.total_cost)),
            "overall_margin": str(self.overall_margin.quantize(Decimal("0.0001"))),
            "margin_type": self.margin_type,
            "margin_label": self.guardrail.label,
            "below_guardrail": self.below_guardrail,
            "above_guardrail": self.above_guardrail,
        }


def summarize(
    items: Sequence[LineItem],
    discount: Any = 0,
    margin_type: str = DEFAULT_MARGIN_TYPE,
) -> QuoteTotals:
    """
    Compute all quote figures in one pass.

    above_guardrail is informational only; it never blocks a quote.

    Raises:
        KeyError: Unknown margin type
        ValueError: Negative or non-numeric discount
    """
    guardrail = get_guardrail(margin_type)
    discount_value = to_decimal(discount)
    sub = subtotal(items)
    margin = overall_margin(items)
    has_items = len(items) > 0
    return QuoteTotals(
        subtotal=sub,
        discount=discount_value,
        tax=tax(sub),
        total=total(sub, discount_value),
        total_cost=total_cost(items),
        overall_margin=margin,
        margin_type=margin_type,
        guardrail=guardrail,
        below_guardrail=has_items and margin < guardrail.min,
        above_guardrail=has_items and margin > guardrail.max,
    )
