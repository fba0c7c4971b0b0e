"""
Quote Builder Actions for the Action Wizard.

Two actions share the line-item editor and the margin-guarded totals:
    - create-quote (quotes hub): start from a client, add lines by hand
    - quote-from-order (orders hub): seed lines from an existing order,
      AI-drafted preview

Line items live in step_data["line_items"] as a tuple of LineItem. Every
edit replaces the whole tuple through the runner, and totals are
recomputed from it on demand, never stored.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from datetime import date, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from src.api.schemas import QuoteCreate, QuoteLineSummary
from src.config.policy import DEFAULT_MARGIN_TYPE, QUOTE_VALIDITY_DAYS, get_guardrail
from src.core.action_protocol import ActionResult, BaseAction
from src.core.wizard_session import StepType, WizardSession, custom_steps
from src.services import quote_calculator as calc
from src.services.quote_calculator import LineItem, QuoteTotals

if TYPE_CHECKING:
    from src.core.action_runner import ActionRunner
    from src.services.gateway import PersistenceGateway

logger = logging.getLogger(__name__)

LINE_ITEMS = "line_items"
DISCOUNT = "discount"
MARGIN_TYPE = "margin_type"


def valid_until(today: date | None = None) -> date:
    """Expiry date for a quote created today."""
    return (today or date.today()) + timedelta(days=QUOTE_VALIDITY_DAYS)


class QuoteActionBase(BaseAction, ABC):
    """Line-item editing, totals, and quote submission."""

    def initial_data(self) -> dict[str, Any]:
        return {LINE_ITEMS: (), DISCOUNT: Decimal("0"), MARGIN_TYPE: DEFAULT_MARGIN_TYPE}

    # =========================================================================
    # Line Item Editing
    # =========================================================================

    @staticmethod
    def line_items(session: WizardSession) -> tuple[LineItem, ...]:
        return tuple(session.get(LINE_ITEMS) or ())

    def add_line_item(self, runner: ActionRunner, name: str, **fields: Any) -> LineItem:
        """Append a new line item built from raw form input."""
        item = calc.new_line_item(name, **fields)
        runner.update_step_data(LINE_ITEMS, lambda items: (*(items or ()), item))
        return item

    def edit_line_item(self, runner: ActionRunner, item_id: str, field_name: str, value: Any) -> None:
        """Change one field of one line; quantity is clamped to at least 1."""
        runner.update_step_data(
            LINE_ITEMS, lambda items: tuple(calc.update_line_item(items or (), item_id, field_name, value))
        )

    def remove_line_item(self, runner: ActionRunner, item_id: str) -> None:
        runner.update_step_data(LINE_ITEMS, lambda items: tuple(calc.remove_line_item(items or (), item_id)))

    def set_discount(self, runner: ActionRunner, value: Any) -> None:
        """
        Raises:
            ValueError: If the discount is negative or not a number
        """
        discount = calc.to_decimal(value)
        if discount < 0:
            raise ValueError("Discount must not be negative")
        runner.controller.merge_step_data(DISCOUNT, discount)

    def set_margin_type(self, runner: ActionRunner, margin_type: str) -> None:
        """
        Raises:
            KeyError: If the margin type has no guardrail
        """
        get_guardrail(margin_type)
        runner.controller.merge_step_data(MARGIN_TYPE, margin_type)

    def totals(self, session: WizardSession) -> QuoteTotals:
        """Live figures for the current lines, discount, and margin type."""
        return calc.summarize(
            self.line_items(session),
            discount=session.get(DISCOUNT, Decimal("0")),
            margin_type=session.get(MARGIN_TYPE, DEFAULT_MARGIN_TYPE),
        )

    # =========================================================================
    # Validation
    # =========================================================================

    def _validate_choose(self, session: WizardSession) -> list[str]:
        items = self.line_items(session)
        if not items:
            return ["Add at least one line item"]
        return [f"Line {index} needs a name" for index, item in enumerate(items, start=1) if not item.name]

    def _validate_confirm(self, session: WizardSession) -> list[str]:
        return self._validate_pick(session) + self._validate_choose(session)

    # =========================================================================
    # Submission
    # =========================================================================

    @abstractmethod
    def quote_name(self, session: WizardSession) -> str:
        pass

    @abstractmethod
    def quote_refs(self, session: WizardSession) -> dict[str, Any]:
        """org/order/salesperson references and notes for the payload."""
        pass

    def build_payload(self, session: WizardSession, today: date | None = None) -> QuoteCreate:
        totals = self.totals(session)
        return QuoteCreate(
            name=self.quote_name(session),
            valid_until=valid_until(today),
            margin_type=totals.guardrail.label,
            line_items=[
                QuoteLineSummary(
                    name=item.name,
                    description=item.description,
                    quantity=item.quantity,
                    unit_cost=calc.money(item.unit_cost),
                    unit_price=calc.money(item.unit_price),
                    line_total=calc.money(item.line_total),
                )
                for item in self.line_items(session)
            ],
            subtotal=calc.money(totals.subtotal),
            discount=calc.money(totals.discount),
            tax=calc.money(totals.tax),
            total=calc.money(totals.total),
            overall_margin=totals.overall_margin.quantize(Decimal("0.0001")),
            **self.quote_refs(session),
        )

    async def submit(self, session: WizardSession, gateway: PersistenceGateway) -> ActionResult:
        payload = self.build_payload(session)
        totals = self.totals(session)
        if totals.below_guardrail:
            logger.info(
                "Submitting quote below %s guardrail (margin %s)",
                totals.margin_type, totals.overall_margin,
            )
        record = await gateway.create_quote(payload)
        return ActionResult(
            title="Quote Created",
            message=f"Quote {record.quote_code} has been created as a draft",
            data={"quote": record.model_dump(), "totals": totals.to_dict()},
            invalidate=["quotes"],
        )


class CreateQuoteAction(QuoteActionBase):
    """Start a new quote from scratch for a client organization."""

    action_id = "create-quote"
    hub_id = "quotes"
    title = "Create new quote"
    description = "Start a new quote from scratch"
    pinned = True
    item_label = "client"

    def quote_name(self, session: WizardSession) -> str:
        options = session.get("options") or {}
        if options.get("quote_name"):
            return str(options["quote_name"]).strip()
        client = session.get("selected_item") or {}
        return f"Quote for {client.get('name', 'client')}"

    def quote_refs(self, session: WizardSession) -> dict[str, Any]:
        client = session.get("selected_item") or {}
        options = session.get("options") or {}
        return {
            "org_id": client.get("id"),
            "contact_id": options.get("contact_id"),
            "notes": options.get("notes"),
        }


class QuoteFromOrderAction(QuoteActionBase):
    """Draft a quote from an existing order's items."""

    action_id = "quote-from-order"
    hub_id = "orders"
    title = "Make a quote from order"
    description = "Generate a quote draft from an existing order"
    pinned = True
    requires_ai = True
    ai_action_id = "O1"
    item_label = "order"
    steps = custom_steps({
        StepType.PICK: ("Pick Order", "Select the order to quote from"),
        StepType.CHOOSE: ("Select Items", "Choose which items to include"),
        StepType.PREVIEW: ("Preview Quote", "Review the draft quote"),
        StepType.CONFIRM: ("Create Quote", "Create the quote draft"),
        StepType.DONE: ("Done", "Quote created successfully"),
    })

    def on_select(self, session: WizardSession, item: Mapping[str, Any]) -> dict[str, Any]:
        """Picking an order replaces the lines with the order's items."""
        items = tuple(calc.line_items_from_order(item))
        logger.debug("Seeded %d line items from order %s", len(items), item.get("id"))
        return {LINE_ITEMS: items}

    def quote_name(self, session: WizardSession) -> str:
        order = session.get("selected_item") or {}
        return f"Quote from {order.get('order_name') or order.get('order_code') or 'order'}"

    def quote_refs(self, session: WizardSession) -> dict[str, Any]:
        order = session.get("selected_item") or {}
        return {
            "org_id": order.get("org_id"),
            "order_id": order.get("id"),
            "salesperson_id": order.get("salesperson_id"),
            "notes": f"Generated from order {order.get('order_code', order.get('id'))}",
        }
