"""
Push to Fulfillment Action for the Action Wizard.

Maps an order's line items to fulfillment products and submits them as a
fulfillment order. Mappings live in step_data["mappings"] as
{line_item_id: product_id}; unmapped lines are not sent.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from src.api.schemas import FulfillmentItem, FulfillmentOrderCreate
from src.core.action_protocol import ActionResult, BaseAction
from src.core.wizard_session import WizardSession

if TYPE_CHECKING:
    from src.core.action_runner import ActionRunner
    from src.services.gateway import PersistenceGateway

logger = logging.getLogger(__name__)

MAPPINGS = "mappings"

SHIPPING_METHODS = ("standard", "express", "overnight")


class PushToFulfillmentAction(BaseAction):
    """Send order items to the fulfillment partner."""

    action_id = "push-to-fulfillment"
    hub_id = "orders"
    title = "Push to fulfillment"
    description = "Send order items to the fulfillment partner"
    pinned = False
    item_label = "order"

    def initial_data(self) -> dict[str, Any]:
        return {MAPPINGS: {}}

    def on_select(self, session: WizardSession, item: Mapping[str, Any]) -> dict[str, Any]:
        """A different order invalidates earlier mappings."""
        previous = session.get("selected_item") or {}
        if previous.get("id") != item.get("id"):
            return {MAPPINGS: {}}
        return {}

    @staticmethod
    def order_lines(session: WizardSession) -> dict[str, Mapping[str, Any]]:
        order = session.get("selected_item") or {}
        return {str(line["id"]): line for line in order.get("items") or []}

    def map_item(self, runner: ActionRunner, line_item_id: Any, product_id: Any) -> None:
        """
        Raises:
            KeyError: If the line item is not part of the picked order
        """
        key = str(line_item_id)
        if key not in self.order_lines(runner.session):
            raise KeyError(f"Line item {line_item_id!r} is not on this order")
        runner.update_step_data(MAPPINGS, lambda mappings: {**(mappings or {}), key: product_id})

    def unmap_item(self, runner: ActionRunner, line_item_id: Any) -> None:
        key = str(line_item_id)
        runner.update_step_data(MAPPINGS, lambda mappings: {k: v for k, v in (mappings or {}).items() if k != key})

    def _validate_choose(self, session: WizardSession) -> list[str]:
        errors = []
        if not session.get(MAPPINGS):
            errors.append("Map at least one item to a product")
        options = session.get("options") or {}
        if options.get("shipping_method") not in SHIPPING_METHODS:
            errors.append("Choose a shipping method")
        return errors

    def _validate_confirm(self, session: WizardSession) -> list[str]:
        return self._validate_pick(session) + self._validate_choose(session)

    def build_payload(self, session: WizardSession) -> FulfillmentOrderCreate:
        order = session.get("selected_item") or {}
        options = session.get("options") or {}
        lines = self.order_lines(session)
        items = [
            FulfillmentItem(
                line_item_id=lines[line_id]["id"],
                product_id=product_id,
                quantity=max(1, int(lines[line_id].get("quantity", 1))),
            )
            for line_id, product_id in (session.get(MAPPINGS) or {}).items()
            if line_id in lines
        ]
        return FulfillmentOrderCreate(
            order_id=order["id"],
            items=items,
            shipping_method=options["shipping_method"],
            gift_message=options.get("gift_message") or None,
        )

    async def submit(self, session: WizardSession, gateway: PersistenceGateway) -> ActionResult:
        payload = self.build_payload(session)
        record = await gateway.create_fulfillment_order(payload)
        logger.info("Fulfillment order %s submitted with %d items", record.id, len(payload.items))
        return ActionResult(
            title="Sent to Fulfillment",
            message=f"Fulfillment order {record.external_order_id or record.id} is {record.status}",
            data={"fulfillment_order": record.model_dump()},
            invalidate=["orders"],
        )
