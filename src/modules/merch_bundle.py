"""
Setup Merchandise Action for the Action Wizard.

Allocates product stock to an event as a merchandise bundle. Allocations
live in step_data["allocations"] as {product_id: quantity}; setting a
quantity of zero or less drops the product. The design style and the
team-store flag come from the choose step's options.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from src.api.schemas import MerchAllocation, MerchBundleCreate
from src.core.action_protocol import ActionResult, BaseAction
from src.core.wizard_session import WizardSession

if TYPE_CHECKING:
    from src.core.action_runner import ActionRunner
    from src.services.gateway import PersistenceGateway

ALLOCATIONS = "allocations"


class SetupMerchAction(BaseAction):
    """Allocate products for event sales."""

    action_id = "setup-merch"
    hub_id = "events"
    title = "Setup merchandise"
    description = "Allocate products for event sales"
    pinned = True
    item_label = "event"

    def initial_data(self) -> dict[str, Any]:
        return {ALLOCATIONS: {}}

    def set_allocation(self, runner: ActionRunner, product_id: Any, quantity: int) -> None:
        key = str(product_id)

        def _update(allocations: dict[str, int] | None) -> dict[str, int]:
            updated = dict(allocations or {})
            if quantity > 0:
                updated[key] = int(quantity)
            else:
                updated.pop(key, None)
            return updated

        runner.update_step_data(ALLOCATIONS, _update)

    @staticmethod
    def total_allocated(session: WizardSession) -> int:
        return sum((session.get(ALLOCATIONS) or {}).values())

    def bundle_name(self, session: WizardSession) -> str:
        options = session.get("options") or {}
        event = session.get("selected_item") or {}
        return str(options.get("bundle_name") or f"{event.get('name', 'Event')} merchandise").strip()

    def _validate_choose(self, session: WizardSession) -> list[str]:
        if not session.get(ALLOCATIONS):
            return ["Allocate at least one product"]
        return []

    def _validate_confirm(self, session: WizardSession) -> list[str]:
        return self._validate_pick(session) + self._validate_choose(session)

    def build_payload(self, session: WizardSession) -> MerchBundleCreate:
        event = session.get("selected_item") or {}
        options = session.get("options") or {}
        return MerchBundleCreate(
            event_id=event["id"],
            name=self.bundle_name(session),
            allocations=[
                MerchAllocation(product_id=product_id, quantity=quantity)
                for product_id, quantity in (session.get(ALLOCATIONS) or {}).items()
            ],
            design_style=str(options.get("design_style") or "").strip() or None,
            team_store=bool(options.get("team_store")),
        )

    async def submit(self, session: WizardSession, gateway: PersistenceGateway) -> ActionResult:
        record = await gateway.create_merch_bundle(self.build_payload(session))
        return ActionResult(
            title="Merchandise Ready",
            message=f"Bundle {record.bundle_code} allocated {record.total_allocated} items",
            data={"merch_bundle": record.model_dump()},
            invalidate=["events"],
        )
