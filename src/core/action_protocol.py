"""
Action Protocol for the Action Wizard.

Every action implements this interface. The runner looks actions up in
the registry and calls these hooks; it never branches on action ids.

BaseAction supplies defaults for the optional hooks so an action only
overrides what it actually customizes.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from src.api.schemas import AIGenerationRequest
from src.core.wizard_session import DEFAULT_STEPS, StepDefinition, WizardSession, new_session

if TYPE_CHECKING:
    from src.services.gateway import PersistenceGateway

logger = logging.getLogger(__name__)


# Hubs group actions in the host application's navigation
HubId = str  # orders | quotes | organizations | design | events


@dataclass
class ActionResult:
    """What a successful submit produced.

    Attributes:
        title: Toast title
        message: Toast body
        data: Created record(s), stored under step_data["result"]
        warnings: Non-fatal problems (partial failures) shown as warnings
        invalidate: Host resource lists to refresh
    """

    title: str
    message: str
    data: dict[str, Any] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)
    invalidate: list[str] = field(default_factory=list)


class Action(Protocol):
    """Every action implements this interface. No exceptions."""

    # Identity
    action_id: str  # "create-quote", "add-colors", ...
    hub_id: HubId
    title: str
    description: str
    pinned: bool  # Shown on the hub's quick-action deck
    requires_ai: bool  # Preview step needs generated content before advancing
    ai_action_id: str | None
    steps: tuple[StepDefinition, ...]

    def open_session(self, initial_data: Mapping[str, Any] | None = None) -> WizardSession:
        """Create a session positioned on the first step."""
        ...

    def on_select(self, session: WizardSession, item: Mapping[str, Any]) -> dict[str, Any]:
        """Extra step data derived from the picked item (merged by the runner)."""
        ...

    def validate_step(self, step: StepDefinition, session: WizardSession) -> list[str]:
        """Problems that block leaving `step`. Empty list means OK."""
        ...

    def build_ai_request(self, session: WizardSession) -> AIGenerationRequest:
        """Payload for the preview step's AI generation."""
        ...

    async def submit(self, session: WizardSession, gateway: PersistenceGateway) -> ActionResult:
        """Package the session and hand it to the gateway.

        Raises:
            GatewayError: If the primary create call fails
        """
        ...


class BaseAction:
    """
    Defaults for the optional Action hooks.

    Subclasses set the identity attributes and implement submit(); they
    override validate_step() per step type through _validate_<type>
    methods, e.g. _validate_choose().
    """

    action_id: str
    hub_id: HubId
    title: str
    description: str = ""
    pinned: bool = False
    requires_ai: bool = False
    ai_action_id: str | None = None
    steps: tuple[StepDefinition, ...] = DEFAULT_STEPS

    # Label used in messages ("order", "client", ...)
    item_label: str = "item"

    def initial_data(self) -> dict[str, Any]:
        return {}

    def open_session(self, initial_data: Mapping[str, Any] | None = None) -> WizardSession:
        data = self.initial_data()
        if initial_data:
            data.update(initial_data)
        session = new_session(self.action_id, self.steps, data)
        logger.info("Opened action '%s' (session %s)", self.action_id, session.session_id)
        return session

    def on_select(self, session: WizardSession, item: Mapping[str, Any]) -> dict[str, Any]:
        return {}

    def validate_step(self, step: StepDefinition, session: WizardSession) -> list[str]:
        validator = getattr(self, f"_validate_{step.type.value}", None)
        if validator is None:
            return []
        return list(validator(session))

    def _validate_pick(self, session: WizardSession) -> list[str]:
        if session.get("selected_item") is None:
            return [f"Select a {self.item_label} to continue"]
        return []

    def build_ai_request(self, session: WizardSession) -> AIGenerationRequest:
        return AIGenerationRequest(
            action_id=self.ai_action_id or self.action_id,
            hub_id=self.hub_id,
            context={
                "selected_item": session.get("selected_item"),
                "options": dict(session.get("options") or {}),
            },
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "action_id": self.action_id,
            "hub_id": self.hub_id,
            "title": self.title,
            "description": self.description,
            "pinned": self.pinned,
            "requires_ai": self.requires_ai,
            "steps": [step.to_dict() for step in self.steps],
        }
