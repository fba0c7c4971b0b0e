"""
Action Registry for the Action Wizard.

Maps action ids to Action implementations and groups them by hub.
Adding an action = implement the Action protocol + register.

Example:
    registry = ActionRegistry()
    registry.register(CreateQuoteAction())

    action = registry.get("create-quote")
    session = action.open_session()
"""

from __future__ import annotations

import logging

from src.config.policy import MAX_PINNED_ACTIONS
from src.core.action_protocol import Action
from src.lib.exceptions import ActionNotFoundError

logger = logging.getLogger(__name__)


class ActionRegistry:
    """Lookup table from action id to action, in registration order."""

    def __init__(self) -> None:
        self._actions: dict[str, Action] = {}

    def register(self, action: Action) -> None:
        """Register an action.

        Raises:
            ValueError: If an action with the same id is already registered
        """
        if action.action_id in self._actions:
            raise ValueError(
                f"Action '{action.action_id}' is already registered. "
                f"Deregister the existing action first."
            )
        self._actions[action.action_id] = action
        logger.info("Registered action '%s' in hub '%s'", action.action_id, action.hub_id)

    def deregister(self, action_id: str) -> bool:
        """Remove an action. Returns False if it was not registered."""
        if self._actions.pop(action_id, None) is None:
            return False
        logger.info("Deregistered action '%s'", action_id)
        return True

    def get(self, action_id: str) -> Action:
        """Get an action by id.

        Raises:
            ActionNotFoundError: If no action has this id
        """
        action = self._actions.get(action_id)
        if action is None:
            raise ActionNotFoundError(f"No action registered as '{action_id}'")
        return action

    def is_registered(self, action_id: str) -> bool:
        return action_id in self._actions

    def list_actions(self) -> list[str]:
        return list(self._actions)

    def list_hubs(self) -> list[str]:
        """Hub ids that have at least one action, in first-registration order."""
        return list(dict.fromkeys(action.hub_id for action in self._actions.values()))

    def list_for_hub(self, hub_id: str) -> list[Action]:
        return [action for action in self._actions.values() if action.hub_id == hub_id]

    def pinned_for_hub(self, hub_id: str, limit: int = MAX_PINNED_ACTIONS) -> list[Action]:
        """Quick-action deck for a hub: pinned actions, capped at `limit`."""
        return [action for action in self.list_for_hub(hub_id) if action.pinned][:limit]

    def clear(self) -> None:
        """Remove every action. Useful for testing."""
        self._actions.clear()

    @property
    def action_count(self) -> int:
        return len(self._actions)


# Global registry instance, populated by src.modules.catalog at startup
_global_registry: ActionRegistry | None = None


def get_registry() -> ActionRegistry:
    """Get the global action registry instance."""
    global _global_registry
    if _global_registry is None:
        _global_registry = ActionRegistry()
    return _global_registry


def set_registry(registry: ActionRegistry) -> None:
    """Set the global action registry instance."""
    global _global_registry
    _global_registry = registry
