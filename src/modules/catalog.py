"""
Action Catalogue for the Action Wizard.

Registers every built-in action, grouped by hub. The host calls
register_default_actions() once at startup and then resolves actions by
id through the registry.
"""

from __future__ import annotations

import logging

from src.core.action_protocol import Action
from src.core.action_registry import ActionRegistry, get_registry
from src.modules.color_match import AddColorsAction
from src.modules.design_brief import CreateDesignJobAction
from src.modules.fulfillment import PushToFulfillmentAction
from src.modules.merch_bundle import SetupMerchAction
from src.modules.organization import AddClientAction
from src.modules.quote_builder import CreateQuoteAction, QuoteFromOrderAction

logger = logging.getLogger(__name__)


def default_actions() -> list[Action]:
    """Fresh instances of every built-in action, in display order."""
    return [
        QuoteFromOrderAction(),
        AddColorsAction(),
        PushToFulfillmentAction(),
        CreateQuoteAction(),
        AddClientAction(),
        CreateDesignJobAction(),
        SetupMerchAction(),
    ]


def register_default_actions(registry: ActionRegistry | None = None) -> ActionRegistry:
    """Register the built-in actions (skipping ids already registered)."""
    registry = registry or get_registry()
    for action in default_actions():
        if not registry.is_registered(action.action_id):
            registry.register(action)
    logger.info("Action catalogue ready: %d actions in %d hubs", registry.action_count, len(registry.list_hubs()))
    return registry
