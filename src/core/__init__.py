"""
Core Action System for the Action Wizard.

This package contains the step state machine and the action plumbing.

Exports:
    - WizardSession, StepDefinition, StepType: Immutable session model
    - reduce, StepController: Step reducer and its stateful wrapper
    - Action, BaseAction, ActionResult: Contract every action implements
    - ActionRegistry: Lookup table from action id to action
    - ActionRunner: Hosts one open action (validation, busy gating, submit)
    - SideEffect, SideEffectBatch: Effects handed to the host
"""

from .action_protocol import Action, ActionResult, BaseAction
from .action_registry import ActionRegistry, get_registry, set_registry
from .action_runner import ActionRunner
from .side_effects import SideEffect, SideEffectBatch, SideEffectExecutor, SideEffectType
from .step_controller import StepController, reduce
from .wizard_session import DEFAULT_STEPS, StepDefinition, StepType, WizardSession, new_session

__all__ = [
    # Session
    "WizardSession",
    "StepDefinition",
    "StepType",
    "DEFAULT_STEPS",
    "new_session",
    # Reducer
    "reduce",
    "StepController",
    # Protocol
    "Action",
    "BaseAction",
    "ActionResult",
    # Registry
    "ActionRegistry",
    "get_registry",
    "set_registry",
    # Runner
    "ActionRunner",
    # Side effects
    "SideEffect",
    "SideEffectBatch",
    "SideEffectExecutor",
    "SideEffectType",
]
