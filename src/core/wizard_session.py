"""
Wizard Session State for the Action Wizard.

Defines the step model and the immutable session value that the step
reducer transforms. A session is created when an action is opened and
is only ever replaced, never mutated.

Step flow (shared by every action, titles may differ):
    PICK -> CHOOSE -> PREVIEW -> CONFIRM -> DONE
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any


# =============================================================================
# Step Model
# =============================================================================


class StepType(StrEnum):
    """Kinds of wizard step. DONE is terminal."""

    PICK = "pick"
    CHOOSE = "choose"
    PREVIEW = "preview"
    CONFIRM = "confirm"
    DONE = "done"


@dataclass(frozen=True)
class StepDefinition:
    """One step of an action's flow.

    Attributes:
        step_id: Key under which the step's data is stored
        type: What kind of step this is
        title: Short heading shown to the user
        description: One-line explanation shown under the title
    """

    step_id: str
    type: StepType
    title: str
    description: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "step_id": self.step_id,
            "type": self.type.value,
            "title": self.title,
            "description": self.description,
        }


DEFAULT_STEPS: tuple[StepDefinition, ...] = (
    StepDefinition("pick", StepType.PICK, "Pick", "Select items to work with"),
    StepDefinition("choose", StepType.CHOOSE, "Choose", "Set your options"),
    StepDefinition("preview", StepType.PREVIEW, "Preview", "Review what will change"),
    StepDefinition("confirm", StepType.CONFIRM, "Confirm", "Confirm and save"),
    StepDefinition("done", StepType.DONE, "Done", "View results"),
)


def custom_steps(titles: Mapping[StepType, tuple[str, str]]) -> tuple[StepDefinition, ...]:
    """Default step sequence with some titles/descriptions replaced."""
    return tuple(
        StepDefinition(step.step_id, step.type, *titles[step.type]) if step.type in titles else step
        for step in DEFAULT_STEPS
    )


# =============================================================================
# Session
# =============================================================================


def freeze_step_data(data: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(data))


@dataclass(frozen=True)
class WizardSession:
    """State of one open action.

    Attributes:
        session_id: Unique identifier for this invocation
        action_id: The action being run
        steps: Step definitions, fixed for the session's lifetime
        step_index: Index of the current step
        step_data: step key -> value; keys are never removed
        busy: An async operation is in flight
        terminal: The DONE step has been reached
        celebrated: The completion celebration already fired
        error: Last user-visible error, cleared on the next success
    """

    action_id: str
    steps: tuple[StepDefinition, ...]
    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    step_index: int = 0
    step_data: Mapping[str, Any] = field(default_factory=dict)
    busy: bool = False
    terminal: bool = False
    celebrated: bool = False
    error: str | None = None

    def __post_init__(self) -> None:
        if not self.steps:
            raise ValueError("A session needs at least one step")
        if not 0 <= self.step_index < len(self.steps):
            raise ValueError(f"step_index {self.step_index} out of range for {len(self.steps)} steps")
        object.__setattr__(self, "steps", tuple(self.steps))
        if not isinstance(self.step_data, MappingProxyType):
            object.__setattr__(self, "step_data", freeze_step_data(self.step_data))

    @property
    def current_step(self) -> StepDefinition:
        return self.steps[self.step_index]

    @property
    def is_first(self) -> bool:
        return self.step_index == 0

    @property
    def is_last(self) -> bool:
        return self.step_index == len(self.steps) - 1

    def get(self, key: str, default: Any = None) -> Any:
        """Shortcut for step_data lookups."""
        return self.step_data.get(key, default)

    def to_dict(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "action_id": self.action_id,
            "step_index": self.step_index,
            "current_step": self.current_step.to_dict(),
            "step_count": len(self.steps),
            "busy": self.busy,
            "terminal": self.terminal,
            "error": self.error,
        }


def new_session(
    action_id: str,
    steps: Sequence[StepDefinition] = DEFAULT_STEPS,
    initial_data: Mapping[str, Any] | None = None,
) -> WizardSession:
    """Open a session on the first step."""
    return WizardSession(action_id=action_id, steps=tuple(steps), step_data=initial_data or {})
