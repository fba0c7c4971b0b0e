"""
Step Controller for the Action Wizard.

The step state machine is a pure reducer: reduce(session, event) returns
a new WizardSession and never touches the old one. StepController wraps
the reducer, keeps the current session, logs transitions, and emits the
one-time celebration when the DONE step is first reached.

Navigation is strict +/-1. Moving past either end raises
StepTransitionError instead of wrapping or clamping. Busy gating is not
done here; callers (ActionRunner) check `busy` before starting work.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, TypeAlias

from src.core.side_effects import SideEffect, SideEffectBatch
from src.core.wizard_session import StepType, WizardSession, freeze_step_data
from src.lib.exceptions import StepTransitionError

logger = logging.getLogger(__name__)


# =============================================================================
# Events
# =============================================================================


@dataclass(frozen=True)
class Advance:
    pass


@dataclass(frozen=True)
class Retreat:
    pass


@dataclass(frozen=True)
class MergeStepData:
    """Replace step_data[key] (shallow; other keys untouched)."""

    key: str
    value: Any


@dataclass(frozen=True)
class SetBusy:
    busy: bool


@dataclass(frozen=True)
class ReportError:
    message: str


@dataclass(frozen=True)
class ClearError:
    pass


@dataclass(frozen=True)
class MarkCelebrated:
    pass


StepEvent: TypeAlias = Advance | Retreat | MergeStepData | SetBusy | ReportError | ClearError | MarkCelebrated


# =============================================================================
# Reducer
# =============================================================================


def reduce(session: WizardSession, event: StepEvent) -> WizardSession:
    """
    Apply one event to a session.

    Raises:
        StepTransitionError: Advance on the last step or Retreat on the first
        TypeError: Unknown event type
    """
    if isinstance(event, Advance):
        if session.step_index >= len(session.steps) - 1:
            raise StepTransitionError(
                f"Cannot advance past step {session.step_index} of {len(session.steps)}"
            )
        next_index = session.step_index + 1
        reached_done = session.steps[next_index].type is StepType.DONE
        return replace(session, step_index=next_index, terminal=session.terminal or reached_done)

    if isinstance(event, Retreat):
        if session.step_index <= 0:
            raise StepTransitionError("Cannot retreat before the first step")
        return replace(session, step_index=session.step_index - 1)

    if isinstance(event, MergeStepData):
        merged = dict(session.step_data)
        merged[event.key] = event.value
        return replace(session, step_data=freeze_step_data(merged))

    if isinstance(event, SetBusy):
        return replace(session, busy=event.busy)

    if isinstance(event, ReportError):
        return replace(session, error=event.message)

    if isinstance(event, ClearError):
        return replace(session, error=None)

    if isinstance(event, MarkCelebrated):
        return replace(session, celebrated=True)

    raise TypeError(f"Unknown step event: {event!r}")


# =============================================================================
# Controller
# =============================================================================


class StepController:
    """Holds the current session and drives it through the reducer.

    Example:
        controller = StepController(new_session("create-quote"))
        controller.merge_step_data("pick", {"org_id": 7})
        controller.advance()
    """

    def __init__(self, session: WizardSession, effects: SideEffectBatch | None = None) -> None:
        self._session = session
        self.effects = effects if effects is not None else SideEffectBatch(
            session_id=session.session_id, source_action=session.action_id
        )

    @property
    def session(self) -> WizardSession:
        return self._session

    def dispatch(self, event: StepEvent) -> WizardSession:
        """Reduce one event into the current session and fire any due celebration."""
        self._session = reduce(self._session, event)
        self._maybe_celebrate()
        return self._session

    def _maybe_celebrate(self) -> None:
        session = self._session
        if session.terminal and not session.celebrated:
            self.effects.add(SideEffect.celebrate(session.action_id, session.session_id))
            self._session = reduce(session, MarkCelebrated())
            logger.info("Action '%s' completed (session %s)", session.action_id, session.session_id)

    def advance(self) -> WizardSession:
        before = self._session.current_step.step_id
        session = self.dispatch(Advance())
        logger.debug(
            "Session %s advanced %s -> %s", session.session_id, before, session.current_step.step_id
        )
        return session

    def retreat(self) -> WizardSession:
        before = self._session.current_step.step_id
        session = self.dispatch(Retreat())
        logger.debug(
            "Session %s retreated %s -> %s", session.session_id, before, session.current_step.step_id
        )
        return session

    def merge_step_data(self, key: str, value: Any) -> WizardSession:
        return self.dispatch(MergeStepData(key, value))

    def set_busy(self, busy: bool) -> WizardSession:
        logger.debug("Session %s busy=%s", self._session.session_id, busy)
        return self.dispatch(SetBusy(busy))

    def report_error(self, message: str) -> WizardSession:
        return self.dispatch(ReportError(message))

    def clear_error(self) -> WizardSession:
        return self.dispatch(ClearError())
