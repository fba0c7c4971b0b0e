"""
Action Runner for the Action Wizard.

Hosts one open action: owns its StepController, gates transitions on the
action's validation, runs the async gateway calls, and turns their
outcome into session updates and side effects.

Async flow for confirm() and generate_preview():
1. Reject if the session is busy (DuplicateSubmissionError)
2. Set busy, await the gateway
3. Always clear busy
4. Success: store the result, notify, advance
   Failure (GatewayError): record the error, error toast, stay put
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, TypeVar

from src.core.action_protocol import Action
from src.core.side_effects import SideEffect, SideEffectBatch
from src.core.step_controller import StepController
from src.core.wizard_session import StepType, WizardSession
from src.lib.errors import PARTIAL_FAILURE, build_error_from_exception
from src.lib.exceptions import (
    DuplicateSubmissionError,
    GatewayError,
    StateError,
    StepTransitionError,
    StepValidationError,
)
from src.services.gateway import PersistenceGateway

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Well-known step_data keys shared by all actions
SELECTED_ITEM = "selected_item"
OPTIONS = "options"
AI_PREVIEW = "ai_preview"
RESULT = "result"


class ActionRunner:
    """Drives one action session from pick to done.

    Example:
        runner = ActionRunner(registry.get("create-quote"), gateway)
        runner.select_item({"id": 7, "name": "Lincoln High"})
        runner.advance()
        ...
        await runner.confirm()
        for effect in runner.drain_effects():
            host.show(effect)
    """

    def __init__(
        self,
        action: Action,
        gateway: PersistenceGateway,
        session: WizardSession | None = None,
    ) -> None:
        self.action = action
        self.gateway = gateway
        session = session or action.open_session()
        self.controller = StepController(
            session,
            SideEffectBatch(session_id=session.session_id, source_action=action.action_id),
        )

    @property
    def session(self) -> WizardSession:
        return self.controller.session

    @property
    def effects(self) -> SideEffectBatch:
        return self.controller.effects

    def drain_effects(self) -> list[SideEffect]:
        """Hand all pending side effects to the host."""
        return self.effects.drain()

    # =========================================================================
    # Step Data
    # =========================================================================

    def update_step_data(self, key: str, update: Callable[[Any], Any], default: Any = None) -> WizardSession:
        """Read-modify-write one step_data key in a single reducer event."""
        return self.controller.merge_step_data(key, update(self.session.get(key, default)))

    def select_item(self, item: Mapping[str, Any]) -> WizardSession:
        """Record the picked item plus any data the action derives from it."""
        derived = self.action.on_select(self.session, item)
        self.controller.merge_step_data(SELECTED_ITEM, dict(item))
        for key, value in derived.items():
            self.controller.merge_step_data(key, value)
        return self.session

    def set_option(self, key: str, value: Any) -> WizardSession:
        def _set(options: Mapping[str, Any] | None) -> dict[str, Any]:
            merged = dict(options or {})
            merged[key] = value
            return merged

        return self.update_step_data(OPTIONS, _set)

    def warn(self, title: str, message: str, code: str | None = None) -> None:
        self.effects.add_warn(title, message, code)

    # =========================================================================
    # Navigation
    # =========================================================================

    def _check_not_busy(self, operation: str) -> None:
        if self.session.busy:
            logger.warning(
                "Rejected %s on busy session %s (%s)",
                operation, self.session.session_id, self.action.action_id,
            )
            raise DuplicateSubmissionError(f"Cannot {operation} while a request is in flight")

    def _check_step(self) -> None:
        step = self.session.current_step
        errors = self.action.validate_step(step, self.session)
        if step.type is StepType.PREVIEW and self.action.requires_ai and self.session.get(AI_PREVIEW) is None:
            errors.append("Generate the preview before continuing")
        if errors:
            logger.debug("Step '%s' blocked: %s", step.step_id, errors)
            raise StepValidationError(errors)

    def advance(self) -> WizardSession:
        """
        Move to the next step after validating the current one.

        The confirm step is left only through confirm().

        Raises:
            DuplicateSubmissionError: Session is busy
            StepValidationError: Current step is incomplete
            StepTransitionError: Already on the last step, or on confirm
        """
        self._check_not_busy("advance")
        if self.session.current_step.type is StepType.CONFIRM:
            raise StepTransitionError("Use confirm() to submit from the confirm step")
        self._check_step()
        return self.controller.advance()

    def retreat(self) -> WizardSession:
        """
        Go back one step; collected data is kept.

        Raises:
            StateError: Session is busy or already finished
            StepTransitionError: Already on the first step
        """
        if self.session.busy:
            raise StateError("Cannot go back while a request is in flight")
        if self.session.terminal:
            raise StateError("The action is already complete")
        return self.controller.retreat()

    # =========================================================================
    # Async Operations
    # =========================================================================

    async def run_busy(
        self,
        operation: str,
        call: Callable[[], Awaitable[T]],
        error_title: str = "Error",
    ) -> T | None:
        """
        Await one gateway-backed call with the session marked busy.

        Returns:
            The call's result, or None if it raised GatewayError (the error
            is recorded on the session and an error toast is queued)

        Raises:
            DuplicateSubmissionError: Session is already busy
        """
        self._check_not_busy(operation)
        self.controller.set_busy(True)
        try:
            result = await call()
        except GatewayError as e:
            logger.warning("%s failed for '%s': %s", operation, self.action.action_id, e)
            self.controller.set_busy(False)
            self.controller.report_error(str(e))
            self.effects.add(SideEffect.error(error_title, build_error_from_exception(e)))
            return None
        except Exception:
            # busy is cleared before anything propagates
            self.controller.set_busy(False)
            raise
        self.controller.set_busy(False)
        self.controller.clear_error()
        return result

    async def generate_preview(self) -> WizardSession:
        """
        Fetch AI content for the preview step and store it under "ai_preview".

        On GatewayError the session records the error and stays put.

        Raises:
            DuplicateSubmissionError: Session is busy
            StepTransitionError: Not on the preview step
        """
        self._check_not_busy("generate a preview")
        if self.session.current_step.type is not StepType.PREVIEW:
            raise StepTransitionError("Previews are generated on the preview step")

        request = self.action.build_ai_request(self.session)
        result = await self.run_busy(
            "generate a preview", lambda: self.gateway.generate_ai_content(request), "AI Error"
        )
        if result is None:
            return self.session
        return self.controller.merge_step_data(AI_PREVIEW, result.model_dump())

    async def confirm(self) -> WizardSession:
        """
        Submit the session through the action and move to "done".

        On GatewayError the session records the error and stays on confirm.

        Raises:
            DuplicateSubmissionError: Session is busy (never reaches the gateway)
            StepTransitionError: Not on the confirm step
            StepValidationError: Data is incomplete (never reaches the gateway)
        """
        self._check_not_busy("submit")
        if self.session.current_step.type is not StepType.CONFIRM:
            raise StepTransitionError("Submissions are made from the confirm step")
        self._check_step()

        session = self.session
        result = await self.run_busy("submit", lambda: self.action.submit(session, self.gateway))
        if result is None:
            return self.session

        self.controller.merge_step_data(RESULT, result.data)
        self.effects.add_notify(result.title, result.message)
        for warning in result.warnings:
            logger.warning("Partial failure in '%s': %s", self.action.action_id, warning)
            self.effects.add_warn("Partially saved", warning, PARTIAL_FAILURE)
        for resource in result.invalidate:
            self.effects.add(SideEffect.invalidate(resource))
        return self.controller.advance()
