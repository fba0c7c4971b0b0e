"""
Tests for the ActionRunner.

Covers:
- Validation gates on advance and confirm
- The confirm step can only be left through confirm()
- Busy rejection: a duplicate submission never reaches the gateway
- Gateway failures keep the session on its step with the error recorded
- AI preview gating for actions that require generated content
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
from unittest.mock import AsyncMock

import pytest

from src.api.schemas import AIGenerationResult
from src.core.action_protocol import ActionResult, BaseAction
from src.core.action_runner import AI_PREVIEW, RESULT, ActionRunner
from src.core.side_effects import SideEffectType
from src.core.wizard_session import StepType
from src.lib.errors import GATEWAY_ERROR, PARTIAL_FAILURE
from src.lib.exceptions import (
    DuplicateSubmissionError,
    GatewayError,
    StateError,
    StepTransitionError,
    StepValidationError,
)


class SaveThingAction(BaseAction):
    """Minimal action: pick an item, submit it through gateway.save()."""

    action_id = "save-thing"
    hub_id = "orders"
    title = "Save a thing"
    item_label = "thing"

    def __init__(self, requires_ai: bool = False, warnings: list[str] | None = None) -> None:
        self.requires_ai = requires_ai
        self.ai_action_id = "T1" if requires_ai else None
        self.warnings = warnings or []

    def on_select(self, session, item):
        return {"picked_name": item.get("name")}

    async def submit(self, session, gateway):
        record = await gateway.save(session.get("selected_item"))
        return ActionResult(
            title="Saved",
            message=f"Saved {record['code']}",
            data={"record": record},
            warnings=list(self.warnings),
            invalidate=["things"],
        )


@pytest.fixture()
def gateway() -> AsyncMock:
    mock = AsyncMock()
    mock.save.return_value = {"id": 1, "code": "T-1"}
    mock.generate_ai_content.return_value = AIGenerationResult(content="Generated")
    return mock


def runner_on(step: StepType, gateway, action=None) -> ActionRunner:
    """A runner whose session sits on `step` with an item already picked."""
    action = action or SaveThingAction()
    runner = ActionRunner(action, gateway)
    runner.select_item({"id": 9, "name": "Widget"})
    while runner.session.current_step.type is not step:
        if runner.session.current_step.type is StepType.PREVIEW and action.requires_ai:
            runner.controller.merge_step_data(AI_PREVIEW, {"content": "seed"})
        runner.advance()
    return runner


# =============================================================================
# Navigation
# =============================================================================


class TestNavigation:
    def test_pick_requires_selection(self, gateway) -> None:
        runner = ActionRunner(SaveThingAction(), gateway)
        with pytest.raises(StepValidationError) as exc_info:
            runner.advance()
        assert exc_info.value.errors == ["Select a thing to continue"]
        assert runner.session.step_index == 0

    def test_select_item_merges_derived_data(self, gateway) -> None:
        runner = ActionRunner(SaveThingAction(), gateway)
        runner.select_item({"id": 9, "name": "Widget"})
        assert runner.session.get("selected_item") == {"id": 9, "name": "Widget"}
        assert runner.session.get("picked_name") == "Widget"

    def test_set_option_merges_into_options(self, gateway) -> None:
        runner = ActionRunner(SaveThingAction(), gateway)
        runner.set_option("a", 1)
        runner.set_option("b", 2)
        assert runner.session.get("options") == {"a": 1, "b": 2}

    def test_advance_from_confirm_is_refused(self, gateway) -> None:
        runner = runner_on(StepType.CONFIRM, gateway)
        with pytest.raises(StepTransitionError):
            runner.advance()
        gateway.save.assert_not_awaited()

    def test_retreat_keeps_data(self, gateway) -> None:
        runner = runner_on(StepType.PREVIEW, gateway)
        runner.retreat()
        runner.retreat()
        assert runner.session.current_step.type is StepType.PICK
        assert runner.session.get("selected_item") == {"id": 9, "name": "Widget"}

    def test_retreat_while_busy_is_refused(self, gateway) -> None:
        runner = runner_on(StepType.CHOOSE, gateway)
        runner.controller.set_busy(True)
        with pytest.raises(StateError):
            runner.retreat()

    def test_advance_while_busy_is_refused(self, gateway) -> None:
        runner = runner_on(StepType.CHOOSE, gateway)
        runner.controller.set_busy(True)
        with pytest.raises(DuplicateSubmissionError):
            runner.advance()


# =============================================================================
# Confirm
# =============================================================================


class TestConfirm:
    @pytest.mark.asyncio
    async def test_success_stores_result_and_finishes(self, gateway) -> None:
        runner = runner_on(StepType.CONFIRM, gateway)

        session = await runner.confirm()

        assert session.current_step.type is StepType.DONE
        assert session.terminal
        assert not session.busy
        assert session.get(RESULT) == {"record": {"id": 1, "code": "T-1"}}
        effects = runner.drain_effects()
        assert [e.effect_type for e in effects] == [
            SideEffectType.NOTIFY,
            SideEffectType.CELEBRATE,
            SideEffectType.INVALIDATE,
        ]
        assert effects[0].payload == {"title": "Saved", "message": "Saved T-1"}
        assert effects[2].payload == {"resource": "things"}

    @pytest.mark.asyncio
    async def test_confirm_off_confirm_step_is_refused(self, gateway) -> None:
        runner = runner_on(StepType.PREVIEW, gateway)
        with pytest.raises(StepTransitionError):
            await runner.confirm()

    @pytest.mark.asyncio
    async def test_incomplete_data_never_reaches_gateway(self, gateway) -> None:
        runner = runner_on(StepType.CONFIRM, gateway)
        runner.controller.merge_step_data("selected_item", None)
        with pytest.raises(StepValidationError):
            await runner.confirm()
        gateway.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_busy_session_rejects_duplicate_without_gateway_call(self, gateway) -> None:
        action = SaveThingAction()
        confirm_session = runner_on(StepType.CONFIRM, gateway, action).session
        runner = ActionRunner(action, gateway, session=replace(confirm_session, busy=True))

        with pytest.raises(DuplicateSubmissionError):
            await runner.confirm()

        gateway.save.assert_not_awaited()
        assert runner.session.current_step.type is StepType.CONFIRM

    @pytest.mark.asyncio
    async def test_concurrent_confirms_submit_once(self, gateway) -> None:
        async def slow_save(item):
            await asyncio.sleep(0.01)
            return {"id": 1, "code": "T-1"}

        gateway.save.side_effect = slow_save
        runner = runner_on(StepType.CONFIRM, gateway)

        results = await asyncio.gather(runner.confirm(), runner.confirm(), return_exceptions=True)

        assert sum(isinstance(r, DuplicateSubmissionError) for r in results) == 1
        assert gateway.save.await_count == 1
        assert runner.session.terminal

    @pytest.mark.asyncio
    async def test_gateway_failure_stays_on_confirm(self, gateway) -> None:
        gateway.save.side_effect = GatewayError("Database down", status_code=503)
        runner = runner_on(StepType.CONFIRM, gateway)

        session = await runner.confirm()

        assert session.current_step.type is StepType.CONFIRM
        assert not session.busy
        assert not session.terminal
        assert session.error == "Database down"
        errors = runner.effects.of_type(SideEffectType.ERROR)
        assert len(errors) == 1
        assert errors[0].payload["code"] == GATEWAY_ERROR
        assert errors[0].payload["details"] == {"status_code": 503}
        assert runner.effects.of_type(SideEffectType.CELEBRATE) == []

    @pytest.mark.asyncio
    async def test_retry_after_failure_succeeds_and_clears_error(self, gateway) -> None:
        gateway.save.side_effect = [GatewayError("timeout"), {"id": 2, "code": "T-2"}]
        runner = runner_on(StepType.CONFIRM, gateway)

        await runner.confirm()
        session = await runner.confirm()

        assert session.terminal
        assert session.error is None
        assert gateway.save.await_count == 2

    @pytest.mark.asyncio
    async def test_unexpected_error_clears_busy_and_propagates(self, gateway) -> None:
        gateway.save.side_effect = RuntimeError("bug")
        runner = runner_on(StepType.CONFIRM, gateway)

        with pytest.raises(RuntimeError):
            await runner.confirm()

        assert not runner.session.busy
        assert runner.session.current_step.type is StepType.CONFIRM

    @pytest.mark.asyncio
    async def test_partial_failure_warnings(self, gateway) -> None:
        action = SaveThingAction(warnings=["Contact was not saved"])
        runner = runner_on(StepType.CONFIRM, gateway, action)

        await runner.confirm()

        warnings = runner.effects.of_type(SideEffectType.WARN)
        assert [w.payload["code"] for w in warnings] == [PARTIAL_FAILURE]
        assert runner.session.terminal

    @pytest.mark.asyncio
    async def test_retreat_after_done_is_refused(self, gateway) -> None:
        runner = runner_on(StepType.CONFIRM, gateway)
        await runner.confirm()
        with pytest.raises(StateError):
            runner.retreat()


# =============================================================================
# AI Preview
# =============================================================================


class TestAIPreview:
    def test_preview_blocks_until_generated(self, gateway) -> None:
        runner = ActionRunner(SaveThingAction(requires_ai=True), gateway)
        runner.select_item({"id": 9, "name": "Widget"})
        runner.advance()
        runner.advance()
        with pytest.raises(StepValidationError, match="Generate the preview"):
            runner.advance()

    def test_preview_is_optional_without_ai(self, gateway) -> None:
        runner = runner_on(StepType.PREVIEW, gateway)
        runner.advance()
        assert runner.session.current_step.type is StepType.CONFIRM

    @pytest.mark.asyncio
    async def test_generate_preview_stores_content(self, gateway) -> None:
        runner = ActionRunner(SaveThingAction(requires_ai=True), gateway)
        runner.select_item({"id": 9, "name": "Widget"})
        runner.set_option("tone", "bold")
        runner.advance()
        runner.advance()

        await runner.generate_preview()

        request = gateway.generate_ai_content.await_args.args[0]
        assert request.action_id == "T1"
        assert request.hub_id == "orders"
        assert request.context == {"selected_item": {"id": 9, "name": "Widget"}, "options": {"tone": "bold"}}
        assert runner.session.get(AI_PREVIEW) == {"content": "Generated"}
        runner.advance()
        assert runner.session.current_step.type is StepType.CONFIRM

    @pytest.mark.asyncio
    async def test_generate_preview_failure(self, gateway) -> None:
        gateway.generate_ai_content.side_effect = GatewayError("AI unavailable")
        runner = ActionRunner(SaveThingAction(requires_ai=True), gateway)
        runner.select_item({"id": 9})
        runner.advance()
        runner.advance()

        await runner.generate_preview()

        assert runner.session.get(AI_PREVIEW) is None
        assert runner.session.error == "AI unavailable"
        assert runner.effects.of_type(SideEffectType.ERROR)[0].payload["title"] == "AI Error"

    @pytest.mark.asyncio
    async def test_generate_preview_off_preview_step(self, gateway) -> None:
        runner = ActionRunner(SaveThingAction(requires_ai=True), gateway)
        with pytest.raises(StepTransitionError):
            await runner.generate_preview()
        gateway.generate_ai_content.assert_not_awaited()
