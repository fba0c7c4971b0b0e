"""
Tests for the create-design-job action.
"""

from __future__ import annotations

import pytest

from src.core.action_runner import ActionRunner
from src.core.side_effects import SideEffectType
from src.lib.exceptions import StepValidationError
from src.modules.design_brief import CreateDesignJobAction


@pytest.fixture()
def action() -> CreateDesignJobAction:
    return CreateDesignJobAction()


@pytest.fixture()
def runner(action, gateway, sample_client) -> ActionRunner:
    runner = ActionRunner(action, gateway)
    runner.select_item(sample_client)
    runner.advance()
    return runner


def test_identity(action):
    assert action.hub_id == "design"
    assert action.requires_ai
    assert action.ai_action_id == "D1"
    assert action.steps[1].title == "Write Brief"


def test_brief_is_required(runner):
    runner.set_option("brief", "   ")
    with pytest.raises(StepValidationError, match="Write a brief"):
        runner.advance()


def test_urgency_must_be_known(runner):
    runner.set_option("brief", "Mascot refresh")
    runner.set_option("urgency", "yesterday")
    with pytest.raises(StepValidationError, match="Urgency"):
        runner.advance()


def test_ai_request_carries_length_limit(action, runner):
    runner.set_option("brief", "Mascot refresh")
    request = action.build_ai_request(runner.session)
    assert request.action_id == "D1"
    assert request.context["max_length"] == 1000
    assert request.context["options"] == {"brief": "Mascot refresh"}


def test_long_brief_is_truncated(action, runner):
    runner.set_option("brief", "a" * 1200)
    payload = action.build_payload(runner.session)
    assert len(payload.brief) == 1000
    assert payload.title == "Design for Lincoln High"
    assert payload.org_id == 55
    assert payload.urgency == "normal"


@pytest.mark.asyncio
async def test_user_brief_is_kept_by_default(action, runner, gateway):
    runner.set_option("brief", "My own words")
    runner.set_option("requirements", "Vector files, two colours")
    runner.advance()
    await runner.generate_preview()
    runner.advance()

    await runner.confirm()

    payload = gateway.create_design_job.await_args.args[0]
    assert payload.brief == "My own words"
    assert payload.requirements == "Vector files, two colours"
    notify = runner.effects.of_type(SideEffectType.NOTIFY)[0]
    assert notify.payload == {"title": "Design Job Created", "message": "Design job DJ-0007 is pending"}
    assert runner.session.terminal


@pytest.mark.asyncio
async def test_ai_brief_can_be_chosen(action, runner, gateway):
    runner.set_option("brief", "rough notes")
    runner.set_option("urgency", "rush")
    runner.advance()
    await runner.generate_preview()
    runner.set_option("use_ai_brief", True)
    runner.advance()

    await runner.confirm()

    payload = gateway.create_design_job.await_args.args[0]
    assert payload.brief == "Draft generated by AI"
    assert payload.urgency == "rush"
