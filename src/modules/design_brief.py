"""
Create Design Job Action for the Action Wizard.

Pick a client, write a brief, let the AI draft a polished version on the
preview step, then open a design job. The user decides which brief is
submitted: their own text, or the AI draft (options["use_ai_brief"]).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from src.api.schemas import AIGenerationRequest, DesignJobCreate
from src.config.policy import BRIEF_MAX_LENGTH
from src.core.action_protocol import ActionResult, BaseAction
from src.core.wizard_session import StepType, WizardSession, custom_steps

if TYPE_CHECKING:
    from src.services.gateway import PersistenceGateway

logger = logging.getLogger(__name__)

URGENCY_LEVELS = ("low", "normal", "high", "rush")


class CreateDesignJobAction(BaseAction):
    """Brief a designer on new artwork for a client."""

    action_id = "create-design-job"
    hub_id = "design"
    title = "Create design job"
    description = "Write a brief and hand it to a designer"
    pinned = True
    requires_ai = True
    ai_action_id = "D1"
    item_label = "client"
    steps = custom_steps({
        StepType.PICK: ("Pick Client", "Select the organization the design is for"),
        StepType.CHOOSE: ("Write Brief", "Describe what needs to be designed"),
        StepType.PREVIEW: ("Preview Brief", "Review the AI-polished brief"),
        StepType.CONFIRM: ("Create Job", "Create the design job"),
        StepType.DONE: ("Done", "Design job created"),
    })

    @staticmethod
    def _options(session: WizardSession) -> dict[str, Any]:
        return dict(session.get("options") or {})

    def final_brief(self, session: WizardSession) -> str:
        options = self._options(session)
        preview = session.get("ai_preview") or {}
        if options.get("use_ai_brief") and preview.get("content"):
            brief = str(preview["content"])
        else:
            brief = str(options.get("brief") or "")
        return brief.strip()

    def _validate_choose(self, session: WizardSession) -> list[str]:
        options = self._options(session)
        errors = []
        if not str(options.get("brief") or "").strip():
            errors.append("Write a brief for the designer")
        if options.get("urgency", "normal") not in URGENCY_LEVELS:
            errors.append(f"Urgency must be one of: {', '.join(URGENCY_LEVELS)}")
        return errors

    def _validate_confirm(self, session: WizardSession) -> list[str]:
        errors = self._validate_pick(session) + self._validate_choose(session)
        if not errors and not self.final_brief(session):
            errors.append("The brief is empty")
        return errors

    def build_ai_request(self, session: WizardSession) -> AIGenerationRequest:
        request = super().build_ai_request(session)
        request.context["max_length"] = BRIEF_MAX_LENGTH
        return request

    def build_payload(self, session: WizardSession) -> DesignJobCreate:
        client = session.get("selected_item") or {}
        options = self._options(session)
        brief = self.final_brief(session)
        if len(brief) > BRIEF_MAX_LENGTH:
            logger.info("Truncating design brief from %d to %d characters", len(brief), BRIEF_MAX_LENGTH)
        return DesignJobCreate(
            title=str(options.get("title") or f"Design for {client.get('name', 'client')}"),
            org_id=client.get("id"),
            order_id=options.get("order_id"),
            brief=brief,
            requirements=options.get("requirements") or None,
            urgency=options.get("urgency", "normal"),
            designer_id=options.get("designer_id"),
        )

    async def submit(self, session: WizardSession, gateway: PersistenceGateway) -> ActionResult:
        record = await gateway.create_design_job(self.build_payload(session))
        return ActionResult(
            title="Design Job Created",
            message=f"Design job {record.job_code} is {record.status}",
            data={"design_job": record.model_dump()},
            invalidate=["design-jobs"],
        )
