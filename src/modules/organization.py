"""
Add Client Action for the Action Wizard.

Guided onboarding of a new client organization:
    Client Type -> Basic Info -> Add Contact -> Preview -> Done

An uploaded logo is stored through the asset upload flow and its
dominant colours pre-fill the brand colours. The organization is created
first; the primary contact is best-effort. A contact failure never undoes
the organization and is reported as a partial success.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from PIL import Image
from pydantic import ValidationError

from src.api.schemas import ContactCreate, OrganizationCreate
from src.core.action_protocol import ActionResult, BaseAction
from src.core.wizard_session import StepType, WizardSession, custom_steps
from src.lib.exceptions import GatewayError
from src.services.gateway import upload_asset
from src.services.image_sampler import DominantColors, ImageColorSampler

if TYPE_CHECKING:
    from src.core.action_runner import ActionRunner
    from src.services.gateway import PersistenceGateway

logger = logging.getLogger(__name__)

CONTACT = "contact"

CLIENT_TYPES = ("school", "club", "business", "league", "nonprofit", "other")

# OrganizationCreate fields the user may set directly on the Basic Info step
_ORG_FIELDS = (
    "name",
    "city",
    "state",
    "phone",
    "email",
    "website",
    "notes",
    "brand_primary_color",
    "brand_secondary_color",
    "logo_url",
)


class AddClientAction(BaseAction):
    """Guided flow to add a new organization."""

    action_id = "add-client"
    hub_id = "organizations"
    title = "Add a new client"
    description = "Guided flow to add a new organization"
    pinned = True
    steps = custom_steps({
        StepType.PICK: ("Client Type", "Choose client type"),
        StepType.CHOOSE: ("Basic Info", "Enter organization details"),
        StepType.PREVIEW: ("Add Contact", "Add primary contact"),
        StepType.CONFIRM: ("Preview", "Review and save"),
        StepType.DONE: ("Done", "Client added"),
    })

    def __init__(self, sampler: ImageColorSampler | None = None) -> None:
        self.sampler = sampler or ImageColorSampler()

    @staticmethod
    def _options(session: WizardSession) -> dict[str, Any]:
        return dict(session.get("options") or {})

    # =========================================================================
    # Logo & Contact
    # =========================================================================

    def apply_logo_colors(self, runner: ActionRunner, image: bytes | Image.Image) -> DominantColors:
        """
        Pre-fill brand colours from a logo.

        Two or more candidates set primary and secondary, one sets only the
        primary, none leaves the options untouched.

        Raises:
            ImageDecodeError: If the image bytes cannot be decoded
        """
        dominant = self.sampler.extract_dominant_colors(image)
        if dominant.primary is not None:
            runner.set_option("brand_primary_color", dominant.primary)
        if dominant.secondary is not None:
            runner.set_option("brand_secondary_color", dominant.secondary)
        logger.debug("Logo yielded %d colour candidates", len(dominant.candidates))
        return dominant

    async def upload_logo(
        self,
        runner: ActionRunner,
        data: bytes,
        filename: str,
        content_type: str,
    ) -> str | None:
        """
        Upload a logo and record its URL; returns None if the upload failed.

        The bytes are decoded first so an unreadable file never gets uploaded.

        Raises:
            ImageDecodeError: If the bytes are not a readable image
        """
        self.apply_logo_colors(runner, data)
        ticket = await runner.run_busy(
            "upload a logo",
            lambda: upload_asset(runner.gateway, filename, content_type, data),
            "Upload failed",
        )
        if ticket is None:
            return None
        logo_url = ticket.upload_url.split("?", 1)[0]
        runner.set_option("logo_url", logo_url)
        return logo_url

    def set_contact(self, runner: ActionRunner, **fields: Any) -> None:
        """Store (or replace) the primary contact entered on the contact step."""
        contact = {key: value for key, value in fields.items() if value not in (None, "")}
        runner.controller.merge_step_data(CONTACT, contact or None)

    # =========================================================================
    # Validation
    # =========================================================================

    def _validate_pick(self, session: WizardSession) -> list[str]:
        if self._options(session).get("client_type") not in CLIENT_TYPES:
            return ["Choose what kind of client this is"]
        return []

    def _validate_choose(self, session: WizardSession) -> list[str]:
        if not str(self._options(session).get("name") or "").strip():
            return ["Organization name is required"]
        return []

    def _validate_preview(self, session: WizardSession) -> list[str]:
        contact = session.get(CONTACT)
        if not contact:
            return []
        if not str(contact.get("name") or "").strip():
            return ["Contact name is required"]
        # org_id is unknown until the organization exists; any placeholder passes
        try:
            ContactCreate(org_id=0, **contact)
        except ValidationError as e:
            return [
                f"Contact {'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in e.errors()
            ]
        return []

    def _validate_confirm(self, session: WizardSession) -> list[str]:
        return self._validate_pick(session) + self._validate_choose(session) + self._validate_preview(session)

    # =========================================================================
    # Submission
    # =========================================================================

    def build_payload(self, session: WizardSession) -> OrganizationCreate:
        options = self._options(session)
        fields = {key: options[key] for key in _ORG_FIELDS if options.get(key) not in (None, "")}
        return OrganizationCreate(client_type=options["client_type"], **fields)

    async def submit(self, session: WizardSession, gateway: PersistenceGateway) -> ActionResult:
        organization = await gateway.create_organization(self.build_payload(session))
        data: dict[str, Any] = {"organization": organization.model_dump()}
        warnings: list[str] = []

        contact = session.get(CONTACT)
        if contact:
            try:
                record = await gateway.create_contact(ContactCreate(org_id=organization.id, **contact))
                data["contact"] = record.model_dump()
            except (GatewayError, ValidationError) as e:
                logger.warning("Contact for organization %s was not created: %s", organization.id, e)
                data["contact_error"] = str(e)
                warnings.append(f"{organization.name} was added, but the contact could not be saved: {e}")

        return ActionResult(
            title="Client Added",
            message=f"{organization.name} has been added",
            data=data,
            warnings=warnings,
            invalidate=["organizations", "contacts"] if "contact" in data else ["organizations"],
        )
