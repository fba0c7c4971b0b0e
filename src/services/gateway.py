"""
Persistence Gateway for the Action Wizard.

The wizard never persists anything itself. Every create call goes through
a PersistenceGateway: a Protocol so tests and hosts can plug in their own
implementation, plus HttpPersistenceGateway, a thin httpx client for the
business API.

All HTTP and transport failures surface as GatewayError. There are no
retries and no idempotency keys; a request either completes or fails
within the configured timeout.

Usage:
    async with HttpPersistenceGateway(WizardSettings.from_env()) as gateway:
        record = await gateway.create_quote(payload)
"""

from __future__ import annotations

from typing import Any, Protocol, TypeVar

import httpx
import structlog

from src.api.schemas import (
    AIGenerationRequest,
    AIGenerationResult,
    AssetUploadRequest,
    AssetUploadTicket,
    ColorAssignmentCreate,
    ColorAssignmentRecord,
    ContactCreate,
    ContactRecord,
    DesignJobCreate,
    DesignJobRecord,
    FulfillmentOrderCreate,
    FulfillmentOrderRecord,
    MerchBundleCreate,
    MerchBundleRecord,
    OrganizationCreate,
    OrganizationRecord,
    QuoteCreate,
    QuoteRecord,
    RecordModel,
    WizardModel,
)
from src.config.settings import WizardSettings
from src.lib.exceptions import GatewayError

logger = structlog.get_logger(__name__)

R = TypeVar("R", bound=RecordModel)


class PersistenceGateway(Protocol):
    """Everything the wizard needs from the outside world."""

    async def create_quote(self, payload: QuoteCreate) -> QuoteRecord: ...

    async def create_design_job(self, payload: DesignJobCreate) -> DesignJobRecord: ...

    async def create_organization(self, payload: OrganizationCreate) -> OrganizationRecord: ...

    async def create_contact(self, payload: ContactCreate) -> ContactRecord: ...

    async def create_fulfillment_order(self, payload: FulfillmentOrderCreate) -> FulfillmentOrderRecord: ...

    async def create_merch_bundle(self, payload: MerchBundleCreate) -> MerchBundleRecord: ...

    async def create_color_assignments(self, payload: ColorAssignmentCreate) -> ColorAssignmentRecord: ...

    async def generate_ai_content(self, payload: AIGenerationRequest) -> AIGenerationResult: ...

    async def request_upload(self, payload: AssetUploadRequest) -> AssetUploadTicket: ...

    async def put_asset_bytes(self, upload_url: str, data: bytes, content_type: str) -> None: ...


def _error_message(response: httpx.Response) -> str:
    """Best-effort human message from an error response body."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            if isinstance(body.get(key), str):
                return body[key]
    return f"Gateway responded with HTTP {response.status_code}"


class HttpPersistenceGateway:
    """PersistenceGateway over the business REST API using httpx."""

    def __init__(
        self,
        settings: WizardSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings or WizardSettings.from_env()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=self.settings.gateway_url,
            timeout=self.settings.gateway_timeout,
        )

    async def __aenter__(self) -> HttpPersistenceGateway:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # =========================================================================
    # Transport
    # =========================================================================

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning("gateway_http_error", method=method, url=url, status_code=status)
            raise GatewayError(_error_message(e.response), status_code=status) from e
        except httpx.RequestError as e:
            logger.warning("gateway_unreachable", method=method, url=url, error=str(e))
            raise GatewayError(f"Could not reach the server: {e}") from e
        return response

    async def _post(self, path: str, payload: WizardModel, record_type: type[R]) -> R:
        logger.debug("gateway_request", path=path, payload_type=type(payload).__name__)
        response = await self._send("POST", path, json=payload.to_payload())
        try:
            record = record_type.model_validate(response.json())
        except ValueError as e:
            # Covers malformed JSON and pydantic ValidationError alike
            logger.warning("gateway_bad_response", path=path, error=str(e))
            raise GatewayError(
                "The server returned an unexpected response",
                status_code=response.status_code,
            ) from e
        logger.info("gateway_record_created", path=path, record_type=record_type.__name__)
        return record

    # =========================================================================
    # Operations
    # =========================================================================

    async def create_quote(self, payload: QuoteCreate) -> QuoteRecord:
        return await self._post("/quotes", payload, QuoteRecord)

    async def create_design_job(self, payload: DesignJobCreate) -> DesignJobRecord:
        return await self._post("/design-jobs", payload, DesignJobRecord)

    async def create_organization(self, payload: OrganizationCreate) -> OrganizationRecord:
        return await self._post("/organizations", payload, OrganizationRecord)

    async def create_contact(self, payload: ContactCreate) -> ContactRecord:
        return await self._post("/contacts", payload, ContactRecord)

    async def create_fulfillment_order(self, payload: FulfillmentOrderCreate) -> FulfillmentOrderRecord:
        return await self._post("/fulfillment/orders", payload, FulfillmentOrderRecord)

    async def create_merch_bundle(self, payload: MerchBundleCreate) -> MerchBundleRecord:
        return await self._post(f"/events/{payload.event_id}/merch-bundles", payload, MerchBundleRecord)

    async def create_color_assignments(self, payload: ColorAssignmentCreate) -> ColorAssignmentRecord:
        return await self._post(f"/orders/{payload.order_id}/colors", payload, ColorAssignmentRecord)

    async def generate_ai_content(self, payload: AIGenerationRequest) -> AIGenerationResult:
        return await self._post("/ai/interactions", payload, AIGenerationResult)

    async def request_upload(self, payload: AssetUploadRequest) -> AssetUploadTicket:
        return await self._post("/uploads/request", payload, AssetUploadTicket)

    async def put_asset_bytes(self, upload_url: str, data: bytes, content_type: str) -> None:
        """PUT raw bytes to a pre-signed upload URL (absolute, outside the API)."""
        await self._send("PUT", upload_url, content=data, headers={"Content-Type": content_type})
        logger.info("gateway_asset_uploaded", size=len(data))


async def upload_asset(
    gateway: PersistenceGateway,
    filename: str,
    content_type: str,
    data: bytes,
) -> AssetUploadTicket:
    """
    Reserve an upload slot, then send the bytes to it.

    Returns:
        The ticket, whose sanitized_filename/upload_id identify the asset

    Raises:
        GatewayError: If either step fails
    """
    ticket = await gateway.request_upload(
        AssetUploadRequest(filename=filename, content_type=content_type, size=len(data))
    )
    await gateway.put_asset_bytes(ticket.upload_url, data, content_type)
    return ticket
