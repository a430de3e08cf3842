"""
httpx implementations of the remote collaborator protocols.

Each client owns one AsyncClient bound to its service's base URL.  Any
transport error or non-2xx answer is raised as RemoteServiceError with the
service name, status code and response body attached.
"""

from __future__ import annotations

from typing import Any

import httpx

from followup.core.logging import get_logger
from followup.models import (
    CommunicationParty,
    OfficeAddress,
    OrganizationSummary,
    PartnerCapability,
    PhysicianAssociation,
)
from followup.pipeline.errors import RemoteServiceError

logger = get_logger(__name__)

# Default timeout for remote calls (seconds)
DEFAULT_TIMEOUT = 30.0


class ServiceClient:
    """Base for every JSON-over-HTTP collaborator."""

    service_name: str = "remote"
    expected_status_codes: tuple[int, ...] = (200, 201, 202)

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        allow_not_found: bool = False,
        **kwargs: Any,
    ) -> httpx.Response | None:
        logger.debug("Remote request", service=self.service_name, method=method, path=path)
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise RemoteServiceError(
                f"{self.service_name} unreachable: {exc}",
                service=self.service_name,
            ) from exc

        if allow_not_found and response.status_code == 404:
            return None

        if response.status_code not in self.expected_status_codes:
            raise RemoteServiceError(
                f"{self.service_name} returned {response.status_code}",
                service=self.service_name,
                status_code=response.status_code,
                response_body=response.text,
            )
        return response

    async def _get_json(self, path: str, **kwargs: Any) -> Any:
        response = await self._request("GET", path, **kwargs)
        return None if response is None else response.json()

    async def _post_json(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
        response = await self._request("POST", path, json=body)
        return response.json() if response.content else {}


# ═══════════════════════════════════════════════════════════
#  Registries
# ═══════════════════════════════════════════════════════════

class HttpOrganizationRegistry(ServiceClient):
    service_name = "organization-registry"

    async def validate_organization(self, organization_number: str) -> bool:
        data = await self._get_json(f"/organizations/{organization_number}/validate")
        return bool(data.get("valid", False))

    async def get_organization_name(self, organization_number: str) -> str:
        data = await self._get_json(f"/organizations/{organization_number}")
        return data.get("name", "")

    async def find_organizations(self, name: str) -> list[OrganizationSummary]:
        data = await self._get_json("/organizations", params={"name": name})
        return [
            OrganizationSummary(
                name=item.get("name", ""),
                postal_code=item.get("postalCode", ""),
                city=item.get("city", ""),
            )
            for item in data or []
        ]


class HttpPhysicianRegistry(ServiceClient):
    service_name = "physician-registry"

    async def get_association(self, person_id: str) -> PhysicianAssociation | None:
        data = await self._get_json(f"/patients/{person_id}/physician", allow_not_found=True)
        if not data:
            return None

        office = data.get("office") or {}
        return PhysicianAssociation(
            first_name=data.get("firstName", ""),
            middle_name=data.get("middleName"),
            last_name=data.get("lastName", ""),
            registry_id=str(data.get("registryId", "")),
            national_id=data.get("nationalId"),
            hpr_number=data.get("hprNumber"),
            office=OfficeAddress(
                organization_number=office.get("organizationNumber", ""),
                name=office.get("name", ""),
                postal_code=office.get("postalCode", ""),
                city=office.get("city", ""),
            ),
        )


class HttpAddressRegistry(ServiceClient):
    service_name = "address-registry"

    async def get_communication_parties(self, registry_id: str) -> list[CommunicationParty]:
        data = await self._get_json("/communication-parties", params={"registryId": registry_id})
        return [
            CommunicationParty(
                registry_id=str(item.get("registryId", "")),
                organization_number=item.get("organizationNumber", ""),
                name=item.get("name", ""),
            )
            for item in data or []
        ]


class HttpPartnerDirectory(ServiceClient):
    service_name = "partner-directory"

    async def find_partners(self, organization_number: str) -> list[PartnerCapability]:
        data = await self._get_json("/partners", params={"organizationNumber": organization_number})
        return [
            PartnerCapability(
                partner_id=str(item.get("partnerId", "")),
                registry_id=str(item.get("registryId", "")),
            )
            for item in data or []
        ]


# ═══════════════════════════════════════════════════════════
#  Write-side services
# ═══════════════════════════════════════════════════════════

class HttpDocumentProduction(ServiceClient):
    service_name = "document-production"

    async def produce_letter(self, request: dict[str, Any]) -> dict[str, Any]:
        return await self._post_json("/letters", request)


class HttpArchiveService(ServiceClient):
    service_name = "archive"

    async def archive(self, request: dict[str, Any]) -> dict[str, Any]:
        return await self._post_json("/journal-entries", request)
