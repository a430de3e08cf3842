"""
Collaborator protocols for every remote service the pipeline talks to.

The pipeline depends only on these shapes; clients/http.py provides the
httpx implementations and the tests provide in-memory fakes.
All calls may raise RemoteServiceError.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from followup.core.constants import PdfType
from followup.models import (
    CommunicationParty,
    OrganizationSummary,
    PartnerCapability,
    PhysicianAssociation,
)


@runtime_checkable
class OrganizationRegistry(Protocol):
    async def validate_organization(self, organization_number: str) -> bool: ...

    async def get_organization_name(self, organization_number: str) -> str: ...

    async def find_organizations(self, name: str) -> list[OrganizationSummary]: ...


@runtime_checkable
class PhysicianRegistry(Protocol):
    async def get_association(self, person_id: str) -> PhysicianAssociation | None:
        """None means the subject has no registered physician."""
        ...


@runtime_checkable
class AddressRegistry(Protocol):
    async def get_communication_parties(self, registry_id: str) -> list[CommunicationParty]: ...


@runtime_checkable
class PartnerDirectory(Protocol):
    async def find_partners(self, organization_number: str) -> list[PartnerCapability]: ...


@runtime_checkable
class DocumentProduction(Protocol):
    async def produce_letter(self, request: dict[str, Any]) -> dict[str, Any]: ...


@runtime_checkable
class ArchiveService(Protocol):
    async def archive(self, request: dict[str, Any]) -> dict[str, Any]: ...


@runtime_checkable
class PdfRenderer(Protocol):
    async def render(self, pdf_type: PdfType, domain_object: dict[str, Any]) -> bytes: ...


@runtime_checkable
class MessageChannel(Protocol):
    """An outbound durable queue accepting JSON-serialisable messages."""

    @property
    def channel_name(self) -> str: ...

    async def send(self, message: dict[str, Any]) -> None: ...
