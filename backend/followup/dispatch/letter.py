"""
Organization-Enrichment / Fallback-Letter Dispatcher.

Resolves a postal address for the letter's recipient, asks the document
production service for a physical letter and, when that succeeds, puts a
"letter sent" notification on the benefits channel.

Nothing here raises: every failure is logged and returned as a Failed
outcome so sibling intents are unaffected.  There is no retry.
"""

from __future__ import annotations

from dataclasses import dataclass

from followup.clients.base import (
    DocumentProduction,
    MessageChannel,
    OrganizationRegistry,
    PhysicianRegistry,
)
from followup.core.constants import IntentKind, LetterRecipient
from followup.core.logging import get_logger
from followup.dispatch.base import Dispatcher
from followup.messaging import messages
from followup.models import DispatchOutcome, FallbackPhysicalLetter

logger = get_logger(__name__)


@dataclass(frozen=True)
class _Address:
    organization_number: str
    organization_name: str
    postal_code: str
    city: str


class AddressNotFound(Exception):
    """No postal address could be resolved for a letter recipient."""


class LetterDispatcher(Dispatcher):
    kind = IntentKind.FALLBACK_PHYSICAL_LETTER

    def __init__(
        self,
        organizations: OrganizationRegistry,
        physicians: PhysicianRegistry,
        document_production: DocumentProduction,
        benefits_channel: MessageChannel,
        placeholder_content: str,
    ) -> None:
        self.organizations = organizations
        self.physicians = physicians
        self.document_production = document_production
        self.benefits_channel = benefits_channel
        self.placeholder_content = placeholder_content

    async def dispatch(self, intent: FallbackPhysicalLetter) -> DispatchOutcome:
        log = logger.bind(recipient=intent.recipient, **intent.fields.log_context())

        try:
            address = await self._resolve_address(intent)
        except AddressNotFound as exc:
            log.warning("No address for physical letter", reason=str(exc))
            return DispatchOutcome.failed(self.kind, f"address not found: {exc}")
        except Exception as exc:
            log.error("Address lookup for physical letter failed", error=str(exc))
            return DispatchOutcome.failed(self.kind, f"address lookup failed: {exc}")

        request = messages.letter_request(
            intent.fields,
            organization_number=address.organization_number,
            organization_name=address.organization_name,
            postal_code=address.postal_code,
            city=address.city,
            content=self.placeholder_content,
        )

        try:
            await self.document_production.produce_letter(request)
        except Exception as exc:
            log.error(
                "Physical letter production failed",
                error=str(exc),
                receiver_org=address.organization_number,
            )
            return DispatchOutcome.failed(self.kind, f"letter production failed: {exc}")

        try:
            await self.benefits_channel.send(messages.letter_sent_message(intent.fields))
        except Exception as exc:
            log.error(
                "Letter produced but letter-sent notification failed",
                error=str(exc),
                receiver_org=address.organization_number,
            )
            return DispatchOutcome.failed(self.kind, f"letter-sent notification failed: {exc}")

        log.info(
            "Physical letter produced",
            receiver_org=address.organization_number,
            postal_code=address.postal_code,
        )
        return DispatchOutcome.succeeded(self.kind)

    # ─── Address resolution ───────────────────────────

    async def _resolve_address(self, intent: FallbackPhysicalLetter) -> _Address:
        if intent.recipient == LetterRecipient.PHYSICIAN_OFFICE:
            if not intent.postal_code or not intent.city:
                raise AddressNotFound("physician office address incomplete")
            return _Address(
                intent.organization_number,
                intent.organization_name,
                intent.postal_code,
                intent.city,
            )

        if intent.recipient == LetterRecipient.SUBJECT_PHYSICIAN:
            association = await self.physicians.get_association(intent.fields.subject_person_id)
            if association is None:
                raise AddressNotFound("subject has no registered physician")
            return _Address(
                association.office.organization_number,
                association.full_name,
                association.office.postal_code,
                association.office.city,
            )

        return await self._enrich_organization(intent.organization_number, intent.organization_name)

    async def _enrich_organization(self, organization_number: str, fallback_name: str) -> _Address:
        """Two-call chain: name by number, then postal fields by name."""
        registered_name = await self.organizations.get_organization_name(organization_number)
        summaries = await self.organizations.find_organizations(registered_name)
        if not summaries:
            raise AddressNotFound(f"no directory entry for organization {organization_number}")

        summary = summaries[0]
        return _Address(
            organization_number,
            fallback_name or registered_name,
            summary.postal_code,
            summary.city,
        )
