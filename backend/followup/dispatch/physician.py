"""
Physician-Notification Dispatcher.

Electronic delivery needs four lookups, each depending on the last:

    1. physician association for the subject      (physician registry)
    2. the physician's organization identity       (address registry)
    3. transport partners for that organization    (partner directory)
    4. a partner able to receive for that identity (capability match)

The chain is a list of steps over a shared PhysicianRoute, ending with the
dialog message send.  A step returns None to continue or a ChainStop to
divert to the physical-letter fallback; remote failures inside a step,
including the final send, become a ChainStop too.  The dispatcher never
raises.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Awaitable, Callable

from followup.clients.base import (
    AddressRegistry,
    MessageChannel,
    PartnerDirectory,
    PdfRenderer,
    PhysicianRegistry,
)
from followup.core.constants import IntentKind, PdfType
from followup.core.logging import get_logger
from followup.dispatch.base import Dispatcher
from followup.dispatch.letter import LetterDispatcher
from followup.messaging import messages
from followup.models import (
    CanonicalFields,
    CommunicationParty,
    DispatchOutcome,
    FallbackPhysicalLetter,
    NotifyPhysician,
    PartnerCapability,
    PhysicianAssociation,
)

logger = get_logger(__name__)


@dataclass
class PhysicianRoute:
    """What the chain has learned so far about one subject's physician."""

    fields: CanonicalFields
    association: PhysicianAssociation | None = None
    office: CommunicationParty | None = None
    partners: list[PartnerCapability] = field(default_factory=list)
    partner: PartnerCapability | None = None
    document: bytes | None = None

    def fallback_letter(self) -> FallbackPhysicalLetter:
        """Letter to the physician's office when known, else to the sender."""
        if self.association is not None:
            return FallbackPhysicalLetter.to_office(self.fields, self.association)
        return FallbackPhysicalLetter.to_sender(self.fields)


@dataclass(frozen=True)
class ChainStop:
    reason: str
    letter: FallbackPhysicalLetter


ChainStep = Callable[[PhysicianRoute], Awaitable[ChainStop | None]]


class PhysicianNotificationDispatcher(Dispatcher):
    kind = IntentKind.NOTIFY_PHYSICIAN

    def __init__(
        self,
        physicians: PhysicianRegistry,
        addresses: AddressRegistry,
        partners: PartnerDirectory,
        pdf_renderer: PdfRenderer,
        physician_channel: MessageChannel,
        letters: LetterDispatcher,
    ) -> None:
        self.physicians = physicians
        self.addresses = addresses
        self.partners = partners
        self.pdf_renderer = pdf_renderer
        self.physician_channel = physician_channel
        self.letters = letters

    @property
    def chain(self) -> list[tuple[str, ChainStep]]:
        return [
            ("lookup_association", self._lookup_association),
            ("resolve_office", self._resolve_office),
            ("resolve_partner", self._resolve_partner),
            ("match_capability", self._match_capability),
            ("render_document", self._render_document),
            ("send_dialog_message", self._send_dialog_message),
        ]

    async def dispatch(self, intent: NotifyPhysician) -> DispatchOutcome:
        log = logger.bind(**intent.fields.log_context())
        route = PhysicianRoute(fields=intent.fields)

        for step_name, step in self.chain:
            stop = await self._run_step(step_name, step, route, log)
            if stop is not None:
                return await self._fall_back(stop, log)

        log.info(
            "Dialog message sent to physician",
            partner_id=route.partner.partner_id,
            office_org=route.office.organization_number,
        )
        return DispatchOutcome.succeeded(self.kind)

    async def _run_step(self, step_name: str, step: ChainStep, route: PhysicianRoute, log) -> ChainStop | None:
        log.debug("Physician chain step", step=step_name)
        try:
            return await step(route)
        except Exception as exc:
            log.warning("Physician chain step failed, using fallback", step=step_name, error=str(exc))
            return ChainStop(f"{step_name} failed: {exc}", route.fallback_letter())

    async def _fall_back(self, stop: ChainStop, log) -> DispatchOutcome:
        log.info(
            "Physician notification falling back to physical letter",
            reason=stop.reason,
            recipient=stop.letter.recipient,
        )
        letter_outcome = await self.letters.dispatch(stop.letter)
        return DispatchOutcome.fell_back(self.kind, stop.reason, letter_outcome)

    # ─── Chain steps ──────────────────────────────────

    async def _lookup_association(self, route: PhysicianRoute) -> ChainStop | None:
        association = await self.physicians.get_association(route.fields.subject_person_id)
        if association is None:
            return ChainStop("no registered physician", route.fallback_letter())
        route.association = association
        return None

    async def _resolve_office(self, route: PhysicianRoute) -> ChainStop | None:
        parties = await self.addresses.get_communication_parties(route.association.registry_id)
        if not parties:
            return ChainStop("physician has no organization in address registry", route.fallback_letter())
        # Only one organization is expected per physician registry id
        route.office = parties[0]
        return None

    async def _resolve_partner(self, route: PhysicianRoute) -> ChainStop | None:
        route.partners = await self.partners.find_partners(route.office.organization_number)
        return None

    async def _match_capability(self, route: PhysicianRoute) -> ChainStop | None:
        route.partner = next(
            (p for p in route.partners if p.registry_id == route.office.registry_id),
            None,
        )
        if route.partner is None:
            return ChainStop("no partner can receive dialog messages", route.fallback_letter())
        return None

    async def _render_document(self, route: PhysicianRoute) -> ChainStop | None:
        route.document = await self.pdf_renderer.render(
            PdfType.FAGMELDING, route.fields.to_render_model()
        )
        return None

    async def _send_dialog_message(self, route: PhysicianRoute) -> ChainStop | None:
        message = messages.physician_dialog_message(
            route.fields, route.association, route.office, route.partner, route.document
        )
        await self.physician_channel.send(message)
        return None
