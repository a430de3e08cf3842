"""
Domain records carried through the intake pipeline.

RawSubmission is what the inbound log delivers.  CanonicalFields is the
version-independent view the extractors produce.  DispatchIntent is the
tagged union the routing rules emit, and DispatchOutcome records how each
intent ended.  None of these are persisted.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any, ClassVar

from followup.core.constants import IntentKind, LetterRecipient, OutcomeStatus


# ═══════════════════════════════════════════════════════════
#  Inbound
# ═══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RawSubmission:
    """One follow-up plan event as read off the inbound log."""

    service_code: str
    edition_code: str
    archive_reference: str
    form_data: str
    attachment: bytes = b""
    topic: str = ""
    partition: int | None = None

    @classmethod
    def from_record(cls, record: dict[str, Any], topic: str = "", partition: int | None = None) -> RawSubmission:
        """
        Build from a decoded broker payload.

        Expected keys: serviceCode, serviceEditionCode, archiveReference,
        formData and an optional base64 encoded attachment.
        """
        attachment = record.get("attachment") or ""
        return cls(
            service_code=str(record.get("serviceCode", "")),
            edition_code=str(record.get("serviceEditionCode", "")),
            archive_reference=str(record.get("archiveReference", "")),
            form_data=record.get("formData", ""),
            attachment=base64.b64decode(attachment) if attachment else b"",
            topic=topic,
            partition=partition,
        )


# ═══════════════════════════════════════════════════════════
#  Canonical fields
# ═══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class AssistanceFlags:
    """The four categories of support an employer can ask for."""

    equipment: bool = False
    guidance: bool = False
    dialogue_meeting: bool = False
    employment_measures: bool = False

    def to_dict(self) -> dict[str, bool]:
        return {
            "equipment": self.equipment,
            "guidance": self.guidance,
            "dialogue_meeting": self.dialogue_meeting,
            "employment_measures": self.employment_measures,
        }


@dataclass(frozen=True)
class CanonicalFields:
    """
    Version-independent extract of a follow-up plan.

    Intent flags default to False, meaning "route nowhere".
    uses_nav_template is only ever False for legacy metadata forms that
    request equipment assistance.
    """

    archive_reference: str
    sender_org_id: str = ""
    sender_org_name: str = ""
    sender_system_name: str = ""
    sender_system_version: str = ""
    subject_person_id: str = ""
    send_to_archive: bool = False
    send_to_physician: bool = False
    assistance: AssistanceFlags = field(default_factory=AssistanceFlags)
    subject_given_name: str | None = None
    subject_family_name: str | None = None
    uses_nav_template: bool = True

    @classmethod
    def passthrough(cls, archive_reference: str) -> CanonicalFields:
        """Fields for a submission whose schema was not recognised."""
        return cls(archive_reference=archive_reference)

    def log_context(self) -> dict[str, str]:
        return {
            "archive_reference": self.archive_reference,
            "sender_org_id": self.sender_org_id,
        }

    def to_render_model(self) -> dict[str, Any]:
        """Domain object handed to the PDF generator."""
        return {
            "archiveReference": self.archive_reference,
            "senderOrgId": self.sender_org_id,
            "senderOrgName": self.sender_org_name,
            "senderSystemName": self.sender_system_name,
            "senderSystemVersion": self.sender_system_version,
            "subjectPersonId": self.subject_person_id,
            "subjectGivenName": self.subject_given_name,
            "subjectFamilyName": self.subject_family_name,
            "sendToArchive": self.send_to_archive,
            "sendToPhysician": self.send_to_physician,
            "assistance": self.assistance.to_dict(),
        }


# ═══════════════════════════════════════════════════════════
#  Registry records
# ═══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class OfficeAddress:
    organization_number: str
    postal_code: str
    city: str
    name: str = ""


@dataclass(frozen=True)
class PhysicianAssociation:
    """A subject's registered primary physician, as held by the physician registry."""

    first_name: str
    last_name: str
    registry_id: str
    office: OfficeAddress
    middle_name: str | None = None
    national_id: str | None = None
    hpr_number: str | None = None

    @property
    def full_name(self) -> str:
        parts = [self.first_name, self.middle_name, self.last_name]
        return " ".join(p for p in parts if p)


@dataclass(frozen=True)
class CommunicationParty:
    """An organization entry in the address registry."""

    registry_id: str
    organization_number: str
    name: str = ""


@dataclass(frozen=True)
class PartnerCapability:
    """A transport partner and the registry id it can receive messages for."""

    partner_id: str
    registry_id: str


@dataclass(frozen=True)
class OrganizationSummary:
    name: str
    postal_code: str
    city: str


# ═══════════════════════════════════════════════════════════
#  Dispatch intents (tagged union)
# ═══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ArchiveDocument:
    """Archive the plan.  A None document means: render it from the fields."""

    fields: CanonicalFields
    document: bytes | None = None
    kind: ClassVar[IntentKind] = IntentKind.ARCHIVE_DOCUMENT


@dataclass(frozen=True)
class NotifyBenefitsSystem:
    fields: CanonicalFields
    kind: ClassVar[IntentKind] = IntentKind.NOTIFY_BENEFITS_SYSTEM


@dataclass(frozen=True)
class NotifyPhysician:
    fields: CanonicalFields
    kind: ClassVar[IntentKind] = IntentKind.NOTIFY_PHYSICIAN


@dataclass(frozen=True)
class FallbackPhysicalLetter:
    """
    Produce a paper letter.

    For SENDER_ORGANIZATION the postal fields are looked up at dispatch
    time; for SUBJECT_PHYSICIAN the office is looked up via the physician
    registry; PHYSICIAN_OFFICE arrives fully addressed.
    """

    fields: CanonicalFields
    recipient: LetterRecipient
    organization_number: str = ""
    organization_name: str = ""
    postal_code: str | None = None
    city: str | None = None
    kind: ClassVar[IntentKind] = IntentKind.FALLBACK_PHYSICAL_LETTER

    @classmethod
    def to_sender(cls, fields: CanonicalFields) -> FallbackPhysicalLetter:
        return cls(
            fields=fields,
            recipient=LetterRecipient.SENDER_ORGANIZATION,
            organization_number=fields.sender_org_id,
            organization_name=fields.sender_org_name,
        )

    @classmethod
    def to_office(cls, fields: CanonicalFields, association: PhysicianAssociation) -> FallbackPhysicalLetter:
        return cls(
            fields=fields,
            recipient=LetterRecipient.PHYSICIAN_OFFICE,
            organization_number=association.office.organization_number,
            organization_name=association.full_name,
            postal_code=association.office.postal_code,
            city=association.office.city,
        )

    @classmethod
    def to_subject_physician(cls, fields: CanonicalFields) -> FallbackPhysicalLetter:
        return cls(fields=fields, recipient=LetterRecipient.SUBJECT_PHYSICIAN)


DispatchIntent = ArchiveDocument | NotifyBenefitsSystem | NotifyPhysician | FallbackPhysicalLetter


# ═══════════════════════════════════════════════════════════
#  Outcomes
# ═══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class DispatchOutcome:
    """
    Terminal result of one intent.

    fallback is set when the intent was delivered (or attempted) through
    the physical-letter path instead of its own channel.
    """

    kind: IntentKind
    status: OutcomeStatus
    reason: str | None = None
    fallback: DispatchOutcome | None = None

    @classmethod
    def succeeded(cls, kind: IntentKind, reason: str | None = None) -> DispatchOutcome:
        return cls(kind=kind, status=OutcomeStatus.SUCCEEDED, reason=reason)

    @classmethod
    def failed(cls, kind: IntentKind, reason: str) -> DispatchOutcome:
        return cls(kind=kind, status=OutcomeStatus.FAILED, reason=reason)

    @classmethod
    def fell_back(cls, kind: IntentKind, reason: str, fallback: DispatchOutcome) -> DispatchOutcome:
        return cls(kind=kind, status=fallback.status, reason=reason, fallback=fallback)

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.SUCCEEDED

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "status": self.status,
            "reason": self.reason,
            "fallback": self.fallback.to_dict() if self.fallback else None,
        }
