"""
Builders for every request and message the dispatchers hand off.

All builders return plain JSON-serialisable dicts; binary documents are
base64 encoded.
"""

from __future__ import annotations

import base64
import uuid
from datetime import datetime, timezone
from typing import Any

from followup.models import (
    CanonicalFields,
    CommunicationParty,
    PartnerCapability,
    PhysicianAssociation,
)

ARCHIVE_DOCUMENT_TITLE = "Oppfølgingsplan"
BENEFITS_MESSAGE_TYPE = "OPPFOLGINGSPLAN"
LETTER_SENT_MESSAGE_TYPE = "BREV_SENDT"
DIALOG_MESSAGE_TYPE = "DIALOG_OPPFOLGINGSPLAN"


def _b64(document: bytes) -> str:
    return base64.b64encode(document).decode("ascii")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _sender(fields: CanonicalFields) -> dict[str, str]:
    return {
        "orgId": fields.sender_org_id,
        "orgName": fields.sender_org_name,
        "systemName": fields.sender_system_name,
        "systemVersion": fields.sender_system_version,
    }


def archive_request(fields: CanonicalFields, document: bytes) -> dict[str, Any]:
    """Request to store the plan document and open a journal entry."""
    return {
        "archiveReference": fields.archive_reference,
        "title": ARCHIVE_DOCUMENT_TITLE,
        "sender": _sender(fields),
        "subjectPersonId": fields.subject_person_id,
        "document": {
            "contentType": "application/pdf",
            "content": _b64(document),
        },
        "receivedAt": _now_iso(),
    }


def benefits_plan_message(fields: CanonicalFields) -> dict[str, Any]:
    """Notify the benefits case system that a plan was received."""
    return {
        "messageId": str(uuid.uuid4()),
        "messageType": BENEFITS_MESSAGE_TYPE,
        "archiveReference": fields.archive_reference,
        "sender": _sender(fields),
        "subjectPersonId": fields.subject_person_id,
        "assistance": fields.assistance.to_dict(),
        "createdAt": _now_iso(),
    }


def letter_sent_message(fields: CanonicalFields) -> dict[str, Any]:
    """Tell the benefits case system a paper letter went out for this plan."""
    return {
        "messageId": str(uuid.uuid4()),
        "messageType": LETTER_SENT_MESSAGE_TYPE,
        "archiveReference": fields.archive_reference,
        "senderOrgId": fields.sender_org_id,
        "subjectPersonId": fields.subject_person_id,
        "createdAt": _now_iso(),
    }


def letter_request(
    fields: CanonicalFields,
    organization_number: str,
    organization_name: str,
    postal_code: str,
    city: str,
    content: str,
) -> dict[str, Any]:
    """Request for a non-editable physical letter."""
    return {
        "archiveReference": fields.archive_reference,
        "subjectPersonId": fields.subject_person_id,
        "recipient": {
            "organizationNumber": organization_number,
            "name": organization_name,
            "postalCode": postal_code,
            "city": city,
        },
        "sender": _sender(fields),
        "content": content,
    }


def physician_dialog_message(
    fields: CanonicalFields,
    association: PhysicianAssociation,
    office: CommunicationParty,
    partner: PartnerCapability,
    document: bytes,
) -> dict[str, Any]:
    """Structured dialog message for the subject's physician."""
    return {
        "messageId": str(uuid.uuid4()),
        "messageType": DIALOG_MESSAGE_TYPE,
        "archiveReference": fields.archive_reference,
        "partnerId": partner.partner_id,
        "sender": _sender(fields),
        "patient": {
            "personId": fields.subject_person_id,
            "givenName": fields.subject_given_name,
            "familyName": fields.subject_family_name,
        },
        "physician": {
            "firstName": association.first_name,
            "middleName": association.middle_name,
            "lastName": association.last_name,
            "nationalId": association.national_id,
            "hprNumber": association.hpr_number,
            "registryId": association.registry_id,
        },
        "office": {
            "organizationNumber": office.organization_number,
            "name": office.name,
            "registryId": office.registry_id,
        },
        "document": {
            "contentType": "application/pdf",
            "content": _b64(document),
        },
        "createdAt": _now_iso(),
    }
