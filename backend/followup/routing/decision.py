"""
Routing Decision Engine — turns canonical fields into dispatch intents.

Rules, in precedence order:
    1. UNCLASSIFIED: archive the raw attachment and notify the benefits
       system, with no organization gate.
    2. Invalid sender organization: no intents (rejection is logged).
    3. Archive intent: ArchiveDocument + NotifyBenefitsSystem.
    4. Physician intent: NotifyPhysician, otherwise a physical letter to
       the sender organization.

Legacy metadata forms only route when they were written on the NAV
template, archive the raw attachment, and never notify the physician
electronically: their physician path is a letter to the office of the
subject's registered physician.

Intents are independent; several can fire for one submission.
"""

from __future__ import annotations

from followup.core.constants import VERSIONED_TAGS, SchemaVersionTag
from followup.core.logging import get_logger
from followup.models import (
    ArchiveDocument,
    CanonicalFields,
    DispatchIntent,
    FallbackPhysicalLetter,
    NotifyBenefitsSystem,
    NotifyPhysician,
)

logger = get_logger(__name__)


def decide(
    fields: CanonicalFields,
    tag: SchemaVersionTag,
    org_valid: bool,
    attachment: bytes | None = None,
) -> list[DispatchIntent]:
    """
    Return the ordered intents for one submission.

    Args:
        fields: Extracted canonical fields.
        tag: Classifier result.
        org_valid: Result of the sender organization validation.
            Ignored for UNCLASSIFIED.
        attachment: Raw attachment bytes.  Archived as-is for UNCLASSIFIED
            and legacy forms; versioned forms archive a rendered PDF.
    """
    log = logger.bind(tag=tag, **fields.log_context())

    if tag == SchemaVersionTag.UNCLASSIFIED:
        log.info("Routing unclassified submission to archive and benefits system")
        return [
            ArchiveDocument(fields, document=attachment or b""),
            NotifyBenefitsSystem(fields),
        ]

    if not org_valid:
        log.warning("Sender organization invalid, submission rejected without dispatch")
        return []

    if tag == SchemaVersionTag.LEGACY_METADATA_FORM:
        return _decide_legacy(fields, attachment, log)

    if tag not in VERSIONED_TAGS:
        log.error("No routing rules for tag")
        return []

    intents: list[DispatchIntent] = []
    if fields.send_to_archive:
        intents.append(ArchiveDocument(fields))
        intents.append(NotifyBenefitsSystem(fields))

    if fields.send_to_physician:
        intents.append(NotifyPhysician(fields))
    else:
        intents.append(FallbackPhysicalLetter.to_sender(fields))

    log.info("Routing decided", intents=[i.kind for i in intents])
    return intents


def _decide_legacy(fields: CanonicalFields, attachment: bytes | None, log) -> list[DispatchIntent]:
    if not fields.uses_nav_template:
        log.info("Legacy plan not on NAV template, nothing to route")
        return []

    intents: list[DispatchIntent] = []
    if fields.send_to_archive:
        intents.append(ArchiveDocument(fields, document=attachment or b""))
        intents.append(NotifyBenefitsSystem(fields))

    if fields.send_to_physician:
        intents.append(FallbackPhysicalLetter.to_subject_physician(fields))
    else:
        intents.append(FallbackPhysicalLetter.to_sender(fields))

    log.info("Routing decided for legacy plan", intents=[i.kind for i in intents])
    return intents
