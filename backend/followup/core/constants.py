"""Shared constants and enums used across the application."""

from enum import StrEnum


class SchemaVersionTag(StrEnum):
    """Form schema a submission was classified as."""

    V2012 = "V2012"
    V2014 = "V2014"
    V2016 = "V2016"
    LEGACY_METADATA_FORM = "LEGACY_METADATA_FORM"
    UNCLASSIFIED = "UNCLASSIFIED"


VERSIONED_TAGS: frozenset[SchemaVersionTag] = frozenset({
    SchemaVersionTag.V2012,
    SchemaVersionTag.V2014,
    SchemaVersionTag.V2016,
})


class PipelineStatus(StrEnum):
    """Overall status of one submission's pipeline execution."""

    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    REJECTED = "REJECTED"


class StepStatus(StrEnum):
    """Status of an individual pipeline step."""

    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    SKIPPED = "SKIPPED"


class IntentKind(StrEnum):
    """Downstream delivery paths a submission can fan out to."""

    ARCHIVE_DOCUMENT = "ARCHIVE_DOCUMENT"
    NOTIFY_BENEFITS_SYSTEM = "NOTIFY_BENEFITS_SYSTEM"
    NOTIFY_PHYSICIAN = "NOTIFY_PHYSICIAN"
    FALLBACK_PHYSICAL_LETTER = "FALLBACK_PHYSICAL_LETTER"


class OutcomeStatus(StrEnum):
    """Terminal state of a single dispatch intent."""

    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


class LetterRecipient(StrEnum):
    """Who a physical letter is addressed to."""

    SENDER_ORGANIZATION = "SENDER_ORGANIZATION"
    PHYSICIAN_OFFICE = "PHYSICIAN_OFFICE"
    SUBJECT_PHYSICIAN = "SUBJECT_PHYSICIAN"


class PdfType(StrEnum):
    """Templates known to the PDF generator."""

    FAGMELDING = "FAGMELDING"
    BEHANDLINGSVEDLEGG = "BEHANDLINGSVEDLEGG"

    @property
    def pdf_gen_name(self) -> str:
        return self.value.lower()
