"""
SchemaExtractor — one object owning an extractor per schema tag.

Built explicitly and injected into the pipeline; there is no
process-wide parser state.
"""

from __future__ import annotations

from xml.etree import ElementTree

from followup.core.constants import SchemaVersionTag
from followup.core.logging import get_logger
from followup.models import CanonicalFields, RawSubmission
from followup.pipeline.errors import ExtractionError
from followup.processing.extractors.base import BaseExtractor
from followup.processing.extractors.legacy import LegacyMetadataExtractor
from followup.processing.extractors.versioned import versioned_extractors

logger = get_logger(__name__)


class SchemaExtractor:
    """Dispatches extraction to the extractor registered for a tag."""

    def __init__(self, extractors: list[BaseExtractor] | None = None) -> None:
        if extractors is None:
            extractors = [*versioned_extractors(), LegacyMetadataExtractor()]
        self._extractors = extractors

    def extractor_for(self, tag: SchemaVersionTag) -> BaseExtractor | None:
        for extractor in self._extractors:
            if extractor.supports_tag(tag):
                return extractor
        return None

    def extract(self, submission: RawSubmission, tag: SchemaVersionTag) -> CanonicalFields:
        """
        Produce CanonicalFields for a submission.

        UNCLASSIFIED (or any tag without an extractor) skips parsing and
        yields passthrough fields carrying only the archive reference.

        Raises:
            ExtractionError: the form data is not well-formed XML.
        """
        extractor = self.extractor_for(tag)
        if extractor is None:
            return CanonicalFields.passthrough(submission.archive_reference)

        try:
            document = ElementTree.fromstring(submission.form_data)
        except ElementTree.ParseError as exc:
            raise ExtractionError(
                f"Form data for {tag} is not well-formed XML: {exc}",
                step_name="extract_fields",
                details={"archive_reference": submission.archive_reference},
            ) from exc

        fields = extractor.extract(document, submission.archive_reference)
        logger.debug("Fields extracted", tag=tag, **fields.log_context())
        return fields
