"""
ExtractFieldsStep — reads CanonicalFields from the form payload.

UNCLASSIFIED submissions get passthrough fields without parsing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from followup.core.logging import get_logger
from followup.pipeline.context import StepResult, SubmissionContext
from followup.pipeline.errors import ExtractionError, StepExecutionError
from followup.pipeline.step import PipelineStep

if TYPE_CHECKING:
    from followup.processing.extractors.schema import SchemaExtractor

logger = get_logger(__name__)


class ExtractFieldsStep(PipelineStep):
    """Extract canonical fields for the classified schema."""

    name = "extract_fields"
    description = "Extract canonical fields from form data"

    def __init__(self, extractor: SchemaExtractor) -> None:
        self.extractor = extractor

    async def execute(self, ctx: SubmissionContext) -> StepResult:
        started_at = self._now()

        try:
            ctx.fields = self.extractor.extract(ctx.submission, ctx.tag)
        except ExtractionError as exc:
            raise StepExecutionError(
                str(exc),
                execution_id=ctx.execution_id,
                step_name=self.name,
            ) from exc

        return self._success(started_at, metadata={
            "tag": ctx.tag,
            "send_to_archive": ctx.fields.send_to_archive,
            "send_to_physician": ctx.fields.send_to_physician,
            "uses_nav_template": ctx.fields.uses_nav_template,
        })
