"""
ValidateOrganizationStep — checks the sender organization number.

A failed validation call counts as invalid.  Invalid submissions are
rejected: logged and dropped, with no dead-letter or retry.
"""

from __future__ import annotations

from followup.clients.base import OrganizationRegistry
from followup.core.logging import get_logger
from followup.pipeline.context import StepResult, SubmissionContext
from followup.pipeline.step import PipelineStep

logger = get_logger(__name__)


class ValidateOrganizationStep(PipelineStep):
    """Validate the sender organization against the organization registry."""

    name = "validate_organization"
    description = "Validate sender organization number"

    def __init__(self, organizations: OrganizationRegistry) -> None:
        self.organizations = organizations

    async def execute(self, ctx: SubmissionContext) -> StepResult:
        started_at = self._now()
        log = logger.bind(**ctx.log_context())
        org_id = ctx.fields.sender_org_id

        try:
            ctx.org_valid = await self.organizations.validate_organization(org_id)
        except Exception as exc:
            log.error("Organization validation call failed, treating as invalid", error=str(exc))
            ctx.org_valid = False

        if not ctx.org_valid:
            ctx.rejection_reason = f"invalid sender organization {org_id!r}"
            log.error("Submission rejected, sender organization invalid")

        return self._success(started_at, metadata={"org_valid": ctx.org_valid})
