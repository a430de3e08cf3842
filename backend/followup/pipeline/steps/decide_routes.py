"""DecideRoutesStep — applies the routing rules to the extracted fields."""

from __future__ import annotations

from followup.pipeline.context import StepResult, SubmissionContext
from followup.pipeline.step import PipelineStep
from followup.routing.decision import decide


class DecideRoutesStep(PipelineStep):

    name = "decide_routes"
    description = "Decide which delivery paths fire"

    async def execute(self, ctx: SubmissionContext) -> StepResult:
        started_at = self._now()
        ctx.intents = decide(
            ctx.fields,
            ctx.tag,
            org_valid=bool(ctx.org_valid),
            attachment=ctx.submission.attachment,
        )
        return self._success(started_at, metadata={
            "intents": [intent.kind for intent in ctx.intents],
        })
