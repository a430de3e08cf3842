"""DispatchIntentsStep — hands every intent to its dispatcher."""

from __future__ import annotations

from typing import TYPE_CHECKING

from followup.pipeline.context import StepResult, SubmissionContext
from followup.pipeline.step import PipelineStep

if TYPE_CHECKING:
    from followup.dispatch.coordinator import DispatchCoordinator


class DispatchIntentsStep(PipelineStep):

    name = "dispatch_intents"
    description = "Dispatch intents to downstream systems"

    def __init__(self, coordinator: DispatchCoordinator) -> None:
        self.coordinator = coordinator

    async def should_skip(self, ctx: SubmissionContext) -> bool:
        return not ctx.intents

    async def execute(self, ctx: SubmissionContext) -> StepResult:
        started_at = self._now()
        ctx.outcomes = await self.coordinator.dispatch_all(ctx.intents)
        return self._success(started_at, metadata={
            "succeeded": sum(1 for o in ctx.outcomes if o.ok),
            "failed": sum(1 for o in ctx.outcomes if not o.ok),
        })
