"""
PipelineEngine — the orchestrator that runs steps sequentially.

Responsibilities:
    - Classify the submission from its envelope codes
    - Resolve the step sequence via FlowResolver
    - Execute each step with timing, logging, and error handling
    - Return a complete PipelineResult

run() never raises: every failure ends up in the result so one bad
submission cannot stop the ingestion loop.
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import structlog

from followup.core.constants import PipelineStatus, SchemaVersionTag, StepStatus
from followup.models import DispatchOutcome, RawSubmission
from followup.pipeline.context import StepResult, SubmissionContext
from followup.pipeline.errors import FlowResolutionError, StepExecutionError
from followup.pipeline.step import PipelineStep


@dataclass
class PipelineResult:
    """Final outcome of one submission's run."""

    execution_id: str
    status: str                     # PipelineStatus value
    tag: SchemaVersionTag = SchemaVersionTag.UNCLASSIFIED
    started_at: datetime | None = None
    completed_at: datetime | None = None
    total_duration_ms: int = 0
    steps_completed: int = 0
    total_steps: int = 0
    outcomes: list[DispatchOutcome] = field(default_factory=list)
    step_results: list[dict[str, Any]] = field(default_factory=list)
    context_summary: dict[str, Any] = field(default_factory=dict)
    error: str | None = None


class PipelineEngine:
    """
    Runs the flow for a submission's schema tag against a SubmissionContext.

    Usage::

        engine = PipelineEngine(classifier, FlowResolver(services))
        result = await engine.run(submission)
    """

    def __init__(self, classifier, flow_resolver) -> None:
        self.classifier = classifier
        self.flow_resolver = flow_resolver
        self.logger = structlog.get_logger("pipeline.engine")

    async def run(self, submission: RawSubmission) -> PipelineResult:
        started_at = datetime.now(timezone.utc)
        ctx = SubmissionContext(submission=submission)

        with structlog.contextvars.bound_contextvars(
            execution_id=ctx.execution_id,
            archive_reference=submission.archive_reference,
        ):
            log = self.logger.bind(topic=submission.topic, partition=submission.partition)

            # ── Classify ──────────────────────────────
            ctx.tag = self.classifier.classify(submission.service_code, submission.edition_code)
            log.info(
                "Pipeline started",
                tag=ctx.tag,
                service_code=submission.service_code,
                edition_code=submission.edition_code,
            )

            # ── Resolve steps ─────────────────────────
            try:
                steps = self.flow_resolver.resolve(ctx.tag)
            except FlowResolutionError as exc:
                log.error("Flow resolution failed", error=str(exc))
                return PipelineResult(
                    execution_id=ctx.execution_id,
                    status=PipelineStatus.FAILED,
                    tag=ctx.tag,
                    started_at=started_at,
                    completed_at=datetime.now(timezone.utc),
                    error=f"Flow resolution failed: {exc}",
                )

            # ── Run steps ─────────────────────────────
            result = await self.run_steps(ctx, steps)
            result.started_at = started_at

            log.info(
                "Pipeline finished",
                status=result.status,
                steps_completed=result.steps_completed,
                total_steps=result.total_steps,
                duration_ms=result.total_duration_ms,
                outcomes=[o.to_dict() for o in result.outcomes],
            )

        return result

    async def run_steps(
        self,
        ctx: SubmissionContext,
        steps: list[PipelineStep],
    ) -> PipelineResult:
        """
        Execute an ordered list of steps against a context.

        Stops at the first failed step, or after the step that rejected
        the submission.
        """
        started_at = datetime.now(timezone.utc)
        ctx.total_steps = len(steps)

        log = self.logger.bind(
            execution_id=ctx.execution_id,
            total_steps=len(steps),
        )

        pipeline_status = PipelineStatus.RUNNING
        steps_completed = 0
        error: str | None = None

        for index, step in enumerate(steps):
            step_number = index + 1
            step_log = log.bind(
                step_name=step.name,
                step_index=step_number,
                step_description=step.description,
            )

            # ── Check skip condition ──────────────────
            try:
                if await step.should_skip(ctx):
                    step_log.info("Step skipped")
                    now = datetime.now(timezone.utc)
                    ctx.step_results.append(StepResult(
                        step_name=step.name,
                        status=StepStatus.SKIPPED,
                        started_at=now,
                        completed_at=now,
                    ))
                    steps_completed += 1
                    continue
            except Exception as exc:
                step_log.warning("should_skip raised, running step anyway", error=str(exc))

            step_log.debug(f"Step {step_number}/{len(steps)}: {step.description}")

            result = await self._execute(step, ctx, step_log)
            ctx.step_results.append(result)

            if result.status != StepStatus.COMPLETED:
                step_log.error(
                    "Step failed, pipeline stopping",
                    error=result.error,
                    duration_ms=result.duration_ms,
                )
                ctx.add_error(f"Step '{step.name}' failed: {result.error}")
                pipeline_status = PipelineStatus.FAILED
                error = result.error
                break

            steps_completed += 1
            step_log.debug(
                "Step completed",
                duration_ms=result.duration_ms,
                metadata=result.metadata,
            )

            if ctx.rejected:
                pipeline_status = PipelineStatus.REJECTED
                error = ctx.rejection_reason
                break

        # ── Finalise ──────────────────────────────────
        completed_at = datetime.now(timezone.utc)
        total_duration_ms = int((completed_at - started_at).total_seconds() * 1000)

        if pipeline_status == PipelineStatus.RUNNING:
            pipeline_status = PipelineStatus.COMPLETED

        return PipelineResult(
            execution_id=ctx.execution_id,
            status=pipeline_status,
            tag=ctx.tag,
            started_at=started_at,
            completed_at=completed_at,
            total_duration_ms=total_duration_ms,
            steps_completed=steps_completed,
            total_steps=len(steps),
            outcomes=list(ctx.outcomes),
            step_results=[sr.to_dict() for sr in ctx.step_results],
            context_summary=ctx.to_summary_dict(),
            error=error,
        )

    async def _execute(
        self,
        step: PipelineStep,
        ctx: SubmissionContext,
        log: structlog.typing.FilteringBoundLogger,
    ) -> StepResult:
        """Execute a step once and turn any exception into a failed StepResult."""
        try:
            return await step.execute(ctx)

        except StepExecutionError as exc:
            return StepResult(
                step_name=step.name,
                status=StepStatus.FAILED,
                started_at=datetime.now(timezone.utc),
                completed_at=datetime.now(timezone.utc),
                error=str(exc),
            )

        except Exception as exc:
            log.exception("Unexpected error in step", error=str(exc))
            return StepResult(
                step_name=step.name,
                status=StepStatus.FAILED,
                started_at=datetime.now(timezone.utc),
                completed_at=datetime.now(timezone.utc),
                error=f"Unexpected: {exc}",
                metadata={"traceback": traceback.format_exc()},
            )
