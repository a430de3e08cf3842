"""
PipelineStep — abstract base class for all pipeline steps.

Every step in the intake pipeline inherits from this class.
The engine calls execute() and records timing, logging, and errors
automatically.  Steps only need to implement the business logic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any

from followup.core.constants import StepStatus
from followup.pipeline.context import StepResult, SubmissionContext


class PipelineStep(ABC):
    """
    Base class for every pipeline step.

    Subclasses MUST implement:
        - name (str)          — unique identifier, e.g. "extract_fields"
        - description (str)   — human-readable label for logs
        - execute(ctx)        — the actual business logic

    Subclasses MAY implement:
        - should_skip(ctx)    — return True to skip this step conditionally
    """

    name: str = "unnamed_step"
    description: str = "No description"

    @abstractmethod
    async def execute(self, ctx: SubmissionContext) -> StepResult:
        """
        Run the step's logic.  Must return a StepResult.

        Read from and write to `ctx` to pass data between steps.
        Raise StepExecutionError on failure.
        """
        ...

    async def should_skip(self, ctx: SubmissionContext) -> bool:
        """Return True to skip this step.  Default: never skip."""
        return False

    # ─── Helpers available to all steps ────────────────

    def _success(
        self,
        started_at: datetime,
        metadata: dict[str, Any] | None = None,
    ) -> StepResult:
        """Build a successful StepResult with timing."""
        now = datetime.now(timezone.utc)
        duration_ms = int((now - started_at).total_seconds() * 1000)
        return StepResult(
            step_name=self.name,
            status=StepStatus.COMPLETED,
            started_at=started_at,
            completed_at=now,
            duration_ms=duration_ms,
            metadata=metadata or {},
        )

    def _now(self) -> datetime:
        """UTC-aware now."""
        return datetime.now(timezone.utc)
