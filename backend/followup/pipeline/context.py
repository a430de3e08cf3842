"""
SubmissionContext — mutable state object carried through every step.

This is the single source of truth for one submission's run.  Each step
reads from and writes to the context; nothing in it outlives the run.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from followup.core.constants import SchemaVersionTag
from followup.models import CanonicalFields, DispatchIntent, DispatchOutcome, RawSubmission


# ═══════════════════════════════════════════════════════════
#  StepResult
# ═══════════════════════════════════════════════════════════

@dataclass
class StepResult:
    """Outcome of a single pipeline step execution."""

    step_name: str
    status: str                     # StepStatus value
    started_at: datetime | None = None
    completed_at: datetime | None = None
    duration_ms: int = 0
    error: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "step_name": self.step_name,
            "status": self.status,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_ms": self.duration_ms,
            "error": self.error,
            "metadata": self.metadata,
        }


# ═══════════════════════════════════════════════════════════
#  SubmissionContext
# ═══════════════════════════════════════════════════════════

@dataclass
class SubmissionContext:
    """
    Carries all state between pipeline steps for one submission.

    Populated progressively — classification sets tag, extraction sets
    fields, validation sets org_valid, routing sets intents and dispatch
    fills outcomes.
    """

    # ─── Identity (set at init) ────────────────────────
    submission: RawSubmission
    execution_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    # ─── Classification / extraction ──────────────────
    tag: SchemaVersionTag = SchemaVersionTag.UNCLASSIFIED
    fields: CanonicalFields | None = None

    # ─── Validation ───────────────────────────────────
    # None until the validation step runs; unclassified flows never set it.
    org_valid: bool | None = None
    rejection_reason: str | None = None

    # ─── Routing and dispatch ─────────────────────────
    intents: list[DispatchIntent] = field(default_factory=list)
    outcomes: list[DispatchOutcome] = field(default_factory=list)

    # ─── Execution tracking ────────────────────────────
    total_steps: int = 0
    step_results: list[StepResult] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def rejected(self) -> bool:
        return self.rejection_reason is not None

    def log_context(self) -> dict[str, Any]:
        """Correlation fields bound to every log line about this submission."""
        return {
            "execution_id": self.execution_id,
            "archive_reference": self.submission.archive_reference,
            "sender_org_id": self.fields.sender_org_id if self.fields else None,
            "topic": self.submission.topic,
            "partition": self.submission.partition,
        }

    def add_error(self, error: str) -> None:
        """Record a non-fatal error."""
        self.errors.append(error)

    def to_summary_dict(self) -> dict[str, Any]:
        """Compact summary for logging."""
        return {
            "execution_id": self.execution_id,
            "archive_reference": self.submission.archive_reference,
            "tag": self.tag,
            "org_valid": self.org_valid,
            "rejection_reason": self.rejection_reason,
            "intents": [intent.kind for intent in self.intents],
            "outcomes": [outcome.to_dict() for outcome in self.outcomes],
            "steps_completed": len(self.step_results),
            "total_steps": self.total_steps,
            "errors": self.errors,
        }
