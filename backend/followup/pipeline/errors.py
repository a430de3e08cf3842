"""
Domain-specific exception hierarchy for the intake pipeline.

All pipeline exceptions inherit from PipelineError so callers can
catch broadly or narrowly as needed.  Each exception carries structured
context (step name, execution ID, etc.) for logging.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base exception for all pipeline errors."""

    def __init__(
        self,
        message: str,
        *,
        execution_id: str | None = None,
        step_name: str | None = None,
        details: dict | None = None,
    ) -> None:
        self.execution_id = execution_id
        self.step_name = step_name
        self.details = details or {}
        super().__init__(message)


class StepExecutionError(PipelineError):
    """A step failed during execution."""
    pass


class FlowResolutionError(PipelineError):
    """No step sequence is registered for a schema tag."""
    pass


class ExtractionError(PipelineError):
    """Reading canonical fields from a form payload failed."""
    pass


class RemoteServiceError(PipelineError):
    """A remote registry, archive or production service call failed."""

    def __init__(
        self,
        message: str,
        *,
        service: str | None = None,
        status_code: int | None = None,
        response_body: str | None = None,
        **kwargs,
    ) -> None:
        self.service = service
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(message, **kwargs)
