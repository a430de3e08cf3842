"""
Pipeline Engine — step-based intake orchestrator.

This package provides the engine that takes one submission through
classification, extraction, organization validation, routing and
dispatch, with per-step logging and error containment.
"""

from followup.pipeline.engine import PipelineEngine, PipelineResult
from followup.pipeline.context import StepResult, SubmissionContext
from followup.pipeline.step import PipelineStep

__all__ = ["PipelineEngine", "PipelineResult", "SubmissionContext", "PipelineStep", "StepResult"]
