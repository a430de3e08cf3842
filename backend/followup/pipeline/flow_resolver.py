"""
FlowResolver — maps a schema tag to an ordered step sequence.

Versioned and legacy forms share one flow:

    extract → validate sender organization → decide routes → dispatch

Unclassified submissions skip the organization gate; their fields are a
passthrough and the routing rules only archive and notify.

To support a new form version:
    1. Add a tag to SchemaVersionTag and an extractor for it
    2. Register the flow in FLOW_REGISTRY below
    3. Map its service/edition pair in CLASSIFICATION_TABLE
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from followup.clients.base import OrganizationRegistry
from followup.core.constants import SchemaVersionTag
from followup.core.logging import get_logger
from followup.dispatch.coordinator import DispatchCoordinator
from followup.pipeline.errors import FlowResolutionError
from followup.pipeline.step import PipelineStep
from followup.pipeline.steps.decide_routes import DecideRoutesStep
from followup.pipeline.steps.dispatch_intents import DispatchIntentsStep
from followup.pipeline.steps.extract_fields import ExtractFieldsStep
from followup.pipeline.steps.validate_organization import ValidateOrganizationStep
from followup.processing.extractors import SchemaExtractor

logger = get_logger(__name__)


@dataclass
class PipelineServices:
    """Collaborators the flow builders wire into their steps."""

    extractor: SchemaExtractor
    organizations: OrganizationRegistry
    coordinator: DispatchCoordinator


FlowBuilder = Callable[[PipelineServices], list[PipelineStep]]


def _form_flow(services: PipelineServices) -> list[PipelineStep]:
    return [
        ExtractFieldsStep(services.extractor),
        ValidateOrganizationStep(services.organizations),
        DecideRoutesStep(),
        DispatchIntentsStep(services.coordinator),
    ]


def _unclassified_flow(services: PipelineServices) -> list[PipelineStep]:
    return [
        ExtractFieldsStep(services.extractor),
        DecideRoutesStep(),
        DispatchIntentsStep(services.coordinator),
    ]


# ═══════════════════════════════════════════════════════════
#  Flow Registry
# ═══════════════════════════════════════════════════════════

FLOW_REGISTRY: dict[SchemaVersionTag, FlowBuilder] = {
    SchemaVersionTag.V2012: _form_flow,
    SchemaVersionTag.V2014: _form_flow,
    SchemaVersionTag.V2016: _form_flow,
    SchemaVersionTag.LEGACY_METADATA_FORM: _form_flow,
    SchemaVersionTag.UNCLASSIFIED: _unclassified_flow,
}


class FlowResolver:
    """Resolves a schema tag to an ordered list of pipeline steps."""

    def __init__(
        self,
        services: PipelineServices,
        registry: dict[SchemaVersionTag, FlowBuilder] | None = None,
    ) -> None:
        self.services = services
        self.registry = registry if registry is not None else FLOW_REGISTRY

    def resolve(self, tag: SchemaVersionTag) -> list[PipelineStep]:
        """
        Return the ordered step list for the given tag.

        Raises:
            FlowResolutionError: If no flow is registered for the tag.
        """
        builder = self.registry.get(tag)
        if builder is None:
            raise FlowResolutionError(
                f"No flow registered for schema tag '{tag}'",
                step_name="flow_resolution",
            )
        logger.debug("Flow resolved", tag=tag)
        return builder(self.services)
