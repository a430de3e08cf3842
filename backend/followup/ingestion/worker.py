"""
Worker wiring — builds one fully independent pipeline per ingestion worker.

Every worker gets its own inbound session, its own remote clients and its
own outbound channels; nothing is shared between workers.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from celery import Celery

from followup.clients.http import (
    HttpAddressRegistry,
    HttpArchiveService,
    HttpDocumentProduction,
    HttpOrganizationRegistry,
    HttpPartnerDirectory,
    HttpPhysicianRegistry,
    ServiceClient,
)
from followup.clients.pdf import PdfClient
from followup.core.config import Settings
from followup.core.logging import get_logger
from followup.dispatch import (
    ArchiveDispatcher,
    BenefitsNotificationDispatcher,
    DispatchCoordinator,
    LetterDispatcher,
    PhysicianNotificationDispatcher,
)
from followup.ingestion.loop import ApplicationState, IngestionLoop
from followup.ingestion.source import BrokerSubmissionSource
from followup.messaging import celery_app
from followup.messaging.channels import BrokerChannel
from followup.pipeline.engine import PipelineEngine
from followup.pipeline.flow_resolver import FlowResolver, PipelineServices
from followup.processing.classifier import SubmissionClassifier
from followup.processing.extractors import SchemaExtractor

logger = get_logger(__name__)


@dataclass
class WorkerResources:
    """Everything one worker owns and must close on shutdown."""

    engine: PipelineEngine
    clients: list[ServiceClient] = field(default_factory=list)

    async def aclose(self) -> None:
        for client in self.clients:
            await client.aclose()


def build_engine(settings: Settings, app: Celery | None = None) -> WorkerResources:
    """Construct a PipelineEngine with fresh clients and channels."""
    app = app or celery_app
    timeout = settings.HTTP_TIMEOUT_SECONDS

    organizations = HttpOrganizationRegistry(settings.ORGANIZATION_REGISTRY_URL, timeout)
    physicians = HttpPhysicianRegistry(settings.PHYSICIAN_REGISTRY_URL, timeout)
    addresses = HttpAddressRegistry(settings.ADDRESS_REGISTRY_URL, timeout)
    partners = HttpPartnerDirectory(settings.PARTNER_DIRECTORY_URL, timeout)
    document_production = HttpDocumentProduction(settings.DOCUMENT_PRODUCTION_URL, timeout)
    archive = HttpArchiveService(settings.ARCHIVE_SERVICE_URL, timeout)
    pdf = PdfClient(settings.PDF_GENERATOR_URL, timeout)

    benefits_channel = BrokerChannel(settings.BENEFITS_QUEUE_NAME, app=app)
    physician_channel = BrokerChannel(settings.PHYSICIAN_QUEUE_NAME, app=app)

    letters = LetterDispatcher(
        organizations,
        physicians,
        document_production,
        benefits_channel,
        placeholder_content=settings.LETTER_PLACEHOLDER_CONTENT,
    )
    coordinator = DispatchCoordinator([
        ArchiveDispatcher(archive, pdf),
        BenefitsNotificationDispatcher(benefits_channel),
        PhysicianNotificationDispatcher(
            physicians, addresses, partners, pdf, physician_channel, letters
        ),
        letters,
    ])

    services = PipelineServices(
        extractor=SchemaExtractor(),
        organizations=organizations,
        coordinator=coordinator,
    )
    engine = PipelineEngine(
        SubmissionClassifier.from_settings(settings.CLASSIFICATION_TABLE),
        FlowResolver(services),
    )
    return WorkerResources(
        engine=engine,
        clients=[organizations, physicians, addresses, partners, document_production, archive, pdf],
    )


async def _run_worker(index: int, state: ApplicationState, settings: Settings, app: Celery) -> None:
    resources = build_engine(settings, app)
    try:
        source = BrokerSubmissionSource(settings.INBOUND_QUEUE_NAME, app=app, batch_size=settings.POLL_BATCH_SIZE)
        loop = IngestionLoop(
            source,
            resources.engine,
            state,
            poll_interval=settings.POLL_INTERVAL_SECONDS,
            name=f"worker-{index}",
        )
        await loop.run()
    finally:
        await resources.aclose()


def start_workers(
    state: ApplicationState,
    settings: Settings,
    app: Celery | None = None,
) -> list[asyncio.Task]:
    """Launch WORKER_COUNT ingestion loops on the running event loop."""
    app = app or celery_app
    tasks = [
        asyncio.create_task(_run_worker(index, state, settings, app), name=f"ingestion-worker-{index}")
        for index in range(settings.WORKER_COUNT)
    ]
    logger.info("Ingestion workers started", workers=len(tasks), queue=settings.INBOUND_QUEUE_NAME)
    return tasks


def watch_worker(state: ApplicationState, task: asyncio.Task) -> None:
    """
    Done-callback for a worker task.

    A worker that ends while the application is still running has died;
    clearing `running` makes /is_alive fail so the process gets restarted.
    """
    error = None if task.cancelled() else task.exception()
    if not state.running:
        return
    logger.error(
        "Ingestion worker stopped unexpectedly",
        worker=task.get_name(),
        error=str(error) if error else None,
        exc_info=error,
    )
    state.running = False
