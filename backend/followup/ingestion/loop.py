"""
Ingestion loop — polls the inbound source and runs each record through
the pipeline engine, strictly one at a time.

The loop has two states, driven by the shared ApplicationState: it runs
while `running` is set and stops at the next poll once it is cleared.
No record can stop the loop; failures are logged per record.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from followup.core.constants import PipelineStatus
from followup.core.logging import get_logger
from followup.ingestion.source import InboundRecord, SubmissionSource
from followup.models import RawSubmission
from followup.pipeline.engine import PipelineEngine

logger = get_logger(__name__)


@dataclass
class ApplicationState:
    """Process-wide flags read by the loops and the health endpoints."""

    running: bool = True
    initialized: bool = False


@dataclass
class BatchStats:
    processed: int = 0
    completed: int = 0
    rejected: int = 0
    failed: int = 0


class IngestionLoop:

    def __init__(
        self,
        source: SubmissionSource,
        engine: PipelineEngine,
        state: ApplicationState,
        poll_interval: float = 0.1,
        name: str = "worker-0",
    ) -> None:
        self.source = source
        self.engine = engine
        self.state = state
        self.poll_interval = poll_interval
        self.name = name
        self.log = logger.bind(worker=name)

    async def run(self) -> None:
        self.log.info("Ingestion loop started", poll_interval=self.poll_interval)
        try:
            while self.state.running:
                try:
                    await self.poll_once()
                except Exception as exc:
                    self.log.exception("Poll iteration failed", error=str(exc))
                await asyncio.sleep(self.poll_interval)
        finally:
            self.source.close()
            self.log.info("Ingestion loop stopped")

    async def poll_once(self) -> BatchStats:
        """Process one batch and commit it."""
        stats = BatchStats()
        records = await asyncio.to_thread(self.source.poll)
        if not records:
            return stats

        for record in records:
            status = await self._process(record)
            stats.processed += 1
            if status == PipelineStatus.COMPLETED:
                stats.completed += 1
            elif status == PipelineStatus.REJECTED:
                stats.rejected += 1
            else:
                stats.failed += 1

        await asyncio.to_thread(self.source.commit)
        self.log.info(
            "Batch processed",
            processed=stats.processed,
            completed=stats.completed,
            rejected=stats.rejected,
            failed=stats.failed,
        )
        return stats

    async def _process(self, record: InboundRecord) -> str:
        record_log = self.log.bind(topic=record.topic, partition=record.partition, offset=record.offset)
        try:
            submission = RawSubmission.from_record(record.payload, topic=record.topic, partition=record.partition)
            result = await self.engine.run(submission)
        except Exception as exc:
            record_log.exception("Record processing failed", error=str(exc))
            return PipelineStatus.FAILED
        return result.status
