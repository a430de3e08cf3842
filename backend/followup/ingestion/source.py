"""
Inbound submission source — the event log the ingestion loop polls.

BrokerSubmissionSource reads JSON records off a broker queue with kombu's
SimpleQueue over the Celery app's read connection.  Messages are only
acknowledged on commit(), after the whole batch was processed, so a crash
mid-batch redelivers it (at-least-once).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from celery import Celery
from kombu.message import Message

from followup.core.logging import get_logger
from followup.messaging import celery_app

logger = get_logger(__name__)


@dataclass(frozen=True)
class InboundRecord:
    """One undecoded record plus where it came from."""

    payload: Any
    topic: str
    partition: int | None = None
    offset: Any = None


class SubmissionSource(Protocol):
    def poll(self) -> list[InboundRecord]:
        """Return the records available right now, possibly none.  Never waits."""
        ...

    def commit(self) -> None:
        """Acknowledge every record returned by poll() since the last commit."""
        ...

    def close(self) -> None: ...


class BrokerSubmissionSource:
    """Zero-wait batch reads from one durable broker queue."""

    def __init__(self, queue_name: str, app: Celery | None = None, batch_size: int = 50) -> None:
        self.queue_name = queue_name
        self.batch_size = batch_size
        self.app = app or celery_app
        self._connection = self.app.connection_for_read()
        self._queue = self._connection.SimpleQueue(queue_name)
        self._pending: list[Message] = []

    def poll(self) -> list[InboundRecord]:
        records: list[InboundRecord] = []
        while len(records) < self.batch_size:
            try:
                message = self._queue.get(block=False)
            except self._queue.Empty:
                break
            self._pending.append(message)
            records.append(InboundRecord(
                payload=message.payload,
                topic=self.queue_name,
                offset=message.delivery_tag,
            ))
        return records

    def commit(self) -> None:
        for message in self._pending:
            message.ack()
        if self._pending:
            logger.debug("Batch committed", queue=self.queue_name, records=len(self._pending))
        self._pending.clear()

    def close(self) -> None:
        self._queue.close()
        self._connection.release()
