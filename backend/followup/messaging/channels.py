"""
BrokerChannel — outbound durable queue on the Celery broker.

Messages are published as JSON through the app's producer pool to a
direct exchange named after the queue.  The queue is declared on every
publish so a fresh broker needs no provisioning.
"""

from __future__ import annotations

import asyncio
from typing import Any

from celery import Celery
from kombu import Exchange, Queue

from followup.core.logging import get_logger
from followup.messaging import celery_app
from followup.pipeline.errors import RemoteServiceError

logger = get_logger(__name__)


class BrokerChannel:
    """A MessageChannel backed by one durable broker queue."""

    def __init__(self, queue_name: str, app: Celery | None = None) -> None:
        self.app = app or celery_app
        self.queue = Queue(
            queue_name,
            Exchange(queue_name, type="direct", durable=True),
            routing_key=queue_name,
            durable=True,
        )

    @property
    def channel_name(self) -> str:
        return self.queue.name

    async def send(self, message: dict[str, Any]) -> None:
        try:
            await asyncio.to_thread(self._publish, message)
        except Exception as exc:
            raise RemoteServiceError(
                f"Publishing to {self.channel_name} failed: {exc}",
                service=self.channel_name,
            ) from exc

        logger.debug(
            "Message published",
            queue=self.channel_name,
            message_type=message.get("messageType"),
        )

    def _publish(self, message: dict[str, Any]) -> None:
        with self.app.producer_or_acquire() as producer:
            producer.publish(
                message,
                exchange=self.queue.exchange,
                routing_key=self.queue.routing_key,
                declare=[self.queue],
                serializer="json",
                delivery_mode="persistent",
                retry=True,
            )
