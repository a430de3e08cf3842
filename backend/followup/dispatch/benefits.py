"""Benefits-Notification Dispatcher — tells the benefits case system about a plan."""

from __future__ import annotations

from followup.clients.base import MessageChannel
from followup.core.constants import IntentKind
from followup.core.logging import get_logger
from followup.dispatch.base import Dispatcher
from followup.messaging import messages
from followup.models import DispatchOutcome, NotifyBenefitsSystem

logger = get_logger(__name__)


class BenefitsNotificationDispatcher(Dispatcher):
    kind = IntentKind.NOTIFY_BENEFITS_SYSTEM

    def __init__(self, channel: MessageChannel) -> None:
        self.channel = channel

    async def dispatch(self, intent: NotifyBenefitsSystem) -> DispatchOutcome:
        await self.channel.send(messages.benefits_plan_message(intent.fields))
        logger.info(
            "Benefits system notified",
            channel=self.channel.channel_name,
            **intent.fields.log_context(),
        )
        return DispatchOutcome.succeeded(self.kind)
