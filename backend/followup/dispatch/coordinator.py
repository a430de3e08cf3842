"""
DispatchCoordinator — fans one submission's intents out to their dispatchers.

Intents run in the order the routing rules emitted them.  Every intent
ends with exactly one DispatchOutcome.  If a dispatcher raises (archive
or benefits delivery), that intent is Failed and the submission's
remaining intents are recorded as aborted; nothing propagates further.
"""

from __future__ import annotations

from followup.core.constants import IntentKind
from followup.core.logging import get_logger
from followup.dispatch.base import Dispatcher
from followup.models import DispatchIntent, DispatchOutcome

logger = get_logger(__name__)


class DispatchCoordinator:

    def __init__(self, dispatchers: list[Dispatcher]) -> None:
        self._dispatchers: dict[IntentKind, Dispatcher] = {d.kind: d for d in dispatchers}

    def dispatcher_for(self, kind: IntentKind) -> Dispatcher | None:
        return self._dispatchers.get(kind)

    async def dispatch_all(self, intents: list[DispatchIntent]) -> list[DispatchOutcome]:
        outcomes: list[DispatchOutcome] = []

        for index, intent in enumerate(intents):
            log = logger.bind(intent=intent.kind, **intent.fields.log_context())
            dispatcher = self.dispatcher_for(intent.kind)
            if dispatcher is None:
                log.error("No dispatcher registered for intent")
                outcomes.append(DispatchOutcome.failed(intent.kind, "no dispatcher registered"))
                continue

            try:
                outcome = await dispatcher.dispatch(intent)
            except Exception as exc:
                log.exception("Dispatch failed, aborting remaining intents", error=str(exc))
                outcomes.append(DispatchOutcome.failed(intent.kind, str(exc)))
                outcomes.extend(
                    DispatchOutcome.failed(
                        remaining.kind, f"aborted after {intent.kind} failure"
                    )
                    for remaining in intents[index + 1:]
                )
                break

            log.info("Intent dispatched", status=outcome.status, reason=outcome.reason)
            outcomes.append(outcome)

        return outcomes
