"""
Dispatcher — abstract base class for the per-path delivery coordinators.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar

from followup.core.constants import IntentKind
from followup.models import DispatchIntent, DispatchOutcome


class Dispatcher(ABC):
    """
    One dispatcher per IntentKind.

    Dispatchers for the physician and letter paths contain their own
    failures and always return an outcome.  Archive and benefits
    dispatchers let failures propagate to the coordinator.
    """

    kind: ClassVar[IntentKind]

    @abstractmethod
    async def dispatch(self, intent: DispatchIntent) -> DispatchOutcome:
        ...
