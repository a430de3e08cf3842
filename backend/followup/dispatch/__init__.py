"""
Dispatch coordinators — one per downstream delivery path.

    - archive.py    — ArchiveDocument          → archive service
    - benefits.py   — NotifyBenefitsSystem     → benefits notification queue
    - physician.py  — NotifyPhysician          → physician dialog queue, letter fallback
    - letter.py     — FallbackPhysicalLetter   → document production + "letter sent"
    - coordinator.py — runs a submission's intents and contains failures
"""

from followup.dispatch.archive import ArchiveDispatcher
from followup.dispatch.benefits import BenefitsNotificationDispatcher
from followup.dispatch.coordinator import DispatchCoordinator
from followup.dispatch.letter import LetterDispatcher
from followup.dispatch.physician import PhysicianNotificationDispatcher

__all__ = [
    "ArchiveDispatcher",
    "BenefitsNotificationDispatcher",
    "DispatchCoordinator",
    "LetterDispatcher",
    "PhysicianNotificationDispatcher",
]
