"""Business logic services"""

from .archiving import ArchiveEngine, DestinationRegistry, OutputRouter, RunOrchestrator
from .mailstore import open_mailbox
from .selection import SelectionPolicy
from .templating import resolve

__all__ = [
    "ArchiveEngine",
    "DestinationRegistry",
    "OutputRouter",
    "RunOrchestrator",
    "SelectionPolicy",
    "open_mailbox",
    "resolve",
]
