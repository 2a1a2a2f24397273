"""Data models for mail archiving"""

from .message_status import MessageStatus
from .run_counters import RunCounters
from .selection_cutoff import SelectionCutoff

__all__ = [
    "MessageStatus",
    "RunCounters",
    "SelectionCutoff",
]
