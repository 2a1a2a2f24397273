"""Selection cutoff data model."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class SelectionCutoff:
    """
    Age boundary deciding which messages get archived.

    Attributes:
        date: Absolute cutoff; messages dated strictly before it qualify
        days: Relative cutoff; messages older than this many days qualify

    Notes:
        - When both are set, date wins and days is ignored
        - When neither is set every message qualifies
    """

    date: Optional[datetime] = None
    days: Optional[int] = None

    @property
    def is_unbounded(self) -> bool:
        return self.date is None and not self.days
