"""Selection policy deciding which messages are old enough to archive."""

from datetime import datetime
from typing import Optional

from chewmail.models.selection_cutoff import SelectionCutoff
from chewmail.utils.time_utils import Instant, as_local, local_now

SECONDS_PER_DAY = 86400


def include(
    timestamp: Instant,
    cutoff_date: Optional[Instant] = None,
    cutoff_days: Optional[int] = None,
    now: Optional[Instant] = None,
) -> bool:
    """
    Decide whether a message dated `timestamp` should be archived.

    Args:
        timestamp: Effective message date
        cutoff_date: Absolute cutoff; takes precedence when given
        cutoff_days: Relative cutoff in days; ignored when zero
        now: Reference time for cutoff_days (default: current time)

    Returns:
        True if the message qualifies

    Notes:
        - With neither cutoff configured every message qualifies. This
          archive-everything default is intentional.
    """
    moment = as_local(timestamp)

    if cutoff_date is not None:
        return moment < as_local(cutoff_date)

    if cutoff_days:
        reference = as_local(now) if now is not None else local_now()
        return (reference - moment).total_seconds() > cutoff_days * SECONDS_PER_DAY

    return True


class SelectionPolicy:
    """Applies one SelectionCutoff to every message of a run."""

    def __init__(self, cutoff: SelectionCutoff, now: Optional[datetime] = None):
        """
        Initialize policy.

        Args:
            cutoff: Cutoff configured for the run
            now: Reference time pinned for the whole run (default: now)
        """
        self.cutoff = cutoff
        self.now = as_local(now) if now is not None else local_now()

    def include(self, timestamp: Instant) -> bool:
        return include(
            timestamp,
            cutoff_date=self.cutoff.date,
            cutoff_days=self.cutoff.days,
            now=self.now,
        )

    def describe(self) -> str:
        if self.cutoff.is_unbounded:
            return "all messages (no cutoff given)"
        if self.cutoff.date is not None:
            return f"messages dated before {self.cutoff.date.isoformat()}"
        return f"messages older than {self.cutoff.days} days"
