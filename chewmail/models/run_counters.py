"""Per-mailbox archiving counters."""

from dataclasses import dataclass


@dataclass
class RunCounters:
    """
    Counts collected while processing one source mailbox.

    Attributes:
        source: Source mailbox identifier as given on the command line
        considered: Size of the message snapshot taken for the mailbox
        archived: Messages moved to a destination mailbox
        kept: Messages left untouched in the source mailbox
    """

    source: str
    considered: int = 0
    archived: int = 0
    kept: int = 0

    def summary(self) -> str:
        """Human-readable summary line for this mailbox."""
        return (
            f"{self.source}: {self.considered} messages considered, "
            f"{self.archived} archived, {self.kept} kept"
        )
