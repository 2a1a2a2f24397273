"""Placeholder mailbox used for destinations during dry runs."""

from pathlib import Path
from typing import List

from .base import AccessMode, MailboxHandle, ReadOnlyMailboxError, StoredMessage


class DryRunMailbox(MailboxHandle):
    """
    Stand-in for a destination that a dry run would have opened.

    Nothing is created on disk. Any attempt to mutate it raises, so a
    dry run that tried to copy would fail loudly instead of writing.
    """

    format_name = "dry-run"

    def __init__(self, identifier: str, path: Path):
        super().__init__(identifier, path, AccessMode.READ_ONLY)

    def messages(self, seen_only: bool = False) -> List[StoredMessage]:
        return []

    def add(self, message: StoredMessage) -> None:
        raise ReadOnlyMailboxError(self.identifier, "dry run: not copying")

    def mark_deleted(self, message: StoredMessage) -> None:
        raise ReadOnlyMailboxError(self.identifier, "dry run: not deleting")

    def write(self) -> None:
        raise ReadOnlyMailboxError(self.identifier, "dry run: not writing")

    def close(self) -> None:
        self.closed = True

    def release(self) -> None:
        self.closed = True
