"""Maildir format mailbox store implementation."""

import mailbox
from pathlib import Path

from .base import StdlibMailbox


class MaildirMailbox(StdlibMailbox):
    """
    Mailbox handle for Maildir directories.

    Maildir delivers each message as its own file, so add() is durable
    immediately and write() has nothing to flush beyond deletions.
    """

    format_name = "maildir"
    message_class = mailbox.MaildirMessage

    def _open_box(self, path: Path, create: bool) -> mailbox.Mailbox:
        return mailbox.Maildir(str(path), factory=None, create=create)
