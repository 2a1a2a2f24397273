"""mbox format mailbox store implementation."""

import mailbox
from pathlib import Path

from .base import StdlibMailbox


class MboxMailbox(StdlibMailbox):
    """Mailbox handle for single-file mbox mailboxes."""

    format_name = "mbox"
    message_class = mailbox.mboxMessage

    def _open_box(self, path: Path, create: bool) -> mailbox.Mailbox:
        if path.is_dir():
            raise mailbox.Error(f"{path} is a directory")
        return mailbox.mbox(str(path), create=create)
