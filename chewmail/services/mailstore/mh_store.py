"""MH format mailbox store implementation."""

import mailbox
from pathlib import Path

from .base import StdlibMailbox


class MHMailbox(StdlibMailbox):
    """Mailbox handle for MH folders (numbered files plus .mh_sequences)."""

    format_name = "mh"
    message_class = mailbox.MHMessage

    def _open_box(self, path: Path, create: bool) -> mailbox.Mailbox:
        return mailbox.MH(str(path), create=create)
