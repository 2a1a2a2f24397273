"""Mailbox store: per-format mailbox handles."""

from .base import (
    AccessMode,
    MailboxError,
    MailboxFlushError,
    MailboxHandle,
    MailboxOpenError,
    MessageCopyError,
    ReadOnlyMailboxError,
    StoredMessage,
)
from .dry_run_store import DryRunMailbox
from .maildir_store import MaildirMailbox
from .mbox_store import MboxMailbox
from .mh_store import MHMailbox
from .store_factory import SUPPORTED_FORMATS, detect_format, open_mailbox

__all__ = [
    "AccessMode",
    "DryRunMailbox",
    "MailboxError",
    "MailboxFlushError",
    "MailboxHandle",
    "MailboxOpenError",
    "MaildirMailbox",
    "MboxMailbox",
    "MHMailbox",
    "MessageCopyError",
    "ReadOnlyMailboxError",
    "StoredMessage",
    "SUPPORTED_FORMATS",
    "detect_format",
    "open_mailbox",
]
