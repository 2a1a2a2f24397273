"""Message lifecycle state inside a source mailbox."""

from enum import Enum


class MessageStatus(Enum):
    """
    State of a message within the mailbox it was read from.

    Transitions are made only through MailboxHandle calls:
    ACTIVE -> PENDING_DELETE on mark_deleted(), PENDING_DELETE -> REMOVED
    once the owning mailbox has been written.
    """

    ACTIVE = "active"
    PENDING_DELETE = "pending_delete"
    REMOVED = "removed"
