"""Abstract interface for mailbox store implementations."""

import logging
import mailbox
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Union

from chewmail.models.message_status import MessageStatus
from chewmail.utils.path_utils import normalize_message_id
from chewmail.utils.time_utils import as_local
from chewmail.utils.unicode_utils import decode_email_header

logger = logging.getLogger(__name__)

MessageKey = Union[int, str]

FROM_LINE_DATE_FORMAT = "%a %b %d %H:%M:%S %Y"


class MailboxError(Exception):
    """Base exception for mailbox store errors."""

    def __init__(self, identifier: str, reason: str):
        self.identifier = identifier
        self.reason = reason
        super().__init__(f"{identifier}: {reason}")


class MailboxOpenError(MailboxError):
    """Raised when a mailbox cannot be opened or created."""

    pass


class MessageCopyError(MailboxError):
    """Raised when a message cannot be copied into a mailbox."""

    pass


class MailboxFlushError(MailboxError):
    """Raised when pending changes cannot be written to a mailbox."""

    pass


class ReadOnlyMailboxError(MailboxError):
    """Raised when a mutation is attempted on a read-only handle."""

    pass


class AccessMode(Enum):
    """How a mailbox handle may be used."""

    READ_ONLY = "read-only"
    READ_WRITE = "read-write"


class StoredMessage:
    """
    A message held by a mailbox handle.

    Wraps the format-specific email.message.Message subclass returned by
    the standard library and exposes what archiving needs: a timestamp,
    the seen flag, an identifier for logs and the lifecycle status.
    """

    def __init__(self, key: MessageKey, message: mailbox.Message):
        self.key = key
        self.message = message
        self.status = MessageStatus.ACTIVE

    def __repr__(self) -> str:
        return f"StoredMessage(key={self.key!r}, status={self.status.value})"

    @property
    def identifier(self) -> str:
        """Normalized Message-ID, or the mailbox key when there is none."""
        message_id = self.message.get("Message-ID")
        if message_id:
            try:
                return normalize_message_id(str(message_id))
            except ValueError:
                return str(message_id).strip()
        return f"#{self.key}"

    @property
    def subject(self) -> str:
        return decode_email_header(str(self.message.get("Subject", "")))

    def timestamp(self) -> Optional[datetime]:
        """
        Date the message was sent, in local time.

        Returns:
            Aware datetime from the Date header, else from the mbox
            envelope line, else None
        """
        date_header = self.message.get("Date")
        if date_header:
            try:
                sent = parsedate_to_datetime(str(date_header))
                # naive means a -0000 zone: UTC with the sender's offset unknown
                if sent.tzinfo is None:
                    sent = sent.replace(tzinfo=timezone.utc)
                return as_local(sent)
            except (TypeError, ValueError, IndexError, OverflowError, AttributeError):
                logger.debug("Unparseable Date header on %s: %r", self.identifier, date_header)

        if isinstance(self.message, mailbox.mboxMessage):
            return self._from_line_timestamp()

        return None

    def seen(self) -> bool:
        """Whether the message has been read, per its mailbox format."""
        if isinstance(self.message, mailbox.MaildirMessage):
            return "S" in self.message.get_flags()
        if isinstance(self.message, (mailbox.mboxMessage, mailbox.MMDFMessage)):
            return "R" in self.message.get_flags()
        if isinstance(self.message, mailbox.MHMessage):
            return "unseen" not in self.message.get_sequences()
        return False

    def _from_line_timestamp(self) -> Optional[datetime]:
        from_line = self.message.get_from() or ""
        parts = from_line.split()
        if len(parts) < 6:
            return None

        try:
            return as_local(datetime.strptime(" ".join(parts[-5:]), FROM_LINE_DATE_FORMAT))
        except ValueError:
            return None


class MailboxHandle(ABC):
    """
    Abstract interface for an open mailbox.

    The archive engine depends only on this interface, so sources of
    any supported format and the archive format of the destinations can
    vary independently.
    """

    format_name = "unknown"

    def __init__(self, identifier: str, path: Path, mode: AccessMode):
        self.identifier = identifier
        self.path = path
        self.mode = mode
        self.closed = False

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.identifier!r}, {self.mode.value})"

    @property
    def read_only(self) -> bool:
        return self.mode is AccessMode.READ_ONLY

    @abstractmethod
    def messages(self, seen_only: bool = False) -> List[StoredMessage]:
        """
        Snapshot of the messages currently in the mailbox.

        Args:
            seen_only: Only return messages flagged as read

        Returns:
            List of StoredMessage; later additions are not reflected

        Raises:
            MailboxError: If the mailbox cannot be read
        """
        pass

    @abstractmethod
    def add(self, message: StoredMessage) -> None:
        """
        Copy a message into this mailbox.

        Raises:
            ReadOnlyMailboxError: If the handle is read-only
            MessageCopyError: If the copy fails
        """
        pass

    @abstractmethod
    def mark_deleted(self, message: StoredMessage) -> None:
        """
        Schedule a message for removal on the next write().

        Raises:
            ReadOnlyMailboxError: If the handle is read-only
        """
        pass

    @abstractmethod
    def write(self) -> None:
        """
        Make added messages and scheduled deletions durable.

        Raises:
            ReadOnlyMailboxError: If the handle is read-only
            MailboxFlushError: If writing fails
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Write pending changes (read-write only), unlock and close."""
        pass

    @abstractmethod
    def release(self) -> None:
        """Unlock and drop the handle without writing pending changes."""
        pass


class StdlibMailbox(MailboxHandle):
    """
    MailboxHandle backed by a standard library mailbox.Mailbox.

    Subclasses provide the concrete mailbox class and the message class
    messages are converted to when copied in.
    """

    message_class = mailbox.Message

    def __init__(self, identifier: str, path: Path, mode: AccessMode, create: bool = False):
        super().__init__(identifier, path, mode)
        self._pending: Dict[MessageKey, StoredMessage] = {}
        self._locked = False

        try:
            self._box = self._open_box(path, create)
        except mailbox.NoSuchMailboxError:
            raise MailboxOpenError(identifier, f"no such {self.format_name} mailbox")
        except (OSError, mailbox.Error) as e:
            raise MailboxOpenError(identifier, f"cannot open {self.format_name} mailbox: {e}")

        if not self.read_only:
            try:
                self._box.lock()
                self._locked = True
            except (OSError, mailbox.ExternalClashError) as e:
                raise MailboxOpenError(identifier, f"cannot lock mailbox: {e}")

        logger.debug("Opened %s %s mailbox %s", self.mode.value, self.format_name, identifier)

    @abstractmethod
    def _open_box(self, path: Path, create: bool) -> mailbox.Mailbox:
        pass

    def messages(self, seen_only: bool = False) -> List[StoredMessage]:
        try:
            snapshot = [StoredMessage(key, message) for key, message in self._box.iteritems()]
        except (OSError, mailbox.Error) as e:
            raise MailboxError(self.identifier, f"cannot read messages: {e}")

        if seen_only:
            snapshot = [message for message in snapshot if message.seen()]

        return snapshot

    def add(self, message: StoredMessage) -> None:
        self._require_writable("copy a message into")

        try:
            self._box.add(self.message_class(message.message))
        except (OSError, mailbox.Error, ValueError, TypeError) as e:
            raise MessageCopyError(
                self.identifier, f"cannot copy message {message.identifier}: {e}"
            )

    def mark_deleted(self, message: StoredMessage) -> None:
        self._require_writable("delete from")

        if message.status is not MessageStatus.ACTIVE:
            raise ValueError(f"Message {message.identifier} is already {message.status.value}")

        message.status = MessageStatus.PENDING_DELETE
        self._pending[message.key] = message

    def write(self) -> None:
        self._require_writable("write")
        self._commit()

    def _commit(self) -> None:
        try:
            for key in self._pending:
                self._box.discard(key)
            self._box.flush()
        except (OSError, mailbox.Error) as e:
            raise MailboxFlushError(self.identifier, f"cannot write mailbox: {e}")

        for message in self._pending.values():
            message.status = MessageStatus.REMOVED
        self._pending.clear()

    def close(self) -> None:
        if self.closed:
            return

        if not self.read_only:
            self._commit()

        try:
            self._unlock()
            self._box.close()
        except (OSError, mailbox.Error) as e:
            raise MailboxFlushError(self.identifier, f"cannot close mailbox: {e}")

        self.closed = True
        logger.debug("Closed mailbox %s", self.identifier)

    def release(self) -> None:
        """
        Drop the handle without committing anything.

        Notes:
            - Scheduled deletions stay unapplied
            - Single-file mailboxes keep their descriptor until exit
        """
        if self.closed:
            return

        try:
            self._unlock()
        except (OSError, mailbox.Error) as e:
            logger.warning("Could not unlock %s: %s", self.identifier, e)

        self.closed = True

    def _unlock(self) -> None:
        if self._locked:
            self._box.unlock()
            self._locked = False

    def _require_writable(self, action: str) -> None:
        if self.read_only:
            raise ReadOnlyMailboxError(self.identifier, f"cannot {action} a read-only mailbox")
        if self.closed:
            raise MailboxError(self.identifier, f"cannot {action} a closed mailbox")
