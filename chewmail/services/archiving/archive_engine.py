"""Archive engine: moves qualifying messages out of one source mailbox."""

import logging
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from chewmail.config.archive_config import ArchiveOptions
from chewmail.models.run_counters import RunCounters
from chewmail.services.mailstore.base import AccessMode, MailboxHandle, StoredMessage
from chewmail.services.mailstore.store_factory import open_mailbox
from chewmail.services.selection.selection_policy import SelectionPolicy
from chewmail.services.templating.date_template import resolve
from chewmail.storage.audit_log import AuditLog
from chewmail.utils.log_utils import TRACE
from chewmail.utils.path_utils import capture_file_times, expand_mailbox_path, restore_file_times
from chewmail.utils.time_utils import local_now
from chewmail.utils.unicode_utils import truncate_subject

from .output_router import OutputRouter

logger = logging.getLogger(__name__)

MailboxOpener = Callable[[str, AccessMode], MailboxHandle]

# (destination identifier, message identifier, effective date)
ArchivedMove = Tuple[str, str, datetime]


class EngineState(Enum):
    """Where the engine is in processing a source mailbox."""

    IDLE = "idle"
    OPENING = "opening"
    ITERATING = "iterating"
    EVALUATING = "evaluating"
    SKIPPING = "skipping"
    ARCHIVING = "archiving"
    DRAINING = "draining"
    CLOSING = "closing"


def open_source_mailbox(identifier: str, mode: AccessMode) -> MailboxHandle:
    return open_mailbox(identifier, mode)


class ArchiveEngine:
    """
    Processes one source mailbox at a time.

    For each message in the snapshot the selection policy decides its
    fate; qualifying messages are copied into the destination named by
    the output-box template and then marked deleted on the source.
    Destinations are always written before the source, so a copy is
    durable before the matching deletion is.
    """

    def __init__(
        self,
        options: ArchiveOptions,
        router: OutputRouter,
        policy: SelectionPolicy,
        audit_log: Optional[AuditLog] = None,
        opener: MailboxOpener = open_source_mailbox,
    ):
        """
        Initialize engine.

        Args:
            options: Run options
            router: Router resolving destination handles
            policy: Selection policy for the run
            audit_log: Optional audit trail (never written in dry runs)
            opener: Callable opening a source mailbox
        """
        self.options = options
        self.router = router
        self.policy = policy
        self.audit_log = audit_log if not options.dry_run else None
        self.opener = opener
        self.state = EngineState.IDLE
        self._unlogged: List[ArchivedMove] = []

    def process(self, source_identifier: str) -> RunCounters:
        """
        Archive qualifying messages of one source mailbox.

        Args:
            source_identifier: Source mailbox path

        Returns:
            RunCounters for this mailbox

        Raises:
            MailboxError: On any open, copy or write failure; the source
                handle is released without committing deletions
        """
        counters = RunCounters(source=source_identifier)

        self._enter(EngineState.OPENING)
        source_path = expand_mailbox_path(source_identifier)
        saved_times = capture_file_times(source_path) if self.options.preserve_timestamp else None

        mode = AccessMode.READ_ONLY if self.options.dry_run else AccessMode.READ_WRITE
        source = self.opener(source_identifier, mode)
        logger.info("Processing %s (%s)", source_identifier, self.policy.describe())

        try:
            touched = self._archive_messages(source, counters)

            self._enter(EngineState.DRAINING)
            if not self.options.delete_immediately and not self.options.dry_run:
                for identifier, destination in touched.items():
                    logger.debug("Syncing %s", identifier)
                    destination.write()
            self._log_archived(source_identifier)

            self._enter(EngineState.CLOSING)
            if not self.options.dry_run:
                logger.debug("Syncing %s", source_identifier)
            source.close()
        except Exception:
            self._unlogged.clear()
            source.release()
            self._enter(EngineState.IDLE)
            raise

        restore_file_times(source_path, saved_times)

        if self.audit_log is not None:
            self.audit_log.log_mailbox_processed(counters)

        self._enter(EngineState.IDLE)
        return counters

    def _archive_messages(
        self, source: MailboxHandle, counters: RunCounters
    ) -> Dict[str, MailboxHandle]:
        self._enter(EngineState.ITERATING)
        snapshot = source.messages(seen_only=self.options.only_read)
        counters.considered = len(snapshot)

        touched: Dict[str, MailboxHandle] = {}

        for message in snapshot:
            self._enter(EngineState.EVALUATING)
            timestamp = message.timestamp() or local_now()

            if not self.policy.include(timestamp):
                self._enter(EngineState.SKIPPING)
                if logger.isEnabledFor(TRACE):
                    logger.log(TRACE, "Keeping %s", self._describe(message))
                counters.kept += 1
                continue

            self._enter(EngineState.ARCHIVING)
            identifier = resolve(self.options.output_box, timestamp)
            destination = self.router.route_to(identifier)
            if logger.isEnabledFor(TRACE):
                logger.log(TRACE, "Archiving %s to %s", self._describe(message), identifier)

            if not self.options.dry_run:
                destination.add(message)
                source.mark_deleted(message)

            touched.setdefault(destination.identifier, destination)
            counters.archived += 1

            if self.options.delete_immediately and not self.options.dry_run:
                logger.debug("Syncing %s", identifier)
                destination.write()
                logger.debug("Syncing %s", source.identifier)
                source.write()

            if self.audit_log is not None:
                self._unlogged.append((identifier, message.identifier, timestamp))
                if self.options.delete_immediately:
                    self._log_archived(source.identifier)

        return touched

    def _log_archived(self, source_identifier: str) -> None:
        """Record moves whose destination copies have been written."""
        if self.audit_log is not None:
            for destination, message_id, timestamp in self._unlogged:
                self.audit_log.log_message_archived(
                    source_identifier, destination, message_id, timestamp
                )
        self._unlogged.clear()

    def _describe(self, message: StoredMessage) -> str:
        subject = truncate_subject(message.subject, max_length=40)
        return f"{message.identifier} ({subject})" if subject else message.identifier

    def _enter(self, state: EngineState) -> None:
        self.state = state
