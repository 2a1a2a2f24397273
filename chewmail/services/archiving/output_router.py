"""Routing of archived messages to destination mailboxes."""

import logging
from typing import Dict, Iterator, Optional

from chewmail.services.mailstore.base import AccessMode, MailboxHandle, MailboxOpenError
from chewmail.services.mailstore.dry_run_store import DryRunMailbox
from chewmail.services.mailstore.store_factory import open_mailbox
from chewmail.utils.path_utils import expand_mailbox_path

logger = logging.getLogger(__name__)


class DestinationRegistry:
    """
    Run-scoped mapping of destination identifier to open handle.

    Shared by every source mailbox of a run so that several sources can
    feed the same date-bucketed destination without reopening it.
    """

    def __init__(self):
        self._handles: Dict[str, MailboxHandle] = {}

    def __contains__(self, identifier: str) -> bool:
        return identifier in self._handles

    def __len__(self) -> int:
        return len(self._handles)

    def __iter__(self) -> Iterator[MailboxHandle]:
        return iter(list(self._handles.values()))

    def get(self, identifier: str) -> Optional[MailboxHandle]:
        return self._handles.get(identifier)

    def register(self, identifier: str, handle: MailboxHandle) -> None:
        if identifier in self._handles:
            raise ValueError(f"Destination already registered: {identifier}")
        self._handles[identifier] = handle

    def close_all(self) -> None:
        """Close every destination opened during the run."""
        for identifier, handle in self._handles.items():
            logger.debug("Closing destination %s", identifier)
            handle.close()

    def release_all(self) -> None:
        """Drop every destination without writing (used after a fatal error)."""
        for handle in self._handles.values():
            handle.release()


class OutputRouter:
    """Opens destination mailboxes lazily and caches them by identifier."""

    def __init__(
        self,
        registry: DestinationRegistry,
        archive_format: str = "mbox",
        dry_run: bool = False,
        create_parents: bool = True,
    ):
        """
        Initialize router.

        Args:
            registry: Run-scoped destination registry
            archive_format: Format every destination is created in
            dry_run: Hand out placeholders instead of opening anything
            create_parents: Create missing parent directories of destinations
        """
        self.registry = registry
        self.archive_format = archive_format
        self.dry_run = dry_run
        self.create_parents = create_parents

    def route_to(self, identifier: str) -> MailboxHandle:
        """
        Get the handle for a destination, opening it on first use.

        Args:
            identifier: Destination mailbox name resolved from the template

        Returns:
            Cached or newly opened MailboxHandle

        Raises:
            MailboxOpenError: If the destination cannot be opened or created
        """
        key = str(expand_mailbox_path(identifier))

        handle = self.registry.get(key)
        if handle is not None:
            return handle

        if self.dry_run:
            handle = DryRunMailbox(identifier, expand_mailbox_path(identifier))
            logger.info("Would open destination %s", identifier)
        else:
            self._ensure_parent(identifier)
            handle = open_mailbox(
                identifier,
                AccessMode.READ_WRITE,
                create=True,
                mailbox_format=self.archive_format,
            )
            logger.info("Opened destination %s", identifier)

        self.registry.register(key, handle)
        return handle

    def _ensure_parent(self, identifier: str) -> None:
        parent = expand_mailbox_path(identifier).parent
        if parent.exists() or not self.create_parents:
            return

        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise MailboxOpenError(identifier, f"cannot create directory {parent}: {e}")
