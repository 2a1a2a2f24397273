"""Mailbox format detection and opening."""

import logging
from pathlib import Path
from typing import Dict, Optional, Type

from chewmail.utils.path_utils import expand_mailbox_path
from .base import AccessMode, MailboxOpenError, StdlibMailbox
from .maildir_store import MaildirMailbox
from .mbox_store import MboxMailbox
from .mh_store import MHMailbox

logger = logging.getLogger(__name__)

MAILBOX_CLASSES: Dict[str, Type[StdlibMailbox]] = {
    "mbox": MboxMailbox,
    "maildir": MaildirMailbox,
    "mh": MHMailbox,
}

SUPPORTED_FORMATS = tuple(MAILBOX_CLASSES)


def detect_format(path: Path) -> Optional[str]:
    """
    Detect the mailbox format stored at the given path.

    Args:
        path: Path to mailbox file or directory

    Returns:
        'mbox', 'maildir', 'mh', or None if nothing recognizable exists

    Notes:
        - Any regular file is treated as mbox (an empty file is a valid mbox)
        - Maildir detection checks for cur/, new/, tmp/ subdirectories
        - MH detection checks for a .mh_sequences file
    """
    if path.is_file():
        return "mbox"

    if path.is_dir():
        maildir_subdirs = {"cur", "new", "tmp"}
        existing_subdirs = {p.name for p in path.iterdir() if p.is_dir()}
        if maildir_subdirs.issubset(existing_subdirs):
            return "maildir"

        if (path / ".mh_sequences").exists():
            return "mh"

    return None


def open_mailbox(
    identifier: str,
    mode: AccessMode,
    create: bool = False,
    mailbox_format: Optional[str] = None,
) -> StdlibMailbox:
    """
    Open a mailbox by name.

    Args:
        identifier: Mailbox path as given by the user or a template
        mode: Access mode of the returned handle
        create: Create the mailbox if it does not exist
        mailbox_format: Required format; detected from disk when None

    Returns:
        Open MailboxHandle

    Raises:
        MailboxOpenError: If the mailbox does not exist (and create is
            False), has a different format than requested, or cannot
            be opened
    """
    path = expand_mailbox_path(identifier)
    detected = detect_format(path)

    if mailbox_format is None:
        if detected is None:
            if path.exists():
                raise MailboxOpenError(identifier, "not a recognized mailbox")
            raise MailboxOpenError(identifier, "no such mailbox")
        mailbox_format = detected
    elif detected is not None and detected != mailbox_format:
        raise MailboxOpenError(
            identifier, f"exists as a {detected} mailbox, expected {mailbox_format}"
        )

    mailbox_class = MAILBOX_CLASSES.get(mailbox_format)
    if mailbox_class is None:
        raise MailboxOpenError(identifier, f"unsupported mailbox format: {mailbox_format}")

    return mailbox_class(identifier, path, mode, create=create)
