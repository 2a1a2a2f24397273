"""Path, file-time and Message-ID normalization utilities."""

import os
from pathlib import Path
from typing import Optional, Tuple

FileTimes = Tuple[int, int]


def normalize_message_id(message_id: str) -> str:
    """
    Normalize Message-ID to standard format with angle brackets.

    Args:
        message_id: Raw Message-ID (may or may not have brackets)

    Returns:
        Message-ID in format <id@domain>

    Raises:
        ValueError: If message_id is empty or malformed

    Examples:
        >>> normalize_message_id("abc@domain.com")
        '<abc@domain.com>'
        >>> normalize_message_id("<abc@domain.com>")
        '<abc@domain.com>'
    """
    if not message_id or not message_id.strip():
        raise ValueError("Message-ID is empty")

    clean_id = message_id.strip()

    if clean_id.startswith("<"):
        clean_id = clean_id[1:]
    if clean_id.endswith(">"):
        clean_id = clean_id[:-1]

    if "@" not in clean_id:
        raise ValueError(f"Invalid Message-ID format: {message_id}")

    return f"<{clean_id}>"


def expand_mailbox_path(identifier: str) -> Path:
    """
    Expand a mailbox identifier into a filesystem path.

    Args:
        identifier: Mailbox name as typed by the user (may start with ~)

    Returns:
        Path with the home directory expanded
    """
    return Path(identifier).expanduser()


def capture_file_times(path: Path) -> Optional[FileTimes]:
    """
    Record access and modification times of a regular file.

    Args:
        path: File to inspect

    Returns:
        (atime_ns, mtime_ns), or None if path is not a regular file
        (directory-backed mailboxes have no single file to restore)
    """
    if not path.is_file():
        return None

    stat = os.stat(path)
    return stat.st_atime_ns, stat.st_mtime_ns


def restore_file_times(path: Path, times: Optional[FileTimes]) -> None:
    """
    Put back times previously returned by capture_file_times().

    Args:
        path: File to update
        times: Value from capture_file_times(); None is a no-op
    """
    if times is None:
        return

    os.utime(path, ns=times)
