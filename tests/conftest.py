"""Shared fixtures: small mailboxes built on disk."""

import logging
import mailbox
import time
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

import pytest

from chewmail.config.archive_config import ArchiveOptions

JANUARY = "Wed, 15 Jan 2020 12:00:00 +0000"
FEBRUARY = "Sat, 15 Feb 2020 12:00:00 +0000"
MARCH = "Sun, 15 Mar 2020 12:00:00 +0000"

# Pinned "now" for day-based cutoffs.
NOW = datetime(2020, 3, 20, 12, 0, 0).astimezone()


def build_message(
    subject: str,
    date: Optional[str] = None,
    message_id: Optional[str] = None,
    seen: bool = False,
) -> mailbox.mboxMessage:
    """Build an mbox message; seen sets the R status flag."""
    headers = [
        "From: Sender <sender@example.com>",
        "To: me@example.com",
        f"Subject: {subject}",
    ]
    if date:
        headers.append(f"Date: {date}")
    if message_id:
        headers.append(f"Message-ID: {message_id}")

    message = mailbox.mboxMessage("\n".join(headers) + "\n\nBody of " + subject + "\n")
    if seen:
        message.add_flag("R")
    return message


def write_mbox(path: Path, messages: Iterable[mailbox.Message]) -> Path:
    box = mailbox.mbox(str(path), create=True)
    for message in messages:
        box.add(message)
    box.close()
    return path


def write_maildir(path: Path, messages: Iterable[mailbox.Message]) -> Path:
    box = mailbox.Maildir(str(path), factory=None, create=True)
    for message in messages:
        box.add(mailbox.MaildirMessage(message))
    box.close()
    return path


def write_mh(path: Path, messages: Iterable[mailbox.Message]) -> Path:
    box = mailbox.MH(str(path), create=True)
    for message in messages:
        box.add(mailbox.MHMessage(message))
    box.close()
    return path


def subjects(path: Path, mailbox_class=mailbox.mbox) -> list:
    box = mailbox_class(str(path), create=False)
    try:
        return sorted(str(message["Subject"]) for message in box)
    finally:
        box.close()


@pytest.fixture
def quarter_messages():
    """One message from each of January, February and March 2020."""
    return [
        build_message("january", JANUARY, "<jan@example.com>"),
        build_message("february", FEBRUARY, "<feb@example.com>"),
        build_message("march", MARCH, "<mar@example.com>"),
    ]


@pytest.fixture
def source_mbox(tmp_path, quarter_messages):
    """mbox holding one message per month of Q1 2020."""
    return write_mbox(tmp_path / "inbox", quarter_messages)


@pytest.fixture
def western_timezone(monkeypatch):
    """Run the test with local time fixed at UTC-5."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is unavailable on this platform")
    monkeypatch.setenv("TZ", "EST5")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.fixture
def archive_dir(tmp_path):
    path = tmp_path / "archive"
    path.mkdir()
    return path


@pytest.fixture
def make_options(archive_dir):
    """Factory for ArchiveOptions routing into archive_dir by month."""

    def _make(**overrides) -> ArchiveOptions:
        values = {"output_box": str(archive_dir / "%Y-%m")}
        values.update(overrides)
        return ArchiveOptions(**values)

    return _make


@pytest.fixture(autouse=True)
def reset_package_logger():
    """configure_logging() mutates the package logger; undo it per test."""
    logger = logging.getLogger("chewmail")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate
