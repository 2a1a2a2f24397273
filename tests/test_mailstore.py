"""Tests for the mailbox store handles."""

import mailbox
from datetime import timedelta

import pytest

from chewmail.models.message_status import MessageStatus
from chewmail.services.mailstore.base import (
    AccessMode,
    MailboxOpenError,
    ReadOnlyMailboxError,
    StoredMessage,
)
from chewmail.services.mailstore.dry_run_store import DryRunMailbox
from chewmail.services.mailstore.maildir_store import MaildirMailbox
from chewmail.services.mailstore.mbox_store import MboxMailbox
from chewmail.services.mailstore.mh_store import MHMailbox
from chewmail.services.mailstore.store_factory import detect_format, open_mailbox

from conftest import JANUARY, build_message, subjects, write_maildir, write_mbox, write_mh


class TestStoredMessage:
    """Test per-message accessors."""

    def test_timestamp_from_date_header(self):
        """Test timestamp is read from the Date header."""
        message = StoredMessage(0, build_message("a", JANUARY))
        timestamp = message.timestamp()

        assert timestamp.tzinfo is not None
        assert (timestamp.year, timestamp.month) == (2020, 1)

    def test_unknown_zone_date_is_utc(self, western_timezone):
        """Test a -0000 Date is read as UTC, not local wall time."""
        message = StoredMessage(0, build_message("a", "Sat, 01 Feb 2020 00:30:00 -0000"))
        timestamp = message.timestamp()

        assert timestamp.utcoffset() == timedelta(hours=-5)
        assert (timestamp.month, timestamp.day, timestamp.hour) == (1, 31, 19)

    def test_timestamp_from_envelope_line(self):
        """Test timestamp falls back to the mbox From_ line."""
        raw = build_message("a")
        raw.set_from("MAILER-DAEMON Tue Mar  3 10:00:00 2020")
        timestamp = StoredMessage(0, raw).timestamp()

        assert (timestamp.year, timestamp.month, timestamp.day) == (2020, 3, 3)

    def test_unparseable_date_without_envelope(self):
        """Test an unreadable Date with no envelope gives None."""
        raw = mailbox.MaildirMessage(build_message("a", "not a date"))
        assert StoredMessage("key", raw).timestamp() is None

    def test_identifier_prefers_message_id(self):
        """Test identifier uses the normalized Message-ID."""
        message = StoredMessage(3, build_message("a", JANUARY, "abc@example.com"))
        assert message.identifier == "<abc@example.com>"

    def test_identifier_falls_back_to_key(self):
        """Test identifier falls back to the mailbox key."""
        assert StoredMessage(3, build_message("a", JANUARY)).identifier == "#3"

    def test_seen_flags_per_format(self):
        """Test seen flag is read per mailbox format."""
        seen = build_message("a", seen=True)
        unseen = build_message("b")

        assert StoredMessage(0, seen).seen() is True
        assert StoredMessage(0, unseen).seen() is False
        assert StoredMessage(0, mailbox.MaildirMessage(seen)).seen() is True
        assert StoredMessage(0, mailbox.MaildirMessage(unseen)).seen() is False
        assert StoredMessage(0, mailbox.MHMessage(seen)).seen() is True
        assert StoredMessage(0, mailbox.MHMessage(unseen)).seen() is False

    def test_new_message_is_active(self):
        """Test new messages start active."""
        assert StoredMessage(0, build_message("a")).status is MessageStatus.ACTIVE


class TestDetectFormat:
    """Test mailbox format detection."""

    def test_mbox(self, tmp_path):
        """Test detecting an mbox file."""
        assert detect_format(write_mbox(tmp_path / "box", [])) == "mbox"

    def test_maildir(self, tmp_path):
        """Test detecting a Maildir directory."""
        assert detect_format(write_maildir(tmp_path / "md", [])) == "maildir"

    def test_mh(self, tmp_path):
        """Test detecting an MH directory."""
        assert detect_format(write_mh(tmp_path / "mh", [])) == "mh"

    def test_missing_and_plain_directory(self, tmp_path):
        """Test missing paths and plain directories are not mailboxes."""
        assert detect_format(tmp_path / "missing") is None
        assert detect_format(tmp_path) is None


class TestOpenMailbox:
    """Test opening mailboxes through the factory."""

    def test_missing_source_is_fatal(self, tmp_path):
        """Test opening a missing source raises MailboxOpenError."""
        with pytest.raises(MailboxOpenError) as exc_info:
            open_mailbox(str(tmp_path / "nope"), AccessMode.READ_ONLY)
        assert "nope" in str(exc_info.value)

    def test_unrecognized_directory(self, tmp_path):
        """Test opening a plain directory raises MailboxOpenError."""
        with pytest.raises(MailboxOpenError):
            open_mailbox(str(tmp_path), AccessMode.READ_ONLY)

    def test_format_mismatch(self, tmp_path):
        """Test an existing mailbox of another format is refused."""
        path = write_maildir(tmp_path / "md", [])
        with pytest.raises(MailboxOpenError):
            open_mailbox(str(path), AccessMode.READ_WRITE, create=True, mailbox_format="mbox")

    @pytest.mark.parametrize(
        "mailbox_format, handle_class",
        [("mbox", MboxMailbox), ("maildir", MaildirMailbox), ("mh", MHMailbox)],
    )
    def test_create(self, tmp_path, mailbox_format, handle_class):
        """Test creating a new mailbox of each format."""
        path = tmp_path / "new"
        handle = open_mailbox(str(path), AccessMode.READ_WRITE, create=True, mailbox_format=mailbox_format)

        assert isinstance(handle, handle_class)
        assert path.exists()
        handle.close()

    def test_unsupported_format(self, tmp_path):
        """Test an unknown format name is refused."""
        with pytest.raises(MailboxOpenError):
            open_mailbox(str(tmp_path / "x"), AccessMode.READ_WRITE, create=True, mailbox_format="mmdf")


class TestStdlibMailbox:
    """Test copy, delete and write semantics."""

    def test_snapshot_and_seen_filter(self, tmp_path):
        """Test snapshot with and without the seen filter."""
        path = write_mbox(
            tmp_path / "box",
            [build_message("a", seen=True), build_message("b"), build_message("c", seen=True)],
        )
        handle = open_mailbox(str(path), AccessMode.READ_ONLY)

        assert len(handle.messages()) == 3
        assert len(handle.messages(seen_only=True)) == 2
        handle.close()

    def test_delete_is_pending_until_write(self, tmp_path):
        """Test deletions apply only on write."""
        path = write_mbox(tmp_path / "box", [build_message("a"), build_message("b")])
        handle = open_mailbox(str(path), AccessMode.READ_WRITE)
        first = handle.messages()[0]

        handle.mark_deleted(first)
        assert first.status is MessageStatus.PENDING_DELETE
        assert len(subjects(path)) == 2

        handle.write()
        assert first.status is MessageStatus.REMOVED
        assert subjects(path) == ["b"]
        handle.close()

    def test_double_delete_rejected(self, tmp_path):
        """Test marking a message deleted twice raises ValueError."""
        path = write_mbox(tmp_path / "box", [build_message("a")])
        handle = open_mailbox(str(path), AccessMode.READ_WRITE)
        message = handle.messages()[0]
        handle.mark_deleted(message)

        with pytest.raises(ValueError):
            handle.mark_deleted(message)
        handle.release()

    def test_release_discards_pending_deletes(self, tmp_path):
        """Test release drops pending deletions and the lock."""
        path = write_mbox(tmp_path / "box", [build_message("a")])
        handle = open_mailbox(str(path), AccessMode.READ_WRITE)
        handle.mark_deleted(handle.messages()[0])
        handle.release()

        assert subjects(path) == ["a"]
        assert not (tmp_path / "box.lock").exists()

    def test_close_commits_pending_deletes(self, tmp_path):
        """Test close commits pending deletions."""
        path = write_mbox(tmp_path / "box", [build_message("a"), build_message("b")])
        handle = open_mailbox(str(path), AccessMode.READ_WRITE)
        handle.mark_deleted(handle.messages()[1])
        handle.close()

        assert subjects(path) == ["a"]
        assert handle.closed is True

    def test_read_only_refuses_mutation(self, tmp_path):
        """Test read-only handles refuse every mutation."""
        path = write_mbox(tmp_path / "box", [build_message("a")])
        handle = open_mailbox(str(path), AccessMode.READ_ONLY)
        message = handle.messages()[0]

        with pytest.raises(ReadOnlyMailboxError):
            handle.mark_deleted(message)
        with pytest.raises(ReadOnlyMailboxError):
            handle.add(message)
        with pytest.raises(ReadOnlyMailboxError):
            handle.write()
        handle.close()

    def test_copy_converts_flags_across_formats(self, tmp_path):
        """Test copying mbox to Maildir keeps the seen flag."""
        source = write_mbox(tmp_path / "box", [build_message("a", seen=True)])
        src = open_mailbox(str(source), AccessMode.READ_ONLY)
        dst = open_mailbox(str(tmp_path / "md"), AccessMode.READ_WRITE, create=True, mailbox_format="maildir")

        dst.add(src.messages()[0])
        dst.write()

        copied = dst.messages()
        assert len(copied) == 1
        assert copied[0].seen() is True
        src.close()
        dst.close()

    def test_mh_source_round_trip(self, tmp_path):
        """Test deleting from an MH source."""
        path = write_mh(tmp_path / "mh", [build_message("a", JANUARY), build_message("b", JANUARY)])
        handle = open_mailbox(str(path), AccessMode.READ_WRITE)
        handle.mark_deleted(handle.messages()[0])
        handle.close()

        assert len(subjects(path, mailbox.MH)) == 1


class TestDryRunMailbox:
    """Test the dry-run placeholder."""

    def test_never_mutates(self, tmp_path):
        """Test the placeholder refuses writes and creates nothing."""
        handle = DryRunMailbox("x", tmp_path / "x")

        with pytest.raises(ReadOnlyMailboxError):
            handle.add(StoredMessage(0, build_message("a")))
        with pytest.raises(ReadOnlyMailboxError):
            handle.write()

        handle.close()
        assert handle.closed is True
        assert not (tmp_path / "x").exists()
