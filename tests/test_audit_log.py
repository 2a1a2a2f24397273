"""Tests for AuditLog."""

import json
from datetime import datetime

from chewmail.models.run_counters import RunCounters
from chewmail.storage.audit_log import AuditLog


class TestAuditLog:
    """Test audit trail persistence."""

    def test_creates_parent_directory(self, tmp_path):
        """Test the log directory is created."""
        log = AuditLog(tmp_path / "deep" / "logs" / "audit.log")
        assert (tmp_path / "deep" / "logs").is_dir()
        assert log.read_events() == []

    def test_message_event(self, tmp_path):
        """Test recording an archived message."""
        log = AuditLog(tmp_path / "audit.log")
        log.log_message_archived("inbox", "archive/2020-01", "<a@example.com>", datetime(2020, 1, 15))

        (event,) = log.read_events()
        assert event["event_type"] == "message_archived"
        assert event["source"] == "inbox"
        assert event["message_date"] == "2020-01-15T00:00:00"

    def test_mailbox_event(self, tmp_path):
        """Test recording mailbox totals."""
        log = AuditLog(tmp_path / "audit.log")
        log.log_mailbox_processed(RunCounters("inbox", considered=3, archived=2, kept=1))

        (event,) = log.read_events()
        assert (event["considered"], event["archived"], event["kept"]) == (3, 2, 1)

    def test_corrupt_lines_skipped(self, tmp_path):
        """Test corrupt lines are skipped on read."""
        path = tmp_path / "audit.log"
        log = AuditLog(path)
        log.log_message_archived("inbox", "out", "#1", None)
        with open(path, "a", encoding="utf-8") as f:
            f.write("{broken\n")

        assert len(log.read_events()) == 1

    def test_export(self, tmp_path):
        """Test exporting events as JSON."""
        log = AuditLog(tmp_path / "audit.log")
        log.log_message_archived("inbox", "out", "#1", None)
        output = tmp_path / "export" / "events.json"
        log.export_events(output)

        assert json.loads(output.read_text(encoding="utf-8"))[0]["message_id"] == "#1"
