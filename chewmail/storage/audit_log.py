"""Audit trail of archived messages."""

import json
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from chewmail.models.run_counters import RunCounters


class AuditLog:
    """JSON-lines audit log of archiving events."""

    def __init__(self, log_path: Optional[Path] = None):
        """
        Initialize audit logger.

        Args:
            log_path: Path to audit log file (default: ~/.chewmail/logs/audit.log)
        """
        if log_path is None:
            log_path = Path("~/.chewmail/logs/audit.log").expanduser()

        self.log_path = log_path
        self.log_path.parent.mkdir(parents=True, exist_ok=True)

    def log_message_archived(
        self,
        source: str,
        destination: str,
        message_id: str,
        message_date: Optional[datetime],
    ) -> None:
        """
        Log that a message was copied out of a source mailbox.

        Args:
            source: Source mailbox identifier
            destination: Resolved destination mailbox identifier
            message_id: Message-ID (or mailbox key) of the message
            message_date: Effective date used for routing
        """
        event = {
            "timestamp": datetime.now().isoformat(),
            "event_type": "message_archived",
            "source": source,
            "destination": destination,
            "message_id": message_id,
            "message_date": message_date.isoformat() if message_date else None,
        }

        self._write_event(event)

    def log_mailbox_processed(self, counters: RunCounters) -> None:
        """Log the final counters of one source mailbox."""
        event = {
            "timestamp": datetime.now().isoformat(),
            "event_type": "mailbox_processed",
            "source": counters.source,
            "considered": counters.considered,
            "archived": counters.archived,
            "kept": counters.kept,
        }

        self._write_event(event)

    def read_events(self) -> List[dict]:
        """
        Read all events recorded so far.

        Returns:
            Events in the order they were written; corrupt lines skipped
        """
        events = []

        if self.log_path.exists():
            with open(self.log_path, "r", encoding="utf-8") as f:
                for line in f:
                    line = line.strip()
                    if line:
                        try:
                            events.append(json.loads(line))
                        except json.JSONDecodeError:
                            continue

        return events

    def export_events(self, output_path: Path) -> None:
        """
        Export all events to a JSON array file.

        Args:
            output_path: Path to output JSON file
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(self.read_events(), f, indent=2, ensure_ascii=False)

    def _write_event(self, event: dict) -> None:
        with open(self.log_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(event, ensure_ascii=False) + "\n")
