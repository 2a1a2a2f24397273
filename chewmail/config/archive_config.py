"""Configuration models for archiving runs."""

from datetime import datetime
from pathlib import Path
from typing import Literal, Optional

from dateutil import parser as date_parser
from pydantic import BaseModel, Field, field_validator

from chewmail.models.selection_cutoff import SelectionCutoff
from chewmail.utils.time_utils import as_local

ArchiveFormat = Literal["mbox", "maildir", "mh"]


def parse_cutoff_date(value: str) -> datetime:
    """
    Parse a free-form date given with --date.

    Args:
        value: Date text, e.g. "2020-01-01", "1 Jan 2020 10:00 +0100"

    Returns:
        Aware datetime; dates without a zone are taken as local time

    Raises:
        ValueError: If the text is not a recognizable date
    """
    if not value or not value.strip():
        raise ValueError("date is empty")

    try:
        parsed = date_parser.parse(value)
    except (ValueError, OverflowError) as e:
        raise ValueError(f"cannot parse date {value!r}: {e}")

    return as_local(parsed)


class ArchiveSettings(BaseModel):
    """Where and how destination mailboxes are written."""

    format: ArchiveFormat = "mbox"
    create_parents: bool = True


class AuditSettings(BaseModel):
    """Audit trail settings."""

    enabled: bool = False
    log_path: str = "~/.chewmail/logs/audit.log"

    def get_log_path(self) -> Path:
        """Get expanded audit log path."""
        return Path(self.log_path).expanduser()


class AppConfig(BaseModel):
    """Settings file contents."""

    schema_version: str = "1.0"
    archive: ArchiveSettings = Field(default_factory=ArchiveSettings)
    audit: AuditSettings = Field(default_factory=AuditSettings)

    @field_validator("schema_version")
    def validate_schema_version(cls, v: str) -> str:
        if not v:
            raise ValueError("schema_version is required")
        return v


class ArchiveOptions(BaseModel):
    """
    Options for one archiving run, as given on the command line.

    Attributes:
        output_box: Destination mailbox name template (date specifiers allowed)
        days: Archive messages older than this many days
        date: Archive messages dated before this moment; wins over days
        only_read: Only consider messages flagged as read
        delete_immediately: Write destination and source after every message
        preserve_timestamp: Restore source file atime/mtime after closing
        dry_run: Touch nothing on disk, only count
        verbose: Verbosity tier (0-3)
        quiet: Suppress summaries when verbose is 0
        archive_format: Format of destination mailboxes
    """

    output_box: str
    days: Optional[int] = None
    date: Optional[datetime] = None
    only_read: bool = False
    delete_immediately: bool = False
    preserve_timestamp: bool = False
    dry_run: bool = False
    verbose: int = 0
    quiet: bool = False
    archive_format: ArchiveFormat = "mbox"

    @field_validator("output_box")
    def validate_output_box(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("output box template is required")
        return v

    @field_validator("days")
    def validate_days(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError("days must not be negative")
        return v

    @field_validator("date", mode="before")
    def validate_date(cls, v):
        if v is None or isinstance(v, datetime):
            return as_local(v) if v is not None else None
        return parse_cutoff_date(str(v))

    @field_validator("verbose")
    def validate_verbose(cls, v: int) -> int:
        if v < 0:
            raise ValueError("verbose must not be negative")
        return v

    @property
    def reports_summary(self) -> bool:
        return not (self.quiet and self.verbose == 0)

    def cutoff(self) -> SelectionCutoff:
        """Build the run's selection cutoff."""
        return SelectionCutoff(date=self.date, days=self.days)
