"""Utility functions"""

from .path_utils import (
    capture_file_times,
    expand_mailbox_path,
    normalize_message_id,
    restore_file_times,
)
from .time_utils import as_local, local_now
from .unicode_utils import decode_email_header, truncate_subject

__all__ = [
    "as_local",
    "capture_file_times",
    "decode_email_header",
    "expand_mailbox_path",
    "local_now",
    "normalize_message_id",
    "restore_file_times",
    "truncate_subject",
]
