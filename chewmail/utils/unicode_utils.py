"""Header decoding and display helpers for log output."""

from email.errors import HeaderParseError
from email.header import decode_header
from typing import Optional


def _decode_part(content: bytes, encoding: Optional[str]) -> str:
    for candidate in (encoding, "ascii"):
        if not candidate:
            continue
        try:
            return content.decode(candidate)
        except (UnicodeDecodeError, LookupError):
            continue
    return content.decode("utf-8", errors="replace")


def decode_email_header(header_value: Optional[str]) -> str:
    """
    Decode an RFC 2047 encoded header (e.g. Subject) for display.

    Args:
        header_value: Raw header value (may be encoded or None)

    Returns:
        Decoded Unicode string; undecodable bytes are replaced and
        malformed encoded words are returned as given

    Examples:
        >>> decode_email_header("=?UTF-8?B?5Lit5paH?=")
        '中文'
        >>> decode_email_header(None)
        ''
    """
    if not header_value:
        return ""

    try:
        parts = decode_header(header_value)
    except HeaderParseError:
        return header_value

    return "".join(
        _decode_part(content, encoding) if isinstance(content, bytes) else content
        for content, encoding in parts
    )


def truncate_subject(subject: Optional[str], max_length: int = 50) -> str:
    """
    Shorten a subject line for one-line log messages.

    Args:
        subject: Subject line text
        max_length: Maximum length including the trailing "..."

    Returns:
        Subject unchanged if short enough, else cut with "..."

    Examples:
        >>> truncate_subject("Quarterly report for the whole team", 20)
        'Quarterly report ...'
    """
    if not subject:
        return ""

    subject = " ".join(subject.split())
    if len(subject) <= max_length:
        return subject

    return subject[: max_length - 3] + "..."
