"""Date-format templates for destination mailbox names."""

import re
from datetime import datetime
from typing import Callable, Dict

from chewmail.utils.time_utils import Instant, as_local

SPECIFIER_PATTERN = re.compile(r"%(.?)", re.DOTALL)


def _strftime(directive: str) -> Callable[[datetime], str]:
    return lambda moment: moment.strftime(directive)


# Specifiers that datetime.strftime handles the same way everywhere.
_PORTABLE = "aAbBcdHIjmMpSUwWxXyYzZ"

_CONVERSIONS: Dict[str, Callable[[datetime], str]] = {
    spec: _strftime("%" + spec) for spec in _PORTABLE
}
_CONVERSIONS.update(
    {
        "C": lambda moment: f"{moment.year // 100:02d}",
        "D": _strftime("%m/%d/%y"),
        "e": lambda moment: f"{moment.day:2d}",
        "F": _strftime("%Y-%m-%d"),
        "g": lambda moment: f"{moment.isocalendar()[0] % 100:02d}",
        "G": lambda moment: str(moment.isocalendar()[0]),
        "h": _strftime("%b"),
        "k": lambda moment: f"{moment.hour:2d}",
        "l": lambda moment: f"{moment.hour % 12 or 12:2d}",
        "r": _strftime("%I:%M:%S %p"),
        "R": _strftime("%H:%M"),
        "s": lambda moment: str(int(moment.timestamp())),
        "T": _strftime("%H:%M:%S"),
        "u": lambda moment: str(moment.isoweekday()),
        "V": lambda moment: f"{moment.isocalendar()[1]:02d}",
        "n": lambda moment: "\n",
        "t": lambda moment: "\t",
        "%": lambda moment: "%",
    }
)

RECOGNIZED_SPECIFIERS = frozenset(_CONVERSIONS)


def resolve(template: str, timestamp: Instant) -> str:
    """
    Expand a date-format template against a timestamp.

    Args:
        template: Mailbox name template, e.g. "~/Mail/archive/%Y-%m"
        timestamp: Message date; converted to local time before expansion

    Returns:
        Template with every recognized specifier replaced

    Notes:
        - Unrecognized specifiers and a trailing lone "%" are kept verbatim
        - Pure: the same template and timestamp always give the same name

    Examples:
        >>> resolve("%Y-%m", datetime(2021, 3, 14, 12, 0))
        '2021-03'
        >>> resolve("box-%Q", datetime(2021, 3, 14, 12, 0))
        'box-%Q'
    """
    moment = as_local(timestamp)

    def expand(match: "re.Match[str]") -> str:
        spec = match.group(1)
        conversion = _CONVERSIONS.get(spec)
        if conversion is None:
            return match.group(0)
        return conversion(moment)

    return SPECIFIER_PATTERN.sub(expand, template)


def has_specifiers(template: str) -> bool:
    """Whether the template varies with the message date at all."""
    return any(
        match.group(1) in RECOGNIZED_SPECIFIERS - {"%", "n", "t"}
        for match in SPECIFIER_PATTERN.finditer(template)
    )
