"""Destination name templating."""

from .date_template import RECOGNIZED_SPECIFIERS, has_specifiers, resolve

__all__ = ["RECOGNIZED_SPECIFIERS", "has_specifiers", "resolve"]
