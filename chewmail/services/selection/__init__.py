"""Message selection."""

from .selection_policy import SelectionPolicy, include

__all__ = ["SelectionPolicy", "include"]
