"""chewmail - archive old mail into date-named mailboxes."""

__version__ = "1.0.0"
