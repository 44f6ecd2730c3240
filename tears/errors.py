"""
Exceptions raised by the tears core.
"""


class TearsError(Exception):
    """Base class for errors raised by this package."""


class InvalidValue(TearsError, ValueError):
    """Raised when input does not name a known Trust or Mood value."""

    def __init__(self, kind: str, value: object) -> None:
        self.kind = kind
        self.value = value
        super().__init__(f"Invalid {kind}: {value!r}")


class MissingTableEntry(TearsError):
    """Raised when the suggestion table does not cover every trust and mood."""
