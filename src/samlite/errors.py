"""Exception types raised while parsing and validating SAM text."""

from __future__ import annotations

from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .models.position import Position


class SAMError(ValueError):
    """Base class for every SAM parsing or validation failure."""

    def __init__(self, message: str, position: Optional[Position] = None):
        super().__init__(message)
        self.message = message
        self.position = position

    def at(self, position: Position) -> 'SAMError':
        """Attach a position unless one is already known."""
        if self.position is None:
            self.position = position
        return self

    def __str__(self) -> str:
        if self.position is not None:
            return f"{self.position}: {self.message}"
        return self.message


class FieldError(SAMError):
    """A single field failed its type, range or pattern check."""

    def __init__(self, field: str, value: str, reason: str, position: Optional[Position] = None):
        super().__init__(f"{reason}: {field}={value!r}", position)
        self.field = field
        self.value = value
        self.reason = reason


class StructuralError(SAMError):
    """Wrong field count, missing or repeated tag, or tag not allowed for a record kind."""


class HeaderError(SAMError):
    """A header-level rule spanning more than one field was broken."""


class HeaderValidationError(HeaderError):
    """All failures found while finalizing a header, reported together."""

    def __init__(self, errors: List[SAMError], position: Optional[Position] = None):
        super().__init__("; ".join(e.message for e in errors), position)
        self.errors = errors


class SequencingError(SAMError):
    """A line appeared where the header/body ordering does not allow it."""
