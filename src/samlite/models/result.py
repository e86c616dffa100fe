from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from ..errors import SAMError
from .position import Position

T = TypeVar('T')


@dataclass(frozen=True)
class Parsed(Generic[T]):
    """Outcome of parsing one line: either a value or the error that stopped it.

    Attributes:
        position: Where the line came from
        value: Parsed record when parsing succeeded
        error: Failure when parsing did not succeed
    """
    position: Position
    value: Optional[T] = None
    error: Optional[SAMError] = None

    def __post_init__(self):
        if (self.value is None) == (self.error is None):
            raise ValueError("Parsed needs exactly one of value or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, raising the stored error if there is one."""
        if self.error is not None:
            raise self.error
        return self.value
