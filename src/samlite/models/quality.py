from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from ..errors import FieldError


@dataclass(frozen=True, order=True)
class PhredScore:
    """A base quality on the Phred scale, stored as its integer value."""
    value: int

    OFFSET: ClassVar[int] = 33
    MAX_VALUE: ClassVar[int] = 126 - 33  # '~' at offset 33

    def __post_init__(self):
        if not 0 <= self.value <= self.MAX_VALUE:
            raise FieldError('QUAL', str(self.value), "phred score out of range")

    @classmethod
    def from_char(cls, char: str, offset: int = OFFSET) -> 'PhredScore':
        """Decode one quality character.

        Raises:
            FieldError: if the character is not printable ASCII or lies below the offset
        """
        if len(char) != 1:
            raise FieldError('QUAL', char, "expected a single quality character")
        code = ord(char)
        if not 33 <= code <= 126 or code < offset:
            raise FieldError('QUAL', char, "invalid quality character")
        return cls(code - offset)

    def to_char(self, offset: int = OFFSET) -> str:
        return chr(self.value + offset)

    @property
    def error_probability(self) -> float:
        return 10 ** (-self.value / 10)

    def __int__(self) -> int:
        return self.value
