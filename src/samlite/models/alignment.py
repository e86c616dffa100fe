from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Iterable, List, Optional, Pattern, Union

from ..errors import FieldError
from .quality import PhredScore


class Flags(int):
    """The FLAG bitfield of an alignment, restricted to 16 bits."""

    MAX_VALUE = 65535

    def __new__(cls, value: int):
        if not 0 <= value <= cls.MAX_VALUE:
            raise FieldError('FLAG', str(value), "flag out of range")
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"Flags({int(self)})"

    def is_set(self, bit: int) -> bool:
        return (self & bit) != 0

    @property
    def has_multiple_segments(self) -> bool:
        return self.is_set(0x1)

    @property
    def each_segment_properly_aligned(self) -> bool:
        return self.is_set(0x2)

    @property
    def segment_unmapped(self) -> bool:
        return self.is_set(0x4)

    @property
    def next_segment_unmapped(self) -> bool:
        return self.is_set(0x8)

    @property
    def seq_is_reverse_complemented(self) -> bool:
        return self.is_set(0x10)

    @property
    def next_seq_is_reverse_complemented(self) -> bool:
        return self.is_set(0x20)

    @property
    def first_segment(self) -> bool:
        return self.is_set(0x40)

    @property
    def last_segment(self) -> bool:
        return self.is_set(0x80)

    @property
    def secondary_alignment(self) -> bool:
        return self.is_set(0x100)

    @property
    def not_passing_quality_controls(self) -> bool:
        return self.is_set(0x200)

    @property
    def pcr_or_optical_duplicate(self) -> bool:
        return self.is_set(0x400)

    @property
    def supplementary_alignment(self) -> bool:
        return self.is_set(0x800)


class CigarOpType(Enum):
    """CIGAR operators, valued by their SAM character."""
    MATCH_ALIGN = 'M'
    INSERTION = 'I'
    DELETION = 'D'
    SKIPPED = 'N'
    SOFT_CLIP = 'S'
    HARD_CLIP = 'H'
    PADDING = 'P'
    SEQ_MATCH = '='
    SEQ_MISMATCH = 'X'

    @property
    def consumes_query(self) -> bool:
        return self.value in 'MIS=X'

    @property
    def consumes_reference(self) -> bool:
        return self.value in 'MDN=X'


@dataclass(frozen=True)
class CigarOp:
    op: CigarOpType
    length: int

    def __post_init__(self):
        if self.length < 0:
            raise FieldError('CIGAR', str(self), "negative operation length")

    def __str__(self) -> str:
        return f"{self.length}{self.op.value}"


def format_cigar(ops: Iterable[CigarOp]) -> str:
    """Render CIGAR operations as text, '*' when there are none."""
    text = "".join(str(op) for op in ops)
    return text or "*"


class OptionalFieldType(Enum):
    CHAR = 'A'
    INT32 = 'i'
    FLOAT = 'f'
    STRING = 'Z'
    HEX = 'H'
    BYTE_ARRAY = 'B'


OptionalFieldValue = Union[str, int, float, List[str]]


@dataclass(frozen=True)
class OptionalField:
    """A TAG:TYPE:VALUE field trailing the fixed alignment columns.

    For byte arrays, array_type holds the element type code and value holds
    the elements exactly as written.
    """
    tag: str
    type: OptionalFieldType
    value: OptionalFieldValue
    array_type: Optional[str] = None

    TAG_PATTERN: ClassVar[Pattern] = re.compile(r'[A-Za-z][A-Za-z0-9]')
    ARRAY_TYPES: ClassVar[str] = 'cCsSiIf'

    def __post_init__(self):
        if not self.TAG_PATTERN.fullmatch(self.tag):
            raise FieldError('TAG', self.tag, "invalid TAG")
        if self.type is OptionalFieldType.BYTE_ARRAY:
            if self.array_type is None or len(self.array_type) != 1 or self.array_type not in self.ARRAY_TYPES:
                raise FieldError(self.tag, str(self.array_type), "invalid array type")
        elif self.array_type is not None:
            raise FieldError(self.tag, self.array_type, "array type given for a non-array field")

    def __str__(self) -> str:
        if self.type is OptionalFieldType.BYTE_ARRAY:
            value = ",".join([self.array_type, *self.value])
        elif self.type is OptionalFieldType.FLOAT:
            value = repr(float(self.value))
        else:
            value = str(self.value)
        return f"{self.tag}:{self.type.value}:{value}"


@dataclass(frozen=True)
class Alignment:
    """One alignment record of the SAM body.

    Absent values use None (or an empty list for cigar and qual); the
    sentinels '*', 0 and 255 only exist in the text form.
    """
    flags: Flags
    qname: Optional[str] = None
    rname: Optional[str] = None
    pos: Optional[int] = None
    mapq: Optional[int] = None
    cigar: List[CigarOp] = field(default_factory=list)
    rnext: Optional[str] = None  # '=' means same as rname
    pnext: Optional[int] = None
    tlen: Optional[int] = None
    seq: Optional[str] = None
    qual: List[PhredScore] = field(default_factory=list)
    optional_fields: List[OptionalField] = field(default_factory=list)

    def __post_init__(self):
        if not isinstance(self.flags, Flags):
            object.__setattr__(self, 'flags', Flags(self.flags))

    @property
    def is_mapped(self) -> bool:
        return not self.flags.segment_unmapped

    @property
    def strand(self) -> str:
        return '-' if self.flags.seq_is_reverse_complemented else '+'

    @property
    def mate_reference_name(self) -> Optional[str]:
        if self.rnext == '=':
            return self.rname
        return self.rnext

    def optional_field(self, tag: str) -> Optional[OptionalField]:
        return next((f for f in self.optional_fields if f.tag == tag), None)

    def to_line(self) -> str:
        fields = [
            self.qname or '*',
            str(int(self.flags)),
            self.rname or '*',
            str(self.pos or 0),
            str(255 if self.mapq is None else self.mapq),
            format_cigar(self.cigar),
            self.rnext or '*',
            str(self.pnext or 0),
            str(self.tlen or 0),
            self.seq or '*',
            "".join(q.to_char() for q in self.qual) or '*',
        ]
        fields.extend(str(f) for f in self.optional_fields)
        return "\t".join(fields)
