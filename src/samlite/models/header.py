from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import ClassVar, Dict, List, Optional, Pattern, Tuple, Union

from ..errors import FieldError, HeaderError, HeaderValidationError, SAMError

TagValue = Tuple[str, str]


class HeaderItemTag(Enum):
    """Record kinds of the header section."""
    HD = 'HD'  # file-level metadata
    SQ = 'SQ'  # reference sequence
    RG = 'RG'  # read group
    PG = 'PG'  # program
    CO = 'CO'  # free text comment
    OTHER = 'Other'  # any other two-letter tag


class SortOrder(Enum):
    UNKNOWN = 'unknown'
    UNSORTED = 'unsorted'
    QUERY_NAME = 'queryname'
    COORDINATE = 'coordinate'


class Platform(Enum):
    """Sequencing platforms accepted in the RG PL tag."""
    CAPILLARY = 'CAPILLARY'
    LS454 = 'LS454'
    ILLUMINA = 'ILLUMINA'
    SOLID = 'SOLID'
    HELICOS = 'HELICOS'
    ION_TORRENT = 'IONTORRENT'
    PAC_BIO = 'PACBIO'


def _format_item(tag: str, tag_values: List[Tuple[str, Optional[object]]]) -> str:
    fields = [f"@{tag}"]
    fields.extend(f"{key}:{value}" for key, value in tag_values if value is not None)
    return "\t".join(fields)


@dataclass(frozen=True)
class HeaderLine:
    """The @HD line."""
    version: str
    sort_order: Optional[SortOrder] = None

    item_tag: ClassVar[HeaderItemTag] = HeaderItemTag.HD
    VERSION_PATTERN: ClassVar[Pattern] = re.compile(r'[0-9]+\.[0-9]+')

    def __post_init__(self):
        if not self.VERSION_PATTERN.fullmatch(self.version):
            raise FieldError('VN', self.version, "invalid version")

    def to_line(self) -> str:
        sort_order = self.sort_order.value if self.sort_order else None
        return _format_item('HD', [('VN', self.version), ('SO', sort_order)])


@dataclass(frozen=True)
class RefSeq:
    """A reference sequence (@SQ line)."""
    name: str
    length: int
    assembly: Optional[str] = None
    md5: Optional[str] = None
    species: Optional[str] = None
    uri: Optional[str] = None

    item_tag: ClassVar[HeaderItemTag] = HeaderItemTag.SQ
    # first character may not be '[', '@', '*' or '='
    NAME_PATTERN: ClassVar[Pattern] = re.compile(r'[!-)+-<>?A-Z\\-~][!-~]*')
    MAX_LENGTH: ClassVar[int] = 2**31 - 1

    def __post_init__(self):
        if not 1 <= self.length <= self.MAX_LENGTH:
            raise FieldError('LN', str(self.length), "invalid reference sequence length")
        if not self.NAME_PATTERN.fullmatch(self.name):
            raise FieldError('SN', self.name, "invalid ref seq name")

    def to_line(self) -> str:
        return _format_item('SQ', [
            ('SN', self.name),
            ('LN', self.length),
            ('AS', self.assembly),
            ('M5', self.md5),
            ('SP', self.species),
            ('UR', self.uri),
        ])


@dataclass(frozen=True)
class ReadGroup:
    """A read group (@RG line)."""
    id: str
    seq_center: Optional[str] = None
    description: Optional[str] = None
    run_date: Optional[Union[date, datetime]] = None
    flow_order: Optional[str] = None
    key_seq: Optional[str] = None
    library: Optional[str] = None
    program: Optional[str] = None
    predicted_median_insert_size: Optional[int] = None
    platform: Optional[Platform] = None
    platform_unit: Optional[str] = None
    sample: Optional[str] = None

    item_tag: ClassVar[HeaderItemTag] = HeaderItemTag.RG
    FLOW_ORDER_PATTERN: ClassVar[Pattern] = re.compile(r'\*|[ACMGRSVTWYHKDBN]+')

    def __post_init__(self):
        if self.flow_order is not None:
            if self.flow_order == "":
                raise FieldError('FO', self.flow_order, "invalid empty flow order")
            if not self.FLOW_ORDER_PATTERN.fullmatch(self.flow_order):
                raise FieldError('FO', self.flow_order, "invalid flow order")

    def to_line(self) -> str:
        run_date = self.run_date.isoformat() if self.run_date is not None else None
        platform = self.platform.value if self.platform else None
        return _format_item('RG', [
            ('ID', self.id),
            ('CN', self.seq_center),
            ('DS', self.description),
            ('DT', run_date),
            ('FO', self.flow_order),
            ('KS', self.key_seq),
            ('LB', self.library),
            ('PG', self.program),
            ('PI', self.predicted_median_insert_size),
            ('PL', platform),
            ('PU', self.platform_unit),
            ('SM', self.sample),
        ])


@dataclass(frozen=True)
class Program:
    """A program that touched the file (@PG line)."""
    id: str
    name: Optional[str] = None
    command_line: Optional[str] = None
    previous_id: Optional[str] = None
    description: Optional[str] = None
    version: Optional[str] = None

    item_tag: ClassVar[HeaderItemTag] = HeaderItemTag.PG

    def to_line(self) -> str:
        return _format_item('PG', [
            ('ID', self.id),
            ('PN', self.name),
            ('CL', self.command_line),
            ('PP', self.previous_id),
            ('DS', self.description),
            ('VN', self.version),
        ])


@dataclass(frozen=True)
class Comment:
    text: str

    item_tag: ClassVar[HeaderItemTag] = HeaderItemTag.CO

    def to_line(self) -> str:
        return f"@CO\t{self.text}"


@dataclass(frozen=True)
class OtherHeaderItem:
    """A header line with a custom two-letter tag; its pairs are kept as given."""
    tag: str
    tag_values: Tuple[TagValue, ...] = ()

    item_tag: ClassVar[HeaderItemTag] = HeaderItemTag.OTHER
    TAG_PATTERN: ClassVar[Pattern] = re.compile(r'[A-Za-z]{2}')

    def __post_init__(self):
        object.__setattr__(self, 'tag_values', tuple(tuple(pair) for pair in self.tag_values))
        if not self.TAG_PATTERN.fullmatch(self.tag):
            raise FieldError('tag', self.tag, "invalid header item tag")

    def to_line(self) -> str:
        return _format_item(self.tag, list(self.tag_values))


HeaderItem = Union[HeaderLine, RefSeq, ReadGroup, Program, Comment, OtherHeaderItem]


@dataclass(frozen=True)
class Header:
    """The complete, validated header section of a SAM file.

    Construction checks every header-wide rule and reports all violations
    at once through HeaderValidationError.
    """
    version: Optional[str] = None
    sort_order: Optional[SortOrder] = None
    ref_seqs: Tuple[RefSeq, ...] = ()
    read_groups: Tuple[ReadGroup, ...] = ()
    programs: Tuple[Program, ...] = ()
    comments: Tuple[str, ...] = ()
    others: Tuple[OtherHeaderItem, ...] = ()

    SEQUENCE_FIELDS: ClassVar[Tuple[str, ...]] = ('ref_seqs', 'read_groups', 'programs', 'comments', 'others')

    def __post_init__(self):
        for name in self.SEQUENCE_FIELDS:
            object.__setattr__(self, name, tuple(getattr(self, name)))
        errors: List[SAMError] = []
        if self.version is not None and not HeaderLine.VERSION_PATTERN.fullmatch(self.version):
            errors.append(FieldError('VN', self.version, "invalid version"))
        if self.sort_order is not None and self.version is None:
            errors.append(HeaderError("sort order cannot be defined without version"))
        counts = Counter(ref_seq.name for ref_seq in self.ref_seqs)
        for name, count in counts.items():
            if count > 1:
                errors.append(HeaderError(f"duplicate ref seq name: {name}"))
        if errors:
            raise HeaderValidationError(errors)

    @property
    def sequence_lengths(self) -> Dict[str, int]:
        return {ref_seq.name: ref_seq.length for ref_seq in self.ref_seqs}

    def ref_seq(self, name: str) -> Optional[RefSeq]:
        return next((r for r in self.ref_seqs if r.name == name), None)

    def read_group(self, id: str) -> Optional[ReadGroup]:
        return next((r for r in self.read_groups if r.id == id), None)

    def program(self, id: str) -> Optional[Program]:
        return next((p for p in self.programs if p.id == id), None)

    def to_lines(self) -> List[str]:
        """Render the header as SAM lines, @HD first."""
        lines = []
        if self.version is not None:
            lines.append(HeaderLine(self.version, self.sort_order).to_line())
        lines.extend(r.to_line() for r in self.ref_seqs)
        lines.extend(r.to_line() for r in self.read_groups)
        lines.extend(p.to_line() for p in self.programs)
        lines.extend(Comment(c).to_line() for c in self.comments)
        lines.extend(o.to_line() for o in self.others)
        return lines
