from .header import (
    Comment,
    Header,
    HeaderItem,
    HeaderItemTag,
    HeaderLine,
    OtherHeaderItem,
    Platform,
    Program,
    ReadGroup,
    RefSeq,
    SortOrder,
)
from .alignment import Alignment, CigarOp, CigarOpType, Flags, OptionalField, OptionalFieldType, format_cigar
from .quality import PhredScore
from .position import Position
from .result import Parsed

__all__ = [
    'Comment',
    'Header',
    'HeaderItem',
    'HeaderItemTag',
    'HeaderLine',
    'OtherHeaderItem',
    'Platform',
    'Program',
    'ReadGroup',
    'RefSeq',
    'SortOrder',
    'Alignment',
    'CigarOp',
    'CigarOpType',
    'Flags',
    'OptionalField',
    'OptionalFieldType',
    'format_cigar',
    'PhredScore',
    'Position',
    'Parsed'
]
