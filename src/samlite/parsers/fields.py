"""Validators for individual SAM fields.

Each function takes the raw text of one field and returns its typed value,
raising FieldError when the text does not fit the field's grammar. The
literal '*' decodes to None wherever the format uses it as "not given".
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import List, Optional, Pattern, Tuple, Union

from ..errors import FieldError
from ..models.alignment import CigarOp, CigarOpType, Flags, OptionalField, OptionalFieldType
from ..models.header import HeaderLine, Platform, SortOrder
from ..models.quality import PhredScore

INT_PATTERN = re.compile(r'[-+]?[0-9]+')
FLOAT_PATTERN = re.compile(r'[-+]?[0-9]*\.?[0-9]+(?:[eE][-+]?[0-9]+)?')

QNAME_PATTERN = re.compile(r'\*|[!-?A-~]{1,255}')
RNAME_PATTERN = re.compile(r'\*|[!-)+-<>-~][!-~]*')
RNEXT_PATTERN = re.compile(r'\*|=|[!-)+-<>-~][!-~]*')
SEQ_PATTERN = re.compile(r'\*|[A-Za-z=.]+')
CIGAR_OP_PATTERN = re.compile(r'([0-9]+)(.)')

TAG_PATTERN = re.compile(r'[A-Za-z][A-Za-z0-9]')
TAG_VALUE_PATTERN = re.compile(r'[ -~]+')

OPT_CHAR_PATTERN = re.compile(r'[!-~]')
OPT_STRING_PATTERN = re.compile(r'[ !-~]+')
OPT_HEX_PATTERN = re.compile(r'[0-9A-F]+')
OPT_ARRAY_PATTERN = re.compile(r'[cCsSiIf](?:,[-+]?[0-9]*\.?[0-9]+(?:[eE][-+]?[0-9]+)?)+')

MAX_POSITION = 2**31 - 1
INT32_MIN, INT32_MAX = -2**31, 2**31 - 1


def parse_int(field: str, text: str) -> int:
    """Parse a decimal integer, raising FieldError for anything int() would refuse."""
    if not INT_PATTERN.fullmatch(text):
        raise FieldError(field, text, f"{field} not an int")
    try:
        return int(text)
    except ValueError:
        # more digits than the interpreter converts
        raise FieldError(field, text, f"{field} not an int") from None


def parse_int_range(field: str, lo: int, hi: int, text: str) -> int:
    """Parse a decimal integer and check that lo <= value <= hi."""
    value = parse_int(field, text)
    if not lo <= value <= hi:
        raise FieldError(field, text, f"{field} out of range [{lo}, {hi}]")
    return value


def parse_opt_string(field: str, pattern: Pattern, text: str) -> Optional[str]:
    """Match text against a pattern that lists '*' as one alternative."""
    if not pattern.fullmatch(text):
        raise FieldError(field, text, f"invalid {field}")
    if text == '*':
        return None
    return text


### header fields

def parse_header_version(text: str) -> str:
    if not HeaderLine.VERSION_PATTERN.fullmatch(text):
        raise FieldError('VN', text, "invalid version")
    return text


def parse_sort_order(text: str) -> SortOrder:
    try:
        return SortOrder(text)
    except ValueError:
        raise FieldError('SO', text, "invalid sort order") from None


def parse_platform(text: str) -> Platform:
    try:
        return Platform(text)
    except ValueError:
        raise FieldError('PL', text, "unknown platform") from None


def parse_run_date(text: str) -> Union[date, datetime]:
    """Read an RG DT value as a date, or failing that as a date-time."""
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise FieldError('DT', text, "invalid run date/time") from None


def parse_tag_value(text: str) -> Tuple[str, str]:
    """Split a header field such as 'SN:chr1' on its first colon."""
    tag, sep, value = text.partition(':')
    if not sep:
        raise FieldError('tag-value', text, "tag-value not colon separated")
    if not TAG_PATTERN.fullmatch(tag):
        raise FieldError('tag', tag, "invalid tag")
    if not TAG_VALUE_PATTERN.fullmatch(value):
        raise FieldError(tag, value, "tag has invalid value")
    return tag, value


### alignment fields

def parse_qname(text: str) -> Optional[str]:
    return parse_opt_string('QNAME', QNAME_PATTERN, text)


def parse_flags(text: str) -> Flags:
    if not INT_PATTERN.fullmatch(text):
        raise FieldError('FLAG', text, "invalid FLAG")
    return Flags(parse_int('FLAG', text))


def parse_rname(text: str) -> Optional[str]:
    return parse_opt_string('RNAME', RNAME_PATTERN, text)


def parse_pos(text: str) -> Optional[int]:
    return parse_int_range('POS', 0, MAX_POSITION, text) or None


def parse_mapq(text: str) -> Optional[int]:
    mapq = parse_int_range('MAPQ', 0, 255, text)
    return None if mapq == 255 else mapq


def parse_cigar(text: str) -> List[CigarOp]:
    """Parse a CIGAR string into its operations, in order."""
    if text == '*':
        return []
    if text == '':
        raise FieldError('CIGAR', text, "invalid cigar string")
    ops = []
    offset = 0
    while offset < len(text):
        match = CIGAR_OP_PATTERN.match(text, offset)
        if match is None:
            raise FieldError('CIGAR', text, "invalid cigar string")
        try:
            op = CigarOpType(match.group(2))
        except ValueError:
            raise FieldError('CIGAR', text, "invalid cigar string") from None
        ops.append(CigarOp(op, parse_int('CIGAR', match.group(1))))
        offset = match.end()
    return ops


def parse_rnext(text: str) -> Optional[str]:
    return parse_opt_string('RNEXT', RNEXT_PATTERN, text)


def parse_pnext(text: str) -> Optional[int]:
    return parse_int_range('PNEXT', 0, MAX_POSITION, text) or None


def parse_tlen(text: str) -> Optional[int]:
    return parse_int_range('TLEN', -MAX_POSITION, MAX_POSITION, text) or None


def parse_seq(text: str) -> Optional[str]:
    return parse_opt_string('SEQ', SEQ_PATTERN, text)


def parse_qual(text: str) -> List[PhredScore]:
    if text == '':
        raise FieldError('QUAL', text, "invalid empty QUAL")
    if text == '*':
        return []
    return [PhredScore.from_char(c) for c in text]


def parse_optional_field(text: str) -> OptionalField:
    """Parse one TAG:TYPE:VALUE field.

    Byte-array elements are kept as the strings written in the file.
    """
    tag, sep, rest = text.partition(':')
    if not sep:
        raise FieldError('optional field', text, "missing TAG in optional field")
    if not TAG_PATTERN.fullmatch(tag):
        raise FieldError('TAG', tag, "invalid TAG")
    typ, sep, value = rest.partition(':')
    if not sep:
        raise FieldError(tag, rest, "missing TYPE in optional field")

    def invalid() -> FieldError:
        return FieldError(tag, f"{typ}:{value}", "invalid value")

    if typ == 'A':
        if not OPT_CHAR_PATTERN.fullmatch(value):
            raise invalid()
        return OptionalField(tag, OptionalFieldType.CHAR, value)
    elif typ == 'i':
        try:
            number = parse_int(tag, value)
        except FieldError:
            raise invalid() from None
        if not INT32_MIN <= number <= INT32_MAX:
            raise invalid()
        return OptionalField(tag, OptionalFieldType.INT32, number)
    elif typ == 'f':
        if not FLOAT_PATTERN.fullmatch(value):
            raise invalid()
        number = float(value)
        # overflows to inf, which has no text form in the grammar
        if not math.isfinite(number):
            raise invalid()
        return OptionalField(tag, OptionalFieldType.FLOAT, number)
    elif typ == 'Z':
        if not OPT_STRING_PATTERN.fullmatch(value):
            raise invalid()
        return OptionalField(tag, OptionalFieldType.STRING, value)
    elif typ == 'H':
        if not OPT_HEX_PATTERN.fullmatch(value):
            raise invalid()
        return OptionalField(tag, OptionalFieldType.HEX, value)
    elif typ == 'B':
        if not OPT_ARRAY_PATTERN.fullmatch(value):
            raise invalid()
        array_type, *values = value.split(',')
        return OptionalField(tag, OptionalFieldType.BYTE_ARRAY, values, array_type=array_type)
    raise FieldError(tag, typ, "invalid type")
