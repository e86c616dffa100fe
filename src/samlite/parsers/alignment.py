from __future__ import annotations

from typing import Union

from ..errors import StructuralError
from ..models.alignment import Alignment
from ..models.header import HeaderItem
from .fields import (
    parse_cigar,
    parse_flags,
    parse_mapq,
    parse_optional_field,
    parse_pnext,
    parse_pos,
    parse_qname,
    parse_qual,
    parse_rname,
    parse_rnext,
    parse_seq,
    parse_tlen,
)
from .header import parse_header_item

N_FIXED_FIELDS = 11

Item = Union[HeaderItem, Alignment]


def parse_alignment(line: str) -> Alignment:
    """Parse one body line into an Alignment.

    Fields are checked in column order and the first invalid one aborts the
    whole record.

    Raises:
        StructuralError: if the line has fewer than the mandatory columns
        FieldError: if any column or optional field is invalid
    """
    fields = line.split('\t')
    if len(fields) < N_FIXED_FIELDS:
        raise StructuralError("alignment line contains < 12 fields")
    qname, flags, rname, pos, mapq, cigar, rnext, pnext, tlen, seq, qual = fields[:N_FIXED_FIELDS]
    return Alignment(
        qname=parse_qname(qname),
        flags=parse_flags(flags),
        rname=parse_rname(rname),
        pos=parse_pos(pos),
        mapq=parse_mapq(mapq),
        cigar=parse_cigar(cigar),
        rnext=parse_rnext(rnext),
        pnext=parse_pnext(pnext),
        tlen=parse_tlen(tlen),
        seq=parse_seq(seq),
        qual=parse_qual(qual),
        optional_fields=[parse_optional_field(f) for f in fields[N_FIXED_FIELDS:]],
    )


def parse_item(line: str) -> Item:
    """Parse any SAM line, dispatching on a leading '@'."""
    if line == '':
        raise StructuralError("invalid empty line")
    if line.startswith('@'):
        return parse_header_item(line)
    return parse_alignment(line)
