from __future__ import annotations

from .alignment import Item, parse_alignment, parse_item
from .header import parse_header_item
from .fields import parse_cigar, parse_optional_field

__all__ = [
    'Item',
    'parse_alignment',
    'parse_item',
    'parse_header_item',
    'parse_cigar',
    'parse_optional_field'
]
