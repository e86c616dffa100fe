"""Strict parsing, validation and serialization of SAM text files."""

from samlite.errors import SAMError, FieldError, StructuralError, HeaderError, HeaderValidationError, SequencingError
from samlite.models import Alignment, Header, Parsed, Position
from samlite.parsers import parse_alignment, parse_header_item, parse_item
from samlite.processors import SAMReader, SAMWriter, read, read_async, read_file, read_items

__version__ = "0.1.0"

__all__ = [
    'SAMError',
    'FieldError',
    'StructuralError',
    'HeaderError',
    'HeaderValidationError',
    'SequencingError',
    'Alignment',
    'Header',
    'Parsed',
    'Position',
    'parse_alignment',
    'parse_header_item',
    'parse_item',
    'SAMReader',
    'SAMWriter',
    'read',
    'read_async',
    'read_file',
    'read_items'
]
