from __future__ import annotations

from .header import HeaderBuilder, build_header
from .reader import FileAlignments, SAMReader, read, read_async, read_file, read_items, read_items_async, read_items_file
from .writer import SAMWriter

__all__ = [
    'HeaderBuilder',
    'build_header',
    'FileAlignments',
    'SAMReader',
    'read',
    'read_async',
    'read_file',
    'read_items',
    'read_items_async',
    'read_items_file',
    'SAMWriter'
]
