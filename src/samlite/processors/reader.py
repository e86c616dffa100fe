"""Streaming readers for SAM text.

The reader runs as a two-state machine. While in the header it peeks at the
next parsed line: header items are consumed and folded into a HeaderBuilder,
and the first alignment (or the end of input) closes the header without being
consumed. After that every line is yielded as a Parsed alignment, with header
lines and invalid records reported as errors in place.
"""

from __future__ import annotations

import logging
import weakref
from pathlib import Path
from typing import AsyncIterable, AsyncIterator, Iterable, Iterator, Optional, TextIO, Tuple, Union

from ..errors import HeaderError, SAMError, SequencingError
from ..models.alignment import Alignment
from ..models.header import Header
from ..models.position import Position
from ..models.result import Parsed
from ..parsers.alignment import Item, parse_item
from .header import HeaderBuilder

logger = logging.getLogger(__name__)

_EOF = object()


class Peekable:
    """Iterator wrapper with one item of lookahead."""

    def __init__(self, iterable: Iterable):
        self._iterator = iter(iterable)
        self._next = None
        self._has_next = False

    def peek(self):
        """Return the next item without consuming it, or _EOF at the end."""
        if not self._has_next:
            self._next = next(self._iterator, _EOF)
            self._has_next = True
        return self._next

    def junk(self) -> None:
        """Drop the item returned by the last peek()."""
        self.peek()
        self._has_next = False

    def __iter__(self):
        return self

    def __next__(self):
        item = self.peek()
        if item is _EOF:
            raise StopIteration
        self._has_next = False
        return item


class AsyncPeekable:
    """Async iterator wrapper with one item of lookahead."""

    def __init__(self, iterable: AsyncIterable):
        self._iterator = iterable.__aiter__()
        self._next = None
        self._has_next = False

    async def peek(self):
        if not self._has_next:
            try:
                self._next = await self._iterator.__anext__()
            except StopAsyncIteration:
                self._next = _EOF
            self._has_next = True
        return self._next

    async def junk(self) -> None:
        await self.peek()
        self._has_next = False

    def __aiter__(self):
        return self

    async def __anext__(self):
        item = await self.peek()
        if item is _EOF:
            raise StopAsyncIteration
        self._has_next = False
        return item


def strip_newlines(handle: Iterable[str]) -> Iterator[str]:
    for line in handle:
        yield line.rstrip('\r\n')


def _parse_line(line: str, position: Position) -> Parsed[Item]:
    try:
        return Parsed(position, value=parse_item(line))
    except SAMError as e:
        return Parsed(position, error=e.at(position))


def _ends_header(parsed) -> bool:
    return parsed is _EOF or (parsed.ok and isinstance(parsed.value, Alignment))


def _fold(builder: HeaderBuilder, parsed: Parsed[Item]) -> None:
    if not parsed.ok:
        raise parsed.error
    try:
        builder.add(parsed.value)
    except HeaderError as e:
        raise e.at(parsed.position)


def _as_alignment(parsed: Parsed[Item]) -> Parsed[Alignment]:
    if parsed.ok and not isinstance(parsed.value, Alignment):
        parsed = Parsed(parsed.position,
                        error=SequencingError("header line occurs after start of alignments", parsed.position))
    if not parsed.ok:
        logger.debug(f"Invalid alignment record: {parsed.error}")
    return parsed


def read_items(lines: Iterable[str], start: Position = Position()) -> Iterator[Parsed[Item]]:
    """Parse every line independently, tagging each with its position.

    No header/body ordering is enforced.
    """
    position = start
    for line in lines:
        yield _parse_line(line, position)
        position = position.next()


async def read_items_async(lines: AsyncIterable[str], start: Position = Position()) -> AsyncIterator[Parsed[Item]]:
    position = start
    async for line in lines:
        yield _parse_line(line, position)
        position = position.next()


def read(lines: Iterable[str], start: Position = Position()) -> Tuple[Header, Iterator[Parsed[Alignment]]]:
    """Read the header, then expose the alignments lazily.

    Args:
        lines: Lines without trailing newlines
        start: Position of the first line, used in error messages

    Returns:
        The validated Header and a single-pass iterator of Parsed alignments

    Raises:
        SAMError: if any line of the header section is invalid
    """
    items = Peekable(read_items(lines, start))
    builder = HeaderBuilder()
    while not _ends_header(items.peek()):
        _fold(builder, items.peek())
        items.junk()
    header = builder.build()
    return header, (_as_alignment(parsed) for parsed in items)


async def read_async(lines: AsyncIterable[str],
                     start: Position = Position()) -> Tuple[Header, AsyncIterator[Parsed[Alignment]]]:
    """Async counterpart of read(); only fetching lines is awaited."""
    items = AsyncPeekable(read_items_async(lines, start))
    builder = HeaderBuilder()
    while not _ends_header(await items.peek()):
        _fold(builder, await items.peek())
        await items.junk()
    header = builder.build()

    async def alignments() -> AsyncIterator[Parsed[Alignment]]:
        async for parsed in items:
            yield _as_alignment(parsed)

    return header, alignments()


class FileAlignments:
    """Alignments of an open SAM file.

    The file closes when iteration is exhausted, on close(), or when the
    object is garbage collected, whichever comes first.
    """

    def __init__(self, handle: TextIO, alignments: Iterator[Parsed[Alignment]]):
        self._handle = handle
        self._alignments = alignments
        self._finalizer = weakref.finalize(self, handle.close)

    @property
    def closed(self) -> bool:
        return self._handle.closed

    def __iter__(self):
        return self

    def __next__(self) -> Parsed[Alignment]:
        if self.closed:
            raise StopIteration
        try:
            return next(self._alignments)
        except StopIteration:
            self.close()
            raise

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self) -> None:
        self._finalizer()


def read_file(path: Union[str, Path]) -> Tuple[Header, FileAlignments]:
    """Read a SAM file.

    The returned FileAlignments owns the open file; close it (or use it as a
    context manager) to release the file before the alignments run out.
    """
    handle = open(path, 'r')
    try:
        header, alignments = read(strip_newlines(handle), Position(1, str(path)))
    except BaseException:
        handle.close()
        raise
    return header, FileAlignments(handle, alignments)


def read_items_file(path: Union[str, Path]) -> Iterator[Parsed[Item]]:
    with open(path, 'r') as handle:
        yield from read_items(strip_newlines(handle), Position(1, str(path)))


class SAMReader:
    """Handles reading a SAM file: parses the header on open, then streams alignments."""

    def __init__(self, sam_path: Path):
        self.sam_path = sam_path
        self.logger = logging.getLogger(__name__)
        self.header: Optional[Header] = None
        self._handle: Optional[TextIO] = None
        self._alignments: Optional[Iterator[Parsed[Alignment]]] = None

    def __enter__(self):
        self._handle = open(self.sam_path, 'r')
        self.logger.debug(f"Opened SAM file: {self.sam_path}")
        try:
            self.header, self._alignments = read(strip_newlines(self._handle), Position(1, str(self.sam_path)))
        except SAMError as e:
            self.logger.error(f"Failed to read SAM header: {e}")
            self._close()
            raise
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._close()

    def _close(self) -> None:
        if self._handle:
            self._handle.close()
            self.logger.debug(f"Closed SAM file: {self.sam_path}")
            self._handle = None

    def alignments(self) -> Iterator[Parsed[Alignment]]:
        """Yield the remaining alignments of the file, one Parsed per line.

        Raises:
            RuntimeError: if the file was not opened
        """
        if self._alignments is None:
            raise RuntimeError("SAM file not opened. Use with-statement to open file.")
        return self._alignments
