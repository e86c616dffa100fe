from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from ..errors import HeaderError
from ..models.header import (
    Comment,
    Header,
    HeaderItem,
    HeaderLine,
    OtherHeaderItem,
    Program,
    ReadGroup,
    RefSeq,
)

logger = logging.getLogger(__name__)


class HeaderBuilder:
    """Mutable accumulator that folds header items into one Header.

    Items are kept in the order they were added. Header-wide rules are checked
    by the Header constructor when build() is called.
    """

    def __init__(self):
        self._header_line: Optional[HeaderLine] = None
        self.ref_seqs: List[RefSeq] = []
        self.read_groups: List[ReadGroup] = []
        self.programs: List[Program] = []
        self.comments: List[str] = []
        self.others: List[OtherHeaderItem] = []

    def __len__(self) -> int:
        return (int(self._header_line is not None) + len(self.ref_seqs) + len(self.read_groups)
                + len(self.programs) + len(self.comments) + len(self.others))

    def add(self, item: HeaderItem) -> None:
        """Fold one header item into the accumulator.

        Raises:
            HeaderError: on a second @HD line
        """
        if isinstance(item, HeaderLine):
            if self._header_line is not None:
                raise HeaderError("multiple @HD lines not allowed")
            self._header_line = item
        elif isinstance(item, RefSeq):
            self.ref_seqs.append(item)
        elif isinstance(item, ReadGroup):
            self.read_groups.append(item)
        elif isinstance(item, Program):
            self.programs.append(item)
        elif isinstance(item, Comment):
            self.comments.append(item.text)
        elif isinstance(item, OtherHeaderItem):
            self.others.append(item)
        else:
            raise TypeError(f"not a header item: {item!r}")

    def build(self) -> Header:
        """Create the immutable Header.

        Raises:
            HeaderValidationError: listing every header-wide rule that failed
        """
        header = Header(
            version=self._header_line.version if self._header_line else None,
            sort_order=self._header_line.sort_order if self._header_line else None,
            ref_seqs=tuple(self.ref_seqs),
            read_groups=tuple(self.read_groups),
            programs=tuple(self.programs),
            comments=tuple(self.comments),
            others=tuple(self.others),
        )
        logger.debug(f"Built header with {len(header.ref_seqs)} reference sequences, "
                     f"{len(header.read_groups)} read groups and {len(header.programs)} programs")
        return header


def build_header(items: Iterable[HeaderItem]) -> Header:
    """Fold a sequence of header items into a Header."""
    builder = HeaderBuilder()
    for item in items:
        builder.add(item)
    return builder.build()
