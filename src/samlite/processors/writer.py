from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, TextIO

from ..models.alignment import Alignment
from ..models.header import Header


class SAMWriter:
    """Handles writing Header and Alignment objects as SAM text."""

    def __init__(self, output_path: Path):
        self.output_path = output_path
        self.file: Optional[TextIO] = None
        self.logger = logging.getLogger(__name__)
        self.n_written = 0

    def __enter__(self):
        self.file = open(self.output_path, 'w')
        self.logger.debug(f"Opened {self.output_path} for writing")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.file:
            self.file.close()
            self.logger.debug(f"Wrote {self.n_written} alignments to {self.output_path}")
            self.file = None

    def write_line(self, line: str) -> None:
        if not self.file:
            raise RuntimeError("SAM file not opened. Use with-statement to open file.")
        self.file.write(line + "\n")

    def write_header(self, header: Header) -> None:
        for line in header.to_lines():
            self.write_line(line)

    def write_alignment(self, alignment: Alignment) -> None:
        self.write_line(alignment.to_line())
        self.n_written += 1

    def write_alignments(self, alignments: Iterable[Alignment]) -> None:
        for alignment in alignments:
            self.write_alignment(alignment)
