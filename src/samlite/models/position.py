from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class Position:
    """Location of a line in its source, used only to annotate errors."""
    line: int = 1
    source: Optional[str] = None

    def __post_init__(self):
        if self.line < 1:
            raise ValueError("Line numbers start at 1.")

    def next(self) -> 'Position':
        return replace(self, line=self.line + 1)

    def __str__(self) -> str:
        if self.source:
            return f"{self.source}:{self.line}"
        return f"line {self.line}"
