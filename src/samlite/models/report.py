from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class RecordError(BaseModel):
    """One invalid record found while validating a file."""
    model_config = ConfigDict(frozen=True)

    line: int
    error_type: str
    message: str


class ValidationReport(BaseModel):
    """Summary of a validation run, written as JSON by `samlite validate --report`."""
    model_config = ConfigDict(frozen=True)

    sam_path: str
    version: Optional[str] = None
    sort_order: Optional[str] = None
    n_ref_seqs: int = 0
    n_read_groups: int = 0
    n_programs: int = 0
    n_comments: int = 0
    n_alignments: int = 0
    n_invalid: int = 0
    truncated: bool = False  # stopped early at --max-errors
    header_error: Optional[str] = None
    errors: List[RecordError] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.header_error is None and self.n_invalid == 0
