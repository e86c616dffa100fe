from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class ValidateConfig:
    """Configuration for the validate command."""
    sam_input: Path

    max_errors: Optional[int] = None  # stop after this many invalid records (None = report all)
    report_path: Optional[Path] = None
    log_dir: Optional[Path] = None  # ./logs if not specified
    debug: bool = False
    console_output: bool = False

    @classmethod
    def from_args(cls, args):
        """Create ValidateConfig instance from parsed command line arguments."""
        if args.max_errors is not None and args.max_errors < 1:
            raise ValueError("--max-errors must be a positive integer")
        return cls(
            sam_input=Path(args.sam),
            max_errors=args.max_errors,
            report_path=Path(args.report) if args.report else None,
            log_dir=Path(args.logging) if args.logging else Path('logs'),
            debug=args.debug,
            console_output=args.console_output,
        )


@dataclass
class ViewConfig:
    """Configuration for the view command."""
    sam_input: Path
    output_path: Path

    skip_invalid: bool = False
    header_only: bool = False
    log_dir: Optional[Path] = None  # output directory/logs if not specified
    debug: bool = False
    console_output: bool = False

    @classmethod
    def from_args(cls, args):
        """Create ViewConfig instance from parsed command line arguments."""
        output_path = Path(args.output)
        return cls(
            sam_input=Path(args.sam),
            output_path=output_path,
            skip_invalid=args.skip_invalid,
            header_only=args.header_only,
            log_dir=Path(args.logging) if args.logging else output_path.parent / 'logs',
            debug=args.debug,
            console_output=args.console_output,
        )
