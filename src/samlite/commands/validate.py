"""Command module for checking a SAM file against the format grammar."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable, List, Optional

from rich.console import Console
from rich.progress import Progress, TextColumn, BarColumn, MofNCompleteColumn, TimeElapsedColumn
from rich.table import Table

from samlite.errors import SAMError
from samlite.models.report import RecordError, ValidationReport
from samlite.processors.reader import read_file
from samlite.utils.config import ValidateConfig


def validate_file(sam_path: Path, max_errors: Optional[int] = None,
                  on_record: Optional[Callable[[], None]] = None,
                  logger: Optional[logging.Logger] = None) -> ValidationReport:
    """Read a whole SAM file and collect every invalid record.

    Args:
        sam_path: SAM file to check
        max_errors: Stop after this many invalid records (None = no limit)
        on_record: Called once per body line, e.g. to advance a progress bar
        logger: Logger for per-record errors

    Returns:
        ValidationReport summarizing the header and the body
    """
    logger = logger or logging.getLogger(__name__)
    errors: List[RecordError] = []
    n_alignments = 0
    truncated = False

    try:
        header, alignments = read_file(sam_path)
    except SAMError as e:
        logger.error(f"Invalid header: {e}")
        return ValidationReport(sam_path=str(sam_path), header_error=str(e))

    try:
        for parsed in alignments:
            if on_record:
                on_record()
            if parsed.ok:
                n_alignments += 1
                continue
            logger.warning(f"Invalid record: {parsed.error}")
            errors.append(RecordError(
                line=parsed.position.line,
                error_type=type(parsed.error).__name__,
                message=parsed.error.message,
            ))
            if max_errors is not None and len(errors) >= max_errors:
                logger.info(f"Reached maximum of {max_errors} errors, stopping")
                truncated = True
                break
    finally:
        alignments.close()

    return ValidationReport(
        sam_path=str(sam_path),
        version=header.version,
        sort_order=header.sort_order.value if header.sort_order else None,
        n_ref_seqs=len(header.ref_seqs),
        n_read_groups=len(header.read_groups),
        n_programs=len(header.programs),
        n_comments=len(header.comments),
        n_alignments=n_alignments,
        n_invalid=len(errors),
        truncated=truncated,
        errors=errors,
    )


def print_summary(report: ValidationReport, console: Console) -> None:
    table = Table(title=f"samlite validate: {report.sam_path}")
    table.add_column("Section", style="cyan")
    table.add_column("Count", justify="right")
    table.add_row("@SQ", str(report.n_ref_seqs))
    table.add_row("@RG", str(report.n_read_groups))
    table.add_row("@PG", str(report.n_programs))
    table.add_row("@CO", str(report.n_comments))
    table.add_row("Valid alignments", str(report.n_alignments))
    table.add_row("Invalid records", str(report.n_invalid), style="red" if report.n_invalid else None)
    console.print(table)

    if report.header_error:
        console.print(f"[red]Header is invalid:[/red] {report.header_error}")
    for error in report.errors[:10]:
        console.print(f"[red]line {error.line}[/red] {error.error_type}: {error.message}")
    if report.n_invalid > 10:
        console.print(f"... and {report.n_invalid - 10} more (see log)")


def run_validate(args, logger: logging.Logger) -> bool:
    """Run the validate command. Returns True when the file is valid."""
    config = ValidateConfig.from_args(args)
    if not config.sam_input.exists():
        raise FileNotFoundError(f"Input file not found: {config.sam_input}")

    logger.info(f"Validating {config.sam_input}")
    start_time = time.time()
    with Progress(TextColumn("[bold blue]{task.description}"),
                  BarColumn(complete_style="green"),
                  MofNCompleteColumn(),
                  TimeElapsedColumn(),
                  transient=True) as progress:
        task = progress.add_task("[cyan]Checking records...", total=None)
        report = validate_file(
            config.sam_input,
            max_errors=config.max_errors,
            on_record=lambda: progress.update(task, advance=1),
            logger=logger,
        )
    elapsed = time.time() - start_time
    logger.info(f"Checked {report.n_alignments + report.n_invalid} records in {elapsed:.2f} seconds")

    if config.report_path:
        config.report_path.parent.mkdir(parents=True, exist_ok=True)
        config.report_path.write_text(report.model_dump_json(indent=2))
        logger.info(f"Wrote report to {config.report_path}")

    print_summary(report, Console())
    if report.is_valid:
        logger.info("File is valid.")
    else:
        logger.warning(f"File has {report.n_invalid} invalid records"
                       + (" and an invalid header" if report.header_error else ""))
    return report.is_valid
