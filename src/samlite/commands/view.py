"""Command module for rewriting a SAM file in normalized form."""

from __future__ import annotations

import logging
import time

from samlite.processors.reader import SAMReader
from samlite.processors.writer import SAMWriter
from samlite.utils.config import ViewConfig


def run_view(args, logger: logging.Logger) -> None:
    """Parse a SAM file and write it back out record by record."""
    config = ViewConfig.from_args(args)
    if not config.sam_input.exists():
        raise FileNotFoundError(f"Input file not found: {config.sam_input}")
    config.output_path.parent.mkdir(parents=True, exist_ok=True)

    start_time = time.time()
    n_skipped = 0
    with SAMReader(config.sam_input) as reader, SAMWriter(config.output_path) as writer:
        writer.write_header(reader.header)
        logger.info(f"Wrote header ({len(reader.header.to_lines())} lines) to {config.output_path}")
        if not config.header_only:
            for parsed in reader.alignments():
                if parsed.ok:
                    writer.write_alignment(parsed.value)
                elif config.skip_invalid:
                    logger.warning(f"Skipping invalid record: {parsed.error}")
                    n_skipped += 1
                else:
                    logger.error(f"Invalid record: {parsed.error}")
                    raise parsed.error
        n_written = writer.n_written

    elapsed = time.time() - start_time
    logger.info(f"Wrote {n_written} alignments in {elapsed:.2f} seconds")
    if n_skipped:
        logger.warning(f"Skipped {n_skipped} invalid records")
