"""Logging utilities for samlite."""

import logging
import sys
from datetime import datetime
from pathlib import Path


def setup_file_logging(log_dir: Path, command_name: str, debug: bool = False, console_output: bool = False) -> logging.Logger:
    """Configure logging to a timestamped log file and optionally to the console.

    Args:
        log_dir: Directory to write log files to
        command_name: Name of the command being run (e.g., 'validate', 'view')
        debug: Whether to enable debug logging
        console_output: Whether to also log to stderr (default: False)

    Returns:
        The samlite logger
    """
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%dT%H%M%S")
    log_file = log_dir / f"{timestamp}.{command_name}.log"
    level = logging.DEBUG if debug else logging.INFO
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # stdout may carry SAM output from `view`, so console logs go to stderr
    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    logger = logging.getLogger('samlite')
    logger.debug(f"Logging to file: {log_file}")
    return logger
