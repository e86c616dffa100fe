#!/usr/bin/env python3
from pathlib import Path
import argparse
import sys
from rich_argparse import RawDescriptionRichHelpFormatter

from samlite.commands import run_validate, run_view
from samlite.errors import SAMError
from samlite.utils import setup_file_logging


class SamliteArgumentParser(argparse.ArgumentParser):
    """Custom argument parser that shows program-specific help on error."""

    def error(self, message):
        """Upon error, prints help message and error."""
        self.print_help()
        self.exit(2, f'\n\033[31mERROR\033[0m: {message}\n')


def add_logging_arguments(parser):
    parser.add_argument("--logging",
                        help="Log directory (default: ./logs, or next to the output for view)")
    parser.add_argument("--debug", action="store_true",
                        help="Enable debug logging")
    parser.add_argument("--console-output", action="store_true",
                        help="Enable logging to console (default: False)")


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = SamliteArgumentParser(
        prog='samlite',
        formatter_class=RawDescriptionRichHelpFormatter,
        description='Strict parser and validator for SAM text files.',
        epilog="""
    - samlite validate: check every header item and alignment record of a SAM file.
    - samlite view: rewrite a SAM file in normalized form.

    View inputs & arguments for each command with samlite {command} --help.
        """
    )
    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    # samlite validate
    validate_parser = subparsers.add_parser('validate',
        help='Validate a SAM file',
        description='Validate the header and every alignment record of a SAM file.',
        formatter_class=parser.formatter_class,
        epilog="""
Examples:
samlite validate input.sam
samlite validate input.sam --max-errors 20 --report report.json
        """)
    validate_parser.add_argument("sam",
                                 help="Input SAM file (required)")
    validate_parser.add_argument("--max-errors", type=int, default=None,
                                 help="Stop after this many invalid records (default: report all)")
    validate_parser.add_argument("--report", "-r",
                                 help="Write a JSON validation report to this path")
    add_logging_arguments(validate_parser)

    # samlite view
    view_parser = subparsers.add_parser('view',
        help='Rewrite a SAM file in normalized form',
        description='Parse a SAM file and write every record back out in normalized form.',
        formatter_class=parser.formatter_class,
        epilog="""
Example:
  samlite view input.sam --output normalized.sam
  samlite view input.sam --output normalized.sam --skip-invalid
        """)
    view_parser.add_argument("sam",
                             help="Input SAM file (required)")
    view_parser.add_argument("--output", "-o", required=True,
                             help="Output SAM file (required)")
    view_parser.add_argument("--skip-invalid", action="store_true",
                             help="Drop invalid alignment records instead of failing")
    view_parser.add_argument("--header-only", action="store_true",
                             help="Only write the header section")
    add_logging_arguments(view_parser)

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        sys.exit(0)
    return args


def main(argv=None):
    args = parse_args(argv)

    if args.command == 'validate':
        log_dir = Path(args.logging) if args.logging else Path('logs')
        logger = setup_file_logging(log_dir, 'validate', args.debug, args.console_output)
        valid = run_validate(args, logger)
        sys.exit(0 if valid else 1)

    elif args.command == 'view':
        log_dir = Path(args.logging) if args.logging else Path(args.output).parent / 'logs'
        logger = setup_file_logging(log_dir, 'view', args.debug, args.console_output)
        try:
            run_view(args, logger)
        except SAMError as e:
            print(f"\033[31mERROR\033[0m: {e}", file=sys.stderr)
            sys.exit(1)


if __name__ == "__main__":
    main()
