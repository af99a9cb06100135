"""
Main entry point for the notediff command line tool.

This module handles:
- Command line argument parsing
- Logging configuration
- Settings loading
- Running a diff or a merge preview and printing the result
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import List, Optional

from notediff import __version__
from notediff.core.diff.text_diff import ContentTooLargeError, DiffOptions, compute_diff
from notediff.core.merge.merge_preview import compute_merge_preview
from notediff.core.models import DiffMode
from notediff.services.file_io import read_note
from notediff.services.formatting import format_diff, format_merge_preview, to_json
from notediff.services.settings import DiffSettings, SettingsManager


# =============================================================================
# Constants
# =============================================================================

APP_NAME = "notediff"
APP_VERSION = __version__

EXIT_OK = 0
EXIT_CONFLICTS = 1
EXIT_ERROR = 2


# =============================================================================
# Enums
# =============================================================================

class RunMode(Enum):
    """What the invocation computes."""
    DIFF = auto()
    MERGE_PREVIEW = auto()


@dataclass
class CommandLineArgs:
    """Parsed command line arguments."""
    mode: RunMode = RunMode.DIFF
    left_path: Optional[str] = None
    right_path: Optional[str] = None
    base_path: Optional[str] = None
    diff_mode: DiffMode = DiffMode.AUTO
    context: Optional[int] = None
    extract_html: bool = True
    output_json: bool = False
    encoding: Optional[str] = None
    config_file: Optional[str] = None
    log_level: str = "WARNING"
    log_file: Optional[str] = None


# =============================================================================
# Logging Setup
# =============================================================================

class LogFormatter(logging.Formatter):
    """Custom log formatter with colors for console."""

    COLORS = {
        logging.INFO: '\033[32m',      # Green
        logging.WARNING: '\033[33m',   # Yellow
        logging.ERROR: '\033[31m',     # Red
        logging.CRITICAL: '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = True):
        super().__init__(
            fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)

        if self.use_colors:
            color = self.COLORS.get(record.levelno, '')
            return f"{color}{formatted}{self.RESET}"

        return formatted


def setup_logging(level: str = "WARNING", log_file: Optional[Path] = None) -> logging.Logger:
    """
    Configure application logging.

    Console output goes to stderr so that stdout carries only results.

    Args:
        level: Log level string
        log_file: Optional file path for logging

    Returns:
        Root logger instance
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(LogFormatter(use_colors=True))
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(LogFormatter(use_colors=False))
        root_logger.addHandler(file_handler)

    return root_logger


# =============================================================================
# Command Line Parsing
# =============================================================================

def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError("must not be negative")
    return number


def parse_arguments(args: Optional[List[str]] = None) -> CommandLineArgs:
    """
    Parse command line arguments.

    Args:
        args: Arguments to parse (defaults to sys.argv)

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Diff and three-way merge preview for note versions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s old.html new.html                   Diff two versions
  %(prog)s --mode word --context 1 a.txt b.txt Word-level diff, 1 context line
  %(prog)s -m -b base.txt local.txt head.txt   Merge preview
  %(prog)s --json a.txt b.txt                  Print the JSON result
        """
    )

    # Positional arguments
    parser.add_argument('left', help='Old version (local version in merge mode)')
    parser.add_argument('right', help='New version (head version in merge mode)')

    # Merge options
    parser.add_argument(
        '-m', '--merge',
        action='store_true',
        help='Three-way merge preview (requires --base)'
    )
    parser.add_argument(
        '-b', '--base',
        help='Base version for the merge preview'
    )

    # Diff options
    parser.add_argument(
        '--mode',
        choices=[mode.value for mode in DiffMode],
        default=DiffMode.AUTO.value,
        help='Diff granularity'
    )
    parser.add_argument(
        '--context',
        type=_non_negative_int,
        default=None,
        help='Unchanged lines kept around each change'
    )
    parser.add_argument(
        '--no-html',
        action='store_true',
        help='Diff HTML markup as-is instead of extracting its text'
    )
    parser.add_argument(
        '--json',
        action='store_true',
        help='Print the result as JSON'
    )
    parser.add_argument(
        '--encoding',
        help='Input encoding (auto-detected by default)'
    )

    # Configuration
    parser.add_argument(
        '-c', '--config',
        help='Settings file path'
    )

    # Logging
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        default='WARNING',
        help='Log level'
    )
    parser.add_argument(
        '--log-file',
        help='Also write log records to this file'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'{APP_NAME} {APP_VERSION}'
    )

    parsed = parser.parse_args(args)

    if parsed.merge and not parsed.base:
        parser.error("--merge requires --base")

    result = CommandLineArgs()
    result.mode = RunMode.MERGE_PREVIEW if parsed.merge else RunMode.DIFF
    result.left_path = parsed.left
    result.right_path = parsed.right
    result.base_path = parsed.base
    result.diff_mode = DiffMode.from_string(parsed.mode)
    result.context = parsed.context
    result.extract_html = not parsed.no_html
    result.output_json = parsed.json
    result.encoding = parsed.encoding
    result.config_file = parsed.config
    result.log_level = 'DEBUG' if parsed.verbose else parsed.log_level
    result.log_file = parsed.log_file

    return result


# =============================================================================
# Commands
# =============================================================================

def load_settings(config_file: Optional[str]) -> DiffSettings:
    """Load settings from the given file or the default location."""
    manager = SettingsManager(Path(config_file) if config_file else None)
    return manager.settings


def run(args: CommandLineArgs, settings: DiffSettings) -> int:
    """Execute the requested command and print its result."""
    options = DiffOptions(
        mode=args.diff_mode,
        context=args.context,
        extract_text_from_html=args.extract_html,
    )

    def read_content(path: str) -> str:
        return read_note(path, args.encoding)

    if args.mode == RunMode.MERGE_PREVIEW:
        preview = compute_merge_preview(
            read_content(args.base_path),
            read_content(args.left_path),
            read_content(args.right_path),
            options=options,
            settings=settings,
        )
        lines = [to_json(preview)] if args.output_json else format_merge_preview(preview)
        for line in lines:
            print(line)
        return EXIT_CONFLICTS if preview.has_conflicts else EXIT_OK

    result = compute_diff(
        read_content(args.left_path),
        read_content(args.right_path),
        options=options,
        settings=settings,
    )
    if args.output_json:
        print(to_json(result))
    else:
        for line in format_diff(result, args.left_path, args.right_path):
            print(line)
    return EXIT_OK


# =============================================================================
# Main Function
# =============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    """
    Command line entry point.

    Returns:
        Exit code (0 success, 1 merge conflicts, 2 error)
    """
    args = parse_arguments(argv)

    log_file = Path(args.log_file) if args.log_file else None
    logger = setup_logging(args.log_level, log_file)
    logger.debug(f"Starting {APP_NAME} v{APP_VERSION}")

    settings = load_settings(args.config_file)

    try:
        return run(args, settings)
    except ContentTooLargeError as e:
        logger.error(f"Input rejected: {e}")
        print(f"{APP_NAME}: {e}", file=sys.stderr)
        return EXIT_ERROR
    except OSError as e:
        logger.error(f"Could not read input: {e}")
        print(f"{APP_NAME}: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
