"""Command-line argument parsing and validation."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from config import CONTEXT_LENGTH_DEFAULT, LINE_TOLERANCE_DEFAULT

logger = logging.getLogger(__name__)


class CLIHandler:
    """Handle command-line argument parsing and validation."""

    @staticmethod
    def parse_page_range(page_str: str) -> List[int]:
        """
        Parse page range string into list of page numbers.

        Supports formats:
        - "1,3,5" -> [1, 3, 5]
        - "1-5" -> [1, 2, 3, 4, 5]
        - "1,3-5,10" -> [1, 3, 4, 5, 10]

        Args:
            page_str: Comma-separated page range string (1-indexed)

        Returns:
            Sorted list of unique page numbers (1-indexed)

        Raises:
            ValueError: If page range format is invalid
        """
        if not page_str:
            return []

        pages = []
        for part in page_str.split(','):
            part = part.strip()
            if '-' in part:
                try:
                    start, end = (int(p.strip()) for p in part.split('-', 1))
                except ValueError as e:
                    raise ValueError(f"Invalid page range format: {part}") from e

                if start < 1 or end < 1:
                    raise ValueError(f"Page numbers must be >= 1: {part}")

                if start > end:
                    raise ValueError(f"Start page must be <= end page: {part}")

                pages.extend(range(start, end + 1))
            else:
                try:
                    page_num = int(part)
                except ValueError as e:
                    raise ValueError(f"Invalid page number: {part}") from e

                if page_num < 1:
                    raise ValueError(f"Page numbers must be >= 1: {part}")

                pages.append(page_num)

        return sorted(set(pages))

    @staticmethod
    def build_parser() -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            description="Search text in a PDF and report page-space bounding boxes",
            formatter_class=argparse.RawDescriptionHelpFormatter
        )

        parser.add_argument(
            'pdf_path',
            type=str,
            help='Path to input PDF file'
        )

        parser.add_argument(
            'query',
            type=str,
            nargs='?',
            default='',
            help='Text to search for (case-insensitive). '
                 'May be omitted with --interactive.'
        )

        parser.add_argument(
            '--save-json',
            type=str,
            nargs='?',
            const='',
            default=None,
            metavar='FILENAME',
            help='Save search results to JSON file. '
                 'If flag is provided without filename, uses default: {pdfname}_search.json. '
                 'If filename is provided, uses that name.'
        )

        parser.add_argument(
            '--highlight',
            action='store_true',
            help='Write a copy of the PDF with search results highlighted'
        )

        parser.add_argument(
            '--interactive',
            action='store_true',
            help='Read queries and navigation commands (n, p, c, q) from stdin'
        )

        parser.add_argument(
            '--encryption-password',
            type=str,
            default=None,
            metavar='PASSWORD',
            help='Password for encrypted PDF. If provided, PDF will be decrypted using this password.'
        )

        parser.add_argument(
            '--pages',
            type=str,
            default=None,
            metavar='RANGE',
            help='Page range to search (1-indexed). '
                 'Examples: "1,3,5" or "1-5" or "1,3-5,10"'
        )

        parser.add_argument(
            '--line-tolerance',
            type=float,
            default=LINE_TOLERANCE_DEFAULT,
            metavar='UNITS',
            help='Maximum vertical distance for text on the same line '
                 f'(default: {LINE_TOLERANCE_DEFAULT})'
        )

        parser.add_argument(
            '--context-length',
            type=int,
            default=CONTEXT_LENGTH_DEFAULT,
            metavar='CHARS',
            help='Characters of context shown around each match '
                 f'(default: {CONTEXT_LENGTH_DEFAULT})'
        )

        parser.add_argument(
            '--log-level',
            type=str,
            default='INFO',
            choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
            help='Set logging level (default: INFO)'
        )

        return parser

    @staticmethod
    def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
        """
        Parse command-line arguments.

        Args:
            argv: Optional argument list, defaults to sys.argv[1:]

        Returns:
            Parsed arguments namespace
        """
        return CLIHandler.build_parser().parse_args(argv)

    @staticmethod
    def validate_arguments(args: argparse.Namespace) -> bool:
        """
        Validate parsed arguments.

        Args:
            args: Parsed arguments namespace

        Returns:
            True if arguments are valid

        Raises:
            ValueError: If arguments are invalid
        """
        pdf_path = Path(args.pdf_path)
        if not pdf_path.exists():
            raise ValueError(f"PDF file not found: {pdf_path}")

        if not pdf_path.is_file():
            raise ValueError(f"Path is not a file: {pdf_path}")

        if pdf_path.suffix.lower() != '.pdf':
            raise ValueError(f"File is not a PDF: {pdf_path}")

        if not args.interactive and not args.query.strip():
            raise ValueError("A search query is required unless --interactive is used")

        if args.pages:
            try:
                CLIHandler.parse_page_range(args.pages)
            except ValueError as e:
                raise ValueError(f"Invalid page range: {e}") from e

        if args.line_tolerance < 0:
            raise ValueError("--line-tolerance must be non-negative")

        if args.context_length < 0:
            raise ValueError("--context-length must be non-negative")

        return True
