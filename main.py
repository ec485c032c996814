"""Main entry point for PDF text search application."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

from cli_handler import CLIHandler
from config import SearchConfig
from exceptions import PDFDecryptionError, PDFSearchException
from json_exporter import JSONExporter
from models import SearchResult
from page_search import PageSearchOrchestrator
from pdf_annotator import PDFHighlightAnnotator
from pdf_reader import PDFReader
from search_session import SearchSession

logger = logging.getLogger(__name__)

INTERACTIVE_HELP = (
    "Enter a query, or: n (next), p (previous), c (clear), q (quit). "
    "Prefix a query with \\ to search for a command letter, e.g. \\n"
)
QUERY_ESCAPE = "\\"


def format_result(result: SearchResult, index: int, total: int) -> str:
    """Render one result as a single report line."""
    box = result.position
    return (
        f"[{index + 1}/{total}] page {result.page_number} "
        f"@ ({box.left:.1f}, {box.top:.1f}, {box.width:.1f}x{box.height:.1f}): "
        f"{result.context}"
    )


def print_results(session: SearchSession, out: TextIO = sys.stdout) -> None:
    total = len(session.search_results)
    for index, result in enumerate(session.search_results):
        marker = "*" if index == session.current_result_index else " "
        print(f"{marker} {format_result(result, index, total)}", file=out)
    summary = session.summary()
    if summary:
        print(summary, file=out)


async def run_interactive(
    session: SearchSession,
    stream: TextIO = sys.stdin,
    out: TextIO = sys.stdout
) -> None:
    """
    Drive a search session from line-based commands.

    A line holding only n, p, c or q is a command; any other line is a query.
    A leading backslash is stripped, so "\\n" searches for the letter n.

    Args:
        session: Session to drive
        stream: Input stream of commands and queries
        out: Output stream for results
    """
    print(INTERACTIVE_HELP, file=out)
    while True:
        line = await asyncio.to_thread(stream.readline)
        if not line:
            break

        command = line.rstrip("\n")
        if command == "q":
            break
        if command == "n":
            session.navigate_to_next()
        elif command == "p":
            session.navigate_to_previous()
        elif command == "c":
            session.clear_search()
            print("Search cleared", file=out)
            continue
        else:
            if command.startswith(QUERY_ESCAPE):
                command = command[len(QUERY_ESCAPE):]
            await session.perform_search(command)
            print_results(session, out)
            continue

        current = session.get_current_result()
        if current is None:
            print("No results to navigate", file=out)
        else:
            print(session.summary(), file=out)


async def run_search(
    pdf_reader: PDFReader,
    query: str,
    config: SearchConfig,
    page_range: Optional[list],
    interactive: bool
) -> SearchSession:
    """Build a session over the opened PDF and run the query (or the interactive loop)."""
    session = SearchSession(
        pdf_reader.as_document_source(),
        on_navigate_to_result=lambda r: logger.debug(
            f"Current result: {r.id} on page {r.page_number}"
        ),
        orchestrator=PageSearchOrchestrator(config=config),
        page_numbers=page_range,
    )

    if query.strip():
        await session.perform_search(query)
        print_results(session)

    if interactive:
        await run_interactive(session)

    return session


def main():
    """Main entry point for the PDF text search."""
    try:
        args = CLIHandler.parse_arguments()

        logging.basicConfig(
            level=getattr(logging, args.log_level),
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        CLIHandler.validate_arguments(args)

        pdf_path = Path(args.pdf_path)
        logger.info(f"Processing PDF: {pdf_path}")

        page_range = None
        if args.pages:
            page_range = CLIHandler.parse_page_range(args.pages)
            logger.info(f"Searching pages: {page_range} (1-indexed)")

        config = SearchConfig(
            line_tolerance=args.line_tolerance,
            context_length=args.context_length,
        )

        pdf_reader = PDFReader(pdf_path)
        pdf_reader.validate_path()
        pdf_reader.open_pdf()

        try:
            try:
                pdf_reader.decrypt_pdf(password=args.encryption_password)
            except PDFDecryptionError as e:
                logger.error(f"PDF decryption failed: {e}")
                if not args.encryption_password:
                    logger.error("Please provide --encryption-password if PDF is encrypted")
                sys.exit(1)

            session = asyncio.run(run_search(
                pdf_reader, args.query, config, page_range, args.interactive
            ))

            outcome = session.last_outcome
            if outcome is not None and outcome.is_degraded:
                logger.warning(
                    f"Search was {outcome.status}: "
                    f"{len(outcome.page_errors)} page(s) could not be searched"
                )

            if args.save_json is not None and outcome is not None:
                json_exporter = JSONExporter(pdf_path)
                output_filename = None if args.save_json == '' else args.save_json
                total_pages = pdf_reader.get_pdf_metadata()['total_pages']
                output_path = json_exporter.export(
                    outcome,
                    session.query,
                    output_filename=output_filename,
                    total_pages=total_pages
                )
                logger.info(f"JSON exported to: {output_path}")

            if args.highlight and session.search_results:
                current = session.get_current_result()
                annotator = PDFHighlightAnnotator(pdf_reader.pdf_document, pdf_path)
                annotator.highlight_results(
                    session.search_results,
                    active_result_id=current.id if current else None
                )
                annotator.save_pdf()

        finally:
            pdf_reader.close()

        logger.info("PDF search completed successfully")

    except PDFSearchException as e:
        logger.error(f"PDF Search Error: {e}")
        sys.exit(1)
    except ValueError as e:
        logger.error(f"Validation Error: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Process interrupted by user")
        sys.exit(1)
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
