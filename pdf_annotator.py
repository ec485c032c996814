"""Search result highlighting using PyMuPDF annotations."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

import fitz  # PyMuPDF

from exceptions import PDFAnnotationError, PDFReadError
from models import SearchResult

logger = logging.getLogger(__name__)

HIGHLIGHT_COLOR = (1.0, 0.76, 0.03)
ACTIVE_HIGHLIGHT_COLOR = (1.0, 0.6, 0.0)


class PDFHighlightAnnotator:
    """Draw search results onto PDF pages as highlight annotations."""

    def __init__(self, pdf_document: fitz.Document, pdf_path: Path):
        """
        Initialize PDFHighlightAnnotator.

        Args:
            pdf_document: PyMuPDF Document object
            pdf_path: Path to the original PDF file
        """
        if pdf_document is None:
            raise PDFReadError("PDF document cannot be None")

        self.pdf_document = pdf_document
        self.pdf_path = Path(pdf_path)
        self.output_path: Optional[Path] = None

    @staticmethod
    def to_page_rect(result: SearchResult, page_height: float) -> fitz.Rect:
        """
        Convert a result's bottom-left page-space box to a PyMuPDF rectangle.

        Args:
            result: Search result
            page_height: Height of the result's page

        Returns:
            fitz.Rect in PyMuPDF's top-left coordinate system
        """
        x1, y1, x2, y2 = result.bounding_rect()
        return fitz.Rect(x1, page_height - y2, x2, page_height - y1)

    def annotate_page(
        self,
        page_number: int,
        results: List[SearchResult],
        active_result_id: Optional[str] = None
    ) -> int:
        """
        Highlight the results of a single page.

        Args:
            page_number: Page number (1-indexed)
            results: SearchResult objects for this page
            active_result_id: Id of the current result, drawn in a stronger colour

        Returns:
            Number of highlights drawn

        Raises:
            PDFAnnotationError: If annotation fails
        """
        if page_number < 1 or page_number > len(self.pdf_document):
            raise ValueError(f"Invalid page number: {page_number}")

        try:
            page = self.pdf_document[page_number - 1]
            page_height = page.rect.height
            drawn = 0

            for result in results:
                rect = self.to_page_rect(result, page_height)
                if rect.is_empty:
                    logger.warning(f"Skipping empty highlight for {result.id}")
                    continue

                annot = page.add_highlight_annot(rect)
                color = ACTIVE_HIGHLIGHT_COLOR if result.id == active_result_id else HIGHLIGHT_COLOR
                annot.set_colors(stroke=color)
                annot.set_info(title="Search result", content=result.match_text)
                annot.update()
                drawn += 1

            logger.debug(f"Highlighted {drawn} result(s) on page {page_number}")
            return drawn

        except Exception as e:
            error_msg = f"Failed to annotate page {page_number}: {str(e)}"
            logger.error(error_msg)
            raise PDFAnnotationError(error_msg) from e

    def highlight_results(
        self,
        results: List[SearchResult],
        active_result_id: Optional[str] = None
    ) -> int:
        """
        Highlight all search results.

        Args:
            results: SearchResult objects from any pages
            active_result_id: Id of the current result

        Returns:
            Number of highlights drawn

        Raises:
            PDFAnnotationError: If drawing fails
        """
        if not results:
            logger.warning("No search results to highlight")
            return 0

        pages_dict: Dict[int, List[SearchResult]] = {}
        for result in results:
            pages_dict.setdefault(result.page_number, []).append(result)

        drawn = 0
        for page_number in sorted(pages_dict.keys()):
            drawn += self.annotate_page(
                page_number, pages_dict[page_number], active_result_id
            )

        logger.info(f"Highlighted {drawn} result(s) on {len(pages_dict)} page(s)")
        return drawn

    def save_pdf(self, output_path: Optional[Path] = None) -> Path:
        """
        Save the highlighted PDF.

        Args:
            output_path: Optional output path. If None, creates a new file with
                        "_highlighted" suffix in the same directory.

        Returns:
            Path the PDF was written to

        Raises:
            PDFAnnotationError: If save fails
        """
        try:
            if output_path is None:
                pdf_stem = self.pdf_path.stem
                pdf_suffix = self.pdf_path.suffix
                output_path = self.pdf_path.parent / f"{pdf_stem}_highlighted{pdf_suffix}"

            self.pdf_document.save(output_path)
            self.output_path = Path(output_path)
            logger.info(f"PDF saved successfully: {output_path}")
            return self.output_path

        except Exception as e:
            error_msg = f"Failed to save PDF: {str(e)}"
            logger.error(error_msg)
            raise PDFAnnotationError(error_msg) from e
