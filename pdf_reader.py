"""PDF file reading, validation, decryption, and positioned text access."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import fitz  # PyMuPDF

from exceptions import PDFValidationError, PDFReadError, PDFDecryptionError

logger = logging.getLogger(__name__)


class PyMuPDFPage:
    """A single PyMuPDF page exposed as a positioned-text page source."""

    def __init__(self, page: fitz.Page, page_number: int):
        """
        Initialize PyMuPDFPage.

        Args:
            page: Loaded PyMuPDF page
            page_number: Page number (1-indexed)
        """
        self.page = page
        self.page_number = page_number

    def _read_items(self) -> List[Dict[str, Any]]:
        page_height = self.page.rect.height
        text_dict = self.page.get_text("dict")

        items = []
        for block in text_dict.get("blocks", []):
            # Image blocks carry no lines
            for line in block.get("lines", []):
                for span in line.get("spans", []):
                    text = span.get("text", "")
                    if not text:
                        continue

                    x0, y0, x1, y1 = span["bbox"]
                    # PyMuPDF boxes are top-left based; flip to PDF page space
                    items.append({
                        "str": text,
                        "transform": [1, 0, 0, 1, x0, page_height - y1],
                        "width": x1 - x0,
                        "height": y1 - y0,
                        "fontName": span.get("font", ""),
                    })
        return items

    async def get_text_content(self) -> Dict[str, Any]:
        """
        Get the positioned text spans of this page.

        Returns:
            Dictionary with an "items" list of {str, transform, width, height, fontName}

        Raises:
            PDFReadError: If the page content cannot be decoded
        """
        try:
            items = await asyncio.to_thread(self._read_items)
        except Exception as e:
            error_msg = f"Failed to decode page {self.page_number}: {str(e)}"
            logger.error(error_msg)
            raise PDFReadError(error_msg) from e

        logger.debug(f"Read {len(items)} text spans from page {self.page_number}")
        return {"items": items}


class PyMuPDFDocument:
    """An opened PyMuPDF document exposed as a 1-indexed document source."""

    def __init__(self, pdf_document: fitz.Document):
        """
        Initialize PyMuPDFDocument.

        Args:
            pdf_document: Opened PyMuPDF Document object
        """
        if pdf_document is None:
            raise PDFReadError("PDF document cannot be None")

        self.pdf_document = pdf_document

    @property
    def num_pages(self) -> int:
        return len(self.pdf_document)

    async def get_page(self, page_number: int) -> PyMuPDFPage:
        """
        Load a page.

        Args:
            page_number: Page number (1-indexed)

        Returns:
            PyMuPDFPage wrapper

        Raises:
            PDFReadError: If the page number is invalid or the page cannot be loaded
        """
        if page_number < 1 or page_number > self.num_pages:
            raise PDFReadError(f"Invalid page number: {page_number}")

        try:
            page = self.pdf_document.load_page(page_number - 1)
        except Exception as e:
            error_msg = f"Failed to load page {page_number}: {str(e)}"
            logger.error(error_msg)
            raise PDFReadError(error_msg) from e

        return PyMuPDFPage(page, page_number)


class PDFReader:
    """Handle PDF file reading, validation, decryption, and text access."""

    def __init__(self, pdf_path: Path):
        """
        Initialize PDFReader with PDF file path.

        Args:
            pdf_path: Path to the PDF file
        """
        self.pdf_path = Path(pdf_path)
        self.pdf_document: Optional[fitz.Document] = None
        self.pdf_name = self.pdf_path.name

    def validate_path(self) -> bool:
        """
        Validate PDF file path and existence.

        Returns:
            True if path is valid

        Raises:
            PDFValidationError: If path is invalid or file doesn't exist
        """
        if not self.pdf_path.exists():
            error_msg = f"PDF file not found: {self.pdf_path}"
            logger.error(error_msg)
            raise PDFValidationError(error_msg)

        if not self.pdf_path.is_file():
            error_msg = f"Path is not a file: {self.pdf_path}"
            logger.error(error_msg)
            raise PDFValidationError(error_msg)

        if self.pdf_path.suffix.lower() != '.pdf':
            error_msg = f"File is not a PDF: {self.pdf_path}"
            logger.error(error_msg)
            raise PDFValidationError(error_msg)

        logger.info(f"PDF path validated: {self.pdf_path}")
        return True

    def open_pdf(self) -> fitz.Document:
        """
        Open PDF file.

        Returns:
            Opened PyMuPDF Document object

        Raises:
            PDFReadError: If PDF cannot be opened
        """
        try:
            self.pdf_document = fitz.open(self.pdf_path)
            logger.info(f"PDF opened successfully: {self.pdf_path}")
            return self.pdf_document
        except Exception as e:
            error_msg = f"Failed to open PDF: {self.pdf_path}. Error: {str(e)}"
            logger.error(error_msg)
            raise PDFReadError(error_msg) from e

    def decrypt_pdf(self, password: Optional[str] = None) -> bool:
        """
        Decrypt PDF if encrypted.

        Args:
            password: Optional password for encrypted PDF

        Returns:
            True if decryption successful or PDF is not encrypted

        Raises:
            PDFDecryptionError: If decryption fails
        """
        if self.pdf_document is None:
            raise PDFReadError("PDF document not opened. Call open_pdf() first.")

        if not self.pdf_document.needs_pass:
            logger.info("PDF is not encrypted")
            return True

        try:
            result = self.pdf_document.authenticate(password or "")
        except Exception as e:
            error_msg = f"Failed to decrypt PDF: {str(e)}"
            logger.error(error_msg)
            raise PDFDecryptionError(error_msg) from e

        if result:
            logger.info("PDF decrypted successfully")
            return True

        if password:
            error_msg = "PDF decryption failed: Invalid password"
        else:
            error_msg = "PDF is encrypted and requires a password"
        logger.error(error_msg)
        raise PDFDecryptionError(error_msg)

    def as_document_source(self) -> PyMuPDFDocument:
        """
        Wrap the opened document for searching.

        Raises:
            PDFReadError: If PDF is not opened
        """
        if self.pdf_document is None:
            raise PDFReadError("PDF document not opened. Call open_pdf() first.")

        return PyMuPDFDocument(self.pdf_document)

    def get_pdf_metadata(self) -> Dict[str, Any]:
        """
        Get PDF metadata.

        Returns:
            Dictionary containing PDF metadata

        Raises:
            PDFReadError: If PDF is not opened
        """
        if self.pdf_document is None:
            raise PDFReadError("PDF document not opened. Call open_pdf() first.")

        metadata = {
            'pdf_name': self.pdf_name,
            'total_pages': len(self.pdf_document),
            'is_encrypted': self.pdf_document.needs_pass,
            'metadata': self.pdf_document.metadata
        }
        return metadata

    def close(self) -> None:
        """Close the PDF document."""
        if self.pdf_document is not None:
            self.pdf_document.close()
            self.pdf_document = None
            logger.info("PDF document closed")
