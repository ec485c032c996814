"""Custom exception classes for PDF search errors."""

from __future__ import annotations


class PDFSearchException(Exception):
    """Base exception for PDF search errors."""
    pass


class PDFValidationError(PDFSearchException):
    """Raised when PDF path validation fails."""
    pass


class PDFReadError(PDFSearchException):
    """Raised when PDF cannot be opened or a page cannot be decoded."""
    pass


class PDFDecryptionError(PDFSearchException):
    """Raised when PDF decryption fails."""
    pass


class ExtractionError(PDFSearchException):
    """Raised when positioned text cannot be pulled from a page."""

    def __init__(self, message: str, page_number: int = None):
        super().__init__(message)
        self.page_number = page_number


class ReconstructionError(PDFSearchException):
    """Raised when fragments cannot be laid out into a text buffer."""
    pass


class PDFAnnotationError(PDFSearchException):
    """Raised when highlight annotation fails."""
    pass


class JSONExportError(PDFSearchException):
    """Raised when JSON export fails."""
    pass
