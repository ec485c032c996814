"""Export search results to JSON format."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional

from exceptions import JSONExportError
from models import SearchOutcome

logger = logging.getLogger(__name__)


class JSONExporter:
    """Export search results to JSON format."""

    def __init__(self, pdf_path: Path):
        """
        Initialize JSONExporter.

        Args:
            pdf_path: Path to the PDF file
        """
        self.pdf_path = Path(pdf_path)
        self.pdf_name = self.pdf_path.name

    def _get_output_path(self, filename: Optional[str] = None) -> Path:
        """
        Get output path for JSON file.

        Args:
            filename: Optional custom filename. If None, uses default naming.

        Returns:
            Path to output JSON file
        """
        if filename is None:
            filename = f"{self.pdf_path.stem}_search.json"

        if not filename.endswith('.json'):
            filename = f"{filename}.json"

        # Output in PDF's parent directory
        return self.pdf_path.parent / filename

    def _format_data(
        self,
        outcome: SearchOutcome,
        query: str,
        total_pages: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Format a search outcome for JSON export.

        Args:
            outcome: SearchOutcome of the query
            query: Query the outcome belongs to
            total_pages: Optional total page count. If None, estimates from result pages.

        Returns:
            Dictionary formatted for JSON export
        """
        if total_pages is None:
            pages = [r.page_number for r in outcome.results]
            pages += [e.page_number for e in outcome.page_errors]
            total_pages = max(pages) if pages else 0

        return {
            "pdf_name": self.pdf_name,
            "query": query,
            "total_pages": total_pages,
            "status": outcome.status,
            "result_count": len(outcome.results),
            "page_errors": [
                {
                    "page_number": error.page_number,
                    "error_type": error.error_type,
                    "message": error.message,
                }
                for error in outcome.page_errors
            ],
            "results": [result.to_dict() for result in outcome.results],
        }

    def export(
        self,
        outcome: SearchOutcome,
        query: str,
        output_filename: Optional[str] = None,
        total_pages: Optional[int] = None
    ) -> Path:
        """
        Export a search outcome to a JSON file.

        Args:
            outcome: SearchOutcome to export
            query: Query the outcome belongs to
            output_filename: Optional custom output filename
            total_pages: Optional total page count from PDF

        Returns:
            Path to the exported JSON file

        Raises:
            JSONExportError: If export fails
        """
        try:
            output_path = self._get_output_path(output_filename)
            data = self._format_data(outcome, query, total_pages=total_pages)

            with open(output_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)

            logger.info(f"JSON exported successfully: {output_path}")
            return output_path

        except Exception as e:
            error_msg = f"Failed to export JSON: {str(e)}"
            logger.error(error_msg)
            raise JSONExportError(error_msg) from e
