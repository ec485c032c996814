"""Pull positioned text fragments from a page of a document source."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Protocol

from exceptions import ExtractionError
from models import PositionedFragment

logger = logging.getLogger(__name__)


class PageSource(Protocol):
    """A decoded page able to report its text content."""

    async def get_text_content(self) -> Dict[str, Any]:
        ...


class DocumentSource(Protocol):
    """A paginated document with 1-indexed page access."""

    num_pages: int

    async def get_page(self, page_number: int) -> PageSource:
        ...


class FragmentExtractor:
    """Turn a page's text content items into unordered PositionedFragments."""

    async def extract(
        self,
        document: DocumentSource,
        page_number: int
    ) -> List[PositionedFragment]:
        """
        Extract positioned fragments from one page.

        Args:
            document: Document to read from
            page_number: Page number (1-indexed)

        Returns:
            List of PositionedFragment objects, in whatever order the page
            emitted them

        Raises:
            ExtractionError: If the page cannot be decoded or its content is malformed
        """
        try:
            page = await document.get_page(page_number)
            text_content = await page.get_text_content()
            items = text_content["items"]
        except Exception as e:
            error_msg = f"Failed to extract text from page {page_number}: {str(e)}"
            logger.error(error_msg)
            raise ExtractionError(error_msg, page_number=page_number) from e

        fragments = []
        for item in items:
            try:
                fragments.append(self._to_fragment(item))
            except (KeyError, IndexError, TypeError) as e:
                error_msg = (
                    f"Malformed text item on page {page_number}: {item!r} ({str(e)})"
                )
                logger.error(error_msg)
                raise ExtractionError(error_msg, page_number=page_number) from e

        logger.debug(f"Extracted {len(fragments)} fragments from page {page_number}")
        return fragments

    @staticmethod
    def _to_fragment(item: Dict[str, Any]) -> PositionedFragment:
        # Only the translation part of the transform matrix is used
        transform = item["transform"]
        return PositionedFragment(
            text=item["str"],
            x=transform[4],
            y=transform[5],
            width=item["width"],
            height=item["height"],
        )
