"""Document-wide search across all pages."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from config import SearchConfig
from context_extractor import get_match_context
from exceptions import ExtractionError, ReconstructionError
from fragment_extractor import DocumentSource, FragmentExtractor
from layout_reconstructor import LayoutReconstructor
from match_locator import MatchLocator
from models import PageError, PageText, SearchOutcome, SearchResult

logger = logging.getLogger(__name__)


class PageSearchOrchestrator:
    """Run extraction, reconstruction and matching page by page."""

    def __init__(
        self,
        config: Optional[SearchConfig] = None,
        extractor: Optional[FragmentExtractor] = None,
        reconstructor: Optional[LayoutReconstructor] = None,
        locator: Optional[MatchLocator] = None
    ):
        """
        Initialize PageSearchOrchestrator.

        Args:
            config: Search settings, defaults to SearchConfig()
            extractor: Fragment extractor to use
            reconstructor: Layout reconstructor, built from config if omitted
            locator: Match locator to use
        """
        self.config = config or SearchConfig()
        self.extractor = extractor or FragmentExtractor()
        self.reconstructor = reconstructor or LayoutReconstructor(
            line_tolerance=self.config.line_tolerance
        )
        self.locator = locator or MatchLocator()

    def _pages_to_search(
        self,
        num_pages: int,
        page_numbers: Optional[Iterable[int]]
    ) -> List[int]:
        if page_numbers is None:
            return list(range(1, num_pages + 1))

        pages = []
        for page_number in sorted(set(page_numbers)):
            if page_number < 1 or page_number > num_pages:
                logger.warning(
                    f"Page {page_number} is out of range (1-{num_pages}), skipping"
                )
                continue
            pages.append(page_number)
        return pages

    async def search_page(
        self,
        document: DocumentSource,
        page_number: int,
        query: str
    ) -> List[SearchResult]:
        """
        Search a single page.

        Args:
            document: Document to read from
            page_number: Page number (1-indexed)
            query: Non-empty search query

        Returns:
            Results for this page in buffer order

        Raises:
            ExtractionError: If the page text cannot be extracted
            ReconstructionError: If the page fragments cannot be laid out or
                their matches cannot be turned into results
        """
        fragments = await self.extractor.extract(document, page_number)
        page_text = self.reconstructor.reconstruct(fragments)

        if page_text.is_empty:
            logger.debug(f"Page {page_number} has no text, skipping")
            return []

        try:
            results = self._build_results(page_number, query, page_text)
        except Exception as e:
            error_msg = f"Failed to resolve matches on page {page_number}: {str(e)}"
            logger.error(error_msg)
            raise ReconstructionError(error_msg) from e

        logger.debug(f"Found {len(results)} match(es) on page {page_number}")
        return results

    def _build_results(
        self,
        page_number: int,
        query: str,
        page_text: PageText
    ) -> List[SearchResult]:
        results = []
        matches = self.locator.find_page_matches(query, page_text)
        for ordinal, match in enumerate(matches):
            match_text = page_text.full_text[match.match_start:match.match_end]
            context = get_match_context(
                page_text.full_text,
                match.match_start,
                match.match_end,
                context_length=self.config.context_length,
                ellipsis=self.config.ellipsis,
            )
            results.append(SearchResult(
                id=f"search-{page_number}-{ordinal}",
                page_number=page_number,
                text=match_text,
                match_text=match_text,
                position=match.bounding_box,
                context=context,
            ))
        return results

    async def search(
        self,
        document: DocumentSource,
        query: str,
        page_numbers: Optional[Iterable[int]] = None
    ) -> SearchOutcome:
        """
        Search every page of a document in page order.

        A page that fails extraction or reconstruction is logged and recorded
        in the outcome's page_errors; the remaining pages are still searched.

        Args:
            document: Document to search
            query: Search query; empty or whitespace-only returns no results
                without reading the document
            page_numbers: Optional subset of pages to search (1-indexed)

        Returns:
            SearchOutcome with results ordered by page, then by position on the page
        """
        outcome = SearchOutcome()
        if not query.strip():
            return outcome

        pages = self._pages_to_search(document.num_pages, page_numbers)
        logger.info(f"Searching {len(pages)} page(s) for {query!r}")

        for page_number in pages:
            try:
                page_results = await self.search_page(document, page_number, query)
            except (ExtractionError, ReconstructionError) as e:
                logger.error(f"Error searching page {page_number}: {e}")
                outcome.page_errors.append(PageError(
                    page_number=page_number,
                    error_type=type(e).__name__,
                    message=str(e),
                ))
                continue

            outcome.pages_searched += 1
            outcome.results.extend(page_results)

        logger.info(
            f"Found {len(outcome.results)} result(s) for {query!r} "
            f"({len(outcome.page_errors)} page error(s))"
        )
        return outcome


async def search_pdf(
    document: DocumentSource,
    query: str,
    config: Optional[SearchConfig] = None
) -> List[SearchResult]:
    """Search a document and return only the ordered result list."""
    outcome = await PageSearchOrchestrator(config=config).search(document, query)
    return outcome.results
