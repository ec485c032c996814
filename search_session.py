"""Stateful search session with incremental queries and result navigation."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Iterable, List, Optional

from fragment_extractor import DocumentSource
from models import SearchOutcome, SearchResult
from page_search import PageSearchOrchestrator

logger = logging.getLogger(__name__)

NavigationCallback = Callable[[SearchResult], None]


class SearchSession:
    """
    Hold the current query, its results and the active result index.

    ``perform_search`` is meant to be called on every keystroke: repeating the
    last accepted query is a no-op. Each accepted query gets a new generation
    number, and a scan that finishes after a newer query (or a clear) was
    accepted is discarded instead of overwriting the session.
    """

    def __init__(
        self,
        document: Optional[DocumentSource],
        on_navigate_to_result: Optional[NavigationCallback] = None,
        orchestrator: Optional[PageSearchOrchestrator] = None,
        page_numbers: Optional[Iterable[int]] = None
    ):
        """
        Initialize SearchSession.

        Args:
            document: Document to search; None behaves like an empty query
            on_navigate_to_result: Called with the new current result whenever it changes
            orchestrator: Page search orchestrator to run queries with
            page_numbers: Optional subset of pages to search (1-indexed)
        """
        self.document = document
        self.on_navigate_to_result = on_navigate_to_result
        self.orchestrator = orchestrator or PageSearchOrchestrator()
        self.page_numbers = list(page_numbers) if page_numbers is not None else None

        self.query = ""
        self.search_results: List[SearchResult] = []
        self.current_result_index = -1
        self.is_searching = False
        self.last_outcome: Optional[SearchOutcome] = None
        self._generation = 0

    def _reset(self) -> None:
        self._generation += 1
        self.query = ""
        self.search_results = []
        self.current_result_index = -1
        self.is_searching = False
        self.last_outcome = None

    def _notify(self) -> None:
        if self.on_navigate_to_result is None:
            return
        result = self.get_current_result()
        if result is not None:
            self.on_navigate_to_result(result)

    async def perform_search(self, query: str) -> None:
        """
        Run a query and make its first result current.

        Args:
            query: Search text; empty or whitespace-only clears the session

        Raises:
            asyncio.CancelledError: If the calling task is cancelled mid-scan;
                the query is forgotten so repeating it searches again
        """
        if self.document is None or not query.strip():
            self._reset()
            return

        if query == self.query:
            logger.debug(f"Query {query!r} unchanged, skipping search")
            return

        self._generation += 1
        generation = self._generation
        self.query = query
        self.is_searching = True

        try:
            outcome = await self.orchestrator.search(
                self.document, query, page_numbers=self.page_numbers
            )
        except asyncio.CancelledError:
            # Forget the abandoned query so repeating it runs a fresh scan
            if generation == self._generation:
                logger.info(f"Search for {query!r} cancelled")
                self.query = ""
                self.is_searching = False
            raise
        except Exception as e:
            logger.exception(f"Search error for {query!r}: {e}")
            outcome = SearchOutcome(failed=True)

        if generation != self._generation:
            logger.debug(f"Discarding stale results for {query!r}")
            return

        self.last_outcome = outcome
        self.search_results = list(outcome.results)
        self.is_searching = False

        if self.search_results:
            self.current_result_index = 0
            self._notify()
        else:
            self.current_result_index = -1

    def navigate_to_next(self) -> None:
        """Move to the next result, wrapping to the first."""
        if not self.search_results:
            return

        self.current_result_index = (
            (self.current_result_index + 1) % len(self.search_results)
        )
        self._notify()

    def navigate_to_previous(self) -> None:
        """Move to the previous result, wrapping to the last."""
        if not self.search_results:
            return

        self.current_result_index = (
            (self.current_result_index - 1) % len(self.search_results)
        )
        self._notify()

    def clear_search(self) -> None:
        """Drop results and forget the last query."""
        self._reset()

    def get_current_result(self) -> Optional[SearchResult]:
        if 0 <= self.current_result_index < len(self.search_results):
            return self.search_results[self.current_result_index]
        return None

    def summary(self) -> str:
        """Human-readable status line, e.g. "3 results found (1 of 3)"."""
        if self.is_searching:
            return "Searching..."

        if not self.query:
            return ""

        count = len(self.search_results)
        if count == 0:
            return "No results found"

        plural = "" if count == 1 else "s"
        text = f"{count} result{plural} found"
        if self.current_result_index >= 0:
            text += f" ({self.current_result_index + 1} of {count})"
        return text
