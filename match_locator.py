"""Locate query occurrences in a page buffer and resolve them to geometry."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from shapely.geometry import MultiPoint

from models import BoundingBox, MatchSpan, PageText, PositionMapEntry

logger = logging.getLogger(__name__)


def _fold_case(text: str) -> str:
    # Lowercase per character, keeping characters whose lowercase form is
    # longer than one code point so buffer offsets stay aligned
    return "".join(
        lowered if len(lowered) == 1 else char
        for char, lowered in ((c, c.lower()) for c in text)
    )


class MatchLocator:
    """Case-insensitive substring search over a reconstructed page."""

    @staticmethod
    def resolve_offset(
        offset: int,
        position_map: Sequence[PositionMapEntry]
    ) -> Optional[PositionMapEntry]:
        """
        Find the first position map entry containing a buffer offset.

        Args:
            offset: Character offset in the page buffer
            position_map: Entries in buffer order

        Returns:
            The matching entry, or None if the offset is not covered
        """
        for entry in position_map:
            if entry.contains(offset):
                return entry
        return None

    @staticmethod
    def _union_box(first: PositionMapEntry, second: PositionMapEntry) -> BoundingBox:
        corners = MultiPoint([
            (first.x, first.y),
            (first.x + first.width, first.y + first.height),
            (second.x, second.y),
            (second.x + second.width, second.y + second.height),
        ])
        left, bottom, right, top = corners.bounds
        return BoundingBox(
            left=left,
            top=bottom,
            width=right - left,
            height=top - bottom,
        )

    def find_matches(
        self,
        query: str,
        full_text: str,
        position_map: Sequence[PositionMapEntry]
    ) -> List[MatchSpan]:
        """
        Find every occurrence of the query, including overlapping ones.

        After a match at index i the scan resumes at i + 1, so "aa" in "aaa"
        yields [0, 2) and [1, 3). Occurrences whose start or end offset is not
        covered by the position map are skipped.

        Args:
            query: Text to look for (case-insensitive)
            full_text: Page buffer
            position_map: Position map of the buffer

        Returns:
            List of MatchSpan objects in buffer order
        """
        if not query:
            return []

        needle = _fold_case(query)
        haystack = _fold_case(full_text)
        matches = []

        search_index = 0
        while search_index < len(haystack):
            match_index = haystack.find(needle, search_index)
            if match_index == -1:
                break

            match_end = match_index + len(needle)
            start_entry = self.resolve_offset(match_index, position_map)
            end_entry = self.resolve_offset(match_end, position_map)

            if start_entry is not None and end_entry is not None:
                matches.append(MatchSpan(
                    match_start=match_index,
                    match_end=match_end,
                    bounding_box=self._union_box(start_entry, end_entry),
                ))
            else:
                logger.debug(
                    f"Skipping unresolvable match at [{match_index}, {match_end})"
                )

            search_index = match_index + 1

        return matches

    def find_page_matches(self, query: str, page_text: PageText) -> List[MatchSpan]:
        return self.find_matches(query, page_text.full_text, page_text.position_map)
