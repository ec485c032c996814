"""Reading-order reconstruction of unordered page fragments."""

from __future__ import annotations

import functools
import logging
import math
from typing import Iterable, List

from config import LINE_TOLERANCE_DEFAULT
from exceptions import ReconstructionError
from models import PageText, PositionedFragment, PositionMapEntry

logger = logging.getLogger(__name__)


class LayoutReconstructor:
    """
    Order fragments top-to-bottom, left-to-right and join them into one buffer.

    Two fragments count as the same line when their y coordinates differ by no
    more than ``line_tolerance``. This is a banding heuristic, not column
    detection: fragments from side-by-side columns that share a baseline are
    interleaved.

    The band comparison is not transitive. Fragments at y=100, 96 and 92 are
    pairwise "same line" only for neighbours, so a staircase of baselines can
    order differently depending on the order the page emitted them. For a
    given emission order the result is deterministic.
    """

    def __init__(self, line_tolerance: float = LINE_TOLERANCE_DEFAULT):
        """
        Initialize LayoutReconstructor.

        Args:
            line_tolerance: Maximum y difference for fragments on the same line
        """
        if line_tolerance < 0:
            raise ValueError("line_tolerance must be non-negative")

        self.line_tolerance = line_tolerance

    def _compare(self, a: PositionedFragment, b: PositionedFragment) -> int:
        y_diff = b.y - a.y
        if abs(y_diff) > self.line_tolerance:
            # Different lines, higher y first
            return 1 if y_diff > 0 else -1
        if a.x < b.x:
            return -1
        if a.x > b.x:
            return 1
        return 0

    def sort_fragments(
        self,
        fragments: Iterable[PositionedFragment]
    ) -> List[PositionedFragment]:
        """
        Sort fragments into reading order.

        Args:
            fragments: Fragments in arbitrary order

        Returns:
            New list in reading order (the sort is stable)
        """
        return sorted(fragments, key=functools.cmp_to_key(self._compare))

    def reconstruct(self, fragments: Iterable[PositionedFragment]) -> PageText:
        """
        Build the linear text buffer and position map of a page.

        Each fragment is followed by a single separating space. An entry covers
        the fragment's text plus that separator slot, so a match ending exactly
        at the end of a fragment still resolves.

        Args:
            fragments: Fragments of one page in arbitrary order

        Returns:
            PageText with the trimmed buffer and its position map

        Raises:
            ReconstructionError: If a fragment is malformed
        """
        fragments = list(fragments)
        if not fragments:
            return PageText(full_text="", position_map=())

        try:
            for fragment in fragments:
                self._validate_fragment(fragment)
            ordered = self.sort_fragments(fragments)
        except (TypeError, ValueError) as e:
            error_msg = f"Failed to order fragments: {str(e)}"
            logger.error(error_msg)
            raise ReconstructionError(error_msg) from e

        parts = []
        position_map = []
        offset = 0
        for fragment in ordered:
            start = offset
            parts.append(fragment.text)
            parts.append(" ")
            offset += len(fragment.text) + 1

            position_map.append(PositionMapEntry(
                start=start,
                end=offset - 1,
                x=fragment.x,
                y=fragment.y,
                width=fragment.width,
                height=fragment.height,
            ))

        full_text = "".join(parts).rstrip()
        logger.debug(
            f"Reconstructed {len(full_text)} characters from {len(ordered)} fragments"
        )
        return PageText(full_text=full_text, position_map=tuple(position_map))

    @staticmethod
    def _validate_fragment(fragment: PositionedFragment) -> None:
        if not isinstance(fragment.text, str):
            raise TypeError(f"Fragment text must be a string, got {fragment.text!r}")

        coords = (fragment.x, fragment.y, fragment.width, fragment.height)
        if not all(math.isfinite(value) for value in coords):
            raise ValueError(f"Fragment contains non-finite geometry: {fragment!r}")

        # Far edges feed the match boxes and must not overflow
        if not (math.isfinite(fragment.x + fragment.width)
                and math.isfinite(fragment.y + fragment.height)):
            raise ValueError(f"Fragment extent overflows: {fragment!r}")
