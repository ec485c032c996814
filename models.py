"""Data models for PDF text search."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass(frozen=True)
class PositionedFragment:
    """One glyph-run in page space (origin bottom-left, y grows upward)."""
    text: str
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class PositionMapEntry:
    """Maps the inclusive character range [start, end] of a page buffer to geometry."""
    start: int
    end: int
    x: float
    y: float
    width: float
    height: float

    def __post_init__(self) -> None:
        """Validate the character range."""
        if self.start < 0:
            raise ValueError(f"start must be non-negative, got {self.start}")

        if self.start > self.end:
            raise ValueError(f"start must be <= end, got {self.start} > {self.end}")

    def contains(self, offset: int) -> bool:
        return self.start <= offset <= self.end


@dataclass(frozen=True)
class PageText:
    """Reading-ordered text of one page plus its offset-to-geometry index."""
    full_text: str
    position_map: Tuple[PositionMapEntry, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.full_text


@dataclass(frozen=True)
class BoundingBox:
    """
    Page-space box of a match.

    ``top`` carries the lower y coordinate of the box in PDF space (the corner
    a viewer flips into its top edge), so ``top + height`` is the upper edge.
    """
    left: float
    top: float
    width: float
    height: float

    def __post_init__(self) -> None:
        """Validate BoundingBox data after initialization."""
        values = (self.left, self.top, self.width, self.height)
        if not all(math.isfinite(v) for v in values):
            raise ValueError(f"BoundingBox contains non-finite values: {values}")

        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"Invalid BoundingBox dimensions: {self.width}x{self.height}"
            )

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def to_dict(self) -> dict:
        return {
            "left": self.left,
            "top": self.top,
            "width": self.width,
            "height": self.height,
        }


@dataclass(frozen=True)
class MatchSpan:
    """A located occurrence: half-open offsets [match_start, match_end) and its box."""
    match_start: int
    match_end: int
    bounding_box: BoundingBox


@dataclass(frozen=True)
class SearchResult:
    """A single navigable search hit."""
    id: str
    page_number: int  # 1-indexed
    text: str
    match_text: str
    position: BoundingBox
    context: str

    def __post_init__(self) -> None:
        if self.page_number < 1:
            raise ValueError(f"page_number must be >= 1, got {self.page_number}")

    def bounding_rect(self) -> Tuple[float, float, float, float]:
        """Return (x1, y1, x2, y2) as consumed by scroll-to and highlight layers."""
        return (
            self.position.left,
            self.position.top,
            self.position.right,
            self.position.bottom,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "page_number": self.page_number,
            "text": self.text,
            "match_text": self.match_text,
            "position": self.position.to_dict(),
            "context": self.context,
        }


@dataclass(frozen=True)
class PageError:
    """A page that contributed no results because it could not be processed."""
    page_number: int
    error_type: str
    message: str


@dataclass
class SearchOutcome:
    """Result list of one query together with the pages that degraded it."""
    results: List[SearchResult] = field(default_factory=list)
    page_errors: List[PageError] = field(default_factory=list)
    pages_searched: int = 0
    failed: bool = False

    @property
    def status(self) -> str:
        if self.failed:
            return "failed"
        if self.page_errors:
            return "partial"
        return "complete"

    @property
    def is_degraded(self) -> bool:
        return self.status != "complete"
