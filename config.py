"""Tunable defaults for text reconstruction and search."""

from __future__ import annotations

from dataclasses import dataclass

# Fragments whose y differs by no more than this are on the same line
LINE_TOLERANCE_DEFAULT = 5.0

# Characters of surrounding text kept on each side of a match
CONTEXT_LENGTH_DEFAULT = 50

ELLIPSIS = "..."


@dataclass(frozen=True)
class SearchConfig:
    """Validated search settings shared by the reconstructor and orchestrator."""
    line_tolerance: float = LINE_TOLERANCE_DEFAULT
    context_length: int = CONTEXT_LENGTH_DEFAULT
    ellipsis: str = ELLIPSIS

    def __post_init__(self) -> None:
        """Validate SearchConfig data after initialization."""
        if self.line_tolerance < 0:
            raise ValueError(
                f"line_tolerance must be non-negative, got {self.line_tolerance}"
            )

        if self.context_length < 0:
            raise ValueError(
                f"context_length must be non-negative, got {self.context_length}"
            )
