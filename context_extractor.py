"""Surrounding-text snippets for search matches."""

from __future__ import annotations

from config import CONTEXT_LENGTH_DEFAULT, ELLIPSIS


def get_match_context(
    full_text: str,
    match_start: int,
    match_end: int,
    context_length: int = CONTEXT_LENGTH_DEFAULT,
    ellipsis: str = ELLIPSIS
) -> str:
    """
    Return the text around a match, marking each truncated side with an ellipsis.

    Args:
        full_text: Page buffer
        match_start: Start offset of the match (inclusive)
        match_end: End offset of the match (exclusive)
        context_length: Characters kept on each side of the match
        ellipsis: Marker added where the window was cut short

    Returns:
        Context snippet
    """
    start = max(0, match_start - context_length)
    end = min(len(full_text), match_end + context_length)

    context = full_text[start:end]

    if start > 0:
        context = f"{ellipsis}{context}"
    if end < len(full_text):
        context = f"{context}{ellipsis}"

    return context
