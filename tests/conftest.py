"""Shared fixtures: an in-memory document implementing the page source protocol."""

import asyncio

import pytest

from exceptions import PDFReadError


def item(text, x, y, width=None, height=10.0):
    """Build a text content item the way a PDF renderer reports it."""
    if width is None:
        width = 6.0 * len(text)
    return {
        "str": text,
        "transform": [1, 0, 0, 1, x, y],
        "width": width,
        "height": height,
        "fontName": "Helvetica",
    }


def line_items(text, y=700.0, x=10.0, char_width=6.0, height=10.0):
    """Split text on spaces into one item per word laid out on a single line."""
    items = []
    for word in text.split(" "):
        items.append(item(word, x, y, width=char_width * len(word), height=height))
        x += char_width * (len(word) + 1)
    return items


class FakePage:
    def __init__(self, items, gate=None):
        self.items = items
        self.gate = gate

    async def get_text_content(self):
        if self.gate is not None:
            await self.gate.wait()
        return {"items": list(self.items)}


class FakeDocument:
    """Document whose pages are lists of items; selected pages can fail or block."""

    def __init__(self, pages, failing_pages=(), gates=None):
        self.pages = pages
        self.failing_pages = set(failing_pages)
        self.gates = gates or {}
        self.page_requests = []

    @property
    def num_pages(self):
        return len(self.pages)

    async def get_page(self, page_number):
        self.page_requests.append(page_number)
        if page_number in self.failing_pages:
            raise PDFReadError(f"Cannot decode page {page_number}")
        return FakePage(self.pages[page_number - 1], self.gates.get(page_number))


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def two_page_document():
    return FakeDocument([
        line_items("The quick brown fox"),
        line_items("jumps over the lazy dog"),
    ])
