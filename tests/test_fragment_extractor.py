"""Unit tests for fragment extraction from page sources."""

import pytest

from conftest import FakeDocument, item, run
from exceptions import ExtractionError
from fragment_extractor import FragmentExtractor
from models import PositionedFragment


def test_extract_uses_translation_of_transform():
    document = FakeDocument([[
        {"str": "Hi", "transform": [2, 0, 0, 2, 15.5, 640.0], "width": 12, "height": 8, "fontName": "F1"},
    ]])

    fragments = run(FragmentExtractor().extract(document, 1))

    assert fragments == [PositionedFragment(text="Hi", x=15.5, y=640.0, width=12, height=8)]


def test_extract_keeps_emitted_order():
    document = FakeDocument([[item("second", 50, 100), item("first", 0, 100)]])

    fragments = run(FragmentExtractor().extract(document, 1))

    assert [f.text for f in fragments] == ["second", "first"]


def test_extract_accepts_six_and_sixteen_element_transforms():
    sixteen = [1, 0, 0, 0, 0, 1, 0, 0, 0, 0, 1, 0, 0, 0, 0, 1]
    sixteen[4], sixteen[5] = 7, 9
    document = FakeDocument([[
        {"str": "a", "transform": sixteen, "width": 1, "height": 1},
    ]])

    fragments = run(FragmentExtractor().extract(document, 1))

    assert (fragments[0].x, fragments[0].y) == (7, 9)


def test_page_decode_failure_raises_extraction_error():
    document = FakeDocument([[item("a", 0, 0)]], failing_pages={1})

    with pytest.raises(ExtractionError) as excinfo:
        run(FragmentExtractor().extract(document, 1))

    assert excinfo.value.page_number == 1


def test_malformed_item_raises_extraction_error():
    document = FakeDocument([[{"str": "broken", "transform": [1, 0], "width": 1, "height": 1}]])

    with pytest.raises(ExtractionError):
        run(FragmentExtractor().extract(document, 1))


def test_empty_page_gives_no_fragments():
    document = FakeDocument([[]])

    assert run(FragmentExtractor().extract(document, 1)) == []
