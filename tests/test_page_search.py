"""Unit tests for document-wide search orchestration."""

from conftest import FakeDocument, item, line_items, run
from config import SearchConfig
from match_locator import MatchLocator
from models import BoundingBox
from page_search import PageSearchOrchestrator, search_pdf


def test_two_page_scenario(two_page_document):
    results = run(search_pdf(two_page_document, "the"))

    assert [(r.page_number, r.match_text) for r in results] == [(1, "The"), (2, "the")]
    assert [r.id for r in results] == ["search-1-0", "search-2-0"]
    assert results[0].text == "The"
    assert results[0].context == "The quick brown fox"
    assert results[0].position == BoundingBox(left=10, top=700, width=18, height=10)


def test_results_keep_page_then_match_order():
    document = FakeDocument([
        line_items("foo bar foo"),
        line_items("nothing here"),
        line_items("foo"),
    ])

    results = run(search_pdf(document, "foo"))

    assert [(r.page_number, r.id) for r in results] == [
        (1, "search-1-0"), (1, "search-1-1"), (3, "search-3-0"),
    ]


def test_failing_page_does_not_stop_the_scan():
    document = FakeDocument(
        [line_items("foo one"), line_items("foo two"), line_items("foo three")],
        failing_pages={2},
    )

    outcome = run(PageSearchOrchestrator().search(document, "foo"))

    assert [r.page_number for r in outcome.results] == [1, 3]
    assert document.page_requests == [1, 2, 3]
    assert [e.page_number for e in outcome.page_errors] == [2]
    assert outcome.page_errors[0].error_type == "ExtractionError"
    assert outcome.pages_searched == 2
    assert outcome.status == "partial"
    assert outcome.is_degraded


def test_malformed_page_counts_as_page_error():
    document = FakeDocument([
        [{"str": "foo", "transform": [1, 0, 0, 1, "x", 0], "width": 1, "height": 1}],
        line_items("foo"),
    ])

    outcome = run(PageSearchOrchestrator().search(document, "foo"))

    assert [r.page_number for r in outcome.results] == [2]
    assert outcome.page_errors[0].error_type == "ReconstructionError"


def test_whitespace_query_does_not_touch_document(two_page_document):
    outcome = run(PageSearchOrchestrator().search(two_page_document, "   "))

    assert outcome.results == []
    assert outcome.status == "complete"
    assert two_page_document.page_requests == []


def test_empty_document_has_no_results():
    outcome = run(PageSearchOrchestrator().search(FakeDocument([]), "foo"))

    assert outcome.results == []
    assert outcome.pages_searched == 0


def test_page_subset_is_searched_in_order(two_page_document):
    outcome = run(PageSearchOrchestrator().search(
        two_page_document, "the", page_numbers=[2, 9, 2]
    ))

    assert [r.page_number for r in outcome.results] == [2]
    assert two_page_document.page_requests == [2]


def test_repeated_searches_are_identical(two_page_document):
    first = run(search_pdf(two_page_document, "o"))
    second = run(search_pdf(two_page_document, "o"))

    assert first == second
    assert len({r.id for r in first}) == len(first)


def test_config_controls_context_and_tolerance():
    document = FakeDocument([[item("tail", 60, 94), item("head", 0, 100)]])
    orchestrator = PageSearchOrchestrator(
        config=SearchConfig(line_tolerance=10, context_length=2)
    )

    results = run(orchestrator.search(document, "head")).results

    assert results[0].context == "head t..."


def test_overflowing_geometry_only_drops_its_page():
    document = FakeDocument([
        [item("foo", 1.7e308, 100, width=1.7e308)],
        line_items("foo bar"),
    ])

    outcome = run(PageSearchOrchestrator().search(document, "foo"))

    assert [r.page_number for r in outcome.results] == [2]
    assert [e.page_number for e in outcome.page_errors] == [1]
    assert outcome.page_errors[0].error_type == "ReconstructionError"
    assert outcome.status == "partial"


class ExplodingLocator(MatchLocator):
    """Fails while resolving matches on any page whose text contains "boom"."""

    def find_page_matches(self, query, page_text):
        if "boom" in page_text.full_text:
            raise ValueError("cannot resolve match geometry")
        return super().find_page_matches(query, page_text)


def test_match_stage_failure_counts_as_page_error():
    document = FakeDocument([
        line_items("foo one"),
        line_items("foo boom"),
        line_items("foo three"),
    ])
    orchestrator = PageSearchOrchestrator(locator=ExplodingLocator())

    outcome = run(orchestrator.search(document, "foo"))

    assert [r.page_number for r in outcome.results] == [1, 3]
    assert [r.id for r in outcome.results] == ["search-1-0", "search-3-0"]
    assert outcome.page_errors[0].page_number == 2
    assert outcome.page_errors[0].error_type == "ReconstructionError"
    assert "cannot resolve match geometry" in outcome.page_errors[0].message
