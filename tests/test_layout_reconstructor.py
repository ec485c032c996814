"""Unit tests for reading-order reconstruction."""

import pytest

from exceptions import ReconstructionError
from layout_reconstructor import LayoutReconstructor
from models import PositionedFragment, PositionMapEntry


def frag(text, x, y, width=30.0, height=10.0):
    return PositionedFragment(text=text, x=x, y=y, width=width, height=height)


@pytest.fixture
def reconstructor():
    return LayoutReconstructor()


def test_same_line_fragments_are_ordered_left_to_right(reconstructor):
    page = reconstructor.reconstruct([frag("World", 50, 100), frag("Hello", 0, 100)])

    assert page.full_text == "Hello World"


def test_fragments_within_tolerance_share_a_line(reconstructor):
    page = reconstructor.reconstruct([frag("right", 80, 97), frag("left", 0, 100)])

    assert page.full_text == "left right"


def test_higher_line_comes_first_regardless_of_x(reconstructor):
    page = reconstructor.reconstruct([frag("lower", 0, 50), frag("upper", 200, 100)])

    assert page.full_text == "upper lower"


def test_multi_line_page_reads_top_to_bottom():
    fragments = [
        frag("dog", 60, 20),
        frag("brown", 60, 80),
        frag("lazy", 0, 20),
        frag("The", 0, 80),
        frag("jumps", 0, 50),
    ]

    page = LayoutReconstructor().reconstruct(fragments)

    assert page.full_text == "The brown jumps lazy dog"


def test_position_map_covers_text_and_separator():
    page = LayoutReconstructor().reconstruct([
        frag("World", 50, 100, width=30, height=12),
        frag("Hello", 0, 100, width=28, height=10),
    ])

    assert page.position_map == (
        PositionMapEntry(start=0, end=5, x=0, y=100, width=28, height=10),
        PositionMapEntry(start=6, end=11, x=50, y=100, width=30, height=12),
    )


def test_every_character_falls_in_an_entry():
    page = LayoutReconstructor().reconstruct([
        frag("alpha", 0, 300), frag("beta", 40, 300), frag("gamma", 0, 200),
    ])

    for offset in range(len(page.full_text)):
        assert any(entry.contains(offset) for entry in page.position_map)


def test_offsets_are_monotonic():
    page = LayoutReconstructor().reconstruct([
        frag("c", 0, 10), frag("a", 0, 30), frag("b", 0, 20),
    ])

    starts = [entry.start for entry in page.position_map]
    assert starts == sorted(starts)
    assert all(entry.start <= entry.end for entry in page.position_map)


def test_empty_fragment_list_gives_empty_page():
    page = LayoutReconstructor().reconstruct([])

    assert page.full_text == ""
    assert page.position_map == ()
    assert page.is_empty


def test_zero_size_fragments_are_kept():
    page = LayoutReconstructor().reconstruct([
        frag("b", 20, 100), frag("", 10, 100, width=0, height=0), frag("a", 0, 100),
    ])

    assert page.full_text == "a  b"
    assert len(page.position_map) == 3
    assert page.position_map[1].width == 0


def test_trailing_whitespace_is_trimmed():
    page = LayoutReconstructor().reconstruct([frag("end  ", 0, 100)])

    assert page.full_text == "end"


def test_reconstruction_is_deterministic():
    fragments = [frag("b", 10, 100), frag("a", 0, 102), frag("c", 0, 40)]
    reconstructor = LayoutReconstructor()

    assert reconstructor.reconstruct(fragments) == reconstructor.reconstruct(fragments)
    assert reconstructor.reconstruct(fragments) == reconstructor.reconstruct(list(reversed(fragments)))


def test_custom_line_tolerance():
    fragments = [frag("second", 0, 92), frag("first", 50, 100)]

    assert LayoutReconstructor(line_tolerance=5).reconstruct(fragments).full_text == "first second"
    assert LayoutReconstructor(line_tolerance=10).reconstruct(fragments).full_text == "second first"


def test_negative_tolerance_rejected():
    with pytest.raises(ValueError):
        LayoutReconstructor(line_tolerance=-1)


def test_malformed_fragment_raises_reconstruction_error():
    bad = PositionedFragment(text="oops", x="left", y=0, width=1, height=1)

    with pytest.raises(ReconstructionError):
        LayoutReconstructor().reconstruct([frag("fine", 0, 0), bad])


def test_overflowing_extent_raises_reconstruction_error():
    huge = frag("far", 1.7e308, 0, width=1.7e308)

    with pytest.raises(ReconstructionError):
        LayoutReconstructor().reconstruct([huge])


def test_staircase_baselines_follow_emission_order():
    stairs = [frag("a", 20, 100), frag("b", 10, 96), frag("c", 0, 92)]
    reconstructor = LayoutReconstructor()

    assert reconstructor.reconstruct(stairs) == reconstructor.reconstruct(list(stairs))
