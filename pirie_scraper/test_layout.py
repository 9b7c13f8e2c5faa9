"""
Tests for row reconstruction.
"""

from itertools import permutations

import pytest

from .layout import (
    smallest_y_distance,
    group_rows,
    convert_pages_to_rows,
    fragments_from_page,
    extract_pages_from_pdf,
)
from .models import DocumentDecodeError, PositionedText


def texts(rows):
    return [row.texts() for row in rows]


def test_tolerance_is_smallest_same_x_distance():
    fragments = [
        PositionedText("A", x=10, y=100),
        PositionedText("B", x=10, y=120),
        PositionedText("C", x=50, y=110),  # half the distance, different column
    ]

    assert smallest_y_distance(fragments) == 20


def test_tolerance_uses_minimum_over_all_columns():
    fragments = [
        PositionedText("A", x=10, y=100),
        PositionedText("B", x=10, y=140),
        PositionedText("C", x=10, y=190),
        PositionedText("D", x=60, y=100),
        PositionedText("E", x=60, y=115),
    ]

    assert smallest_y_distance(fragments) == 15


def test_single_fragment_gives_zero_tolerance_and_one_row():
    fragments = [PositionedText("ONLY", x=5, y=7)]

    assert smallest_y_distance(fragments) == 0
    rows = group_rows(fragments)
    assert texts(rows) == [["ONLY"]]


def test_rows_sorted_by_y_and_cells_by_x():
    fragments = [
        PositionedText("42", x=100, y=120),
        PositionedText("123/2018", x=100, y=100),
        PositionedText("PROPERTY HOUSE NO.", x=10, y=120),
        PositionedText("3/08/2018", x=200, y=100),
        PositionedText("APPLICATION NO", x=10, y=100),
    ]

    rows = group_rows(fragments)

    assert [row.y for row in rows] == [100, 120]
    assert texts(rows) == [
        ["APPLICATION NO", "123/2018", "3/08/2018"],
        ["PROPERTY HOUSE NO.", "42"],
    ]


def test_clustering_does_not_depend_on_input_order():
    fragments = [
        PositionedText("APPLICATION NO", x=10, y=100),
        PositionedText("123/2018", x=100, y=100),
        PositionedText("3/08/2018", x=200, y=100),
        PositionedText("PROPERTY HOUSE NO.", x=10, y=120),
        PositionedText("42", x=100, y=120),
    ]
    expected = texts(group_rows(fragments))

    for ordering in permutations(fragments):
        assert texts(group_rows(list(ordering))) == expected


def test_first_matching_row_is_accepted():
    fragments = [
        PositionedText("A", x=10, y=100),
        PositionedText("B", x=10, y=120),
        PositionedText("C", x=50, y=105),  # closer to A, but B's row is newer
    ]

    rows = group_rows(fragments)

    assert texts(rows) == [["A"], ["B", "C"]]


def test_zero_tolerance_keeps_every_fragment_apart():
    fragments = [
        PositionedText("A", x=10, y=100),
        PositionedText("B", x=20, y=100),
    ]

    rows = group_rows(fragments)

    assert len(rows) == 2


def test_multi_run_fragment_contributes_each_run():
    fragments = [
        PositionedText("NEWSHED", x=50, y=100, runs=("NEW", "SHED")),
        PositionedText("FIRST", x=10, y=100),
        PositionedText("BELOW", x=10, y=110),
    ]

    rows = group_rows(fragments)

    assert texts(rows) == [["FIRST", "NEW", "SHED"], ["BELOW"]]


def test_pages_are_concatenated_in_page_order():
    first_page = [
        PositionedText("PAGE ONE", x=10, y=500),
    ]
    second_page = [
        PositionedText("PAGE TWO LOWER", x=10, y=50),
        PositionedText("PAGE TWO UPPER", x=10, y=20),
    ]

    rows = convert_pages_to_rows([first_page, second_page])

    assert rows == [["PAGE ONE"], ["PAGE TWO UPPER"], ["PAGE TWO LOWER"]]


def test_empty_document_gives_no_rows():
    assert convert_pages_to_rows([]) == []
    assert convert_pages_to_rows([[]]) == []


class FakePage:
    """Stands in for a pdfplumber page."""

    def __init__(self, words):
        self.words = words
        self.kwargs = None

    def extract_words(self, **kwargs):
        self.kwargs = kwargs
        return self.words


def test_fragments_from_page_rounds_coordinates():
    page = FakePage([
        {"text": "APPLICATION NO", "x0": 10.04, "x1": 80.0, "top": 99.96, "bottom": 108.0},
        {"text": "123/2018", "x0": 120.31, "x1": 160.0, "top": 100.02, "bottom": 108.0},
    ])

    fragments = fragments_from_page(page)

    assert fragments == [
        PositionedText("APPLICATION NO", x=10.0, y=100.0),
        PositionedText("123/2018", x=120.3, y=100.0),
    ]
    assert page.kwargs["keep_blank_chars"] is True


def test_missing_pdf_raises_file_not_found(tmp_path):
    with pytest.raises(FileNotFoundError):
        extract_pages_from_pdf(str(tmp_path / "missing.pdf"))


def test_unreadable_pdf_raises_decode_error(tmp_path):
    broken = tmp_path / "broken.pdf"
    broken.write_bytes(b"this is not a pdf document")

    with pytest.raises(DocumentDecodeError) as excinfo:
        extract_pages_from_pdf(str(broken))

    assert excinfo.value.pdf_path == str(broken)
