"""
Row reconstruction from positioned PDF text.

The application register PDFs are laid out as a loose grid: text is placed
at absolute coordinates rather than in table cells. Rows are rebuilt by
clustering fragments with similar y coordinates.
"""

import logging
from collections import defaultdict
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

import pdfplumber

from .models import DocumentDecodeError, PositionedText, Row


# Decimal places kept from pdfplumber coordinates so that equal columns
# compare equal.
COORDINATE_PRECISION = 1


def smallest_y_distance(fragments: Sequence[PositionedText]) -> float:
    """
    Find the smallest y distance between two fragments sharing an x coordinate.

    Args:
        fragments: Fragments of one page

    Returns:
        Minimum distance, or 0 when no two fragments share an x coordinate
    """
    by_x: Dict[float, List[PositionedText]] = defaultdict(list)
    for fragment in fragments:
        by_x[fragment.x].append(fragment)

    smallest: Optional[float] = None
    for column in by_x.values():
        for i, first in enumerate(column):
            for second in column[i + 1:]:
                distance = abs(second.y - first.y)
                if smallest is None or distance < smallest:
                    smallest = distance

    return smallest if smallest is not None else 0


def group_rows(fragments: Sequence[PositionedText]) -> List[Row]:
    """
    Cluster one page's fragments into rows.

    A fragment joins the most recently created row whose y lies within the
    page tolerance; the first match is accepted without looking for a closer
    row further back.

    Args:
        fragments: Fragments of one page, in any order

    Returns:
        Rows sorted by y, each with cells sorted by x
    """
    tolerance = smallest_y_distance(fragments)
    rows: List[Row] = []

    for fragment in fragments:
        cells = [PositionedText(text=run, x=fragment.x, y=fragment.y)
                 for run in fragment.texts()]

        for row in reversed(rows):
            if row.y - tolerance < fragment.y < row.y + tolerance:
                row.cells.extend(cells)
                break
        else:
            rows.append(Row(y=fragment.y, cells=cells))

    # sorted() is stable, so runs at one x keep their generation order
    for row in rows:
        row.cells = sorted(row.cells, key=lambda cell: cell.x)

    return sorted(rows, key=lambda row: row.y)


def convert_pages_to_rows(pages: Iterable[Sequence[PositionedText]]) -> List[List[str]]:
    """
    Flatten the rows of every page into one row sequence.

    Args:
        pages: Fragments for each page, in page order

    Returns:
        Rows of cell text in page order, then vertical order
    """
    rows: List[List[str]] = []
    for fragments in pages:
        rows.extend(row.texts() for row in group_rows(fragments))
    return rows


def fragments_from_page(page) -> List[PositionedText]:
    """Convert the words of a pdfplumber page into fragments."""
    words = page.extract_words(
        keep_blank_chars=True,
        use_text_flow=True
    )

    return [
        PositionedText(
            text=word['text'],
            x=round(word['x0'], COORDINATE_PRECISION),
            y=round(word['top'], COORDINATE_PRECISION)
        )
        for word in words
    ]


def extract_pages_from_pdf(pdf_path: str) -> List[List[PositionedText]]:
    """
    Extract positioned text fragments for every page of a PDF.

    Args:
        pdf_path: Path to PDF file

    Returns:
        Fragments for each page, in page order

    Raises:
        FileNotFoundError: If the PDF does not exist
        DocumentDecodeError: If pdfplumber cannot read the document
    """
    if not Path(pdf_path).exists():
        raise FileNotFoundError(f"PDF not found: {pdf_path}")

    try:
        with pdfplumber.open(pdf_path) as pdf:
            return [fragments_from_page(page) for page in pdf.pages]
    except Exception as e:
        raise DocumentDecodeError(str(pdf_path), str(e)) from e


def convert_pdf_to_rows(pdf_path: str,
                        logger: Optional[logging.Logger] = None) -> List[List[str]]:
    """
    Decode a PDF and rebuild its row sequence.

    Args:
        pdf_path: Path to PDF file
        logger: Logger instance

    Returns:
        Document row sequence
    """
    logger = logger or logging.getLogger(__name__)

    pages = extract_pages_from_pdf(pdf_path)
    rows = convert_pages_to_rows(pages)

    logger.debug(f"Reconstructed {len(rows)} rows from {len(pages)} pages of {pdf_path}")
    return rows
