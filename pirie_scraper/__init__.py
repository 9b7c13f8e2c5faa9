"""
Development application scraper for council PDF registers.
Rebuilds table rows from positioned PDF text and resolves addresses.
"""

from .models import PositionedText, Row, CandidateRecord, DevelopmentApplication
from .reference import ReferenceData, load_reference_data
from .layout import group_rows, convert_pages_to_rows, convert_pdf_to_rows
from .extract import extract_candidate_records, extract_applications
from .address import format_address

__version__ = "1.0.0"

__all__ = [
    "PositionedText",
    "Row",
    "CandidateRecord",
    "DevelopmentApplication",
    "ReferenceData",
    "load_reference_data",
    "group_rows",
    "convert_pages_to_rows",
    "convert_pdf_to_rows",
    "extract_candidate_records",
    "extract_applications",
    "format_address",
]
