"""
Data models for the development application scraper.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Tuple


class ScraperError(Exception):
    """Base class for errors raised by the scraper."""


class ReferenceDataError(ScraperError):
    """Raised when a reference data file cannot be read."""


class DocumentDecodeError(ScraperError):
    """Raised when a PDF cannot be decoded into positioned text."""

    def __init__(self, pdf_path: str, reason: str):
        super().__init__(f"Failed to decode {pdf_path}: {reason}")
        self.pdf_path = pdf_path
        self.reason = reason


@dataclass(frozen=True)
class PositionedText:
    """One fragment of rendered text at an absolute page coordinate."""
    text: str
    x: float
    y: float
    runs: Tuple[str, ...] = ()  # Encoded runs of a multi-run fragment

    def texts(self) -> Tuple[str, ...]:
        """Runs contributed by this fragment, in generation order."""
        return self.runs if self.runs else (self.text,)


@dataclass
class Row:
    """A reconstructed horizontal line of text."""
    y: float
    cells: List[PositionedText] = field(default_factory=list)

    def texts(self) -> List[str]:
        return [cell.text for cell in self.cells]


@dataclass
class CandidateRecord:
    """Application fields accumulated while scanning rows."""
    application_number: str = ""
    house_number: str = ""
    street_name: str = ""
    suburb_name: str = ""
    hundred_name: str = ""
    reason: str = ""
    received_date: str = ""
    information_url: str = ""
    comment_url: str = ""
    scrape_date: str = ""


@dataclass
class DevelopmentApplication:
    """Finalized record matching the database schema."""
    council_reference: str
    address: str
    description: str
    info_url: str
    comment_url: str
    date_scraped: str
    date_received: str = ""
    on_notice_from: Optional[str] = None
    on_notice_to: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "council_reference": self.council_reference,
            "address": self.address,
            "description": self.description,
            "info_url": self.info_url,
            "comment_url": self.comment_url,
            "date_scraped": self.date_scraped,
            "date_received": self.date_received,
            "on_notice_from": self.on_notice_from,
            "on_notice_to": self.on_notice_to,
        }

    def to_row(self) -> Tuple[Any, ...]:
        """Values in database column order."""
        return tuple(self.to_dict().values())

    @property
    def has_received_date(self) -> bool:
        return bool(self.date_received)
