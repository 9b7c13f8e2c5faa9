"""
Development application extraction from reconstructed rows.

The rows are scanned once. An "APPLICATION NO" row opens a new record, the
property rows that follow fill in its fields, and the rows between
"DEVELOPMENT DESCRIPTION" and "PRIVATE CERTIFIER NAME" form its reason.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional, Sequence

from .address import collapse_whitespace, format_address
from .models import CandidateRecord, DevelopmentApplication
from .reference import ReferenceData


COMMENT_URL = "mailto:council@pirie.sa.gov.au"
NO_DESCRIPTION = "No description provided"

# Day without a mandatory leading zero, e.g. "3/08/2018"
RECEIVED_DATE_PATTERN = re.compile(r'^(\d{1,2})/(\d{2})/(\d{4})$')


class RowKind(Enum):
    """What a row contributes to the current record."""
    APPLICATION_NUMBER = "application_number"
    HOUSE_NUMBER = "house_number"
    STREET = "street"
    SUBURB = "suburb"
    HUNDRED = "hundred"
    DESCRIPTION = "description"
    CERTIFIER = "certifier"
    REASON_TEXT = "reason_text"
    IGNORED = "ignored"


@dataclass
class ExtractorState:
    """Open record and reason collection flag of the row scan."""
    record: Optional[CandidateRecord] = None
    is_reason: bool = False
    records: List[CandidateRecord] = field(default_factory=list)


def normalize_artifacts(text: str) -> str:
    """Replace the soft hyphen/ligature artifacts of the source PDFs with spaces."""
    return text.replace("+ü", " ").replace("ü", " ")


def _is_upper(text: str) -> bool:
    return text == text.upper()


def parse_received_date(cells: Sequence[str]) -> str:
    """
    Find the first strict D/MM/YYYY date among cells.

    Returns:
        Date formatted as YYYY-MM-DD, or an empty string
    """
    for cell in cells:
        match = RECEIVED_DATE_PATTERN.match(cell.strip())
        if not match:
            continue
        day, month, year = (int(part) for part in match.groups())
        try:
            return date(year, month, day).isoformat()
        except ValueError:
            continue
    return ""


def classify_row(row: Sequence[str], state: ExtractorState) -> RowKind:
    """
    Decide what a row means given the current state.

    Checks run in a fixed order. A row whose check fails its preconditions
    falls through to the later checks.
    """
    key = row[0].strip().lower() if row else ""
    value = row[1] if len(row) >= 2 else None

    if key.startswith("application no"):
        return RowKind.APPLICATION_NUMBER

    if state.record is None:
        return RowKind.IGNORED

    if (key.startswith("property house no") and value is not None
            and value.strip() != "0"
            and value.strip().lower() != "building conditions"):
        return RowKind.HOUSE_NUMBER

    if (key.startswith("property street") and value is not None
            and value.strip() != "0"
            and _is_upper(value.replace("ü", " "))):
        return RowKind.STREET

    if (key.startswith("property suburb") and value is not None
            and value.strip() != "0"
            and value.strip().lower() != "lodgement fee - base amount"
            and _is_upper(value)):
        return RowKind.SUBURB

    if (key.startswith("hundred") and value is not None
            and value.strip() != "0"
            and not value.strip().startswith("$")
            and _is_upper(value)):
        return RowKind.HUNDRED

    if key.startswith("development description"):
        return RowKind.DESCRIPTION

    if state.is_reason and key.startswith("private certifier name"):
        return RowKind.CERTIFIER

    if state.is_reason and row and _is_upper(row[0]):
        return RowKind.REASON_TEXT

    return RowKind.IGNORED


def apply_row(state: ExtractorState, row: Sequence[str], kind: RowKind,
              information_url: str = "", scrape_date: str = "") -> None:
    """Apply the action for a classified row to the state."""
    if kind is RowKind.APPLICATION_NUMBER:
        record = CandidateRecord(
            application_number=row[1].strip() if len(row) >= 2 else "",
            received_date=parse_received_date(row[2:]),
            information_url=information_url,
            comment_url=COMMENT_URL,
            scrape_date=scrape_date
        )
        state.records.append(record)
        state.record = record
        state.is_reason = False
        return

    record = state.record
    if record is None or kind is RowKind.IGNORED:
        return

    if kind is RowKind.HOUSE_NUMBER:
        record.house_number = normalize_artifacts(row[1]).strip()
    elif kind is RowKind.STREET:
        record.street_name = normalize_artifacts(row[1]).strip()
    elif kind is RowKind.SUBURB:
        record.suburb_name = row[1].strip()
    elif kind is RowKind.HUNDRED:
        record.hundred_name = row[1].strip()
    elif kind is RowKind.DESCRIPTION:
        state.is_reason = True
    elif kind is RowKind.CERTIFIER:
        state.is_reason = False
        state.record = None
    elif kind is RowKind.REASON_TEXT:
        text = row[0].strip()
        if text:
            record.reason = f"{record.reason} {text}" if record.reason else text


def extract_candidate_records(
    rows: Sequence[Sequence[str]],
    information_url: str = "",
    scrape_date: Optional[str] = None
) -> List[CandidateRecord]:
    """
    Scan the document rows for application records.

    Args:
        rows: Document row sequence
        information_url: Source document reference stored on each record
        scrape_date: Date of the scrape (defaults to today)

    Returns:
        Every record opened during the scan, in document order
    """
    if scrape_date is None:
        scrape_date = datetime.now().strftime("%Y-%m-%d")

    state = ExtractorState()
    for row in rows:
        kind = classify_row(row, state)
        apply_row(state, row, kind, information_url, scrape_date)

    return state.records


def finalize_records(
    candidates: Sequence[CandidateRecord],
    reference: ReferenceData,
    logger: Optional[logging.Logger] = None
) -> List[DevelopmentApplication]:
    """
    Resolve addresses and drop records that cannot be stored.

    Args:
        candidates: Records from the row scan
        reference: Reference tables for address resolution
        logger: Logger instance

    Returns:
        Records with an application number and a valid address
    """
    logger = logger or logging.getLogger(__name__)
    applications = []

    for candidate in candidates:
        address = collapse_whitespace(format_address(
            candidate.house_number,
            candidate.street_name,
            candidate.suburb_name,
            candidate.hundred_name,
            reference
        ))
        reason = candidate.reason if candidate.reason.strip() else NO_DESCRIPTION

        if not candidate.application_number.strip():
            logger.debug("Dropped record without an application number")
            continue
        if not address:
            logger.debug(f"Dropped application \"{candidate.application_number}\": "
                         f"no valid address for street \"{candidate.street_name}\"")
            continue

        applications.append(DevelopmentApplication(
            council_reference=candidate.application_number,
            address=address,
            description=reason,
            info_url=candidate.information_url,
            comment_url=candidate.comment_url,
            date_scraped=candidate.scrape_date,
            date_received=candidate.received_date
        ))

    return applications


def extract_applications(
    rows: Sequence[Sequence[str]],
    reference: ReferenceData,
    information_url: str = "",
    scrape_date: Optional[str] = None,
    logger: Optional[logging.Logger] = None
) -> List[DevelopmentApplication]:
    """
    Extract finalized development applications from a document row sequence.

    Args:
        rows: Document row sequence
        reference: Reference tables for address resolution
        information_url: Source document reference
        scrape_date: Date of the scrape (defaults to today)
        logger: Logger instance

    Returns:
        List of DevelopmentApplication objects
    """
    candidates = extract_candidate_records(rows, information_url, scrape_date)
    return finalize_records(candidates, reference, logger)
