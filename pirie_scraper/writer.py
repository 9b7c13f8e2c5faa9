"""
Output writers (SQLite, JSON and CSV).
"""

import json
import csv
import logging
import sqlite3
from pathlib import Path
from datetime import datetime, timezone
from typing import List, Dict, Any, Optional

from .models import DevelopmentApplication


COLUMNS = [
    'council_reference', 'address', 'description', 'info_url', 'comment_url',
    'date_scraped', 'date_received', 'on_notice_from', 'on_notice_to'
]

CREATE_TABLE_SQL = (
    "create table if not exists [data] ([council_reference] text primary key, "
    "[address] text, [description] text, [info_url] text, [comment_url] text, "
    "[date_scraped] text, [date_received] text, [on_notice_from] text, [on_notice_to] text)"
)

INSERT_SQL = "insert or ignore into [data] values (?, ?, ?, ?, ?, ?, ?, ?, ?)"


def initialize_database(database_path: str = "data.sqlite") -> sqlite3.Connection:
    """
    Open the database, creating the data table if needed.

    Args:
        database_path: Path to the SQLite file

    Returns:
        Open connection
    """
    path = Path(database_path)
    if path.parent != Path("."):
        path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(path))
    conn.execute(CREATE_TABLE_SQL)
    conn.commit()
    return conn


def insert_application(
    conn: sqlite3.Connection,
    application: DevelopmentApplication,
    logger: Optional[logging.Logger] = None
) -> bool:
    """
    Insert an application unless its council reference is already stored.

    Args:
        conn: Open database connection
        application: Application to store
        logger: Logger instance

    Returns:
        True if a row was inserted
    """
    logger = logger or logging.getLogger(__name__)

    cursor = conn.execute(INSERT_SQL, application.to_row())
    conn.commit()

    if cursor.rowcount > 0:
        logger.info(f"    Inserted: application \"{application.council_reference}\" with address "
                    f"\"{application.address}\" and reason \"{application.description}\" into the database.")
        return True

    logger.info(f"    Skipped: application \"{application.council_reference}\" with address "
                f"\"{application.address}\" and reason \"{application.description}\" "
                f"because it was already present in the database.")
    return False


def write_sqlite(
    applications: List[DevelopmentApplication],
    database_path: str = "data.sqlite",
    logger: Optional[logging.Logger] = None
) -> int:
    """
    Store applications in the SQLite database.

    Returns:
        Number of newly inserted rows
    """
    conn = initialize_database(database_path)
    try:
        return sum(1 for application in applications
                   if insert_application(conn, application, logger))
    finally:
        conn.close()


def calculate_stats(applications: List[DevelopmentApplication]) -> Dict[str, Any]:
    """
    Calculate summary statistics for exported applications.

    Args:
        applications: List of DevelopmentApplication objects

    Returns:
        Statistics dictionary
    """
    total = len(applications)
    with_dates = sum(1 for a in applications if a.has_received_date)
    documents = {a.info_url for a in applications}

    return {
        "totalApplications": total,
        "withReceivedDate": with_dates,
        "receivedDatePercentage": f"{(with_dates / total * 100):.1f}" if total > 0 else "0.0",
        "documents": len(documents),
    }


def _output_path(output_dir: str, prefix: str, extension: str) -> Path:
    out_dir = Path(output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S-%f")[:-3] + "Z"
    return out_dir / f"{prefix}-{timestamp}.{extension}"


def write_json(
    applications: List[DevelopmentApplication],
    output_dir: str = "output",
    prefix: str = "applications"
) -> str:
    """
    Write applications to JSON file.

    Args:
        applications: List of DevelopmentApplication objects
        output_dir: Output directory
        prefix: Filename prefix

    Returns:
        Path to output file
    """
    output_path = _output_path(output_dir, prefix, "json")

    output = {
        "metadata": {
            "scrapedAt": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "stats": calculate_stats(applications)
        },
        "applications": [a.to_dict() for a in applications]
    }

    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(output, f, indent=2, ensure_ascii=False)

    return str(output_path)


def write_csv(
    applications: List[DevelopmentApplication],
    output_dir: str = "output",
    prefix: str = "applications"
) -> str:
    """
    Write applications to CSV file.

    Args:
        applications: List of DevelopmentApplication objects
        output_dir: Output directory
        prefix: Filename prefix

    Returns:
        Path to output file
    """
    output_path = _output_path(output_dir, prefix, "csv")

    with open(output_path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.DictWriter(f, fieldnames=COLUMNS)
        writer.writeheader()

        for application in applications:
            row = application.to_dict()
            writer.writerow({key: value if value is not None else '' for key, value in row.items()})

    return str(output_path)
