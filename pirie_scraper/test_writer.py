"""
Tests for the output writers.
"""

import csv
import json
import sqlite3

from .models import DevelopmentApplication
from .writer import (
    initialize_database,
    insert_application,
    write_csv,
    write_json,
    write_sqlite,
)


def make_application(reference="123/2018", description="NEW SHED"):
    return DevelopmentApplication(
        council_reference=reference,
        address="42 MAIN STREET, PORT PIRIE SA 5540",
        description=description,
        info_url="http://www.pirie.sa.gov.au/register.pdf",
        comment_url="mailto:council@pirie.sa.gov.au",
        date_scraped="2018-08-10",
        date_received="2018-08-03",
    )


def test_insert_is_ignored_for_existing_reference(tmp_path):
    conn = initialize_database(str(tmp_path / "data.sqlite"))
    try:
        assert insert_application(conn, make_application()) is True
        assert insert_application(conn, make_application(description="CHANGED")) is False

        rows = conn.execute("select * from [data]").fetchall()
    finally:
        conn.close()

    assert rows == [(
        "123/2018", "42 MAIN STREET, PORT PIRIE SA 5540", "NEW SHED",
        "http://www.pirie.sa.gov.au/register.pdf", "mailto:council@pirie.sa.gov.au",
        "2018-08-10", "2018-08-03", None, None
    )]


def test_write_sqlite_counts_new_rows(tmp_path):
    database = str(tmp_path / "nested" / "data.sqlite")
    applications = [make_application("1/2018"), make_application("2/2018")]

    assert write_sqlite(applications, database) == 2
    assert write_sqlite(applications, database) == 0

    with sqlite3.connect(database) as conn:
        assert conn.execute("select count(*) from [data]").fetchone() == (2,)


def test_write_json(tmp_path):
    output_path = write_json([make_application()], output_dir=str(tmp_path))

    with open(output_path, encoding="utf-8") as f:
        output = json.load(f)

    assert output["metadata"]["stats"]["totalApplications"] == 1
    assert output["applications"][0]["council_reference"] == "123/2018"
    assert output["applications"][0]["on_notice_from"] is None


def test_write_csv(tmp_path):
    output_path = write_csv([make_application()], output_dir=str(tmp_path))

    with open(output_path, newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))

    assert rows[0]["address"] == "42 MAIN STREET, PORT PIRIE SA 5540"
    assert rows[0]["on_notice_to"] == ""
