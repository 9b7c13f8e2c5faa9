"""
Command-line interface for the development application scraper.
"""

import sys
import argparse
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .logging_setup import setup_logger, log_stats
from .layout import convert_pdf_to_rows
from .extract import extract_candidate_records, finalize_records
from .models import DevelopmentApplication, ScraperError
from .reference import ReferenceData, load_reference_data
from .writer import write_sqlite, write_json, write_csv


def print_banner(logger):
    """Print startup banner."""
    logger.info("═" * 40)
    logger.info("  PIRIE APPLICATION SCRAPER v1.0")
    logger.info("  Coordinate-Based Extraction")
    logger.info("═" * 40)
    logger.info("")


def process_document(
    pdf_path: str,
    reference: ReferenceData,
    info_url: Optional[str] = None,
    scrape_date: Optional[str] = None,
    logger: Optional[logging.Logger] = None
) -> List[DevelopmentApplication]:
    """
    Extract the development applications of a single PDF.

    Args:
        pdf_path: Path to PDF file
        reference: Reference tables for address resolution
        info_url: Source reference stored on each record (defaults to the file URI)
        scrape_date: Date of the scrape (defaults to today)
        logger: Logger instance

    Returns:
        Accepted applications
    """
    logger = logger or logging.getLogger(__name__)
    info_url = info_url or Path(pdf_path).resolve().as_uri()

    logger.info(f"Parsing document: {pdf_path}")
    rows = convert_pdf_to_rows(pdf_path, logger=logger)

    candidates = extract_candidate_records(rows, info_url, scrape_date)
    applications = finalize_records(candidates, reference, logger=logger)

    logger.info(f"Parsed document: {pdf_path} ({len(rows)} rows, "
                f"{len(candidates)} candidates, {len(applications)} accepted)")
    return applications


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description='Extract development applications from council PDF registers',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        'pdfs',
        nargs='+',
        help='PDF files to parse'
    )

    parser.add_argument(
        '--data-dir', '-d',
        default='.',
        help='Directory holding streetnames.txt, streetsuffixes.txt and suburbnames.txt (default: .)'
    )

    parser.add_argument(
        '--output', '-o',
        choices=['sqlite', 'json', 'csv'],
        default='sqlite',
        help='Output format (default: sqlite)'
    )

    parser.add_argument(
        '--database',
        default='data.sqlite',
        help='SQLite database path (default: data.sqlite)'
    )

    parser.add_argument(
        '--output-dir',
        default='output',
        help='JSON/CSV output directory (default: output)'
    )

    parser.add_argument(
        '--info-url',
        default=None,
        help='Information URL stored on each record (default: file URI of the PDF)'
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default='INFO',
        help='Logging level (default: INFO)'
    )

    args = parser.parse_args(argv)

    logger = setup_logger(level=args.log_level)

    print_banner(logger)

    try:
        reference = load_reference_data(args.data_dir, logger=logger)
    except ScraperError as e:
        logger.error(f"Could not load reference data: {e}")
        return 1

    scrape_date = datetime.now().strftime("%Y-%m-%d")
    applications: List[DevelopmentApplication] = []
    failed = 0

    try:
        for pdf_path in args.pdfs:
            try:
                applications.extend(process_document(
                    pdf_path, reference, args.info_url, scrape_date, logger
                ))
            except (ScraperError, FileNotFoundError) as e:
                failed += 1
                logger.error(f"Skipping document: {e}")

        if args.output == 'sqlite':
            inserted = write_sqlite(applications, args.database, logger)
            logger.info(f"Inserted {inserted} new applications into {args.database}")
        elif args.output == 'json':
            output_path = write_json(applications, args.output_dir)
            logger.info(f"JSON output saved: {output_path}")
        else:
            output_path = write_csv(applications, args.output_dir)
            logger.info(f"CSV output saved: {output_path}")

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130

    log_stats(logger, {
        "Documents": len(args.pdfs),
        "Failed documents": failed,
        "Applications": len(applications),
    }, title="Summary Statistics")

    return 1 if failed == len(args.pdfs) else 0


if __name__ == '__main__':
    sys.exit(main())
