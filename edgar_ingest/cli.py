"""
cli.py — Command-line entry point.

Usage:
    edgar-ingest scrape --year 2020 --quarter 1
    edgar-ingest normalize [--batch-limit 20]
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from edgar_ingest.core.config import Settings, settings
from edgar_ingest.core.database import create_db_engine, create_session_factory, init_db
from edgar_ingest.core.logging import configure_logging, get_logger, log_failures
from edgar_ingest.services.ingestion.clients import EdgarClient, EdgarClientSettings
from edgar_ingest.services.ingestion.errors import NetworkFailure
from edgar_ingest.services.ingestion.pipelines import NormalizationPipeline
from edgar_ingest.services.ingestion.pipelines.normalization_pipeline import missing_field_names
from edgar_ingest.services.ingestion.repositories import (
    CompanyRepository,
    FinancialReportRepository,
    RawReportRepository,
    ReportFileRepository,
)
from edgar_ingest.services.ingestion.scraper import EdgarFullIndexScraper
from edgar_ingest.storage import TempStore


logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="edgar-ingest",
        description="Scrape EDGAR XBRL filings and normalize them into financial reports.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    scrape = subparsers.add_parser("scrape", help="Scrape one quarter of the EDGAR XBRL full index.")
    scrape.add_argument("--year", type=int, required=True, help="The year to scrape")
    scrape.add_argument("--quarter", type=int, required=True, choices=(1, 2, 3, 4), help="The quarter to scrape")

    normalize = subparsers.add_parser("normalize", help="Normalize every unparsed report file.")
    normalize.add_argument(
        "--batch-limit",
        type=int,
        default=None,
        help="Report files pulled per batch (default: REPORT_BATCH_LIMIT)",
    )
    return parser


def run_scrape(year: int, quarter: int, config: Settings, session_factory) -> int:
    scraper = EdgarFullIndexScraper(
        year=year,
        quarter=quarter,
        store=TempStore(config.TMP_DIR),
        company_repository=CompanyRepository(session_factory),
        report_file_repository=ReportFileRepository(session_factory),
        edgar_client=EdgarClient(config=EdgarClientSettings.from_app_settings(config)),
        config=config,
    )
    try:
        summary = scraper.scrape_edgar_quarterly_index()
    except NetworkFailure:
        logger.error("Aborting scrape of Y%sQ%s", year, quarter)
        return 1

    logger.info(
        "Scrape complete: %s records, %s companies, %s stored, %s skipped, %s errors",
        summary["records"], summary["companies"], summary["stored"], summary["skipped"], len(summary["errors"]),
    )
    log_failures(logger, summary["errors"])
    return 0


def run_normalize(batch_limit: Optional[int], config: Settings, session_factory) -> int:
    pipeline = NormalizationPipeline(
        report_file_repository=ReportFileRepository(session_factory),
        raw_report_repository=RawReportRepository(session_factory),
        financial_report_repository=FinancialReportRepository(session_factory),
        config=config,
    )
    totals = pipeline.run(batch_limit=batch_limit)

    logger.info(
        "Normalization complete: %s valid, %s invalid, %s skipped in %s batches",
        totals["valid"], totals["invalid"], totals["skipped"], totals["batches"],
    )
    log_failures(logger, totals["errors"])
    missing = missing_field_names(totals["errors"])
    if missing:
        logger.info("Missing canonical fields: %s", missing)
    return 0


def main(argv: Optional[Sequence[str]] = None, config: Optional[Settings] = None) -> int:
    args = build_parser().parse_args(argv)
    config = config or settings

    configure_logging(config.LOG_LEVEL)
    logger.info("Starting program")

    engine = create_db_engine(config.DATABASE_URL)
    init_db(engine)
    session_factory = create_session_factory(engine)

    try:
        if args.command == "scrape":
            return run_scrape(args.year, args.quarter, config, session_factory)
        return run_normalize(args.batch_limit, config, session_factory)
    finally:
        engine.dispose()
        logger.info("Ending program")


if __name__ == "__main__":
    sys.exit(main())
