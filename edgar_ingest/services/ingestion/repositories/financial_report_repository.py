"""
Persistence of raw and canonical financial reports.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import sessionmaker

from edgar_ingest.core.database import session_scope
from edgar_ingest.core.logging import get_logger
from edgar_ingest.models.financial_report import FinancialReportRawRecord, FinancialReportRecord
from edgar_ingest.services.ingestion.xbrl.canonical_maps import CanonicalField
from edgar_ingest.services.ingestion.xbrl.reports import FinancialReport, RawFinancialReport


logger = get_logger(__name__)


class RawReportRepository:
    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def get_raw_report(self, cik: int, year: int, quarter: int) -> Optional[RawFinancialReport]:
        with session_scope(self._session_factory) as session:
            row = session.get(FinancialReportRawRecord, (cik, year, quarter))
            if row is None:
                return None
            return RawFinancialReport(
                cik=row.cik,
                year=row.year,
                quarter=row.quarter,
                raw_fields={name: int(value) for name, value in (row.raw_fields or {}).items()},
            )

    def save_raw_report(self, raw_report: RawFinancialReport) -> None:
        with session_scope(self._session_factory) as session:
            session.merge(
                FinancialReportRawRecord(
                    cik=raw_report.cik,
                    year=raw_report.year,
                    quarter=raw_report.quarter,
                    raw_fields=dict(raw_report.raw_fields),
                )
            )


class FinancialReportRepository:
    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def save_financial_report(self, report: FinancialReport) -> None:
        with session_scope(self._session_factory) as session:
            session.merge(
                FinancialReportRecord(
                    cik=report.cik,
                    year=report.year,
                    quarter=report.quarter,
                    revenue=report.value(CanonicalField.REVENUE),
                    operating_expense=report.value(CanonicalField.OPERATING_EXPENSE),
                    net_income=report.value(CanonicalField.NET_INCOME),
                    current_assets=report.value(CanonicalField.CURRENT_ASSETS),
                    total_assets=report.value(CanonicalField.TOTAL_ASSETS),
                    current_liabilities=report.value(CanonicalField.CURRENT_LIABILITIES),
                    total_liabilities=report.value(CanonicalField.TOTAL_LIABILITIES),
                    operating_cash=report.value(CanonicalField.OPERATING_CASH),
                    capital_expenditures=report.value(CanonicalField.CAPITAL_EXPENDITURES),
                )
            )
        logger.debug("Saved financial report %s Y%sQ%s", report.cik, report.year, report.quarter)
