"""
Tests for the SQLAlchemy repositories against a throwaway SQLite database.
"""

from __future__ import annotations

from edgar_ingest.models.company import Company
from edgar_ingest.models.financial_report import FinancialReportRecord
from edgar_ingest.models.report_file import ReportFile
from edgar_ingest.services.ingestion.repositories import (
    CompanyRepository,
    FinancialReportRepository,
    RawReportRepository,
    ReportFileRepository,
)
from edgar_ingest.services.ingestion.xbrl.canonical_maps import CanonicalField
from edgar_ingest.services.ingestion.xbrl.reports import FinancialReport, RawFinancialReport


def make_report_file(cik, year, quarter, form_type="10-Q", parsed=False):
    return ReportFile(
        cik=cik,
        year=year,
        quarter=quarter,
        form_type=form_type,
        filepath=f"/store/CIK_{cik}/Y{year}Q{quarter}",
        parsed=parsed,
    )


def test_company_upsert_updates_name(session_factory):
    repository = CompanyRepository(session_factory)

    repository.insert_update_company(Company(cik=12345, name="Acme Corp"))
    repository.insert_update_company(Company(cik=12345, name="Acme Corporation"))

    with session_factory() as session:
        assert session.get(Company, 12345).name == "Acme Corporation"
        assert session.query(Company).count() == 1


def test_report_file_upsert_by_composite_key(session_factory):
    repository = ReportFileRepository(session_factory)

    repository.insert_update_report_file(make_report_file(1, 2020, 1, "10-K"))
    repository.insert_update_report_file(make_report_file(1, 2020, 1, "10-K/A"))
    repository.insert_update_report_file(make_report_file(1, 2020, 1, "10-K", parsed=True))

    with session_factory() as session:
        assert session.query(ReportFile).count() == 2
        assert session.get(ReportFile, (1, 2020, 1, "10-K")).parsed is True
        assert session.get(ReportFile, (1, 2020, 1, "10-K/A")).parsed is False


def test_next_unparsed_files_are_oldest_first_and_limited(session_factory):
    repository = ReportFileRepository(session_factory)
    for report_file in (
        make_report_file(2, 2020, 2),
        make_report_file(1, 2020, 2),
        make_report_file(3, 2019, 4),
        make_report_file(1, 2020, 1, parsed=True),
        make_report_file(1, 2021, 1),
    ):
        repository.insert_update_report_file(report_file)

    page = repository.get_next_unparsed_files(3)

    assert [(f.cik, f.year, f.quarter) for f in page] == [(3, 2019, 4), (1, 2020, 2), (2, 2020, 2)]
    # Detached rows stay readable
    assert page[0].filepath == "/store/CIK_3/Y2019Q4"


def test_next_unparsed_files_empty_when_all_parsed(session_factory):
    repository = ReportFileRepository(session_factory)
    repository.insert_update_report_file(make_report_file(1, 2020, 1, parsed=True))

    assert repository.get_next_unparsed_files(20) == []


def test_raw_report_round_trip(session_factory):
    repository = RawReportRepository(session_factory)
    raw = RawFinancialReport(
        cik=12345,
        year=2020,
        quarter=2,
        raw_fields={"NetCashProvidedByUsedInOperatingActivities": 250000, "Assets": 5000000},
    )

    repository.save_raw_report(raw)

    loaded = repository.get_raw_report(12345, 2020, 2)
    assert loaded == raw
    assert repository.get_raw_report(12345, 2020, 1) is None


def test_raw_report_save_replaces_previous(session_factory):
    repository = RawReportRepository(session_factory)
    repository.save_raw_report(RawFinancialReport(cik=1, year=2020, quarter=1, raw_fields={"Assets": 1}))
    repository.save_raw_report(RawFinancialReport(cik=1, year=2020, quarter=1, raw_fields={"Assets": 2}))

    assert repository.get_raw_report(1, 2020, 1).raw_fields == {"Assets": 2}


def test_financial_report_columns(session_factory):
    report = FinancialReport(cik=12345, year=2020, quarter=1)
    report.set_value(CanonicalField.REVENUE, 1000)
    report.set_value(CanonicalField.TOTAL_LIABILITIES, 350)
    report.set_value(CanonicalField.CAPITAL_EXPENDITURES, 15)

    FinancialReportRepository(session_factory).save_financial_report(report)

    with session_factory() as session:
        row = session.get(FinancialReportRecord, (12345, 2020, 1))
        assert row.revenue == 1000
        assert row.total_liabilities == 350
        assert row.capital_expenditures == 15
        assert row.net_income == 0
