"""
Tests for report types and canonical validation.
"""

from __future__ import annotations

import pytest

from edgar_ingest.services.ingestion.errors import DataFailure
from edgar_ingest.services.ingestion.xbrl.canonical_maps import (
    BASIC_RAW_FIELD_NAMES,
    FIELD_MAPPING_RULES,
    VALIDATION_ORDER,
    CanonicalField,
)
from edgar_ingest.services.ingestion.xbrl.reports import FinancialReport, RawFinancialReport, get_previous_quarter


def complete_report() -> FinancialReport:
    report = FinancialReport(cik=12345, year=2020, quarter=1)
    for index, canonical_field in enumerate(CanonicalField, start=1):
        report.set_value(canonical_field, index * 100)
    return report


@pytest.mark.parametrize(
    "year, quarter, expected",
    [
        (2020, 1, (2019, 4)),
        (2020, 2, (2020, 1)),
        (2020, 3, (2020, 2)),
        (2020, 4, (2020, 3)),
    ],
)
def test_get_previous_quarter(year, quarter, expected):
    assert get_previous_quarter(year, quarter) == expected
    assert RawFinancialReport(cik=1, year=year, quarter=quarter).get_previous_quarter() == expected


def test_complete_report_is_valid():
    report = complete_report()

    assert report.is_valid()
    report.validate()


def test_missing_capital_expenditures_diagnostic():
    report = complete_report()
    del report.values[CanonicalField.CAPITAL_EXPENDITURES]

    assert not report.is_valid()
    with pytest.raises(DataFailure) as excinfo:
        report.validate()

    assert str(excinfo.value) == "CapitalExpenditures,"
    assert excinfo.value.missing_fields == ["CapitalExpenditures"]
    assert excinfo.value.as_dict()["missing_fields"] == ["CapitalExpenditures"]


def test_zero_counts_as_missing():
    report = complete_report()
    report.set_value(CanonicalField.REVENUE, 0)

    assert report.missing_fields() == [CanonicalField.REVENUE]


def test_diagnostic_follows_validation_order():
    report = FinancialReport(cik=1, year=2020, quarter=1)

    with pytest.raises(DataFailure) as excinfo:
        report.validate()

    assert str(excinfo.value) == (
        "Revenue,OperatingExpense,NetIncome,TotalAssets,TotalLiabilities,"
        "CurrentAssets,CurrentLiabilities,OperatingCash,CapitalExpenditures,"
    )


def test_mapping_rules_cover_every_canonical_field():
    assert set(FIELD_MAPPING_RULES) == set(CanonicalField)
    assert set(VALIDATION_ORDER) == set(CanonicalField)


def test_every_mapped_tag_is_extracted():
    mapped = {tag for groups in FIELD_MAPPING_RULES.values() for group in groups for tag in group}
    assert mapped <= set(BASIC_RAW_FIELD_NAMES.int64_field_names)
    assert BASIC_RAW_FIELD_NAMES.is_variable_period("NetCashProvidedByUsedInOperatingActivities")
    assert not BASIC_RAW_FIELD_NAMES.is_variable_period("Assets")
