"""
Normalization entry points that convert a filing's raw us-gaap facts into a
canonical `FinancialReport`.

Two steps:

1. Period correction. Cash-flow facts in a 10-Q are fiscal-year-to-date
   sums. For quarters 2-4 the previous quarter's stored raw value is
   subtracted to recover the quarter's own figure; when that value is not
   available the fact is dropped rather than guessed. Quarter 1 values are
   already per-quarter.
2. Fallback mapping. Each canonical field takes the value of its first
   candidate group whose tags are all present.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Mapping, Optional, Sequence

from edgar_ingest.core.logging import get_logger
from edgar_ingest.services.ingestion.xbrl.canonical_maps import (
    BASIC_RAW_FIELD_NAMES,
    CandidateGroup,
    FieldMappingRules,
    RawFieldNameList,
    get_field_mapping_rules,
)
from edgar_ingest.services.ingestion.xbrl.reports import FinancialReport, RawFinancialReport

if TYPE_CHECKING:
    from edgar_ingest.services.ingestion.repositories import RawReportRepository


logger = get_logger(__name__)


def resolve_candidate_groups(facts: Mapping[str, int], groups: Sequence[CandidateGroup]) -> Optional[int]:
    """Sum of the first group whose every tag is in `facts`, or None."""
    for group in groups:
        if all(tag in facts for tag in group):
            return sum(facts[tag] for tag in group)
    return None


class FinancialReportNormalizer:
    """
    Convert raw reports into canonical reports.

    `raw_reports` only needs a `get_raw_report(cik, year, quarter)` method;
    without it every quarter 2-4 variable-period fact is treated as absent.
    """

    def __init__(
        self,
        raw_reports: Optional["RawReportRepository"] = None,
        rules: Optional[FieldMappingRules] = None,
        field_names: RawFieldNameList = BASIC_RAW_FIELD_NAMES,
    ) -> None:
        self._raw_reports = raw_reports
        self._rules = rules or get_field_mapping_rules()
        self._field_names = field_names

    def normalize(self, raw_report: RawFinancialReport) -> FinancialReport:
        facts = self.correct_variable_periods(raw_report)

        report = FinancialReport(cik=raw_report.cik, year=raw_report.year, quarter=raw_report.quarter)
        for canonical_field, groups in self._rules.items():
            value = resolve_candidate_groups(facts, groups)
            if value is not None:
                report.set_value(canonical_field, value)
        return report

    # ------------------------------------------------------------------ #
    def correct_variable_periods(self, raw_report: RawFinancialReport) -> Dict[str, int]:
        """
        Return a corrected copy of the raw facts; `raw_report` is not modified.
        """
        facts = dict(raw_report.raw_fields)
        if raw_report.quarter == 1:
            return facts

        variable_names = [name for name in self._field_names.variable_period_field_names if name in facts]
        if not variable_names:
            return facts

        prior = self._load_previous(raw_report)
        prior_fields = prior.raw_fields if prior is not None else {}

        for name in variable_names:
            if name in prior_fields:
                facts[name] = facts[name] - prior_fields[name]
            else:
                logger.debug(
                    "No prior-quarter %s for CIK %s Y%sQ%s; treating as absent",
                    name, raw_report.cik, raw_report.year, raw_report.quarter,
                )
                del facts[name]
        return facts

    def _load_previous(self, raw_report: RawFinancialReport) -> Optional[RawFinancialReport]:
        if self._raw_reports is None:
            return None
        prev_year, prev_quarter = raw_report.get_previous_quarter()
        return self._raw_reports.get_raw_report(raw_report.cik, prev_year, prev_quarter)


# Convenience facade ------------------------------------------------------- #
def normalize_raw_report(
    raw_report: RawFinancialReport,
    raw_reports: Optional["RawReportRepository"] = None,
) -> FinancialReport:
    return FinancialReportNormalizer(raw_reports=raw_reports).normalize(raw_report)
