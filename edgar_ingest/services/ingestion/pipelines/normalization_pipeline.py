"""
Pipeline draining the report-file work queue into canonical financial reports.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from edgar_ingest.core.config import Settings, settings
from edgar_ingest.core.logging import get_logger
from edgar_ingest.models.report_file import ReportFile
from edgar_ingest.services.ingestion.errors import DataFailure, FormatFailure
from edgar_ingest.services.ingestion.repositories import (
    FinancialReportRepository,
    RawReportRepository,
    ReportFileRepository,
)
from edgar_ingest.services.ingestion.xbrl.canonical_maps import BASIC_RAW_FIELD_NAMES, RawFieldNameList
from edgar_ingest.services.ingestion.xbrl.instance_parser import parse_instance_document
from edgar_ingest.services.ingestion.xbrl.normalizer import FinancialReportNormalizer
from edgar_ingest.services.ingestion.xbrl.reports import RawFinancialReport


module_logger = get_logger(__name__)

# (path, cik, year, quarter, field names) -> raw report
InstanceParser = Callable[..., RawFinancialReport]


class NormalizationPipeline:
    """
    Pull unparsed report files page by page until the queue is empty.

    Each report file is parsed, its raw report stored, and the normalized
    report stored when valid. The report file is marked parsed either way, so
    an invalid filing is never picked up again.
    """

    def __init__(
        self,
        report_file_repository: ReportFileRepository,
        raw_report_repository: RawReportRepository,
        financial_report_repository: FinancialReportRepository,
        parser: InstanceParser = parse_instance_document,
        field_names: RawFieldNameList = BASIC_RAW_FIELD_NAMES,
        config: Optional[Settings] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        config = config or settings
        self._report_files = report_file_repository
        self._raw_reports = raw_report_repository
        self._financial_reports = financial_report_repository
        self._parser = parser
        self._field_names = field_names
        self._normalizer = FinancialReportNormalizer(raw_reports=raw_report_repository, field_names=field_names)
        self._batch_limit = config.REPORT_BATCH_LIMIT
        self._form_families = tuple(config.NORMALIZE_FORM_TYPES)
        self._logger = logger or module_logger

    def run(self, batch_limit: Optional[int] = None) -> Dict[str, Any]:
        limit = batch_limit or self._batch_limit
        totals: Dict[str, Any] = {"batches": 0, "valid": 0, "invalid": 0, "skipped": 0, "errors": []}

        while True:
            unparsed_files = self._report_files.get_next_unparsed_files(limit)
            if not unparsed_files:
                break

            batch = self.process_batch(unparsed_files)
            totals["batches"] += 1
            for key in ("valid", "invalid", "skipped"):
                totals[key] += batch[key]
            totals["errors"].extend(batch["errors"])

            self._logger.info("Batch had %s valid and %s invalid", batch["valid"], batch["invalid"])
            self._logger.info("Total is %s valid and %s invalid", totals["valid"], totals["invalid"])

        return totals

    def process_batch(self, report_files: Sequence[ReportFile]) -> Dict[str, Any]:
        batch: Dict[str, Any] = {"valid": 0, "invalid": 0, "skipped": 0, "errors": []}

        for report_file in report_files:
            if not self.is_normalized_form(report_file.form_type):
                batch["skipped"] += 1
            else:
                try:
                    self.process_report_file(report_file)
                    batch["valid"] += 1
                except (FormatFailure, DataFailure) as exc:
                    failure = exc.as_dict()
                    failure["report_file"] = self._describe(report_file)
                    batch["errors"].append(failure)
                    batch["invalid"] += 1
                    self._logger.warning("Invalid financial report %s with error: %s", failure["report_file"], exc)

            report_file.parsed = True
            self._report_files.insert_update_report_file(report_file)

        return batch

    def is_normalized_form(self, form_type: str) -> bool:
        """Amended, transition and legacy variants share their family's prefix."""
        return any(family in form_type for family in self._form_families)

    def process_report_file(self, report_file: ReportFile) -> None:
        """
        Parse, store raw facts, normalize, validate and store one report.

        Raises:
            FormatFailure when the instance document cannot be parsed.
            DataFailure when the normalized report is missing fields.
        """
        if not report_file.filepath:
            raise FormatFailure("Report file has no stored document")

        raw_report = self._parser(
            report_file.filepath,
            report_file.cik,
            report_file.year,
            report_file.quarter,
            field_names=self._field_names,
        )
        # Stored uncorrected; the next quarter differences against these values.
        self._raw_reports.save_raw_report(raw_report)

        report = self._normalizer.normalize(raw_report)
        report.validate()
        self._financial_reports.save_financial_report(report)

    @staticmethod
    def _describe(report_file: ReportFile) -> str:
        return f"CIK {report_file.cik} Y{report_file.year}Q{report_file.quarter} {report_file.form_type}"


def missing_field_names(errors: List[Dict[str, Any]]) -> Dict[str, int]:
    """Count how often each canonical field was missing across a run's errors."""
    counts: Dict[str, int] = {}
    for error in errors:
        for name in error.get("missing_fields", []):
            counts[name] = counts.get(name, 0) + 1
    return counts
