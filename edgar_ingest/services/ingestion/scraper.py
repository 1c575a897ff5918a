"""
scraper.py — Quarterly EDGAR full-index scraper.

For one (year, quarter):

1. Fetch `edgar/full-index/{year}/QTR{quarter}/xbrl.idx` (failure aborts the run).
2. Stream it line by line through `FullIndexParser`; an over-long line is
   cut off while streaming, never held whole.
3. Per filing: upsert the company, derive its (bucket, key), skip it when the
   store already holds that key, otherwise download the filing's XBRL zip,
   store the instance document under the key and enqueue a `ReportFile`.

A failure in step 3 only costs that filing: it is logged, added to the run
summary and the next record is processed.
"""

from __future__ import annotations

import logging
import time
import zipfile
import zlib
from typing import Any, Dict, Iterable, Optional, Union

import requests

from edgar_ingest.core.config import Settings, settings
from edgar_ingest.core.logging import get_logger
from edgar_ingest.models.company import Company
from edgar_ingest.models.report_file import ReportFile
from edgar_ingest.services.ingestion.clients import EdgarClient
from edgar_ingest.services.ingestion.clients.edgar_client import full_index_url
from edgar_ingest.services.ingestion.errors import FormatFailure, IngestionError, NetworkFailure, StorageFailure
from edgar_ingest.services.ingestion.full_index import FullIndexParser, IndexRecord, iter_bounded_lines
from edgar_ingest.services.ingestion.repositories import CompanyRepository, ReportFileRepository
from edgar_ingest.services.ingestion.storage_keys import derive_storage_key
from edgar_ingest.services.ingestion.xbrl_archive import XBRL_ZIP_SUFFIX, build_xbrl_zip_url, find_instance_entry
from edgar_ingest.storage.temp_store import CHUNK_SIZE, TempStore, iter_chunks


module_logger = get_logger(__name__)


class EdgarFullIndexScraper:
    """
    Scrape one quarter of the EDGAR XBRL full index into the file store.
    """

    def __init__(
        self,
        year: int,
        quarter: int,
        store: TempStore,
        company_repository: CompanyRepository,
        report_file_repository: ReportFileRepository,
        edgar_client: Optional[EdgarClient] = None,
        config: Optional[Settings] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if year < 1:
            raise ValueError(f"year must be positive, got {year}")
        if quarter not in (1, 2, 3, 4):
            raise ValueError(f"quarter must be 1-4, got {quarter}")

        config = config or settings
        self.year = year
        self.quarter = quarter
        self._store = store
        self._companies = company_repository
        self._report_files = report_file_repository
        self._client = edgar_client or EdgarClient()
        self._max_line_length = config.INDEX_MAX_LINE_LENGTH
        self._logger = logger or module_logger

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #
    def scrape_edgar_quarterly_index(self) -> Dict[str, Any]:
        """
        Returns:
            Run summary (see `parse_index_file`).

        Raises:
            NetworkFailure when the index itself cannot be fetched or read.
        """
        index_url = full_index_url(self.year, self.quarter)
        self._logger.info("Starting to scrape the full index for year %s and quarter %s", self.year, self.quarter)

        try:
            response = self._client.open_full_index(self.year, self.quarter)
        except NetworkFailure as exc:
            self._logger.error("Failed to retrieve index for url %s: %s", index_url, exc)
            raise

        with response:
            try:
                lines = iter_bounded_lines(response.iter_content(chunk_size=CHUNK_SIZE), self._max_line_length)
                summary = self.parse_index_file(lines)
            except requests.RequestException as exc:
                self._logger.error("Lost connection while reading index %s: %s", index_url, exc)
                raise NetworkFailure(f"Failed reading index {index_url}: {exc}", url=index_url) from exc

        self._logger.info(
            "Finished index Y%sQ%s: %s records, %s stored, %s already present, %s errors",
            self.year, self.quarter, summary["records"], summary["stored"], summary["skipped"], len(summary["errors"]),
        )
        return summary

    def parse_index_file(self, lines: Iterable[Union[bytes, str]]) -> Dict[str, Any]:
        """
        Process every line of a full-index file.

        The caller owns (and closes) whatever `lines` is read from.
        """
        summary: Dict[str, Any] = {
            "year": self.year,
            "quarter": self.quarter,
            "records": 0,
            "companies": 0,
            "skipped": 0,
            "stored": 0,
            "errors": [],
        }
        parser = FullIndexParser(max_line_length=self._max_line_length)

        for line in lines:
            try:
                record = parser.feed(line)
            except FormatFailure as exc:
                self._record_failure(summary, exc)
                continue
            if record is None:
                continue

            summary["records"] += 1
            try:
                self._process_record(record, summary)
            except IngestionError as exc:
                self._record_failure(summary, exc, filename=record.filename)

        return summary

    def get_xbrl(self, edgar_filename: str, bucket: str, file_key: str, report_file: ReportFile) -> str:
        """
        Download the XBRL zip of a filing and extract its instance document.

        The full index links `.txt` submissions; the zip of XBRL files sits
        next to it under a dashless accession directory.

        Returns:
            Stored path of the instance document.
        """
        url, base_name = build_xbrl_zip_url(edgar_filename)
        self._logger.info("Getting xbrl zip from %s", url)

        output_file_name = f"{int(time.time())}{base_name}{XBRL_ZIP_SUFFIX}"
        with self._client.open_stream(url) as response:
            try:
                zip_file_path = self._store.store_file(
                    bucket, output_file_name, response.iter_content(chunk_size=CHUNK_SIZE)
                )
            except requests.RequestException as exc:
                raise NetworkFailure(f"Failed reading {url}: {exc}", url=url, filename=edgar_filename) from exc

        if zip_file_path is None:
            raise StorageFailure(f"Could not store {output_file_name} in {bucket}", filename=edgar_filename)

        return self._get_xbrl_from_zip(zip_file_path, bucket, file_key, report_file)

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    def _process_record(self, record: IndexRecord, summary: Dict[str, Any]) -> None:
        cik = record.cik_as_int()

        self._companies.insert_update_company(Company(cik=cik, name=record.company_name))
        summary["companies"] += 1
        self._logger.debug(
            "CIK: %s Company Name: %s Form type: %s Date Filed: %s FileName: %s",
            record.cik, record.company_name, record.form_type, record.date_filed, record.filename,
        )

        bucket, file_key = derive_storage_key(record.cik, record.form_type, self.year, self.quarter)
        file_path = self._store.get_file_path(bucket, file_key)
        if file_path:
            self._logger.info("SKIP %s because it already exists in: %s", record.filename, file_path)
            summary["skipped"] += 1
            return

        report_file = ReportFile(
            cik=cik,
            year=self.year,
            quarter=self.quarter,
            form_type=record.form_type,
            parsed=False,
        )
        self.get_xbrl(record.filename, bucket, file_key, report_file)
        summary["stored"] += 1

    def _get_xbrl_from_zip(self, zip_file_path: str, bucket: str, file_key: str, report_file: ReportFile) -> str:
        try:
            archive = zipfile.ZipFile(zip_file_path)
        except (zipfile.BadZipFile, OSError) as exc:
            raise FormatFailure(f"Failed to open zip: {zip_file_path} with error: {exc}", filename=zip_file_path) from exc

        with archive:
            entry = find_instance_entry(archive)
            if entry is None:
                raise FormatFailure(f"Could not find a match for an xbrl in {zip_file_path}", filename=zip_file_path)

            self._logger.info("Found zipped file: %s", entry.filename)
            try:
                with archive.open(entry) as xbrl_file:
                    report_path = self._store.store_file(bucket, file_key, iter_chunks(xbrl_file))
            except (zipfile.BadZipFile, zlib.error, OSError) as exc:
                raise FormatFailure(
                    f"Failed to read {entry.filename} from {zip_file_path}: {exc}", filename=zip_file_path
                ) from exc

        if report_path is None:
            raise StorageFailure(f"Could not store {bucket}/{file_key}", filename=zip_file_path)

        report_file.filepath = report_path
        self._report_files.insert_update_report_file(report_file)
        return report_path

    def _record_failure(self, summary: Dict[str, Any], exc: IngestionError, filename: Optional[str] = None) -> None:
        failure = exc.as_dict()
        if filename and "filename" not in failure:
            failure["filename"] = filename
        summary["errors"].append(failure)
        self._logger.error("%s: %s", exc.kind, exc)
