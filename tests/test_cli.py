"""
Tests for the command-line entry point.
"""

from __future__ import annotations

import logging

import pytest

from edgar_ingest import cli
from edgar_ingest.core.logging import log_failures
from edgar_ingest.services.ingestion.errors import NetworkFailure


class _FailingScraper:
    def __init__(self, *args, **kwargs):
        self.kwargs = kwargs

    def scrape_edgar_quarterly_index(self):
        raise NetworkFailure("Received status code 404 for url: http://example.invalid")


class _RecordingScraper:
    instances = []

    def __init__(self, *args, **kwargs):
        self.kwargs = kwargs
        _RecordingScraper.instances.append(self)

    def scrape_edgar_quarterly_index(self):
        return {"year": 2020, "quarter": 2, "records": 0, "companies": 0, "skipped": 0, "stored": 0, "errors": []}


def test_normalize_on_empty_database(test_settings):
    assert cli.main(["normalize", "--batch-limit", "5"], config=test_settings) == 0


def test_scrape_index_failure_exits_non_zero(monkeypatch, test_settings):
    monkeypatch.setattr(cli, "EdgarFullIndexScraper", _FailingScraper)

    assert cli.main(["scrape", "--year", "2020", "--quarter", "1"], config=test_settings) == 1


def test_scrape_passes_period_through(monkeypatch, test_settings):
    _RecordingScraper.instances = []
    monkeypatch.setattr(cli, "EdgarFullIndexScraper", _RecordingScraper)

    assert cli.main(["scrape", "--year", "2020", "--quarter", "2"], config=test_settings) == 0

    (scraper,) = _RecordingScraper.instances
    assert scraper.kwargs["year"] == 2020
    assert scraper.kwargs["quarter"] == 2
    assert scraper.kwargs["config"] is test_settings


def test_quarter_out_of_range_is_rejected(test_settings):
    with pytest.raises(SystemExit):
        cli.main(["scrape", "--year", "2020", "--quarter", "5"], config=test_settings)


def test_command_is_required(test_settings):
    with pytest.raises(SystemExit):
        cli.main([], config=test_settings)


def test_log_failures_caps_output(caplog):
    failures = [{"kind": "FormatFailure", "reason": f"bad row {i}", "filename": f"f{i}.txt"} for i in range(5)]
    logger = logging.getLogger("edgar_ingest.tests")

    with caplog.at_level(logging.WARNING, logger="edgar_ingest.tests"):
        total = log_failures(logger, failures, limit=2)

    assert total == 5
    messages = [record.getMessage() for record in caplog.records]
    assert messages == [
        "FormatFailure at f0.txt: bad row 0",
        "FormatFailure at f1.txt: bad row 1",
        "... and 3 more failures",
    ]
