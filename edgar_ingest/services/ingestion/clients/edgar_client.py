"""
edgar_client.py — HTTP client for SEC EDGAR archive downloads.

Responsibilities:
- Streamed GETs for quarterly full-index files and XBRL zip packages
- Polite rate limiting and bounded retry on throttling / connection errors
- Per-request timeout
- Translate every transport failure into `NetworkFailure`
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional

import requests
from tenacity import Retrying, before_sleep_log, retry_if_exception, stop_after_attempt, wait_exponential

from edgar_ingest.core.config import Settings, settings
from edgar_ingest.core.logging import get_logger
from edgar_ingest.services.ingestion.errors import NetworkFailure


logger = get_logger(__name__)


SEC_BASE_HEADERS = {
    "Accept-Encoding": "gzip, deflate",
    "Connection": "keep-alive",
}

SEC_EDGAR_BASE_URL = "http://www.sec.gov/Archives/"
FULL_INDEX_URL_TEMPLATE = SEC_EDGAR_BASE_URL + "edgar/full-index/{year}/QTR{quarter}/xbrl.idx"

RETRY_STATUS_CODES = {403, 429, 500, 502, 503, 504}


def full_index_url(year: int, quarter: int) -> str:
    return FULL_INDEX_URL_TEMPLATE.format(year=year, quarter=quarter)


def _is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, (requests.ConnectionError, requests.Timeout)):
        return True
    if isinstance(exc, requests.HTTPError):
        response = exc.response
        return response is not None and response.status_code in RETRY_STATUS_CODES
    return False


@dataclass(frozen=True)
class EdgarClientSettings:
    user_agent: str
    sleep_seconds: float
    timeout_seconds: int
    max_retries: int
    backoff_base: float

    @classmethod
    def from_app_settings(cls, app_settings: Optional[Settings] = None) -> "EdgarClientSettings":
        app_settings = app_settings or settings
        return cls(
            user_agent=app_settings.EDGAR_USER_AGENT,
            sleep_seconds=app_settings.EDGAR_REQUEST_SLEEP_SECONDS,
            timeout_seconds=app_settings.EDGAR_REQUEST_TIMEOUT_SECONDS,
            max_retries=app_settings.EDGAR_MAX_RETRIES,
            backoff_base=app_settings.EDGAR_BACKOFF_BASE,
        )


class EdgarClient:
    """
    Thin wrapper over `requests.Session` with polite EDGAR defaults.

    The client is sync/blocking: the scraper keeps exactly one request in
    flight. Responses are returned un-read (`stream=True`); callers own them
    and must close them, normally with a `with` block.
    """

    def __init__(self, session: Optional[requests.Session] = None, config: Optional[EdgarClientSettings] = None):
        self._session = session or requests.Session()
        self._config = config or EdgarClientSettings.from_app_settings()
        self._session.headers.update({**SEC_BASE_HEADERS, "User-Agent": self._config.user_agent})

    # --------------------------------------------------------------------- #
    # Public API
    # --------------------------------------------------------------------- #
    def open_full_index(self, year: int, quarter: int) -> requests.Response:
        """Open the XBRL full index of one quarter as a streamed response."""
        return self.open_stream(full_index_url(year, quarter))

    def open_stream(self, url: str) -> requests.Response:
        """
        GET `url` and return the streamed response.

        Raises:
            NetworkFailure on transport errors (after retries) or any status
            other than 200.
        """
        try:
            response = self._perform_request(url)
        except requests.RequestException as exc:
            raise NetworkFailure(f"Failed GET to {url}: {exc}", url=url) from exc

        if response.status_code != 200:
            response.close()
            raise NetworkFailure(f"Received status code {response.status_code} for url: {url}", url=url)

        self._polite_sleep()
        return response

    # ------------------------------------------------------------------ #
    # Request helpers
    # ------------------------------------------------------------------ #

    def _polite_sleep(self) -> None:
        delay = max(self._config.sleep_seconds, 0.0)
        if delay:
            time.sleep(delay)

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self._config.max_retries),
            wait=wait_exponential(multiplier=self._config.backoff_base, min=0.1, max=5),
            retry=retry_if_exception(_is_retryable),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

    def _perform_request(self, url: str) -> requests.Response:
        for attempt in self._retrying():
            with attempt:
                logger.debug("Requesting %s", url)
                response = self._session.get(url, timeout=self._config.timeout_seconds, stream=True)
                if response.status_code in RETRY_STATUS_CODES:
                    response.close()
                    msg = f"EDGAR request throttled or server error (status {response.status_code})"
                    logger.warning("%s, retrying %s", msg, url)
                    raise requests.HTTPError(msg, response=response)
        return response
