"""
logging.py — Logging setup for the scraper and the normalization consumer.

Every line goes to stdout as: timestamp | level | logger | message

Components take an optional `logger` argument; when omitted they fall back to
`get_logger(__name__)` of their own module.
"""

import logging
import sys
from typing import Any, Dict, Iterable

LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
)

# Chatty at INFO; only their warnings are of interest here
QUIET_LOGGERS = ("urllib3", "sqlalchemy.engine")

# -----------------------------------------------------------------------------
# Root Logger Initialization
# -----------------------------------------------------------------------------

def configure_logging(level: str = "INFO") -> None:
    """
    Configure root logging. Called once, by the CLI entry point.

    Parameters:
        level (str): "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stdout,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug("Logging initialized with level %s", level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_failures(logger: logging.Logger, failures: Iterable[Dict[str, Any]], limit: int = 20) -> int:
    """
    Log the structured failures of a run summary, at most `limit` of them.

    Returns:
        The total number of failures.
    """
    total = 0
    for failure in failures:
        total += 1
        if total <= limit:
            where = failure.get("report_file") or failure.get("filename") or failure.get("url") or "-"
            logger.warning("%s at %s: %s", failure.get("kind"), where, failure.get("reason"))
    if total > limit:
        logger.warning("... and %s more failures", total - limit)
    return total
