"""
Failure taxonomy shared by the scraper and the normalization consumer.

Every failure is raised at the narrowest scope (one index row, one archive,
one report) and caught by the loop that owns that unit of work; the loop logs
it and appends `as_dict()` to its run summary.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class IngestionError(RuntimeError):
    """Base exception for ingestion failures."""

    kind = "IngestionError"

    def __init__(self, message: str, *, filename: Optional[str] = None, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.filename = filename
        self.url = url

    def as_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"kind": self.kind, "reason": str(self)}
        if self.filename:
            payload["filename"] = self.filename
        if self.url:
            payload["url"] = self.url
        return payload


class NetworkFailure(IngestionError):
    """GET error or non-200 status for an index or package fetch."""

    kind = "NetworkFailure"


class FormatFailure(IngestionError):
    """Input did not have the expected shape (index row, filename, archive, document)."""

    kind = "FormatFailure"


class StorageFailure(IngestionError):
    """The file store could not write a downloaded or extracted file."""

    kind = "StorageFailure"


class DataFailure(IngestionError):
    """Well-formed input carrying unusable data (bad CIK, incomplete report)."""

    kind = "DataFailure"

    def __init__(self, message: str, *, missing_fields: Optional[List[str]] = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.missing_fields = list(missing_fields or [])

    def as_dict(self) -> Dict[str, Any]:
        payload = super().as_dict()
        if self.missing_fields:
            payload["missing_fields"] = list(self.missing_fields)
        return payload
