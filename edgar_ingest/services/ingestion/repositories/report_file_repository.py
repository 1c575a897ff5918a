"""
Persistence of report files, the normalization work queue.
"""

from __future__ import annotations

from typing import List

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from edgar_ingest.core.database import session_scope
from edgar_ingest.models.report_file import ReportFile


class ReportFileRepository:
    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def insert_update_report_file(self, report_file: ReportFile) -> None:
        """Upsert by (cik, year, quarter, form_type)."""
        with session_scope(self._session_factory) as session:
            session.merge(report_file)

    def get_next_unparsed_files(self, limit: int) -> List[ReportFile]:
        """
        Next page of unparsed report files.

        Oldest periods come first, so a quarter's raw report is normally saved
        before the following quarter needs it for period correction.
        """
        stmt = (
            select(ReportFile)
            .where(ReportFile.parsed.is_(False))
            .order_by(ReportFile.year, ReportFile.quarter, ReportFile.cik, ReportFile.form_type)
            .limit(limit)
        )
        with session_scope(self._session_factory) as session:
            return list(session.scalars(stmt).all())
