"""
Persistence of filer companies.
"""

from __future__ import annotations

from sqlalchemy.orm import sessionmaker

from edgar_ingest.core.database import session_scope
from edgar_ingest.core.logging import get_logger
from edgar_ingest.models.company import Company


logger = get_logger(__name__)


class CompanyRepository:
    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def insert_update_company(self, company: Company) -> None:
        """Insert the company, or update its name when the CIK is known."""
        with session_scope(self._session_factory) as session:
            session.merge(company)
        logger.debug("Upserted company %s (%s)", company.cik, company.name)
