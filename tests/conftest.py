"""
Shared fixtures: a throwaway SQLite database and test settings.
"""

from __future__ import annotations

import pytest

from edgar_ingest.core.config import Settings
from edgar_ingest.core.database import create_db_engine, create_session_factory, init_db


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        TMP_DIR=str(tmp_path / "store"),
        EDGAR_USER_AGENT="edgar-ingest-tests test@example.com",
        EDGAR_REQUEST_SLEEP_SECONDS=0,
        EDGAR_MAX_RETRIES=1,
    )


@pytest.fixture
def engine(test_settings):
    engine = create_db_engine(test_settings.DATABASE_URL)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)
