"""
models package — SQLAlchemy ORM tables.

Importing the package registers every table on `edgar_ingest.core.database.Base`.
"""

from .company import Company  # noqa: F401
from .financial_report import FinancialReportRawRecord, FinancialReportRecord  # noqa: F401
from .report_file import ReportFile  # noqa: F401
