from .company_repository import CompanyRepository  # noqa: F401
from .financial_report_repository import FinancialReportRepository, RawReportRepository  # noqa: F401
from .report_file_repository import ReportFileRepository  # noqa: F401
