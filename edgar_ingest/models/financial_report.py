"""
financial_report.py — ORM Models for Raw and Canonical Financial Reports

Purpose:
- `FinancialReportRawRecord`: every raw XBRL fact value extracted from one
  filing, keyed by (cik, year, quarter). Values are stored exactly as
  reported, so cumulative cash-flow facts stay fiscal-year-to-date and later
  quarters can difference against them.
- `FinancialReportRecord`: the nine canonical screening metrics of one valid
  report.

This table pair is what the screening side reads; nothing else writes it.
"""

from sqlalchemy import JSON, BigInteger, Column

from edgar_ingest.core.database import Base


class FinancialReportRawRecord(Base):
    __tablename__ = "financial_report_raw"

    cik = Column(BigInteger, primary_key=True, autoincrement=False)
    year = Column(BigInteger, primary_key=True, autoincrement=False)
    quarter = Column(BigInteger, primary_key=True, autoincrement=False)

    # raw taxonomy tag name -> integer value
    raw_fields = Column(JSON, nullable=False, default=dict)

    def __repr__(self):
        return f"<FinancialReportRaw {self.cik} Y{self.year}Q{self.quarter} | {len(self.raw_fields or {})} fields>"


class FinancialReportRecord(Base):
    __tablename__ = "financial_report"

    cik = Column(BigInteger, primary_key=True, autoincrement=False)
    year = Column(BigInteger, primary_key=True, autoincrement=False)
    quarter = Column(BigInteger, primary_key=True, autoincrement=False)

    # Income statement
    revenue = Column(BigInteger, nullable=False)
    operating_expense = Column(BigInteger, nullable=False)
    net_income = Column(BigInteger, nullable=False)

    # Balance sheet
    current_assets = Column(BigInteger, nullable=False)
    total_assets = Column(BigInteger, nullable=False)
    current_liabilities = Column(BigInteger, nullable=False)
    total_liabilities = Column(BigInteger, nullable=False)

    # Cash flow (per-quarter, already period corrected)
    operating_cash = Column(BigInteger, nullable=False)
    capital_expenditures = Column(BigInteger, nullable=False)

    def __repr__(self):
        return f"<FinancialReport {self.cik} Y{self.year}Q{self.quarter} revenue={self.revenue}>"
