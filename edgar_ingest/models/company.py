"""
company.py — ORM Model for Filer Companies

Purpose:
- Represent a filer seen in an EDGAR full index.
- Upserted on every sighting in an index; never deleted.

Important Design Rule:
- This table stores *metadata only*, not financial values.
- Financial values live in the financial_report tables.
"""

from sqlalchemy import BigInteger, Column, String

from edgar_ingest.core.database import Base


class Company(Base):
    __tablename__ = "company"

    # SEC Central Index Key, stable identity of the filer
    cik = Column(BigInteger, primary_key=True, autoincrement=False)

    name = Column(String, nullable=False)

    def __repr__(self):
        return f"<Company {self.cik} | {self.name}>"
