"""
report_file.py — ORM Model for Extracted XBRL Instance Documents

Purpose:
- Record where the instance document of one filing was stored.
- Act as the persisted work queue of the normalization consumer:
    * created with parsed=False when the document is first extracted,
    * flipped to parsed=True once normalization has been attempted,
      whether or not the resulting report was valid.

One row per (cik, year, quarter, form_type), matching the bucket/key the
document is stored under.
"""

from sqlalchemy import BigInteger, Boolean, Column, Index, String

from edgar_ingest.core.database import Base


class ReportFile(Base):
    __tablename__ = "report_file"

    cik = Column(BigInteger, primary_key=True, autoincrement=False)
    year = Column(BigInteger, primary_key=True, autoincrement=False)
    quarter = Column(BigInteger, primary_key=True, autoincrement=False)
    form_type = Column(String, primary_key=True)

    # Local path of the stored instance document
    filepath = Column(String, nullable=True)

    parsed = Column(Boolean, default=False, nullable=False)

    __table_args__ = (
        Index("idx_report_file_parsed", "parsed"),
    )

    def __repr__(self):
        return (
            f"<ReportFile {self.cik} Y{self.year}Q{self.quarter} {self.form_type} "
            f"| parsed={self.parsed}>"
        )
