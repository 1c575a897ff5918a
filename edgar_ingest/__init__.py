"""
edgar_ingest — quarterly EDGAR XBRL acquisition and financial report normalization.
"""

__version__ = "0.1.0"
