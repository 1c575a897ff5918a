"""
clients package — External data access layers for ingestion.
"""

from .edgar_client import EdgarClient, EdgarClientSettings  # noqa: F401
