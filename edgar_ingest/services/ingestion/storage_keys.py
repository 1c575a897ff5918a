"""
Deterministic storage addressing for extracted instance documents.

One (cik, year, quarter, form type) always maps to the same (bucket, key), so
the scraper can ask the store whether a filing was already extracted before
downloading anything.
"""

from __future__ import annotations

from typing import Tuple


def get_bucket(cik: str) -> str:
    """Partition per company, using the CIK exactly as the index printed it."""
    return "CIK_" + cik


def get_key(form_type: str, year: int, quarter: int) -> str:
    """
    Period + form identifier. Slashes (amendments such as "10-K/A") become
    underscores so the key is a single path component.
    """
    key = f"Y{year}Q{quarter}FT{form_type}"
    return key.replace("/", "_")


def derive_storage_key(cik: str, form_type: str, year: int, quarter: int) -> Tuple[str, str]:
    return get_bucket(cik), get_key(form_type, year, quarter)
