"""
xbrl package — Turning stored XBRL instance documents into canonical reports.

Submodules:
    - canonical_maps: canonical fields, fallback mapping rules, raw tag lists.
    - reports: raw and canonical report types.
    - instance_parser: lxml extraction of raw facts from an instance document.
    - normalizer: period correction and fallback mapping.
"""

from .normalizer import FinancialReportNormalizer, normalize_raw_report  # noqa: F401
