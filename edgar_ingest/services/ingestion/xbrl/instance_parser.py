"""
instance_parser.py — Raw fact extraction from an XBRL instance document.

Reads the stored instance document of one filing with lxml and returns the
value of every requested us-gaap tag for the filing's own period:

- Only facts in unsegmented contexts count (no dimensional breakdowns).
- The period end is `dei:DocumentPeriodEndDate` when a context ends on it,
  otherwise the latest end date among unsegmented contexts.
- Several contexts can end on the period end (three months and year to
  date in a 10-Q). Variable-period tags take the longest duration, so they
  stay fiscal-year-to-date as the normalizer expects; every other tag takes
  the shortest (the quarter itself, or the instant).

Nil and non-numeric facts are ignored. Decimal values are truncated to int.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from lxml import etree

from edgar_ingest.core.logging import get_logger
from edgar_ingest.services.ingestion.errors import FormatFailure
from edgar_ingest.services.ingestion.xbrl.canonical_maps import BASIC_RAW_FIELD_NAMES, RawFieldNameList
from edgar_ingest.services.ingestion.xbrl.reports import RawFinancialReport


logger = get_logger(__name__)

XSI_NIL = "{http://www.w3.org/2001/XMLSchema-instance}nil"


@dataclass(frozen=True)
class XbrlContext:
    context_id: str
    start: Optional[date]
    end: date
    segmented: bool

    @property
    def duration_days(self) -> int:
        if self.start is None:
            return 0
        return (self.end - self.start).days


def _localname(element: etree._Element) -> str:
    return etree.QName(element).localname


def _namespace(element: etree._Element) -> str:
    return etree.QName(element).namespace or ""


def _parse_date(text: Optional[str]) -> Optional[date]:
    if not text:
        return None
    try:
        return date.fromisoformat(text.strip()[:10])
    except ValueError:
        return None


def _parse_int(text: Optional[str]) -> Optional[int]:
    if text is None or not text.strip():
        return None
    try:
        value = Decimal(text.strip())
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return int(value)


def _parse_context(element: etree._Element) -> Optional[XbrlContext]:
    context_id = element.get("id")
    start = end = None
    segmented = False

    for child in element.iter():
        if not isinstance(child.tag, str):
            continue
        name = _localname(child)
        if name in {"segment", "scenario"}:
            segmented = True
        elif name == "instant":
            end = _parse_date(child.text)
        elif name == "startDate":
            start = _parse_date(child.text)
        elif name == "endDate":
            end = _parse_date(child.text)

    if not context_id or end is None:
        return None
    return XbrlContext(context_id=context_id, start=start, end=end, segmented=segmented)


def _load_root(path: Union[str, Path]) -> etree._Element:
    parser = etree.XMLParser(huge_tree=True, resolve_entities=False, no_network=True)
    try:
        return etree.parse(str(path), parser).getroot()
    except (OSError, etree.XMLSyntaxError) as exc:
        raise FormatFailure(f"Could not read XBRL instance {path}: {exc}", filename=str(path)) from exc


def _resolve_period_end(contexts: Dict[str, XbrlContext], declared: Optional[date]) -> Optional[date]:
    ends = {ctx.end for ctx in contexts.values() if not ctx.segmented}
    if not ends:
        return None
    if declared in ends:
        return declared
    return max(ends)


def parse_instance_document(
    path: Union[str, Path],
    cik: int,
    year: int,
    quarter: int,
    field_names: RawFieldNameList = BASIC_RAW_FIELD_NAMES,
) -> RawFinancialReport:
    """
    Raises:
        FormatFailure when the document cannot be read or has no usable
        contexts.
    """
    root = _load_root(path)

    contexts: Dict[str, XbrlContext] = {}
    declared_end: Optional[date] = None
    facts: List[etree._Element] = []
    wanted = set(field_names.int64_field_names)

    for element in root:
        if not isinstance(element.tag, str):
            continue
        name = _localname(element)
        namespace = _namespace(element)
        if name == "context":
            ctx = _parse_context(element)
            if ctx is not None:
                contexts[ctx.context_id] = ctx
        elif name == "DocumentPeriodEndDate" and "dei" in namespace:
            declared_end = _parse_date(element.text)
        elif name in wanted and "us-gaap" in namespace:
            facts.append(element)

    period_end = _resolve_period_end(contexts, declared_end)
    if period_end is None:
        raise FormatFailure(f"No unsegmented contexts in XBRL instance {path}", filename=str(path))

    # tag -> (duration in days, value) of the best fact seen so far
    selected: Dict[str, Tuple[int, int]] = {}
    for element in facts:
        if element.get(XSI_NIL) == "true":
            continue
        ctx = contexts.get(element.get("contextRef", ""))
        if ctx is None or ctx.segmented or ctx.end != period_end:
            continue
        value = _parse_int(element.text)
        if value is None:
            continue

        name = _localname(element)
        prefer_longest = field_names.is_variable_period(name)
        current = selected.get(name)
        if (
            current is None
            or (prefer_longest and ctx.duration_days > current[0])
            or (not prefer_longest and ctx.duration_days < current[0])
        ):
            selected[name] = (ctx.duration_days, value)

    raw_fields = {name: value for name, (_, value) in selected.items()}
    logger.debug("Parsed %d raw fields from %s (period end %s)", len(raw_fields), path, period_end)
    return RawFinancialReport(cik=cik, year=year, quarter=quarter, raw_fields=raw_fields)
