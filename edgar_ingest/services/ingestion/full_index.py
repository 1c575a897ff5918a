"""
Parser for EDGAR quarterly full-index files (`xbrl.idx`).

File layout:

    Description:           XBRL Index of EDGAR Dissemination Feed
    ...
    CIK|Company Name|Form Type|Date Filed|Filename
    --------------------------------------------------------------------------------
    1000045|NICHOLAS FINANCIAL INC|10-Q|2020-02-14|edgar/data/1000045/0001564590-20-004703.txt

Everything up to and including the first line containing a run of dashes is
header; every later line is one pipe-delimited filing record.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Union

from edgar_ingest.services.ingestion.errors import DataFailure, FormatFailure


HEADER_END_MARKER = "-------"
FIELD_SEPARATOR = "|"
FIELD_COUNT = 5

# Plain decimal integer with an optional sign; no whitespace or underscores
CIK_PATTERN = re.compile(r"[+-]?[0-9]+")


class IndexParseState(enum.Enum):
    HEADER = "header"
    LIST = "list"


@dataclass(frozen=True)
class IndexRecord:
    """One filing listed in a quarterly index."""
    cik: str
    company_name: str
    form_type: str
    date_filed: str
    filename: str

    def cik_as_int(self) -> int:
        """
        Raises:
            DataFailure when the CIK is not a base-10 integer.
        """
        if CIK_PATTERN.fullmatch(self.cik) is None:
            raise DataFailure(f"Failed to parse CIK to int: {self.cik!r}", filename=self.filename)
        return int(self.cik)


class FullIndexParser:
    """
    Line-at-a-time state machine: HEADER until the dash marker, then LIST.

    `feed()` returns an `IndexRecord` for every record line, None for header
    and blank lines, and raises `FormatFailure` for a line that cannot be a
    record. A failure never changes the parser state, so the caller can log it
    and keep feeding lines.
    """

    def __init__(self, max_line_length: int = 4096) -> None:
        self.max_line_length = max_line_length
        self.state = IndexParseState.HEADER
        self.line_number = 0

    def feed(self, line: Union[bytes, str]) -> Optional[IndexRecord]:
        self.line_number += 1

        if isinstance(line, bytes):
            raw_length = len(line)
            text = line.decode("utf-8", errors="replace")
        else:
            raw_length = len(line.encode("utf-8"))
            text = line
        text = text.rstrip("\r\n")

        if raw_length > self.max_line_length:
            raise FormatFailure(
                f"Index line {self.line_number} is too long ({raw_length} > {self.max_line_length} bytes)"
            )

        if self.state is IndexParseState.HEADER:
            if HEADER_END_MARKER in text:
                self.state = IndexParseState.LIST
            return None

        if not text.strip():
            return None

        elements = text.split(FIELD_SEPARATOR)
        if len(elements) != FIELD_COUNT:
            raise FormatFailure(
                f"Index line {self.line_number} has {len(elements)} fields, expected {FIELD_COUNT}: {text!r}"
            )

        cik, company_name, form_type, date_filed, filename = elements
        return IndexRecord(
            cik=cik,
            company_name=company_name,
            form_type=form_type,
            date_filed=date_filed,
            filename=filename,
        )


def iter_bounded_lines(chunks: Iterable[bytes], max_line_length: int) -> Iterator[bytes]:
    """
    Split a byte stream into lines without holding more than one chunk plus
    `max_line_length + 1` bytes of any line.

    A line longer than the limit is yielded cut to `max_line_length + 1`
    bytes, enough for `FullIndexParser.feed()` to reject it; the rest of it is
    dropped as it streams past.
    """
    keep = max_line_length + 1
    pending = bytearray()
    for chunk in chunks:
        start = 0
        while start < len(chunk):
            newline = chunk.find(b"\n", start)
            end = len(chunk) if newline == -1 else newline
            room = keep - len(pending)
            if room > 0:
                pending += chunk[start:min(end, start + room)]
            if newline == -1:
                break
            yield bytes(pending)
            pending.clear()
            start = newline + 1
    if pending:
        yield bytes(pending)
