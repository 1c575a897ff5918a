"""
In-memory report types passed between the parser, the normalizer and the
repositories.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from edgar_ingest.services.ingestion.errors import DataFailure
from edgar_ingest.services.ingestion.xbrl.canonical_maps import VALIDATION_ORDER, CanonicalField


def get_previous_quarter(year: int, quarter: int) -> Tuple[int, int]:
    if quarter == 1:
        return year - 1, 4
    return year, quarter - 1


@dataclass
class RawFinancialReport:
    """Raw us-gaap facts of one filing, as reported (cash flows year-to-date)."""
    cik: int
    year: int
    quarter: int
    raw_fields: Dict[str, int] = field(default_factory=dict)

    def get_previous_quarter(self) -> Tuple[int, int]:
        return get_previous_quarter(self.year, self.quarter)


@dataclass
class FinancialReport:
    """
    The nine canonical screening metrics of one filing.

    A metric of 0 means "not resolved", not an observed zero.
    """
    cik: int
    year: int
    quarter: int
    values: Dict[CanonicalField, int] = field(default_factory=dict)

    def value(self, canonical_field: CanonicalField) -> int:
        return self.values.get(canonical_field, 0)

    def set_value(self, canonical_field: CanonicalField, value: int) -> None:
        self.values[canonical_field] = value

    def missing_fields(self) -> List[CanonicalField]:
        return [f for f in VALIDATION_ORDER if self.value(f) == 0]

    def is_valid(self) -> bool:
        return not self.missing_fields()

    def validate(self) -> None:
        """
        Raises:
            DataFailure whose message lists each missing field followed by a
            comma, e.g. "OperatingCash,CapitalExpenditures,".
        """
        missing = self.missing_fields()
        if missing:
            raise DataFailure(
                "".join(f"{f.value}," for f in missing),
                missing_fields=[f.value for f in missing],
            )
