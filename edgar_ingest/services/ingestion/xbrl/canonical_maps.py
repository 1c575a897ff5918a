"""
Canonical mappings for XBRL normalization.

Kept in source control rather than a table: these rules decide every
screening number the system produces.

- `CanonicalField`: the nine screening metrics.
- `FIELD_MAPPING_RULES`: per metric, candidate groups of raw us-gaap tags in
  priority order. A group is usable only when every tag in it is present; its
  value is the sum of its tags.
- `BASIC_RAW_FIELD_NAMES`: the raw tags the instance parser extracts, and the
  subset reported as fiscal-year-to-date cumulative sums.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, Tuple


class CanonicalField(str, enum.Enum):
    REVENUE = "Revenue"
    OPERATING_EXPENSE = "OperatingExpense"
    NET_INCOME = "NetIncome"
    CURRENT_ASSETS = "CurrentAssets"
    TOTAL_ASSETS = "TotalAssets"
    CURRENT_LIABILITIES = "CurrentLiabilities"
    TOTAL_LIABILITIES = "TotalLiabilities"
    OPERATING_CASH = "OperatingCash"
    CAPITAL_EXPENDITURES = "CapitalExpenditures"


CandidateGroup = Tuple[str, ...]
FieldMappingRules = Dict[CanonicalField, Tuple[CandidateGroup, ...]]


FIELD_MAPPING_RULES: FieldMappingRules = {
    # Income Statement
    CanonicalField.REVENUE: (("Revenues",), ("SalesRevenueNet",)),
    CanonicalField.OPERATING_EXPENSE: (
        ("CostsAndExpenses",),
        ("OperatingExpenses",),
        ("CostOfGoodsAndServicesSold",),
    ),
    CanonicalField.NET_INCOME: (("NetIncomeLoss",),),
    # Balance Sheet
    CanonicalField.CURRENT_ASSETS: (("AssetsCurrent",),),
    CanonicalField.TOTAL_ASSETS: (("Assets",),),
    CanonicalField.CURRENT_LIABILITIES: (("LiabilitiesCurrent",),),
    CanonicalField.TOTAL_LIABILITIES: (
        ("LiabilitiesCurrent", "DeferredTaxLiabilitiesNoncurrent", "LongTermDebtNoncurrent"),
        ("Liabilities",),
    ),
    # Cash Flow
    CanonicalField.OPERATING_CASH: (("NetCashProvidedByUsedInOperatingActivities",),),
    CanonicalField.CAPITAL_EXPENDITURES: (("PaymentsToAcquirePropertyPlantAndEquipment",),),
}

# Order of the missing-field diagnostic of an invalid report
VALIDATION_ORDER: Tuple[CanonicalField, ...] = (
    CanonicalField.REVENUE,
    CanonicalField.OPERATING_EXPENSE,
    CanonicalField.NET_INCOME,
    CanonicalField.TOTAL_ASSETS,
    CanonicalField.TOTAL_LIABILITIES,
    CanonicalField.CURRENT_ASSETS,
    CanonicalField.CURRENT_LIABILITIES,
    CanonicalField.OPERATING_CASH,
    CanonicalField.CAPITAL_EXPENDITURES,
)


@dataclass(frozen=True)
class RawFieldNameList:
    int64_field_names: Tuple[str, ...]
    variable_period_field_names: Tuple[str, ...]

    def is_variable_period(self, name: str) -> bool:
        return name in self.variable_period_field_names


BASIC_RAW_FIELD_NAMES = RawFieldNameList(
    int64_field_names=(
        "Revenues",
        "SalesRevenueNet",
        "CostsAndExpenses",
        "OperatingExpenses",
        "CostOfGoodsAndServicesSold",
        "NetIncomeLoss",

        "Assets",
        "AssetsCurrent",
        "Liabilities",
        "LiabilitiesCurrent",
        "LongTermDebtNoncurrent",
        "DeferredTaxLiabilitiesNoncurrent",

        "NetCashProvidedByUsedInOperatingActivities",
        "PaymentsToAcquirePropertyPlantAndEquipment",
    ),
    variable_period_field_names=(
        "NetCashProvidedByUsedInOperatingActivities",
        "PaymentsToAcquirePropertyPlantAndEquipment",
    ),
)


def get_field_mapping_rules() -> FieldMappingRules:
    return FIELD_MAPPING_RULES
