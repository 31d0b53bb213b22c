"""Domain models - pure Python dataclasses representing tax entities"""

import math
from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class Bracket:
    """Single progressive tax band: income slice width and its marginal rate"""

    upper_width: float  # math.inf for the terminal band
    rate: float

    @property
    def unbounded(self) -> bool:
        return math.isinf(self.upper_width)


@dataclass(frozen=True)
class CalculationInput:
    """Validated caller input, all amounts in naira"""

    monthly_gross_income: float
    additional_monthly_income: float = 0.0
    annual_pension_contributions: float = 0.0
    annual_nhf_contributions: float = 0.0
    annual_rent_paid: float = 0.0
    life_insurance_premiums: float = 0.0


@dataclass(frozen=True)
class DeductionBreakdown:
    """Capped amount allowed for each deduction category"""

    pension: float
    nhf: float
    life_insurance: float
    rent_relief: float

    @property
    def total(self) -> float:
        return self.pension + self.nhf + self.life_insurance + self.rent_relief


@dataclass(frozen=True)
class CalculationResult:
    """Output of the tax engine; monetary fields rounded to 2 decimals"""

    gross_income: float
    total_deductions: float
    taxable_income: float
    tax_owed: float
    effective_tax_rate: float  # percentage
    after_tax_income: float

    def to_dict(self) -> Dict[str, float]:
        """Flat camelCase mapping used on the wire and in the result store"""
        return {
            "grossIncome": self.gross_income,
            "totalDeductions": self.total_deductions,
            "taxableIncome": self.taxable_income,
            "taxOwed": self.tax_owed,
            "effectiveTaxRate": self.effective_tax_rate,
            "afterTaxIncome": self.after_tax_income,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CalculationResult":
        """
        Rebuild a result from its stored mapping.

        Raises:
            KeyError: A field is missing
            TypeError, ValueError: A field is not numeric
        """
        return cls(
            gross_income=float(data["grossIncome"]),
            total_deductions=float(data["totalDeductions"]),
            taxable_income=float(data["taxableIncome"]),
            tax_owed=float(data["taxOwed"]),
            effective_tax_rate=float(data["effectiveTaxRate"]),
            after_tax_income=float(data["afterTaxIncome"]),
        )
