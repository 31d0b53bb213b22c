"""Tax engine - core business logic for PAYE calculations"""

from tax_gateway.domain.brackets import BracketTable, NIGERIA_2026_BRACKETS, compute_tax
from tax_gateway.domain.deductions import compute_deductions
from tax_gateway.domain.models import CalculationInput, CalculationResult
from tax_gateway.utils.rounding import round2

MONTHS_PER_YEAR = 12


def annual_gross_income(calc_input: CalculationInput) -> float:
    return (calc_input.monthly_gross_income + calc_input.additional_monthly_income) * MONTHS_PER_YEAR


def calculate(
    calc_input: CalculationInput,
    brackets: BracketTable = NIGERIA_2026_BRACKETS,
) -> CalculationResult:
    """
    Main entry point: turn validated input into a full calculation result.

    Flow:
    1. Annualize monthly income
    2. Apply capped deductions
    3. Tax the remaining income band by band
    4. Derive effective rate and after-tax income from the rounded tax

    Tax owed is rounded before the effective rate and after-tax income are
    derived from it.
    """
    gross_income = annual_gross_income(calc_input)
    total_deductions = compute_deductions(calc_input, gross_income)
    taxable_income = max(0.0, gross_income - total_deductions)

    tax_owed = compute_tax(taxable_income, brackets)

    effective_tax_rate = round2(tax_owed / gross_income * 100) if gross_income > 0 else 0.0
    after_tax_income = round2(gross_income - tax_owed)

    return CalculationResult(
        gross_income=round2(gross_income),
        total_deductions=round2(total_deductions),
        taxable_income=round2(taxable_income),
        tax_owed=tax_owed,
        effective_tax_rate=effective_tax_rate,
        after_tax_income=after_tax_income,
    )
