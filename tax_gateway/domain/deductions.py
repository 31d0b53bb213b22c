"""Capped statutory deductions and reliefs"""

from tax_gateway.domain.models import CalculationInput, DeductionBreakdown

PENSION_INCOME_SHARE = 0.10
NHF_CAP = 5_000
LIFE_INSURANCE_CAP = 50_000
LIFE_INSURANCE_INCOME_SHARE = 0.10
RENT_RELIEF_CAP = 500_000
RENT_RELIEF_SHARE = 0.20


def pension_deduction(contributions: float, gross_income: float) -> float:
    """Pension contributions, capped at 10% of gross income"""
    return min(contributions, gross_income * PENSION_INCOME_SHARE)


def nhf_deduction(contributions: float) -> float:
    """National Housing Fund contributions, flat cap independent of income"""
    return min(contributions, NHF_CAP)


def life_insurance_deduction(premiums: float, gross_income: float) -> float:
    """Life insurance premiums, capped at the lesser of 50,000 and 10% of gross"""
    return min(premiums, min(LIFE_INSURANCE_CAP, gross_income * LIFE_INSURANCE_INCOME_SHARE))


def rent_relief(rent_paid: float) -> float:
    """
    Rent relief step function.

    Rent above 500,000 earns exactly 500,000; anything else earns 20% of rent.
    The branch is on the rent paid, not on the computed relief.
    """
    if rent_paid > RENT_RELIEF_CAP:
        return RENT_RELIEF_CAP
    return rent_paid * RENT_RELIEF_SHARE


def deduction_breakdown(calc_input: CalculationInput, gross_income: float) -> DeductionBreakdown:
    return DeductionBreakdown(
        pension=pension_deduction(calc_input.annual_pension_contributions, gross_income),
        nhf=nhf_deduction(calc_input.annual_nhf_contributions),
        life_insurance=life_insurance_deduction(calc_input.life_insurance_premiums, gross_income),
        rent_relief=rent_relief(calc_input.annual_rent_paid),
    )


def compute_deductions(calc_input: CalculationInput, gross_income: float) -> float:
    """Sum of the four capped deductions; the sum itself is not capped"""
    return deduction_breakdown(calc_input, gross_income).total
