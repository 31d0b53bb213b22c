"""Unit tests for the tax engine"""

import pytest
from tax_gateway.domain.engine import annual_gross_income, calculate
from tax_gateway.domain.models import CalculationInput
from tax_gateway.utils.rounding import round2


def test_salary_only():
    """500,000 monthly with no deductions"""
    result = calculate(CalculationInput(monthly_gross_income=500000))

    assert result.gross_income == 6_000_000
    assert result.total_deductions == 0
    assert result.taxable_income == 6_000_000
    assert result.tax_owed == 870_000  # 2,200,000 @ 15% + 3,000,000 @ 18%
    assert result.after_tax_income == 5_130_000
    assert result.effective_tax_rate == 14.5


def test_all_deductions(full_input):
    result = calculate(full_input)

    assert result.gross_income == 6_600_000
    assert result.total_deductions == 845_000
    assert result.taxable_income == 5_755_000
    assert result.tax_owed == 825_900
    assert result.after_tax_income == 5_774_100
    assert result.effective_tax_rate == 12.51


def test_rent_above_threshold_gets_flat_relief():
    result = calculate(CalculationInput(monthly_gross_income=500000, annual_rent_paid=1_000_000))
    assert result.total_deductions == 500_000


def test_rent_below_threshold_gets_twenty_percent():
    result = calculate(CalculationInput(monthly_gross_income=500000, annual_rent_paid=400_000))
    assert result.total_deductions == 80_000


def test_nhf_cap_applied():
    result = calculate(CalculationInput(monthly_gross_income=500000, annual_nhf_contributions=10000))
    assert result.total_deductions == 5000


def test_pension_cap_applied():
    result = calculate(CalculationInput(monthly_gross_income=500000, annual_pension_contributions=1_000_000))
    assert result.total_deductions == 600_000


def test_low_income_is_tax_free():
    result = calculate(CalculationInput(monthly_gross_income=50000))
    assert result.gross_income == 600_000
    assert result.tax_owed == 0
    assert result.effective_tax_rate == 0


def test_zero_income():
    result = calculate(CalculationInput(monthly_gross_income=0))

    assert result.gross_income == 0
    assert result.tax_owed == 0
    assert result.effective_tax_rate == 0
    assert result.after_tax_income == 0


def test_deductions_larger_than_income_floor_taxable_at_zero():
    result = calculate(CalculationInput(monthly_gross_income=10000, annual_rent_paid=1_000_000))

    assert result.gross_income == 120_000
    assert result.total_deductions == 500_000
    assert result.taxable_income == 0
    assert result.tax_owed == 0


def test_high_income():
    result = calculate(CalculationInput(monthly_gross_income=5_000_000))
    assert result.tax_owed == 12_930_000
    assert result.effective_tax_rate == 21.55


def test_additional_income_is_annualized():
    calc_input = CalculationInput(monthly_gross_income=400000, additional_monthly_income=100000)
    assert annual_gross_income(calc_input) == 6_000_000
    assert calculate(calc_input).tax_owed == 870_000


def test_derived_fields_use_rounded_tax():
    """Effective rate and after-tax income come from the cent-rounded tax"""
    result = calculate(CalculationInput(monthly_gross_income=250000.01))

    assert result.tax_owed == 330000.02
    assert result.gross_income == pytest.approx(3_000_000.12)
    assert result.after_tax_income == round2(3_000_000.12 - 330000.02)
    assert result.effective_tax_rate == round2(result.tax_owed / (250000.01 * 12) * 100)


def test_calculate_is_idempotent(full_input):
    assert calculate(full_input) == calculate(full_input)
