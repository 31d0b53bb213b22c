"""Pydantic schemas for API request/response validation"""

from typing import Annotated, Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from tax_gateway.config import settings
from tax_gateway.domain.models import CalculationInput, CalculationResult

# Sanity bound for every monetary input (naira)
MAX_INPUT_AMOUNT = 100_000_000_000

# Strict: numeric strings and booleans are rejected, never coerced
Amount = Annotated[float, Field(strict=True, ge=0, le=MAX_INPUT_AMOUNT, allow_inf_nan=False)]


class CalculationRequest(BaseModel):
    """Request body for POST /api/v1/tax/calculate"""

    model_config = ConfigDict(populate_by_name=True)

    monthly_gross_income: Amount = Field(..., alias="monthlyGrossIncome", description="Monthly gross income")
    additional_monthly_income: Amount = Field(0.0, alias="additionalMonthlyIncome")
    annual_pension_contributions: Amount = Field(0.0, alias="annualPensionContributions")
    annual_nhf_contributions: Amount = Field(0.0, alias="annualNHFContributions")
    annual_rent_paid: Amount = Field(0.0, alias="annualRentPaid")
    life_insurance_premiums: Amount = Field(0.0, alias="lifeInsurancePremiums")

    def to_domain(self) -> CalculationInput:
        return CalculationInput(
            monthly_gross_income=self.monthly_gross_income,
            additional_monthly_income=self.additional_monthly_income,
            annual_pension_contributions=self.annual_pension_contributions,
            annual_nhf_contributions=self.annual_nhf_contributions,
            annual_rent_paid=self.annual_rent_paid,
            life_insurance_premiums=self.life_insurance_premiums,
        )


# Human-readable names used in validation messages, keyed by wire name
FIELD_LABELS = {
    "monthlyGrossIncome": "Monthly gross income",
    "additionalMonthlyIncome": "Additional monthly income",
    "annualPensionContributions": "Annual pension contributions",
    "annualNHFContributions": "Annual NHF contributions",
    "annualRentPaid": "Annual rent paid",
    "lifeInsurancePremiums": "Life insurance premiums",
}


class CalculationSchema(BaseModel):
    """Computed tax figures"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    gross_income: float
    total_deductions: float
    taxable_income: float
    tax_owed: float
    effective_tax_rate: float
    after_tax_income: float

    @classmethod
    def from_result(cls, result: CalculationResult) -> "CalculationSchema":
        return cls(
            gross_income=result.gross_income,
            total_deductions=result.total_deductions,
            taxable_income=result.taxable_income,
            tax_owed=result.tax_owed,
            effective_tax_rate=result.effective_tax_rate,
            after_tax_income=result.after_tax_income,
        )


class CalculationResponse(BaseModel):
    """Response for POST /api/v1/tax/calculate and GET /api/v1/tax/get-calculation/{userID}"""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str
    user_id: Optional[str] = Field(None, alias="userID")
    calculation: CalculationSchema


class ChatRequest(BaseModel):
    """Request body for POST /api/v1/chat"""

    model_config = ConfigDict(populate_by_name=True)

    prompt: Optional[Any] = Field(None, validate_default=True)
    user_id: Optional[Any] = Field(None, alias="userID", validate_default=True)

    @field_validator("prompt", mode="before")
    @classmethod
    def check_prompt(cls, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("No prompt provided")
        value = value.strip()
        if len(value) > settings.chat_prompt_max_length:
            raise ValueError("Prompt length exceeded.")
        return value

    @field_validator("user_id", mode="before")
    @classmethod
    def check_user_id(cls, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Valid user ID is required!")
        return value.strip()


class ChatResponse(BaseModel):
    """Response for POST /api/v1/chat"""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    ai_response: str = Field(..., alias="AIResponse")


class ErrorResponse(BaseModel):
    """Body of every error response"""

    success: bool = False
    message: str
