"""Pytest fixtures for testing"""

import pytest
from typing import Dict, List, Optional, Tuple
from fastapi.testclient import TestClient
from tax_gateway.api.main import create_app
from tax_gateway.domain.chat import ChatTurn
from tax_gateway.domain.exceptions import ResultStoreError
from tax_gateway.domain.models import CalculationInput, CalculationResult


class InMemoryResultStore:
    """Result store double that records TTLs and can simulate outages"""

    def __init__(self):
        self.items: Dict[str, CalculationResult] = {}
        self.ttls: Dict[str, int] = {}
        self.fail_on_save = False
        self.fail_on_get = False

    async def save(self, calculation_id: str, result: CalculationResult, ttl_seconds: int) -> None:
        if self.fail_on_save:
            raise ResultStoreError("Redis connection failed")
        self.items[calculation_id] = result
        self.ttls[calculation_id] = ttl_seconds

    async def get(self, calculation_id: str) -> Optional[CalculationResult]:
        if self.fail_on_get:
            raise ResultStoreError("Redis connection failed")
        return self.items.get(calculation_id)

    async def ping(self) -> bool:
        return not (self.fail_on_save or self.fail_on_get)


class FakeChatClient:
    """LLM client double returning a canned reply"""

    def __init__(self, reply: str = "PAYE is deducted by your employer each month."):
        self.reply = reply
        self.error: Optional[Exception] = None
        self.calls: List[Tuple[List[ChatTurn], str]] = []

    async def send_message(self, history: List[ChatTurn], prompt: str) -> str:
        self.calls.append((history, prompt))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def store() -> InMemoryResultStore:
    return InMemoryResultStore()


@pytest.fixture
def chat_client() -> FakeChatClient:
    return FakeChatClient()


@pytest.fixture
def client(store: InMemoryResultStore, chat_client: FakeChatClient) -> TestClient:
    """Create FastAPI test client with in-memory store and fake LLM"""
    app = create_app(result_store=store, chat_client=chat_client)
    return TestClient(app)


@pytest.fixture
def full_payload() -> dict:
    """Request body exercising every deduction"""
    return {
        "monthlyGrossIncome": 500000,
        "additionalMonthlyIncome": 50000,
        "annualPensionContributions": 300000,
        "annualNHFContributions": 5000,
        "annualRentPaid": 600000,
        "lifeInsurancePremiums": 40000,
    }


@pytest.fixture
def full_input() -> CalculationInput:
    return CalculationInput(
        monthly_gross_income=500000,
        additional_monthly_income=50000,
        annual_pension_contributions=300000,
        annual_nhf_contributions=5000,
        annual_rent_paid=600000,
        life_insurance_premiums=40000,
    )


@pytest.fixture
def sample_result() -> CalculationResult:
    """Result for 500,000 monthly income and no deductions"""
    return CalculationResult(
        gross_income=6000000.0,
        total_deductions=0.0,
        taxable_income=6000000.0,
        tax_owed=870000.0,
        effective_tax_rate=14.5,
        after_tax_income=5130000.0,
    )
