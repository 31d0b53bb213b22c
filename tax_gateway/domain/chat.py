"""Prompt construction for the tax assistant chat"""

from dataclasses import dataclass
from typing import List, Optional

from tax_gateway.domain.models import CalculationResult

SYSTEM_PROMPT = """
You are an AI assistant specialized ONLY in Nigeria's 2026 tax reforms.

KNOWLEDGE BASE:
- 2026 Nigerian tax brackets and rates
- PAYE rules
- Deductions and relief caps
- Payment procedures and deadlines
- FIRS compliance requirements

RULES:
- ONLY answer questions related to Nigeria's 2026 tax system
- If a question is outside this scope, politely refuse and redirect to FIRS
- Do NOT provide legal advice
- Keep answers concise (2-4 sentences)
- Use bullet points for steps
- Suggest follow-up questions when helpful
- Reference FIRS processes when relevant

REFUSAL TEMPLATE:
"I'm specifically trained on Nigeria's 2026 tax reforms. For other questions, please visit the official FIRS website."

DISCLAIMER:
"This information is for guidance only and not legal advice."
"""

MODEL_ACKNOWLEDGEMENT = "Understood. I will only answer questions about Nigeria's 2026 tax reforms."

NAIRA_SIGN = "₦"


@dataclass(frozen=True)
class ChatTurn:
    """One message in the conversation sent to the model"""

    role: str  # "user" or "model"
    text: str


def format_naira(amount: float) -> str:
    """₦ with thousands separators; kobo shown only when non-zero"""
    if float(amount).is_integer():
        return f"{NAIRA_SIGN}{amount:,.0f}"
    return f"{NAIRA_SIGN}{amount:,.2f}"


def format_tax_context(result: CalculationResult) -> str:
    """Summarize a stored calculation for the model"""
    return (
        "\nUSER TAX CONTEXT:\n"
        f"- Annual income: {format_naira(result.gross_income)}\n"
        f"- Total deductions: {format_naira(result.total_deductions)}\n"
        f"- Taxable income: {format_naira(result.taxable_income)}\n"
        f"- Tax owed: {format_naira(result.tax_owed)}\n"
        f"- Effective tax rate: {result.effective_tax_rate:.2f}%\n"
        f"- After-tax income: {format_naira(result.after_tax_income)}\n"
    )


def build_chat_history(tax_context: Optional[CalculationResult]) -> List[ChatTurn]:
    """
    Priming turns that precede the user's question.

    The instructions travel as the first user turn, followed by the model's
    acknowledgement.
    """
    instructions = SYSTEM_PROMPT
    if tax_context is not None:
        instructions += format_tax_context(tax_context)

    return [
        ChatTurn(role="user", text=instructions),
        ChatTurn(role="model", text=MODEL_ACKNOWLEDGEMENT),
    ]
