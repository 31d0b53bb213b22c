"""Result store contract consumed by the API layer"""

from typing import Optional, Protocol

from tax_gateway.domain.models import CalculationResult


class ResultStore(Protocol):
    """
    Key-value store with per-key expiry for calculation results.

    Implementations raise ResultStoreError on transport or data errors.
    A missing or expired key is not an error: `get` returns None.
    """

    async def save(self, calculation_id: str, result: CalculationResult, ttl_seconds: int) -> None:
        ...

    async def get(self, calculation_id: str) -> Optional[CalculationResult]:
        ...

    async def ping(self) -> bool:
        ...
