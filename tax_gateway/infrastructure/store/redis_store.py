"""Redis-backed result store with per-key expiry"""

import json
from typing import Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from tax_gateway.config import settings
from tax_gateway.domain.exceptions import ResultStoreError
from tax_gateway.domain.models import CalculationResult


def create_redis_client(url: Optional[str] = None, timeout: Optional[float] = None) -> Redis:
    """Build an async Redis client; connections open lazily on first command"""
    timeout = timeout or settings.store_timeout_seconds
    return Redis.from_url(
        url or settings.redis_url,
        decode_responses=True,
        socket_connect_timeout=timeout,
        socket_timeout=timeout,
    )


class RedisResultStore:
    """Stores calculation results as flat JSON objects under their identifier"""

    def __init__(self, client: Redis):
        self.client = client

    async def save(self, calculation_id: str, result: CalculationResult, ttl_seconds: int) -> None:
        """
        Write a result with a fixed expiry (SETEX). Reads never renew it.

        Raises:
            ResultStoreError: On connection errors or timeouts
        """
        payload = json.dumps(result.to_dict())
        try:
            await self.client.setex(calculation_id, ttl_seconds, payload)
        except (RedisError, OSError) as e:
            raise ResultStoreError(f"Unable to save calculation {calculation_id}: {e}") from e

    async def get(self, calculation_id: str) -> Optional[CalculationResult]:
        """
        Fetch a stored result.

        Returns:
            The result, or None when the key is missing or expired

        Raises:
            ResultStoreError: On connection errors, timeouts, or malformed data
        """
        try:
            raw = await self.client.get(calculation_id)
        except (RedisError, OSError) as e:
            raise ResultStoreError(f"Unable to read calculation {calculation_id}: {e}") from e

        if raw is None:
            return None

        try:
            return CalculationResult.from_dict(json.loads(raw))
        except (KeyError, ValueError, TypeError) as e:
            raise ResultStoreError(f"Malformed calculation data for {calculation_id}: {e}") from e

    async def ping(self) -> bool:
        try:
            return bool(await self.client.ping())
        except (RedisError, OSError):
            return False

    async def close(self) -> None:
        await self.client.aclose()
