"""Unit tests for the Redis result store"""

import json
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from tax_gateway.domain.exceptions import ResultStoreError
from tax_gateway.config import settings
from tax_gateway.infrastructure.store.redis_store import RedisResultStore, create_redis_client


class FakeRedis:
    """Minimal async Redis double keeping raw strings and their TTLs"""

    def __init__(self):
        self.data = {}
        self.ttls = {}
        self.fail = False

    async def setex(self, name, time, value):
        if self.fail:
            raise RedisConnectionError("Connection refused")
        self.data[name] = value
        self.ttls[name] = time
        return True

    async def get(self, name):
        if self.fail:
            raise RedisConnectionError("Connection refused")
        return self.data.get(name)

    async def ping(self):
        if self.fail:
            raise RedisConnectionError("Connection refused")
        return True


@pytest.fixture
def redis_client() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def redis_store(redis_client: FakeRedis) -> RedisResultStore:
    return RedisResultStore(redis_client)


async def test_save_then_get_round_trip(redis_store, sample_result):
    await redis_store.save("abc-123", sample_result, 86400)
    assert await redis_store.get("abc-123") == sample_result


async def test_save_writes_flat_json_with_expiry(redis_store, redis_client, sample_result):
    await redis_store.save("abc-123", sample_result, 86400)

    assert redis_client.ttls["abc-123"] == 86400
    assert json.loads(redis_client.data["abc-123"]) == {
        "grossIncome": 6000000.0,
        "totalDeductions": 0.0,
        "taxableIncome": 6000000.0,
        "taxOwed": 870000.0,
        "effectiveTaxRate": 14.5,
        "afterTaxIncome": 5130000.0,
    }


async def test_missing_key_returns_none(redis_store):
    assert await redis_store.get("non-existent-id") is None


async def test_save_failure_raises_store_error(redis_store, redis_client, sample_result):
    redis_client.fail = True
    with pytest.raises(ResultStoreError):
        await redis_store.save("abc-123", sample_result, 86400)


async def test_get_failure_raises_store_error(redis_store, redis_client):
    redis_client.fail = True
    with pytest.raises(ResultStoreError):
        await redis_store.get("abc-123")


@pytest.mark.parametrize("raw", ["invalid-json", "[1, 2]", json.dumps({"grossIncome": 1}), json.dumps({
    "grossIncome": "a lot",
    "totalDeductions": 0,
    "taxableIncome": 0,
    "taxOwed": 0,
    "effectiveTaxRate": 0,
    "afterTaxIncome": 0,
})])
async def test_malformed_data_raises_store_error(redis_store, redis_client, raw):
    redis_client.data["abc-123"] = raw
    with pytest.raises(ResultStoreError):
        await redis_store.get("abc-123")


async def test_ping(redis_store, redis_client):
    assert await redis_store.ping() is True
    redis_client.fail = True
    assert await redis_store.ping() is False


def test_client_factory_defaults_to_settings():
    client = create_redis_client()

    kwargs = client.connection_pool.connection_kwargs
    assert kwargs["socket_timeout"] == settings.store_timeout_seconds
    assert kwargs["socket_connect_timeout"] == settings.store_timeout_seconds


def test_client_factory_accepts_explicit_url_and_timeout():
    client = create_redis_client("redis://cache.internal:6380/2", timeout=0.5)

    kwargs = client.connection_pool.connection_kwargs
    assert kwargs["host"] == "cache.internal"
    assert kwargs["port"] == 6380
    assert kwargs["db"] == 2
    assert kwargs["socket_timeout"] == 0.5
