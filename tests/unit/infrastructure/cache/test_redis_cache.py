# nosec B101


import json
from datetime import timedelta
from unittest.mock import AsyncMock, Mock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from domain.exceptions.currency import CacheError
from infrastructure.cache.redis_cache import READ_AND_RENEW, RedisCacheStore
from infrastructure.cache.store import CacheEntryOptions

RATE_OPTIONS = CacheEntryOptions(
    absolute_expiration=timedelta(hours=1),
    sliding_expiration=timedelta(minutes=15),
)


def make_store(script_result=None, now=1_700_000_000.0):
    mock_redis = AsyncMock()
    script = AsyncMock(return_value=script_result)
    mock_redis.register_script = Mock(return_value=script)
    store = RedisCacheStore(redis_client=mock_redis, clock=lambda: now)
    return store, mock_redis, script


def test_registers_read_and_renew_script():
    _, mock_redis, _ = make_store()

    mock_redis.register_script.assert_called_once_with(READ_AND_RENEW)


@pytest.mark.asyncio
async def test_get_cache_hit_returns_value():
    payload = json.dumps({'value': '0.85', 'expires_at': 1_700_003_600_000, 'sliding_ms': 900_000})
    store, _, script = make_store(script_result=payload)

    result = await store.get('rates:Frankfurter:USD-EUR')

    assert result == '0.85'
    script.assert_awaited_once_with(keys=['rates:Frankfurter:USD-EUR'], args=[1_700_000_000_000])


@pytest.mark.asyncio
async def test_get_decodes_bytes_payload():
    payload = json.dumps({'value': '1.25', 'expires_at': 0, 'sliding_ms': 0}).encode('utf-8')
    store, _, _ = make_store(script_result=payload)

    assert await store.get('rates:Frankfurter:GBP-USD') == '1.25'


@pytest.mark.asyncio
async def test_get_cache_miss_returns_none():
    store, _, _ = make_store(script_result=None)

    assert await store.get('rates:Frankfurter:USD-EUR') is None


@pytest.mark.asyncio
async def test_get_malformed_json_raises_cache_error():
    store, _, _ = make_store(script_result='{ invalid json }')

    with pytest.raises(CacheError) as exc_info:
        await store.get('rates:Frankfurter:USD-EUR')

    assert 'Invalid json data' in str(exc_info.value)


@pytest.mark.asyncio
async def test_get_redis_failure_raises_cache_error():
    store, _, script = make_store()
    script.side_effect = RedisConnectionError('Connection refused')

    with pytest.raises(CacheError):
        await store.get('rates:Frankfurter:USD-EUR')


@pytest.mark.asyncio
async def test_set_stores_payload_with_shorter_ttl():
    store, mock_redis, _ = make_store(now=1_700_000_000.0)

    await store.set('rates:Frankfurter:USD-EUR', '0.85', RATE_OPTIONS)

    mock_redis.set.assert_awaited_once()
    call_args = mock_redis.set.call_args
    key = call_args[0][0]
    stored = json.loads(call_args[0][1])

    assert key == 'rates:Frankfurter:USD-EUR'
    assert call_args[1]['px'] == 900_000
    assert stored == {
        'value': '0.85',
        'expires_at': 1_700_000_000_000 + 3_600_000,
        'sliding_ms': 900_000,
    }


@pytest.mark.asyncio
async def test_set_absolute_only_uses_absolute_ttl():
    store, mock_redis, _ = make_store()

    await store.set('key', '2', CacheEntryOptions(absolute_expiration=timedelta(minutes=5)))

    assert mock_redis.set.call_args[1]['px'] == 300_000
    assert json.loads(mock_redis.set.call_args[0][1])['sliding_ms'] == 0


@pytest.mark.asyncio
async def test_set_without_expiration_persists():
    store, mock_redis, _ = make_store()

    await store.set('key', '2', CacheEntryOptions())

    assert mock_redis.set.call_args[1]['px'] is None
    assert json.loads(mock_redis.set.call_args[0][1])['expires_at'] == 0


@pytest.mark.asyncio
async def test_set_redis_failure_raises_cache_error():
    store, mock_redis, _ = make_store()
    mock_redis.set.side_effect = RedisConnectionError('Connection refused')

    with pytest.raises(CacheError):
        await store.set('key', '2', RATE_OPTIONS)


@pytest.mark.asyncio
async def test_close_closes_client():
    store, mock_redis, _ = make_store()

    await store.close()

    mock_redis.aclose.assert_awaited_once()
