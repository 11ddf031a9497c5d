import json
import time
from collections.abc import Callable

from redis import asyncio as redis
from redis.exceptions import RedisError

from domain.exceptions.currency import CacheError
from infrastructure.cache.store import CacheEntryOptions

# Read and renew the sliding window in one step. The renewed TTL never
# reaches past the absolute deadline stored alongside the value.
READ_AND_RENEW = """
local raw = redis.call('GET', KEYS[1])
if not raw then
    return false
end
local entry = cjson.decode(raw)
local ttl = entry.sliding_ms
if entry.expires_at > 0 then
    local remaining = entry.expires_at - tonumber(ARGV[1])
    if remaining <= 0 then
        redis.call('DEL', KEYS[1])
        return false
    end
    if ttl == 0 or remaining < ttl then
        ttl = remaining
    end
end
if ttl > 0 then
    redis.call('PEXPIRE', KEYS[1], ttl)
end
return raw
"""


class RedisCacheStore:
    """Shared cache store backed by Redis.

    Priority hints are accepted but not enforced here; eviction under memory
    pressure is left to the server's maxmemory policy.
    """

    def __init__(self, redis_client: redis.Redis, clock: Callable[[], float] = time.time):
        self.redis = redis_client
        self._clock = clock
        self._read_and_renew = redis_client.register_script(READ_AND_RENEW)

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    async def get(self, key: str) -> str | None:
        try:
            raw = await self._read_and_renew(keys=[key], args=[self._now_ms()])
        except RedisError as e:
            raise CacheError(f"Redis read failed for {key}: {e}") from e

        if not raw:
            return None

        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        try:
            return json.loads(raw)["value"]
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            raise CacheError(f"Invalid json data for {key}") from e

    async def set(self, key: str, value: str, options: CacheEntryOptions) -> None:
        absolute_ms = (
            int(options.absolute_expiration.total_seconds() * 1000)
            if options.absolute_expiration is not None else 0
        )
        sliding_ms = (
            int(options.sliding_expiration.total_seconds() * 1000)
            if options.sliding_expiration is not None else 0
        )
        payload = {
            "value": value,
            "expires_at": self._now_ms() + absolute_ms if absolute_ms else 0,
            "sliding_ms": sliding_ms,
        }
        ttls = [ttl for ttl in (absolute_ms, sliding_ms) if ttl > 0]

        try:
            await self.redis.set(key, json.dumps(payload), px=min(ttls) if ttls else None)
        except RedisError as e:
            raise CacheError(f"Redis write failed for {key}: {e}") from e

    async def close(self) -> None:
        await self.redis.aclose()
