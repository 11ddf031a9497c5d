import logging
from decimal import Decimal, InvalidOperation

from domain.exceptions.currency import CacheError
from infrastructure.cache.store import CacheEntryOptions, CacheStore

logger = logging.getLogger(__name__)


class RateCache:
    """Directional (from, to) -> rate cache, scoped per provider.

    Store failures degrade to a miss so a cache outage never fails a lookup.
    """

    def __init__(self, store: CacheStore):
        self.store = store

    def _make_rate_key(self, provider_name: str, from_currency: str, to_currency: str) -> str:
        return f"rates:{provider_name}:{from_currency}-{to_currency}"

    async def get_rate(self, provider_name: str, from_currency: str, to_currency: str) -> Decimal | None:
        key = self._make_rate_key(provider_name, from_currency, to_currency)
        try:
            cached = await self.store.get(key)
        except CacheError as e:
            logger.warning(f"Cache read failed for {key}: {e}")
            return None

        if cached is None:
            logger.debug(f"Cache miss for {key}")
            return None

        try:
            rate = Decimal(cached)
        except InvalidOperation:
            logger.warning(f"Discarding unparseable cached rate for {key}: {cached!r}")
            return None

        if rate <= 0:
            return None

        logger.debug(f"Cache hit for {key}")
        return rate

    async def set_rate(
        self,
        provider_name: str,
        from_currency: str,
        to_currency: str,
        rate: Decimal,
        options: CacheEntryOptions,
    ) -> bool:
        """Store a rate. Returns False when the rate was not stored."""
        key = self._make_rate_key(provider_name, from_currency, to_currency)
        if rate <= 0:
            logger.warning(f"Refusing to cache non-positive rate {rate} for {key}")
            return False

        try:
            await self.store.set(key, str(rate), options)
        except CacheError as e:
            logger.warning(f"Cache write failed for {key}: {e}")
            return False

        logger.debug(f"Cached rate {rate} for {key}")
        return True
