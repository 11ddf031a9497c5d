import logging
from typing import Annotated

from fastapi import Depends
from redis.asyncio import Redis

from application.services import ConversionService, ProviderRegistry, RateService
from config.settings import Settings, get_settings
from infrastructure.cache.rate_cache import RateCache
from infrastructure.cache.redis_cache import RedisCacheStore
from infrastructure.cache.store import CacheStore, MemoryCacheStore
from infrastructure.http.client_factory import create_upstream_fetcher
from infrastructure.http.resilient_fetcher import ResilientFetcher
from infrastructure.providers import EuropeanCentralBankProvider, FrankfurterProvider

logger = logging.getLogger(__name__)


class AppDependencies:
	"""Container for application-wide singleton dependencies."""

	cache_store: CacheStore | None = None
	registry: ProviderRegistry | None = None
	fetchers: list[ResilientFetcher] | None = None


deps = AppDependencies()


def build_cache_store(settings: Settings) -> CacheStore:
	if settings.CACHE_BACKEND.lower() == 'redis':
		return RedisCacheStore(Redis.from_url(settings.REDIS_URL, decode_responses=True))
	if settings.CACHE_BACKEND.lower() == 'memory':
		return MemoryCacheStore(size_limit=settings.CACHE_SIZE_LIMIT)
	raise ValueError(f'Unknown CACHE_BACKEND: {settings.CACHE_BACKEND}')


def init_dependencies(settings: Settings | None = None) -> None:
	"""Initialize all singleton dependencies. Called at app startup."""
	logger.info('Initializing dependencies...')
	settings = settings or get_settings()

	deps.cache_store = build_cache_store(settings)
	rate_cache = RateCache(deps.cache_store)

	frankfurter_fetcher = create_upstream_fetcher(
		settings, name='Frankfurter', base_url=settings.FRANKFURTER_BASE_URL
	)
	deps.fetchers = [frankfurter_fetcher]

	deps.registry = ProviderRegistry([
		FrankfurterProvider(
			fetcher=frankfurter_fetcher,
			rate_cache=rate_cache,
			bad_currencies=settings.bad_currencies,
		),
		EuropeanCentralBankProvider(bad_currencies=settings.bad_currencies),
	])
	logger.info(f'Dependencies initialized with providers: {deps.registry.names()}')


async def cleanup_dependencies() -> None:
	logger.info('Cleaning up dependencies...')

	if deps.registry:
		await deps.registry.close()
	if deps.cache_store:
		await deps.cache_store.close()

	deps.registry = None
	deps.cache_store = None
	deps.fetchers = None
	logger.info('Cleanup complete')


def get_registry() -> ProviderRegistry:
	if deps.registry is None:
		raise RuntimeError('Providers not initialized')
	return deps.registry


def get_fetchers() -> list[ResilientFetcher]:
	return deps.fetchers or []


def get_conversion_service(
	registry: Annotated[ProviderRegistry, Depends(get_registry)],
) -> ConversionService:
	return ConversionService(registry=registry)


def get_rate_service(
	registry: Annotated[ProviderRegistry, Depends(get_registry)],
) -> RateService:
	return RateService(registry=registry)
