import pytest

from api import dependencies
from api.dependencies import (
	build_cache_store,
	cleanup_dependencies,
	get_fetchers,
	get_registry,
	init_dependencies,
)
from config.settings import Settings
from infrastructure.cache.redis_cache import RedisCacheStore
from infrastructure.cache.store import MemoryCacheStore


def test_build_cache_store_memory():
	store = build_cache_store(Settings(_env_file=None, CACHE_BACKEND='memory', CACHE_SIZE_LIMIT=10))

	assert isinstance(store, MemoryCacheStore)
	assert store.size_limit == 10


def test_build_cache_store_redis():
	store = build_cache_store(Settings(_env_file=None, CACHE_BACKEND='Redis'))

	assert isinstance(store, RedisCacheStore)


def test_build_cache_store_unknown_backend():
	with pytest.raises(ValueError):
		build_cache_store(Settings(_env_file=None, CACHE_BACKEND='memcached'))


def test_registry_requires_initialization():
	dependencies.deps.registry = None

	with pytest.raises(RuntimeError):
		get_registry()


@pytest.mark.asyncio
async def test_init_and_cleanup_dependencies():
	init_dependencies(Settings(_env_file=None, CACHE_BACKEND='memory', BAD_CURRENCIES='TRY'))
	try:
		registry = get_registry()
		assert registry.names() == ['EuropeanCentralBank', 'Frankfurter']
		assert [fetcher.name for fetcher in get_fetchers()] == ['Frankfurter']
		assert registry.resolve('Frankfurter').bad_currencies == frozenset({'TRY'})
	finally:
		await cleanup_dependencies()

	assert dependencies.deps.registry is None
	assert get_fetchers() == []
