import logging
from collections.abc import Iterable

from domain.exceptions.currency import NotFoundError
from infrastructure.providers.base import CurrencyProvider

logger = logging.getLogger(__name__)


class ProviderRegistry:
	"""Provider lookup by self-reported name.

	Matching is exact and case-sensitive: 'Frankfurter' resolves,
	'frankfurter' does not.
	"""

	def __init__(self, providers: Iterable[CurrencyProvider]):
		self._providers: dict[str, CurrencyProvider] = {}
		for provider in providers:
			if provider.name in self._providers:
				raise ValueError(f'Duplicate currency provider name: {provider.name}')
			self._providers[provider.name] = provider

	def resolve(self, name: str | None) -> CurrencyProvider:
		provider = self._providers.get(name or '')
		if provider is None:
			logger.warning(f'Unknown currency provider requested: {name}')
			raise NotFoundError(name)
		return provider

	def names(self) -> list[str]:
		return sorted(self._providers)

	def providers(self) -> list[CurrencyProvider]:
		return list(self._providers.values())

	async def close(self) -> None:
		for provider in self.providers():
			await provider.close()
