from datetime import date

from application.services.provider_registry import ProviderRegistry
from domain.models.currency import HistoricalRatesResult, LatestRatesResult


class RateService:
	def __init__(self, registry: ProviderRegistry):
		self.registry = registry

	async def get_rate(self, provider_name: str, from_currency: str, to_currency: str) -> dict:
		provider = self.registry.resolve(provider_name)
		rate = await provider.exchange_rate(from_currency, to_currency)

		return {
			'provider': provider.name,
			'from_currency': from_currency.upper(),
			'to_currency': to_currency.upper(),
			'rate': rate,
		}

	async def get_latest_rates(self, provider_name: str, base_currency: str) -> LatestRatesResult:
		provider = self.registry.resolve(provider_name)
		return await provider.latest_rates(base_currency)

	async def get_historical_rates(
		self, provider_name: str, base_currency: str, start_date: date, end_date: date
	) -> HistoricalRatesResult:
		provider = self.registry.resolve(provider_name)
		return await provider.historical_rates(base_currency, start_date, end_date)
