from decimal import Decimal

from application.services.provider_registry import ProviderRegistry


class ConversionService:
	def __init__(self, registry: ProviderRegistry):
		self.registry = registry

	async def convert(
		self, provider_name: str, amount: Decimal, from_currency: str, to_currency: str
	) -> dict:
		provider = self.registry.resolve(provider_name)

		converted_amount = await provider.convert(amount, from_currency, to_currency)

		return {
			'provider': provider.name,
			'from_currency': from_currency.upper(),
			'to_currency': to_currency.upper(),
			'original_amount': amount,
			'converted_amount': converted_amount,
		}
