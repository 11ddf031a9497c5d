import logging
from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from domain.exceptions.currency import UnsupportedOperationError
from domain.models.currency import HistoricalRatesResult, LatestRatesResult
from domain.validation import check_currency_pair
from infrastructure.providers.base import convert_amount

logger = logging.getLogger(__name__)


class EuropeanCentralBankProvider:
	"""Synthetic provider with a fixed rate. No upstream, no cache."""

	FIXED_RATE = Decimal('100')

	def __init__(self, bad_currencies: Iterable[str] = ()):
		self.bad_currencies = frozenset(bad_currencies)

	@property
	def name(self) -> str:
		return 'EuropeanCentralBank'

	async def exchange_rate(self, from_currency: str, to_currency: str) -> Decimal:
		error = check_currency_pair(from_currency, to_currency, self.bad_currencies)
		if error:
			logger.error(f'Bad currency {from_currency} to {to_currency}')
			raise error
		return self.FIXED_RATE

	async def exchange_rate_from_cache(self, from_currency: str, to_currency: str) -> Decimal | None:
		raise UnsupportedOperationError(self.name, 'cached exchange rates')

	async def convert(self, amount: Decimal, from_currency: str, to_currency: str) -> Decimal:
		return await convert_amount(self, amount, from_currency, to_currency)

	async def latest_rates(self, base_currency: str) -> LatestRatesResult:
		raise UnsupportedOperationError(self.name, 'latest rates')

	async def historical_rates(
		self, base_currency: str, start_date: date, end_date: date
	) -> HistoricalRatesResult:
		raise UnsupportedOperationError(self.name, 'historical rates')

	async def close(self) -> None:
		pass
