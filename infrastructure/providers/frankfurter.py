import logging
from collections.abc import Callable, Iterable
from datetime import date, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any

import httpx

from domain.exceptions.currency import (
	MalformedResponseError,
	UpstreamError,
	UpstreamTimeoutError,
)
from domain.models.currency import HistoricalRatesResult, LatestRatesResult
from domain.validation import check_currency_pair, check_date_range, normalize_currency
from infrastructure.cache.rate_cache import RateCache
from infrastructure.cache.store import CacheEntryOptions, CacheItemPriority
from infrastructure.http.resilient_fetcher import ResilientFetcher
from infrastructure.providers.base import convert_amount

logger = logging.getLogger(__name__)


def _to_decimal(value: Any) -> Decimal:
	if isinstance(value, bool) or value is None:
		raise ValueError(f'Not a rate: {value!r}')
	try:
		return Decimal(str(value))
	except InvalidOperation as e:
		raise ValueError(f'Not a rate: {value!r}') from e


class FrankfurterProvider:
	RATE_CACHE_OPTIONS = CacheEntryOptions(
		absolute_expiration=timedelta(hours=1),
		sliding_expiration=timedelta(minutes=15),
		priority=CacheItemPriority.NORMAL,
	)

	def __init__(
		self,
		fetcher: ResilientFetcher,
		rate_cache: RateCache,
		bad_currencies: Iterable[str] = (),
		today: Callable[[], date] = date.today,
	):
		self.fetcher = fetcher
		self.rate_cache = rate_cache
		self.bad_currencies = frozenset(bad_currencies)
		self._today = today

	@property
	def name(self) -> str:
		return 'Frankfurter'

	async def _request(self, path: str, params: dict[str, Any], context: str) -> dict[str, Any]:
		try:
			response = await self.fetcher.get(path, params)
			data = response.json()
		except (TimeoutError, httpx.TimeoutException) as e:
			logger.error(f'Frankfurter API request timed out for {context}')
			raise UpstreamTimeoutError(f'Frankfurter API request timed out for {context}') from e
		except httpx.HTTPStatusError as e:
			logger.error(f'Frankfurter HTTP error {e.response.status_code} for {context}')
			raise UpstreamError(
				f'Frankfurter HTTP error {e.response.status_code} for {context}: {e.response.text[:200]}'
			) from e
		except httpx.RequestError as e:
			logger.error(f'Error calling Frankfurter API for {context}: {e.__class__.__name__}')
			raise UpstreamError(
				f'Frankfurter request failed for {context}: {e.__class__.__name__}'
			) from e
		except ValueError as e:
			logger.error(f'Unparseable Frankfurter response for {context}: {e}')
			raise MalformedResponseError(f'Frankfurter response parsing error for {context}') from e

		logger.info(
			f'Response from Frankfurter API for {context}',
			extra={'extra_data': {'path': path, 'params': params, 'response': data}},
		)
		if not isinstance(data, dict):
			raise MalformedResponseError(f'Unexpected Frankfurter payload for {context}')
		return data

	async def exchange_rate(self, from_currency: str, to_currency: str) -> Decimal:
		error = check_currency_pair(from_currency, to_currency, self.bad_currencies)
		if error:
			logger.error(f'Bad currency {from_currency} to {to_currency}')
			raise error

		from_currency = normalize_currency(from_currency)
		to_currency = normalize_currency(to_currency)

		cached = await self.exchange_rate_from_cache(from_currency, to_currency)
		if cached is not None:
			return cached

		pair = f'{from_currency} to {to_currency}'
		data = await self._request(
			self._today().isoformat(), {'base': from_currency, 'symbols': to_currency}, pair
		)

		try:
			rates = data['rates']
			raw_rate = rates.get(to_currency)
			rate = _to_decimal(raw_rate) if raw_rate is not None else None
		except (KeyError, AttributeError, ValueError) as e:
			raise MalformedResponseError(f"Frankfurter doesn't support {pair}") from e

		if rate is None:
			logger.warning(f'Frankfurter response has no {to_currency} rate for {pair}')
			return Decimal('0')

		if await self.rate_cache.set_rate(
			self.name, from_currency, to_currency, rate, self.RATE_CACHE_OPTIONS
		):
			logger.info(f'Successfully fetched and cached rate for {pair}')
		return rate

	async def exchange_rate_from_cache(self, from_currency: str, to_currency: str) -> Decimal | None:
		return await self.rate_cache.get_rate(
			self.name, normalize_currency(from_currency), normalize_currency(to_currency)
		)

	async def convert(self, amount: Decimal, from_currency: str, to_currency: str) -> Decimal:
		return await convert_amount(self, amount, from_currency, to_currency)

	async def latest_rates(self, base_currency: str) -> LatestRatesResult:
		base_currency = normalize_currency(base_currency)
		data = await self._request('latest', {'base': base_currency}, f'latest {base_currency}')

		try:
			return LatestRatesResult(
				base=data['base'],
				as_of=date.fromisoformat(data['date']),
				rates={code: _to_decimal(rate) for code, rate in data['rates'].items()},
				amount=_to_decimal(data.get('amount', 1)),
			)
		except (KeyError, AttributeError, TypeError, ValueError) as e:
			raise MalformedResponseError(
				f'Unexpected Frankfurter latest payload for {base_currency}: {e}'
			) from e

	async def historical_rates(
		self, base_currency: str, start_date: date, end_date: date
	) -> HistoricalRatesResult:
		error = check_date_range(start_date, end_date)
		if error:
			raise error

		base_currency = normalize_currency(base_currency)
		context = f'{base_currency} {start_date}..{end_date}'
		data = await self._request(
			f'{start_date.isoformat()}..{end_date.isoformat()}', {'base': base_currency}, context
		)

		try:
			return HistoricalRatesResult(
				base=data['base'],
				start_date=date.fromisoformat(data['start_date']),
				end_date=date.fromisoformat(data['end_date']),
				rates={
					day: {code: _to_decimal(rate) for code, rate in day_rates.items()}
					for day, day_rates in data['rates'].items()
				},
				amount=_to_decimal(data.get('amount', 1)),
			)
		except (KeyError, AttributeError, TypeError, ValueError) as e:
			raise MalformedResponseError(
				f'Unexpected Frankfurter history payload for {context}: {e}'
			) from e

	async def close(self) -> None:
		await self.fetcher.close()
