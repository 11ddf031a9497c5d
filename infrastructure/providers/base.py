from datetime import date
from decimal import Decimal
from typing import Protocol, runtime_checkable

from domain.models.currency import HistoricalRatesResult, LatestRatesResult
from domain.validation import check_amount


@runtime_checkable
class CurrencyProvider(Protocol):
    """Capability set every rate provider exposes."""

    @property
    def name(self) -> str:
        ...

    async def exchange_rate(self, from_currency: str, to_currency: str) -> Decimal:
        ...

    async def exchange_rate_from_cache(self, from_currency: str, to_currency: str) -> Decimal | None:
        ...

    async def convert(self, amount: Decimal, from_currency: str, to_currency: str) -> Decimal:
        ...

    async def latest_rates(self, base_currency: str) -> LatestRatesResult:
        ...

    async def historical_rates(
        self, base_currency: str, start_date: date, end_date: date
    ) -> HistoricalRatesResult:
        ...

    async def close(self) -> None:
        ...


async def convert_amount(
    provider: CurrencyProvider, amount: Decimal, from_currency: str, to_currency: str
) -> Decimal:
    """Shared conversion: validate the amount, then apply the provider's rate."""
    error = check_amount(amount)
    if error:
        raise error

    rate = await provider.exchange_rate(from_currency, to_currency)
    return amount * rate
