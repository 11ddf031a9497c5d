from .responses import (
	ConversionResponse,
	ExchangeRateResponse,
	HealthResponse,
	HistoricalRatesResponse,
	LatestRatesResponse,
	ProvidersResponse,
)

__all__ = [
	'ConversionResponse',
	'ExchangeRateResponse',
	'HealthResponse',
	'HistoricalRatesResponse',
	'LatestRatesResponse',
	'ProvidersResponse',
]
