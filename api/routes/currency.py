from datetime import date
from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status

from api.dependencies import get_conversion_service, get_rate_service, get_registry
from api.schemas import (
	ConversionResponse,
	ExchangeRateResponse,
	HistoricalRatesResponse,
	LatestRatesResponse,
	ProvidersResponse,
)
from application.services import ConversionService, ProviderRegistry, RateService

router = APIRouter(prefix='/api', tags=['currency'])

ProviderName = Annotated[str, Path(description='Registered provider name, exact match')]
CurrencyCode = Annotated[str, Query(min_length=3, max_length=3)]


@router.get(
	'/providers',
	response_model=ProvidersResponse,
	status_code=status.HTTP_200_OK,
	summary='List registered providers',
)
async def list_providers(
	registry: Annotated[ProviderRegistry, Depends(get_registry)],
) -> ProvidersResponse:
	return ProvidersResponse(providers=registry.names())


@router.get(
	'/exchange-rate/{provider}',
	response_model=ExchangeRateResponse,
	status_code=status.HTTP_200_OK,
	summary='Get current exchange rate',
)
async def get_exchange_rate(
	provider: ProviderName,
	from_currency: Annotated[str, Query(alias='from', min_length=3, max_length=3)],
	to_currency: Annotated[str, Query(alias='to', min_length=3, max_length=3)],
	service: Annotated[RateService, Depends(get_rate_service)],
) -> ExchangeRateResponse:
	result = await service.get_rate(provider, from_currency, to_currency)
	return ExchangeRateResponse(**result)


@router.get(
	'/convert/{provider}',
	response_model=ConversionResponse,
	status_code=status.HTTP_200_OK,
	summary='Convert currency amount',
)
async def convert_currency(
	provider: ProviderName,
	amount: Annotated[Decimal, Query()],
	from_currency: Annotated[str, Query(alias='from', min_length=3, max_length=3)],
	to_currency: Annotated[str, Query(alias='to', min_length=3, max_length=3)],
	service: Annotated[ConversionService, Depends(get_conversion_service)],
) -> ConversionResponse:
	result = await service.convert(provider, amount, from_currency, to_currency)
	return ConversionResponse(**result)


@router.get(
	'/latest-exchange-rates/{provider}',
	response_model=LatestRatesResponse,
	status_code=status.HTTP_200_OK,
	summary='Get latest rates for a base currency',
)
async def get_latest_rates(
	provider: ProviderName,
	currency: CurrencyCode,
	service: Annotated[RateService, Depends(get_rate_service)],
) -> LatestRatesResponse:
	result = await service.get_latest_rates(provider, currency)
	return LatestRatesResponse(
		provider=provider,
		base=result.base,
		as_of=result.as_of,
		amount=result.amount,
		rates=result.rates,
	)


@router.get(
	'/historical-exchange-rates/{provider}',
	response_model=HistoricalRatesResponse,
	status_code=status.HTTP_200_OK,
	summary='Get rates for a base currency over an inclusive date range',
)
async def get_historical_rates(
	provider: ProviderName,
	currency: CurrencyCode,
	start_date: Annotated[date, Query(alias='from')],
	end_date: Annotated[date, Query(alias='to')],
	service: Annotated[RateService, Depends(get_rate_service)],
) -> HistoricalRatesResponse:
	result = await service.get_historical_rates(provider, currency, start_date, end_date)
	return HistoricalRatesResponse(
		provider=provider,
		base=result.base,
		start_date=result.start_date,
		end_date=result.end_date,
		amount=result.amount,
		rates=result.rates,
	)
