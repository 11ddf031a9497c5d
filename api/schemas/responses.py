from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class ProvidersResponse(BaseModel):
	providers: list[str] = Field(description='Registered provider names')

	model_config = ConfigDict(
		json_schema_extra={'examples': [{'providers': ['EuropeanCentralBank', 'Frankfurter']}]}
	)


class ExchangeRateResponse(BaseModel):
	provider: str = Field(..., description='Provider that supplied the rate')
	from_currency: str = Field(..., description='Source currency code')
	to_currency: str = Field(..., description='Target currency code')
	rate: Decimal = Field(..., description='Exchange rate')

	model_config = ConfigDict(
		json_schema_extra={
			'example': {
				'provider': 'Frankfurter',
				'from_currency': 'USD',
				'to_currency': 'EUR',
				'rate': 0.8550,
			}
		}
	)


class ConversionResponse(BaseModel):
	provider: str = Field(..., description='Provider that supplied the rate')
	from_currency: str = Field(..., description='Source currency code')
	to_currency: str = Field(..., description='Target currency code')
	original_amount: Decimal = Field(..., description='Original amount requested')
	converted_amount: Decimal = Field(..., description='Converted amount')

	model_config = ConfigDict(
		json_schema_extra={
			'example': {
				'provider': 'Frankfurter',
				'from_currency': 'USD',
				'to_currency': 'EUR',
				'original_amount': 100.00,
				'converted_amount': 85.50,
			}
		}
	)


class LatestRatesResponse(BaseModel):
	provider: str
	base: str
	as_of: date
	amount: Decimal
	rates: dict[str, Decimal]


class HistoricalRatesResponse(BaseModel):
	provider: str
	base: str
	start_date: date
	end_date: date
	amount: Decimal
	rates: dict[str, dict[str, Decimal]] = Field(description='Rates keyed by ISO date')


class HealthResponse(BaseModel):
	status: str
	upstreams: list[dict]
