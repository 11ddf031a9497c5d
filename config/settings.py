from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	# Upstream
	FRANKFURTER_BASE_URL: str = 'https://api.frankfurter.dev/v1/'
	HTTP_TIMEOUT_SECONDS: float = 10.0
	REQUEST_DEADLINE_SECONDS: float = 60.0

	# Business rules
	BAD_CURRENCIES: str = 'TRY,PLN,THB,MXN'

	# Resilience
	RETRY_COUNT: int = 3
	BREAKER_FAILURE_THRESHOLD: int = 5
	BREAKER_DURATION_SECONDS: float = 30.0

	# Cache
	CACHE_BACKEND: str = 'redis'
	REDIS_URL: str = 'redis://localhost:6379'
	CACHE_SIZE_LIMIT: int = 1024

	# Application
	APP_NAME: str = 'Currency Converter API'
	LOG_LEVEL: str = 'INFO'
	LOG_JSON: bool = False
	LOG_DIRECTORY: str | None = None

	model_config = SettingsConfigDict(env_file='.env', case_sensitive=False, extra='ignore')

	@model_validator(mode='after')
	def check_deadline_covers_retries(self) -> 'Settings':
		if self.REQUEST_DEADLINE_SECONDS < self.worst_case_call_seconds:
			raise ValueError(
				f'REQUEST_DEADLINE_SECONDS ({self.REQUEST_DEADLINE_SECONDS}) is shorter than the '
				f'worst-case retry sequence ({self.worst_case_call_seconds})'
			)
		return self

	@property
	def worst_case_call_seconds(self) -> float:
		# Every attempt times out, with 2, 4, 8 ... seconds of backoff between them.
		backoff = sum(2 ** attempt for attempt in range(1, self.RETRY_COUNT + 1))
		return (self.RETRY_COUNT + 1) * self.HTTP_TIMEOUT_SECONDS + backoff

	@property
	def bad_currencies(self) -> frozenset[str]:
		return frozenset(
			code.strip().upper() for code in self.BAD_CURRENCIES.split(',') if code.strip()
		)


@lru_cache
def get_settings() -> Settings:
	return Settings()
