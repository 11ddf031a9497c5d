import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from infrastructure.http.circuit_breaker import CircuitBreaker

logger = logging.getLogger(__name__)


def is_transient_error(exc: BaseException) -> bool:
    """Network failures, 5xx and 408 responses are worth retrying.

    An expired call deadline (builtin ``TimeoutError``) is also an upstream
    failure; it is raised outside the retry loop so it is never retried.
    """
    if isinstance(exc, TimeoutError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        status_code = exc.response.status_code
        return status_code == 408 or status_code >= 500
    return isinstance(exc, httpx.TransportError)


class ResilientFetcher:
    """Outbound GETs to one upstream: retry inside a circuit breaker.

    A request that exhausts its retries counts as a single breaker failure.
    The deadline covers every attempt and every backoff sleep; when it
    expires the builtin ``TimeoutError`` is raised and counted as a breaker
    failure, so a hung upstream still opens the circuit. Cancellation by the
    caller is not counted.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        breaker: CircuitBreaker,
        retry_count: int = 3,
        deadline: float | None = 60.0,
        backoff_multiplier: float = 2.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.client = client
        self.breaker = breaker
        self.retry_count = retry_count
        self.deadline = deadline
        self.backoff_multiplier = backoff_multiplier
        self._sleep = sleep

    @property
    def name(self) -> str:
        return self.breaker.name

    async def get(
        self, path: str, params: dict[str, Any] | None = None, deadline: float | None = None
    ) -> httpx.Response:
        timeout = deadline if deadline is not None else self.deadline
        return await self.breaker.call(
            lambda: self._get_within_deadline(path, params or {}, timeout),
            is_failure=is_transient_error,
        )

    async def _get_within_deadline(
        self, path: str, params: dict[str, Any], timeout: float | None
    ) -> httpx.Response:
        async with asyncio.timeout(timeout):
            return await self._get_with_retry(path, params)

    async def _get_with_retry(self, path: str, params: dict[str, Any]) -> httpx.Response:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.retry_count + 1),
            # multiplier * 2 ** (attempt - 1) == 2 ** attempt for the default multiplier
            wait=wait_exponential(multiplier=self.backoff_multiplier, exp_base=2),
            retry=retry_if_exception(is_transient_error),
            before_sleep=self._log_retry,
            sleep=self._sleep,
            reraise=True,
        )

        async for attempt in retrying:
            with attempt:
                response = await self.client.get(path, params=params)
                response.raise_for_status()
        return response

    def _log_retry(self, retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        wait = retry_state.next_action.sleep if retry_state.next_action else 0
        logger.warning(
            f"Retry {retry_state.attempt_number} for {self.name} after {wait} seconds due to {exc}",
            extra={"extra_data": {
                "upstream": self.name,
                "attempt": retry_state.attempt_number,
                "wait_seconds": wait,
                "error": str(exc),
                "event_type": "API_CALL",
            }},
        )

    def get_status(self) -> dict:
        return self.breaker.get_status()

    async def close(self) -> None:
        await self.client.aclose()
