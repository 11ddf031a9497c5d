import asyncio
from unittest.mock import AsyncMock

import httpx
import pytest
import pytest_asyncio

from domain.exceptions.currency import CircuitOpenError
from infrastructure.http.circuit_breaker import CircuitBreaker, CircuitState
from infrastructure.http.resilient_fetcher import is_transient_error
from tests.helpers import make_response


class TestCircuitBreakerClosedState:
    """Behaviour while the circuit is healthy"""

    @pytest.fixture
    def breaker(self, clock):
        return CircuitBreaker(name="TestUpstream", failure_threshold=3, break_duration=30.0, clock=clock)

    def test_rejects_non_positive_threshold(self):
        with pytest.raises(ValueError):
            CircuitBreaker(name="TestUpstream", failure_threshold=0)

    @pytest.mark.asyncio
    async def test_successful_call_returns_result(self, breaker):
        async def successful_api_call():
            return "Success!"

        result = await breaker.call(successful_api_call)

        assert result == "Success!"
        assert breaker.state == CircuitState.CLOSED
        assert breaker.failure_count == 0

    @pytest.mark.asyncio
    async def test_failure_below_threshold_stays_closed(self, breaker):
        failing = AsyncMock(side_effect=httpx.ConnectError("boom"))

        for _ in range(2):
            with pytest.raises(httpx.ConnectError):
                await breaker.call(failing)

        assert breaker.state == CircuitState.CLOSED
        assert breaker.failure_count == 2

    @pytest.mark.asyncio
    async def test_success_resets_failure_count(self, breaker):
        failing = AsyncMock(side_effect=httpx.ConnectError("boom"))
        with pytest.raises(httpx.ConnectError):
            await breaker.call(failing)

        await breaker.call(AsyncMock(return_value="ok"))

        assert breaker.failure_count == 0

    @pytest.mark.asyncio
    async def test_opens_at_threshold(self, breaker):
        failing = AsyncMock(side_effect=httpx.ConnectError("boom"))

        for _ in range(3):
            with pytest.raises(httpx.ConnectError):
                await breaker.call(failing)

        assert breaker.state == CircuitState.OPEN
        assert breaker.get_status()["status"] == "unhealthy"

    @pytest.mark.asyncio
    async def test_non_failure_exception_counts_as_success(self, breaker):
        not_found = httpx.HTTPStatusError(
            "Not Found", request=httpx.Request("GET", "https://x"), response=make_response(404)
        )
        failing = AsyncMock(side_effect=not_found)

        for _ in range(5):
            with pytest.raises(httpx.HTTPStatusError):
                await breaker.call(failing, is_failure=is_transient_error)

        assert breaker.state == CircuitState.CLOSED
        assert breaker.failure_count == 0


class TestCircuitBreakerOpenState:

    @pytest_asyncio.fixture
    async def open_breaker(self, clock):
        breaker = CircuitBreaker(name="TestUpstream", failure_threshold=2, break_duration=30.0, clock=clock)
        failing = AsyncMock(side_effect=httpx.ConnectError("boom"))
        for _ in range(2):
            with pytest.raises(httpx.ConnectError):
                await breaker.call(failing)
        assert breaker.state == CircuitState.OPEN
        return breaker

    @pytest.mark.asyncio
    async def test_open_circuit_rejects_without_calling(self, open_breaker, clock):
        func = AsyncMock(return_value="ok")
        clock.advance(10)

        with pytest.raises(CircuitOpenError) as exc_info:
            await open_breaker.call(func)

        func.assert_not_called()
        assert exc_info.value.upstream_name == "TestUpstream"
        assert exc_info.value.retry_after == pytest.approx(20.0)
        assert "Circuit breaker OPEN for TestUpstream" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_successful_trial_closes_circuit(self, open_breaker, clock):
        clock.advance(30)

        result = await open_breaker.call(AsyncMock(return_value="recovered"))

        assert result == "recovered"
        assert open_breaker.state == CircuitState.CLOSED
        assert open_breaker.failure_count == 0

    @pytest.mark.asyncio
    async def test_failed_trial_reopens_with_fresh_cool_down(self, open_breaker, clock):
        clock.advance(30)

        with pytest.raises(httpx.ConnectError):
            await open_breaker.call(AsyncMock(side_effect=httpx.ConnectError("still down")))

        assert open_breaker.state == CircuitState.OPEN

        clock.advance(29)
        with pytest.raises(CircuitOpenError):
            await open_breaker.call(AsyncMock(return_value="ok"))

    @pytest.mark.asyncio
    async def test_only_one_trial_admitted_while_half_open(self, open_breaker, clock):
        clock.advance(30)
        release = asyncio.Event()

        async def slow_trial():
            await release.wait()
            return "trial"

        trial = asyncio.create_task(open_breaker.call(slow_trial))
        await asyncio.sleep(0)
        assert open_breaker.state == CircuitState.HALF_OPEN

        other = AsyncMock(return_value="other")
        with pytest.raises(CircuitOpenError):
            await open_breaker.call(other)
        other.assert_not_called()

        release.set()
        assert await trial == "trial"
        assert open_breaker.state == CircuitState.CLOSED

    @pytest.mark.asyncio
    async def test_cancelled_trial_frees_the_slot(self, open_breaker, clock):
        clock.advance(30)

        async def hanging():
            await asyncio.Event().wait()

        trial = asyncio.create_task(open_breaker.call(hanging))
        await asyncio.sleep(0)
        trial.cancel()
        with pytest.raises(asyncio.CancelledError):
            await trial

        assert open_breaker.state == CircuitState.HALF_OPEN
        assert await open_breaker.call(AsyncMock(return_value="ok")) == "ok"
        assert open_breaker.state == CircuitState.CLOSED


def test_get_status_reports_configuration(clock):
    breaker = CircuitBreaker(name="Frankfurter", failure_threshold=5, break_duration=30.0, clock=clock)

    assert breaker.get_status() == {
        "upstream": "Frankfurter",
        "state": "CLOSED",
        "status": "healthy",
        "failure_count": 0,
        "failure_threshold": 5,
        "break_duration_seconds": 30.0,
    }
