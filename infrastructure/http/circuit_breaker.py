import asyncio
import logging
import threading
import time
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

from domain.exceptions.currency import CircuitOpenError

logger = logging.getLogger(__name__)


class CircuitState(Enum):
    CLOSED = "CLOSED"
    OPEN = "OPEN"
    HALF_OPEN = "HALF_OPEN"


class CircuitBreaker:
    """Circuit breaker shared by every call through one upstream client.

    CLOSED counts consecutive failures and opens at ``failure_threshold``.
    OPEN rejects calls without I/O until ``break_duration`` seconds pass,
    then HALF_OPEN admits a single trial call: success closes the circuit,
    failure opens it again with a fresh cool-down.
    """

    def __init__(
            self,
            name: str,
            failure_threshold: int = 5,
            break_duration: float = 30.0,
            clock: Callable[[], float] = time.monotonic,
    ):
        if failure_threshold < 1:
            raise ValueError("failure_threshold must be at least 1")

        self.name = name
        self.failure_threshold = failure_threshold
        self.break_duration = break_duration
        self._clock = clock

        self._lock = threading.Lock()
        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._opened_at: float | None = None
        self._trial_in_flight = False

    @property
    def state(self) -> CircuitState:
        with self._lock:
            return self._state

    @property
    def failure_count(self) -> int:
        with self._lock:
            return self._failure_count

    async def call(
            self,
            func: Callable[[], Awaitable[Any]],
            is_failure: Callable[[BaseException], bool] = lambda e: True,
    ) -> Any:
        """Execute function with circuit breaker protection"""
        is_trial = self._acquire()

        try:
            result = await func()
        except asyncio.CancelledError:
            self._release(is_trial)
            raise
        except Exception as e:
            if is_failure(e):
                self._on_failure(is_trial)
            else:
                # The upstream answered; only the request itself was rejected.
                self._on_success(is_trial)
            raise

        self._on_success(is_trial)
        return result

    def _acquire(self) -> bool:
        """Admit or reject a call. Returns True when it is the half-open trial."""
        transition = None
        with self._lock:
            now = self._clock()

            if self._state == CircuitState.OPEN:
                elapsed = now - self._opened_at
                if elapsed < self.break_duration:
                    raise CircuitOpenError(self.name, self._failure_count, self.break_duration - elapsed)
                transition = self._transition(CircuitState.HALF_OPEN, "cool_down_elapsed")

            if self._state == CircuitState.HALF_OPEN:
                if self._trial_in_flight:
                    raise CircuitOpenError(self.name, self._failure_count, 0.0)
                self._trial_in_flight = True
                is_trial = True
            else:
                is_trial = False

        self._log_transition(transition)
        return is_trial

    def _release(self, is_trial: bool) -> None:
        if is_trial:
            with self._lock:
                self._trial_in_flight = False

    def _on_success(self, is_trial: bool) -> None:
        transition = None
        with self._lock:
            if is_trial:
                self._trial_in_flight = False
                if self._state == CircuitState.HALF_OPEN:
                    self._failure_count = 0
                    transition = self._transition(CircuitState.CLOSED, "trial_call_succeeded")
            elif self._state == CircuitState.CLOSED:
                self._failure_count = 0
        self._log_transition(transition)

    def _on_failure(self, is_trial: bool) -> None:
        transition = None
        with self._lock:
            if is_trial:
                self._trial_in_flight = False
                if self._state == CircuitState.HALF_OPEN:
                    self._opened_at = self._clock()
                    transition = self._transition(CircuitState.OPEN, "trial_call_failed")
            elif self._state == CircuitState.CLOSED:
                self._failure_count += 1
                if self._failure_count >= self.failure_threshold:
                    self._opened_at = self._clock()
                    transition = self._transition(
                        CircuitState.OPEN, f"{self._failure_count}_consecutive_failures"
                    )
                else:
                    logger.warning(
                        f"Upstream failure for {self.name}: "
                        f"{self._failure_count}/{self.failure_threshold}"
                    )
        self._log_transition(transition)

    def _transition(self, new_state: CircuitState, reason: str) -> tuple[CircuitState, CircuitState, str]:
        # Caller holds the lock.
        old_state = self._state
        self._state = new_state
        return old_state, new_state, reason

    def _log_transition(self, transition: tuple[CircuitState, CircuitState, str] | None) -> None:
        if transition is None:
            return
        old_state, new_state, reason = transition
        level = logging.ERROR if new_state == CircuitState.OPEN else logging.INFO
        logger.log(
            level,
            f"Circuit breaker {self.name}: {old_state.value} -> {new_state.value} ({reason})",
            extra={"extra_data": {
                "upstream": self.name,
                "old_state": old_state.value,
                "new_state": new_state.value,
                "reason": reason,
                "event_type": "CIRCUIT_BREAKER",
            }},
        )

    def get_status(self) -> dict:
        """Get current circuit breaker status for monitoring"""
        with self._lock:
            state = self._state
            failure_count = self._failure_count

        return {
            "upstream": self.name,
            "state": state.value,
            "status": "healthy" if state == CircuitState.CLOSED else "unhealthy",
            "failure_count": failure_count,
            "failure_threshold": self.failure_threshold,
            "break_duration_seconds": self.break_duration,
        }
