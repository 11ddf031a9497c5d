import httpx

from config.settings import Settings
from infrastructure.http.circuit_breaker import CircuitBreaker
from infrastructure.http.resilient_fetcher import ResilientFetcher


def create_upstream_fetcher(settings: Settings, name: str, base_url: str) -> ResilientFetcher:
    """Build a client pointed at ``base_url`` with the resilience policy attached."""
    client = httpx.AsyncClient(
        base_url=base_url,
        timeout=httpx.Timeout(settings.HTTP_TIMEOUT_SECONDS),
        headers={"accept": "application/json"},
        limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
    )
    breaker = CircuitBreaker(
        name=name,
        failure_threshold=settings.BREAKER_FAILURE_THRESHOLD,
        break_duration=settings.BREAKER_DURATION_SECONDS,
    )
    return ResilientFetcher(
        client=client,
        breaker=breaker,
        retry_count=settings.RETRY_COUNT,
        deadline=settings.REQUEST_DEADLINE_SECONDS,
    )
