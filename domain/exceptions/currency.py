class CurrencyException(Exception):
    pass


class InvalidRequestError(CurrencyException):
    """Caller supplied bad input. Never retried."""
    pass


class NotFoundError(CurrencyException):
    def __init__(self, provider_name: str | None):
        self.provider_name = provider_name
        super().__init__(f"Currency provider '{provider_name}' not found")


class UnsupportedOperationError(CurrencyException):
    def __init__(self, provider_name: str, operation: str):
        self.provider_name = provider_name
        self.operation = operation
        super().__init__(f"{provider_name} does not support {operation}")


class CacheError(CurrencyException):
    pass


class UpstreamError(CurrencyException):
    pass


class MalformedResponseError(UpstreamError):
    pass


class UpstreamTimeoutError(UpstreamError):
    pass


class CircuitOpenError(UpstreamError):
    """Raised when circuit breaker is open and blocking calls"""
    def __init__(self, upstream_name: str, failure_count: int, retry_after: float):
        self.upstream_name = upstream_name
        self.failure_count = failure_count
        self.retry_after = retry_after
        super().__init__(f"Circuit breaker OPEN for {upstream_name} ({failure_count} failures)")
