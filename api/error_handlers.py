import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from domain.exceptions.currency import (
	CircuitOpenError,
	InvalidRequestError,
	NotFoundError,
	UnsupportedOperationError,
	UpstreamError,
	UpstreamTimeoutError,
)

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
	@app.exception_handler(InvalidRequestError)
	async def invalid_request_handler(request: Request, exc: InvalidRequestError):
		return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={'detail': str(exc)})

	@app.exception_handler(NotFoundError)
	async def not_found_handler(request: Request, exc: NotFoundError):
		return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={'detail': str(exc)})

	@app.exception_handler(UnsupportedOperationError)
	async def unsupported_operation_handler(request: Request, exc: UnsupportedOperationError):
		return JSONResponse(status_code=status.HTTP_501_NOT_IMPLEMENTED, content={'detail': str(exc)})

	@app.exception_handler(CircuitOpenError)
	async def circuit_open_handler(request: Request, exc: CircuitOpenError):
		logger.warning(f'Upstream circuit open: {exc}')
		return JSONResponse(
			status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
			content={'detail': 'Exchange rate service unavailable'},
			headers={'Retry-After': str(max(1, round(exc.retry_after)))},
		)

	@app.exception_handler(UpstreamTimeoutError)
	async def upstream_timeout_handler(request: Request, exc: UpstreamTimeoutError):
		logger.error(f'Upstream timeout: {exc}')
		return JSONResponse(
			status_code=status.HTTP_504_GATEWAY_TIMEOUT,
			content={'detail': 'Exchange rate service timed out'},
		)

	@app.exception_handler(UpstreamError)
	async def upstream_error_handler(request: Request, exc: UpstreamError):
		logger.error(f'Provider error: {exc}')
		return JSONResponse(
			status_code=status.HTTP_502_BAD_GATEWAY,
			content={'detail': str(exc)},
		)
