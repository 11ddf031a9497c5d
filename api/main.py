import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from api.dependencies import cleanup_dependencies, init_dependencies
from api.error_handlers import register_exception_handlers
from api.routes import currency, health
from config.settings import get_settings
from infrastructure.monitoring.logger import setup_logging

settings = get_settings()

setup_logging(
	level=settings.LOG_LEVEL,
	json_logs=settings.LOG_JSON,
	log_directory=settings.LOG_DIRECTORY,
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
	logger.info('Starting Currency Converter API...')

	init_dependencies(settings)

	logger.info('Application ready')

	yield

	logger.info('Shutting down...')
	await cleanup_dependencies()


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
	logger.error(f'Unhandled exception: {exc}', exc_info=True)
	return JSONResponse(status_code=500, content={'detail': 'Internal server error'})


@app.get('/')
async def root() -> str:
	return f'Welcome to {settings.APP_NAME}.'


app.include_router(currency.router)
app.include_router(health.router)
register_exception_handlers(app)
