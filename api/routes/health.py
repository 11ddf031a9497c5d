from typing import Annotated

from fastapi import APIRouter, Depends

from api.dependencies import get_fetchers
from api.schemas import HealthResponse
from infrastructure.http.resilient_fetcher import ResilientFetcher

router = APIRouter(tags=['health'])


@router.get('/health', response_model=HealthResponse, summary='Upstream circuit status')
async def health(
	fetchers: Annotated[list[ResilientFetcher], Depends(get_fetchers)],
) -> HealthResponse:
	upstreams = [fetcher.get_status() for fetcher in fetchers]
	overall = 'healthy' if all(u['status'] == 'healthy' for u in upstreams) else 'degraded'
	return HealthResponse(status=overall, upstreams=upstreams)
