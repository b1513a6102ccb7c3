"""Health check endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter

from puantaj_service.pipeline.endpoint import RequestContext, endpoint
from puantaj_service.rest.schemas import HealthResponse
from puantaj_service.settings import settings

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(ctx: RequestContext = endpoint(auth=False)) -> HealthResponse:
    return HealthResponse(
        status="OK",
        timestamp=datetime.now(UTC),
        environment=settings.environment,
    )


@router.get("/health/ready")
async def ready(ctx: RequestContext = endpoint(auth=False)) -> dict[str, str]:
    return {"status": "ready"}
