from fastapi import APIRouter, Depends

from src.system.dependencies import get_health_service
from src.system.schemas import HealthCheckResponse
from src.system.services import HealthService

router = APIRouter()


@router.get("/health/", response_model=HealthCheckResponse)
@router.head("/health/", response_model=HealthCheckResponse, include_in_schema=False)
async def check_health(
    health_service: HealthService = Depends(get_health_service),
) -> HealthCheckResponse:
    """Verifies the service and its database are reachable."""
    return await health_service.get_status()
