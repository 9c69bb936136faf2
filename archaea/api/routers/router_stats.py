from fastapi import APIRouter, Depends

from archaea.api.dependencies import get_context, get_stats_service
from archaea.api.schemas import HealthResponse
from archaea.core.context import ApplicationContext
from archaea.stats.service import DashboardStatsService

router_stats = APIRouter()


@router_stats.get("/stats")
def dashboard_stats(service: DashboardStatsService = Depends(get_stats_service)):
    return service.get_stats().to_dict()


@router_stats.get("/health", response_model=HealthResponse)
def health(context: ApplicationContext = Depends(get_context)):
    ok = context.db.test_connection()
    return HealthResponse(status="ok" if ok else "degraded", database=ok)
