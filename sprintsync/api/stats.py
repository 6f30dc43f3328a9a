"""Admin statistics API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from sprintsync.api.dependencies import get_stats_service, require_admin
from sprintsync.schemas.stats import PlatformStatsResponse, TopUsersResponse
from sprintsync.services.access import Caller
from sprintsync.services.stats import StatsService

router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.get("/top-users", response_model=TopUsersResponse)
def get_top_users(
    _admin: Annotated[Caller, Depends(require_admin)],
    service: Annotated[StatsService, Depends(get_stats_service)],
):
    """Get top users by time logged (admin only)."""
    return service.top_users()


@router.get("/platform", response_model=PlatformStatsResponse)
def get_platform_stats(
    _admin: Annotated[Caller, Depends(require_admin)],
    service: Annotated[StatsService, Depends(get_stats_service)],
):
    """Get platform-wide statistics (admin only)."""
    return service.platform_stats()
