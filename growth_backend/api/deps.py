"""
Shared API dependencies
"""
from fastapi import Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from growth_backend.database import get_db
from growth_backend.repositories.growth_repository import SqlGrowthRepository
from growth_backend.services.planning_service import PlanningService, RecomputeError


async def get_planning_service(db: AsyncSession = Depends(get_db)) -> PlanningService:
    return PlanningService(SqlGrowthRepository(db))


def recompute_failed(error: RecomputeError) -> HTTPException:
    """Nothing was written; the client may retry the same request"""
    return HTTPException(
        status_code=503,
        detail={
            "message": str(error),
            "operation": error.operation,
            "periods": [{"month": m, "year": y} for m, y in error.periods],
        },
    )
