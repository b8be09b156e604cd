"""
Dashboard API - the month at a glance: plan, profit at target and progress to date
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import date
from typing import Optional

from growth_backend.database import get_db
from growth_backend.repositories.growth_repository import SqlGrowthRepository
from growth_backend.services.dashboard_service import build_month_summary
from growth_backend.utils import validators
from growth_backend.utils.helpers import month_bounds, month_name

router = APIRouter()


async def load_month_summary(db: AsyncSession, month: str, year: int) -> dict:
    repository = SqlGrowthRepository(db)
    start, end = month_bounds(month, year)
    budget_entries = await repository.list_budget_entries(month, year)
    ad_products = await repository.list_ad_product_entries(month, year)
    targets = await repository.list_selling_targets(start=start, end=end)
    return build_month_summary(budget_entries, ad_products, targets, month, year)


@router.get("/summary")
async def get_dashboard_summary(
    month: Optional[str] = None,
    year: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
):
    """Month summary; defaults to the current month"""
    today = date.today()
    month = month or month_name(today.month)
    year = year or today.year
    try:
        validators.validate_month(month)
        validators.validate_year(year)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return await load_month_summary(db, month, year)
