"""
Growth Coach API - pace check and next actions for a month
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import date
from typing import Optional
from pydantic import BaseModel, field_validator

from growth_backend.database import get_db
from growth_backend.config import get_settings
from growth_backend.agents.growth_coach.agent import GrowthCoachAgent
from growth_backend.api.dashboard import load_month_summary
from growth_backend.utils import validators
from growth_backend.utils.helpers import month_name

router = APIRouter()
settings = get_settings()


class CoachRequest(BaseModel):
    month: Optional[str] = None
    year: Optional[int] = None
    language: Optional[str] = None

    @field_validator("month")
    @classmethod
    def check_month(cls, v):
        return v if v is None else validators.validate_month(v)

    @field_validator("year")
    @classmethod
    def check_year(cls, v):
        return v if v is None else validators.validate_year(v)


@router.post("/advice")
async def get_growth_advice(
    request: CoachRequest,
    db: AsyncSession = Depends(get_db),
):
    """AI advice when Claude is configured, heuristic advice otherwise"""
    today = date.today()
    month = request.month or month_name(today.month)
    year = request.year or today.year

    summary = await load_month_summary(db, month, year)
    agent = GrowthCoachAgent()
    advice = await agent.process({
        "summary": summary,
        "language": request.language or settings.COACH_LANGUAGE,
    })
    return {"month": month, "year": year, **advice}
