"""
Budget API endpoints - monthly spend lines; every change re-splits the month
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List, Optional
from pydantic import BaseModel, field_validator
from datetime import datetime

from growth_backend.database import get_db
from growth_backend.config import get_settings
from growth_backend.models.budget_entry import BudgetEntry
from growth_backend.api.deps import get_planning_service, recompute_failed
from growth_backend.services.planning_service import PlanningService, RecomputeError
from growth_backend.utils import validators

router = APIRouter()
settings = get_settings()


# --- Pydantic Schemas ---

class BudgetEntryResponse(BaseModel):
    id: int
    month: str
    year: int
    expense_type: str
    amount: float
    currency: str
    note: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BudgetEntryCreate(BaseModel):
    month: str
    year: int
    expense_type: str
    amount: float
    currency: str = settings.DEFAULT_CURRENCY
    note: str = ""

    @field_validator("month")
    @classmethod
    def check_month(cls, v):
        return validators.validate_month(v)

    @field_validator("year")
    @classmethod
    def check_year(cls, v):
        return validators.validate_year(v)

    @field_validator("expense_type")
    @classmethod
    def check_expense_type(cls, v):
        return validators.validate_expense_type(v)

    @field_validator("amount")
    @classmethod
    def check_amount(cls, v):
        return validators.validate_budget_amount(v)

    @field_validator("currency")
    @classmethod
    def check_currency(cls, v):
        return validators.validate_currency(v)


class BudgetEntryUpdate(BaseModel):
    month: Optional[str] = None
    year: Optional[int] = None
    expense_type: Optional[str] = None
    amount: Optional[float] = None
    currency: Optional[str] = None
    note: Optional[str] = None

    @field_validator("month")
    @classmethod
    def check_month(cls, v):
        return v if v is None else validators.validate_month(v)

    @field_validator("year")
    @classmethod
    def check_year(cls, v):
        return v if v is None else validators.validate_year(v)

    @field_validator("expense_type")
    @classmethod
    def check_expense_type(cls, v):
        return v if v is None else validators.validate_expense_type(v)

    @field_validator("amount")
    @classmethod
    def check_amount(cls, v):
        return v if v is None else validators.validate_budget_amount(v)

    @field_validator("currency")
    @classmethod
    def check_currency(cls, v):
        return v if v is None else validators.validate_currency(v)


class BudgetMutationResponse(BaseModel):
    entry: Optional[BudgetEntryResponse] = None
    recompute: List[dict]


# --- Endpoints ---

@router.get("/", response_model=List[BudgetEntryResponse])
async def list_budget_entries(
    month: Optional[str] = None,
    year: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
):
    """List budget entries, newest first"""
    query = select(BudgetEntry).order_by(BudgetEntry.created_at.desc(), BudgetEntry.id.desc())
    if month:
        query = query.where(BudgetEntry.month == month)
    if year:
        query = query.where(BudgetEntry.year == year)

    result = await db.execute(query)
    return result.scalars().all()


@router.post("/", response_model=BudgetMutationResponse, status_code=201)
async def create_budget_entry(
    data: BudgetEntryCreate,
    service: PlanningService = Depends(get_planning_service),
):
    """Add a budget line and re-split the month across its products"""
    entry = BudgetEntry(**data.model_dump())
    try:
        report = await service.add_budget_entry(entry)
    except RecomputeError as e:
        raise recompute_failed(e)

    return BudgetMutationResponse(
        entry=BudgetEntryResponse.model_validate(entry),
        recompute=[report.to_dict()],
    )


@router.put("/{entry_id}", response_model=BudgetMutationResponse)
async def update_budget_entry(
    entry_id: int,
    data: BudgetEntryUpdate,
    db: AsyncSession = Depends(get_db),
    service: PlanningService = Depends(get_planning_service),
):
    """Update a budget line; a move to another month re-splits both months"""
    result = await db.execute(select(BudgetEntry).where(BudgetEntry.id == entry_id))
    entry = result.scalar_one_or_none()
    if not entry:
        raise HTTPException(status_code=404, detail="Budget entry not found")

    try:
        reports = await service.update_budget_entry(entry, data.model_dump(exclude_none=True))
    except RecomputeError as e:
        raise recompute_failed(e)

    return BudgetMutationResponse(
        entry=BudgetEntryResponse.model_validate(entry),
        recompute=[r.to_dict() for r in reports],
    )


@router.delete("/{entry_id}", response_model=BudgetMutationResponse)
async def delete_budget_entry(
    entry_id: int,
    db: AsyncSession = Depends(get_db),
    service: PlanningService = Depends(get_planning_service),
):
    """Remove a budget line and re-split its month"""
    result = await db.execute(select(BudgetEntry).where(BudgetEntry.id == entry_id))
    entry = result.scalar_one_or_none()
    if not entry:
        raise HTTPException(status_code=404, detail="Budget entry not found")

    try:
        report = await service.delete_budget_entry(entry)
    except RecomputeError as e:
        raise recompute_failed(e)

    return BudgetMutationResponse(entry=None, recompute=[report.to_dict()])
