"""
Selling Targets API endpoints - daily planned vs sold units
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List, Optional
from pydantic import BaseModel, ValidationInfo, field_validator
from datetime import date

from growth_backend.database import get_db
from growth_backend.models.selling_target import SellingTargetEntry
from growth_backend.api.deps import get_planning_service, recompute_failed
from growth_backend.services.planning_service import (
    EntryNotFoundError,
    PlanningService,
    RecomputeError,
)
from growth_backend.utils import validators
from growth_backend.utils.helpers import in_month, month_bounds

router = APIRouter()


# --- Pydantic Schemas ---

class SellingTargetResponse(BaseModel):
    id: int
    ad_product_entry_id: int
    date: date
    target_units: int
    sold_units: int

    class Config:
        from_attributes = True


class SellingTargetUpsert(BaseModel):
    ad_product_entry_id: int
    date: date
    target_units: Optional[int] = None
    sold_units: Optional[int] = None

    @field_validator("target_units", "sold_units")
    @classmethod
    def check_units(cls, v, info: ValidationInfo):
        return validators.validate_non_negative(v, info.field_name)


class SellingTargetUpdate(BaseModel):
    target_units: Optional[int] = None
    sold_units: Optional[int] = None

    @field_validator("target_units", "sold_units")
    @classmethod
    def check_units(cls, v, info: ValidationInfo):
        return validators.validate_non_negative(v, info.field_name)


class RecordSaleRequest(BaseModel):
    ad_product_entry_id: int
    date: date
    sold_units: int
    target_units: Optional[int] = None

    @field_validator("sold_units", "target_units")
    @classmethod
    def check_units(cls, v, info: ValidationInfo):
        return validators.validate_non_negative(v, info.field_name)


# --- Endpoints ---

@router.get("/", response_model=List[SellingTargetResponse])
async def list_selling_targets(
    ad_product_entry_id: Optional[int] = None,
    month: Optional[str] = None,
    year: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
):
    """List daily targets, optionally for one product and/or one month"""
    query = select(SellingTargetEntry).order_by(
        SellingTargetEntry.ad_product_entry_id, SellingTargetEntry.date
    )
    if ad_product_entry_id:
        query = query.where(SellingTargetEntry.ad_product_entry_id == ad_product_entry_id)
    if bool(month) != bool(year):
        raise HTTPException(status_code=400, detail="month and year must be given together")
    if month and year:
        try:
            start, end = month_bounds(month, year)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        query = query.where(SellingTargetEntry.date >= start, SellingTargetEntry.date <= end)

    result = await db.execute(query)
    return result.scalars().all()


@router.post("/", response_model=SellingTargetResponse)
async def upsert_selling_target(
    data: SellingTargetUpsert,
    service: PlanningService = Depends(get_planning_service),
):
    """Create or update the target row for a product on a given day"""
    entry = await service.repository.get_ad_product_entry(data.ad_product_entry_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Ad product entry not found")
    if not in_month(data.date, entry.month, entry.year):
        raise HTTPException(
            status_code=400,
            detail=f"{data.date.isoformat()} is outside {entry.month} {entry.year}",
        )

    target = await service.repository.upsert_selling_target(
        data.ad_product_entry_id,
        data.date,
        target_units=data.target_units,
        sold_units=data.sold_units,
    )
    await service.repository.commit()
    return target


@router.post("/record-sale")
async def record_sale(
    data: RecordSaleRequest,
    service: PlanningService = Depends(get_planning_service),
):
    """Record a day's sales and spread the remaining target over the rest of the month"""
    try:
        result = await service.record_sale(
            data.ad_product_entry_id,
            data.date,
            data.sold_units,
            target_units=data.target_units,
        )
    except EntryNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RecomputeError as e:
        raise recompute_failed(e)

    return result.to_dict()


@router.put("/{target_id}", response_model=SellingTargetResponse)
async def update_selling_target(
    target_id: int,
    data: SellingTargetUpdate,
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(SellingTargetEntry).where(SellingTargetEntry.id == target_id))
    target = result.scalar_one_or_none()
    if not target:
        raise HTTPException(status_code=404, detail="Selling target not found")

    for key, value in data.model_dump(exclude_none=True).items():
        setattr(target, key, value)

    await db.commit()
    await db.refresh(target)
    return target


@router.delete("/{target_id}")
async def delete_selling_target(target_id: int, db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(SellingTargetEntry).where(SellingTargetEntry.id == target_id))
    target = result.scalar_one_or_none()
    if not target:
        raise HTTPException(status_code=404, detail="Selling target not found")

    await db.delete(target)
    await db.commit()
    return {"message": "Selling target deleted"}
