"""
Ad Products API endpoints - per-product cost inputs and the targets derived from them
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List, Optional
from pydantic import BaseModel, ValidationInfo, field_validator
from datetime import datetime

from growth_backend.database import get_db
from growth_backend.models.ad_product import AdProductEntry, TargetStatus
from growth_backend.models.product import Product
from growth_backend.api.deps import get_planning_service, recompute_failed
from growth_backend.services.planning_service import (
    MissingBudgetError,
    PlanningService,
    RecomputeError,
)
from growth_backend.utils import validators

router = APIRouter()

COST_FIELDS = (
    "buying_price",
    "selling_price",
    "fb_ad_cost",
    "delivery_cost",
    "return_parcel_qty",
    "damaged_product_qty",
)

NULLABLE_FIELDS = ("product_id", "product_image", "desired_profit_pct")


# --- Pydantic Schemas ---

class AdProductResponse(BaseModel):
    id: int
    product_id: Optional[int] = None
    product_name: str
    product_image: Optional[str] = None
    month: str
    year: int
    buying_price: float
    selling_price: float
    fb_ad_cost: float
    delivery_cost: float
    return_parcel_qty: int
    return_cost: float
    damaged_product_qty: int
    damaged_cost: float
    desired_profit_pct: Optional[float] = None
    monthly_budget: float
    required_monthly_units: int
    required_daily_units: int
    target_status: TargetStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AdProductCreate(BaseModel):
    product_id: Optional[int] = None
    product_name: Optional[str] = None
    product_image: Optional[str] = None
    month: str
    year: int
    buying_price: float = 0
    selling_price: float = 0
    fb_ad_cost: float = 0
    delivery_cost: float = 0
    return_parcel_qty: int = 0
    damaged_product_qty: int = 0
    desired_profit_pct: Optional[float] = None

    # return/damaged cost, budget share and targets are always derived
    class Config:
        extra = "forbid"

    @field_validator("month")
    @classmethod
    def check_month(cls, v):
        return validators.validate_month(v)

    @field_validator("year")
    @classmethod
    def check_year(cls, v):
        return validators.validate_year(v)

    @field_validator("desired_profit_pct")
    @classmethod
    def check_profit_pct(cls, v):
        return validators.validate_profit_pct(v)

    @field_validator(*COST_FIELDS)
    @classmethod
    def check_non_negative(cls, v, info: ValidationInfo):
        return validators.validate_non_negative(v, info.field_name)


class AdProductUpdate(BaseModel):
    product_id: Optional[int] = None
    product_name: Optional[str] = None
    product_image: Optional[str] = None
    month: Optional[str] = None
    year: Optional[int] = None
    buying_price: Optional[float] = None
    selling_price: Optional[float] = None
    fb_ad_cost: Optional[float] = None
    delivery_cost: Optional[float] = None
    return_parcel_qty: Optional[int] = None
    damaged_product_qty: Optional[int] = None
    desired_profit_pct: Optional[float] = None

    class Config:
        extra = "forbid"

    @field_validator("desired_profit_pct")
    @classmethod
    def check_profit_pct(cls, v):
        return validators.validate_profit_pct(v)

    @field_validator("month")
    @classmethod
    def check_month(cls, v):
        return v if v is None else validators.validate_month(v)

    @field_validator("year")
    @classmethod
    def check_year(cls, v):
        return v if v is None else validators.validate_year(v)

    @field_validator(*COST_FIELDS)
    @classmethod
    def check_non_negative(cls, v, info: ValidationInfo):
        return validators.validate_non_negative(v, info.field_name)


class AdProductMutationResponse(BaseModel):
    entry: Optional[AdProductResponse] = None
    recompute: List[dict]


# --- Helpers ---

async def _get_entry(db: AsyncSession, entry_id: int) -> AdProductEntry:
    result = await db.execute(select(AdProductEntry).where(AdProductEntry.id == entry_id))
    entry = result.scalar_one_or_none()
    if not entry:
        raise HTTPException(status_code=404, detail="Ad product entry not found")
    return entry


# --- Endpoints ---

@router.get("/", response_model=List[AdProductResponse])
async def list_ad_products(
    month: Optional[str] = None,
    year: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
):
    """List ad products, optionally for one month"""
    query = select(AdProductEntry).order_by(AdProductEntry.id)
    if month:
        query = query.where(AdProductEntry.month == month)
    if year:
        query = query.where(AdProductEntry.year == year)

    result = await db.execute(query)
    return result.scalars().all()


@router.post("/recompute")
async def recompute_period(
    month: str = Query(...),
    year: int = Query(...),
    service: PlanningService = Depends(get_planning_service),
):
    """Re-run the budget split and targets for a month. Safe to repeat."""
    try:
        validators.validate_month(month)
        validators.validate_year(year)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        report = await service.recompute_period(month, year)
    except RecomputeError as e:
        raise recompute_failed(e)
    return report.to_dict()


@router.get("/{entry_id}", response_model=AdProductResponse)
async def get_ad_product(entry_id: int, db: AsyncSession = Depends(get_db)):
    return await _get_entry(db, entry_id)


@router.post("/", response_model=AdProductMutationResponse, status_code=201)
async def create_ad_product(
    data: AdProductCreate,
    db: AsyncSession = Depends(get_db),
    service: PlanningService = Depends(get_planning_service),
):
    """Add a product to a month's plan; the month must already have a budget"""
    values = data.model_dump()

    if data.product_id is not None:
        result = await db.execute(select(Product).where(Product.id == data.product_id))
        product = result.scalar_one_or_none()
        if not product:
            raise HTTPException(status_code=404, detail="Catalog product not found")
        values["product_name"] = values["product_name"] or product.name
        values["product_image"] = values["product_image"] or product.image

    if not values["product_name"]:
        raise HTTPException(status_code=400, detail="product_name or product_id is required")

    entry = AdProductEntry(**values)
    try:
        report = await service.add_product(entry)
    except MissingBudgetError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RecomputeError as e:
        raise recompute_failed(e)

    return AdProductMutationResponse(
        entry=AdProductResponse.model_validate(entry),
        recompute=[report.to_dict()],
    )


@router.put("/{entry_id}", response_model=AdProductMutationResponse)
async def update_ad_product(
    entry_id: int,
    data: AdProductUpdate,
    db: AsyncSession = Depends(get_db),
    service: PlanningService = Depends(get_planning_service),
):
    """Update cost inputs; the month's shares and targets follow"""
    entry = await _get_entry(db, entry_id)

    # an explicit null clears a nullable field; elsewhere it means unchanged
    changes = {
        key: value
        for key, value in data.model_dump(exclude_unset=True).items()
        if value is not None or key in NULLABLE_FIELDS
    }
    try:
        reports = await service.update_product(entry, changes)
    except MissingBudgetError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RecomputeError as e:
        raise recompute_failed(e)

    return AdProductMutationResponse(
        entry=AdProductResponse.model_validate(entry),
        recompute=[r.to_dict() for r in reports],
    )


@router.delete("/{entry_id}", response_model=AdProductMutationResponse)
async def delete_ad_product(
    entry_id: int,
    db: AsyncSession = Depends(get_db),
    service: PlanningService = Depends(get_planning_service),
):
    """Remove a product and its daily targets; siblings get a larger share"""
    entry = await _get_entry(db, entry_id)

    try:
        report = await service.delete_product(entry)
    except RecomputeError as e:
        raise recompute_failed(e)

    return AdProductMutationResponse(entry=None, recompute=[report.to_dict()])
