"""
Products API endpoints - read-only catalog used to prefill ad product entries
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List, Optional
from pydantic import BaseModel

from growth_backend.database import get_db
from growth_backend.models.product import Product

router = APIRouter()


class ProductResponse(BaseModel):
    id: int
    name: str
    category_id: Optional[int] = None
    buying_price: Optional[float] = None
    selling_price: Optional[float] = None
    image: Optional[str] = None

    class Config:
        from_attributes = True


@router.get("/", response_model=List[ProductResponse])
async def list_products(
    category_id: Optional[int] = Query(None, alias="categoryId"),
    db: AsyncSession = Depends(get_db),
):
    """Active catalog products, optionally within one category"""
    query = select(Product).where(Product.is_active == True).order_by(Product.name)
    if category_id:
        query = query.where(Product.category_id == category_id)

    result = await db.execute(query)
    return result.scalars().all()
