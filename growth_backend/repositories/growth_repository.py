"""
Persistence boundary for budget lines, ad products and daily selling targets
"""
from datetime import date
from typing import List, Optional, Protocol, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from growth_backend.models.ad_product import AdProductEntry
from growth_backend.models.budget_entry import BudgetEntry
from growth_backend.models.selling_target import SellingTargetEntry
from growth_backend.utils.logger import get_logger

logger = get_logger(__name__)


class PersistenceError(RuntimeError):
    """A write or flush against the store failed"""


class GrowthRepository(Protocol):
    async def list_budget_entries(
        self, month: Optional[str] = None, year: Optional[int] = None
    ) -> Sequence[BudgetEntry]: ...

    async def list_ad_product_entries(
        self, month: Optional[str] = None, year: Optional[int] = None
    ) -> Sequence[AdProductEntry]: ...

    async def get_ad_product_entry(self, entry_id: int) -> Optional[AdProductEntry]: ...

    async def list_selling_targets(
        self,
        ad_product_entry_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[SellingTargetEntry]: ...

    async def upsert_selling_target(
        self,
        ad_product_entry_id: int,
        day: date,
        target_units: Optional[int] = None,
        sold_units: Optional[int] = None,
    ) -> SellingTargetEntry: ...

    async def add(self, row) -> None: ...

    async def delete(self, row) -> None: ...

    async def flush(self) -> None: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class SqlGrowthRepository:
    """GrowthRepository over an async SQLAlchemy session"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_budget_entries(
        self, month: Optional[str] = None, year: Optional[int] = None
    ) -> List[BudgetEntry]:
        query = select(BudgetEntry).order_by(BudgetEntry.created_at.desc(), BudgetEntry.id.desc())
        if month:
            query = query.where(BudgetEntry.month == month)
        if year:
            query = query.where(BudgetEntry.year == year)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_ad_product_entries(
        self, month: Optional[str] = None, year: Optional[int] = None
    ) -> List[AdProductEntry]:
        query = select(AdProductEntry).order_by(AdProductEntry.id)
        if month:
            query = query.where(AdProductEntry.month == month)
        if year:
            query = query.where(AdProductEntry.year == year)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_ad_product_entry(self, entry_id: int) -> Optional[AdProductEntry]:
        result = await self.session.execute(
            select(AdProductEntry).where(AdProductEntry.id == entry_id)
        )
        return result.scalar_one_or_none()

    async def list_selling_targets(
        self,
        ad_product_entry_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[SellingTargetEntry]:
        query = select(SellingTargetEntry).order_by(
            SellingTargetEntry.ad_product_entry_id, SellingTargetEntry.date
        )
        if ad_product_entry_id:
            query = query.where(SellingTargetEntry.ad_product_entry_id == ad_product_entry_id)
        if start:
            query = query.where(SellingTargetEntry.date >= start)
        if end:
            query = query.where(SellingTargetEntry.date <= end)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def upsert_selling_target(
        self,
        ad_product_entry_id: int,
        day: date,
        target_units: Optional[int] = None,
        sold_units: Optional[int] = None,
    ) -> SellingTargetEntry:
        """Insert or update the (entry, day) row; None leaves a field as stored"""
        result = await self.session.execute(
            select(SellingTargetEntry).where(
                SellingTargetEntry.ad_product_entry_id == ad_product_entry_id,
                SellingTargetEntry.date == day,
            )
        )
        target = result.scalar_one_or_none()
        if target:
            if target_units is not None:
                target.target_units = target_units
            if sold_units is not None:
                target.sold_units = sold_units
        else:
            target = SellingTargetEntry(
                ad_product_entry_id=ad_product_entry_id,
                date=day,
                target_units=target_units or 0,
                sold_units=sold_units or 0,
            )
            self.session.add(target)
        await self.flush()
        return target

    async def add(self, row) -> None:
        self.session.add(row)
        await self.flush()

    async def delete(self, row) -> None:
        await self.session.delete(row)
        await self.flush()

    async def flush(self) -> None:
        try:
            await self.session.flush()
        except SQLAlchemyError as e:
            raise PersistenceError(f"flush failed: {e}") from e

    async def commit(self) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"commit failed: {e}") from e

    async def rollback(self) -> None:
        await self.session.rollback()
        logger.debug("Session rolled back")
