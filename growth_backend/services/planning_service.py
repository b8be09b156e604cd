"""
Planning service - keeps budget shares, unit targets and daily plans consistent.

Every mutation of a budget line or ad product runs through here. The mutation
and the recompute of all sibling products in the affected month(s) share one
transaction: either every product in the period gets its new share and targets,
or nothing is written and RecomputeError is raised. Calling recompute_period
again with the same data is a safe retry.
"""
from contextlib import asynccontextmanager
from dataclasses import dataclass, field, asdict
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from growth_backend.models.ad_product import AdProductEntry, TargetStatus
from growth_backend.models.budget_entry import BudgetEntry
from growth_backend.repositories.growth_repository import GrowthRepository, PersistenceError
from growth_backend.services.budget_distributor import (
    compute_monthly_budget_share,
    period_budget_total,
)
from growth_backend.services.daily_redistributor import (
    DayPlan,
    initial_daily_plan,
    redistribute,
    sold_to_date,
)
from growth_backend.services.target_calculator import apply_derived_costs, targets_for_entry
from growth_backend.utils.helpers import days_in_month, in_month, month_bounds
from growth_backend.utils.logger import get_logger

logger = get_logger(__name__)

Period = Tuple[str, int]


class PlanningError(Exception):
    pass


class EntryNotFoundError(PlanningError, LookupError):
    pass


class MissingBudgetError(PlanningError):
    """The month has no budget lines to share across products"""


class RecomputeError(PlanningError):
    """Persisting a recompute failed; the whole transaction was rolled back"""

    def __init__(self, operation: str, periods: List[Period], reason: str):
        self.operation = operation
        self.periods = periods
        self.reason = reason
        labels = ", ".join(f"{m} {y}" for m, y in periods)
        super().__init__(f"{operation} failed for {labels}: {reason}")


@dataclass
class ProductOutcome:
    ad_product_entry_id: int
    product_name: str
    monthly_budget: float
    required_monthly_units: int
    required_daily_units: int
    status: str


@dataclass
class RecomputeReport:
    month: str
    year: int
    total_budget: float
    budget_share: float
    outcomes: List[ProductOutcome] = field(default_factory=list)

    @property
    def updated(self) -> int:
        return len(self.outcomes)

    @property
    def infeasible(self) -> int:
        return sum(1 for o in self.outcomes if o.status == TargetStatus.INFEASIBLE.value)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["updated"] = self.updated
        data["infeasible"] = self.infeasible
        return data


@dataclass
class SaleResult:
    ad_product_entry_id: int
    date: date
    sold_units: int
    sold_to_date: int
    monthly_target: int
    remaining_needed: int
    plan: List[DayPlan]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class PlanningService:
    def __init__(self, repository: GrowthRepository):
        self.repository = repository

    @asynccontextmanager
    async def _transaction(self, operation: str, periods: List[Period]):
        try:
            yield
            await self.repository.commit()
        except PersistenceError as e:
            await self.repository.rollback()
            logger.error(f"{operation} rolled back: {e}")
            raise RecomputeError(operation, periods, str(e)) from e

    # --- Recompute ---

    async def _recompute(self, month: str, year: int) -> RecomputeReport:
        budget_entries = await self.repository.list_budget_entries(month, year)
        products = await self.repository.list_ad_product_entries(month, year)

        share = compute_monthly_budget_share(budget_entries, products, month, year)
        total = period_budget_total(budget_entries, month, year)
        days = days_in_month(month, year)

        report = RecomputeReport(month=month, year=year, total_budget=float(total), budget_share=float(share))
        for entry in products:
            apply_derived_costs(entry)
            result = targets_for_entry(entry, share, days)
            entry.monthly_budget = float(share)
            entry.required_monthly_units = result.required_monthly_units
            entry.required_daily_units = result.required_daily_units
            entry.target_status = result.status
            report.outcomes.append(ProductOutcome(
                ad_product_entry_id=entry.id,
                product_name=entry.product_name,
                monthly_budget=float(share),
                required_monthly_units=result.required_monthly_units,
                required_daily_units=result.required_daily_units,
                status=result.status.value,
            ))

        await self.repository.flush()
        logger.info(
            f"Recomputed {month} {year}: budget={total} share={share:.2f} "
            f"products={report.updated} infeasible={report.infeasible}"
        )
        return report

    async def recompute_period(self, month: str, year: int) -> RecomputeReport:
        async with self._transaction("recompute", [(month, year)]):
            report = await self._recompute(month, year)
        return report

    async def _recompute_all(self, periods: List[Period]) -> List[RecomputeReport]:
        # dict.fromkeys keeps order and drops the duplicate when a period didn't change
        return [await self._recompute(m, y) for m, y in dict.fromkeys(periods)]

    # --- Budget entries ---

    async def add_budget_entry(self, entry: BudgetEntry) -> RecomputeReport:
        period = (entry.month, entry.year)
        async with self._transaction("add budget entry", [period]):
            await self.repository.add(entry)
            report = await self._recompute(*period)
        return report

    async def update_budget_entry(
        self, entry: BudgetEntry, changes: Dict[str, Any]
    ) -> List[RecomputeReport]:
        periods = [(entry.month, entry.year)]
        for key, value in changes.items():
            setattr(entry, key, value)
        periods.append((entry.month, entry.year))
        async with self._transaction("update budget entry", periods):
            await self.repository.flush()
            reports = await self._recompute_all(periods)
        return reports

    async def delete_budget_entry(self, entry: BudgetEntry) -> RecomputeReport:
        period = (entry.month, entry.year)
        async with self._transaction("delete budget entry", [period]):
            await self.repository.delete(entry)
            report = await self._recompute(*period)
        return report

    # --- Ad products ---

    async def add_product(self, entry: AdProductEntry) -> RecomputeReport:
        """Add a product to its month's plan and seed one target per day"""
        period = (entry.month, entry.year)
        if not await self.repository.list_budget_entries(*period):
            raise MissingBudgetError(f"No budget found for {entry.month} {entry.year}")
        async with self._transaction("add ad product", [period]):
            apply_derived_costs(entry)
            await self.repository.add(entry)
            report = await self._recompute(*period)
            await self.initialise_daily_targets(entry)
        return report

    async def update_product(
        self, entry: AdProductEntry, changes: Dict[str, Any]
    ) -> List[RecomputeReport]:
        """
        Apply changes and recompute the affected month(s). A product moved to
        another month drops its daily rows in the old month and is re-seeded
        in the new one.
        """
        old_period = (entry.month, entry.year)
        new_period = (changes.get("month", entry.month), changes.get("year", entry.year))
        moved = new_period != old_period
        if moved and not await self.repository.list_budget_entries(*new_period):
            raise MissingBudgetError(f"No budget found for {new_period[0]} {new_period[1]}")

        periods = [old_period, new_period]
        async with self._transaction("update ad product", periods):
            if moved:
                await self.clear_daily_targets(entry)
            for key, value in changes.items():
                setattr(entry, key, value)
            await self.repository.flush()
            reports = await self._recompute_all(periods)
            if moved:
                await self.initialise_daily_targets(entry)
        return reports

    async def clear_daily_targets(self, entry: AdProductEntry) -> int:
        """Delete the entry's rows in its current month; the caller commits"""
        start, end = month_bounds(entry.month, entry.year)
        rows = await self.repository.list_selling_targets(entry.id, start, end)
        for row in rows:
            await self.repository.delete(row)
        return len(rows)

    async def delete_product(self, entry: AdProductEntry) -> RecomputeReport:
        period = (entry.month, entry.year)
        async with self._transaction("delete ad product", [period]):
            await self.repository.delete(entry)
            report = await self._recompute(*period)
        return report

    async def initialise_daily_targets(self, entry: AdProductEntry) -> int:
        """One target per day of the entry's month at its daily rate; the caller commits"""
        if not entry.required_daily_units or entry.required_daily_units <= 0:
            return 0
        plan = initial_daily_plan(entry.month, entry.year, entry.required_daily_units)
        for day in plan:
            await self.repository.upsert_selling_target(entry.id, day.date, target_units=day.planned_units)
        logger.info(f"Initialized {len(plan)} daily targets for ad product {entry.id}")
        return len(plan)

    # --- Daily sales ---

    async def record_sale(
        self,
        ad_product_entry_id: int,
        day: date,
        sold_units: int,
        target_units: Optional[int] = None,
    ) -> SaleResult:
        """
        Record a day's sold units, then re-plan every later day of the month so
        the plan covers exactly what is still missing from the monthly target.
        """
        entry = await self.repository.get_ad_product_entry(ad_product_entry_id)
        if entry is None:
            raise EntryNotFoundError(f"Ad product entry {ad_product_entry_id} not found")
        if sold_units < 0:
            raise ValueError("Sold units must not be negative")
        if not in_month(day, entry.month, entry.year):
            raise ValueError(f"{day.isoformat()} is outside {entry.month} {entry.year}")

        period = (entry.month, entry.year)
        async with self._transaction("record sale", [period]):
            await self.repository.upsert_selling_target(
                entry.id, day, target_units=target_units, sold_units=sold_units
            )
            start, end = month_bounds(entry.month, entry.year)
            recorded = await self.repository.list_selling_targets(entry.id, start, end)

            monthly_target = entry.required_monthly_units or 0
            plan = redistribute(entry.id, entry.month, entry.year, day.day, monthly_target, recorded)
            for day_plan in plan:
                await self.repository.upsert_selling_target(
                    entry.id, day_plan.date, target_units=day_plan.planned_units
                )
            sold = sold_to_date(entry.id, entry.month, entry.year, day.day, recorded)

        logger.info(
            f"Ad product {entry.id}: sold {sold_units} on {day.isoformat()}, "
            f"{sold}/{monthly_target} to date, re-planned {len(plan)} days"
        )
        return SaleResult(
            ad_product_entry_id=entry.id,
            date=day,
            sold_units=sold_units,
            sold_to_date=sold,
            monthly_target=monthly_target,
            remaining_needed=max(0, monthly_target - sold),
            plan=plan,
        )
