"""
Daily redistributor - spreads what is still needed this month over the days left
"""
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, List

from growth_backend.utils.helpers import days_in_month, month_index


@dataclass(frozen=True)
class DayPlan:
    date: date
    planned_units: int
    sold_units: int = 0


def sold_to_date(
    ad_product_entry_id: int,
    month: str,
    year: int,
    current_day: int,
    sold_entries: Iterable[Any],
) -> int:
    """Units sold for the product from the 1st through current_day"""
    month_no = month_index(month)
    return sum(
        (t.sold_units or 0)
        for t in sold_entries
        if t.ad_product_entry_id == ad_product_entry_id
        and t.date.year == year
        and t.date.month == month_no
        and t.date.day <= current_day
    )


def redistribute(
    ad_product_entry_id: int,
    month: str,
    year: int,
    current_day: int,
    monthly_target: int,
    sold_entries: Iterable[Any],
) -> List[DayPlan]:
    """
    New plan for every day after current_day.

    The plan always sums to max(0, monthly_target - sold_to_date). The remainder
    of the even split goes one unit each to the earliest remaining days. Days
    that already have sales keep their sold units in the returned plan.
    """
    if current_day < 1:
        raise ValueError(f"current_day must be >= 1, got {current_day}")

    sold_entries = list(sold_entries)
    total_days = days_in_month(month, year)
    if current_day >= total_days:
        return []

    month_no = month_index(month)
    remaining_days = [date(year, month_no, d) for d in range(current_day + 1, total_days + 1)]

    sold = sold_to_date(ad_product_entry_id, month, year, current_day, sold_entries)
    remaining_needed = max(0, (monthly_target or 0) - sold)
    base, extra = divmod(remaining_needed, len(remaining_days))

    already_sold = {
        t.date: (t.sold_units or 0)
        for t in sold_entries
        if t.ad_product_entry_id == ad_product_entry_id
    }

    return [
        DayPlan(
            date=day,
            planned_units=base + 1 if offset < extra else base,
            sold_units=already_sold.get(day, 0),
        )
        for offset, day in enumerate(remaining_days)
    ]


def initial_daily_plan(month: str, year: int, daily_units: int) -> List[DayPlan]:
    """Flat plan for a freshly added product: the daily target on every day"""
    month_no = month_index(month)
    return [
        DayPlan(date=date(year, month_no, d), planned_units=daily_units)
        for d in range(1, days_in_month(month, year) + 1)
    ]
