"""
Budget distributor - splits a month's planned spend evenly across its ad products
"""
from decimal import Decimal
from typing import Any, Iterable

from growth_backend.utils.helpers import to_decimal


def in_period(record: Any, month: str, year: int) -> bool:
    return record.month == month and record.year == year


def period_budget_total(budget_entries: Iterable[Any], month: str, year: int) -> Decimal:
    """Sum of every budget line planned for the month"""
    return sum(
        (to_decimal(b.amount) for b in budget_entries if in_period(b, month, year)),
        Decimal("0"),
    )


def compute_monthly_budget_share(
    budget_entries: Iterable[Any],
    ad_product_entries: Iterable[Any],
    month: str,
    year: int,
) -> Decimal:
    """
    Per-product share of the month's budget.

    Both collections may hold rows from any period; only rows matching
    (month, year) count. With no products in the period the whole budget is
    returned (the divisor never drops below 1).
    """
    total = period_budget_total(budget_entries, month, year)
    product_count = sum(1 for e in ad_product_entries if in_period(e, month, year))
    return total / max(product_count, 1)
