"""
Target calculator - how many units a product must sell to hit its profit goal
"""
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from growth_backend.models.ad_product import TargetStatus
from growth_backend.utils.helpers import to_decimal

ONE = Decimal("1")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class TargetResult:
    required_monthly_units: int
    required_daily_units: int
    status: TargetStatus

    @property
    def feasible(self) -> bool:
        return self.status == TargetStatus.OK


INFEASIBLE = TargetResult(0, 0, TargetStatus.INFEASIBLE)


def compute_targets(
    per_unit_cost: Any,
    fixed_monthly_cost: Any,
    selling_price: Any,
    desired_profit_pct: Optional[Any],
    days_in_month: int,
) -> TargetResult:
    """
    Required monthly and daily unit volume for a product.

    The profit goal is a percentage of total cost, per-unit cost at the solved
    volume included, so both sides carry the (1 + p) factor:

        units = ceil((1 + p) * fixed / (price - unit_cost * (1 + p)))

    A non-positive denominator means no volume reaches the goal; that comes back
    as INFEASIBLE with zero units instead of an error.
    """
    unit_cost = to_decimal(per_unit_cost)
    fixed = to_decimal(fixed_monthly_cost)
    price = to_decimal(selling_price)

    if unit_cost < 0 or fixed < 0 or price < 0:
        raise ValueError("Costs and selling price must not be negative")
    if not 1 <= days_in_month <= 31:
        raise ValueError(f"days_in_month must be 1-31, got {days_in_month}")

    p = max(to_decimal(desired_profit_pct), Decimal("0")) / HUNDRED
    denominator = price - unit_cost * (ONE + p)
    if denominator <= 0:
        return INFEASIBLE

    monthly = math.ceil((ONE + p) * fixed / denominator)
    daily = math.ceil(Decimal(monthly) / days_in_month) if monthly > 0 else 0
    return TargetResult(monthly, daily, TargetStatus.OK)


def per_unit_cost(entry: Any) -> Decimal:
    """buying + ad + delivery cost of one unit"""
    return to_decimal(entry.buying_price) + to_decimal(entry.fb_ad_cost) + to_decimal(entry.delivery_cost)


def derive_return_cost(return_parcel_qty: int, delivery_cost: Any) -> Decimal:
    return Decimal(return_parcel_qty or 0) * to_decimal(delivery_cost)


def derive_damaged_cost(damaged_product_qty: int, buying_price: Any, delivery_cost: Any) -> Decimal:
    return Decimal(damaged_product_qty or 0) * (to_decimal(buying_price) + to_decimal(delivery_cost))


def apply_derived_costs(entry: Any) -> None:
    """Refresh return/damaged cost from their quantities"""
    entry.return_cost = float(derive_return_cost(entry.return_parcel_qty, entry.delivery_cost))
    entry.damaged_cost = float(
        derive_damaged_cost(entry.damaged_product_qty, entry.buying_price, entry.delivery_cost)
    )


def fixed_monthly_cost(entry: Any, budget_share: Any) -> Decimal:
    """Budget share plus the month's return and damage losses"""
    return to_decimal(budget_share) + to_decimal(entry.return_cost) + to_decimal(entry.damaged_cost)


def targets_for_entry(entry: Any, budget_share: Any, days_in_month: int) -> TargetResult:
    return compute_targets(
        per_unit_cost(entry),
        fixed_monthly_cost(entry, budget_share),
        entry.selling_price,
        entry.desired_profit_pct,
        days_in_month,
    )
