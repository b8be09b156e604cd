"""
Unit tests for the budget split, target calculator and daily redistribution.
Pure functions over plain rows - no database.
"""
import pytest
from datetime import date
from decimal import Decimal
from types import SimpleNamespace

from growth_backend.models.ad_product import TargetStatus
from growth_backend.services.budget_distributor import (
    compute_monthly_budget_share,
    period_budget_total,
)
from growth_backend.services.target_calculator import (
    apply_derived_costs,
    compute_targets,
    per_unit_cost,
    targets_for_entry,
)
from growth_backend.services.daily_redistributor import (
    initial_daily_plan,
    redistribute,
    sold_to_date,
)


def budget(amount, month="January", year=2025):
    return SimpleNamespace(amount=amount, month=month, year=year)


def ad_product(month="January", year=2025, **kwargs):
    values = dict(
        id=1, product_name="T-Shirt", buying_price=30, fb_ad_cost=10, delivery_cost=10,
        selling_price=100, return_parcel_qty=0, return_cost=0, damaged_product_qty=0,
        damaged_cost=0, desired_profit_pct=20,
    )
    values.update(kwargs)
    return SimpleNamespace(month=month, year=year, **values)


def sale(day, sold, entry_id=1, month=1, year=2025):
    return SimpleNamespace(ad_product_entry_id=entry_id, date=date(year, month, day), sold_units=sold)


# ===================== BUDGET DISTRIBUTOR =====================


class TestBudgetDistributor:

    def test_january_split_between_two_products(self):
        budgets = [budget(3000), budget(2000)]
        products = [ad_product(id=1), ad_product(id=2)]

        share = compute_monthly_budget_share(budgets, products, "January", 2025)

        assert share == Decimal("2500")

    def test_other_periods_ignored(self):
        budgets = [budget(3000), budget(9999, month="February"), budget(500, year=2024)]
        products = [ad_product(id=1), ad_product(id=2, month="February"), ad_product(id=3)]

        assert period_budget_total(budgets, "January", 2025) == Decimal("3000")
        assert compute_monthly_budget_share(budgets, products, "January", 2025) == Decimal("1500")

    def test_no_products_returns_whole_budget(self):
        budgets = [budget(1200), budget(300)]
        assert compute_monthly_budget_share(budgets, [], "January", 2025) == Decimal("1500")

    def test_no_budget_is_zero(self):
        assert compute_monthly_budget_share([], [ad_product()], "January", 2025) == 0

    @pytest.mark.parametrize("amounts,count", [
        ([5000], 1),
        ([3000, 2000], 3),
        ([0.1, 0.2, 1234.56], 7),
    ])
    def test_share_is_total_over_count(self, amounts, count):
        budgets = [budget(a) for a in amounts]
        products = [ad_product(id=i) for i in range(count)]
        total = sum(Decimal(str(a)) for a in amounts)

        assert compute_monthly_budget_share(budgets, products, "January", 2025) == total / count

    def test_idempotent(self):
        budgets = [budget(3000), budget(2000)]
        products = [ad_product(id=1), ad_product(id=2), ad_product(id=3)]

        first = compute_monthly_budget_share(budgets, products, "January", 2025)
        second = compute_monthly_budget_share(budgets, products, "January", 2025)

        assert first == second
        assert [b.amount for b in budgets] == [3000, 2000]


# ===================== TARGET CALCULATOR =====================


class TestTargetCalculator:

    def test_reference_scenario(self):
        result = compute_targets(50, 2500, 100, 20, 31)

        assert result.required_monthly_units == 75
        assert result.required_daily_units == 3
        assert result.status == TargetStatus.OK
        assert result.feasible

    def test_exact_break_even_is_infeasible(self):
        # 60 - 50 * 1.2 == 0
        result = compute_targets(50, 2500, 60, 20, 31)

        assert result.required_monthly_units == 0
        assert result.required_daily_units == 0
        assert result.status == TargetStatus.INFEASIBLE
        assert not result.feasible

    def test_price_below_cost_is_infeasible(self):
        result = compute_targets(120, 1000, 100, 0, 30)
        assert result.status == TargetStatus.INFEASIBLE

    def test_missing_profit_pct_means_zero(self):
        result = compute_targets(50, 2500, 100, None, 31)
        # 2500 / 50
        assert result.required_monthly_units == 50
        assert result.required_daily_units == 2

    def test_negative_profit_pct_clamped(self):
        assert compute_targets(50, 2500, 100, -30, 31) == compute_targets(50, 2500, 100, 0, 31)

    def test_no_fixed_cost_needs_no_units(self):
        result = compute_targets(50, 0, 100, 20, 31)
        assert result.required_monthly_units == 0
        assert result.required_daily_units == 0
        assert result.status == TargetStatus.OK

    def test_rounds_up(self):
        # 1000 / 30 = 33.33
        result = compute_targets(70, 1000, 100, 0, 28)
        assert result.required_monthly_units == 34
        assert result.required_daily_units == 2

    def test_no_float_drift(self):
        # in floats 0.3 / (0.3 - 0.2) is 3.0000000000000004 and rounds up to 4
        result = compute_targets(Decimal("0.2"), Decimal("0.3"), Decimal("0.3"), 0, 30)
        assert result.required_monthly_units == 3

    @pytest.mark.parametrize("monthly_inputs,days", [
        ((50, 2500, 100, 20), 28),
        ((10, 999, 35, 5), 30),
        ((80, 12345, 150, 40), 31),
    ])
    def test_daily_is_ceil_of_monthly(self, monthly_inputs, days):
        result = compute_targets(*monthly_inputs, days)
        assert result.required_monthly_units > 0
        assert result.required_daily_units == -(-result.required_monthly_units // days)

    def test_rejects_negative_inputs(self):
        with pytest.raises(ValueError):
            compute_targets(-1, 100, 100, 10, 30)
        with pytest.raises(ValueError):
            compute_targets(10, -100, 100, 10, 30)

    def test_rejects_bad_day_count(self):
        with pytest.raises(ValueError, match="days_in_month"):
            compute_targets(10, 100, 100, 10, 0)

    def test_derived_costs(self):
        entry = ad_product(buying_price=800, delivery_cost=60, return_parcel_qty=4, damaged_product_qty=1)

        apply_derived_costs(entry)

        assert entry.return_cost == 240
        assert entry.damaged_cost == 860

    def test_targets_for_entry_adds_losses_to_fixed_cost(self):
        entry = ad_product(return_cost=500, damaged_cost=0)
        assert per_unit_cost(entry) == Decimal("50")

        # fixed = 2000 share + 500 returns -> same as the reference scenario
        result = targets_for_entry(entry, Decimal("2000"), 31)

        assert result.required_monthly_units == 75
        assert result.required_daily_units == 3


# ===================== DAILY REDISTRIBUTOR =====================


class TestDailyRedistributor:

    def test_reference_scenario(self):
        sales = [sale(d, 2) for d in range(1, 11)]

        plan = redistribute(1, "January", 2025, 10, 75, sales)

        assert len(plan) == 21
        assert plan[0].date == date(2025, 1, 11)
        assert plan[-1].date == date(2025, 1, 31)
        assert [p.planned_units for p in plan] == [3] * 13 + [2] * 8
        assert sum(p.planned_units for p in plan) == 55

    @pytest.mark.parametrize("target,sold_per_day,current_day", [
        (100, 1, 5),
        (31, 0, 1),
        (7, 0, 20),
        (500, 9, 27),
    ])
    def test_plan_sums_to_remaining_need(self, target, sold_per_day, current_day):
        sales = [sale(d, sold_per_day) for d in range(1, current_day + 1)]

        plan = redistribute(1, "January", 2025, current_day, target, sales)

        sold = sold_per_day * current_day
        assert sum(p.planned_units for p in plan) == max(0, target - sold)
        assert max(p.planned_units for p in plan) - min(p.planned_units for p in plan) <= 1

    def test_target_already_met(self):
        sales = [sale(d, 10) for d in range(1, 11)]

        plan = redistribute(1, "January", 2025, 10, 75, sales)

        assert len(plan) == 21
        assert all(p.planned_units == 0 for p in plan)

    def test_last_day_is_noop(self):
        assert redistribute(1, "January", 2025, 31, 75, []) == []
        assert redistribute(1, "February", 2025, 28, 75, []) == []

    def test_rejects_day_zero(self):
        with pytest.raises(ValueError):
            redistribute(1, "January", 2025, 0, 75, [])

    def test_only_counts_this_product_and_past_days(self):
        sales = [
            sale(5, 10),
            sale(5, 99, entry_id=2),
            sale(5, 99, month=2),
            sale(15, 40),
        ]

        assert sold_to_date(1, "January", 2025, 10, sales) == 10

        plan = redistribute(1, "January", 2025, 10, 31, sales)
        assert sum(p.planned_units for p in plan) == 21
        # future sales stay attached to their day
        assert next(p for p in plan if p.date == date(2025, 1, 15)).sold_units == 40

    def test_initial_plan_covers_month(self):
        plan = initial_daily_plan("February", 2024, 3)

        assert len(plan) == 29
        assert plan[0].date == date(2024, 2, 1)
        assert all(p.planned_units == 3 for p in plan)
