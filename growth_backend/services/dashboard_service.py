"""
Month dashboard figures: planned profit at target volume and month-to-date results
"""
import math
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from growth_backend.services.budget_distributor import in_period
from growth_backend.utils.helpers import days_in_month, elapsed_days, month_index


def _unit_cost(entry: Any) -> float:
    return (entry.buying_price or 0) + (entry.fb_ad_cost or 0) + (entry.delivery_cost or 0)


def _losses(entry: Any) -> float:
    return (entry.return_cost or 0) + (entry.damaged_cost or 0)


def _status(entry: Any) -> str:
    status = entry.target_status
    return getattr(status, "value", status) or "ok"


def build_product_rows(entries: List[Any], sold_by_entry: Dict[int, int]) -> List[Dict[str, Any]]:
    rows = []
    for e in entries:
        monthly = e.required_monthly_units or 0
        unit_cost = _unit_cost(e)
        revenue = (e.selling_price or 0) * monthly
        cost = unit_cost * monthly
        profit = revenue - cost
        sold = sold_by_entry.get(e.id, 0)
        rows.append({
            "id": e.id,
            "product_name": e.product_name,
            "required_monthly_units": monthly,
            "required_daily_units": e.required_daily_units or 0,
            "sold_to_date": sold,
            "progress_pct": round(sold / monthly * 100, 1) if monthly > 0 else 0,
            "expected_revenue": round(revenue, 2),
            "unit_cost_at_target": round(cost, 2),
            "profit": round(profit, 2),
            "profit_pct": round(profit / cost * 100, 1) if cost > 0 else 0,
            "status": _status(e),
        })
    return rows


def build_month_summary(
    budget_entries: Iterable[Any],
    ad_product_entries: Iterable[Any],
    selling_targets: Iterable[Any],
    month: str,
    year: int,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """Everything the Business Growth dashboard shows for one month"""
    budgets = [b for b in budget_entries if in_period(b, month, year)]
    entries = [e for e in ad_product_entries if in_period(e, month, year)]
    entry_by_id = {e.id: e for e in entries}
    month_no = month_index(month)
    targets = [
        t for t in selling_targets
        if t.ad_product_entry_id in entry_by_id
        and t.date.year == year and t.date.month == month_no
    ]

    total_budget = sum(b.amount or 0 for b in budgets)
    product_count = len(entries)
    monthly_units = sum(e.required_monthly_units or 0 for e in entries)

    # Planned: every product sells exactly its monthly target
    expected_revenue = sum((e.selling_price or 0) * (e.required_monthly_units or 0) for e in entries)
    product_costs = sum(_unit_cost(e) * (e.required_monthly_units or 0) + _losses(e) for e in entries)
    business_costs = total_budget + product_costs
    expected_profit = expected_revenue - business_costs
    target_profit = sum(
        (_unit_cost(e) * (e.required_monthly_units or 0) + _losses(e)) * (e.desired_profit_pct or 0) / 100
        for e in entries
    )

    # Month to date
    total_days = days_in_month(month, year)
    elapsed = elapsed_days(month, year, today)
    remaining = max(0, total_days - elapsed)
    sold_by_entry: Dict[int, int] = {}
    for t in targets:
        sold_by_entry[t.ad_product_entry_id] = sold_by_entry.get(t.ad_product_entry_id, 0) + (t.sold_units or 0)
    sold = sum(sold_by_entry.values())
    revenue_to_date = sum((entry_by_id[i].selling_price or 0) * n for i, n in sold_by_entry.items())
    unit_cost_to_date = sum(_unit_cost(entry_by_id[i]) * n for i, n in sold_by_entry.items())
    prorate = elapsed / total_days if total_days else 1
    prorated_fixed = (total_budget + sum(_losses(e) for e in entries)) * prorate

    return {
        "month": month,
        "year": year,
        "total_budget": round(total_budget, 2),
        "product_count": product_count,
        "budget_per_product": round(total_budget / max(product_count, 1), 2),
        "monthly_target_units": monthly_units,
        "daily_target_units": sum(e.required_daily_units or 0 for e in entries),
        "infeasible_products": sum(1 for e in entries if _status(e) == "infeasible"),
        "expected_revenue": round(expected_revenue, 2),
        "total_product_costs": round(product_costs, 2),
        "total_business_costs": round(business_costs, 2),
        "expected_profit": round(expected_profit, 2),
        "target_profit": round(target_profit, 2),
        "profit_vs_target_pct": round(expected_profit / target_profit * 100, 1) if target_profit > 0 else 0,
        "days_in_month": total_days,
        "elapsed_days": elapsed,
        "remaining_days": remaining,
        "sold_to_date": sold,
        "revenue_to_date": round(revenue_to_date, 2),
        "unit_cost_to_date": round(unit_cost_to_date, 2),
        "prorated_fixed_costs": round(prorated_fixed, 2),
        "net_profit_to_date": round(revenue_to_date - unit_cost_to_date - prorated_fixed, 2),
        "current_avg_per_day": round(sold / elapsed, 2) if elapsed > 0 else 0,
        "required_per_day": math.ceil(max(0, monthly_units - sold) / remaining) if remaining > 0 else 0,
        "products": build_product_rows(entries, sold_by_entry),
    }
