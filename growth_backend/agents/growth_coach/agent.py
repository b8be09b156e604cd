"""
Growth Coach Agent - reads the month's pace against its targets and suggests actions
"""
import json
import math
from typing import Any, Dict

from anthropic import APIError

from growth_backend.agents.base_agent import BaseAgent
from growth_backend.agents.growth_coach.prompts import (
    SYSTEM_PROMPT,
    GROWTH_COACH_PROMPT,
    GROWTH_COACH_RESPONSE_FORMAT,
)
from growth_backend.config import get_settings
from growth_backend.utils.helpers import format_currency
from growth_backend.utils.logger import get_logger

logger = get_logger(__name__)
settings = get_settings()

AMBER_RATIO = 0.7
MAX_PRODUCTS_IN_PROMPT = 10


def pace_status(current_avg: float, required_per_day: float) -> str:
    if current_avg >= required_per_day:
        return "green"
    if current_avg >= required_per_day * AMBER_RATIO:
        return "amber"
    return "red"


def month_status(summary: Dict[str, Any]) -> str:
    """Pace for an open month; units sold against target once no days are left"""
    if summary["remaining_days"] > 0:
        return pace_status(summary["current_avg_per_day"], summary["required_per_day"])
    return pace_status(summary["sold_to_date"], summary["monthly_target_units"])


class GrowthCoachAgent(BaseAgent):
    """Turns a month summary into a status, observations and next actions"""

    def __init__(self, claude=None):
        super().__init__(name="GrowthCoachAgent", claude=claude)

    async def process(self, context: Dict[str, Any]) -> Dict[str, Any]:
        summary = context["summary"]
        language = context.get("language", "en")
        status = month_status(summary)

        if not self.ai_available:
            return self.build_fallback(summary, status)

        try:
            advice = await self.generate_structured_response(
                prompt=self._format_prompt(summary, language),
                system_prompt=SYSTEM_PROMPT,
                response_format=GROWTH_COACH_RESPONSE_FORMAT,
            )
        except (APIError, RuntimeError, ValueError) as e:
            logger.warning(f"Growth coach AI call failed, using fallback: {e}")
            return self.build_fallback(summary, status)

        return {
            "status": status,
            "summary": str(advice.get("summary", "")),
            "bullets": [str(b) for b in advice.get("bullets", []) if b],
            "next_actions": [str(a) for a in advice.get("next_actions", []) if a],
            "source": "ai",
        }

    def _format_prompt(self, summary: Dict[str, Any], language: str) -> str:
        products = [
            {
                "name": p["product_name"],
                "target_monthly": p["required_monthly_units"],
                "target_daily": p["required_daily_units"],
                "sold_to_date": p["sold_to_date"],
                "status": p["status"],
            }
            for p in summary["products"][:MAX_PRODUCTS_IN_PROMPT]
        ]
        return GROWTH_COACH_PROMPT.format(
            month=summary["month"],
            year=summary["year"],
            elapsed_days=summary["elapsed_days"],
            days_in_month=summary["days_in_month"],
            remaining_days=summary["remaining_days"],
            monthly_target=summary["monthly_target_units"],
            sold_to_date=summary["sold_to_date"],
            required_per_day=summary["required_per_day"],
            current_avg_per_day=summary["current_avg_per_day"],
            monthly_budget=summary["total_budget"],
            infeasible_products=summary["infeasible_products"],
            products=json.dumps(products, indent=2, ensure_ascii=False),
            language=language,
        )

    def build_fallback(self, summary: Dict[str, Any], status: str) -> Dict[str, Any]:
        """Heuristic advice that works without the AI service"""
        target = summary["monthly_target_units"]
        sold = summary["sold_to_date"]
        remaining = summary["remaining_days"]
        gap = max(0, target - sold)
        needed = math.ceil(gap / remaining) if remaining > 0 else 0

        bullets = [
            f"Current pace: {summary['current_avg_per_day']}/day vs required: {summary['required_per_day']}/day",
            f"Remaining target: {gap} units",
            f"Month: {summary['month']} {summary['year']}",
            f"Monthly budget: {format_currency(summary['total_budget'], settings.DEFAULT_CURRENCY)}",
        ]
        if summary["infeasible_products"]:
            bullets.append(
                f"{summary['infeasible_products']} product(s) cannot reach their profit goal at the current price"
            )

        return {
            "status": status,
            "summary": (
                f"Monthly target {target} units, sold {sold}. "
                f"About {needed} units/day needed over the remaining {remaining} days. Status: {status}."
            ),
            "bullets": bullets,
            "next_actions": [
                "Move +15% budget to the top 2 products and start a new creative A/B test",
                "Run a 6-8 hour flash offer today (free or discounted delivery)",
                "Cut return and damage cost by reviewing courier and packaging",
                "Rewrite copy and thumbnails on low-converting products",
                "Reprice or pause products whose targets are unreachable",
            ],
            "source": "fallback",
        }
