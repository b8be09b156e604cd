"""
Calendar and money helpers shared by the planner
"""
import calendar
from datetime import date
from decimal import Decimal
from typing import Any, List

MONTHS: List[str] = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


def month_index(month: str) -> int:
    """1-based month number for an English month name"""
    try:
        return MONTHS.index(month) + 1
    except ValueError:
        raise ValueError(f"Unknown month: {month!r}") from None


def month_name(month_number: int) -> str:
    return MONTHS[month_number - 1]


def days_in_month(month: str, year: int) -> int:
    return calendar.monthrange(year, month_index(month))[1]


def month_bounds(month: str, year: int) -> tuple[date, date]:
    """First and last calendar day of a month"""
    idx = month_index(month)
    return date(year, idx, 1), date(year, idx, days_in_month(month, year))


def in_month(day: date, month: str, year: int) -> bool:
    return (day.year, day.month) == (year, month_index(month))


def elapsed_days(month: str, year: int, today: date | None = None) -> int:
    """Days elapsed in the period: today's day for the current month, else all of it"""
    today = today or date.today()
    if today.year == year and today.month == month_index(month):
        return today.day
    return days_in_month(month, year)


def to_decimal(value: Any) -> Decimal:
    """Decimal from float/int/str/None, going through str to keep 1.2 == 1.2"""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def format_currency(amount: float, currency: str = "BDT") -> str:
    return f"{amount:,.2f} {currency}"
