"""
Input validation utilities
"""
from typing import Optional

from growth_backend.utils.helpers import MONTHS

EXPENSE_TYPES = [
    "Salary",
    "Rent",
    "Utilities",
    "Marketing",
    "Inventory",
    "Equipment",
    "Insurance",
    "Maintenance",
    "Other",
]

CURRENCIES = ["BDT", "USD", "EUR", "GBP", "JPY", "AUD", "CAD", "CHF", "CNY", "INR"]

MIN_YEAR = 2000
MAX_YEAR = 2100


def validate_month(month: str) -> str:
    """Validate an English calendar month name"""
    if month not in MONTHS:
        raise ValueError(f"Invalid month. Must be one of: {', '.join(MONTHS)}")
    return month


def validate_year(year: int) -> int:
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise ValueError(f"Year must be between {MIN_YEAR} and {MAX_YEAR}")
    return year


def validate_budget_amount(amount: float) -> float:
    """Validate budget amount is not negative"""
    if amount < 0:
        raise ValueError("Budget amount must not be negative")
    return amount


def validate_non_negative(value: Optional[float], field: str = "value") -> Optional[float]:
    if value is not None and value < 0:
        raise ValueError(f"{field} must not be negative")
    return value


def validate_expense_type(expense_type: str) -> str:
    if expense_type not in EXPENSE_TYPES:
        raise ValueError(f"Invalid expense type. Must be one of: {', '.join(EXPENSE_TYPES)}")
    return expense_type


def validate_currency(currency: str) -> str:
    code = currency.upper()
    if code not in CURRENCIES:
        raise ValueError(f"Invalid currency. Must be one of: {', '.join(CURRENCIES)}")
    return code


def validate_profit_pct(pct: Optional[float]) -> Optional[float]:
    """Desired profit is a percentage, e.g. 10 means 10%"""
    if pct is not None and not 0 <= pct <= 1000:
        raise ValueError("Desired profit percentage must be between 0 and 1000")
    return pct
