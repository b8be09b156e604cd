"""
Budget entry model - one planned spend line for a month
"""
from sqlalchemy import Column, Integer, Float, String, Text, DateTime, Index
from datetime import datetime
from growth_backend.database import Base


class BudgetEntry(Base):
    __tablename__ = "budget_entries"

    id = Column(Integer, primary_key=True, index=True)
    month = Column(String, nullable=False)  # "January" .. "December"
    year = Column(Integer, nullable=False)
    expense_type = Column(String, nullable=False)  # Salary, Rent, Marketing, ...
    amount = Column(Float, nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="BDT")
    note = Column(Text, nullable=False, default="")

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("ix_budget_entries_period", "year", "month"),
    )
