"""
Ad product entry - one product's cost inputs and sales targets for a month
"""
from sqlalchemy import Column, Integer, Float, String, DateTime, ForeignKey, Enum, Index
from sqlalchemy.orm import relationship
from datetime import datetime
from growth_backend.database import Base
import enum


class TargetStatus(str, enum.Enum):
    OK = "ok"
    # Selling price can't cover unit cost plus the desired margin
    INFEASIBLE = "infeasible"


class AdProductEntry(Base):
    __tablename__ = "ad_product_entries"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="SET NULL"), nullable=True)
    product_name = Column(String, nullable=False)
    product_image = Column(String, nullable=True)  # snapshot at the time of planning
    month = Column(String, nullable=False)
    year = Column(Integer, nullable=False)

    # Per-unit costs and price
    buying_price = Column(Float, nullable=False, default=0)
    selling_price = Column(Float, nullable=False, default=0)
    fb_ad_cost = Column(Float, nullable=False, default=0)
    delivery_cost = Column(Float, nullable=False, default=0)

    # Monthly losses
    return_parcel_qty = Column(Integer, nullable=False, default=0)
    return_cost = Column(Float, nullable=False, default=0)  # return_parcel_qty * delivery_cost
    damaged_product_qty = Column(Integer, nullable=False, default=0)
    damaged_cost = Column(Float, nullable=False, default=0)  # qty * (buying + delivery)

    desired_profit_pct = Column(Float, nullable=True)

    # Derived by the recompute chain only
    monthly_budget = Column(Float, nullable=False, default=0)
    required_monthly_units = Column(Integer, nullable=False, default=0)
    required_daily_units = Column(Integer, nullable=False, default=0)
    target_status = Column(
        Enum(TargetStatus, native_enum=False), nullable=False, default=TargetStatus.OK
    )

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    product = relationship("Product")
    selling_targets = relationship(
        "SellingTargetEntry",
        back_populates="ad_product_entry",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="SellingTargetEntry.date",
    )

    __table_args__ = (
        Index("ix_ad_product_entries_period", "year", "month"),
    )
