"""
Selling target entry - planned vs sold units for one product on one day
"""
from sqlalchemy import Column, Integer, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from growth_backend.database import Base


class SellingTargetEntry(Base):
    __tablename__ = "selling_target_entries"

    id = Column(Integer, primary_key=True, index=True)
    ad_product_entry_id = Column(
        Integer, ForeignKey("ad_product_entries.id", ondelete="CASCADE"), nullable=False
    )
    date = Column(Date, nullable=False)
    target_units = Column(Integer, nullable=False, default=0)
    sold_units = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    ad_product_entry = relationship("AdProductEntry", back_populates="selling_targets")

    __table_args__ = (
        UniqueConstraint("ad_product_entry_id", "date", name="uq_selling_target_entry_date"),
    )
