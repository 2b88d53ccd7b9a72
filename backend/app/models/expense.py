"""
Expense model for tracking trip spending.
"""
from sqlalchemy import Column, String, Numeric, Date, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


class ExpenseModel(BaseModel):
    """Expense model representing a single spending event."""
    __tablename__ = "expenses"

    trip_id = Column(Integer, ForeignKey("trip_plans.id", ondelete="CASCADE"), nullable=False, index=True)
    day_plan_id = Column(String(36), ForeignKey("day_plans.id", ondelete="SET NULL"), nullable=True, index=True)
    date = Column(Date, nullable=False, index=True)
    amount = Column(Numeric(15, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="EUR")
    category = Column(String(20), nullable=False, default="other", index=True)
    description = Column(Text, nullable=True)
    country = Column(String(100), nullable=True)

    # Relationships
    trip = relationship("TripPlanModel", back_populates="expenses")
    day_plan = relationship("DayPlanModel", back_populates="expenses")
