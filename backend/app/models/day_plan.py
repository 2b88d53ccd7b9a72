"""
Day plan model for one day of a trip schedule.
"""
from sqlalchemy import Column, String, Date, Float, ForeignKey, Integer, Text, JSON, Enum as SQLEnum
from sqlalchemy.orm import relationship
from app.db.base import Base, TimestampMixin
from app.schemas.day_plan import DayPlanStatus


class DayPlanModel(TimestampMixin, Base):
    """Day plan keyed by the id the planner assigns when it creates the day."""
    __tablename__ = "day_plans"

    id = Column(String(36), primary_key=True)
    trip_id = Column(Integer, ForeignKey("trip_plans.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    route_id = Column(String(100), nullable=False)
    start_km = Column(Float, nullable=False, default=0.0)
    target_km = Column(Float, nullable=False, default=0.0)
    actual_km = Column(Float, nullable=True)
    status = Column(
        SQLEnum(DayPlanStatus, values_callable=lambda e: [m.value for m in e]),
        default=DayPlanStatus.PLANNED,
        nullable=False,
    )
    notes = Column(Text, nullable=False, default="")
    segment = Column(JSON, nullable=True)  # Serialized RouteSegment

    # Relationships
    trip = relationship("TripPlanModel", back_populates="day_plans")
    expenses = relationship("ExpenseModel", back_populates="day_plan")
