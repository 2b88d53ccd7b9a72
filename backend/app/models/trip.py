"""
Trip plan model for cycling tours.
"""
from sqlalchemy import Column, String, Date, Float, Integer, Numeric, JSON, Enum as SQLEnum
from sqlalchemy.orm import relationship
from app.db.base import BaseModel
from app.schemas.trip import TripPlanStatus


class TripPlanModel(BaseModel):
    """Trip plan model representing one cycling tour."""
    __tablename__ = "trip_plans"

    name = Column(String(200), nullable=False)
    route_id = Column(String(100), nullable=False, index=True)
    route_source = Column(JSON, nullable=False)  # Serialized RouteSource union
    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=True)
    daily_distance_km = Column(Float, nullable=False)
    total_distance_km = Column(Float, nullable=False)
    estimated_days = Column(Integer, nullable=False, default=0)
    status = Column(
        SQLEnum(TripPlanStatus, values_callable=lambda e: [m.value for m in e]),
        default=TripPlanStatus.PLANNING,
        nullable=False,
        index=True,
    )
    budget_amount = Column(Numeric(15, 2), nullable=True)
    budget_currency = Column(String(3), nullable=True)

    # Relationships
    day_plans = relationship(
        "DayPlanModel",
        back_populates="trip",
        cascade="all, delete-orphan",
        order_by="DayPlanModel.date",
    )
    expenses = relationship("ExpenseModel", back_populates="trip", cascade="all, delete-orphan")
