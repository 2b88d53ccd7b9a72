"""Models package - Import all models for SQLAlchemy registration."""
from app.models.trip import TripPlanModel
from app.models.day_plan import DayPlanModel
from app.models.expense import ExpenseModel

__all__ = [
    "TripPlanModel",
    "DayPlanModel",
    "ExpenseModel",
]
