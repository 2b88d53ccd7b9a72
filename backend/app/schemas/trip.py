"""
Pydantic schemas for TripPlan entity.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal
import enum

from app.schemas.day_plan import DayPlan
from app.schemas.route import Route, RouteSource


class TripPlanStatus(str, enum.Enum):
    """Trip plan status enumeration."""
    PLANNING = "planning"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"


class Difficulty(str, enum.Enum):
    """Route difficulty used for distance and riding-time suggestions."""
    EASY = "easy"
    MODERATE = "moderate"
    DIFFICULT = "difficult"


class Budget(BaseModel):
    """Optional trip budget."""
    amount: Decimal = Field(ge=0)
    currency: str = Field(default="EUR", min_length=3, max_length=3)


class TripPlan(BaseModel):
    """The complete ordered schedule plus metadata for one cycling tour."""
    id: Optional[int] = None  # Assigned by the store
    name: str
    route_id: str
    route_source: RouteSource
    start_date: date
    end_date: Optional[date] = None
    daily_distance_km: float
    total_distance_km: float
    estimated_days: int = 0
    status: TripPlanStatus = TripPlanStatus.PLANNING
    budget: Optional[Budget] = None
    day_plans: List[DayPlan] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    def find_day_index(self, day_id: str) -> int:
        """Index of a day plan, -1 if it is not part of this trip."""
        for index, day in enumerate(self.day_plans):
            if day.id == day_id:
                return index
        return -1


class TripCreate(BaseModel):
    """Schema for trip creation from an already-parsed route."""
    name: Optional[str] = None
    route: Route
    route_source: RouteSource
    start_date: date
    daily_distance_km: Optional[float] = None  # Falls back to DEFAULT_DAILY_DISTANCE_KM
    budget: Optional[Budget] = None


class TripUpdate(BaseModel):
    """Schema for trip metadata update."""
    name: Optional[str] = None
    budget: Optional[Budget] = None
    clear_budget: bool = False


class TripStats(BaseModel):
    """Trip-level completion statistics."""
    completed_km: float
    remaining_km: float  # Negative when the rider went further than planned
    completed_days: int
    remaining_days: int
    progress_percent: float  # Not clamped, can exceed 100


class TripSummary(BaseModel):
    """Ridden-distance summary over a trip's days."""
    total_days: int
    cycling_days: int
    rest_days: int
    total_distance_km: float
    average_distance_per_day: float
    longest_day_km: float
    shortest_day_km: float


class AdjustRemainingRequest(BaseModel):
    """Schema for redistributing the distance left after a given day."""
    through_index: int
