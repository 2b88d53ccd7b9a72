"""
Pydantic schemas for DayPlan entity.
"""
from pydantic import BaseModel, Field, computed_field
from typing import Optional
from datetime import date
import enum

from app.schemas.route import Coordinate


class DayPlanStatus(str, enum.Enum):
    """Day plan status enumeration."""
    PLANNED = "planned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    SKIPPED = "skipped"


TERMINAL_DAY_STATUSES = (DayPlanStatus.COMPLETED, DayPlanStatus.SKIPPED)


class RouteSegment(BaseModel):
    """The part of the route covered by one day."""
    route_id: str
    start_km: float
    end_km: float
    distance_km: float
    start_point: Coordinate
    end_point: Coordinate


class DayPlan(BaseModel):
    """One day's riding assignment within a trip schedule."""
    id: str
    date: date
    route_id: str
    start_km: float = 0.0  # Position along the route where the day starts
    target_km: float = Field(default=0.0, ge=0)  # Planned length of the day
    actual_km: Optional[float] = None  # Set on completion
    status: DayPlanStatus = DayPlanStatus.PLANNED
    notes: str = ""
    segment: Optional[RouteSegment] = None

    model_config = {"from_attributes": True}

    @property
    def end_km(self) -> float:
        return self.start_km + self.target_km

    @computed_field
    @property
    def is_rest_day(self) -> bool:
        return is_rest_day(self)


def is_rest_day(day: DayPlan) -> bool:
    """A rest day has no distance to ride or has been skipped."""
    return day.target_km == 0 or day.status == DayPlanStatus.SKIPPED


class DayDistanceUpdate(BaseModel):
    """Schema for changing a day's target distance."""
    target_km: float


class DayDateUpdate(BaseModel):
    """Schema for moving a day to another date (YYYY-MM-DD)."""
    date: str


class DayCompletion(BaseModel):
    """Schema for marking a day as ridden."""
    actual_km: float
    redistribute: bool = False  # Spread the remaining distance over the days left
