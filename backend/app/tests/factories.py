"""
Builders for routes, day plans, trips and expenses used across the tests.
"""
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError

from app.repositories.base import write_transaction
from app.repositories.trip_repository import TripRepository
from app.schemas.day_plan import DayPlan, DayPlanStatus
from app.schemas.expense import Expense, ExpenseCategory
from app.schemas.route import EuroVeloSource, Route, RoutePoint
from app.schemas.trip import TripPlan

START_DATE = date(2024, 6, 1)


def make_route(total_km: float = 250.0, step_km: float = 10.0, route_id: str = "ev6") -> Route:
    """Straight-ish route with a point every `step_km` and one at the very end."""
    points = []
    distance = 0.0
    while distance < total_km:
        points.append(RoutePoint(
            latitude=47.0 + distance / 1000,
            longitude=7.0 + distance / 1000,
            distance_from_start_km=distance,
        ))
        distance += step_km
    points.append(RoutePoint(
        latitude=47.0 + total_km / 1000,
        longitude=7.0 + total_km / 1000,
        distance_from_start_km=total_km,
    ))
    return Route(id=route_id, name="EuroVelo 6", points=points, total_distance_km=total_km)


def make_days(
    targets: Sequence[float],
    start: date = START_DATE,
    statuses: Optional[Sequence[DayPlanStatus]] = None,
) -> list:
    """Contiguous days d1..dn on consecutive dates, without segments."""
    days = []
    start_km = 0.0
    for index, target in enumerate(targets):
        days.append(DayPlan(
            id=f"d{index + 1}",
            date=start + timedelta(days=index),
            route_id="ev6",
            start_km=start_km,
            target_km=target,
            status=statuses[index] if statuses else DayPlanStatus.PLANNED,
        ))
        start_km += target
    return days


def make_trip(days: Sequence[DayPlan], total_km: Optional[float] = None, **overrides) -> TripPlan:
    fields = dict(
        id=1,
        name="EuroVelo 6 Trip",
        route_id="ev6",
        route_source=EuroVeloSource(eurovelo_id=6),
        start_date=days[0].date if days else START_DATE,
        daily_distance_km=100.0,
        total_distance_km=total_km if total_km is not None else sum(day.target_km for day in days),
        day_plans=list(days),
    )
    fields.update(overrides)
    return TripPlan(**fields)


def make_expense(
    amount,
    category: ExpenseCategory = ExpenseCategory.OTHER,
    day: date = START_DATE,
    country: Optional[str] = None,
    expense_id: Optional[int] = None,
    currency: str = "EUR",
) -> Expense:
    return Expense(
        id=expense_id,
        trip_id=1,
        date=day,
        amount=Decimal(str(amount)),
        currency=currency,
        category=category,
        country=country,
    )


def assert_contiguous(days: Sequence[DayPlan]):
    """Each day starts where the previous one ends."""
    for previous, current in zip(days, days[1:]):
        assert abs(current.start_km - (previous.start_km + previous.target_km)) < 1e-9, (
            f"{current.id} starts at {current.start_km}, expected {previous.start_km + previous.target_km}"
        )


class FailingTripRepository(TripRepository):
    """Trip store whose writes fail after touching the row."""

    def update_trip(self, trip_id, fields):
        with write_transaction(self.db, f"update trip {trip_id}"):
            record = self._get_record(trip_id)
            record.name = "half written"
            raise SQLAlchemyError("disk I/O error")
