"""
SQLAlchemy trip plan repository.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session, selectinload

from app.models.day_plan import DayPlanModel
from app.models.trip import TripPlanModel
from app.repositories.base import TripStore, read_guard, write_transaction
from app.schemas.day_plan import DayPlan, RouteSegment
from app.schemas.route import route_source_adapter
from app.schemas.trip import Budget, TripPlan, TripPlanStatus

logger = logging.getLogger(__name__)

# Trip columns a partial update may touch directly
_TRIP_FIELDS = ("name", "status", "end_date", "estimated_days", "daily_distance_km")


def to_day_plan(record: DayPlanModel) -> DayPlan:
    """Convert a day plan row to the DayPlan schema."""
    return DayPlan(
        id=record.id,
        date=record.date,
        route_id=record.route_id,
        start_km=record.start_km,
        target_km=record.target_km,
        actual_km=record.actual_km,
        status=record.status,
        notes=record.notes or "",
        segment=RouteSegment.model_validate(record.segment) if record.segment else None,
    )


def to_trip_plan(record: TripPlanModel) -> TripPlan:
    """Convert a trip row (with its day plans) to the TripPlan schema."""
    budget = None
    if record.budget_amount is not None:
        budget = Budget(amount=record.budget_amount, currency=record.budget_currency or "EUR")

    return TripPlan(
        id=record.id,
        name=record.name,
        route_id=record.route_id,
        route_source=route_source_adapter.validate_python(record.route_source),
        start_date=record.start_date,
        end_date=record.end_date,
        daily_distance_km=record.daily_distance_km,
        total_distance_km=record.total_distance_km,
        estimated_days=record.estimated_days,
        status=record.status,
        budget=budget,
        day_plans=[to_day_plan(day) for day in record.day_plans],
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def _apply_day(record: DayPlanModel, day: DayPlan) -> DayPlanModel:
    record.date = day.date
    record.route_id = day.route_id
    record.start_km = day.start_km
    record.target_km = day.target_km
    record.actual_km = day.actual_km
    record.status = day.status
    record.notes = day.notes
    record.segment = day.segment.model_dump(mode="json") if day.segment else None
    return record


class TripRepository(TripStore):
    """Trip plans stored in SQL tables, day plans as child rows."""

    def __init__(self, db: Session):
        self.db = db

    def _get_record(self, trip_id: int) -> Optional[TripPlanModel]:
        return self.db.query(TripPlanModel).options(
            selectinload(TripPlanModel.day_plans)
        ).filter(TripPlanModel.id == trip_id).first()

    def _sync_day_plans(self, record: TripPlanModel, day_plans: List[DayPlan]):
        """Update rows in place by id, add new days, drop the rest."""
        existing = {day.id: day for day in record.day_plans}
        synced = []
        for day in day_plans:
            row = existing.get(day.id) or DayPlanModel(id=day.id, trip_id=record.id)
            synced.append(_apply_day(row, day))
        # delete-orphan removes dropped days; their expenses lose the day link
        record.day_plans = synced

    def create_trip(self, trip: TripPlan) -> TripPlan:
        record = TripPlanModel(
            name=trip.name,
            route_id=trip.route_id,
            route_source=trip.route_source.model_dump(mode="json"),
            start_date=trip.start_date,
            end_date=trip.end_date,
            daily_distance_km=trip.daily_distance_km,
            total_distance_km=trip.total_distance_km,
            estimated_days=trip.estimated_days,
            status=trip.status,
            budget_amount=trip.budget.amount if trip.budget else None,
            budget_currency=trip.budget.currency if trip.budget else None,
        )
        record.day_plans = [_apply_day(DayPlanModel(id=day.id), day) for day in trip.day_plans]

        with write_transaction(self.db, "create trip"):
            self.db.add(record)
        with read_guard("reload created trip"):
            self.db.refresh(record)
            created = to_trip_plan(record)

        logger.info(f"Created trip {record.id} '{record.name}' with {len(created.day_plans)} days")
        return created

    def update_trip(self, trip_id: int, fields: Dict[str, Any]) -> Optional[TripPlan]:
        with write_transaction(self.db, f"update trip {trip_id}"):
            record = self._get_record(trip_id)
            if not record:
                return None

            for name in _TRIP_FIELDS:
                if name in fields:
                    setattr(record, name, fields[name])
            if "budget" in fields:
                budget = fields["budget"]
                record.budget_amount = budget.amount if budget else None
                record.budget_currency = budget.currency if budget else None
            if "day_plans" in fields:
                self._sync_day_plans(record, fields["day_plans"])

        with read_guard(f"reload trip {trip_id}"):
            self.db.refresh(record)
            return to_trip_plan(record)

    def delete_trip(self, trip_id: int) -> bool:
        with write_transaction(self.db, f"delete trip {trip_id}"):
            record = self.db.query(TripPlanModel).filter(TripPlanModel.id == trip_id).first()
            if not record:
                return False
            self.db.delete(record)

        logger.info(f"Deleted trip {trip_id}")
        return True

    def get_trip(self, trip_id: int) -> Optional[TripPlan]:
        with read_guard(f"load trip {trip_id}"):
            record = self._get_record(trip_id)
            return to_trip_plan(record) if record else None

    def list_trips(self, status: Optional[TripPlanStatus] = None) -> List[TripPlan]:
        with read_guard("list trips"):
            query = self.db.query(TripPlanModel).options(selectinload(TripPlanModel.day_plans))
            if status is not None:
                query = query.filter(TripPlanModel.status == status)
            return [to_trip_plan(record) for record in query.order_by(TripPlanModel.id).all()]

    def get_active_trip(self) -> Optional[TripPlan]:
        with read_guard("load active trip"):
            record = self.db.query(TripPlanModel).options(
                selectinload(TripPlanModel.day_plans)
            ).filter(
                TripPlanModel.status == TripPlanStatus.ACTIVE
            ).order_by(TripPlanModel.updated_at.desc(), TripPlanModel.id.desc()).first()
            return to_trip_plan(record) if record else None
