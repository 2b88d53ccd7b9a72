"""
Schedule editing service.

Cascading recalculation of a trip's day plans after a user edits one day.
Every operation takes the current day list (contiguous and sorted by date),
returns a new list inside an OperationResult, and never mutates its input.

Contiguity: for adjacent days, next.start_km == prev.start_km + prev.target_km.
"""
import logging
from datetime import date
from typing import Iterable, List, Optional, Sequence

from app.core.exceptions import Conflict, InvalidOperation, InvalidParameter, NotFound
from app.core.result import returns_result
from app.core.utils import add_days, parse_iso_date
from app.schemas.day_plan import DayPlan, DayPlanStatus, TERMINAL_DAY_STATUSES
from app.schemas.trip import TripPlan, TripPlanStatus
from app.services.route_splitter import new_day_id

logger = logging.getLogger(__name__)

REST_DAY_NOTE = "Rest day"
AHEAD_OF_SCHEDULE_NOTE = "Route completed ahead of schedule"


def _find_index(days: Sequence[DayPlan], day_id: str) -> int:
    for index, day in enumerate(days):
        if day.id == day_id:
            return index
    raise NotFound(f"Day plan {day_id} not found")


def _with_position(day: DayPlan, start_km: float, target_km: Optional[float] = None) -> DayPlan:
    """Copy of `day` moved to `start_km`, with its segment kept in step."""
    if target_km is None:
        target_km = day.target_km
    end_km = start_km + target_km
    update = {"start_km": start_km, "target_km": target_km}
    if day.segment is not None:
        update["segment"] = day.segment.model_copy(update={
            "start_km": start_km,
            "end_km": end_km,
            "distance_km": target_km,
        })
    return day.model_copy(update=update)


def recalculate_subsequent_days(days: Sequence[DayPlan], modified_index: int) -> List[DayPlan]:
    """
    Re-chain start_km for every day after `modified_index`.

    Each later day keeps its own target_km; only its position moves.
    """
    result = list(days)
    if modified_index < 0 or modified_index >= len(result):
        return result

    current_km = result[modified_index].end_km
    for index in range(modified_index + 1, len(result)):
        result[index] = _with_position(result[index], current_km)
        current_km = result[index].end_km
    return result


def _chain_from(days: Sequence[DayPlan], origin_km: float) -> List[DayPlan]:
    """Lay all days end to end starting at `origin_km`."""
    result = []
    current_km = origin_km
    for day in days:
        moved = _with_position(day, current_km)
        result.append(moved)
        current_km = moved.end_km
    return result


def has_date_conflict(days: Iterable[DayPlan], new_date: date, exclude_day_id: Optional[str] = None) -> bool:
    """True if a day other than `exclude_day_id` already uses `new_date`."""
    return any(day.date == new_date and day.id != exclude_day_id for day in days)


@returns_result
def update_day_distance(days: Sequence[DayPlan], day_id: str, new_target_km: float) -> List[DayPlan]:
    """
    Set one day's target distance and shift every later day along.

    Later days keep their own target_km, so the schedule's total length
    grows or shrinks by the difference. Nothing is redistributed.
    """
    if new_target_km is None or new_target_km < 0:
        raise InvalidParameter("Target km cannot be negative")

    index = _find_index(days, day_id)
    result = list(days)
    result[index] = _with_position(result[index], result[index].start_km, new_target_km)

    logger.debug(f"Day {day_id} target set to {new_target_km} km, cascading {len(result) - index - 1} days")
    return recalculate_subsequent_days(result, index)


@returns_result
def update_day_date(days: Sequence[DayPlan], day_id: str, new_date) -> List[DayPlan]:
    """
    Move one day to another date, re-sort and re-chain the schedule.

    The chain restarts at the start_km of whichever day comes first after
    sorting, and every day keeps its own target_km.
    """
    try:
        new_date = parse_iso_date(new_date)
    except (TypeError, ValueError):
        raise InvalidParameter(f"Invalid date: {new_date!r}")

    index = _find_index(days, day_id)
    if has_date_conflict(days, new_date, exclude_day_id=day_id):
        raise Conflict("Another day already has this date")

    result = list(days)
    result[index] = result[index].model_copy(update={"date": new_date})
    # sorted() is stable, equal dates cannot occur after the conflict check
    result = sorted(result, key=lambda day: day.date)
    return _chain_from(result, result[0].start_km)


@returns_result
def insert_rest_day(days: Sequence[DayPlan], after_day_id: str) -> List[DayPlan]:
    """
    Insert a zero-km skipped day the day after `after_day_id`.

    Every day dated after that point moves forward one calendar day.
    """
    index = _find_index(days, after_day_id)
    after_day = days[index]
    rest_date = add_days(after_day.date, 1)
    start_km = after_day.end_km

    rest_day = DayPlan(
        id=new_day_id(),
        date=rest_date,
        route_id=after_day.route_id,
        start_km=start_km,
        target_km=0.0,
        actual_km=None,
        status=DayPlanStatus.SKIPPED,
        notes=REST_DAY_NOTE,
        segment=after_day.segment.model_copy(update={
            "start_km": start_km,
            "end_km": start_km,
            "distance_km": 0.0,
        }) if after_day.segment is not None else None,
    )

    result = []
    for day in days:
        if day.date > after_day.date:
            day = day.model_copy(update={"date": add_days(day.date, 1)})
        result.append(day)
    result.insert(index + 1, rest_day)

    logger.debug(f"Inserted rest day on {rest_date} after day {after_day_id}")
    return recalculate_subsequent_days(result, index)


@returns_result
def remove_day(days: Sequence[DayPlan], day_id: str) -> List[DayPlan]:
    """
    Remove a day and re-chain everything after it from its new predecessor.

    A trip must keep at least one day.
    """
    index = _find_index(days, day_id)
    if len(days) == 1:
        raise InvalidOperation("Cannot remove the only day of a trip")

    result = [day for day in days if day.id != day_id]
    if index > 0:
        return recalculate_subsequent_days(result, index - 1)
    # The new first day keeps its position, the rest are already chained to it
    return result


@returns_result
def adjust_remaining_after_completion(trip: TripPlan, through_index: int) -> List[DayPlan]:
    """
    Redistribute the distance left after `through_index` evenly over the
    remaining days.

    Ridden distance counts actual_km where recorded, target_km otherwise.
    When the route is already covered, every remaining day that is not yet
    finished is marked skipped instead.
    """
    days = list(trip.day_plans)
    if through_index < 0 or through_index >= len(days):
        raise InvalidParameter(f"Day index {through_index} is out of range")

    done = days[:through_index + 1]
    remaining = days[through_index + 1:]
    if not remaining:
        return days

    completed_km = sum(
        day.actual_km if day.actual_km is not None else day.target_km
        for day in done
    )
    total_km = trip.total_distance_km

    if completed_km >= total_km:
        logger.info(f"Trip {trip.id} covered {completed_km} of {total_km} km, skipping {len(remaining)} days")
        skipped = [
            day if day.status in TERMINAL_DAY_STATUSES else day.model_copy(update={
                "status": DayPlanStatus.SKIPPED,
                "notes": day.notes or AHEAD_OF_SCHEDULE_NOTE,
            })
            for day in remaining
        ]
        return done + skipped

    new_daily_km = (total_km - completed_km) / len(remaining)
    current_km = completed_km
    adjusted = []
    for day in remaining:
        end_km = min(current_km + new_daily_km, total_km)
        adjusted.append(_with_position(day, current_km, end_km - current_km))
        current_km = end_km

    logger.debug(f"Redistributed {total_km - completed_km} km over {len(remaining)} days ({new_daily_km:.2f} km/day)")
    return done + adjusted


def _transition(days: Sequence[DayPlan], day_id: str, allowed_from, update: dict) -> List[DayPlan]:
    index = _find_index(days, day_id)
    day = days[index]
    if day.status not in allowed_from:
        raise InvalidOperation(
            f"Cannot change day {day_id} from {day.status.value} to {update['status'].value}"
        )
    result = list(days)
    result[index] = day.model_copy(update=update)
    return result


@returns_result
def start_day(days: Sequence[DayPlan], day_id: str) -> List[DayPlan]:
    """planned -> in_progress"""
    return _transition(days, day_id, (DayPlanStatus.PLANNED,), {"status": DayPlanStatus.IN_PROGRESS})


@returns_result
def complete_day(days: Sequence[DayPlan], day_id: str, actual_km: float) -> List[DayPlan]:
    """planned | in_progress -> completed, recording the distance ridden."""
    if actual_km is None or actual_km < 0:
        raise InvalidParameter("Actual km cannot be negative")
    return _transition(
        days, day_id,
        (DayPlanStatus.PLANNED, DayPlanStatus.IN_PROGRESS),
        {"status": DayPlanStatus.COMPLETED, "actual_km": actual_km},
    )


@returns_result
def skip_day(days: Sequence[DayPlan], day_id: str) -> List[DayPlan]:
    """planned -> skipped"""
    return _transition(days, day_id, (DayPlanStatus.PLANNED,), {"status": DayPlanStatus.SKIPPED})


def derive_trip_status(current: TripPlanStatus, days: Sequence[DayPlan]) -> TripPlanStatus:
    """
    Trip status after a day status change.

    completed once every day is completed or skipped, paused or not. Otherwise
    planning becomes active on the first completed day, and paused is only
    left by explicit user action.
    """
    if days and all(day.status in TERMINAL_DAY_STATUSES for day in days):
        return TripPlanStatus.COMPLETED
    if current == TripPlanStatus.PAUSED:
        return current
    if current == TripPlanStatus.PLANNING and any(day.status == DayPlanStatus.COMPLETED for day in days):
        return TripPlanStatus.ACTIVE
    return current


def get_remaining_km(days: Sequence[DayPlan], from_index: int) -> float:
    """Total target km from `from_index` (inclusive) to the end."""
    return sum(day.target_km for day in days[from_index:])


def get_next_available_date(existing_dates: Iterable[date], today: date) -> date:
    """The day after the latest existing date, or `today` for an empty trip."""
    dates = list(existing_dates)
    if not dates:
        return today
    return add_days(max(dates), 1)
