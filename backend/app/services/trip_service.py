"""
Trip planner service: the single owner of trip state changes.

Every edit reads the current trip from the store, runs a pure schedule
operation on it and writes the outcome back. Only persisted state is returned.
A rejected edit writes nothing; a storage failure propagates as
PersistenceFailure and the store rolls back, so an edit is applied entirely
or not at all.
"""
import logging
import threading
from datetime import date
from typing import Callable, Dict, List, Optional

from app.core.config import settings
from app.core.exceptions import InvalidOperation, InvalidParameter, NotFound
from app.core.result import returns_result
from app.repositories.base import ExpenseStore, TripStore
from app.schemas.budget import BudgetStatus
from app.schemas.day_plan import DayPlan, DayPlanStatus
from app.schemas.expense import (
    Expense, ExpenseCreate, ExpenseGroupBy, ExpenseListResponse, ExpenseSortBy,
    ExpenseSummary, ExpenseUpdate,
)
from app.schemas.route import Route, RouteSource
from app.schemas.trip import Budget, TripPlan, TripPlanStatus, TripStats, TripSummary
from app.services import schedule_service
from app.services.budget_service import calculate_budget_status
from app.services.expense_service import (
    get_expense_summary, group_expenses, sort_expenses, sum_amounts,
)
from app.services.progress_service import calculate_trip_stats, calculate_trip_summary
from app.services.route_splitter import create_trip_plan

logger = logging.getLogger(__name__)

ScheduleEdit = Callable[[TripPlan], List[DayPlan]]


class TripLocks:
    """One lock per trip, so edits to the same trip run one at a time."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[int, threading.Lock] = {}

    def for_trip(self, trip_id: int) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault(trip_id, threading.Lock())

    def discard(self, trip_id: int):
        with self._guard:
            self._locks.pop(trip_id, None)


# Shared by every TripPlanner in the process
trip_locks = TripLocks()


class TripPlanner:
    """Creates trips, applies schedule edits and serves derived views."""

    def __init__(
        self,
        trip_store: TripStore,
        expense_store: Optional[ExpenseStore] = None,
        locks: Optional[TripLocks] = None,
        default_daily_distance_km: float = settings.DEFAULT_DAILY_DISTANCE_KM,
        default_currency: str = settings.DEFAULT_CURRENCY,
        near_budget_threshold_percent: float = settings.NEAR_BUDGET_THRESHOLD_PERCENT,
    ):
        self.trips = trip_store
        self.expenses = expense_store
        self.locks = locks or trip_locks
        self.default_daily_distance_km = default_daily_distance_km
        self.default_currency = default_currency
        self.near_budget_threshold_percent = near_budget_threshold_percent

    # ── Internal helpers ────────────────────────────────────────────────────

    def _load(self, trip_id: int) -> TripPlan:
        trip = self.trips.get_trip(trip_id)
        if trip is None:
            raise NotFound(f"Trip {trip_id} not found")
        return trip

    def _save(self, trip_id: int, fields: dict) -> TripPlan:
        saved = self.trips.update_trip(trip_id, fields)
        if saved is None:
            raise NotFound(f"Trip {trip_id} not found")
        return saved

    def _expense_store(self) -> ExpenseStore:
        if self.expenses is None:
            raise InvalidOperation("Expense tracking is not configured")
        return self.expenses

    def _edit_schedule(self, trip_id: int, action: str, edit: ScheduleEdit, derive_status: bool = False) -> TripPlan:
        with self.locks.for_trip(trip_id):
            trip = self._load(trip_id)
            days = edit(trip)
            fields = {
                "day_plans": days,
                "end_date": days[-1].date if days else None,
            }
            if derive_status:
                fields["status"] = schedule_service.derive_trip_status(trip.status, days)
            saved = self._save(trip_id, fields)

        logger.info(f"Trip {trip_id}: {action} ({len(saved.day_plans)} days, status {saved.status.value})")
        return saved

    def _check_day_link(self, trip: TripPlan, day_plan_id: Optional[str]):
        if day_plan_id is not None and trip.find_day_index(day_plan_id) < 0:
            raise NotFound(f"Day plan {day_plan_id} not found in trip {trip.id}")

    def _check_amount(self, amount):
        if amount is not None and amount < 0:
            raise InvalidParameter("Expense amount cannot be negative")

    # ── Trips ───────────────────────────────────────────────────────────────

    @returns_result
    def create_trip(
        self,
        route: Route,
        route_source: RouteSource,
        start_date: date,
        daily_distance_km: Optional[float] = None,
        name: Optional[str] = None,
        budget: Optional[Budget] = None,
    ) -> TripPlan:
        """Split the route into days and store the new trip."""
        if daily_distance_km is None:
            daily_distance_km = self.default_daily_distance_km
        trip = create_trip_plan(route, route_source, start_date, daily_distance_km, name).unwrap()
        if budget is not None:
            trip = trip.model_copy(update={"budget": budget})
        return self.trips.create_trip(trip)

    @returns_result
    def get_trip(self, trip_id: int) -> TripPlan:
        return self._load(trip_id)

    def list_trips(self, status: Optional[TripPlanStatus] = None) -> List[TripPlan]:
        return self.trips.list_trips(status)

    def get_active_trip(self) -> Optional[TripPlan]:
        return self.trips.get_active_trip()

    @returns_result
    def delete_trip(self, trip_id: int) -> bool:
        """Delete a trip together with its day plans and expenses."""
        with self.locks.for_trip(trip_id):
            if not self.trips.delete_trip(trip_id):
                raise NotFound(f"Trip {trip_id} not found")
        self.locks.discard(trip_id)
        return True

    @returns_result
    def rename_trip(self, trip_id: int, name: str) -> TripPlan:
        if not name or not name.strip():
            raise InvalidParameter("Trip name cannot be empty")
        with self.locks.for_trip(trip_id):
            self._load(trip_id)
            return self._save(trip_id, {"name": name.strip()})

    @returns_result
    def set_budget(self, trip_id: int, budget: Optional[Budget]) -> TripPlan:
        """Set or clear (None) the trip budget."""
        with self.locks.for_trip(trip_id):
            self._load(trip_id)
            return self._save(trip_id, {"budget": budget})

    @returns_result
    def pause_trip(self, trip_id: int) -> TripPlan:
        with self.locks.for_trip(trip_id):
            trip = self._load(trip_id)
            if trip.status == TripPlanStatus.COMPLETED:
                raise InvalidOperation("A completed trip cannot be paused")
            if trip.status == TripPlanStatus.PAUSED:
                return trip
            return self._save(trip_id, {"status": TripPlanStatus.PAUSED})

    @returns_result
    def resume_trip(self, trip_id: int) -> TripPlan:
        with self.locks.for_trip(trip_id):
            trip = self._load(trip_id)
            if trip.status != TripPlanStatus.PAUSED:
                raise InvalidOperation("Only a paused trip can be resumed")
            started = any(day.status == DayPlanStatus.COMPLETED for day in trip.day_plans)
            status = TripPlanStatus.ACTIVE if started else TripPlanStatus.PLANNING
            status = schedule_service.derive_trip_status(status, trip.day_plans)
            return self._save(trip_id, {"status": status})

    # ── Schedule edits ──────────────────────────────────────────────────────

    @returns_result
    def update_day_distance(self, trip_id: int, day_id: str, target_km: float) -> TripPlan:
        return self._edit_schedule(
            trip_id, f"day {day_id} set to {target_km} km",
            lambda trip: schedule_service.update_day_distance(trip.day_plans, day_id, target_km).unwrap(),
        )

    @returns_result
    def update_day_date(self, trip_id: int, day_id: str, new_date) -> TripPlan:
        return self._edit_schedule(
            trip_id, f"day {day_id} moved to {new_date}",
            lambda trip: schedule_service.update_day_date(trip.day_plans, day_id, new_date).unwrap(),
        )

    @returns_result
    def insert_rest_day(self, trip_id: int, after_day_id: str) -> TripPlan:
        return self._edit_schedule(
            trip_id, f"rest day inserted after {after_day_id}",
            lambda trip: schedule_service.insert_rest_day(trip.day_plans, after_day_id).unwrap(),
        )

    @returns_result
    def remove_day(self, trip_id: int, day_id: str) -> TripPlan:
        return self._edit_schedule(
            trip_id, f"day {day_id} removed",
            lambda trip: schedule_service.remove_day(trip.day_plans, day_id).unwrap(),
        )

    @returns_result
    def adjust_remaining(self, trip_id: int, through_index: int) -> TripPlan:
        """Spread the distance left after `through_index` over the remaining days."""
        return self._edit_schedule(
            trip_id, f"remaining days adjusted after day index {through_index}",
            lambda trip: schedule_service.adjust_remaining_after_completion(trip, through_index).unwrap(),
            derive_status=True,
        )

    @returns_result
    def start_day(self, trip_id: int, day_id: str) -> TripPlan:
        return self._edit_schedule(
            trip_id, f"day {day_id} started",
            lambda trip: schedule_service.start_day(trip.day_plans, day_id).unwrap(),
        )

    @returns_result
    def skip_day(self, trip_id: int, day_id: str) -> TripPlan:
        return self._edit_schedule(
            trip_id, f"day {day_id} skipped",
            lambda trip: schedule_service.skip_day(trip.day_plans, day_id).unwrap(),
            derive_status=True,
        )

    @returns_result
    def complete_day(self, trip_id: int, day_id: str, actual_km: float, redistribute: bool = False) -> TripPlan:
        """
        Mark a day as ridden.

        With `redistribute`, the distance still to go is spread evenly over
        the days after it.
        """
        def edit(trip: TripPlan) -> List[DayPlan]:
            days = schedule_service.complete_day(trip.day_plans, day_id, actual_km).unwrap()
            if not redistribute:
                return days
            updated = trip.model_copy(update={"day_plans": days})
            return schedule_service.adjust_remaining_after_completion(
                updated, updated.find_day_index(day_id)
            ).unwrap()

        return self._edit_schedule(
            trip_id, f"day {day_id} completed with {actual_km} km", edit, derive_status=True,
        )

    # ── Progress ────────────────────────────────────────────────────────────

    @returns_result
    def get_trip_stats(self, trip_id: int) -> TripStats:
        return calculate_trip_stats(self._load(trip_id))

    @returns_result
    def get_trip_summary(self, trip_id: int) -> TripSummary:
        return calculate_trip_summary(self._load(trip_id).day_plans)

    # ── Expenses ────────────────────────────────────────────────────────────

    @returns_result
    def add_expense(self, trip_id: int, data: ExpenseCreate) -> Expense:
        store = self._expense_store()
        trip = self._load(trip_id)
        self._check_amount(data.amount)
        self._check_day_link(trip, data.day_plan_id)

        currency = data.currency or (trip.budget.currency if trip.budget else self.default_currency)
        expense = Expense(
            trip_id=trip_id,
            day_plan_id=data.day_plan_id,
            date=data.date,
            amount=data.amount,
            currency=currency.upper(),
            category=data.category,
            description=data.description,
            country=data.country,
        )
        return store.create_expense(expense)

    def _load_expense(self, trip_id: int, expense_id: int) -> Expense:
        expense = self._expense_store().get_expense(expense_id)
        if expense is None or expense.trip_id != trip_id:
            raise NotFound(f"Expense {expense_id} not found")
        return expense

    @returns_result
    def update_expense(self, trip_id: int, expense_id: int, data: ExpenseUpdate) -> Expense:
        store = self._expense_store()
        self._load_expense(trip_id, expense_id)
        fields = data.model_dump(exclude_unset=True)
        self._check_amount(fields.get("amount"))
        if fields.get("day_plan_id") is not None:
            self._check_day_link(self._load(trip_id), fields["day_plan_id"])

        updated = store.update_expense(expense_id, fields)
        if updated is None:
            raise NotFound(f"Expense {expense_id} not found")
        return updated

    @returns_result
    def delete_expense(self, trip_id: int, expense_id: int) -> bool:
        self._load_expense(trip_id, expense_id)
        return self._expense_store().delete_expense(expense_id)

    @returns_result
    def list_expenses(
        self,
        trip_id: int,
        group_by: ExpenseGroupBy = ExpenseGroupBy.NONE,
        sort_by: ExpenseSortBy = ExpenseSortBy.DATE_DESC,
    ) -> ExpenseListResponse:
        """Sorted expenses, grouped for display."""
        self._load(trip_id)
        expenses = sort_expenses(self._expense_store().list_for_trip(trip_id), sort_by)
        return ExpenseListResponse(
            trip_id=trip_id,
            group_by=group_by,
            sort_by=sort_by,
            groups=group_expenses(expenses, group_by),
            total_amount=sum_amounts(expenses),
        )

    @returns_result
    def expenses_for_day(self, trip_id: int, day_id: str) -> List[Expense]:
        trip = self._load(trip_id)
        self._check_day_link(trip, day_id)
        return self._expense_store().list_for_day(day_id)

    @returns_result
    def get_expense_summary(self, trip_id: int) -> ExpenseSummary:
        self._load(trip_id)
        expenses = self._expense_store().list_for_trip(trip_id)
        return get_expense_summary(expenses, default_currency=self.default_currency)

    @returns_result
    def get_budget_status(self, trip_id: int) -> BudgetStatus:
        trip = self._load(trip_id)
        if trip.budget is None:
            raise NotFound(f"Trip {trip_id} has no budget")
        expenses = self._expense_store().list_for_trip(trip_id)
        return calculate_budget_status(
            trip.budget.amount,
            expenses,
            trip.budget.currency,
            near_threshold_percent=self.near_budget_threshold_percent,
        )
