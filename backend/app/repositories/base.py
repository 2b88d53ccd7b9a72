"""
Persistence contracts used by the trip planner.

The planner depends only on these signatures. SQLAlchemy implementations
live next to this module; tests swap in their own stores.
"""
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import PersistenceFailure
from app.schemas.expense import Expense, ExpenseCategory
from app.schemas.trip import TripPlan, TripPlanStatus

logger = logging.getLogger(__name__)


@contextmanager
def write_transaction(db: Session, action: str):
    """Commit on success; roll back and raise PersistenceFailure on any database error."""
    try:
        yield
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to {action}: {e}", exc_info=True)
        raise PersistenceFailure(f"Failed to {action}") from e
    except Exception:
        db.rollback()
        raise


@contextmanager
def read_guard(action: str):
    """Wrap database errors raised while reading."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"Failed to {action}: {e}", exc_info=True)
        raise PersistenceFailure(f"Failed to {action}") from e


class TripStore(ABC):
    """CRUD contract for trip plans and their schedules."""

    @abstractmethod
    def create_trip(self, trip: TripPlan) -> TripPlan:
        """Persist a new trip with its day plans and return it with its id."""

    @abstractmethod
    def update_trip(self, trip_id: int, fields: Dict[str, Any]) -> Optional[TripPlan]:
        """
        Apply a partial update. A `day_plans` entry replaces the whole schedule.
        Returns None when the trip does not exist.
        """

    @abstractmethod
    def delete_trip(self, trip_id: int) -> bool:
        """Delete a trip with its day plans and expenses."""

    @abstractmethod
    def get_trip(self, trip_id: int) -> Optional[TripPlan]:
        pass

    @abstractmethod
    def list_trips(self, status: Optional[TripPlanStatus] = None) -> List[TripPlan]:
        pass

    @abstractmethod
    def get_active_trip(self) -> Optional[TripPlan]:
        """Most recently updated active trip."""


class ExpenseStore(ABC):
    """CRUD contract for expenses, scoped by trip and day."""

    @abstractmethod
    def create_expense(self, expense: Expense) -> Expense:
        pass

    @abstractmethod
    def update_expense(self, expense_id: int, fields: Dict[str, Any]) -> Optional[Expense]:
        pass

    @abstractmethod
    def delete_expense(self, expense_id: int) -> bool:
        pass

    @abstractmethod
    def get_expense(self, expense_id: int) -> Optional[Expense]:
        pass

    @abstractmethod
    def list_for_trip(self, trip_id: int) -> List[Expense]:
        pass

    @abstractmethod
    def list_for_day(self, day_plan_id: str) -> List[Expense]:
        pass

    @abstractmethod
    def list_for_date_range(self, trip_id: int, start_date: date, end_date: date) -> List[Expense]:
        pass

    @abstractmethod
    def list_for_category(self, trip_id: int, category: ExpenseCategory) -> List[Expense]:
        pass

    @abstractmethod
    def daily_total(self, trip_id: int, day: date) -> Decimal:
        pass

    @abstractmethod
    def delete_all_for_trip(self, trip_id: int) -> int:
        pass
