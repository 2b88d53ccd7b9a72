"""
SQLAlchemy expense repository.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.expense import ExpenseModel
from app.repositories.base import ExpenseStore, read_guard, write_transaction
from app.schemas.expense import Expense, ExpenseCategory

logger = logging.getLogger(__name__)

_EXPENSE_FIELDS = ("day_plan_id", "date", "amount", "currency", "category", "description", "country")


def to_expense(record: ExpenseModel) -> Expense:
    """Convert an expense row to the Expense schema."""
    return Expense(
        id=record.id,
        trip_id=record.trip_id,
        day_plan_id=record.day_plan_id,
        date=record.date,
        amount=record.amount,
        currency=record.currency,
        category=ExpenseCategory(record.category),
        description=record.description,
        country=record.country,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def _column_value(name: str, value: Any) -> Any:
    if name == "category" and value is not None:
        return ExpenseCategory(value).value
    if name == "currency" and value:
        return value.upper()
    return value


class ExpenseRepository(ExpenseStore):
    """Expenses stored in the `expenses` table."""

    def __init__(self, db: Session):
        self.db = db

    def _query_trip(self, trip_id: int):
        return self.db.query(ExpenseModel).filter(ExpenseModel.trip_id == trip_id)

    def create_expense(self, expense: Expense) -> Expense:
        record = ExpenseModel(
            trip_id=expense.trip_id,
            **{name: _column_value(name, getattr(expense, name)) for name in _EXPENSE_FIELDS},
        )
        with write_transaction(self.db, f"create expense for trip {expense.trip_id}"):
            self.db.add(record)
        with read_guard(f"reload expense for trip {expense.trip_id}"):
            self.db.refresh(record)
            created = to_expense(record)

        logger.info(f"Created expense {record.id} ({record.amount} {record.currency}) for trip {record.trip_id}")
        return created

    def update_expense(self, expense_id: int, fields: Dict[str, Any]) -> Optional[Expense]:
        with write_transaction(self.db, f"update expense {expense_id}"):
            record = self.db.query(ExpenseModel).filter(ExpenseModel.id == expense_id).first()
            if not record:
                return None
            for name in _EXPENSE_FIELDS:
                if name in fields:
                    setattr(record, name, _column_value(name, fields[name]))

        with read_guard(f"reload expense {expense_id}"):
            self.db.refresh(record)
            return to_expense(record)

    def delete_expense(self, expense_id: int) -> bool:
        with write_transaction(self.db, f"delete expense {expense_id}"):
            deleted = self.db.query(ExpenseModel).filter(ExpenseModel.id == expense_id).delete()
        return deleted > 0

    def get_expense(self, expense_id: int) -> Optional[Expense]:
        with read_guard(f"load expense {expense_id}"):
            record = self.db.query(ExpenseModel).filter(ExpenseModel.id == expense_id).first()
            return to_expense(record) if record else None

    def list_for_trip(self, trip_id: int) -> List[Expense]:
        with read_guard(f"list expenses for trip {trip_id}"):
            records = self._query_trip(trip_id).order_by(ExpenseModel.date, ExpenseModel.id).all()
            return [to_expense(record) for record in records]

    def list_for_day(self, day_plan_id: str) -> List[Expense]:
        with read_guard(f"list expenses for day {day_plan_id}"):
            records = self.db.query(ExpenseModel).filter(
                ExpenseModel.day_plan_id == day_plan_id
            ).order_by(ExpenseModel.id).all()
            return [to_expense(record) for record in records]

    def list_for_date_range(self, trip_id: int, start_date: date, end_date: date) -> List[Expense]:
        with read_guard(f"list expenses for trip {trip_id}"):
            records = self._query_trip(trip_id).filter(
                ExpenseModel.date >= start_date,
                ExpenseModel.date <= end_date,
            ).order_by(ExpenseModel.date, ExpenseModel.id).all()
            return [to_expense(record) for record in records]

    def list_for_category(self, trip_id: int, category: ExpenseCategory) -> List[Expense]:
        with read_guard(f"list expenses for trip {trip_id}"):
            records = self._query_trip(trip_id).filter(
                ExpenseModel.category == ExpenseCategory(category).value
            ).order_by(ExpenseModel.date, ExpenseModel.id).all()
            return [to_expense(record) for record in records]

    def daily_total(self, trip_id: int, day: date) -> Decimal:
        with read_guard(f"total expenses for trip {trip_id}"):
            total = self.db.query(func.sum(ExpenseModel.amount)).filter(
                ExpenseModel.trip_id == trip_id,
                ExpenseModel.date == day,
            ).scalar()
            return Decimal(str(total)) if total is not None else Decimal(0)

    def delete_all_for_trip(self, trip_id: int) -> int:
        with write_transaction(self.db, f"delete expenses for trip {trip_id}"):
            deleted = self._query_trip(trip_id).delete()
        return deleted
