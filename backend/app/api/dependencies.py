"""
Shared API dependencies.
"""
from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.exceptions import (
    Conflict, InvalidOperation, InvalidParameter, NotFound, PlannerError,
)
from app.core.result import OperationResult
from app.db.session import get_db
from app.repositories.expense_repository import ExpenseRepository
from app.repositories.trip_repository import TripRepository
from app.services.trip_service import TripPlanner

ERROR_STATUS = {
    InvalidParameter: status.HTTP_422_UNPROCESSABLE_ENTITY,
    Conflict: status.HTTP_409_CONFLICT,
    NotFound: status.HTTP_404_NOT_FOUND,
    InvalidOperation: status.HTTP_400_BAD_REQUEST,
}


def get_planner(db: Session = Depends(get_db)) -> TripPlanner:
    """Trip planner bound to the request's database session."""
    return TripPlanner(TripRepository(db), ExpenseRepository(db))


def http_status_for(error: PlannerError) -> int:
    for error_type, code in ERROR_STATUS.items():
        if isinstance(error, error_type):
            return code
    return status.HTTP_400_BAD_REQUEST


def unwrap_or_raise(result: OperationResult):
    """Return the result value, or raise the matching HTTPException."""
    if not result.success:
        raise HTTPException(
            status_code=http_status_for(result.error),
            detail=result.error.to_dict(),
        )
    return result.value
