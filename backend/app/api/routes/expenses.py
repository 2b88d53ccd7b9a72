"""
Expense routes.
"""
from fastapi import APIRouter, Depends, status
from app.api.dependencies import get_planner, unwrap_or_raise
from app.schemas.expense import (
    Expense, ExpenseCreate, ExpenseGroupBy, ExpenseListResponse, ExpenseSortBy,
    ExpenseSummary, ExpenseUpdate,
)
from app.services.trip_service import TripPlanner

router = APIRouter(prefix="/trips/{trip_id}/expenses", tags=["expenses"])


@router.post("", response_model=Expense, status_code=status.HTTP_201_CREATED)
async def create_expense(
    trip_id: int,
    expense_data: ExpenseCreate,
    planner: TripPlanner = Depends(get_planner)
):
    """Record an expense, optionally linked to a day of the trip."""
    return unwrap_or_raise(planner.add_expense(trip_id, expense_data))


@router.get("", response_model=ExpenseListResponse)
async def list_expenses(
    trip_id: int,
    group_by: ExpenseGroupBy = ExpenseGroupBy.NONE,
    sort_by: ExpenseSortBy = ExpenseSortBy.DATE_DESC,
    planner: TripPlanner = Depends(get_planner)
):
    """List expenses sorted and grouped for display."""
    return unwrap_or_raise(planner.list_expenses(trip_id, group_by=group_by, sort_by=sort_by))


@router.get("/summary", response_model=ExpenseSummary)
async def get_expense_summary(trip_id: int, planner: TripPlanner = Depends(get_planner)):
    """Totals by category, day and country."""
    return unwrap_or_raise(planner.get_expense_summary(trip_id))


@router.patch("/{expense_id}", response_model=Expense)
async def update_expense(
    trip_id: int,
    expense_id: int,
    expense_data: ExpenseUpdate,
    planner: TripPlanner = Depends(get_planner)
):
    return unwrap_or_raise(planner.update_expense(trip_id, expense_id, expense_data))


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_expense(trip_id: int, expense_id: int, planner: TripPlanner = Depends(get_planner)):
    unwrap_or_raise(planner.delete_expense(trip_id, expense_id))
