"""
Budget service comparing trip spending against its budget.
"""
from decimal import Decimal
from typing import Sequence

from app.schemas.budget import BudgetStatus
from app.schemas.expense import Expense
from app.services.expense_service import sum_amounts


def calculate_budget_status(
    budget,
    expenses: Sequence[Expense],
    currency: str,
    near_threshold_percent: float = 80.0,
) -> BudgetStatus:
    """
    Budget status for a set of expenses in one currency.

    Near budget means near_threshold_percent <= used < 100; it is never set
    together with over budget.
    """
    if not isinstance(budget, Decimal):
        budget = Decimal(str(budget))
    spent = sum_amounts(expenses)
    percent_used = float(spent / budget * 100) if budget > 0 else 0.0
    is_over_budget = spent > budget

    return BudgetStatus(
        budget=budget,
        spent=spent,
        remaining=budget - spent,
        percent_used=percent_used,
        currency=currency,
        is_over_budget=is_over_budget,
        is_near_budget=not is_over_budget and near_threshold_percent <= percent_used < 100,
    )
