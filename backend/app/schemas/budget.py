"""
Pydantic schemas for budget status.
"""
from pydantic import BaseModel
from decimal import Decimal


class BudgetStatus(BaseModel):
    """Spending compared against a trip budget. Recomputed on demand."""
    budget: Decimal
    spent: Decimal
    remaining: Decimal  # Negative when over budget
    percent_used: float  # Percentage of budget used (0 when the budget is 0)
    currency: str
    is_over_budget: bool
    is_near_budget: bool  # Never true together with is_over_budget
