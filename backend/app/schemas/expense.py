"""
Pydantic schemas for Expense entity.
"""
from pydantic import BaseModel
from typing import Dict, List, Optional
from datetime import date, datetime, date as dt_date
from decimal import Decimal
import enum


class ExpenseCategory(str, enum.Enum):
    """Fixed expense categories, in display priority order."""
    ACCOMMODATION = "accommodation"
    FOOD = "food"
    TRANSPORT = "transport"
    REPAIRS = "repairs"
    OTHER = "other"


CATEGORY_ORDER: List[ExpenseCategory] = list(ExpenseCategory)


class ExpenseGroupBy(str, enum.Enum):
    NONE = "none"
    DAY = "day"
    CATEGORY = "category"
    COUNTRY = "country"


class ExpenseSortBy(str, enum.Enum):
    DATE_DESC = "date_desc"
    DATE_ASC = "date_asc"
    AMOUNT_DESC = "amount_desc"
    AMOUNT_ASC = "amount_asc"


class Expense(BaseModel):
    """A single spending event on a trip."""
    id: Optional[int] = None
    trip_id: int
    day_plan_id: Optional[str] = None
    date: date
    amount: Decimal
    currency: str = "EUR"
    category: ExpenseCategory = ExpenseCategory.OTHER
    description: Optional[str] = None
    country: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ExpenseCreate(BaseModel):
    """Schema for expense creation. The trip comes from the URL path."""
    date: date
    amount: Decimal
    currency: Optional[str] = None  # Defaults to the trip budget currency or DEFAULT_CURRENCY
    category: ExpenseCategory = ExpenseCategory.OTHER
    description: Optional[str] = None
    country: Optional[str] = None
    day_plan_id: Optional[str] = None


class ExpenseUpdate(BaseModel):
    """Schema for expense update."""
    date: Optional[dt_date] = None
    amount: Optional[Decimal] = None
    currency: Optional[str] = None
    category: Optional[ExpenseCategory] = None
    description: Optional[str] = None
    country: Optional[str] = None
    day_plan_id: Optional[str] = None


class ExpenseGroup(BaseModel):
    """A labelled group of expenses with its subtotal."""
    key: str
    label: str
    expenses: List[Expense]
    subtotal: Decimal


class ExpenseSummary(BaseModel):
    """Derived totals over a trip's expenses."""
    total_amount: Decimal
    currency: str
    by_category: Dict[ExpenseCategory, Decimal]  # Always holds all five categories
    by_day: Dict[date, Decimal]
    by_country: Dict[str, Decimal]  # Only expenses that carry a country
    average_per_day: Decimal


class ExpenseListResponse(BaseModel):
    """Grouped expense listing for a trip."""
    trip_id: int
    group_by: ExpenseGroupBy
    sort_by: ExpenseSortBy
    groups: List[ExpenseGroup]
    total_amount: Decimal
