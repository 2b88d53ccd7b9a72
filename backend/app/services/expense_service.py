"""
Expense aggregation service: grouping, sorting and summaries.

All amounts are assumed to share one currency; there is no conversion.
"""
from collections import OrderedDict
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Sequence

from app.schemas.expense import (
    CATEGORY_ORDER, Expense, ExpenseCategory, ExpenseGroup, ExpenseGroupBy,
    ExpenseSortBy, ExpenseSummary,
)

ALL_EXPENSES_LABEL = "All Expenses"
UNKNOWN_COUNTRY = "Unknown"

CATEGORY_LABELS: Dict[ExpenseCategory, str] = {
    ExpenseCategory.ACCOMMODATION: "Accommodation",
    ExpenseCategory.FOOD: "Food & Drinks",
    ExpenseCategory.TRANSPORT: "Transport",
    ExpenseCategory.REPAIRS: "Repairs",
    ExpenseCategory.OTHER: "Other",
}

SORT_LABELS: Dict[ExpenseSortBy, str] = {
    ExpenseSortBy.DATE_DESC: "Newest First",
    ExpenseSortBy.DATE_ASC: "Oldest First",
    ExpenseSortBy.AMOUNT_DESC: "Highest Amount",
    ExpenseSortBy.AMOUNT_ASC: "Lowest Amount",
}

GROUP_BY_LABELS: Dict[ExpenseGroupBy, str] = {
    ExpenseGroupBy.NONE: "No Grouping",
    ExpenseGroupBy.DAY: "By Day",
    ExpenseGroupBy.CATEGORY: "By Category",
    ExpenseGroupBy.COUNTRY: "By Country",
}


def sum_amounts(expenses: Iterable[Expense]) -> Decimal:
    return sum((expense.amount for expense in expenses), Decimal(0))


def format_day_label(day: date) -> str:
    """Group header for a date, e.g. 'Mon, Jun 3'."""
    return f"{day:%a}, {day:%b} {day.day}"


def format_currency(amount: Decimal, currency: str) -> str:
    """Format an amount for display, e.g. '1,234.50 EUR'."""
    return f"{Decimal(amount):,.2f} {currency}"


def sort_label(sort_by: ExpenseSortBy) -> str:
    return SORT_LABELS[ExpenseSortBy(sort_by)]


def group_by_label(group_by: ExpenseGroupBy) -> str:
    return GROUP_BY_LABELS[ExpenseGroupBy(group_by)]


def _group_key(expense: Expense, group_by: ExpenseGroupBy) -> str:
    if group_by == ExpenseGroupBy.DAY:
        return expense.date.isoformat()
    if group_by == ExpenseGroupBy.CATEGORY:
        return ExpenseCategory(expense.category).value
    if group_by == ExpenseGroupBy.COUNTRY:
        return expense.country or UNKNOWN_COUNTRY
    raise ValueError(f"Unsupported group_by: {group_by}")


def _group_label(key: str, group_by: ExpenseGroupBy) -> str:
    if group_by == ExpenseGroupBy.DAY:
        return format_day_label(date.fromisoformat(key))
    if group_by == ExpenseGroupBy.CATEGORY:
        return CATEGORY_LABELS[ExpenseCategory(key)]
    return key


def group_expenses(expenses: Sequence[Expense], group_by: ExpenseGroupBy) -> List[ExpenseGroup]:
    """
    Group expenses for display.

    - none: a single "All Expenses" group
    - day: one group per date, newest first
    - category: present categories only, always in the fixed category order
    - country: alphabetical, expenses without a country last under "Unknown"

    Expenses keep their input order inside each group.
    """
    group_by = ExpenseGroupBy(group_by)
    if group_by == ExpenseGroupBy.NONE:
        return [ExpenseGroup(
            key="all",
            label=ALL_EXPENSES_LABEL,
            expenses=list(expenses),
            subtotal=sum_amounts(expenses),
        )]

    buckets: "OrderedDict[str, List[Expense]]" = OrderedDict()
    for expense in expenses:
        buckets.setdefault(_group_key(expense, group_by), []).append(expense)

    groups = [
        ExpenseGroup(
            key=key,
            label=_group_label(key, group_by),
            expenses=members,
            subtotal=sum_amounts(members),
        )
        for key, members in buckets.items()
    ]

    if group_by == ExpenseGroupBy.DAY:
        # ISO keys sort chronologically
        groups.sort(key=lambda group: group.key, reverse=True)
    elif group_by == ExpenseGroupBy.CATEGORY:
        order = [category.value for category in CATEGORY_ORDER]
        groups.sort(key=lambda group: order.index(group.key))
    elif group_by == ExpenseGroupBy.COUNTRY:
        groups.sort(key=lambda group: (group.key == UNKNOWN_COUNTRY, group.label.casefold()))

    return groups


def sort_expenses(expenses: Sequence[Expense], sort_by: ExpenseSortBy) -> List[Expense]:
    """Stable sort: expenses with equal keys keep their relative order."""
    sort_by = ExpenseSortBy(sort_by)
    if sort_by == ExpenseSortBy.DATE_DESC:
        return sorted(expenses, key=lambda e: e.date, reverse=True)
    if sort_by == ExpenseSortBy.DATE_ASC:
        return sorted(expenses, key=lambda e: e.date)
    if sort_by == ExpenseSortBy.AMOUNT_DESC:
        return sorted(expenses, key=lambda e: e.amount, reverse=True)
    return sorted(expenses, key=lambda e: e.amount)


def get_expense_summary(expenses: Sequence[Expense], default_currency: str = "EUR") -> ExpenseSummary:
    """
    Totals by category, day and country.

    by_category always lists all five categories. The currency is the first
    expense's, or `default_currency` for an empty trip.
    """
    by_category: Dict[ExpenseCategory, Decimal] = {category: Decimal(0) for category in CATEGORY_ORDER}
    by_day: Dict[date, Decimal] = {}
    by_country: Dict[str, Decimal] = {}
    total = Decimal(0)

    for expense in expenses:
        total += expense.amount
        category = ExpenseCategory(expense.category)
        by_category[category] += expense.amount
        by_day[expense.date] = by_day.get(expense.date, Decimal(0)) + expense.amount
        if expense.country:
            by_country[expense.country] = by_country.get(expense.country, Decimal(0)) + expense.amount

    average_per_day = total / len(by_day) if by_day else Decimal(0)

    return ExpenseSummary(
        total_amount=total,
        currency=expenses[0].currency if expenses else default_currency,
        by_category=by_category,
        by_day=by_day,
        by_country=by_country,
        average_per_day=average_per_day,
    )
