"""
Tests for budget status.
"""
from decimal import Decimal

import pytest

from app.services.budget_service import calculate_budget_status
from app.tests.factories import make_expense


def test_budget_near_limit():
    status = calculate_budget_status(100, [make_expense(60), make_expense(30)], "EUR")

    assert status.spent == Decimal(90)
    assert status.remaining == Decimal(10)
    assert status.percent_used == pytest.approx(90.0)
    assert status.currency == "EUR"
    assert not status.is_over_budget
    assert status.is_near_budget


def test_budget_over_limit():
    status = calculate_budget_status(Decimal(100), [make_expense(60), make_expense(50)], "EUR")

    assert status.is_over_budget
    assert not status.is_near_budget
    assert status.remaining == Decimal(-10)
    assert status.percent_used == pytest.approx(110.0)


def test_budget_exactly_used():
    status = calculate_budget_status(100, [make_expense(100)], "EUR")

    assert status.percent_used == pytest.approx(100.0)
    assert not status.is_over_budget
    assert not status.is_near_budget


def test_budget_well_within_limit():
    status = calculate_budget_status(100, [make_expense("49.99")], "EUR")

    assert not status.is_over_budget
    assert not status.is_near_budget


def test_zero_budget():
    status = calculate_budget_status(0, [make_expense(10)], "EUR")

    assert status.percent_used == 0
    assert status.is_over_budget
    assert not status.is_near_budget


def test_no_expenses():
    status = calculate_budget_status("250.00", [], "CHF")

    assert status.spent == 0
    assert status.remaining == Decimal("250.00")
    assert status.percent_used == 0


def test_custom_near_threshold():
    expenses = [make_expense(70)]

    assert not calculate_budget_status(100, expenses, "EUR").is_near_budget
    assert calculate_budget_status(100, expenses, "EUR", near_threshold_percent=60).is_near_budget
