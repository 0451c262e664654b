"""Unit tests for budget execution aggregation"""

import pytest
from datetime import date
from decimal import Decimal
from budget_execution.domain.execution import aggregate_budget_execution, summarize
from budget_execution.domain.exceptions import (
    InvalidPaymentMethodError,
    InvalidRecurrenceConfigError,
    InvalidViewModeError,
)
from budget_execution.domain.models import ExecutionBucket
from budget_execution.utils.date_utils import SUNDAY


def test_daily_buckets_merge_same_date(make_budget):
    """Test two budgets on 2025-03-15 land in a single bucket"""
    budgets = [
        make_budget(budget_id="a", category_default_day=15, total_amount=Decimal("100.00")),
        make_budget(budget_id="b", category_id="c-2", category_name="Rent", default_date=date(2025, 3, 15),
                    total_amount=Decimal("250.50"), payment_method="debit"),
    ]

    result = aggregate_budget_execution(budgets, "daily")

    assert len(result.buckets) == 1
    bucket = result.buckets[0]
    assert bucket.key == "2025-03-15"
    assert bucket.amount_cents == 35050
    assert bucket.day_of_week == 6  # Saturday
    assert len(result.details["2025-03-15"]) == 2
    assert {d.category_name for d in result.details["2025-03-15"]} == {"Groceries", "Rent"}


def test_daily_buckets_sorted_ascending(make_budget):
    budgets = [
        make_budget(budget_id="late", category_default_day=20),
        make_budget(budget_id="early", category_default_day=2),
        make_budget(budget_id="mid", default_date=date(2025, 3, 9)),
    ]

    result = aggregate_budget_execution(budgets, "daily")

    assert [b.key for b in result.buckets] == ["2025-03-02", "2025-03-09", "2025-03-20"]


def test_recurring_budget_spreads_across_buckets(make_budget):
    budget = make_budget(total_amount=Decimal("100.01"), recurrence_frequency="biweekly", category_default_day=1)

    result = aggregate_budget_execution([budget], "daily")

    assert [(b.key, b.amount_cents) for b in result.buckets] == [("2025-03-01", 5000), ("2025-03-16", 5001)]
    assert result.summary.total_cents == 10001
    assert result.summary.installment_count == 2


def test_weekly_bucket_monday_to_sunday(make_budget):
    """Test Monday 2025-03-10 and Sunday 2025-03-16 share an ISO week"""
    budgets = [
        make_budget(budget_id="mon", category_default_day=10, total_amount=Decimal("10.00")),
        make_budget(budget_id="sun", category_default_day=16, total_amount=Decimal("20.00")),
    ]

    result = aggregate_budget_execution(budgets, "weekly")

    assert len(result.buckets) == 1
    bucket = result.buckets[0]
    assert bucket.key == "week-11"
    assert bucket.week_number == 11
    assert bucket.week_start == date(2025, 3, 10)
    assert bucket.week_end == date(2025, 3, 16)
    assert bucket.amount_cents == 3000
    assert len(result.details["week-11"]) == 2


def test_weekly_sunday_start_convention(make_budget):
    budgets = [
        make_budget(budget_id="mon", category_default_day=10),
        make_budget(budget_id="sun", category_default_day=16),
    ]

    result = aggregate_budget_execution(budgets, "weekly", week_starts_on=SUNDAY)

    assert len(result.buckets) == 2
    assert result.buckets[1].week_start == date(2025, 3, 16)
    assert result.buckets[1].week_end == date(2025, 3, 22)


def test_weekly_buckets_sorted_by_week_number(make_budget):
    """Test ISO weeks that straddle a year boundary sort by number, not by date"""
    january = [
        make_budget(budget_id="fri", period_year=2027, period_month=1, category_default_day=1),
        make_budget(budget_id="tue", period_year=2027, period_month=1, category_default_day=5),
    ]
    december = [
        make_budget(budget_id="early", period_month=12, category_default_day=1),
        make_budget(budget_id="late", period_month=12, category_default_day=29),
    ]

    january_result = aggregate_budget_execution(january, "weekly")
    december_result = aggregate_budget_execution(december, "weekly")

    assert [b.week_number for b in january_result.buckets] == [1, 53]
    assert [b.week_number for b in december_result.buckets] == [1, 49]


def test_empty_period_returns_zeroed_summary():
    result = aggregate_budget_execution([], "daily")

    assert result.buckets == []
    assert result.details == {}
    assert result.summary.total_cents == 0
    assert result.summary.average_per_bucket == 0
    assert result.summary.peak_cents == 0
    assert result.summary.peak_key == ""


def test_peak_and_average(make_budget):
    budgets = [
        make_budget(budget_id="a", category_default_day=1, total_amount=Decimal("40")),
        make_budget(budget_id="b", category_default_day=2, total_amount=Decimal("60")),
    ]

    summary = aggregate_budget_execution(budgets, "daily").summary

    assert summary.total_cents == 10000
    assert summary.average_per_bucket == Decimal("5000")
    assert summary.peak_key == "2025-03-02"
    assert summary.peak_cents == 6000
    assert summary.min_cents == 4000


def test_peak_tie_keeps_first_bucket():
    buckets = [
        ExecutionBucket(key="2025-03-01", amount_cents=500),
        ExecutionBucket(key="2025-03-02", amount_cents=500),
    ]

    assert summarize(buckets).peak_key == "2025-03-01"


def test_invalid_view_mode_rejected(make_budget):
    with pytest.raises(InvalidViewModeError):
        aggregate_budget_execution([make_budget()], "monthly")


def test_invalid_budget_isolated(make_budget):
    budgets = [
        make_budget(budget_id="good", category_default_day=5),
        make_budget(budget_id="bad", recurrence_frequency="monthly"),
    ]

    result = aggregate_budget_execution(budgets, "daily")

    assert [b.key for b in result.buckets] == ["2025-03-05"]
    assert len(result.skipped) == 1
    assert result.skipped[0].budget_id == "bad"
    assert result.skipped[0].error == "InvalidRecurrenceConfigError"


def test_invalid_budget_fails_request_when_not_skipping(make_budget):
    budgets = [make_budget(budget_id="bad", recurrence_frequency="monthly")]

    with pytest.raises(InvalidRecurrenceConfigError):
        aggregate_budget_execution(budgets, "daily", skip_invalid=False)


def test_payment_method_filter(make_budget):
    budgets = [
        make_budget(budget_id="cash", payment_method="cash", category_default_day=1),
        make_budget(budget_id="credit", payment_method="credit", category_default_day=2),
    ]

    result = aggregate_budget_execution(budgets, "daily", payment_methods=["credit"])

    assert [b.key for b in result.buckets] == ["2025-03-02"]
    assert result.details["2025-03-02"][0].budget_id == "credit"


@pytest.mark.parametrize("methods", [[], ["bitcoin"], ["cash", "cash"]])
def test_invalid_payment_method_filter(make_budget, methods):
    with pytest.raises(InvalidPaymentMethodError):
        aggregate_budget_execution([make_budget()], "daily", payment_methods=methods)


def test_out_of_range_start_day_isolated(make_budget):
    budgets = [
        make_budget(budget_id="good", category_default_day=5),
        make_budget(budget_id="bad", category_default_day=40),
    ]

    result = aggregate_budget_execution(budgets, "daily")

    assert [b.key for b in result.buckets] == ["2025-03-05"]
    assert len(result.skipped) == 1
    assert result.skipped[0].budget_id == "bad"
    assert result.skipped[0].error == "InvalidStartDayError"
