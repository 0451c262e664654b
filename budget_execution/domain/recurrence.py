"""Recurring budget expansion into dated installments"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Union

from budget_execution.domain.exceptions import (
    BudgetExpansionError,
    InvalidBudgetAmountError,
    InvalidRecurrenceConfigError,
    InvalidStartDayError,
)
from budget_execution.domain.models import Budget, ExpandedBudgetPayment
from budget_execution.utils.date_utils import clamp_day_to_month, days_in_month

MIN_DAY = 1
MAX_DAY = 31


@dataclass(frozen=True)
class OneTime:
    """Single installment for the full amount"""

    step_days: int = 0
    count: Optional[int] = 1


@dataclass(frozen=True)
class Weekly:
    """Every 7 days from the start day until the end of the month"""

    step_days: int = 7
    count: Optional[int] = None


@dataclass(frozen=True)
class Biweekly:
    """Two installments, 15 days apart"""

    step_days: int = 15
    count: Optional[int] = 2


@dataclass(frozen=True)
class Triweekly:
    """Three installments, 10 days apart"""

    step_days: int = 10
    count: Optional[int] = 3


@dataclass(frozen=True)
class Custom:
    step_days: int
    count: Optional[int]


RecurrencePolicy = Union[OneTime, Weekly, Biweekly, Triweekly, Custom]

FREQUENCY_ALIASES = {
    "weekly": Weekly,
    "biweekly": Biweekly,
    "bi-weekly": Biweekly,
    "triweekly": Triweekly,
    "tri-weekly": Triweekly,
}

VALID_FREQUENCIES = ("weekly", "biweekly", "triweekly", "custom")


def parse_recurrence_policy(
    frequency: Optional[str],
    step_days: Optional[int] = None,
    count: Optional[int] = None,
) -> RecurrencePolicy:
    """
    Map a stored frequency string to a recurrence policy.

    Null or empty frequency means a one-time budget. "custom" requires a
    positive step and a positive installment count.

    Raises:
        InvalidRecurrenceConfigError: Unknown frequency or bad custom cadence
    """
    if not frequency:
        return OneTime()

    normalized = frequency.strip().lower()
    if normalized in FREQUENCY_ALIASES:
        return FREQUENCY_ALIASES[normalized]()

    if normalized == "custom":
        if not step_days or step_days < 1:
            raise InvalidRecurrenceConfigError(f"Custom recurrence requires a positive step, got {step_days}")
        if not count or count < 1:
            raise InvalidRecurrenceConfigError(f"Custom recurrence requires a positive count, got {count}")
        return Custom(step_days=step_days, count=count)

    raise InvalidRecurrenceConfigError(
        f"Unknown recurrence frequency '{frequency}'. Must be one of: {', '.join(VALID_FREQUENCIES)}"
    )


def resolve_start_day(category_default_day: Optional[int], budget_default_date: Optional[date]) -> int:
    """Category default day wins over the budget's stored date, which wins over day 1"""
    if category_default_day is not None:
        return category_default_day
    if budget_default_date is not None:
        return budget_default_date.day
    return MIN_DAY


def to_cents(amount: Decimal) -> int:
    """Convert a decimal currency amount to integer minor units"""
    return int(Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP) * 100)


def installment_days(policy: RecurrencePolicy, start_day: int, year: int, month: int) -> List[int]:
    """
    Days of month on which installments fall, ascending.

    Fixed-count policies keep their count: a date past the end of the month
    is clamped to the last day. Open-ended policies (weekly) stop at month end.
    """
    if not MIN_DAY <= start_day <= MAX_DAY:
        raise InvalidStartDayError(f"Start day must be between {MIN_DAY} and {MAX_DAY}, got {start_day}")

    last_day = days_in_month(year, month)
    first_day = clamp_day_to_month(start_day, year, month)

    if isinstance(policy, OneTime):
        return [first_day]
    if isinstance(policy, (Biweekly, Triweekly, Custom)) and policy.count is not None:
        return [min(first_day + i * policy.step_days, last_day) for i in range(policy.count)]
    if isinstance(policy, (Weekly, Custom)):
        return list(range(first_day, last_day + 1, policy.step_days))

    raise InvalidRecurrenceConfigError(f"Unsupported recurrence policy {policy!r}")


def calculate_expected_payments(policy: RecurrencePolicy, start_day: int, year: int, month: int) -> int:
    """Number of installments a policy yields in the given month"""
    return len(installment_days(policy, start_day, year, month))


def describe_recurrence(policy: RecurrencePolicy, start_day: Optional[int] = None) -> str:
    """Human-readable description, e.g. 'Weekly from day 5'"""
    if isinstance(policy, OneTime):
        label = "One-time payment"
        return f"{label} on day {start_day}" if start_day else label

    if isinstance(policy, Weekly):
        label = "Weekly"
    elif isinstance(policy, Biweekly):
        label = "Twice a month"
    elif isinstance(policy, Triweekly):
        label = "Three times a month"
    else:
        label = f"Every {policy.step_days} days, {policy.count} payments"

    return f"{label} from day {start_day}" if start_day else label


def validate_recurrence_params(
    frequency: Optional[str],
    start_day: Optional[int],
    step_days: Optional[int] = None,
    count: Optional[int] = None,
) -> List[str]:
    """Collect configuration problems for a category's recurrence settings (empty list = valid)"""
    errors = []

    if frequency and start_day is None:
        errors.append("Start day is required for recurring budgets")

    if start_day is not None and not MIN_DAY <= start_day <= MAX_DAY:
        errors.append(f"Start day must be between {MIN_DAY} and {MAX_DAY}")

    try:
        parse_recurrence_policy(frequency, step_days, count)
    except InvalidRecurrenceConfigError as e:
        errors.append(str(e))

    return errors


def expand_budget_payments(budget: Budget, start_day: int) -> List[ExpandedBudgetPayment]:
    """
    Split a budget into dated installments within its period month.

    Requirements:
    - Installments ordered by date ascending
    - Every date clamped to a real day of the period month
    - Last installment absorbs rounding remainder so the sum is exact

    Args:
        budget: Budget record with its category recurrence joined in
        start_day: Resolved preferred day of month (1-31)

    Returns:
        List of ExpandedBudgetPayment; empty for a zero total

    Example:
        $100.01 biweekly → [$50.00, $50.01]
        10001 cents / 2 = 5000 base, remainder 1
        Last installment: 5000 + 1 = 5001

    Raises:
        InvalidRecurrenceConfigError, InvalidStartDayError, InvalidBudgetAmountError
    """
    try:
        policy = parse_recurrence_policy(
            budget.recurrence_frequency,
            budget.recurrence_step_days,
            budget.recurrence_count,
        )
        days = installment_days(policy, start_day, budget.period_year, budget.period_month)

        amount_cents = to_cents(budget.total_amount)
        if amount_cents < 0:
            raise InvalidBudgetAmountError(f"Budget amount must be non-negative, got {budget.total_amount}")
    except BudgetExpansionError as e:
        e.budget_id = budget.budget_id
        raise

    if amount_cents == 0:
        return []

    # Every installment must be at least one cent
    days = days[:amount_cents]
    num_installments = len(days)

    base_amount = amount_cents // num_installments
    remainder = amount_cents % num_installments
    is_recurring = not isinstance(policy, OneTime)

    payments = []
    for i, day in enumerate(days):
        # Last installment absorbs remainder to ensure exact total
        amount = base_amount + (remainder if i == num_installments - 1 else 0)

        payments.append(
            ExpandedBudgetPayment(
                budget_id=budget.budget_id,
                category_id=budget.category_id,
                period_id=budget.period_id,
                date=date(budget.period_year, budget.period_month, day),
                amount_cents=amount,
                payment_method=budget.payment_method,
                is_recurring=is_recurring,
                occurrence_number=i + 1,
                total_occurrences=num_installments,
            )
        )

    return payments
