"""Core calculation engine for the Tilgungsplan calculator.

This module builds the amortization schedule of a fixed-installment loan. The
borrower chooses an annual interest rate and an *initial* annual repayment
rate; together they size a constant monthly installment which is held for the
whole fixed-rate period. Each month the interest on the remaining debt is
charged first and the rest of the installment repays principal. The final
installment is clamped so the balance never overshoots zero.

The functions are pure: they take input values and return new ``Decimal``
based dataclasses. Every intermediate amount is rounded to cents with
round-half-up so that consecutive entries stay consistent with each other.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .data_models import LoanInput, ScheduleEntry, Summary
from .errors import InsufficientRateError, InvalidLoanDataError
from .utils import month_end, next_month_end, round2, to_decimal

logger = logging.getLogger(__name__)

MONTHS_IN_YEAR = 12
PERCENT_FACTOR = Decimal(100)
# Tolerance for comparisons against zero (half a cent).
ZERO_THRESHOLD = Decimal("0.005")

LOAN_FIELDS = ("principal", "rate", "initial_repayment", "fixed_period_years")
INVALID_LOAN_MESSAGE = "Invalid loan data. All values must be positive numbers."

ZERO = Decimal("0")


def _loan_fields(loan: Any) -> Optional[Dict[str, Any]]:
    """Return the raw loan fields of a ``LoanInput`` or mapping, or ``None``."""
    if loan is None:
        return None
    if isinstance(loan, Mapping):
        return {name: loan.get(name) for name in LOAN_FIELDS}
    return {name: getattr(loan, name, None) for name in LOAN_FIELDS}


def _finite_decimal(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, (bool, str)):
        return None
    if not isinstance(value, (int, float, Decimal)):
        return None
    try:
        number = to_decimal(value)
    except InvalidOperation:
        return None
    return number if number.is_finite() else None


def is_valid_loan_data(loan: Any) -> bool:
    """Return ``True`` if ``loan`` can be fed to :func:`calculate_amortization_plan`.

    ``loan`` may be a :class:`LoanInput`, a mapping with the same keys or
    ``None``. All four fields must be finite numbers with ``principal > 0``,
    ``rate >= 0``, ``initial_repayment > 0`` and a whole, positive
    ``fixed_period_years``.
    """
    fields = _loan_fields(loan)
    if fields is None:
        return False
    values = {name: _finite_decimal(value) for name, value in fields.items()}
    if any(value is None for value in values.values()):
        return False
    years = values["fixed_period_years"]
    return (
        values["principal"] > 0
        and values["rate"] >= 0  # 0 % is allowed
        and values["initial_repayment"] > 0
        and years > 0
        and years == years.to_integral_value()
    )


def calculate_monthly_payment(principal: Decimal, rate: Decimal, initial_repayment: Decimal) -> Decimal:
    """Return the constant monthly installment.

    The formula is::

        payment = P * (rate / 100 + initial_repayment / 100) / 12

    rounded to cents. It is not re-amortized during the fixed period.
    """
    annual_payment = principal * (rate / PERCENT_FACTOR + initial_repayment / PERCENT_FACTOR)
    return round2(annual_payment / MONTHS_IN_YEAR)


def check_rate_viability(principal: Decimal, monthly_rate: Decimal, monthly_payment: Decimal) -> Decimal:
    """Ensure the installment repays principal in the first month.

    Returns the first month's interest. Raises :class:`InsufficientRateError`
    if the installment does not exceed that interest by more than
    ``ZERO_THRESHOLD``.
    """
    first_month_interest = round2(principal * monthly_rate)
    if monthly_payment > first_month_interest + ZERO_THRESHOLD:
        return first_month_interest

    exact = abs(monthly_payment - first_month_interest) < ZERO_THRESHOLD
    if exact:
        message = (
            f"The calculated monthly payment ({monthly_payment:.2f} €) exactly covers the "
            f"first month's interest ({first_month_interest:.2f} €). No principal is repaid."
        )
    else:
        message = (
            f"The calculated monthly payment ({monthly_payment:.2f} €) is not sufficient to "
            f"cover the first month's interest ({first_month_interest:.2f} €) and repay principal."
        )
    message += " Please lower the interest rate or raise the initial repayment."
    raise InsufficientRateError(
        message,
        monthly_payment=monthly_payment,
        first_month_interest=first_month_interest,
        covers_interest_exactly=exact,
    )


def _disbursement_entry(principal: Decimal, entry_date: date) -> ScheduleEntry:
    amount = round2(principal)
    return ScheduleEntry(
        date=entry_date,
        ending_balance=amount.copy_negate(),
        interest_payment=Decimal("0.00"),
        principal_payment=amount.copy_negate(),
        cash_flow=amount.copy_negate(),
    )


def _zero_entry(entry_date: date) -> ScheduleEntry:
    return ScheduleEntry(
        date=entry_date,
        ending_balance=ZERO,
        interest_payment=ZERO,
        principal_payment=ZERO,
        cash_flow=ZERO,
    )


def _next_payment_entry(
    previous_balance: Decimal,
    monthly_payment: Decimal,
    monthly_rate: Decimal,
    entry_date: date,
) -> ScheduleEntry:
    """Compute one regular payment month.

    ``previous_balance`` is negative (outstanding debt). The returned entry has
    non-negative interest, principal and cash flow and a balance that is zero
    or negative.
    """
    if previous_balance > 0:
        logger.error("Invalid state: previous balance must not be positive (%s)", previous_balance)
        return _zero_entry(entry_date)

    outstanding = previous_balance.copy_negate()
    interest = ZERO if outstanding < ZERO_THRESHOLD else round2(outstanding * monthly_rate)
    principal_payment = round2(monthly_payment - interest)
    actual_payment = monthly_payment

    # Final installment: repay exactly what is left.
    if outstanding > 0 and principal_payment >= outstanding - ZERO_THRESHOLD:
        principal_payment = outstanding
        actual_payment = round2(interest + principal_payment)

    if principal_payment < 0:
        logger.warning(
            "Negative principal payment on %s (interest=%s, payment=%s); clamping to zero",
            entry_date.isoformat(),
            interest,
            monthly_payment,
        )
        principal_payment = ZERO
        actual_payment = round2(interest + principal_payment)

    new_balance = round2(previous_balance + principal_payment)
    if abs(new_balance) < ZERO_THRESHOLD:
        new_balance = ZERO

    return ScheduleEntry(
        date=entry_date,
        ending_balance=new_balance,
        interest_payment=round2(interest),
        principal_payment=round2(principal_payment),
        cash_flow=round2(actual_payment),
    )


def calculate_amortization_plan(loan: Any, start: Optional[date] = None) -> List[ScheduleEntry]:
    """Compute the amortization schedule of a fixed-installment loan.

    Parameters
    ----------
    loan: LoanInput
        The loan parameters. A mapping with the same keys is accepted too.
    start: date, optional
        Reference date of the disbursement. The disbursement entry is dated
        at the end of its month; defaults to today.

    Returns
    -------
    schedule: List[ScheduleEntry]
        ``fixed_period_years * 12 + 1`` entries: the disbursement followed by
        one entry per month, each dated at the month end.

    Raises
    ------
    InvalidLoanDataError
        If the input fails :func:`is_valid_loan_data`.
    InsufficientRateError
        If the installment cannot amortize the first month's interest.
    """
    fields = _loan_fields(loan)
    if fields is None:
        raise InvalidLoanDataError(INVALID_LOAN_MESSAGE)
    loan_input = build_loan_input(**fields)
    principal = loan_input.principal
    rate = loan_input.rate
    initial_repayment = loan_input.initial_repayment
    number_of_payments = loan_input.number_of_payments

    monthly_rate = rate / PERCENT_FACTOR / MONTHS_IN_YEAR
    monthly_payment = calculate_monthly_payment(principal, rate, initial_repayment)
    check_rate_viability(principal, monthly_rate, monthly_payment)

    current_date = month_end(start or date.today())
    schedule: List[ScheduleEntry] = [_disbursement_entry(principal, current_date)]
    current_date = next_month_end(current_date)

    for _ in range(number_of_payments):
        previous_balance = schedule[-1].ending_balance
        if abs(previous_balance) < ZERO_THRESHOLD:
            schedule.append(_zero_entry(current_date))
        else:
            schedule.append(
                _next_payment_entry(previous_balance, monthly_payment, monthly_rate, current_date)
            )
        current_date = next_month_end(current_date)

    logger.debug(
        "Computed %d payments at %s per month, final balance %s",
        number_of_payments,
        monthly_payment,
        schedule[-1].ending_balance,
    )
    return schedule


def calculate_summary_data(schedule: Optional[Sequence[ScheduleEntry]]) -> Summary:
    """Aggregate a schedule into remaining debt and paid totals.

    The disbursement entry is skipped. An empty or ``None`` schedule yields
    a summary of zeros.
    """
    if not schedule:
        return Summary(final_balance=ZERO, total_interest_paid=ZERO, total_principal_paid=ZERO)

    payments = schedule[1:]
    total_interest = sum((entry.interest_payment for entry in payments), ZERO)
    total_principal = sum((entry.principal_payment for entry in payments), ZERO)
    return Summary(
        final_balance=round2(schedule[-1].ending_balance),
        total_interest_paid=round2(total_interest),
        total_principal_paid=round2(total_principal),
    )


def build_loan_input(principal: Any, rate: Any, initial_repayment: Any, fixed_period_years: Any) -> LoanInput:
    """Create a :class:`LoanInput`, converting the amounts to ``Decimal``.

    :func:`calculate_amortization_plan` normalises its input through this
    function. Raises :class:`InvalidLoanDataError` if the values are not valid.
    """
    raw = {
        "principal": principal,
        "rate": rate,
        "initial_repayment": initial_repayment,
        "fixed_period_years": fixed_period_years,
    }
    if not is_valid_loan_data(raw):
        raise InvalidLoanDataError(INVALID_LOAN_MESSAGE)
    return LoanInput(
        principal=to_decimal(principal),
        rate=to_decimal(rate),
        initial_repayment=to_decimal(initial_repayment),
        fixed_period_years=int(fixed_period_years),
    )
