"""Data models for the Tilgungsplan calculator.

This module defines dataclasses for the loan input, the individual schedule
entries and the aggregated summary. All amounts are ``Decimal`` values rounded
to two places by the engine. Debt is expressed with a negative sign: the
disbursement and every remaining balance are zero or negative.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class LoanInput:
    """Inputs for a fixed-installment loan.

    Attributes
    ----------
    principal: Decimal
        The disbursed loan amount.
    rate: Decimal
        Annual nominal interest rate in percent (``5`` means 5 %). Zero is
        allowed.
    initial_repayment: Decimal
        Initial annual principal repayment in percent of the loan amount. It
        sizes the constant installment together with ``rate``.
    fixed_period_years: int
        Number of years the installment is fixed; the schedule covers
        ``fixed_period_years * 12`` monthly payments.
    """

    principal: Decimal
    rate: Decimal
    initial_repayment: Decimal
    fixed_period_years: int

    @property
    def number_of_payments(self) -> int:
        return int(self.fixed_period_years) * 12


@dataclass(frozen=True)
class ScheduleEntry:
    """One month of the amortization schedule.

    The first entry of a schedule is the disbursement, where ``cash_flow``,
    ``principal_payment`` and ``ending_balance`` all equal the negative
    principal. Payment entries carry a positive ``cash_flow``. Once the loan is
    repaid every following entry has all amounts set to zero.
    """

    date: date
    ending_balance: Decimal  # zero or negative
    interest_payment: Decimal
    principal_payment: Decimal
    cash_flow: Decimal


@dataclass(frozen=True)
class Summary:
    """Totals over the payment entries of a schedule (disbursement excluded)."""

    final_balance: Decimal
    total_interest_paid: Decimal
    total_principal_paid: Decimal
