"""Canonical loans used across the tests.

Standard fixture: 100,000 € at 5 % interest, 2 % initial repayment, 1 year
fixed, disbursed in January 2026.
"""

from datetime import date
from decimal import Decimal

import pytest

from tilgungsplan.data_models import LoanInput


@pytest.fixture
def start() -> date:
    return date(2026, 1, 15)


@pytest.fixture
def standard_loan() -> LoanInput:
    return LoanInput(
        principal=Decimal("100000"),
        rate=Decimal("5"),
        initial_repayment=Decimal("2"),
        fixed_period_years=1,
    )


@pytest.fixture
def zero_rate_loan() -> LoanInput:
    """10,000 € without interest, 10 % repayment: not repaid within a year."""
    return LoanInput(
        principal=Decimal("10000"),
        rate=Decimal("0"),
        initial_repayment=Decimal("10"),
        fixed_period_years=1,
    )


@pytest.fixture
def short_loan() -> LoanInput:
    """1,200 € at 12 % with 88 % repayment: 100 € a month, repaid after about a year."""
    return LoanInput(
        principal=Decimal("1200"),
        rate=Decimal("12"),
        initial_repayment=Decimal("88"),
        fixed_period_years=2,
    )
