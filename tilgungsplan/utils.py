"""Utility functions for the Tilgungsplan calculator.

This module provides the monetary rounding helper used throughout the engine,
conversion of user supplied numbers into ``Decimal`` and the month-end date
arithmetic that dates every schedule entry. Dates are handled with Python's
``datetime`` and ``calendar`` modules.
"""

from __future__ import annotations

import calendar
import logging
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Union

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """Convert a number into a ``Decimal`` without binary float artifacts.

    Floats are converted through their shortest ``repr`` so that ``1.005``
    becomes ``Decimal("1.005")`` rather than ``Decimal(1.00499999...)``.
    Raises ``InvalidOperation`` for strings that are not numbers.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise InvalidOperation(f"Boolean is not a number: {value!r}")
    return Decimal(str(value))


def round2(value: Number) -> Decimal:
    """Round a monetary amount to two decimals using round-half-up.

    Non-finite input (NaN, infinity) and values that cannot be read as a
    number are replaced by zero and logged; they only arise from internal
    arithmetic edge cases.

    >>> round2(1.005)
    Decimal('1.01')
    >>> round2(123.454)
    Decimal('123.45')
    """
    try:
        amount = to_decimal(value)
    except (InvalidOperation, ValueError):
        logger.warning("Rounding encountered invalid value: %r. Returning 0.", value)
        return Decimal("0.00")
    if not amount.is_finite():
        logger.warning("Rounding encountered invalid value: %r. Returning 0.", value)
        return Decimal("0.00")
    with localcontext() as ctx:
        # quantize needs room for every integer digit plus two decimals
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return amount.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def add_months(dt: date, months: int) -> date:
    """Return a new date a number of months after ``dt``.

    The day of the month is clamped to the last valid day if needed (e.g.,
    adding one month to Jan 31 yields Feb 28 or 29).
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def month_end(dt: date) -> date:
    """Return the last calendar day of the month containing ``dt``."""
    return date(dt.year, dt.month, calendar.monthrange(dt.year, dt.month)[1])


def next_month_end(dt: date) -> date:
    """Return the last calendar day of the month following ``dt``.

    ``dt`` does not need to be a month end itself; stepping from any day of
    December lands on January 31 of the next year.
    """
    return month_end(add_months(dt.replace(day=1), 1))


def parse_year_month(ym: str) -> date:
    """Parse a YYYY-MM string into a ``date`` object (first day of month).

    Raises
    ------
    ValueError
        If the string is not a valid year-month.
    """
    try:
        parts = ym.split("-")
        if len(parts) < 2:
            raise ValueError
        return date(int(parts[0]), int(parts[1]), 1)
    except (AttributeError, TypeError, ValueError) as exc:
        raise ValueError(f"Invalid year-month string: {ym}") from exc
