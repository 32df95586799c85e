"""Exceptions raised by the Tilgungsplan calculator.

Every error derives from ``LoanCalcError`` (itself a ``ValueError``) so callers
such as the CLI and the web view can catch calculation problems in one place
while still telling the individual failure kinds apart.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, List, Optional


class LoanCalcError(ValueError):
    """Base class for all calculator errors."""


class InvalidLoanDataError(LoanCalcError):
    """The loan input is missing a field or a field is out of bounds."""


class InsufficientRateError(LoanCalcError):
    """The monthly installment does not amortize the first month's interest.

    Attributes
    ----------
    monthly_payment: Decimal
        The computed constant installment.
    first_month_interest: Decimal
        Interest charged on the full principal in the first month.
    covers_interest_exactly: bool
        ``True`` when the installment equals the interest (the balance would
        stay constant), ``False`` when it is smaller (the balance would grow).
    """

    def __init__(
        self,
        message: str,
        monthly_payment: Decimal,
        first_month_interest: Decimal,
        covers_interest_exactly: bool = False,
    ) -> None:
        super().__init__(message)
        self.monthly_payment = monthly_payment
        self.first_month_interest = first_month_interest
        self.covers_interest_exactly = covers_interest_exactly


class FormValidationError(LoanCalcError):
    """One or more form fields failed validation.

    ``errors`` maps each failing field name to the list of rule codes it
    violated, e.g. ``{"rate": ["max"]}``.
    """

    def __init__(self, errors: Dict[str, List[str]], message: Optional[str] = None) -> None:
        if message is None:
            parts = [f"{field}: {', '.join(codes)}" for field, codes in errors.items()]
            message = "Invalid form input (" + "; ".join(parts) + ")"
        super().__init__(message)
        self.errors = errors
