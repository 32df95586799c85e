"""Parsing and validation of the loan input form.

Both the command-line interface and the web front end receive the four loan
fields as strings. This module turns them into a :class:`LoanInput`, applying
the field rules of the input form. All field errors are collected before a
single :class:`FormValidationError` is raised, so a user sees every problem at
once.

Rule codes reported per field:

``required``
    The field is empty or missing.
``number`` / ``integer``
    The value is not a (whole) number.
``min`` / ``max``
    The value is below or above the allowed range.
``greater_than_zero``
    The value must be strictly positive.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Dict, List, Mapping, Optional

from .data_models import LoanInput
from .errors import FormValidationError

FORM_FIELDS = ("principal", "rate", "initial_repayment", "fixed_period_years")

FORM_LIMITS = {
    "min_principal": Decimal("1"),
    "min_rate": Decimal("0"),
    "max_percentage": Decimal("100"),
    "min_fixed_period_years": 1,
    "max_fixed_period_years": 100,
}

_SUFFIXES = {"k": Decimal("1000"), "m": Decimal("1000000")}


def parse_amount(value: str) -> Decimal:
    """Parse a monetary amount with optional separators and suffixes.

    Accepts plain numbers ("250000"), thousands separators ("250,000" or
    "250_000") and shorthand with ``k``/``m`` suffixes ("250k").
    """
    cleaned = value.strip().lower().replace(",", "").replace("_", "")
    factor = Decimal("1")
    if cleaned and cleaned[-1] in _SUFFIXES:
        factor = _SUFFIXES[cleaned[-1]]
        cleaned = cleaned[:-1]
    try:
        amount = Decimal(cleaned)
    except InvalidOperation as exc:
        raise ValueError(f"Invalid amount: {value}") from exc
    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value}")
    return amount * factor


def parse_percent(value: str) -> Decimal:
    """Parse a percentage such as "3.5" or "3.5%" (the value stays in percent)."""
    cleaned = value.strip()
    if cleaned.endswith("%"):
        cleaned = cleaned[:-1].strip()
    try:
        percent = Decimal(cleaned.replace(",", "."))
    except InvalidOperation as exc:
        raise ValueError(f"Invalid percentage: {value}") from exc
    if not percent.is_finite():
        raise ValueError(f"Invalid percentage: {value}")
    return percent


def _raw(fields: Mapping[str, Optional[str]], name: str) -> str:
    value = fields.get(name)
    return "" if value is None else str(value).strip()


def validate_loan_form(fields: Mapping[str, Optional[str]]) -> Dict[str, List[str]]:
    """Return a mapping of field name to violated rule codes (empty if valid)."""
    errors: Dict[str, List[str]] = {}

    def fail(name: str, code: str) -> None:
        errors.setdefault(name, []).append(code)

    for name in FORM_FIELDS:
        if not _raw(fields, name):
            fail(name, "required")

    if "principal" not in errors:
        try:
            principal = parse_amount(_raw(fields, "principal"))
        except ValueError:
            fail("principal", "number")
        else:
            if principal < FORM_LIMITS["min_principal"]:
                fail("principal", "min")

    if "rate" not in errors:
        try:
            rate = parse_percent(_raw(fields, "rate"))
        except ValueError:
            fail("rate", "number")
        else:
            if rate < FORM_LIMITS["min_rate"]:
                fail("rate", "min")
            if rate > FORM_LIMITS["max_percentage"]:
                fail("rate", "max")

    if "initial_repayment" not in errors:
        try:
            repayment = parse_percent(_raw(fields, "initial_repayment"))
        except ValueError:
            fail("initial_repayment", "number")
        else:
            if repayment <= 0:
                fail("initial_repayment", "greater_than_zero")
            if repayment > FORM_LIMITS["max_percentage"]:
                fail("initial_repayment", "max")

    if "fixed_period_years" not in errors:
        raw_years = _raw(fields, "fixed_period_years")
        if not (raw_years.isascii() and raw_years.isdigit()):
            fail("fixed_period_years", "integer")
        else:
            years = int(raw_years)
            if years < FORM_LIMITS["min_fixed_period_years"]:
                fail("fixed_period_years", "min")
            if years > FORM_LIMITS["max_fixed_period_years"]:
                fail("fixed_period_years", "max")

    return errors


def parse_loan_form(fields: Mapping[str, Optional[str]]) -> LoanInput:
    """Validate raw form fields and build a :class:`LoanInput`.

    Raises
    ------
    FormValidationError
        If any field violates a rule; ``errors`` lists all of them.
    """
    errors = validate_loan_form(fields)
    if errors:
        raise FormValidationError(errors)
    return LoanInput(
        principal=parse_amount(_raw(fields, "principal")),
        rate=parse_percent(_raw(fields, "rate")),
        initial_repayment=parse_percent(_raw(fields, "initial_repayment")),
        fixed_period_years=int(_raw(fields, "fixed_period_years")),
    )
