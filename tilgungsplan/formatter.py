"""Output helpers for the Tilgungsplan calculator.

This module renders schedules and summaries as text tables and converts them
into JSON-friendly dictionaries. Amounts are shown in German notation
("-1.234,56 €") and dates as ``DD.MM.YYYY``, the way the plan is presented to
borrowers. Only built-in string formatting is used.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from .data_models import ScheduleEntry, Summary
from .utils import round2

SCHEDULE_HEADERS = ["Date", "Remaining debt", "Interest", "Repayment", "Payment"]


def format_currency(value: Decimal, symbol: str = "€") -> str:
    """Format an amount in de-DE notation, e.g. ``-1.234,56 €``."""
    amount = round2(value)
    text = f"{amount.copy_abs():,f}"  # already quantized to cents
    # swap separators: 1,234.56 -> 1.234,56
    text = text.replace(",", "_").replace(".", ",").replace("_", ".")
    sign = "-" if amount < 0 else ""
    return f"{sign}{text} {symbol}"


def format_date(value: date) -> str:
    return value.strftime("%d.%m.%Y")


def schedule_to_dicts(schedule: Iterable[ScheduleEntry]) -> List[Dict[str, object]]:
    """Convert schedule entries into JSON-serialisable dictionaries."""
    return [
        {
            "date": entry.date.isoformat(),
            "remaining_debt": float(entry.ending_balance),
            "interest": float(entry.interest_payment),
            "repayment": float(entry.principal_payment),
            "payment": float(entry.cash_flow),
        }
        for entry in schedule
    ]


def summary_to_dict(summary: Summary) -> Dict[str, float]:
    return {
        "remaining_debt": float(summary.final_balance),
        "total_interest_paid": float(summary.total_interest_paid),
        "total_repayment_paid": float(summary.total_principal_paid),
    }


def schedule_rows(schedule: Iterable[ScheduleEntry]) -> List[List[str]]:
    """Return the schedule as rows of display strings (see ``SCHEDULE_HEADERS``)."""
    return [
        [
            format_date(entry.date),
            format_currency(entry.ending_balance),
            format_currency(entry.interest_payment),
            format_currency(entry.principal_payment),
            format_currency(entry.cash_flow),
        ]
        for entry in schedule
    ]


def print_summary(summary: Summary) -> None:
    """Print the summary of a schedule in a human-readable format."""
    print("Summary")
    print("-" * 72)
    print(f"Remaining debt     : {format_currency(summary.final_balance)}")
    print(f"Total interest     : {format_currency(summary.total_interest_paid)}")
    print(f"Total repayment    : {format_currency(summary.total_principal_paid)}")
    print("-" * 72)


def print_schedule(schedule: List[ScheduleEntry], max_rows: Optional[int] = None) -> None:
    """Print the amortization schedule as a right-aligned text table.

    Parameters
    ----------
    schedule: List[ScheduleEntry]
        The schedule entries to print.
    max_rows: int, optional
        Print at most this many rows and note how many were left out.
    """
    rows = schedule_rows(schedule if max_rows is None else schedule[:max_rows])
    widths = [len(h) for h in SCHEDULE_HEADERS]
    for row in rows:
        widths = [max(w, len(cell)) for w, cell in zip(widths, row)]
    print("  ".join(h.rjust(w) for h, w in zip(SCHEDULE_HEADERS, widths)))
    for row in rows:
        print("  ".join(cell.rjust(w) for cell, w in zip(row, widths)))
    if max_rows is not None and len(schedule) > max_rows:
        print(f"... {len(schedule) - max_rows} more rows not shown.")
