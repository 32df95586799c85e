"""Command-line interface for the Tilgungsplan calculator.

This module uses the ``click`` library to implement a small multi-command
interface. Users can print the full amortization schedule or only the summary
of a fixed-installment loan, either as text tables or as JSON.

Example::

    tilgungsplan schedule -p 300k -r 3.8 -i 2 -f 10
"""

from __future__ import annotations

import json
import logging
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Tuple

import click

from .data_models import LoanInput, ScheduleEntry, Summary
from .engine import calculate_amortization_plan, calculate_summary_data
from .errors import FormValidationError, LoanCalcError
from .form import parse_loan_form
from .formatter import print_schedule, print_summary, schedule_to_dicts, summary_to_dict
from .utils import parse_year_month

FIELD_OPTIONS = {
    "principal": "--principal",
    "rate": "--rate",
    "initial_repayment": "--initial-repayment",
    "fixed_period_years": "--fixed-period",
}


def build_loan_from_options(
    principal: str, rate: str, initial_repayment: str, fixed_period: str
) -> LoanInput:
    """Validate the raw option strings with the form rules."""
    try:
        return parse_loan_form(
            {
                "principal": principal,
                "rate": rate,
                "initial_repayment": initial_repayment,
                "fixed_period_years": fixed_period,
            }
        )
    except FormValidationError as exc:
        messages = [
            f"{FIELD_OPTIONS[field]}: {', '.join(codes)}" for field, codes in exc.errors.items()
        ]
        raise click.UsageError("Invalid loan options (" + "; ".join(messages) + ")") from exc


def parse_start_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return parse_year_month(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--start-date") from exc


def run_calculation(loan: LoanInput, start: Optional[date]) -> Tuple[List[ScheduleEntry], Summary]:
    """Compute schedule and summary, turning calculation errors into click errors."""
    try:
        schedule_entries = calculate_amortization_plan(loan, start=start)
    except LoanCalcError as exc:
        raise click.ClickException(str(exc)) from exc
    return schedule_entries, calculate_summary_data(schedule_entries)


def loan_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the four loan options and the start date to a command."""
    options = [
        click.option("--principal", "-p", "principal", required=True, help="Loan amount (e.g. 250000 or 250k)"),
        click.option("--rate", "-r", "rate", required=True, help="Annual nominal interest rate in percent"),
        click.option(
            "--initial-repayment", "-i", "initial_repayment", required=True,
            help="Initial annual repayment in percent",
        ),
        click.option("--fixed-period", "-f", "fixed_period", required=True, help="Fixed-rate period in years"),
        click.option("--start-date", "-s", "start_date", help="Disbursement month (YYYY-MM), default: current month"),
        click.option("--json", "as_json", is_flag=True, help="Print JSON instead of tables"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Fixed-installment loan amortization schedules (Tilgungsplan)."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@loan_options
@click.option("--max-rows", "max_rows", type=click.IntRange(min=1), default=120, show_default=True,
              help="Maximum number of table rows to print")
def schedule(
    principal: str,
    rate: str,
    initial_repayment: str,
    fixed_period: str,
    start_date: Optional[str],
    as_json: bool,
    max_rows: int,
) -> None:
    """Compute and print the full amortization schedule."""
    loan = build_loan_from_options(principal, rate, initial_repayment, fixed_period)
    schedule_entries, summary_data = run_calculation(loan, parse_start_date(start_date))
    if as_json:
        data: Dict[str, Any] = {
            "summary": summary_to_dict(summary_data),
            "schedule": schedule_to_dicts(schedule_entries),
        }
        click.echo(json.dumps(data, indent=2))
        return
    print_summary(summary_data)
    print_schedule(schedule_entries, max_rows=max_rows)


@cli.command()
@loan_options
def summary(
    principal: str,
    rate: str,
    initial_repayment: str,
    fixed_period: str,
    start_date: Optional[str],
    as_json: bool,
) -> None:
    """Compute and print only the summary of a loan."""
    loan = build_loan_from_options(principal, rate, initial_repayment, fixed_period)
    _, summary_data = run_calculation(loan, parse_start_date(start_date))
    if as_json:
        click.echo(json.dumps({"summary": summary_to_dict(summary_data)}, indent=2))
    else:
        print_summary(summary_data)


if __name__ == "__main__":
    cli()
