from datetime import date
from decimal import Decimal

from tilgungsplan.data_models import Summary
from tilgungsplan.engine import calculate_amortization_plan, calculate_summary_data
from tilgungsplan.formatter import (
    format_currency,
    format_date,
    print_schedule,
    print_summary,
    schedule_to_dicts,
    summary_to_dict,
)


class TestFormatCurrency:
    def test_thousands_separator(self):
        assert format_currency(Decimal("-97953.56")) == "-97.953,56 €"

    def test_zero(self):
        assert format_currency(Decimal("0")) == "0,00 €"

    def test_millions(self):
        assert format_currency(Decimal("1234567.8")) == "1.234.567,80 €"


def test_format_date():
    assert format_date(date(2026, 1, 31)) == "31.01.2026"


class TestSerialization:
    def test_schedule_to_dicts(self, standard_loan, start):
        rows = schedule_to_dicts(calculate_amortization_plan(standard_loan, start=start))
        assert rows[0] == {
            "date": "2026-01-31",
            "remaining_debt": -100000.0,
            "interest": 0.0,
            "repayment": -100000.0,
            "payment": -100000.0,
        }
        assert rows[1]["interest"] == 416.67

    def test_summary_to_dict(self):
        summary = Summary(Decimal("-9000.04"), Decimal("0"), Decimal("999.96"))
        assert summary_to_dict(summary) == {
            "remaining_debt": -9000.04,
            "total_interest_paid": 0.0,
            "total_repayment_paid": 999.96,
        }


class TestPrinting:
    def test_print_summary(self, zero_rate_loan, start, capsys):
        print_summary(calculate_summary_data(calculate_amortization_plan(zero_rate_loan, start=start)))
        out = capsys.readouterr().out
        assert "-9.000,04 €" in out
        assert "999,96 €" in out

    def test_print_schedule_truncates(self, standard_loan, start, capsys):
        print_schedule(calculate_amortization_plan(standard_loan, start=start), max_rows=5)
        lines = capsys.readouterr().out.splitlines()
        assert "Remaining debt" in lines[0]
        assert len(lines) == 7
        assert lines[-1] == "... 8 more rows not shown."
