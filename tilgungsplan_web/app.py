import logging
import os

from flask import Flask, jsonify, render_template, request

from tilgungsplan.engine import calculate_amortization_plan, calculate_summary_data
from tilgungsplan.errors import FormValidationError, LoanCalcError
from tilgungsplan.form import FORM_FIELDS, FORM_LIMITS, parse_loan_form
from tilgungsplan.formatter import SCHEDULE_HEADERS, format_currency, schedule_rows

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config["MAX_ROWS"] = int(os.environ.get("TILGUNGSPLAN_MAX_ROWS", "120"))
app.config["LOG_LEVEL"] = os.environ.get("TILGUNGSPLAN_LOG_LEVEL", "INFO").upper()

FIELD_LABELS = {
    "principal": "Loan amount (€)",
    "rate": "Interest rate (% p.a.)",
    "initial_repayment": "Initial repayment (% p.a.)",
    "fixed_period_years": "Fixed-rate period (years)",
}

ERROR_MESSAGES = {
    "required": "This field is required.",
    "number": "Please enter a number.",
    "integer": "Please enter a whole number.",
    "greater_than_zero": "The value must be greater than zero.",
}


def _error_message(field: str, code: str) -> str:
    if code == "min":
        if field == "principal":
            return f"The loan amount must be at least {FORM_LIMITS['min_principal']}."
        if field == "fixed_period_years":
            return f"The period must be at least {FORM_LIMITS['min_fixed_period_years']} year."
        return "The value must not be negative."
    if code == "max":
        if field == "fixed_period_years":
            return f"The period must not exceed {FORM_LIMITS['max_fixed_period_years']} years."
        return f"The value must not exceed {FORM_LIMITS['max_percentage']} %."
    return ERROR_MESSAGES.get(code, code)


def _field_errors(exc: FormValidationError) -> dict:
    return {
        field: [_error_message(field, code) for code in codes]
        for field, codes in exc.errors.items()
    }


def _run_calculation(form, show_full_schedule: bool):
    loan = parse_loan_form(form)
    full_schedule = calculate_amortization_plan(loan)
    summary = calculate_summary_data(full_schedule)
    max_rows = app.config["MAX_ROWS"]
    preview = full_schedule if show_full_schedule else full_schedule[:max_rows]
    truncated = len(full_schedule) - len(preview)
    return summary, schedule_rows(preview), truncated


@app.route("/", methods=["GET", "POST"])
def index():
    summary = None
    rows = None
    truncated = 0
    error = None
    field_errors = {}
    values = {name: "" for name in FORM_FIELDS}

    if request.method == "POST":
        values = {name: request.form.get(name, "").strip() for name in FORM_FIELDS}
        show_full_schedule = request.form.get("show_full_schedule") == "1"
        try:
            summary, rows, truncated = _run_calculation(values, show_full_schedule)
        except FormValidationError as exc:
            field_errors = _field_errors(exc)
        except LoanCalcError as exc:
            logger.info("Calculation rejected: %s", exc)
            error = str(exc)

    return render_template(
        "index.html",
        fields=FORM_FIELDS,
        labels=FIELD_LABELS,
        values=values,
        field_errors=field_errors,
        error=error,
        summary=summary,
        headers=SCHEDULE_HEADERS,
        rows=rows,
        truncated=truncated,
        format_currency=format_currency,
    )


@app.get("/health")
def health():
    return jsonify({"status": "ok"})


if __name__ == "__main__":
    logging.basicConfig(level=app.config["LOG_LEVEL"])
    logger.info("Starting Tilgungsplan web app...")
    app.run(debug=False, port=int(os.environ.get("PORT", "5000")))
