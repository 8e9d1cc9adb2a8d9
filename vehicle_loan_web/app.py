"""Flask front end for the vehicle loan calculator.

A single form collects the vehicle price, down payment, term, annual
reinforcement and bank. Every submission recomputes the schedule from
scratch; nothing is stored between requests.

When run directly the development server listens on ``127.0.0.1:8710``
without the debugger. ``VEHICLE_LOAN_WEB_HOST``, ``VEHICLE_LOAN_WEB_PORT``
and ``FLASK_DEBUG=1`` change that.
"""

import os

from flask import Flask, jsonify, render_template, request

from vehicle_loan.config import DEFAULT_BANK, MAX_TERM_MONTHS, configure_logging, load_bank_rates, resolve_rate
from vehicle_loan.data_models import LoanParameters
from vehicle_loan.engine import compute
from vehicle_loan.formatter import format_gs, format_rate
from vehicle_loan.utils import parse_amount

HOST_ENV = "VEHICLE_LOAN_WEB_HOST"
PORT_ENV = "VEHICLE_LOAN_WEB_PORT"

app = Flask(__name__)
app.secret_key = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
app.jinja_env.filters["gs"] = format_gs
app.jinja_env.filters["rate"] = format_rate

DEFAULT_FORM = {
    "vehicle_price": "65.000.000",
    "down_payment": "15.000.000",
    "term_months": "60",
    "annual_reinforcement": "10.000.000",
    "bank": DEFAULT_BANK,
}


def _amount(form, name: str):
    value = parse_amount(form.get(name, "") or "0")
    if value < 0:
        raise ValueError(f"{name.replace('_', ' ').capitalize()} must not be negative")
    return value


def _form_to_parameters(form, rates) -> LoanParameters:
    term_raw = (form.get("term_months", "") or "0").strip()
    try:
        term = int(term_raw)
    except ValueError as exc:
        raise ValueError(f"Invalid term: {term_raw}") from exc
    if not 1 <= term <= MAX_TERM_MONTHS:
        raise ValueError(f"Term must be between 1 and {MAX_TERM_MONTHS} months")
    return LoanParameters(
        vehicle_price=_amount(form, "vehicle_price"),
        down_payment=_amount(form, "down_payment"),
        term_months=term,
        annual_reinforcement=_amount(form, "annual_reinforcement"),
        annual_rate=resolve_rate(form.get("bank", DEFAULT_BANK), rates),
    )


def _run_options():
    """Return the keyword arguments for ``app.run`` taken from the environment."""
    return {
        "host": os.environ.get(HOST_ENV, "127.0.0.1"),
        "port": int(os.environ.get(PORT_ENV, "8710")),
        "debug": os.environ.get("FLASK_DEBUG") == "1",
    }


@app.route("/", methods=["GET", "POST"])
def index():
    rates = load_bank_rates()
    form = dict(DEFAULT_FORM)
    if request.method == "POST":
        form.update({k: v for k, v in request.form.items() if k in DEFAULT_FORM})
    show_schedule = request.form.get("show_schedule") == "1"

    result = None
    params = None
    error = None
    try:
        params = _form_to_parameters(form, rates)
        result = compute(params)
    except ValueError as exc:
        error = str(exc)

    return render_template(
        "index.html",
        form=form,
        rates=rates,
        params=params,
        result=result,
        show_schedule=show_schedule,
        error=error,
    )


@app.get("/api/schedule")
def api_schedule():
    rates = load_bank_rates()
    form = dict(DEFAULT_FORM)
    form.update({k: v for k, v in request.args.items() if k in DEFAULT_FORM})
    try:
        params = _form_to_parameters(form, rates)
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400
    data = compute(params).to_dict()
    data["summary"]["bank"] = form["bank"]
    data["summary"]["annual_rate"] = float(params.annual_rate)
    return jsonify(data)


if __name__ == "__main__":
    configure_logging()
    print("Starting vehicle loan calculator web app...")
    app.run(**_run_options())
