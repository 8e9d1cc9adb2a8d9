"""Command‑line interface for the vehicle loan calculator.

This module uses the ``click`` library to implement a multi‑command
interface. Users can compute full amortization schedules, view summaries,
list the bank rate table or price the same loan with every bank. Results can
be printed to the terminal or exported to JSON/CSV files.

Input checks live here rather than in the engine: negative or non-finite
amounts, terms outside 1 to 600 months and unknown banks are rejected
before anything is computed.
"""

from __future__ import annotations

import csv
import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

import click

from .config import DEFAULT_BANK, MAX_TERM_MONTHS, configure_logging, load_bank_rates, resolve_rate
from .data_models import LoanParameters, ScheduleResult
from .engine import compute
from .formatter import print_bank_comparison, print_banks, print_schedule, print_summary
from .utils import parse_amount, parse_rate

logger = logging.getLogger(__name__)

MAX_ROWS = 120


def _parse_non_negative(value: str, name: str) -> Decimal:
    try:
        amount = parse_amount(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint=name)
    if amount < 0:
        raise click.BadParameter(f"must not be negative; got {value}", param_hint=name)
    return amount


def load_rates_or_fail(rates_file: Optional[str]) -> Dict[str, Decimal]:
    try:
        return load_bank_rates(rates_file)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--rates-file")


def build_parameters_from_options(
    price: str,
    down_payment: str,
    term: int,
    reinforcement: str,
    bank: str,
    rate: Optional[str],
    rates: Dict[str, Decimal],
) -> Tuple[LoanParameters, str]:
    """Turn raw option values into :class:`LoanParameters`.

    Returns the parameters together with a label for the rate source: the
    bank name, or ``"custom"`` when ``rate`` overrides the table.
    """
    price_value = _parse_non_negative(price, "--price")
    down_payment_value = _parse_non_negative(down_payment, "--down-payment")
    reinforcement_value = _parse_non_negative(reinforcement, "--reinforcement")
    if rate is not None:
        try:
            annual_rate = parse_rate(rate)
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="--rate")
        label = "custom"
    else:
        try:
            annual_rate = resolve_rate(bank, rates)
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="--bank")
        label = bank
    if down_payment_value >= price_value:
        logger.info("Down payment %s covers the price %s", down_payment_value, price_value)
    params = LoanParameters(
        vehicle_price=price_value,
        down_payment=down_payment_value,
        term_months=term,
        annual_reinforcement=reinforcement_value,
        annual_rate=annual_rate,
    )
    return params, label


def export_to_json(path: Path, result: ScheduleResult, bank: Optional[str] = None, rate: Optional[Decimal] = None) -> None:
    """Export summary and schedule to a JSON file."""
    data = result.to_dict()
    if bank is not None:
        data["summary"]["bank"] = bank
    if rate is not None:
        data["summary"]["annual_rate"] = float(rate)
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, result: ScheduleResult) -> None:
    """Export schedule to a CSV file."""
    header = [
        "Month",
        "Opening_Balance",
        "Interest",
        "Payment",
        "Principal",
        "Reinforcement",
        "Closing_Balance",
    ]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for r in result.schedule:
            writer.writerow(
                [
                    r.period,
                    float(r.opening_balance),
                    float(r.interest),
                    float(r.payment),
                    float(r.principal_portion),
                    float(r.reinforcement),
                    float(r.closing_balance),
                ]
            )


def loan_options(func: Callable) -> Callable:
    """Attach the options shared by every command that prices a loan."""
    options = [
        click.option("--price", "-p", "price", default="65m", show_default=True, help="Vehicle price (accepts 65m, 65.000.000)"),
        click.option("--down-payment", "-d", "down_payment", default="15m", show_default=True, help="Down payment amount"),
        click.option("--term", "-t", "term", default=60, show_default=True, type=click.IntRange(1, MAX_TERM_MONTHS), help="Loan term in months"),
        click.option("--reinforcement", "-R", "reinforcement", default="10m", show_default=True, help="Extra principal paid every 12th month"),
        click.option("--rates-file", "rates_file", type=click.Path(dir_okay=False), help="JSON file with bank rates"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def rate_options(func: Callable) -> Callable:
    func = click.option("--rate", "-r", "rate", help="Annual rate, as percent or fraction; overrides --bank")(func)
    func = click.option("--bank", "-b", "bank", default=DEFAULT_BANK, show_default=True, help="Bank whose rate applies")(func)
    return func


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log calculation details")
def cli(verbose: bool) -> None:
    """A command‑line vehicle loan calculator with annual reinforcements."""
    configure_logging("DEBUG" if verbose else None)


@cli.command()
@loan_options
@rate_options
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(
    price: str,
    down_payment: str,
    term: int,
    reinforcement: str,
    rates_file: Optional[str],
    bank: str,
    rate: Optional[str],
    output: Optional[str],
) -> None:
    """Compute and print the full amortization schedule."""
    rates = load_rates_or_fail(rates_file)
    params, label = build_parameters_from_options(price, down_payment, term, reinforcement, bank, rate, rates)
    result = compute(params)
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, result, label, params.annual_rate)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, result)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv", param_hint="--output")
        click.echo(f"Schedule exported to {path}")
        return
    print_summary(result, label, params.annual_rate)
    # Limit schedule length printed to avoid flooding the terminal
    if len(result.schedule) > MAX_ROWS:
        click.echo(f"Schedule has {len(result.schedule)} rows; showing first {MAX_ROWS} rows.")
        print_schedule(result.schedule[:MAX_ROWS])
    elif result.schedule:
        print_schedule(result.schedule)


@cli.command()
@loan_options
@rate_options
@click.option("--output", "output", type=str, help="Output file path (.json)")
def summary(
    price: str,
    down_payment: str,
    term: int,
    reinforcement: str,
    rates_file: Optional[str],
    bank: str,
    rate: Optional[str],
    output: Optional[str],
) -> None:
    """Compute and print only the summary metrics for a loan."""
    rates = load_rates_or_fail(rates_file)
    params, label = build_parameters_from_options(price, down_payment, term, reinforcement, bank, rate, rates)
    result = compute(params)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Summary export must use .json extension", param_hint="--output")
        data = result.to_dict()["summary"]
        data["bank"] = label
        data["annual_rate"] = float(params.annual_rate)
        with path.open("w", encoding="utf-8") as f:
            json.dump({"summary": data}, f, indent=2)
        click.echo(f"Summary exported to {path}")
    else:
        print_summary(result, label, params.annual_rate)


@cli.command()
@click.option("--rates-file", "rates_file", type=click.Path(dir_okay=False), help="JSON file with bank rates")
def banks(rates_file: Optional[str]) -> None:
    """List the banks and the annual rate each one offers."""
    rates = load_rates_or_fail(rates_file)
    print_banks(rates, DEFAULT_BANK)


@cli.command()
@loan_options
def compare(
    price: str,
    down_payment: str,
    term: int,
    reinforcement: str,
    rates_file: Optional[str],
) -> None:
    """Price the same loan with every bank, cheapest first.

    Example:

        vehicle-loan compare -p 65m -d 15m -t 60 -R 10m
    """
    rates = load_rates_or_fail(rates_file)
    rows: List[Tuple[str, Decimal, ScheduleResult]] = []
    for bank in rates:
        params, _ = build_parameters_from_options(price, down_payment, term, reinforcement, bank, None, rates)
        rows.append((bank, params.annual_rate, compute(params)))
    rows.sort(key=lambda row: row[2].total_interest)
    print_bank_comparison(rows)


if __name__ == "__main__":
    cli()
