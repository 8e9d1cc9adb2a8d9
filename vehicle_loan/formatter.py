"""Output helpers for the vehicle loan calculator.

This module renders amounts in guaraníes and prints results as plain text
tables. The guaraní has no fractional unit, so every amount is rounded to a
whole number and grouped with dots, as in ``Gs. 1.087.053``.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Mapping, Optional, Sequence, Tuple

from .data_models import PeriodRecord, ScheduleResult
from .utils import Number, to_decimal

CURRENCY_PREFIX = "Gs. "


def format_gs(value: Number) -> str:
    """Format an amount as guaraníes with no decimals."""
    amount = to_decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    grouped = f"{abs(int(amount)):,}".replace(",", ".")
    return f"{CURRENCY_PREFIX}{sign}{grouped}"


def format_rate(rate: Decimal) -> str:
    return f"{rate * 100:.2f}%"


def print_summary(result: ScheduleResult, bank: Optional[str] = None, rate: Optional[Decimal] = None) -> None:
    """Print a summary of loan metrics in a human‑readable format."""
    print("Summary")
    print("-" * 72)
    if bank:
        print(f"Bank               : {bank}")
    if rate is not None:
        print(f"Annual rate        : {format_rate(rate)}")
    print(f"Amount financed    : {format_gs(result.principal_financed)}")
    if not result.schedule:
        print("Nothing to finance.")
        print("-" * 72)
        return
    print(f"Initial payment    : {format_gs(result.initial_payment)}")
    print(f"Final payment      : {format_gs(result.final_payment)}")
    print(f"Total interest     : {format_gs(result.total_interest)}")
    if result.total_reinforcement:
        print(f"Reinforcements     : {format_gs(result.total_reinforcement)}")
    print(f"Total paid         : {format_gs(result.total_paid)}")
    print(f"Months             : {len(result.schedule)}")
    print("-" * 72)


def print_schedule(schedule: Iterable[PeriodRecord]) -> None:
    """Print the amortization schedule as a simple table."""
    headers = ["Month", "Opening", "Interest", "Payment", "Principal", "Reinforcement", "Closing"]
    print("\t".join(headers))
    for record in schedule:
        row = [
            str(record.period),
            format_gs(record.opening_balance),
            format_gs(record.interest),
            format_gs(record.payment),
            format_gs(record.principal_portion),
            format_gs(record.reinforcement),
            format_gs(record.closing_balance),
        ]
        print("\t".join(row))


def print_banks(rates: Mapping[str, Decimal], default: Optional[str] = None) -> None:
    """Print the bank rate table, marking the default bank with ``*``."""
    print(f"{'Bank':20s} {'Rate':>8s}")
    for bank, rate in rates.items():
        marker = " *" if bank == default else ""
        print(f"{bank:20s} {format_rate(rate):>8s}{marker}")


def print_bank_comparison(rows: Sequence[Tuple[str, Decimal, ScheduleResult]]) -> None:
    """Print the same loan priced by several banks side by side.

    ``rows`` holds ``(bank, rate, result)`` tuples in the order to display.
    """
    print("Comparison")
    print("=" * 86)
    print(f"{'Bank':18s} {'Rate':>7s} {'Initial payment':>19s} {'Final payment':>19s} {'Total interest':>19s}")
    for bank, rate, result in rows:
        print(
            f"{bank:18s} {format_rate(rate):>7s} {format_gs(result.initial_payment):>19s} "
            f"{format_gs(result.final_payment):>19s} {format_gs(result.total_interest):>19s}"
        )
    print("=" * 86)
