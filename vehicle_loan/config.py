"""Configuration for the vehicle loan calculator.

The engine only ever sees an annual rate. Which rate applies is decided here,
from a table mapping bank identifiers to nominal annual rates. The built-in
table can be replaced with a JSON file, either passed explicitly or named by
the ``VEHICLE_LOAN_RATES_FILE`` environment variable::

    {"BancoUENO": 0.11, "BancoITAU": "12.5"}

Rates above one are read as percentages.
"""

from __future__ import annotations

import json
import logging
import os
from decimal import Decimal
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

from .utils import parse_rate, to_decimal

logger = logging.getLogger(__name__)

RATES_FILE_ENV = "VEHICLE_LOAN_RATES_FILE"
LOG_LEVEL_ENV = "VEHICLE_LOAN_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

DEFAULT_BANK = "BancoUENO"
# Longest term the front ends accept, in months
MAX_TERM_MONTHS = 600
DEFAULT_BANK_RATES: Mapping[str, Decimal] = {
    "BancoUENO": Decimal("0.110"),
    "BancoITAU": Decimal("0.125"),
    "BancoCONTINENTAL": Decimal("0.140"),
    "BancoATLAS": Decimal("0.145"),
    "BancoFAMILIAR": Decimal("0.149"),
}


class UnknownBankError(ValueError):
    """Raised when a bank identifier is not present in the rate table."""

    def __init__(self, bank: str, known: Mapping[str, Decimal]):
        self.bank = bank
        self.known = sorted(known)
        super().__init__(f"Unknown bank '{bank}'; choose one of: {', '.join(self.known)}")


def _rate_from_json(value: object) -> Decimal:
    if isinstance(value, str):
        return parse_rate(value)
    rate = to_decimal(value)
    if not rate.is_finite():
        raise ValueError(f"Invalid rate: {value!r}")
    return rate / Decimal(100) if rate > 1 else rate


def load_bank_rates(path: Optional[Union[str, Path]] = None) -> Dict[str, Decimal]:
    """Return the bank rate table.

    Parameters
    ----------
    path: str or Path, optional
        JSON file replacing the built-in table. When omitted, the file named
        by ``VEHICLE_LOAN_RATES_FILE`` is used if that variable is set.

    Raises
    ------
    ValueError
        If the file cannot be read, is not a JSON object, is empty or holds
        a rate that is not a number.
    """
    if path is None:
        path = os.environ.get(RATES_FILE_ENV) or None
    if path is None:
        return dict(DEFAULT_BANK_RATES)

    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise ValueError(f"Cannot read bank rates from {path}: {exc}") from exc
    if not isinstance(data, dict) or not data:
        raise ValueError(f"Bank rates file {path} must contain a non-empty JSON object")

    rates: Dict[str, Decimal] = {}
    for bank, value in data.items():
        try:
            rates[str(bank)] = _rate_from_json(value)
        except ValueError as exc:
            raise ValueError(f"Invalid rate for {bank} in {path}: {value!r}") from exc
    logger.info("Loaded %d bank rates from %s", len(rates), path)
    return rates


def resolve_rate(bank: str, rates: Optional[Mapping[str, Decimal]] = None) -> Decimal:
    """Return the annual rate offered by ``bank``."""
    table = load_bank_rates() if rates is None else rates
    try:
        return table[bank]
    except KeyError:
        raise UnknownBankError(bank, table) from None


def configure_logging(level: Optional[Union[int, str]] = None) -> None:
    """Set up root logging for the command line and the web front end."""
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "WARNING")
    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
