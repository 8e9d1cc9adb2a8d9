"""Utility functions for the vehicle loan calculator.

This module provides helpers for turning user input into ``Decimal`` values:
amounts written with grouping separators or ``k``/``m`` suffixes, and rates
entered either as a percentage or as a fraction.
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation, getcontext
from typing import Union

getcontext().prec = 28  # increase decimal precision to avoid rounding errors

Number = Union[int, float, str, Decimal]

_SUFFIXES = {"k": Decimal(1_000), "m": Decimal(1_000_000)}
# "65.000.000" or "65,000,000": groups of exactly three digits after the first
_GROUPED = re.compile(r"^-?[1-9]\d{0,2}([.,]\d{3})+$")


def to_decimal(value: Number) -> Decimal:
    """Convert a number to ``Decimal``.

    Floats go through ``str`` so that ``0.11`` becomes ``Decimal("0.11")``
    rather than its binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid numeric value: {value!r}")
    try:
        if isinstance(value, float):
            return Decimal(str(value))
        return Decimal(value)
    except (InvalidOperation, TypeError) as exc:
        raise ValueError(f"Invalid numeric value: {value!r}") from exc


def decimal_from_str(value: str) -> Decimal:
    """Convert a numeric string into a ``Decimal``.

    A leading ``Gs.`` and spaces are dropped. Thousands separators are
    removed when every group has three digits, so both ``65.000.000`` and
    ``65,000,000`` read as sixty-five million, while ``0.11`` stays a
    fraction. Otherwise a comma is the decimal separator (``1,5`` is one and
    a half). NaN and Infinity are rejected.
    """
    cleaned = value.strip()
    if cleaned.lower().startswith("gs."):
        cleaned = cleaned[3:]
    cleaned = cleaned.replace(" ", "").replace("\u00a0", "")
    if _GROUPED.match(cleaned):
        cleaned = cleaned.replace(".", "").replace(",", "")
    else:
        cleaned = cleaned.replace(",", ".")
    try:
        result = Decimal(cleaned)
    except InvalidOperation as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc
    if not result.is_finite():
        raise ValueError(f"Invalid numeric value: {value}")
    return result


def parse_amount(value: str) -> Decimal:
    """Parse a monetary amount with optional suffixes.

    Accepts plain numbers ("65000000"), grouped numbers ("65.000.000") and
    shorthand with ``k``/``m`` suffixes (e.g. "65m" meaning 65_000_000).
    """
    text = value.strip().lower()
    factor = Decimal(1)
    if text and text[-1] in _SUFFIXES:
        factor = _SUFFIXES[text[-1]]
        text = text[:-1]
    return decimal_from_str(text) * factor


def parse_rate(value: str) -> Decimal:
    """Parse an annual rate given as a percentage or a fraction.

    ``"11"``, ``"11%"`` and ``"0.11"`` all yield ``Decimal("0.11")``. Values
    above one are taken as percentages.
    """
    text = value.strip().replace(",", ".")
    percent = text.endswith("%")
    if percent:
        text = text[:-1].strip()
    try:
        rate = Decimal(text)
    except InvalidOperation as exc:
        raise ValueError(f"Invalid rate: {value}") from exc
    if not rate.is_finite():
        raise ValueError(f"Invalid rate: {value}")
    if percent or rate > 1:
        rate = rate / Decimal(100)
    return rate
