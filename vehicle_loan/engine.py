"""Core calculation engine for the vehicle loan calculator.

This module implements the month-by-month simulation of an annuity loan with
an annual reinforcement (a lump-sum principal payment made every twelfth
month). After each reinforcement the bank resets the installment: the
remaining balance is re-amortized over the months that are left, so the
installment declines year after year.

:func:`compute` is a pure function. It keeps no state between calls and the
caller decides when to recompute, typically whenever an input changes.
"""

from __future__ import annotations

import logging
from decimal import Decimal, DivisionByZero, InvalidOperation, Overflow, getcontext, localcontext
from typing import List

from .data_models import LoanParameters, PeriodRecord, ScheduleResult
from .utils import to_decimal

getcontext().prec = 28  # increase precision for financial calculations

logger = logging.getLogger(__name__)

MONTHS_PER_YEAR = 12
ZERO = Decimal("0")
# The guaraní has no subunit: anything under half a unit left at the end of a
# period is considered settled.
SETTLEMENT_THRESHOLD = Decimal("0.5")


def _calculate_annuity_payment(principal: Decimal, rate_per_month: Decimal, term: int) -> Decimal:
    """Return the level monthly payment that amortizes ``principal``.

    The formula is:

        payment = P * i / (1 - (1 + i)^-n)

    where ``P`` is the principal, ``i`` is the monthly interest rate and
    ``n`` is the number of payments. When the interest rate is zero, the
    payment simplifies to ``P / n``.
    """
    if term <= 0:
        raise ValueError("Term must be positive")
    if rate_per_month == 0:
        return principal / Decimal(term)
    return principal * rate_per_month / (1 - (1 + rate_per_month) ** -term)


def compute(params: LoanParameters) -> ScheduleResult:
    """Compute the amortization schedule for a vehicle loan.

    Parameters
    ----------
    params: LoanParameters
        The loan inputs. Amounts may be given as ``int``, ``float``, ``str``
        or ``Decimal``; they are converted to ``Decimal`` before use.

    Returns
    -------
    ScheduleResult
        One :class:`PeriodRecord` per month plus the summary figures. When
        there is nothing to finance, or the term is not positive, the result
        has an empty schedule and zero payment and interest.

    Inputs are not validated. Negative amounts or rates go through the
    arithmetic as given; checking them is up to the calling layer. NaN and
    Infinity propagate through the figures instead of raising, and a term
    that cannot be read as an integer counts as zero.
    """
    with localcontext() as ctx:
        for signal in (InvalidOperation, DivisionByZero, Overflow):
            ctx.traps[signal] = False
        return _simulate(params)


def _simulate(params: LoanParameters) -> ScheduleResult:
    vehicle_price = to_decimal(params.vehicle_price)
    down_payment = to_decimal(params.down_payment)
    annual_reinforcement = to_decimal(params.annual_reinforcement)
    annual_rate = to_decimal(params.annual_rate)
    try:
        term = int(params.term_months)
    except (ValueError, OverflowError):
        term = 0

    principal = vehicle_price - down_payment
    if principal <= 0 or term <= 0:
        logger.debug("Nothing to finance (principal=%s, term=%s)", principal, term)
        return ScheduleResult(
            principal_financed=principal,
            final_payment=ZERO,
            total_interest=ZERO,
            schedule=[],
        )

    rate_per_month = annual_rate / Decimal(MONTHS_PER_YEAR)
    payment = _calculate_annuity_payment(principal, rate_per_month, term)
    logger.debug("Initial installment %s over %d months", payment, term)

    balance = principal
    total_interest = ZERO
    last_reinforcement = ZERO
    schedule: List[PeriodRecord] = []

    for period in range(1, term + 1):
        # New year: re-amortize whatever the reinforcement left outstanding.
        # Without a reinforcement the balance follows the original annuity and
        # the installment would come out unchanged.
        if period > 1 and (period - 1) % MONTHS_PER_YEAR == 0 and last_reinforcement != 0:
            remaining_term = term - (period - 1)
            if remaining_term > 0:
                payment = _calculate_annuity_payment(balance, rate_per_month, remaining_term)
            else:
                payment = ZERO
            logger.debug(
                "Installment recomputed at period %d: %s over %d months",
                period,
                payment,
                remaining_term,
            )

        opening_balance = balance
        interest = opening_balance * rate_per_month
        principal_portion = payment - interest
        reinforcement = annual_reinforcement if period % MONTHS_PER_YEAR == 0 else ZERO
        period_payment = payment

        # Never amortize more than is owed. The month's payment becomes the
        # interest plus the whole remaining balance; the scheduled principal
        # takes its share first and the reinforcement covers the rest.
        # Overshoots under the settlement threshold are rounding and are
        # absorbed below without touching the installment.
        if principal_portion + reinforcement - opening_balance >= SETTLEMENT_THRESHOLD:
            principal_portion = min(principal_portion, opening_balance)
            reinforcement = opening_balance - principal_portion
            period_payment = interest + opening_balance

        closing_balance = opening_balance - principal_portion - reinforcement
        if closing_balance.copy_abs() < SETTLEMENT_THRESHOLD:
            principal_portion += closing_balance
            closing_balance = ZERO
        closing_balance = max(ZERO, closing_balance)

        total_interest += interest
        schedule.append(
            PeriodRecord(
                period=period,
                opening_balance=opening_balance,
                interest=interest,
                payment=period_payment,
                principal_portion=principal_portion,
                reinforcement=reinforcement,
                closing_balance=closing_balance,
            )
        )
        balance = closing_balance
        last_reinforcement = reinforcement

    return ScheduleResult(
        principal_financed=principal,
        final_payment=schedule[-1].payment,
        total_interest=total_interest,
        schedule=schedule,
    )
