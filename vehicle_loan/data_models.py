"""Data models for the vehicle loan calculator.

This module defines dataclasses representing the entities used by the
calculator: the loan parameters entered by the user, one record per simulated
month and the overall result. All of them are frozen; a new result is built
on every calculation and nothing is mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List


@dataclass(frozen=True)
class LoanParameters:
    """Inputs of a single calculation.

    Attributes
    ----------
    vehicle_price: Decimal
        Price of the vehicle in guaraníes.
    down_payment: Decimal
        Amount paid up front. It is expected not to exceed ``vehicle_price``
        but this is not enforced; a larger down payment simply leaves nothing
        to finance.
    term_months: int
        Number of monthly installments.
    annual_reinforcement: Decimal
        Extra principal paid once every twelve months.
    annual_rate: Decimal
        Nominal annual rate as a fraction, e.g. ``Decimal("0.11")`` for 11 %.
        Usually resolved from the bank rate table in :mod:`vehicle_loan.config`.
    """

    vehicle_price: Decimal
    down_payment: Decimal
    term_months: int
    annual_reinforcement: Decimal
    annual_rate: Decimal

    @property
    def principal_financed(self) -> Decimal:
        return self.vehicle_price - self.down_payment


@dataclass(frozen=True)
class PeriodRecord:
    """One month of the amortization schedule.

    ``payment`` is the installment due that month (interest plus scheduled
    principal) and the reinforcement is reported separately. In the month
    the loan is paid off early, ``payment`` is what was actually paid:
    interest plus the whole remaining balance, reinforcement included.
    ``principal_portion + reinforcement`` is always what the balance dropped
    by during the month.
    """

    period: int
    opening_balance: Decimal
    interest: Decimal
    payment: Decimal
    principal_portion: Decimal
    reinforcement: Decimal
    closing_balance: Decimal


@dataclass(frozen=True)
class ScheduleResult:
    """Outcome of :func:`vehicle_loan.engine.compute`."""

    principal_financed: Decimal
    final_payment: Decimal
    total_interest: Decimal
    schedule: List[PeriodRecord] = field(default_factory=list)

    @property
    def initial_payment(self) -> Decimal:
        if not self.schedule:
            return Decimal("0")
        return self.schedule[0].payment

    @property
    def total_reinforcement(self) -> Decimal:
        return sum((r.reinforcement for r in self.schedule), Decimal("0"))

    @property
    def total_paid(self) -> Decimal:
        # cash out of the borrower's pocket, down payment excluded
        return sum((r.interest + r.principal_portion + r.reinforcement for r in self.schedule), Decimal("0"))

    def to_dict(self) -> Dict[str, object]:
        """Return a JSON-serialisable representation of the result."""
        return {
            "summary": {
                "principal_financed": float(self.principal_financed),
                "initial_payment": float(self.initial_payment),
                "final_payment": float(self.final_payment),
                "total_interest": float(self.total_interest),
                "total_reinforcement": float(self.total_reinforcement),
                "total_paid": float(self.total_paid),
                "term_months": len(self.schedule),
            },
            "schedule": [
                {
                    "period": r.period,
                    "opening_balance": float(r.opening_balance),
                    "interest": float(r.interest),
                    "payment": float(r.payment),
                    "principal": float(r.principal_portion),
                    "reinforcement": float(r.reinforcement),
                    "closing_balance": float(r.closing_balance),
                }
                for r in self.schedule
            ],
        }
