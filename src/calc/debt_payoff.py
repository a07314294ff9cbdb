"""Debt payoff and mortgage amortization math.

All rates are annual percentages (19.9 means 19.9%) and all payments
are monthly. Payoffs that can never complete are reported with
math.inf months and interest rather than raising.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from model.Snapshot import Property, Snapshot
from model.categories import DEFAULT_AMORTIZATION_YEARS, DEFAULT_MORTGAGE_RATE

logger = logging.getLogger(__name__)

# 100 years
MAX_PAYOFF_MONTHS = 1200
MAX_SCHEDULE_YEARS = 60


class PayoffStatus(Enum):
    PAID_OFF = "Paid off"
    PAYING_DOWN = "Paying down"
    NO_PAYMENT = "No payment set"
    INTEREST_NOT_COVERED = "Payment doesn't cover interest"


@dataclass(frozen=True)
class PayoffResult:
    months: float  # int when payable, math.inf otherwise
    total_interest: float
    covers_interest: bool
    duration_label: str
    status: PayoffStatus


def calculate_payoff(balance: float, annual_rate: float, monthly_payment: float) -> PayoffResult:
    """Months and interest to retire a balance with a fixed monthly payment.

    Each month interest accrues on the remaining balance, then the
    payment is subtracted. A payment equal to the first month's interest
    never pays the balance down and is reported as not covering it.
    Negative rates are treated as zero.
    """
    if balance <= 0:
        return PayoffResult(0, 0.0, True, format_duration(0), PayoffStatus.PAID_OFF)

    if monthly_payment <= 0:
        return PayoffResult(math.inf, math.inf, False, format_duration(math.inf), PayoffStatus.NO_PAYMENT)

    annual_rate = max(0.0, annual_rate)
    monthly_rate = annual_rate / 100 / 12
    if monthly_payment <= balance * monthly_rate:
        return PayoffResult(math.inf, math.inf, False, format_duration(math.inf),
                            PayoffStatus.INTEREST_NOT_COVERED)

    if annual_rate == 0:
        months = math.ceil(balance / monthly_payment)
        return PayoffResult(months, 0.0, True, format_duration(months), PayoffStatus.PAYING_DOWN)

    remaining = balance
    total_interest = 0.0
    months = 0
    while remaining > 0.01 and months < MAX_PAYOFF_MONTHS:
        interest = remaining * monthly_rate
        total_interest += interest
        remaining = max(0.0, remaining + interest - monthly_payment)
        months += 1

    return PayoffResult(months, round(total_interest, 2), True, format_duration(months), PayoffStatus.PAYING_DOWN)


def format_duration(total_months: float) -> str:
    """Human-readable duration, e.g. "4 years 2 months"."""
    if total_months <= 0:
        return "Paid off"
    if math.isinf(total_months):
        return "Never"

    years, months = divmod(int(total_months), 12)
    year_str = "1 year" if years == 1 else f"{years} years"
    month_str = "1 month" if months == 1 else f"{months} months"

    if years == 0:
        return month_str
    if months == 0:
        return year_str
    return f"{year_str} {month_str}"


def suggest_monthly_payment(principal: float, annual_rate: float, years: int = DEFAULT_AMORTIZATION_YEARS) -> float:
    """Standard annuity payment rounded to whole currency units."""
    if principal <= 0:
        return 0.0
    n = years * 12
    monthly_rate = annual_rate / 100 / 12
    if monthly_rate == 0:
        return float(round(principal / n))
    growth = (1 + monthly_rate) ** n
    return float(round(principal * monthly_rate * growth / (growth - 1)))


def remaining_amortization_years(amortization_years: Optional[int], year_purchased: Optional[int],
                                 as_of_year: Optional[int]) -> int:
    """Years left on the amortization term, never less than 1.

    Elapsed time is only subtracted when both the purchase year and the
    snapshot's as-of year are known.
    """
    term = amortization_years if amortization_years is not None else DEFAULT_AMORTIZATION_YEARS
    if year_purchased is not None and as_of_year is not None:
        term -= as_of_year - year_purchased
    return max(1, term)


def mortgage_rate(prop: Property) -> float:
    return prop.interest_rate if prop.interest_rate is not None else DEFAULT_MORTGAGE_RATE


def effective_mortgage_payment(prop: Property, as_of_year: Optional[int] = None) -> float:
    """Explicit positive payment, else the suggested payment over the remaining term."""
    if prop.monthly_payment is not None and prop.monthly_payment > 0:
        return prop.monthly_payment
    if prop.mortgage <= 0:
        return 0.0
    years = remaining_amortization_years(prop.amortization_years, prop.year_purchased, as_of_year)
    return suggest_monthly_payment(prop.mortgage, mortgage_rate(prop), years)


@dataclass(frozen=True)
class MortgageBreakdown:
    interest_portion: float
    principal_portion: float


def compute_mortgage_breakdown(balance: float, annual_rate: float, monthly_payment: float) -> MortgageBreakdown:
    """Split one payment into its interest and principal portions."""
    interest = balance * annual_rate / 100 / 12
    return MortgageBreakdown(interest, max(0.0, monthly_payment - interest))


@dataclass(frozen=True)
class AmortizationYear:
    year: int
    interest_paid: float
    principal_paid: float
    ending_balance: float


def compute_amortization_schedule(balance: float, annual_rate: float,
                                  monthly_payment: float) -> List[AmortizationYear]:
    """Year-by-year interest, principal and closing balance.

    Stops when the balance is retired or after 60 years. If the payment
    does not cover a month's interest the schedule ends at the last
    complete year.
    """
    if balance <= 0 or monthly_payment <= 0:
        return []

    monthly_rate = annual_rate / 100 / 12
    schedule = []
    year = 1
    while year <= MAX_SCHEDULE_YEARS and balance > 0.01:
        year_interest = 0.0
        year_principal = 0.0
        for _ in range(12):
            if balance <= 0.01:
                break
            interest = balance * monthly_rate
            principal = min(monthly_payment - interest, balance)
            if principal <= 0:
                return schedule
            year_interest += interest
            year_principal += principal
            balance -= principal
        schedule.append(AmortizationYear(
            year=year,
            interest_paid=round(year_interest, 2),
            principal_paid=round(year_principal, 2),
            ending_balance=max(0.0, round(balance, 2)),
        ))
        year += 1
    return schedule


@dataclass(frozen=True)
class DebtPayoff:
    id: str
    name: str
    is_mortgage: bool
    balance: float
    annual_rate: float
    monthly_payment: float
    result: PayoffResult


def payoff_summary(snapshot: Snapshot) -> List[DebtPayoff]:
    """Payoff timeline for every consumer debt and property mortgage in the snapshot."""
    entries = []
    for debt in snapshot.debts:
        rate = debt.interest_rate if debt.interest_rate is not None else 0.0
        payment = debt.monthly_payment if debt.monthly_payment is not None else 0.0
        entries.append(DebtPayoff(debt.id, debt.category, False, debt.amount, rate, payment,
                                  calculate_payoff(debt.amount, rate, payment)))

    for prop in snapshot.properties:
        if prop.mortgage <= 0:
            continue
        rate = mortgage_rate(prop)
        payment = effective_mortgage_payment(prop, snapshot.as_of_year)
        entries.append(DebtPayoff(prop.id, prop.name, True, prop.mortgage, rate, payment,
                                  calculate_payoff(prop.mortgage, rate, payment)))

    logger.debug("Computed payoff for %d debts", len(entries))
    return entries
