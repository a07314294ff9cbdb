"""Household snapshot model.

A Snapshot is the single input to every calculator: assets, debts,
income, expenses, properties, stock holdings and goals at one point in
time, plus the tax residence used to estimate after-tax income.

All classes are frozen. Calculators that need a modified snapshot build
one with dataclasses.replace rather than mutating the caller's copy.

Optional rate, contribution and payment fields use None for "not set";
an explicit 0 is a real value and overrides any category default.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class IncomeType(Enum):
    EMPLOYMENT = "employment"
    CAPITAL_GAINS = "capital-gains"
    OTHER = "other"


class Frequency(Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMIANNUAL = "semiannual"
    ANNUAL = "annual"

    @property
    def monthly_multiplier(self) -> float:
        return _MONTHLY_MULTIPLIERS[self]


_MONTHLY_MULTIPLIERS = {
    Frequency.WEEKLY: 52 / 12,
    Frequency.BIWEEKLY: 26 / 12,
    Frequency.MONTHLY: 1.0,
    Frequency.QUARTERLY: 1 / 3,
    Frequency.SEMIANNUAL: 1 / 6,
    Frequency.ANNUAL: 1 / 12,
}


def _optional_float(value) -> Optional[float]:
    return None if value is None else float(value)


def _optional_int(value) -> Optional[int]:
    return None if value is None else int(value)


@dataclass(frozen=True)
class Asset:
    id: str
    category: str
    amount: float
    roi: Optional[float] = None  # annual %, None means use the category default
    monthly_contribution: Optional[float] = None
    surplus_target: bool = False

    @classmethod
    def from_dict(cls, d: dict) -> "Asset":
        return cls(
            id=str(d["id"]),
            category=d.get("category", ""),
            amount=float(d.get("amount", 0)),
            roi=_optional_float(d.get("roi")),
            monthly_contribution=_optional_float(d.get("monthlyContribution")),
            surplus_target=bool(d.get("surplusTarget", False)),
        )


@dataclass(frozen=True)
class Debt:
    id: str
    category: str
    amount: float
    interest_rate: Optional[float] = None  # annual %
    monthly_payment: Optional[float] = None

    @classmethod
    def from_dict(cls, d: dict) -> "Debt":
        return cls(
            id=str(d["id"]),
            category=d.get("category", ""),
            amount=float(d.get("amount", 0)),
            interest_rate=_optional_float(d.get("interestRate")),
            monthly_payment=_optional_float(d.get("monthlyPayment")),
        )


@dataclass(frozen=True)
class IncomeItem:
    id: str
    category: str
    amount: float  # per frequency period
    frequency: Frequency = Frequency.MONTHLY
    income_type: Optional[IncomeType] = None  # None is taxed as employment

    @property
    def monthly_amount(self) -> float:
        return self.amount * self.frequency.monthly_multiplier

    @classmethod
    def from_dict(cls, d: dict) -> "IncomeItem":
        income_type = d.get("incomeType")
        return cls(
            id=str(d["id"]),
            category=d.get("category", ""),
            amount=float(d.get("amount", 0)),
            frequency=Frequency(d.get("frequency", "monthly")),
            income_type=IncomeType(income_type) if income_type else None,
        )


@dataclass(frozen=True)
class ExpenseItem:
    id: str
    category: str
    amount: float  # monthly

    @classmethod
    def from_dict(cls, d: dict) -> "ExpenseItem":
        return cls(id=str(d["id"]), category=d.get("category", ""), amount=float(d.get("amount", 0)))


@dataclass(frozen=True)
class Property:
    id: str
    name: str
    value: float
    mortgage: float = 0.0
    interest_rate: Optional[float] = None  # annual %
    monthly_payment: Optional[float] = None
    amortization_years: Optional[int] = None
    year_purchased: Optional[int] = None
    appreciation_rate: Optional[float] = None  # annual %, negative for depreciating property

    @property
    def equity(self) -> float:
        return max(0.0, self.value - self.mortgage)

    @classmethod
    def from_dict(cls, d: dict) -> "Property":
        return cls(
            id=str(d["id"]),
            name=d.get("name", ""),
            value=float(d.get("value", 0)),
            mortgage=float(d.get("mortgage", 0)),
            interest_rate=_optional_float(d.get("interestRate")),
            monthly_payment=_optional_float(d.get("monthlyPayment")),
            amortization_years=_optional_int(d.get("amortizationYears")),
            year_purchased=_optional_int(d.get("yearPurchased")),
            appreciation_rate=_optional_float(d.get("appreciation")),
        )


@dataclass(frozen=True)
class StockHolding:
    id: str
    ticker: str
    shares: float
    last_fetched_price: Optional[float] = None
    manual_price: Optional[float] = None
    cost_basis: Optional[float] = None  # per share
    purchase_date: Optional[str] = None

    @property
    def price(self) -> float:
        if self.manual_price is not None:
            return self.manual_price
        if self.last_fetched_price is not None:
            return self.last_fetched_price
        return 0.0

    @property
    def value(self) -> float:
        return self.shares * self.price

    @property
    def gain_loss(self) -> Optional[float]:
        """Unrealized gain against cost basis, None when basis or price is unknown."""
        if self.cost_basis is None or self.cost_basis <= 0 or self.price <= 0:
            return None
        return (self.price - self.cost_basis) * self.shares

    @property
    def gain_loss_percent(self) -> Optional[float]:
        if self.gain_loss is None:
            return None
        return (self.price - self.cost_basis) / self.cost_basis * 100

    @classmethod
    def from_dict(cls, d: dict) -> "StockHolding":
        return cls(
            id=str(d["id"]),
            ticker=d.get("ticker", "").upper(),
            shares=float(d.get("shares", 0)),
            last_fetched_price=_optional_float(d.get("lastFetchedPrice")),
            manual_price=_optional_float(d.get("manualPrice")),
            cost_basis=_optional_float(d.get("costBasis")),
            purchase_date=d.get("purchaseDate"),
        )


@dataclass(frozen=True)
class Goal:
    id: str
    name: str
    target_amount: float
    current_amount: float = 0.0

    @property
    def progress(self) -> float:
        if self.target_amount <= 0:
            return 0.0
        return self.current_amount / self.target_amount

    @property
    def reached(self) -> bool:
        return self.current_amount >= self.target_amount

    @classmethod
    def from_dict(cls, d: dict) -> "Goal":
        return cls(
            id=str(d["id"]),
            name=d.get("name", ""),
            target_amount=float(d.get("targetAmount", 0)),
            current_amount=float(d.get("currentAmount", 0)),
        )


@dataclass(frozen=True)
class Snapshot:
    assets: Tuple[Asset, ...] = ()
    debts: Tuple[Debt, ...] = ()
    income: Tuple[IncomeItem, ...] = ()
    expenses: Tuple[ExpenseItem, ...] = ()
    properties: Tuple[Property, ...] = ()
    stocks: Tuple[StockHolding, ...] = ()
    goals: Tuple[Goal, ...] = ()
    country: Optional[str] = None  # "CA" or "US"; None skips tax estimation
    jurisdiction: Optional[str] = None
    age: Optional[int] = None
    as_of_year: Optional[int] = None  # calendar year used to age mortgages

    def surplus_target_index(self) -> Optional[int]:
        """Index of the asset receiving surplus cash: the flagged one, else the first, else None."""
        if not self.assets:
            return None
        for i, asset in enumerate(self.assets):
            if asset.surplus_target:
                return i
        return 0

    @classmethod
    def from_dict(cls, d: dict) -> "Snapshot":
        country = d.get("country")
        jurisdiction = d.get("jurisdiction")
        return cls(
            assets=tuple(Asset.from_dict(a) for a in d.get("assets", [])),
            debts=tuple(Debt.from_dict(x) for x in d.get("debts", [])),
            income=tuple(IncomeItem.from_dict(i) for i in d.get("income", [])),
            expenses=tuple(ExpenseItem.from_dict(e) for e in d.get("expenses", [])),
            properties=tuple(Property.from_dict(p) for p in d.get("properties", [])),
            stocks=tuple(StockHolding.from_dict(s) for s in d.get("stocks", [])),
            goals=tuple(Goal.from_dict(g) for g in d.get("goals", [])),
            country=country.upper() if country else None,
            jurisdiction=jurisdiction.upper() if jurisdiction else None,
            age=_optional_int(d.get("age")),
            as_of_year=_optional_int(d.get("asOfYear")),
        )


def load_snapshot(snapshot_path: str) -> Snapshot:
    """Read a snapshot.json file. Raises FileNotFoundError if it does not exist."""
    with open(snapshot_path, 'r') as f:
        return Snapshot.from_dict(json.load(f))
