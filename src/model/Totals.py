"""Point-in-time totals for a snapshot."""

from dataclasses import dataclass
from typing import Tuple

from model.TaxResult import TaxResult


@dataclass(frozen=True)
class IncomeTax:
    """Tax estimate for one income item, on its annualized amount."""
    income_id: str
    category: str
    annual_income: float
    tax: TaxResult


@dataclass(frozen=True)
class Totals:
    # Cash flow (monthly)
    monthly_income: float = 0.0
    monthly_expenses: float = 0.0
    monthly_after_tax_income: float = 0.0
    monthly_investment_contributions: float = 0.0
    monthly_mortgage_payments: float = 0.0
    monthly_debt_payments: float = 0.0
    monthly_surplus: float = 0.0

    # Tax (annual)
    total_tax_estimate: float = 0.0
    federal_tax_estimate: float = 0.0
    subnational_tax_estimate: float = 0.0
    effective_tax_rate: float = 0.0
    income_taxes: Tuple[IncomeTax, ...] = ()

    # Balances
    liquid_assets: float = 0.0
    stock_value: float = 0.0
    property_value: float = 0.0
    property_mortgage: float = 0.0
    property_equity: float = 0.0
    consumer_debts: float = 0.0
    total_debts: float = 0.0  # consumer debts plus mortgages

    # Metrics
    net_worth: float = 0.0
    debt_to_asset_ratio: float = 0.0
    runway_months: float = 0.0
    savings_rate: float = 0.0
    debt_to_income_ratio: float = 0.0
