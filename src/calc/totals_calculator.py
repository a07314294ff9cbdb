"""Financial totals calculator.

Aggregates a snapshot into monthly cash flow, annual tax, balances and
the headline metrics (net worth, surplus, runway, ratios).
"""

import logging
from typing import Optional

from calc.debt_payoff import effective_mortgage_payment
from calc.tax_engine import TaxCalculator, default_calculator
from model.Snapshot import Snapshot
from model.Totals import IncomeTax, Totals
from tax.errors import UnknownJurisdictionError

logger = logging.getLogger(__name__)


def _ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator > 0 else 0.0


def compute_totals(snapshot: Snapshot, calculator: Optional[TaxCalculator] = None) -> Totals:
    """Compute totals and metrics for a snapshot.

    Tax is estimated separately for each income item with a positive
    annualized amount, using the item's income type (employment when
    unset). A snapshot without a country is treated as untaxed.

    Raises:
        UnknownJurisdictionError: the snapshot's country is set but its
            jurisdiction is missing or not valid for that country
    """
    monthly_income = sum(item.monthly_amount for item in snapshot.income)
    monthly_expenses = sum(e.amount for e in snapshot.expenses)
    annual_income = monthly_income * 12

    income_taxes = []
    if snapshot.country is not None:
        calculator = calculator or default_calculator()
        valid_codes = calculator.jurisdictions(snapshot.country)
        if snapshot.jurisdiction is None or snapshot.jurisdiction.strip().upper() not in valid_codes:
            raise UnknownJurisdictionError(snapshot.country, snapshot.jurisdiction or "", valid_codes)

        for item in snapshot.income:
            annual = item.monthly_amount * 12
            if annual <= 0:
                continue
            tax = calculator.compute(annual, item.income_type, snapshot.country, snapshot.jurisdiction)
            income_taxes.append(IncomeTax(item.id, item.category, annual, tax))

    if snapshot.country is not None:
        total_tax = sum(t.tax.total_tax for t in income_taxes)
        federal_tax = sum(t.tax.federal_tax for t in income_taxes)
        subnational_tax = sum(t.tax.subnational_tax for t in income_taxes)
        after_tax_annual = sum(t.tax.after_tax_income for t in income_taxes)
        weighted_rate = sum(t.tax.effective_rate * t.annual_income for t in income_taxes)
        monthly_after_tax = after_tax_annual / 12
        effective_rate = _ratio(weighted_rate, annual_income)
    else:
        total_tax = federal_tax = subnational_tax = effective_rate = 0.0
        monthly_after_tax = monthly_income

    liquid_assets = sum(a.amount for a in snapshot.assets)
    stock_value = sum(s.value for s in snapshot.stocks)
    property_value = sum(p.value for p in snapshot.properties)
    property_mortgage = sum(p.mortgage for p in snapshot.properties)
    property_equity = sum(p.equity for p in snapshot.properties)
    consumer_debts = sum(d.amount for d in snapshot.debts)
    total_debts = consumer_debts + property_mortgage

    contributions = sum(a.monthly_contribution or 0.0 for a in snapshot.assets)
    mortgage_payments = sum(effective_mortgage_payment(p, snapshot.as_of_year) for p in snapshot.properties)
    debt_payments = sum(d.monthly_payment or 0.0 for d in snapshot.debts)

    surplus = monthly_after_tax - monthly_expenses - contributions - mortgage_payments
    # Equity already nets the mortgage out, so only consumer debts are subtracted
    net_worth = liquid_assets + stock_value + property_equity - consumer_debts

    totals = Totals(
        monthly_income=monthly_income,
        monthly_expenses=monthly_expenses,
        monthly_after_tax_income=monthly_after_tax,
        monthly_investment_contributions=contributions,
        monthly_mortgage_payments=mortgage_payments,
        monthly_debt_payments=debt_payments,
        monthly_surplus=surplus,
        total_tax_estimate=total_tax,
        federal_tax_estimate=federal_tax,
        subnational_tax_estimate=subnational_tax,
        effective_tax_rate=effective_rate,
        income_taxes=tuple(income_taxes),
        liquid_assets=liquid_assets,
        stock_value=stock_value,
        property_value=property_value,
        property_mortgage=property_mortgage,
        property_equity=property_equity,
        consumer_debts=consumer_debts,
        total_debts=total_debts,
        net_worth=net_worth,
        debt_to_asset_ratio=_ratio(total_debts, liquid_assets + stock_value + property_value),
        runway_months=_ratio(liquid_assets, monthly_expenses),
        savings_rate=_ratio(surplus, monthly_income),
        debt_to_income_ratio=_ratio(total_debts, annual_income),
    )
    logger.debug("Totals: net_worth=%.2f surplus=%.2f tax=%.2f", net_worth, surplus, total_tax)
    return totals
