"""Income tax estimation for Canadian and US residents.

Approximates federal plus provincial/state tax on a single annual
income figure using the 2025 bracket tables. Canadian tax applies the
basic personal amount as a non-refundable credit at the lowest rate;
US federal tax subtracts the standard deduction before the brackets
apply. Capital gains use the Canadian inclusion rate or the US
long-term capital gains brackets.
"""

import logging
from typing import Optional, Union

from model.Snapshot import IncomeType
from model.TaxResult import TaxResult, ZERO_TAX
from tax.BracketTable import bracket_sum, calculate_progressive_tax, marginal_rate
from tax.CanadaDetails import CanadaDetails
from tax.USDetails import USDetails

logger = logging.getLogger(__name__)

SUPPORTED_COUNTRIES = ("CA", "US")


class TaxCalculator:
    """Computes TaxResult values from injected country details."""

    def __init__(self, canada: CanadaDetails, us: USDetails):
        self.canada = canada
        self.us = us

    def jurisdictions(self, country: str) -> list:
        return self._details(country).jurisdictions()

    def _details(self, country: str):
        code = (country or "").strip().upper()
        if code == "CA":
            return self.canada
        if code == "US":
            return self.us
        raise ValueError(f"Unknown country code: '{country}'. Valid codes: {', '.join(SUPPORTED_COUNTRIES)}")

    def compute(self, income: float, income_type: Union[IncomeType, str, None],
                country: str, jurisdiction: str) -> TaxResult:
        """Estimate annual tax on income.

        Args:
            income: Gross annual income
            income_type: IncomeType (or its string value); None is treated as employment
            country: "CA" or "US"
            jurisdiction: Two-letter province/territory or state code

        Returns:
            TaxResult; all zeros when income is not positive

        Raises:
            ValueError: unknown country
            UnknownJurisdictionError: jurisdiction not valid for the country
        """
        if income <= 0:
            return ZERO_TAX

        if income_type is None:
            income_type = IncomeType.EMPLOYMENT
        elif not isinstance(income_type, IncomeType):
            income_type = IncomeType(income_type)

        details = self._details(country)
        if details is self.canada:
            result = self._canadian_tax(income, income_type, jurisdiction)
        else:
            result = self._us_tax(income, income_type, jurisdiction)

        logger.debug("Tax on %.2f (%s, %s-%s): total=%.2f marginal=%.4f",
                     income, income_type.value, details.COUNTRY, jurisdiction,
                     result.total_tax, result.marginal_rate)
        return result

    def _canadian_tax(self, income: float, income_type: IncomeType, province: str) -> TaxResult:
        federal, provincial = self.canada.brackets(province)

        if income_type == IncomeType.CAPITAL_GAINS:
            taxable = self.canada.capital_gains_inclusion(income)
        else:
            taxable = income

        federal_tax = calculate_progressive_tax(taxable, federal)
        provincial_tax = calculate_progressive_tax(taxable, provincial)

        rate = marginal_rate(taxable, federal) + marginal_rate(taxable, provincial)
        if income_type == IncomeType.CAPITAL_GAINS:
            rate *= self.canada.capital_gains_marginal_factor(income)

        return _build_result(income, federal_tax, provincial_tax, rate)

    def _us_tax(self, income: float, income_type: IncomeType, state: str) -> TaxResult:
        federal, state_table = self.us.brackets(state)

        # State brackets tax gains as ordinary income
        state_tax = bracket_sum(income, state_table)
        state_marginal = marginal_rate(income, state_table)

        if income_type == IncomeType.CAPITAL_GAINS:
            gains_table = self.us.long_term_capital_gains
            federal_tax = bracket_sum(income, gains_table)
            federal_marginal = marginal_rate(income, gains_table)
        else:
            taxable = max(0.0, income - self.us.standard_deduction)
            federal_tax = bracket_sum(taxable, federal)
            federal_marginal = marginal_rate(taxable, federal)

        return _build_result(income, federal_tax, state_tax, federal_marginal + state_marginal)


def _build_result(income: float, federal_tax: float, subnational_tax: float, rate: float) -> TaxResult:
    total_tax = federal_tax + subnational_tax
    return TaxResult(
        federal_tax=federal_tax,
        subnational_tax=subnational_tax,
        total_tax=total_tax,
        effective_rate=total_tax / income,
        after_tax_income=income - total_tax,
        marginal_rate=rate,
    )


_default_calculator: Optional[TaxCalculator] = None


def default_calculator() -> TaxCalculator:
    """Shared calculator over the 2025 reference tables."""
    global _default_calculator
    if _default_calculator is None:
        _default_calculator = TaxCalculator(CanadaDetails(2025), USDetails(2025))
    return _default_calculator


def compute_tax(income: float, income_type: Union[IncomeType, str, None],
                country: str, jurisdiction: str) -> TaxResult:
    """Estimate tax using the 2025 tables. See TaxCalculator.compute."""
    return default_calculator().compute(income, income_type, country, jurisdiction)
