from typing import Dict, List, Tuple

from tax.BracketTable import BracketTable, load_tax_year
from tax.errors import UnknownJurisdictionError


class CanadaDetails:
    """Canadian federal and provincial/territorial brackets for one tax year."""

    COUNTRY = "CA"

    def __init__(self, year: int = 2025):
        """
        year: tax year to load from reference/ca-tax-details.json
        """
        self.year = year
        year_data = load_tax_year('ca-tax-details.json', year)

        self.federal = BracketTable.from_dict(year_data["federal"], "CA federal")
        self.provincial: Dict[str, BracketTable] = {
            code: BracketTable.from_dict(table, f"CA {code}")
            for code, table in year_data.get("jurisdictions", {}).items()
        }

        inclusion = year_data.get("capitalGainsInclusion", {})
        self.first_tier_limit = inclusion.get("firstTierLimit", 250000)
        self.first_tier_rate = inclusion.get("firstTierRate", 0.5)
        self.second_tier_rate = inclusion.get("secondTierRate", 2 / 3)

    def jurisdictions(self) -> List[str]:
        return list(self.provincial.keys())

    def brackets(self, province: str) -> Tuple[BracketTable, BracketTable]:
        """Returns (federal, provincial) tables for a two-letter code, case-insensitive."""
        code = province.strip().upper()
        if code not in self.provincial:
            raise UnknownJurisdictionError(self.COUNTRY, province, self.provincial.keys())
        return self.federal, self.provincial[code]

    def capital_gains_inclusion(self, capital_gains: float) -> float:
        """Taxable portion of a capital gain: first tier at the lower inclusion rate, the rest at the higher."""
        if capital_gains <= 0:
            return 0.0
        if capital_gains <= self.first_tier_limit:
            return capital_gains * self.first_tier_rate
        return (self.first_tier_limit * self.first_tier_rate
                + (capital_gains - self.first_tier_limit) * self.second_tier_rate)

    def capital_gains_marginal_factor(self, capital_gains: float) -> float:
        """Share of the next dollar of gains that is included in taxable income."""
        if capital_gains <= self.first_tier_limit:
            return self.first_tier_rate
        return self.second_tier_rate
