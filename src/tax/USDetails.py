from typing import Dict, List, Tuple

from tax.BracketTable import BracketTable, load_tax_year
from tax.errors import UnknownJurisdictionError


class USDetails:
    """US federal (single filer), long-term capital gains and state brackets for one tax year."""

    COUNTRY = "US"

    def __init__(self, year: int = 2025):
        self.year = year
        year_data = load_tax_year('us-tax-details.json', year)

        self.federal = BracketTable.from_dict(year_data["federal"], "US federal")
        self.long_term_capital_gains = BracketTable.from_dict(
            year_data["longTermCapitalGains"], "US long-term capital gains"
        )
        # States with no income tax have an empty bracket list
        self.states: Dict[str, BracketTable] = {
            code: BracketTable.from_dict(table, f"US {code}")
            for code, table in year_data.get("jurisdictions", {}).items()
        }

    @property
    def standard_deduction(self) -> float:
        """Subtracted from gross income before the federal brackets apply."""
        return self.federal.basic_personal_amount

    def jurisdictions(self) -> List[str]:
        return list(self.states.keys())

    def brackets(self, state: str) -> Tuple[BracketTable, BracketTable]:
        """Returns (federal, state) tables for a two-letter code (DC included), case-insensitive."""
        code = state.strip().upper()
        if code not in self.states:
            raise UnknownJurisdictionError(self.COUNTRY, state, self.states.keys())
        return self.federal, self.states[code]
