import json
import math
import os
from dataclasses import dataclass
from typing import Tuple

from tax.errors import UnsupportedTaxYearError

REFERENCE_DIR = os.path.normpath(os.path.join(os.path.dirname(__file__), '..', '..', 'reference'))


@dataclass(frozen=True)
class TaxBracket:
    min: float
    max: float
    rate: float


@dataclass(frozen=True)
class BracketTable:
    """Ordered, contiguous income ranges with a rate per range.

    basic_personal_amount is a credit base for Canadian tables and the
    standard deduction for the US federal table. An empty bracket tuple
    means the jurisdiction has no income tax.
    """
    brackets: Tuple[TaxBracket, ...] = ()
    basic_personal_amount: float = 0.0

    @property
    def lowest_rate(self) -> float:
        return self.brackets[0].rate if self.brackets else 0.0

    @classmethod
    def from_dict(cls, data: dict, name: str = "table") -> "BracketTable":
        """Build a table from its reference JSON form.

        A null "max" is an open upper bound. Rates above 1 are read as
        percentages. Raises ValueError if the ranges are not contiguous
        from zero to infinity.
        """
        brackets = []
        for b in data.get("brackets", []):
            rate = b["rate"]
            if rate > 1:
                rate = rate / 100.0
            upper = b.get("max")
            brackets.append(TaxBracket(
                min=float(b["min"]),
                max=math.inf if upper is None else float(upper),
                rate=float(rate),
            ))

        if brackets:
            if brackets[0].min != 0:
                raise ValueError(f"{name}: first bracket must start at 0, got {brackets[0].min}")
            for i in range(1, len(brackets)):
                if brackets[i].min != brackets[i - 1].max:
                    raise ValueError(
                        f"{name}: brackets are not contiguous between "
                        f"{brackets[i - 1].max} and {brackets[i].min}"
                    )
            if not math.isinf(brackets[-1].max):
                raise ValueError(f"{name}: last bracket must have no upper bound")

        return cls(tuple(brackets), float(data.get("basicPersonalAmount", 0)))


def load_tax_year(filename: str, year: int) -> dict:
    """Read a reference file and return the entry for the requested year."""
    ref_path = os.path.join(REFERENCE_DIR, filename)
    with open(ref_path, 'r') as f:
        data = json.load(f)

    tax_years = data.get("taxYears", [])
    if not tax_years:
        raise ValueError(f"{filename} must contain a 'taxYears' array with at least one entry")

    by_year = {entry["year"]: entry for entry in tax_years}
    if year not in by_year:
        raise UnsupportedTaxYearError(year, by_year.keys())
    return by_year[year]


def bracket_sum(taxable_income: float, table: BracketTable) -> float:
    """Sum rate * amount-in-bracket with no credit applied."""
    if taxable_income <= 0:
        return 0.0
    tax = 0.0
    for b in table.brackets:
        if taxable_income <= b.min:
            break
        tax += (min(taxable_income, b.max) - b.min) * b.rate
    return tax


def calculate_progressive_tax(taxable_income: float, table: BracketTable) -> float:
    """Bracket sum less the basic personal amount credit at the lowest rate, floored at 0."""
    if taxable_income <= 0:
        return 0.0
    credit = table.basic_personal_amount * table.lowest_rate
    return max(0.0, bracket_sum(taxable_income, table) - credit)


def marginal_rate(taxable_income: float, table: BracketTable) -> float:
    if taxable_income <= 0 or not table.brackets:
        return 0.0
    for b in table.brackets:
        if taxable_income <= b.max:
            return b.rate
    return table.brackets[-1].rate
