from dataclasses import dataclass


@dataclass(frozen=True)
class TaxResult:
    federal_tax: float
    subnational_tax: float
    total_tax: float
    effective_rate: float
    after_tax_income: float
    marginal_rate: float


ZERO_TAX = TaxResult(
    federal_tax=0.0,
    subnational_tax=0.0,
    total_tax=0.0,
    effective_rate=0.0,
    after_tax_income=0.0,
    marginal_rate=0.0,
)
