"""Compare a snapshot's headline metrics against national medians for the owner's age group."""

import json
import logging
import os
from dataclasses import dataclass
from typing import Dict, List, Optional

from calc.totals_calculator import compute_totals
from model.Snapshot import Snapshot
from model.Totals import Totals

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AgeGroupBenchmark:
    age_min: int
    age_max: int
    label: str
    median_net_worth: float
    median_savings_rate: float  # fraction of gross income
    median_debt_to_income_ratio: float
    recommended_emergency_months: float


@dataclass(frozen=True)
class BenchmarkComparison:
    metric: str
    user_value: float
    benchmark_value: float
    format: str  # "currency", "percent", "months" or "ratio"
    above_benchmark: bool  # True when the user is doing better than the benchmark


class BenchmarkDetails:
    def __init__(self):
        benchmarks_path = os.path.join(os.path.dirname(__file__), '..', '..', 'reference', 'benchmarks.json')
        with open(benchmarks_path, 'r') as f:
            data = json.load(f)

        self.sources: Dict[str, str] = data.get("sources", {})
        self.age_groups: Dict[str, List[AgeGroupBenchmark]] = {}
        for country, groups in data.get("ageGroups", {}).items():
            self.age_groups[country.upper()] = [
                AgeGroupBenchmark(
                    age_min=g["ageMin"],
                    age_max=g["ageMax"],
                    label=g["label"],
                    median_net_worth=g["medianNetWorth"],
                    median_savings_rate=g["medianSavingsRate"],
                    median_debt_to_income_ratio=g["medianDebtToIncomeRatio"],
                    recommended_emergency_months=g["recommendedEmergencyMonths"],
                )
                for g in groups
            ]

    def for_age(self, age: int, country: str) -> Optional[AgeGroupBenchmark]:
        """Age group containing age (inclusive bounds), or None if the country or age is not covered."""
        for group in self.age_groups.get(country.strip().upper(), []):
            if group.age_min <= age <= group.age_max:
                return group
        return None


_default_details: Optional[BenchmarkDetails] = None


def default_benchmarks() -> BenchmarkDetails:
    global _default_details
    if _default_details is None:
        _default_details = BenchmarkDetails()
    return _default_details


def compute_benchmark_comparisons(snapshot: Snapshot, totals: Optional[Totals] = None,
                                  details: Optional[BenchmarkDetails] = None) -> List[BenchmarkComparison]:
    """Compare net worth, savings rate, emergency fund and debt-to-income against the age group.

    Returns an empty list when the snapshot has no age or country, or
    when no group covers the age.
    """
    if snapshot.age is None or snapshot.country is None:
        return []

    group = (details or default_benchmarks()).for_age(snapshot.age, snapshot.country)
    if group is None:
        logger.debug("No benchmark group for age %s in %s", snapshot.age, snapshot.country)
        return []

    if totals is None:
        totals = compute_totals(snapshot)

    return [
        BenchmarkComparison(
            metric="Net Worth",
            user_value=totals.net_worth,
            benchmark_value=group.median_net_worth,
            format="currency",
            above_benchmark=totals.net_worth >= group.median_net_worth,
        ),
        BenchmarkComparison(
            metric="Savings Rate",
            user_value=totals.savings_rate,
            benchmark_value=group.median_savings_rate,
            format="percent",
            above_benchmark=totals.savings_rate >= group.median_savings_rate,
        ),
        BenchmarkComparison(
            metric="Emergency Fund",
            user_value=totals.runway_months,
            benchmark_value=group.recommended_emergency_months,
            format="months",
            above_benchmark=totals.runway_months >= group.recommended_emergency_months,
        ),
        # Lower is better
        BenchmarkComparison(
            metric="Debt-to-Income",
            user_value=totals.debt_to_income_ratio,
            benchmark_value=group.median_debt_to_income_ratio,
            format="ratio",
            above_benchmark=totals.debt_to_income_ratio <= group.median_debt_to_income_ratio,
        ),
    ]
