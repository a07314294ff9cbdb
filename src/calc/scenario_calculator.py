"""What-if scenario comparison.

Applies a ScenarioModification to a snapshot and projects both the
original and the modified snapshot over the same horizon, reporting how
net worth and debt-free timing differ.
"""

import dataclasses
import logging
from typing import List, Optional, Union

from calc.projection_calculator import project
from calc.tax_engine import TaxCalculator
from model.ProjectionData import NetWorthDelta, Scenario, ScenarioComparison, ScenarioModification
from model.Snapshot import Snapshot

logger = logging.getLogger(__name__)

DELTA_YEARS = (5, 10)
LONG_HORIZON_DELTA_YEARS = (20, 30)


def apply_modification(snapshot: Snapshot, modification: ScenarioModification) -> Snapshot:
    """Return a new snapshot with the modification applied; the input is left untouched.

    - Debts whose id is excluded are removed.
    - Listed assets get their monthly contribution replaced.
    - A positive windfall is added to the surplus-target asset (or the first asset).
    - The income adjustment is added to the first income item, floored at 0.
    """
    debts = tuple(d for d in snapshot.debts if d.id not in modification.excluded_debt_ids)

    overrides = dict(modification.contribution_overrides)
    assets = [
        dataclasses.replace(a, monthly_contribution=overrides[a.id]) if a.id in overrides else a
        for a in snapshot.assets
    ]

    target_idx = snapshot.surplus_target_index()
    if modification.windfall > 0 and target_idx is not None:
        target = assets[target_idx]
        assets[target_idx] = dataclasses.replace(target, amount=target.amount + modification.windfall)

    income = list(snapshot.income)
    if modification.income_adjustment != 0 and income:
        first = income[0]
        income[0] = dataclasses.replace(first, amount=max(0.0, first.amount + modification.income_adjustment))

    return dataclasses.replace(snapshot, debts=debts, assets=tuple(assets), income=tuple(income))


def delta_years(years: int) -> List[int]:
    """Years at which net worth is compared: 5 and 10, plus 20 and 30 when the horizon reaches them."""
    marks = list(DELTA_YEARS) + [y for y in LONG_HORIZON_DELTA_YEARS if years >= y]
    return [y for y in marks if y <= years]


def _month_delta(baseline: Optional[int], scenario: Optional[int]) -> Optional[int]:
    if baseline is None or scenario is None:
        return None
    return scenario - baseline


def compare_scenarios(snapshot: Snapshot, modification: ScenarioModification, years: int = 10,
                      scenario: Union[Scenario, str] = Scenario.MODERATE,
                      calculator: Optional[TaxCalculator] = None) -> ScenarioComparison:
    """Project the snapshot with and without the modification and report the differences.

    Debt-free deltas are negative when the modification clears debt
    sooner, and None unless both runs become debt-free.
    """
    baseline = project(snapshot, years, scenario, calculator)
    modified = project(apply_modification(snapshot, modification), years, scenario, calculator)

    deltas = []
    for year in delta_years(years):
        base_point = baseline.point_at_month(year * 12)
        scen_point = modified.point_at_month(year * 12)
        base_nw = base_point.net_worth if base_point else 0.0
        scen_nw = scen_point.net_worth if scen_point else 0.0
        deltas.append(NetWorthDelta(year, base_nw, scen_nw, scen_nw - base_nw))

    comparison = ScenarioComparison(
        baseline=baseline,
        scenario=modified,
        net_worth_deltas=deltas,
        debt_free_delta_months=_month_delta(baseline.debt_free_month, modified.debt_free_month),
        consumer_debt_free_delta_months=_month_delta(
            baseline.consumer_debt_free_month, modified.consumer_debt_free_month
        ),
        mortgage_free_delta_months=_month_delta(baseline.mortgage_free_month, modified.mortgage_free_month),
    )
    logger.debug("Compared scenario over %d years: %s", years,
                 ", ".join(f"y{d.year}={d.delta:+.2f}" for d in deltas))
    return comparison
