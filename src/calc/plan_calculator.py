"""Unified plan calculator.

Builds a complete PlanData for a snapshot in one pass: totals first (the
tax engine runs per income item), then debt payoff, the projection and
per-asset projections, benchmarks, and finally the scenario comparison
when a modification is given.
"""

import logging
from typing import Optional, Sequence, Union

from calc.benchmark_calculator import compute_benchmark_comparisons
from calc.debt_payoff import payoff_summary
from calc.projection_calculator import project, project_assets
from calc.scenario_calculator import compare_scenarios
from calc.tax_engine import TaxCalculator, default_calculator
from calc.totals_calculator import compute_totals
from model.PlanData import PlanData
from model.ProjectionData import Scenario, ScenarioModification
from model.Snapshot import Snapshot

logger = logging.getLogger(__name__)


class PlanCalculator:
    """Calculator that builds complete plan data for one snapshot."""

    def __init__(self, calculator: Optional[TaxCalculator] = None):
        self.calculator = calculator or default_calculator()

    def calculate(self, snapshot: Snapshot, name: str = "", years: int = 10,
                  scenario: Union[Scenario, str] = Scenario.MODERATE,
                  modification: Optional[ScenarioModification] = None,
                  milestone_years: Sequence[int] = (10, 20, 30)) -> PlanData:
        """Calculate totals, payoffs, projections and benchmarks for a snapshot.

        Args:
            snapshot: Starting household state
            name: Display name of the snapshot
            years: Projection horizon in whole years
            scenario: Growth scenario (or its string value)
            modification: Optional what-if change; when set and not empty,
                a scenario comparison is included
            milestone_years: Years at which each asset's value is reported

        Returns:
            PlanData containing all results
        """
        scenario = scenario if isinstance(scenario, Scenario) else Scenario(scenario)

        totals = compute_totals(snapshot, self.calculator)
        projection = project(snapshot, years, scenario, self.calculator)

        comparison = None
        if modification is not None and not modification.is_empty:
            comparison = compare_scenarios(snapshot, modification, years, scenario, self.calculator)

        plan = PlanData(
            name=name,
            snapshot=snapshot,
            totals=totals,
            projection=projection,
            years=years,
            scenario=scenario,
            payoffs=payoff_summary(snapshot),
            asset_projections=project_assets(snapshot.assets, scenario, milestone_years),
            benchmarks=compute_benchmark_comparisons(snapshot, totals),
            comparison=comparison,
        )
        logger.debug("Built plan for %s: %d years, %s", name or "snapshot", years, scenario.value)
        return plan
