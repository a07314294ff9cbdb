"""Unified data model for a snapshot's planning results.

PlanData bundles everything computed for one snapshot: point-in-time
totals, the debt payoff summary, the projection, per-asset projections,
benchmark comparisons and, when a modification was supplied, the
scenario comparison. Each renderer extracts the parts it needs.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from model.ProjectionData import AssetProjection, ProjectionPoint, ProjectionResult, Scenario, ScenarioComparison
from model.Snapshot import Snapshot
from model.Totals import Totals


@dataclass
class PlanData:
    name: str
    snapshot: Snapshot
    totals: Totals
    projection: ProjectionResult
    years: int = 10
    scenario: Scenario = Scenario.MODERATE
    payoffs: List = field(default_factory=list)  # List[DebtPayoff]
    asset_projections: List[AssetProjection] = field(default_factory=list)
    benchmarks: List = field(default_factory=list)  # List[BenchmarkComparison]
    comparison: Optional[ScenarioComparison] = None

    @property
    def yearly_points(self) -> Dict[int, ProjectionPoint]:
        return self.projection.yearly_points()

    def get_year(self, year: int) -> Optional[ProjectionPoint]:
        """Projection point at the start of the given year (0 is today)."""
        return self.projection.point_at_month(year * 12)
