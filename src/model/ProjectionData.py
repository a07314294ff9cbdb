"""Data model for projections and scenario comparisons.

A projection is a month-by-month series of aggregate points plus the
events detected along the way (net worth milestones, goals reached,
debt-free months). A scenario comparison pairs a baseline projection
with one run on a modified snapshot.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple


class Scenario(Enum):
    CONSERVATIVE = "conservative"
    MODERATE = "moderate"
    OPTIMISTIC = "optimistic"

    @property
    def multiplier(self) -> float:
        return _SCENARIO_MULTIPLIERS[self]


_SCENARIO_MULTIPLIERS = {
    Scenario.CONSERVATIVE: 0.7,
    Scenario.MODERATE: 1.0,
    Scenario.OPTIMISTIC: 1.3,
}


@dataclass(frozen=True)
class ProjectionPoint:
    """Aggregate balances at the start of a simulated month."""
    month: int
    year: float  # month / 12, one decimal
    net_worth: float
    total_assets: float  # liquid assets plus stocks
    total_debts: float  # consumer debts plus mortgages
    consumer_debts: float
    mortgage_debts: float
    total_property_equity: float


@dataclass(frozen=True)
class Milestone:
    label: str  # e.g. "$100k", "$2.5M"
    month: int
    value: float


@dataclass(frozen=True)
class GoalMilestone:
    goal_name: str
    month_reached: Optional[int]  # None if not reached within the projection
    target_amount: float


@dataclass
class ProjectionResult:
    points: List[ProjectionPoint] = field(default_factory=list)
    milestones: List[Milestone] = field(default_factory=list)
    goal_milestones: List[GoalMilestone] = field(default_factory=list)
    debt_free_month: Optional[int] = None
    consumer_debt_free_month: Optional[int] = None
    mortgage_free_month: Optional[int] = None

    def point_at_month(self, month: int) -> Optional[ProjectionPoint]:
        if 0 <= month < len(self.points):
            return self.points[month]
        return None

    def yearly_points(self) -> Dict[int, ProjectionPoint]:
        """Points at each whole year, keyed by year number (0 is the starting snapshot)."""
        return {p.month // 12: p for p in self.points if p.month % 12 == 0}


@dataclass(frozen=True)
class AssetProjection:
    asset_id: str
    category: str
    current_value: float
    milestone_values: Dict[int, float]  # years -> value


@dataclass(frozen=True)
class ScenarioModification:
    """A what-if change applied to a snapshot before projecting it."""
    excluded_debt_ids: FrozenSet[str] = frozenset()
    contribution_overrides: Tuple[Tuple[str, float], ...] = ()  # (asset id, monthly contribution)
    income_adjustment: float = 0.0  # signed, in the first income item's own units
    windfall: float = 0.0

    @classmethod
    def from_dict(cls, d: dict) -> "ScenarioModification":
        overrides = d.get("contributionOverrides", {})
        return cls(
            excluded_debt_ids=frozenset(str(i) for i in d.get("excludedDebtIds", [])),
            contribution_overrides=tuple((str(k), float(v)) for k, v in overrides.items()),
            income_adjustment=float(d.get("incomeAdjustment", 0)),
            windfall=float(d.get("windfall", 0)),
        )

    @property
    def is_empty(self) -> bool:
        return (not self.excluded_debt_ids and not self.contribution_overrides
                and self.income_adjustment == 0 and self.windfall == 0)


EMPTY_MODIFICATION = ScenarioModification()


@dataclass(frozen=True)
class NetWorthDelta:
    year: int
    baseline: float
    scenario: float
    delta: float  # scenario minus baseline


@dataclass
class ScenarioComparison:
    baseline: ProjectionResult
    scenario: ProjectionResult
    net_worth_deltas: List[NetWorthDelta]
    debt_free_delta_months: Optional[int] = None
    consumer_debt_free_delta_months: Optional[int] = None
    mortgage_free_delta_months: Optional[int] = None
