"""Net Worth Planner Tools for MCP Server.

This module provides the tool implementations that wrap the planning
calculators and expose snapshot data through MCP.
"""

import os
import sys
import math
import logging
from dataclasses import asdict
from enum import Enum
from typing import Any, Dict, Optional

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from calc.plan_calculator import PlanCalculator
from calc.projection_calculator import downsample_points, project
from calc.scenario_calculator import compare_scenarios
from calc.tax_engine import SUPPORTED_COUNTRIES, default_calculator
from model.PlanData import PlanData
from model.ProjectionData import Scenario, ScenarioModification
from model.Snapshot import IncomeType, load_snapshot

logger = logging.getLogger(__name__)


def _clean(value: Any) -> Any:
    """Round floats and replace infinities with None so results stay valid JSON."""
    if isinstance(value, float):
        if math.isinf(value) or math.isnan(value):
            return None
        return round(value, 4)
    if isinstance(value, dict):
        return {k: _clean(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_clean(v) for v in value]
    if isinstance(value, Enum):
        return value.value
    return value


class SnapshotTools:
    """Tools that wrap the planning calculators for one snapshot."""

    def __init__(self, base_path: str, snapshot_name: str):
        """Initialize with paths and calculate the plan.

        Args:
            base_path: Path to the planner root directory
            snapshot_name: Name of the snapshot folder in input-parameters
        """
        self.base_path = base_path
        self.snapshot_name = snapshot_name
        snapshot_path = os.path.join(base_path, 'input-parameters', snapshot_name, 'snapshot.json')
        self.snapshot = load_snapshot(snapshot_path)
        self.calculator = default_calculator()
        self.plan_data: PlanData = PlanCalculator(self.calculator).calculate(self.snapshot, name=snapshot_name)

    def get_snapshot_overview(self) -> dict:
        """Get an overview of the snapshot's contents."""
        s = self.snapshot
        return {
            "snapshot_name": self.snapshot_name,
            "residence": {
                "country": s.country,
                "jurisdiction": s.jurisdiction,
            },
            "age": s.age,
            "as_of_year": s.as_of_year,
            "assets": [{"id": a.id, "category": a.category, "amount": a.amount} for a in s.assets],
            "debts": [{"id": d.id, "category": d.category, "amount": d.amount} for d in s.debts],
            "income": [
                {"id": i.id, "category": i.category, "monthly_amount": _clean(i.monthly_amount)}
                for i in s.income
            ],
            "expenses": [{"id": e.id, "category": e.category, "amount": e.amount} for e in s.expenses],
            "properties": [
                {"id": p.id, "name": p.name, "value": p.value, "mortgage": p.mortgage} for p in s.properties
            ],
            "stocks": [{"ticker": st.ticker, "shares": st.shares, "value": _clean(st.value)} for st in s.stocks],
            "goals": [
                {"name": g.name, "target_amount": g.target_amount, "current_amount": g.current_amount}
                for g in s.goals
            ],
        }

    def get_totals(self) -> dict:
        """Get cash flow, balances and metrics for the snapshot."""
        totals = asdict(self.plan_data.totals)
        totals.pop("income_taxes")
        return _clean(totals)

    def get_tax_breakdown(self) -> dict:
        """Get the tax estimate for each income item."""
        t = self.plan_data.totals
        if self.snapshot.country is None:
            return {"taxed": False, "message": "No country set; income is treated as untaxed."}
        return {
            "taxed": True,
            "country": self.snapshot.country,
            "jurisdiction": self.snapshot.jurisdiction,
            "items": [
                {
                    "income_id": it.income_id,
                    "category": it.category,
                    "annual_income": _clean(it.annual_income),
                    **_clean(asdict(it.tax)),
                }
                for it in t.income_taxes
            ],
            "total_tax": _clean(t.total_tax_estimate),
            "federal_tax": _clean(t.federal_tax_estimate),
            "subnational_tax": _clean(t.subnational_tax_estimate),
            "effective_rate": round(t.effective_tax_rate, 4),
        }

    def get_debt_payoff(self) -> dict:
        """Get the payoff timeline of each debt and mortgage."""
        debts = []
        for entry in self.plan_data.payoffs:
            result = entry.result
            debts.append({
                "id": entry.id,
                "name": entry.name,
                "is_mortgage": entry.is_mortgage,
                "balance": _clean(entry.balance),
                "annual_rate": entry.annual_rate,
                "monthly_payment": _clean(entry.monthly_payment),
                "months": None if math.isinf(result.months) else result.months,
                "total_interest": _clean(result.total_interest),
                "duration": result.duration_label,
                "status": result.status.value,
            })
        return {"debts": debts}

    def get_projection(self, years: int = 10, scenario: str = "moderate",
                       max_points: Optional[int] = None) -> dict:
        """Get the projection as yearly points, or as evenly spaced monthly points when max_points is set."""
        result = project(self.snapshot, years, scenario, self.calculator)
        if max_points:
            points = downsample_points(result.points, max_points)
        else:
            points = [p for p in result.points if p.month % 12 == 0]
        return {
            "years": years,
            "scenario": Scenario(scenario).value,
            "points": [_clean(asdict(p)) for p in points],
            "debt_free_month": result.debt_free_month,
            "consumer_debt_free_month": result.consumer_debt_free_month,
            "mortgage_free_month": result.mortgage_free_month,
        }

    def get_milestones(self, years: int = 30, scenario: str = "moderate") -> dict:
        """Get net worth milestones, goal dates and debt-free months."""
        result = project(self.snapshot, years, scenario, self.calculator)
        return {
            "years": years,
            "scenario": Scenario(scenario).value,
            "net_worth_milestones": [_clean(asdict(m)) for m in result.milestones],
            "goals": [_clean(asdict(g)) for g in result.goal_milestones],
            "debt_free_month": result.debt_free_month,
            "consumer_debt_free_month": result.consumer_debt_free_month,
            "mortgage_free_month": result.mortgage_free_month,
        }

    def compare_scenario(self, modification: dict, years: int = 10, scenario: str = "moderate") -> dict:
        """Compare the snapshot against a what-if modification."""
        mod = ScenarioModification.from_dict(modification or {})
        comparison = compare_scenarios(self.snapshot, mod, years, scenario, self.calculator)
        return {
            "years": years,
            "scenario": Scenario(scenario).value,
            "modification": {
                "excluded_debt_ids": sorted(mod.excluded_debt_ids),
                "contribution_overrides": dict(mod.contribution_overrides),
                "income_adjustment": mod.income_adjustment,
                "windfall": mod.windfall,
            },
            "net_worth_deltas": [_clean(asdict(d)) for d in comparison.net_worth_deltas],
            "debt_free_delta_months": comparison.debt_free_delta_months,
            "consumer_debt_free_delta_months": comparison.consumer_debt_free_delta_months,
            "mortgage_free_delta_months": comparison.mortgage_free_delta_months,
        }

    def get_benchmarks(self) -> dict:
        """Get metric comparisons against national medians for the snapshot's age group."""
        if not self.plan_data.benchmarks:
            return {
                "comparisons": [],
                "message": "Benchmarks need both an age and a country in the snapshot.",
            }
        return {"comparisons": [_clean(asdict(b)) for b in self.plan_data.benchmarks]}


class MultiSnapshotTools:
    """Manager for multiple snapshots.

    Discovers all available snapshots and caches their calculations,
    allowing queries to specify which snapshot to use.
    """

    def __init__(self, base_path: str, default_snapshot: Optional[str] = None):
        """Initialize and discover all available snapshots.

        Args:
            base_path: Path to the planner root directory
            default_snapshot: Default snapshot to use when none specified
        """
        self.base_path = base_path
        self.snapshots: Dict[str, SnapshotTools] = {}
        self.default_snapshot = default_snapshot
        self._discover_snapshots()

    def _discover_snapshots(self):
        """Discover and load all available snapshots."""
        input_params_path = os.path.join(self.base_path, 'input-parameters')

        if not os.path.exists(input_params_path):
            return

        for name in sorted(os.listdir(input_params_path)):
            snapshot_dir = os.path.join(input_params_path, name)
            snapshot_path = os.path.join(snapshot_dir, 'snapshot.json')

            if os.path.isdir(snapshot_dir) and os.path.exists(snapshot_path):
                try:
                    self.snapshots[name] = SnapshotTools(self.base_path, name)
                except (OSError, ValueError, KeyError) as e:
                    # Skip the broken snapshot, keep serving the rest
                    logger.warning("Failed to load snapshot '%s': %s", name, e)

        if self.default_snapshot is None and self.snapshots:
            self.default_snapshot = list(self.snapshots.keys())[0]

    def _get_snapshot(self, snapshot: Optional[str] = None, require_explicit: bool = False) -> SnapshotTools:
        """Get the specified snapshot or default.

        Args:
            snapshot: Snapshot name to use, or None for default
            require_explicit: If True, raise error when snapshot not specified and multiple exist
        """
        if snapshot is None and len(self.snapshots) > 1 and require_explicit:
            available = list(self.snapshots.keys())
            raise ValueError(
                f"Multiple snapshots available: {available}. Please specify which snapshot to query."
            )

        snapshot_name = snapshot or self.default_snapshot

        if snapshot_name not in self.snapshots:
            available = list(self.snapshots.keys())
            raise ValueError(
                f"Snapshot '{snapshot_name}' not found. Available snapshots: {available}"
            )

        return self.snapshots[snapshot_name]

    def _tagged(self, result: dict, snapshot: Optional[str]) -> dict:
        result["snapshot"] = snapshot or self.default_snapshot
        return result

    def list_snapshots(self) -> dict:
        """List all available snapshots."""
        snapshots_info = {}
        for name, tools in self.snapshots.items():
            snapshots_info[name] = {
                "country": tools.snapshot.country,
                "jurisdiction": tools.snapshot.jurisdiction,
                "net_worth": round(tools.plan_data.totals.net_worth, 2),
            }

        return {
            "available_snapshots": list(self.snapshots.keys()),
            "default_snapshot": self.default_snapshot,
            "snapshots_info": snapshots_info,
        }

    def reload_snapshots(self) -> dict:
        """Reload all snapshots from disk, refreshing the cache."""
        old_snapshots = set(self.snapshots.keys())

        self.snapshots.clear()
        self.default_snapshot = None
        self._discover_snapshots()

        new_snapshots = set(self.snapshots.keys())
        return {
            "status": "success",
            "message": f"Reloaded {len(self.snapshots)} snapshots",
            "snapshots_loaded": list(self.snapshots.keys()),
            "default_snapshot": self.default_snapshot,
            "changes": {
                "added": sorted(new_snapshots - old_snapshots),
                "removed": sorted(old_snapshots - new_snapshots),
                "reloaded": sorted(old_snapshots & new_snapshots),
            },
        }

    def get_snapshot_overview(self, snapshot: Optional[str] = None) -> dict:
        return self._tagged(self._get_snapshot(snapshot, require_explicit=True).get_snapshot_overview(), snapshot)

    def get_totals(self, snapshot: Optional[str] = None) -> dict:
        return self._tagged(self._get_snapshot(snapshot, require_explicit=True).get_totals(), snapshot)

    def get_tax_breakdown(self, snapshot: Optional[str] = None) -> dict:
        return self._tagged(self._get_snapshot(snapshot, require_explicit=True).get_tax_breakdown(), snapshot)

    def get_debt_payoff(self, snapshot: Optional[str] = None) -> dict:
        return self._tagged(self._get_snapshot(snapshot, require_explicit=True).get_debt_payoff(), snapshot)

    def get_projection(self, years: int = 10, scenario: str = "moderate", max_points: Optional[int] = None,
                       snapshot: Optional[str] = None) -> dict:
        result = self._get_snapshot(snapshot, require_explicit=True).get_projection(years, scenario, max_points)
        return self._tagged(result, snapshot)

    def get_milestones(self, years: int = 30, scenario: str = "moderate", snapshot: Optional[str] = None) -> dict:
        result = self._get_snapshot(snapshot, require_explicit=True).get_milestones(years, scenario)
        return self._tagged(result, snapshot)

    def compare_scenario(self, modification: dict, years: int = 10, scenario: str = "moderate",
                         snapshot: Optional[str] = None) -> dict:
        result = self._get_snapshot(snapshot, require_explicit=True).compare_scenario(modification, years, scenario)
        return self._tagged(result, snapshot)

    def get_benchmarks(self, snapshot: Optional[str] = None) -> dict:
        return self._tagged(self._get_snapshot(snapshot, require_explicit=True).get_benchmarks(), snapshot)

    def compute_tax(self, income: float, income_type: Optional[str] = None, country: Optional[str] = None,
                    jurisdiction: Optional[str] = None, snapshot: Optional[str] = None) -> dict:
        """Estimate tax on an annual income.

        Country and jurisdiction default to the snapshot's residence when
        either is omitted.
        """
        if country is None or jurisdiction is None:
            source = self._get_snapshot(snapshot).snapshot
            if source.country is None:
                raise ValueError("Snapshot has no country; pass country and jurisdiction explicitly")
            country = country or source.country
            jurisdiction = jurisdiction or source.jurisdiction or ""

        kind = IncomeType(income_type) if income_type else IncomeType.EMPLOYMENT
        result = default_calculator().compute(income, kind, country, jurisdiction)
        return {
            "income": income,
            "income_type": kind.value,
            "country": country.upper(),
            "jurisdiction": jurisdiction.upper(),
            **_clean(asdict(result)),
        }

    def list_jurisdictions(self, country: Optional[str] = None) -> dict:
        """List valid jurisdiction codes for one country, or for every supported country."""
        calculator = default_calculator()
        countries = [country.upper()] if country else list(SUPPORTED_COUNTRIES)
        return {c: sorted(calculator.jurisdictions(c)) for c in countries}
