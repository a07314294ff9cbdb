"""Month-by-month net worth projection.

The simulation starts from the snapshot as-is and advances every asset,
debt, mortgage and property value one month at a time. The aggregate
point for each month is recorded before that month is advanced, so a
projection over N years has N*12+1 points and the first point matches
the starting snapshot.

The scenario multiplier scales every rate (ROI, interest, appreciation)
and every recurring amount (contributions, debt and mortgage payments,
surplus) for the whole run.
"""

import logging
from typing import List, Optional, Sequence, Union

from calc.debt_payoff import effective_mortgage_payment, mortgage_rate
from calc.tax_engine import TaxCalculator
from calc.totals_calculator import compute_totals
from model.ProjectionData import (
    AssetProjection,
    GoalMilestone,
    Milestone,
    ProjectionPoint,
    ProjectionResult,
    Scenario,
)
from model.Snapshot import Asset, Snapshot
from model.categories import resolve_appreciation, resolve_roi

logger = logging.getLogger(__name__)

MILESTONE_THRESHOLDS = (100_000, 250_000, 500_000, 1_000_000, 2_500_000, 5_000_000)


def milestone_label(value: float) -> str:
    """Short label for a threshold: $100k, $1M, $2.5M."""
    if value >= 1_000_000:
        millions = value / 1_000_000
        return f"${millions:.0f}M" if value % 1_000_000 == 0 else f"${millions:.1f}M"
    return f"${value / 1_000:.0f}k"


def _monthly_rate(annual_percent: float, multiplier: float) -> float:
    return annual_percent * multiplier / 100 / 12


def _as_scenario(scenario: Union[Scenario, str]) -> Scenario:
    return scenario if isinstance(scenario, Scenario) else Scenario(scenario)


def project(snapshot: Snapshot, years: int, scenario: Union[Scenario, str] = Scenario.MODERATE,
            calculator: Optional[TaxCalculator] = None) -> ProjectionResult:
    """Simulate the snapshot forward for the given number of years.

    Args:
        snapshot: Starting household state
        years: Projection horizon in whole years
        scenario: Growth scenario (or its string value)
        calculator: Tax calculator used for the starting surplus; defaults to the 2025 tables

    Returns:
        ProjectionResult with years*12+1 points

    Raises:
        ValueError: years is negative
    """
    if years < 0:
        raise ValueError(f"Projection years must be non-negative, got {years}")

    scenario = _as_scenario(scenario)
    multiplier = scenario.multiplier
    total_months = int(years * 12)

    # Surplus is fixed from the starting snapshot; growth does not feed back into it
    totals = compute_totals(snapshot, calculator)
    surplus = totals.monthly_surplus * multiplier
    stocks_total = totals.stock_value
    target_idx = snapshot.surplus_target_index()

    asset_balances = [a.amount for a in snapshot.assets]
    asset_rates = [_monthly_rate(resolve_roi(a.roi, a.category), multiplier) for a in snapshot.assets]
    asset_contributions = [(a.monthly_contribution or 0.0) * multiplier for a in snapshot.assets]

    debt_balances = [d.amount for d in snapshot.debts]
    debt_rates = [_monthly_rate(d.interest_rate or 0.0, multiplier) for d in snapshot.debts]
    debt_payments = [(d.monthly_payment or 0.0) * multiplier for d in snapshot.debts]

    property_values = [p.value for p in snapshot.properties]
    appreciation_rates = [
        _monthly_rate(resolve_appreciation(p.appreciation_rate, p.name), multiplier)
        for p in snapshot.properties
    ]
    mortgage_balances = [p.mortgage for p in snapshot.properties]
    mortgage_rates = [_monthly_rate(mortgage_rate(p), multiplier) for p in snapshot.properties]
    mortgage_payments = [
        effective_mortgage_payment(p, snapshot.as_of_year) * multiplier for p in snapshot.properties
    ]

    goal_current = [g.current_amount for g in snapshot.goals]
    goal_reached: List[Optional[int]] = [None] * len(snapshot.goals)

    result = ProjectionResult()
    passed = set()

    for m in range(total_months + 1):
        total_assets = sum(asset_balances)
        consumer_debts = sum(max(0.0, b) for b in debt_balances)
        mortgages = sum(max(0.0, b) for b in mortgage_balances)
        equity = sum(max(0.0, v - max(0.0, b)) for v, b in zip(property_values, mortgage_balances))
        net_worth = total_assets + stocks_total + equity - consumer_debts

        result.points.append(ProjectionPoint(
            month=m,
            year=round(m / 12, 1),
            net_worth=round(net_worth, 2),
            total_assets=round(total_assets + stocks_total, 2),
            total_debts=round(consumer_debts + mortgages, 2),
            consumer_debts=round(consumer_debts, 2),
            mortgage_debts=round(mortgages, 2),
            total_property_equity=round(equity, 2),
        ))

        for threshold in MILESTONE_THRESHOLDS:
            if net_worth >= threshold and threshold not in passed:
                passed.add(threshold)
                result.milestones.append(Milestone(milestone_label(threshold), m, threshold))

        if result.consumer_debt_free_month is None and consumer_debts <= 0:
            result.consumer_debt_free_month = m
        if result.mortgage_free_month is None and mortgages <= 0:
            result.mortgage_free_month = m
        if result.debt_free_month is None and consumer_debts <= 0 and mortgages <= 0:
            result.debt_free_month = m

        for i, goal in enumerate(snapshot.goals):
            if goal_reached[i] is None and goal_current[i] >= goal.target_amount:
                goal_reached[i] = m

        if m == total_months:
            break

        for i in range(len(asset_balances)):
            asset_balances[i] = asset_balances[i] * (1 + asset_rates[i]) + asset_contributions[i]

        for i in range(len(debt_balances)):
            if debt_balances[i] > 0:
                debt_balances[i] = max(0.0, debt_balances[i] * (1 + debt_rates[i]) - debt_payments[i])

        for i in range(len(mortgage_balances)):
            if mortgage_balances[i] > 0:
                mortgage_balances[i] = max(
                    0.0, mortgage_balances[i] * (1 + mortgage_rates[i]) - mortgage_payments[i]
                )
            property_values[i] = max(0.0, property_values[i] * (1 + appreciation_rates[i]))

        if surplus > 0 and target_idx is not None:
            asset_balances[target_idx] += surplus

        unmet = [i for i, reached in enumerate(goal_reached) if reached is None]
        if surplus > 0 and unmet:
            per_goal = surplus / len(unmet)
            for i in unmet:
                goal_current[i] += per_goal

    result.goal_milestones = [
        GoalMilestone(goal.name, goal_reached[i], goal.target_amount)
        for i, goal in enumerate(snapshot.goals)
    ]

    logger.debug("Projected %d months (%s): final net worth %.2f, debt free at %s",
                 total_months, scenario.value, result.points[-1].net_worth, result.debt_free_month)
    return result


def project_assets(assets: Sequence[Asset], scenario: Union[Scenario, str] = Scenario.MODERATE,
                   milestone_years: Sequence[int] = (10, 20, 30)) -> List[AssetProjection]:
    """Project each asset on its own ROI and contribution, reporting its value at each milestone year."""
    scenario = _as_scenario(scenario)
    multiplier = scenario.multiplier
    max_month = max(milestone_years, default=0) * 12
    milestone_months = {y * 12: y for y in milestone_years}

    projections = []
    for asset in assets:
        rate = _monthly_rate(resolve_roi(asset.roi, asset.category), multiplier)
        contribution = (asset.monthly_contribution or 0.0) * multiplier
        balance = asset.amount
        values = {y: round(balance, 2) for y in milestone_years if y <= 0}
        for m in range(1, max_month + 1):
            balance = balance * (1 + rate) + contribution
            if m in milestone_months:
                values[milestone_months[m]] = round(balance, 2)
        projections.append(AssetProjection(asset.id, asset.category, asset.amount, values))
    return projections


def downsample_points(points: List[ProjectionPoint], max_points: int = 120) -> List[ProjectionPoint]:
    """Evenly spaced subset of points that always keeps the first and last."""
    if len(points) <= max_points:
        return list(points)
    if max_points < 2:
        return [points[-1]] if max_points == 1 else []
    step = (len(points) - 1) / (max_points - 1)
    return [points[int(i * step + 0.5)] for i in range(max_points)]
