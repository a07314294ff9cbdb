import os
import sys
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

import pytest

from calc.projection_calculator import downsample_points, milestone_label, project, project_assets
from model.ProjectionData import Scenario
from model.Snapshot import Asset, Debt, ExpenseItem, Goal, IncomeItem, Property, Snapshot, load_snapshot

FIXTURES = os.path.join(os.path.dirname(__file__), 'mcp_server_tests', 'fixtures')


@pytest.fixture
def ontario_snapshot():
    return load_snapshot(os.path.join(FIXTURES, 'testsnapshot', 'snapshot.json'))


class TestSimpleProjections:
    def test_empty_snapshot(self):
        result = project(Snapshot(), 1)
        assert len(result.points) == 13
        assert all(p.net_worth == 0 for p in result.points)
        assert result.debt_free_month == 0
        assert result.consumer_debt_free_month == 0
        assert result.mortgage_free_month == 0
        assert result.milestones == []

    def test_zero_years(self):
        result = project(Snapshot(assets=(Asset("a", "Savings", 500),)), 0)
        assert len(result.points) == 1
        assert result.points[0].net_worth == 500

    def test_negative_years_rejected(self):
        with pytest.raises(ValueError):
            project(Snapshot(), -1)

    def test_zero_interest_debt_paid_in_a_year(self):
        snapshot = Snapshot(debts=(Debt("loan", "Loan", 12000, interest_rate=0, monthly_payment=1000),))
        result = project(snapshot, 2)
        assert result.consumer_debt_free_month == 12
        assert result.debt_free_month == 12
        assert result.points[6].consumer_debts == 6000
        assert result.points[12].net_worth == 0

    def test_contributions_accumulate(self):
        snapshot = Snapshot(assets=(Asset("a", "Savings", 10000, roi=0, monthly_contribution=1000),))
        result = project(snapshot, 1)
        assert result.points[12].total_assets == 22000

    def test_surplus_goes_to_target_asset(self):
        snapshot = Snapshot(
            assets=(Asset("savings", "Savings", 10000, roi=0),),
            income=(IncomeItem("job", "Salary", 5000),),
            expenses=(ExpenseItem("rent", "Rent", 2000),),
        )
        result = project(snapshot, 1)
        assert result.points[12].net_worth == 46000
        assert result.milestones == []

    def test_flagged_surplus_target(self):
        snapshot = Snapshot(
            assets=(Asset("a", "Checking", 0, roi=0), Asset("b", "Savings", 0, roi=0, surplus_target=True)),
            income=(IncomeItem("job", "Salary", 1000),),
        )
        result = project(snapshot, 1)
        assert result.points[12].total_assets == 12000

    def test_negative_surplus_is_not_withdrawn(self):
        snapshot = Snapshot(
            assets=(Asset("a", "Savings", 1000, roi=0),),
            expenses=(ExpenseItem("rent", "Rent", 2000),),
        )
        result = project(snapshot, 1)
        assert result.points[12].total_assets == 1000

    def test_year_field(self):
        result = project(Snapshot(), 1)
        assert result.points[6].year == 0.5
        assert result.points[12].year == 1.0

    def test_yearly_points(self):
        result = project(Snapshot(), 3)
        assert sorted(result.yearly_points()) == [0, 1, 2, 3]
        assert result.point_at_month(36) is result.points[-1]
        assert result.point_at_month(37) is None
        assert result.point_at_month(-1) is None

    def test_default_appreciation_by_property_name(self):
        snapshot = Snapshot(properties=(Property("car", "Car", 20000),))
        result = project(snapshot, 1)
        # -15% a year
        assert result.points[12].total_property_equity < 20000
        assert result.points[12].total_property_equity == pytest.approx(20000 * (1 - 0.15 / 12) ** 12, abs=0.01)

    def test_category_default_roi(self):
        snapshot = Snapshot(assets=(Asset("a", "Savings", 12000),))
        result = project(snapshot, 1)
        assert result.points[12].total_assets == pytest.approx(12000 * (1 + 0.02 / 12) ** 12, abs=0.01)

    def test_unknown_category_has_no_growth(self):
        snapshot = Snapshot(assets=(Asset("a", "Mattress", 12000),))
        assert project(snapshot, 1).points[12].total_assets == 12000


class TestOntarioProjection:
    def test_first_point_matches_snapshot(self, ontario_snapshot):
        first = project(ontario_snapshot, 10).points[0]
        assert first.month == 0
        assert first.net_worth == 213000
        assert first.total_assets == 31000
        assert first.total_debts == 318000
        assert first.consumer_debts == 18000
        assert first.mortgage_debts == 300000
        assert first.total_property_equity == 200000

    def test_first_month(self, ontario_snapshot):
        second = project(ontario_snapshot, 1).points[1]
        # tfsa: growth + contribution + surplus; savings: growth; stocks flat
        expected = 20000 * (1 + 0.05 / 12) + 500 + 816.20696 + 10000 * (1 + 0.02 / 12) + 1000
        assert second.total_assets == pytest.approx(expected, abs=0.01)

    def test_milestones(self, ontario_snapshot):
        result = project(ontario_snapshot, 30)
        labels = [m.label for m in result.milestones]
        assert labels[0] == "$100k"
        assert result.milestones[0].month == 0
        assert "$250k" in labels
        months = [m.month for m in result.milestones]
        assert months == sorted(months)

    def test_goal_reached(self, ontario_snapshot):
        result = project(ontario_snapshot, 5)
        goal = result.goal_milestones[0]
        assert goal.goal_name == "Emergency Fund"
        assert goal.target_amount == 30000
        assert goal.month_reached == 25

    def test_goal_not_reached(self, ontario_snapshot):
        result = project(ontario_snapshot, 1)
        assert result.goal_milestones[0].month_reached is None

    def test_debt_free_timing(self, ontario_snapshot):
        result = project(ontario_snapshot, 30)
        assert 285 <= result.mortgage_free_month <= 287
        # the credit card takes longer than 30 years at its minimum payment
        assert result.consumer_debt_free_month is None
        assert result.debt_free_month is None

    def test_scenarios_order(self, ontario_snapshot):
        conservative = project(ontario_snapshot, 10, Scenario.CONSERVATIVE).points[-1].net_worth
        moderate = project(ontario_snapshot, 10, "moderate").points[-1].net_worth
        optimistic = project(ontario_snapshot, 10, Scenario.OPTIMISTIC).points[-1].net_worth
        assert conservative < moderate < optimistic

    def test_invalid_scenario(self, ontario_snapshot):
        with pytest.raises(ValueError):
            project(ontario_snapshot, 10, "wild")

    def test_points_rounded_to_cents(self, ontario_snapshot):
        for point in project(ontario_snapshot, 2).points:
            assert round(point.net_worth, 2) == point.net_worth


def test_reached_goal_is_month_zero():
    snapshot = Snapshot(goals=(Goal("g", "Done", 1000, 1500),))
    assert project(snapshot, 1).goal_milestones[0].month_reached == 0


def test_surplus_split_between_unmet_goals():
    snapshot = Snapshot(
        assets=(Asset("a", "Savings", 0, roi=0),),
        income=(IncomeItem("job", "Salary", 1000),),
        goals=(Goal("a", "Small", 1000), Goal("b", "Large", 6000)),
    )
    result = project(snapshot, 2)
    small, large = result.goal_milestones
    assert small.month_reached == 2
    # 1000 over the first 2 months, then 1000 a month alone
    assert large.month_reached == 7


@pytest.mark.parametrize("value,label", [
    (100_000, "$100k"),
    (250_000, "$250k"),
    (500_000, "$500k"),
    (1_000_000, "$1M"),
    (2_500_000, "$2.5M"),
    (5_000_000, "$5M"),
])
def test_milestone_label(value, label):
    assert milestone_label(value) == label


class TestProjectAssets:
    def test_values_at_milestones(self):
        assets = (Asset("a", "Savings", 10000, roi=0, monthly_contribution=1000),)
        projections = project_assets(assets, milestone_years=(1, 2))
        assert projections[0].asset_id == "a"
        assert projections[0].current_value == 10000
        assert projections[0].milestone_values == {1: 22000, 2: 34000}

    def test_growth_with_scenario(self):
        assets = (Asset("a", "Brokerage", 10000),)
        moderate = project_assets(assets, Scenario.MODERATE, (10,))[0].milestone_values[10]
        optimistic = project_assets(assets, Scenario.OPTIMISTIC, (10,))[0].milestone_values[10]
        assert moderate == pytest.approx(10000 * (1 + 0.07 / 12) ** 120, abs=0.01)
        assert optimistic > moderate


class TestDownsample:
    def test_short_series_unchanged(self):
        points = project(Snapshot(), 1).points
        assert downsample_points(points, 120) == points

    def test_keeps_endpoints(self):
        points = project(Snapshot(), 10).points
        sampled = downsample_points(points, 10)
        assert len(sampled) == 10
        assert sampled[0] is points[0]
        assert sampled[-1] is points[-1]
