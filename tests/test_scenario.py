import os
import sys
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

import pytest

from calc.scenario_calculator import apply_modification, compare_scenarios, delta_years
from model.ProjectionData import EMPTY_MODIFICATION, Scenario, ScenarioModification
from model.Snapshot import Asset, Debt, IncomeItem, Snapshot, load_snapshot

FIXTURES = os.path.join(os.path.dirname(__file__), 'mcp_server_tests', 'fixtures')


@pytest.fixture
def ontario_snapshot():
    return load_snapshot(os.path.join(FIXTURES, 'testsnapshot', 'snapshot.json'))


class TestApplyModification:
    def test_excludes_debts(self, ontario_snapshot):
        modified = apply_modification(ontario_snapshot, ScenarioModification(excluded_debt_ids=frozenset({"car-loan"})))
        assert [d.id for d in modified.debts] == ["credit-card"]
        assert [d.id for d in ontario_snapshot.debts] == ["car-loan", "credit-card"]

    def test_unknown_debt_id_ignored(self, ontario_snapshot):
        modified = apply_modification(ontario_snapshot, ScenarioModification(excluded_debt_ids=frozenset({"boat"})))
        assert modified.debts == ontario_snapshot.debts

    def test_contribution_override(self, ontario_snapshot):
        modified = apply_modification(ontario_snapshot, ScenarioModification(contribution_overrides=(("savings", 250.0),)))
        assert modified.assets[1].monthly_contribution == 250.0
        assert modified.assets[0].monthly_contribution == 500.0
        assert ontario_snapshot.assets[1].monthly_contribution is None

    def test_windfall_goes_to_surplus_target(self, ontario_snapshot):
        modified = apply_modification(ontario_snapshot, ScenarioModification(windfall=5000))
        assert modified.assets[0].amount == 25000
        assert modified.assets[1].amount == 10000
        assert ontario_snapshot.assets[0].amount == 20000

    def test_windfall_defaults_to_first_asset(self):
        snapshot = Snapshot(assets=(Asset("a", "Savings", 100), Asset("b", "Savings", 100)))
        modified = apply_modification(snapshot, ScenarioModification(windfall=50))
        assert [a.amount for a in modified.assets] == [150, 100]

    def test_windfall_without_assets_ignored(self):
        snapshot = Snapshot()
        assert apply_modification(snapshot, ScenarioModification(windfall=50)) == snapshot

    def test_negative_windfall_ignored(self, ontario_snapshot):
        modified = apply_modification(ontario_snapshot, ScenarioModification(windfall=-5000))
        assert modified.assets == ontario_snapshot.assets

    def test_income_adjustment(self, ontario_snapshot):
        modified = apply_modification(ontario_snapshot, ScenarioModification(income_adjustment=500))
        assert modified.income[0].amount == 6500

    def test_income_adjustment_floored(self, ontario_snapshot):
        modified = apply_modification(ontario_snapshot, ScenarioModification(income_adjustment=-10000))
        assert modified.income[0].amount == 0.0

    def test_empty_modification(self, ontario_snapshot):
        assert apply_modification(ontario_snapshot, EMPTY_MODIFICATION) == ontario_snapshot


class TestCompareScenarios:
    def test_empty_modification_has_no_delta(self, ontario_snapshot):
        comparison = compare_scenarios(ontario_snapshot, EMPTY_MODIFICATION, 10)
        assert [d.year for d in comparison.net_worth_deltas] == [5, 10]
        assert all(d.delta == 0 for d in comparison.net_worth_deltas)

    def test_windfall_compounds(self, ontario_snapshot):
        comparison = compare_scenarios(ontario_snapshot, ScenarioModification(windfall=10000), 10)
        year5 = comparison.net_worth_deltas[0]
        assert year5.year == 5
        assert year5.delta == pytest.approx(10000 * (1 + 0.05 / 12) ** 60, abs=0.05)
        assert year5.delta == pytest.approx(year5.scenario - year5.baseline)

    def test_excluding_paid_off_debt(self, ontario_snapshot):
        # The car loan is retired within 4 years in both runs
        comparison = compare_scenarios(ontario_snapshot, ScenarioModification(excluded_debt_ids=frozenset({"car-loan"})), 10)
        assert comparison.net_worth_deltas[0].delta == pytest.approx(0, abs=0.01)
        assert comparison.net_worth_deltas[1].delta == pytest.approx(0, abs=0.01)
        assert comparison.scenario.points[0].net_worth - comparison.baseline.points[0].net_worth == pytest.approx(15000)

    def test_excluding_long_debt(self, ontario_snapshot):
        comparison = compare_scenarios(ontario_snapshot, ScenarioModification(excluded_debt_ids=frozenset({"credit-card"})), 10)
        assert all(d.delta > 0 for d in comparison.net_worth_deltas)

    def test_long_horizon_deltas(self, ontario_snapshot):
        comparison = compare_scenarios(ontario_snapshot, ScenarioModification(windfall=1000), 30, Scenario.CONSERVATIVE)
        assert [d.year for d in comparison.net_worth_deltas] == [5, 10, 20, 30]
        deltas = [d.delta for d in comparison.net_worth_deltas]
        assert deltas == sorted(deltas)

    def test_debt_free_delta(self):
        snapshot = Snapshot(debts=(Debt("loan", "Loan", 12000, interest_rate=0, monthly_payment=1000),))
        comparison = compare_scenarios(snapshot, ScenarioModification(excluded_debt_ids=frozenset({"loan"})), 5)
        assert comparison.baseline.debt_free_month == 12
        assert comparison.scenario.debt_free_month == 0
        assert comparison.debt_free_delta_months == -12
        assert comparison.consumer_debt_free_delta_months == -12
        assert comparison.mortgage_free_delta_months == 0

    def test_debt_free_delta_none_when_never_free(self, ontario_snapshot):
        comparison = compare_scenarios(ontario_snapshot, ScenarioModification(windfall=100), 10)
        assert comparison.debt_free_delta_months is None

    def test_contribution_override(self):
        snapshot = Snapshot(assets=(Asset("a", "Savings", 0, roi=0),))
        comparison = compare_scenarios(snapshot, ScenarioModification(contribution_overrides=(("a", 100.0),)), 10)
        assert [d.delta for d in comparison.net_worth_deltas] == [6000, 12000]

    def test_income_adjustment(self):
        snapshot = Snapshot(
            assets=(Asset("a", "Savings", 0, roi=0),),
            income=(IncomeItem("job", "Salary", 5000),),
        )
        comparison = compare_scenarios(snapshot, ScenarioModification(income_adjustment=-1000), 5)
        assert comparison.net_worth_deltas[0].delta == pytest.approx(-60000)

    def test_short_horizon_has_no_deltas(self, ontario_snapshot):
        assert compare_scenarios(ontario_snapshot, ScenarioModification(windfall=100), 3).net_worth_deltas == []


@pytest.mark.parametrize("years,expected", [
    (3, []),
    (7, [5]),
    (10, [5, 10]),
    (20, [5, 10, 20]),
    (30, [5, 10, 20, 30]),
    (40, [5, 10, 20, 30]),
])
def test_delta_years(years, expected):
    assert delta_years(years) == expected


def test_modification_from_dict():
    modification = ScenarioModification.from_dict({
        "excludedDebtIds": ["visa"],
        "contributionOverrides": {"tfsa": 750},
        "incomeAdjustment": -200,
        "windfall": 1000,
    })
    assert modification.excluded_debt_ids == frozenset({"visa"})
    assert modification.contribution_overrides == (("tfsa", 750.0),)
    assert modification.income_adjustment == -200
    assert modification.windfall == 1000
    assert not modification.is_empty
    assert ScenarioModification.from_dict({}).is_empty
