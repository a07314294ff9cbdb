"""Tests for the report renderers."""

import pytest
import sys
import os
from io import StringIO

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', 'src'))

from calc.plan_calculator import PlanCalculator
from model.ProjectionData import ScenarioModification
from model.Snapshot import Snapshot, load_snapshot
from render.renderers import (
    BenchmarksRenderer,
    DebtPayoffRenderer,
    ProjectionRenderer,
    ScenarioRenderer,
    SummaryRenderer,
    TaxDetailsRenderer,
    format_month,
    format_months_delta,
    format_multiline_headers,
    parse_year_range,
    RENDERER_REGISTRY,
)


# Path to test fixtures
FIXTURES_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'mcp_server_tests', 'fixtures'))


def load_test_plan(snapshot_name: str = 'testsnapshot', **kwargs):
    """Calculate plan data for a fixture snapshot."""
    snapshot = load_snapshot(os.path.join(FIXTURES_PATH, snapshot_name, 'snapshot.json'))
    return PlanCalculator().calculate(snapshot, name=snapshot_name, **kwargs)


def render_to_string(renderer, plan_data) -> str:
    """Run a renderer and return what it printed."""
    output = StringIO()
    old_stdout = sys.stdout
    sys.stdout = output
    try:
        renderer.render(plan_data)
    finally:
        sys.stdout = old_stdout
    return output.getvalue()


@pytest.fixture(scope="module")
def plan_data():
    return load_test_plan('testsnapshot', years=30)


@pytest.fixture(scope="module")
def empty_plan():
    return PlanCalculator().calculate(Snapshot(), name='empty', years=1)


class TestHelpers:
    def test_format_month(self):
        assert format_month(None) == "Not reached"
        assert format_month(0) == "Now"
        assert format_month(30) == "Month 30 (2.5 yrs)"

    def test_format_months_delta(self):
        assert format_months_delta(None) == "n/a"
        assert format_months_delta(0) == "no change"
        assert format_months_delta(-12) == "12 months sooner"
        assert format_months_delta(3) == "3 months later"

    def test_parse_year_range(self, plan_data):
        assert parse_year_range('5-10', plan_data) == (5, 10)
        assert parse_year_range('5-', plan_data) == (5, 30)
        assert parse_year_range('-10', plan_data) == (0, 10)
        assert parse_year_range('7', plan_data) == (7, 7)

    def test_multiline_headers_align_year(self):
        header_lines, sep_line = format_multiline_headers([("Property Equity", 8), ("Net", 8)])
        assert len(header_lines) == 2
        assert 'Year' in header_lines[-1]
        assert 'Year' not in header_lines[0]
        assert sep_line.count('-') == 6 + 8 + 8


def test_registry_has_all_modes():
    assert set(RENDERER_REGISTRY) == {'Summary', 'TaxDetails', 'Projection', 'DebtPayoff', 'Scenario', 'Benchmarks'}


class TestSummaryRenderer:
    def test_sections(self, plan_data):
        result = render_to_string(SummaryRenderer(), plan_data)
        assert 'FINANCIAL SUMMARY: testsnapshot' in result
        for section in ('MONTHLY CASH FLOW', 'BALANCES', 'METRICS', 'GOALS'):
            assert section in result

    def test_values(self, plan_data):
        result = render_to_string(SummaryRenderer(), plan_data)
        assert '$    213,000.00' in result
        assert '816.21' in result
        assert 'Emergency Fund:' in result
        assert '33.3%' in result
        assert 'Effective Tax Rate:' in result

    def test_empty_snapshot(self, empty_plan):
        result = render_to_string(SummaryRenderer(), empty_plan)
        assert 'Stock Holdings' not in result
        assert 'Property Value' not in result
        assert 'GOALS' not in result
        assert 'Effective Tax Rate' not in result


class TestTaxDetailsRenderer:
    def test_breakdown(self, plan_data):
        result = render_to_string(TaxDetailsRenderer(), plan_data)
        assert 'CA-ON' in result
        assert 'SALARY (salary)' in result
        assert 'Provincial Tax:' in result
        assert '13,005.52' in result
        assert '3,820.49' in result
        assert 'TOTAL' in result

    def test_us_uses_state_label(self):
        result = render_to_string(TaxDetailsRenderer(), load_test_plan('ussnapshot'))
        assert 'State Tax:' in result
        assert '14,494.00' in result

    def test_untaxed(self, empty_plan):
        result = render_to_string(TaxDetailsRenderer(), empty_plan)
        assert 'No country set' in result


class TestProjectionRenderer:
    def test_all_years(self, plan_data):
        result = render_to_string(ProjectionRenderer(), plan_data)
        assert 'NET WORTH PROJECTION (MODERATE)' in result
        rows = [line.split()[0] for line in result.splitlines()
                if line.startswith('  ') and line.split() and line.split()[0].isdigit()]
        assert rows == [str(y) for y in range(31)]

    def test_year_range(self, plan_data):
        result = render_to_string(ProjectionRenderer(5, 6), plan_data)
        rows = [line.split()[0] for line in result.splitlines()
                if line.startswith('  ') and line.split() and line.split()[0].isdigit()]
        assert rows == ['5', '6']

    def test_milestones_and_goals(self, plan_data):
        result = render_to_string(ProjectionRenderer(), plan_data)
        assert '$100k net worth:' in result
        assert 'Now' in result
        assert 'Emergency Fund:' in result
        assert 'Month 25 (2.1 yrs)' in result
        assert 'ASSET PROJECTIONS' in result
        assert '30 yrs' in result

    def test_no_milestones(self, empty_plan):
        result = render_to_string(ProjectionRenderer(), empty_plan)
        assert 'No net worth milestones reached' in result


class TestDebtPayoffRenderer:
    def test_rows(self, plan_data):
        result = render_to_string(DebtPayoffRenderer(), plan_data)
        assert 'Car Loan' in result
        assert 'Credit Card' in result
        assert 'Home (mortgage)' in result
        assert '3 years 6 months' in result
        assert 'WARNING' not in result

    def test_warning_when_payment_short(self):
        snapshot = Snapshot.from_dict({"debts": [
            {"id": "visa", "category": "Visa", "amount": 5000, "interestRate": 20, "monthlyPayment": 50}
        ]})
        result = render_to_string(DebtPayoffRenderer(), PlanCalculator().calculate(snapshot, years=1))
        assert "WARNING: Visa: Payment doesn't cover interest" in result
        assert 'Never' in result

    def test_no_debts(self, empty_plan):
        assert 'No debts' in render_to_string(DebtPayoffRenderer(), empty_plan)


class TestScenarioRenderer:
    def test_without_modification(self, plan_data):
        assert 'No scenario modification given' in render_to_string(ScenarioRenderer(), plan_data)

    def test_comparison(self):
        plan = load_test_plan('testsnapshot', modification=ScenarioModification(windfall=10000))
        result = render_to_string(ScenarioRenderer(), plan)
        assert 'SCENARIO COMPARISON' in result
        assert '+12,834' in result
        assert 'DEBT FREE TIMING' in result
        assert 'n/a' in result


class TestBenchmarksRenderer:
    def test_table(self, plan_data):
        result = render_to_string(BenchmarksRenderer(), plan_data)
        assert 'Net Worth' in result
        assert '$48,800' in result
        assert 'Ahead' in result
        assert 'Behind' in result
        assert '16.7 mo' in result

    def test_needs_age_and_country(self, empty_plan):
        result = render_to_string(BenchmarksRenderer(), empty_plan)
        assert 'need both an age and a country' in result
