"""Renderer classes for displaying planning results.

This module contains renderer classes that handle the presentation logic
for the different reports. Each renderer takes the unified PlanData
structure and extracts the fields it needs.
"""

import math
from abc import ABC, abstractmethod
from typing import List, Optional

from model.PlanData import PlanData
from model.field_metadata import get_short_name, wrap_header


def format_multiline_headers(columns: List[tuple], year_width: int = 6) -> tuple[List[str], str]:
    """Format column headers with multi-line wrapping support.

    Args:
        columns: List of (header_text, width) tuples for each column
        year_width: Width of the Year column (default 6)

    Returns:
        Tuple of (list of header lines, separator line)
    """
    wrapped_headers = [(wrap_header(header, width), width) for header, width in columns]
    max_lines = max(len(lines) for lines, _ in wrapped_headers) if wrapped_headers else 1

    # Pad at the top so the last header line lines up with "Year"
    for lines, _ in wrapped_headers:
        while len(lines) < max_lines:
            lines.insert(0, "")

    header_lines = []
    for line_idx in range(max_lines):
        label = 'Year' if line_idx == max_lines - 1 else ''
        header_line = f"  {label:<{year_width}}"
        for lines, width in wrapped_headers:
            header_line += f" {lines[line_idx]:>{width}}"
        header_lines.append(header_line)

    sep_line = f"  {'-' * year_width}"
    for _, width in wrapped_headers:
        sep_line += f" {'-' * width}"

    return header_lines, sep_line


def format_month(month: Optional[int]) -> str:
    """Month index as "Month 27 (2.3 yrs)", or "Not reached"."""
    if month is None:
        return "Not reached"
    if month == 0:
        return "Now"
    return f"Month {month} ({month / 12:.1f} yrs)"


def format_months_delta(delta: Optional[int]) -> str:
    if delta is None:
        return "n/a"
    if delta == 0:
        return "no change"
    direction = "sooner" if delta < 0 else "later"
    return f"{abs(delta)} months {direction}"


def parse_year_range(year_range: str, data: PlanData) -> tuple:
    """Parse a year range string into start and end years.

    Args:
        year_range: String in format 'start-end', 'start-', '-end' or a single year
        data: PlanData to get default years from (0 through the projection horizon)

    Returns:
        Tuple of (start_year, end_year)
    """
    if '-' not in year_range:
        year = int(year_range)
        return (year, year)

    parts = year_range.split('-')
    start_year = int(parts[0]) if parts[0] else 0
    end_year = int(parts[1]) if parts[1] else data.years
    return (start_year, end_year)


class BaseRenderer(ABC):
    """Abstract base class for all renderers."""

    @abstractmethod
    def render(self, data: PlanData) -> None:
        """Render the data to output.

        Args:
            data: The PlanData containing all results for a snapshot
        """
        pass


class SummaryRenderer(BaseRenderer):
    """Renderer for the point-in-time financial summary."""

    def render(self, data: PlanData) -> None:
        t = data.totals
        title = f"FINANCIAL SUMMARY: {data.name}" if data.name else "FINANCIAL SUMMARY"

        print()
        print("=" * 60)
        print(f"{title:^60}")
        print("=" * 60)

        print()
        print("-" * 60)
        print("MONTHLY CASH FLOW")
        print("-" * 60)
        print(f"  {'Gross Income:':<40} ${t.monthly_income:>14,.2f}")
        print(f"  {'After-Tax Income:':<40} ${t.monthly_after_tax_income:>14,.2f}")
        print(f"  {'Expenses:':<40} ${t.monthly_expenses:>14,.2f}")
        print(f"  {'Investment Contributions:':<40} ${t.monthly_investment_contributions:>14,.2f}")
        print(f"  {'Mortgage Payments:':<40} ${t.monthly_mortgage_payments:>14,.2f}")
        if t.monthly_debt_payments > 0:
            print(f"  {'Debt Payments (not in surplus):':<40} ${t.monthly_debt_payments:>14,.2f}")
        print(f"  {'-' * 40}")
        print(f"  {'Monthly Surplus:':<40} ${t.monthly_surplus:>14,.2f}")

        print()
        print("-" * 60)
        print("BALANCES")
        print("-" * 60)
        print(f"  {'Liquid Assets:':<40} ${t.liquid_assets:>14,.2f}")
        if t.stock_value > 0:
            print(f"  {'Stock Holdings:':<40} ${t.stock_value:>14,.2f}")
        if t.property_value > 0:
            print(f"  {'Property Value:':<40} ${t.property_value:>14,.2f}")
            print(f"  {'Mortgages:':<40} ${t.property_mortgage:>14,.2f}")
            print(f"  {'Property Equity:':<40} ${t.property_equity:>14,.2f}")
        print(f"  {'Consumer Debts:':<40} ${t.consumer_debts:>14,.2f}")
        print(f"  {'-' * 40}")
        print(f"  {'Net Worth:':<40} ${t.net_worth:>14,.2f}")

        print()
        print("-" * 60)
        print("METRICS")
        print("-" * 60)
        print(f"  {'Savings Rate:':<40} {t.savings_rate:>15.1%}")
        print(f"  {'Emergency Runway (months):':<40} {t.runway_months:>15.1f}")
        print(f"  {'Debt-to-Asset Ratio:':<40} {t.debt_to_asset_ratio:>15.2f}")
        print(f"  {'Debt-to-Income Ratio:':<40} {t.debt_to_income_ratio:>15.2f}")
        if data.snapshot.country is not None:
            print(f"  {'Effective Tax Rate:':<40} {t.effective_tax_rate:>15.1%}")

        if data.snapshot.goals:
            print()
            print("-" * 60)
            print("GOALS")
            print("-" * 60)
            for goal in data.snapshot.goals:
                label = f"{goal.name}:"
                print(f"  {label:<40} {goal.progress:>15.1%}")

        print()
        print("=" * 60)
        print()


class TaxDetailsRenderer(BaseRenderer):
    """Renderer for the per-income tax breakdown."""

    def render(self, data: PlanData) -> None:
        t = data.totals
        snapshot = data.snapshot

        print()
        print("=" * 60)
        print(f"{'TAX ESTIMATE':^60}")
        print("=" * 60)

        if snapshot.country is None:
            print()
            print("  No country set; income is treated as untaxed.")
            print()
            print("=" * 60)
            print()
            return

        sub_label = "Provincial Tax:" if snapshot.country == "CA" else "State Tax:"
        print(f"  {'Residence:':<40} {snapshot.country + '-' + (snapshot.jurisdiction or ''):>15}")

        for entry in t.income_taxes:
            tax = entry.tax
            print()
            print("-" * 60)
            print(f"{entry.category.upper()} ({entry.income_id})")
            print("-" * 60)
            print(f"  {'Annual Income:':<40} ${entry.annual_income:>14,.2f}")
            print(f"  {'Federal Tax:':<40} ${tax.federal_tax:>14,.2f}")
            print(f"  {sub_label:<40} ${tax.subnational_tax:>14,.2f}")
            print(f"  {'-' * 40}")
            print(f"  {'Total Tax:':<40} ${tax.total_tax:>14,.2f}")
            print(f"  {'After-Tax Income:':<40} ${tax.after_tax_income:>14,.2f}")
            print(f"  {'Effective Rate:':<40} {tax.effective_rate:>15.2%}")
            print(f"  {'Marginal Rate:':<40} {tax.marginal_rate:>15.2%}")

        print()
        print("=" * 60)
        print("TOTAL")
        print("=" * 60)
        print(f"  {'Federal Tax:':<40} ${t.federal_tax_estimate:>14,.2f}")
        print(f"  {sub_label:<40} ${t.subnational_tax_estimate:>14,.2f}")
        print(f"  {'Total Tax:':<40} ${t.total_tax_estimate:>14,.2f}")
        print(f"  {'Effective Rate:':<40} {t.effective_tax_rate:>15.2%}")
        print(f"  {'Monthly After-Tax Income:':<40} ${t.monthly_after_tax_income:>14,.2f}")
        print("=" * 60)
        print()


class ProjectionRenderer(BaseRenderer):
    """Renderer for the yearly net worth projection table."""

    def __init__(self, start_year: int = None, end_year: int = None):
        """Initialize with optional year range.

        Args:
            start_year: First year to display (defaults to 0)
            end_year: Last year to display (defaults to the projection horizon)
        """
        self.start_year = start_year
        self.end_year = end_year

    def render(self, data: PlanData) -> None:
        print()
        print("=" * 100)
        print(f"{'NET WORTH PROJECTION (' + data.scenario.value.upper() + ')':^100}")
        print("=" * 100)
        print()

        columns = [
            (get_short_name("net_worth"), 14),
            (get_short_name("total_assets"), 14),
            (get_short_name("total_property_equity"), 14),
            (get_short_name("consumer_debts"), 14),
            (get_short_name("mortgage_debts"), 14),
            (get_short_name("total_debts"), 14),
        ]
        header_lines, sep_line = format_multiline_headers(columns)
        for line in header_lines:
            print(line)
        print(sep_line)

        start = self.start_year if self.start_year is not None else 0
        end = self.end_year if self.end_year is not None else data.years

        for year, p in sorted(data.yearly_points.items()):
            if year < start or year > end:
                continue
            print(f"  {year:<6} ${p.net_worth:>12,.0f} ${p.total_assets:>12,.0f} ${p.total_property_equity:>12,.0f} ${p.consumer_debts:>12,.0f} ${p.mortgage_debts:>12,.0f} ${p.total_debts:>12,.0f}")

        projection = data.projection
        print()
        print("-" * 100)
        print("MILESTONES")
        print("-" * 100)
        if projection.milestones:
            for milestone in projection.milestones:
                print(f"  {milestone.label + ' net worth:':<40} {format_month(milestone.month)}")
        else:
            print("  No net worth milestones reached")
        print(f"  {'Consumer debt free:':<40} {format_month(projection.consumer_debt_free_month)}")
        print(f"  {'Mortgage free:':<40} {format_month(projection.mortgage_free_month)}")
        print(f"  {'Debt free:':<40} {format_month(projection.debt_free_month)}")

        if projection.goal_milestones:
            print()
            print("-" * 100)
            print("GOALS")
            print("-" * 100)
            for goal in projection.goal_milestones:
                print(f"  {goal.goal_name + ':':<40} {format_month(goal.month_reached)}")

        if data.asset_projections:
            milestone_years = sorted({y for ap in data.asset_projections for y in ap.milestone_values})
            print()
            print("-" * 100)
            print("ASSET PROJECTIONS")
            print("-" * 100)
            header = f"  {'Asset':<24} {'Today':>14}" + "".join(f" {str(y) + ' yrs':>14}" for y in milestone_years)
            print(header)
            for ap in data.asset_projections:
                row = f"  {ap.category[:24]:<24} ${ap.current_value:>13,.0f}"
                for y in milestone_years:
                    row += f" ${ap.milestone_values.get(y, 0.0):>13,.0f}"
                print(row)

        print()
        print("=" * 100)
        print()


class DebtPayoffRenderer(BaseRenderer):
    """Renderer for the payoff timeline of each debt and mortgage."""

    def render(self, data: PlanData) -> None:
        print()
        print("=" * 100)
        print(f"{'DEBT PAYOFF':^100}")
        print("=" * 100)
        print()

        if not data.payoffs:
            print("  No debts")
            print()
            print("=" * 100)
            print()
            return

        print(f"  {'Debt':<24} {'Balance':>14} {'Rate':>8} {'Payment':>12} {'Payoff':>20} {'Interest':>14}")
        print(f"  {'-' * 24} {'-' * 14} {'-' * 8} {'-' * 12} {'-' * 20} {'-' * 14}")
        for entry in data.payoffs:
            result = entry.result
            interest = "n/a" if math.isinf(result.total_interest) else f"${result.total_interest:,.0f}"
            name = entry.name + (" (mortgage)" if entry.is_mortgage else "")
            print(f"  {name[:24]:<24} ${entry.balance:>13,.0f} {entry.annual_rate:>7.2f}% ${entry.monthly_payment:>11,.0f} {result.duration_label:>20} {interest:>14}")

        warnings = [e for e in data.payoffs if not e.result.covers_interest]
        if warnings:
            print()
            for entry in warnings:
                print(f"  WARNING: {entry.name}: {entry.result.status.value}")

        print()
        print("=" * 100)
        print()


class ScenarioRenderer(BaseRenderer):
    """Renderer for a baseline versus what-if comparison."""

    def render(self, data: PlanData) -> None:
        print()
        print("=" * 70)
        print(f"{'SCENARIO COMPARISON':^70}")
        print("=" * 70)

        comparison = data.comparison
        if comparison is None:
            print()
            print("  No scenario modification given")
            print()
            print("=" * 70)
            print()
            return

        print()
        print(f"  {'Year':<6} {'Baseline':>18} {'What-If':>18} {'Difference':>18}")
        print(f"  {'-' * 6} {'-' * 18} {'-' * 18} {'-' * 18}")
        for d in comparison.net_worth_deltas:
            print(f"  {d.year:<6} ${d.baseline:>17,.0f} ${d.scenario:>17,.0f} ${d.delta:>+17,.0f}")

        print()
        print("-" * 70)
        print("DEBT FREE TIMING")
        print("-" * 70)
        print(f"  {'Debt free:':<40} {format_months_delta(comparison.debt_free_delta_months):>20}")
        print(f"  {'Consumer debt free:':<40} {format_months_delta(comparison.consumer_debt_free_delta_months):>20}")
        print(f"  {'Mortgage free:':<40} {format_months_delta(comparison.mortgage_free_delta_months):>20}")
        print()
        print("=" * 70)
        print()


class BenchmarksRenderer(BaseRenderer):
    """Renderer for the comparison against national medians."""

    @staticmethod
    def _format(value: float, fmt: str) -> str:
        if fmt == "currency":
            return f"${value:,.0f}"
        if fmt == "percent":
            return f"{value:.1%}"
        if fmt == "months":
            return f"{value:.1f} mo"
        return f"{value:.2f}"

    def render(self, data: PlanData) -> None:
        print()
        print("=" * 70)
        print(f"{'BENCHMARKS':^70}")
        print("=" * 70)
        print()

        if not data.benchmarks:
            print("  Benchmarks need both an age and a country in the snapshot")
            print()
            print("=" * 70)
            print()
            return

        print(f"  {'Metric':<20} {'You':>14} {'Benchmark':>14}  {'Status':<10}")
        print(f"  {'-' * 20} {'-' * 14} {'-' * 14}  {'-' * 10}")
        for b in data.benchmarks:
            status = "Ahead" if b.above_benchmark else "Behind"
            print(f"  {b.metric:<20} {self._format(b.user_value, b.format):>14} {self._format(b.benchmark_value, b.format):>14}  {status:<10}")
        print()
        print("=" * 70)
        print()


# Registry mapping mode names to renderer classes
RENDERER_REGISTRY = {
    'Summary': SummaryRenderer,
    'TaxDetails': TaxDetailsRenderer,
    'Projection': ProjectionRenderer,
    'DebtPayoff': DebtPayoffRenderer,
    'Scenario': ScenarioRenderer,
    'Benchmarks': BenchmarksRenderer,
}
