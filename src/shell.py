#!/usr/bin/env python3
"""Interactive command shell for querying net worth projections.

This module provides an interactive shell that loads a household
snapshot at startup and allows querying any field(s) of the yearly
projection, rendering reports, and running quick tax and payoff
calculations.

Usage:
    python src/shell.py [snapshot_name]

Commands:
    get <fields> [year_or_range]  - Query fields from the yearly projection
    fields                        - List all available fields
    years                         - Show the projection horizon
    load <snapshot_name> [years]  - Load a snapshot
    scenario [name | changes]     - Switch growth scenario or compare a what-if
    render <mode> [year_or_range] - Render a report
    tax <income> [type]           - Estimate tax for an annual income
    payoff <balance> <rate> <pmt> - Payoff timeline for a single debt
    help                          - Show help message
    exit/quit                     - Exit the shell

Examples:
    > get net_worth
    > get net_worth, total_debts 5-10
    > scenario optimistic
    > scenario windfall=10000 exclude=car-loan
    > tax 85000 capital-gains
"""

import sys
import os
import cmd
import readline
from dataclasses import fields as dataclass_fields

# Configure readline for tab completion
try:
    if 'libedit' in readline.__doc__:
        readline.parse_and_bind("bind ^I rl_complete")
    else:
        readline.parse_and_bind("tab: complete")
except (AttributeError, TypeError):
    pass  # readline might not be fully available

# Add src directory to path for imports
sys.path.insert(0, os.path.dirname(__file__))

from calc.debt_payoff import calculate_payoff
from calc.plan_calculator import PlanCalculator
from calc.tax_engine import compute_tax
from model.PlanData import PlanData
from model.ProjectionData import ProjectionPoint, Scenario, ScenarioModification
from model.Snapshot import IncomeType, load_snapshot
from model.field_metadata import FIELD_METADATA, get_short_name, get_description
from render.renderers import RENDERER_REGISTRY, ScenarioRenderer

INPUT_DIR = os.path.normpath(os.path.join(os.path.dirname(__file__), '..', 'input-parameters'))


def load_plan(snapshot_name: str, years: int = 10, scenario: Scenario = Scenario.MODERATE,
              modification: ScenarioModification = None, input_dir: str = None) -> PlanData:
    """Load a snapshot and calculate its plan data.

    Args:
        snapshot_name: Name of the snapshot folder in input-parameters
        years: Projection horizon in years
        scenario: Growth scenario
        modification: Optional what-if change to compare against
        input_dir: Directory holding snapshot folders (defaults to input-parameters)

    Returns:
        Calculated PlanData object
    """
    snapshot_path = os.path.join(input_dir or INPUT_DIR, snapshot_name, 'snapshot.json')
    if not os.path.exists(snapshot_path):
        raise FileNotFoundError(f"Snapshot file not found: {snapshot_path}")

    snapshot = load_snapshot(snapshot_path)
    return PlanCalculator().calculate(snapshot, name=snapshot_name, years=years,
                                      scenario=scenario, modification=modification)


def get_point_fields() -> list:
    """Get list of all field names from the ProjectionPoint dataclass."""
    return [f.name for f in dataclass_fields(ProjectionPoint)]


def format_value(value) -> str:
    """Format a value for display."""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    elif isinstance(value, float):
        if value == 0:
            return "$0.00"
        return f"${value:,.2f}"
    elif isinstance(value, int):
        return str(value)
    else:
        return str(value)


def parse_modification(tokens: list) -> ScenarioModification:
    """Build a ScenarioModification from key=value tokens.

    Keys: exclude=<debt id> (repeatable), windfall=<amount>,
    income=<signed amount>, contribution=<asset id>:<amount> (repeatable).
    Raises ValueError on an unknown key or malformed value.
    """
    excluded = []
    overrides = []
    income_adjustment = 0.0
    windfall = 0.0
    for token in tokens:
        key, sep, value = token.partition('=')
        if not sep or not value:
            raise ValueError(f"Expected key=value, got '{token}'")
        key = key.lower()
        if key == 'exclude':
            excluded.append(value)
        elif key == 'windfall':
            windfall = float(value)
        elif key == 'income':
            income_adjustment = float(value)
        elif key == 'contribution':
            asset_id, colon, amount = value.partition(':')
            if not colon:
                raise ValueError(f"Expected contribution=<asset id>:<amount>, got '{token}'")
            overrides.append((asset_id, float(amount)))
        else:
            raise ValueError(f"Unknown scenario option '{key}'")
    return ScenarioModification(
        excluded_debt_ids=frozenset(excluded),
        contribution_overrides=tuple(overrides),
        income_adjustment=income_adjustment,
        windfall=windfall,
    )


class NetWorthShell(cmd.Cmd):
    """Interactive shell for querying net worth projections."""

    intro = """
Net Worth Planner Interactive Shell
===================================
Type 'help' for available commands.
Type 'fields' to see available data fields.
Type 'exit' or 'quit' to exit.
"""
    prompt = '> '

    def __init__(self, plan_data: PlanData = None, snapshot_name: str = None, input_dir: str = None):
        super().__init__()
        self.plan_data = plan_data
        self.snapshot_name = snapshot_name
        self.input_dir = input_dir or INPUT_DIR
        self.available_fields = get_point_fields()
        self._update_intro()

    def preloop(self):
        """Set up readline before entering the command loop."""
        try:
            readline.set_completer_delims(' \t\n,')
            if 'libedit' in (readline.__doc__ or ''):
                readline.parse_and_bind("bind ^I rl_complete")
            else:
                readline.parse_and_bind("tab: complete")
        except (AttributeError, TypeError):
            pass

    def _get_available_snapshots(self) -> list:
        """Get list of snapshot names from the input directory."""
        snapshots = []
        if os.path.exists(self.input_dir):
            for item in sorted(os.listdir(self.input_dir)):
                if os.path.isfile(os.path.join(self.input_dir, item, 'snapshot.json')):
                    snapshots.append(item)
        return snapshots

    def _update_intro(self):
        if self.plan_data and self.snapshot_name:
            self.intro = f"""
Net Worth Planner Interactive Shell
===================================
Snapshot: {self.snapshot_name}
Projection: {self.plan_data.years} years ({self.plan_data.scenario.value})

Type 'help' for available commands.
Type 'fields' to see available data fields.
Type 'exit' or 'quit' to exit.
"""
        else:
            self.intro = """
Net Worth Planner Interactive Shell
===================================
No snapshot loaded. Use 'load <snapshot_name>' to get started.

Type 'help' for available commands.
Type 'exit' or 'quit' to exit.
"""

    def _require_plan(self) -> bool:
        """Check if a plan is loaded. Returns True if loaded, False otherwise."""
        if self.plan_data is None:
            print("No snapshot loaded. Use 'load <snapshot_name>' first.")
            return False
        return True

    def _parse_year_arg(self, text: str):
        """Parse '5', '5-10', '5-' or '-10' into (first, last), or None if not a year range."""
        if '-' in text:
            parts = text.split('-')
            if len(parts) != 2:
                return None
            try:
                first = int(parts[0]) if parts[0] else 0
                last = int(parts[1]) if parts[1] else self.plan_data.years
            except ValueError:
                return None
            return (first, last)
        try:
            year = int(text)
        except ValueError:
            return None
        return (year, year)

    def _reload(self, years: int = None, scenario: Scenario = None,
                modification: ScenarioModification = None) -> PlanData:
        return load_plan(
            self.snapshot_name,
            years=self.plan_data.years if years is None else years,
            scenario=scenario or self.plan_data.scenario,
            modification=modification,
            input_dir=self.input_dir,
        )

    def do_get(self, arg: str):
        """Query field(s) from the yearly projection.

        Usage: get <fields> [year_or_range]

        Arguments:
            fields        - Comma-separated list of field names
            year_or_range - Optional: single year (5) or range (5-10).
                            Years count from the snapshot (0 is today).

        Examples:
            get net_worth
            get net_worth, total_debts
            get net_worth 10
            get consumer_debts 0-5
        """
        if not self._require_plan():
            return

        if not arg.strip():
            print("Error: Please specify at least one field to query.")
            print("Usage: get <fields> [year_or_range]")
            print("Example: get net_worth 0-10")
            return

        parts = arg.strip().split()
        year_range = None
        field_parts = parts
        if len(parts) > 1 or parts[0][:1].isdigit() or parts[0].startswith('-'):
            year_range = self._parse_year_arg(parts[-1])
            if year_range is not None:
                field_parts = parts[:-1]

        fields_str = ' '.join(field_parts)
        field_names = [f.strip() for f in fields_str.split(',') if f.strip()]

        if not field_names:
            print("Error: No valid field names provided.")
            return

        invalid_fields = [f for f in field_names if f not in self.available_fields]
        if invalid_fields:
            print(f"Error: Unknown field(s): {', '.join(invalid_fields)}")
            print("Use 'fields' command to see available field names.")
            return

        first_year, last_year = year_range if year_range else (0, self.plan_data.years)

        if first_year > last_year:
            print(f"Error: First year ({first_year}) cannot be greater than last year ({last_year})")
            return

        if first_year < 0 or last_year > self.plan_data.years:
            print(f"Warning: Requested range extends beyond projection (0-{self.plan_data.years})")

        header = ["Year"] + [get_short_name(f) for f in field_names]
        col_widths = [max(len(h), 6) for h in header]

        rows = []
        for year in range(first_year, last_year + 1):
            point = self.plan_data.get_year(year)
            if point is None:
                continue
            row = [str(year)] + [format_value(getattr(point, f)) for f in field_names]
            rows.append(row)
            for i, cell in enumerate(row):
                col_widths[i] = max(col_widths[i], len(cell))

        if not rows:
            print(f"No data available for years {first_year}-{last_year}")
            return

        header_line = "  ".join(h.rjust(col_widths[i]) for i, h in enumerate(header))
        print()
        print(header_line)
        print("-" * len(header_line))
        for row in rows:
            print("  ".join(cell.rjust(col_widths[i]) for i, cell in enumerate(row)))
        print()

    def do_fields(self, arg: str):
        """List all available fields that can be queried.

        Usage: fields [field_name]
        """
        if arg.strip():
            field_name = arg.strip()
            if field_name not in self.available_fields:
                print(f"Error: Unknown field '{field_name}'")
                print("Use 'fields' without arguments to see all available fields.")
                return

            info = FIELD_METADATA.get(field_name)
            print(f"\n{field_name}:")
            if info:
                print(f"  Short name: {info.short_name}")
                print(f"  Description: {info.description}")
            else:
                print("  No metadata available")
            print()
            return

        print("\nAvailable projection fields:")
        print("=" * 70)
        for field in self.available_fields:
            print(f"  {field:<24} [{get_short_name(field):<16}] {get_description(field)}")
        print()

    def complete_fields(self, text, line, begidx, endidx):
        if not text:
            return self.available_fields
        text_lower = text.lower()
        return [f for f in self.available_fields if text_lower in f.lower()]

    def do_years(self, arg: str):
        """Show the projection horizon and key months."""
        if not self._require_plan():
            return

        projection = self.plan_data.projection
        print(f"\nProjection for '{self.snapshot_name}':")
        print(f"  Horizon: 0 - {self.plan_data.years} years ({len(projection.points)} monthly points)")
        print(f"  Scenario: {self.plan_data.scenario.value}")
        for label, month in (("Consumer debt free", projection.consumer_debt_free_month),
                             ("Mortgage free", projection.mortgage_free_month),
                             ("Debt free", projection.debt_free_month)):
            when = f"month {month}" if month is not None else "not within horizon"
            print(f"  {label}: {when}")
        print()

    def do_scenario(self, arg: str):
        """Switch growth scenario or compare a what-if change.

        Usage:
            scenario                           - Show the current growth scenario
            scenario <conservative|moderate|optimistic>
            scenario key=value [key=value ...] - Compare against a modified snapshot

        What-if keys:
            exclude=<debt id>                  - Remove a debt (repeatable)
            windfall=<amount>                  - Add a lump sum to the surplus target
            income=<signed amount>             - Adjust the first income item
            contribution=<asset id>:<amount>   - Override a monthly contribution
        """
        if not self._require_plan():
            return

        parts = arg.strip().split()
        if not parts:
            print(f"Current scenario: {self.plan_data.scenario.value}")
            print(f"Available: {', '.join(s.value for s in Scenario)}")
            return

        if len(parts) == 1 and '=' not in parts[0]:
            try:
                scenario = Scenario(parts[0].lower())
            except ValueError:
                print(f"Error: Unknown scenario '{parts[0]}'")
                print(f"Available: {', '.join(s.value for s in Scenario)}")
                return
            self.plan_data = self._reload(scenario=scenario)
            print(f"Scenario set to {scenario.value}")
            return

        try:
            modification = parse_modification(parts)
            compared = self._reload(modification=modification)
        except ValueError as e:
            print(f"Error: {e}")
            return
        ScenarioRenderer().render(compared)

    def complete_scenario(self, text, line, begidx, endidx):
        options = [s.value for s in Scenario] + ['exclude=', 'windfall=', 'income=', 'contribution=']
        return [o for o in options if o.startswith(text)]

    def do_render(self, arg: str):
        """Render a report for the loaded snapshot.

        Usage: render [mode] [year_or_range]

        Modes: Summary, TaxDetails, Projection, DebtPayoff, Scenario, Benchmarks.
        Projection accepts a year range like 5-10.
        """
        if not self._require_plan():
            return

        parts = arg.strip().split()
        if not parts:
            print("\nAvailable render modes:")
            print("=" * 40)
            for mode in RENDERER_REGISTRY.keys():
                print(f"  - {mode}")
            print("\nUsage: render <mode> [year_or_range]")
            print()
            return

        matched_mode = None
        for registry_mode in RENDERER_REGISTRY.keys():
            if registry_mode.lower() == parts[0].lower():
                matched_mode = registry_mode
                break

        if matched_mode is None:
            print(f"Error: Unknown render mode '{parts[0]}'")
            print(f"Available modes: {', '.join(RENDERER_REGISTRY.keys())}")
            return

        if matched_mode == 'Projection' and len(parts) >= 2:
            year_range = self._parse_year_arg(parts[1])
            if year_range is None:
                print(f"Error: Invalid year range '{parts[1]}'")
                return
            renderer = RENDERER_REGISTRY[matched_mode](*year_range)
        else:
            renderer = RENDERER_REGISTRY[matched_mode]()
        renderer.render(self.plan_data)

    def complete_render(self, text, line, begidx, endidx):
        return [m for m in RENDERER_REGISTRY.keys() if m.lower().startswith(text.lower())]

    def do_tax(self, arg: str):
        """Estimate tax on an annual income.

        Usage: tax <income> [type] [country jurisdiction]

        Type is employment (default), capital-gains or other. Country and
        jurisdiction default to the loaded snapshot's residence.

        Examples:
            tax 85000
            tax 50000 capital-gains
            tax 120000 employment US CA
        """
        parts = arg.strip().split()
        if not parts:
            print("Usage: tax <income> [type] [country jurisdiction]")
            return

        try:
            income = float(parts[0].replace(',', ''))
        except ValueError:
            print(f"Error: Invalid income '{parts[0]}'")
            return

        income_type = IncomeType.EMPLOYMENT
        rest = parts[1:]
        if rest and rest[0].lower() in [t.value for t in IncomeType]:
            income_type = IncomeType(rest[0].lower())
            rest = rest[1:]

        if len(rest) >= 2:
            country, jurisdiction = rest[0], rest[1]
        elif self.plan_data is not None and self.plan_data.snapshot.country:
            country = self.plan_data.snapshot.country
            jurisdiction = self.plan_data.snapshot.jurisdiction or ''
        else:
            print("Error: No residence loaded. Use 'tax <income> [type] <country> <jurisdiction>'.")
            return

        try:
            result = compute_tax(income, income_type, country, jurisdiction)
        except ValueError as e:
            print(f"Error: {e}")
            return

        print(f"\nTax on {format_value(income)} ({income_type.value}) in {country.upper()}-{jurisdiction.upper()}:")
        print(f"  {'Federal Tax:':<24} {format_value(result.federal_tax):>16}")
        print(f"  {'Subnational Tax:':<24} {format_value(result.subnational_tax):>16}")
        print(f"  {'Total Tax:':<24} {format_value(result.total_tax):>16}")
        print(f"  {'After-Tax Income:':<24} {format_value(result.after_tax_income):>16}")
        print(f"  {'Effective Rate:':<24} {result.effective_rate:>16.2%}")
        print(f"  {'Marginal Rate:':<24} {result.marginal_rate:>16.2%}")
        print()

    def do_payoff(self, arg: str):
        """Payoff timeline for a single balance.

        Usage: payoff <balance> <annual_rate_percent> <monthly_payment>

        Example: payoff 5000 19.99 200
        """
        parts = arg.strip().split()
        if len(parts) != 3:
            print("Usage: payoff <balance> <annual_rate_percent> <monthly_payment>")
            return
        try:
            balance, rate, payment = (float(p.replace(',', '')) for p in parts)
        except ValueError:
            print("Error: balance, rate and payment must be numbers")
            return

        result = calculate_payoff(balance, rate, payment)
        print(f"\n  {'Status:':<24} {result.status.value}")
        print(f"  {'Time to pay off:':<24} {result.duration_label}")
        if result.covers_interest:
            print(f"  {'Total interest:':<24} {format_value(result.total_interest)}")
        print()

    def do_load(self, arg: str):
        """Load a snapshot.

        Usage: load <snapshot_name> [years]

        If no name is given and a snapshot is already loaded, reloads it.
        """
        parts = arg.strip().split()
        snapshot_name = parts[0] if parts else self.snapshot_name

        if not snapshot_name:
            print("Please specify a snapshot name.")
            print("Available snapshots:")
            for name in self._get_available_snapshots():
                print(f"  - {name}")
            return

        years = 10
        if len(parts) > 1:
            try:
                years = int(parts[1])
            except ValueError:
                print(f"Error: Invalid years '{parts[1]}'")
                return
        elif self.plan_data is not None and snapshot_name == self.snapshot_name:
            years = self.plan_data.years

        try:
            print(f"Loading snapshot '{snapshot_name}'...")
            self.plan_data = load_plan(snapshot_name, years=years, input_dir=self.input_dir)
            self.snapshot_name = snapshot_name
            print("Snapshot loaded successfully!")
            print(f"Projection: 0 - {self.plan_data.years} years")
        except (FileNotFoundError, ValueError) as e:
            print(f"Error: {e}")

    def do_help(self, arg: str):
        """Show help for available commands."""
        if arg:
            super().do_help(arg)
        else:
            print("""
Available Commands:
==================

  get <fields> [year_or_range]
      Query one or more fields from the yearly projection.
      Fields should be comma-separated. Years count from today (0).

      Examples:
        get net_worth
        get net_worth, total_debts 0-5

  fields [field_name]
      List all available field names that can be queried.

  years
      Show the projection horizon and debt-free months.

  scenario [name | key=value ...]
      Switch growth scenario, or compare a what-if change.

      Examples:
        scenario conservative
        scenario exclude=car-loan windfall=5000

  render [mode] [year_or_range]
      Render a report: Summary, TaxDetails, Projection, DebtPayoff,
      Scenario, Benchmarks.

  tax <income> [type] [country jurisdiction]
      Estimate tax on an annual income.

  payoff <balance> <rate> <payment>
      Payoff timeline for a single balance.

  load [snapshot_name] [years]
      Load a snapshot. Shows available snapshots if none specified.

  help [command]
      Show this help message or help for a specific command.

  exit, quit
      Exit the shell.
""")

    def do_exit(self, arg: str):
        """Exit the shell."""
        print("Goodbye!")
        return True

    def do_quit(self, arg: str):
        """Exit the shell."""
        return self.do_exit(arg)

    def do_EOF(self, arg: str):
        """Handle Ctrl+D to exit."""
        print()
        return self.do_exit(arg)

    def emptyline(self):
        """Do nothing on empty line."""
        pass

    def default(self, line: str):
        print(f"Unknown command: {line}")
        print("Type 'help' for available commands.")

    def complete_get(self, text, line, begidx, endidx):
        if not text:
            return self.available_fields
        text_lower = text.lower()
        return [f for f in self.available_fields if text_lower in f.lower()]

    def complete_load(self, text, line, begidx, endidx):
        return [s for s in self._get_available_snapshots() if s.startswith(text)]

    def complete_help(self, text, line, begidx, endidx):
        commands = ['get', 'fields', 'years', 'scenario', 'render', 'tax', 'payoff', 'load', 'exit', 'quit']
        return [c for c in commands if c.startswith(text)]


def main():
    snapshot_name = sys.argv[1] if len(sys.argv) > 1 else None

    if snapshot_name:
        try:
            print(f"Loading snapshot '{snapshot_name}'...")
            plan_data = load_plan(snapshot_name)
            print("Snapshot loaded successfully!")
        except (FileNotFoundError, ValueError) as e:
            print(f"Error: {e}")
            sys.exit(1)
        shell = NetWorthShell(plan_data, snapshot_name)
    else:
        shell = NetWorthShell()
    shell.cmdloop()


if __name__ == "__main__":
    main()
