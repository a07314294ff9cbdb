import sys
import os
import argparse
import logging
from calc.plan_calculator import PlanCalculator
from model.ProjectionData import Scenario, ScenarioModification
from model.Snapshot import load_snapshot
from render.renderers import RENDERER_REGISTRY

logger = logging.getLogger(__name__)

INPUT_DIR = os.path.normpath(os.path.join(os.path.dirname(__file__), '..', 'input-parameters'))


def snapshot_path_for(snapshot_name: str) -> str:
    return os.path.join(INPUT_DIR, snapshot_name, 'snapshot.json')


def parse_contribution(value: str) -> tuple:
    """Parse an ID=AMOUNT contribution override."""
    asset_id, sep, amount = value.partition('=')
    if not sep or not asset_id:
        raise argparse.ArgumentTypeError(f"Expected ID=AMOUNT, got '{value}'")
    try:
        return asset_id, float(amount)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid contribution amount in '{value}'")


def build_modification(args) -> ScenarioModification:
    return ScenarioModification(
        excluded_debt_ids=frozenset(args.exclude_debt or []),
        contribution_overrides=tuple(args.contribution or []),
        income_adjustment=args.income_adjustment,
        windfall=args.windfall,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Net worth planning calculator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Modes:
  Summary      Print cash flow, balances and metrics (default)
  TaxDetails   Print the tax estimate for each income item
  Projection   Print the yearly net worth projection with milestones
  DebtPayoff   Print the payoff timeline of each debt and mortgage
  Scenario     Compare the snapshot against a what-if modification
  Benchmarks   Compare metrics against national medians for your age

Examples:
  python src/Program.py example
  python src/Program.py example --mode Projection --years 30 --scenario optimistic
  python src/Program.py example --mode Scenario --exclude-debt car-loan --windfall 10000
  python src/Program.py example --mode Scenario --contribution tfsa=1000
        """
    )
    parser.add_argument('snapshot_name', help='Name of the snapshot (folder in input-parameters)')
    parser.add_argument('--mode', '-m',
                        choices=list(RENDERER_REGISTRY.keys()),
                        default='Summary',
                        help='Output mode (default: Summary)')
    parser.add_argument('--years', '-y', type=int, default=10,
                        help='Projection horizon in years (default: 10)')
    parser.add_argument('--scenario', '-s',
                        choices=[s.value for s in Scenario],
                        default=Scenario.MODERATE.value,
                        help='Growth scenario (default: moderate)')
    parser.add_argument('--exclude-debt', action='append', metavar='ID',
                        help='Debt id to remove in the what-if scenario (repeatable)')
    parser.add_argument('--windfall', type=float, default=0.0,
                        help='One-time amount added to the surplus target asset')
    parser.add_argument('--income-adjustment', type=float, default=0.0,
                        help='Signed change to the first income item')
    parser.add_argument('--contribution', action='append', type=parse_contribution, metavar='ID=AMOUNT',
                        help='Override an asset\'s monthly contribution (repeatable)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    if args.years < 0:
        parser.error("--years must be non-negative")

    snapshot_path = snapshot_path_for(args.snapshot_name)
    if not os.path.exists(snapshot_path):
        print(f"Snapshot file not found: {snapshot_path}")
        sys.exit(1)

    try:
        snapshot = load_snapshot(snapshot_path)
        logger.debug("Loaded snapshot from %s", snapshot_path)
        plan = PlanCalculator().calculate(
            snapshot,
            name=args.snapshot_name,
            years=args.years,
            scenario=args.scenario,
            modification=build_modification(args),
        )
    except (KeyError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    renderer = RENDERER_REGISTRY[args.mode]()
    renderer.render(plan)


if __name__ == "__main__":
    main()
