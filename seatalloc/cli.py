"""Command-line interface for seatalloc."""

import argparse
import logging
import sys
from pathlib import Path

from seatalloc.config import DEFAULT_PARAMS, SelectionParams, load_params
from seatalloc.models import Snapshot
from seatalloc.optimizer import get_best_available_seat, select_seats
from seatalloc.output import (
    format_moves_csv,
    format_reoptimization,
    format_selection,
    format_timeline,
)
from seatalloc.parser import create_snapshot_template, parse_snapshot
from seatalloc.reoptimize import auto_add_passengers, suggest_reoptimization
from seatalloc.timeline import build_occupancy

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="seatalloc",
        description="Allocate bus seats for passengers travelling part of a route.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  seatalloc template trip.yaml --rows 12 --layout 2+1 --stops Cluj Turda Alba Sibiu
  seatalloc select trip.yaml --board Cluj --exit Sibiu --count 3
  seatalloc best trip.yaml --board Turda --exit Sibiu --exclude 4
  seatalloc reoptimize trip.yaml
  seatalloc timeline trip.yaml
""",
    )
    parser.add_argument("--params", type=Path, help="YAML file with selection weight overrides")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Log selection decisions")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log errors")

    sub = parser.add_subparsers(dest="command", required=True)

    select = sub.add_parser("select", help="Pick seats for a group travelling together")
    select.add_argument("snapshot", type=Path, help="Trip snapshot (YAML or JSON)")
    select.add_argument("--board", required=True, help="Boarding stop")
    select.add_argument("--exit", required=True, dest="exit_at", help="Exit stop")
    select.add_argument("--count", type=int, default=1, help="Number of passengers (default: 1)")

    best = sub.add_parser("best", help="Pick the single best seat")
    best.add_argument("snapshot", type=Path, help="Trip snapshot (YAML or JSON)")
    best.add_argument("--board", required=True, help="Boarding stop")
    best.add_argument("--exit", required=True, dest="exit_at", help="Exit stop")
    best.add_argument("--exclude", nargs="*", default=[], help="Seat ids to leave out")

    reopt = sub.add_parser("reoptimize", help="Propose better seats for auto-assigned passengers")
    reopt.add_argument("snapshot", type=Path, help="Trip snapshot (YAML or JSON)")
    reopt.add_argument("--csv", action="store_true", help="Print the proposal as CSV")

    auto = sub.add_parser("auto-add", help="Add passengers and reselect the unsaved group")
    auto.add_argument("snapshot", type=Path, help="Trip snapshot (YAML or JSON)")
    auto.add_argument("--add", type=int, default=1, help="Passengers to add (default: 1)")

    timeline = sub.add_parser("timeline", help="Show seat occupancy along the route")
    timeline.add_argument("snapshot", type=Path, help="Trip snapshot (YAML or JSON)")

    template = sub.add_parser("template", help="Write an empty snapshot for a coach layout")
    template.add_argument("output", type=Path, help="Path for the snapshot template")
    template.add_argument("--rows", type=int, default=12, help="Passenger rows (default: 12)")
    template.add_argument("--layout", default="2+2", help="Seat blocks per row (default: 2+2)")
    template.add_argument("--stops", nargs="+", help="Route stops in travel order")

    return parser


def _configure_logging(args: argparse.Namespace) -> None:
    level = logging.WARNING
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _load_snapshot(path: Path) -> Snapshot | None:
    if not path.exists():
        print(f"Error: Snapshot file not found: {path}", file=sys.stderr)
        return None
    try:
        return parse_snapshot(path)
    except Exception as e:
        print(f"Error parsing snapshot: {e}", file=sys.stderr)
        return None


def _run(args: argparse.Namespace, snapshot: Snapshot, params: SelectionParams) -> int:
    if args.command == "select":
        if args.count <= 0:
            print("Error: --count must be positive", file=sys.stderr)
            return 1
        seats = select_seats(snapshot.seats, args.board, args.exit_at, snapshot.stops, args.count, params)
        print(format_selection(seats, args.board, args.exit_at, args.count))
        return 0 if seats else 2

    if args.command == "best":
        wanted = set(args.exclude)
        exclude = {seat.id for seat in snapshot.seats if str(seat.id) in wanted}
        seat = get_best_available_seat(
            snapshot.seats, args.board, args.exit_at, snapshot.stops, exclude, params
        )
        print(format_selection([seat] if seat else [], args.board, args.exit_at, 1))
        return 0 if seat else 2

    if args.command == "reoptimize":
        result = suggest_reoptimization(
            snapshot.seats, snapshot.stops, snapshot.pending, snapshot.held_seat_ids, params
        )
        if args.csv and result.needs_reopt:
            print(format_moves_csv(result))
        else:
            print(format_reoptimization(result))
        return 0

    if args.command == "auto-add":
        result = auto_add_passengers(
            snapshot.seats, snapshot.stops, snapshot.pending, args.add, snapshot.held_seat_ids, params
        )
        print(f"Status: {result.status}")
        if result.pending:
            board, exit_at = result.pending[0].board_at, result.pending[0].exit_at
            print(format_selection(result.seats, board, exit_at, len(result.seats)))
        return 0 if result.status == "ok" else 2

    if args.command == "timeline":
        if len(snapshot.stops) < 2:
            print("Error: Snapshot has no route (need at least two stops)", file=sys.stderr)
            return 1
        print(format_timeline(build_occupancy(snapshot.seats, snapshot.stops)))
        return 0

    raise AssertionError(f"Unhandled command {args.command}")


def main(argv: list[str] | None = None) -> int:
    """Main entry point for seatalloc CLI."""
    args = _build_parser().parse_args(argv)
    _configure_logging(args)

    if args.command == "template":
        try:
            create_snapshot_template(args.output, args.rows, args.layout, args.stops)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        print(f"Created snapshot template at: {args.output}")
        return 0

    params = DEFAULT_PARAMS
    if args.params:
        try:
            params = load_params(args.params)
        except (OSError, ValueError) as e:
            print(f"Error loading params: {e}", file=sys.stderr)
            return 1

    snapshot = _load_snapshot(args.snapshot)
    if snapshot is None:
        return 1

    logger.info("Loaded %d seats on a %d-stop route", len(snapshot.seats), len(snapshot.stops))
    return _run(args, snapshot, params)


if __name__ == "__main__":
    sys.exit(main())
