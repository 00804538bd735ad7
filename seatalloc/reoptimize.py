"""
Reoptimization of automatically assigned, unsaved passengers.

Passengers that the engine placed (origin "auto") and that have not been
saved yet are grouped by segment. Each group is re-run through seat
selection against the seats still free, and the result is compared with the
current placement to produce a minimal list of moves.
"""

import logging
from collections.abc import Collection, Sequence
from dataclasses import dataclass, field, replace

from seatalloc.availability import is_seat_free_for_interval, seat_sort_key
from seatalloc.config import DEFAULT_PARAMS, SelectionParams
from seatalloc.models import (
    AutoAddResult,
    Move,
    PendingPassenger,
    ReoptimizationResult,
    Seat,
    SeatAssignment,
)
from seatalloc.normalize import build_stop_index, normalize_stop
from seatalloc.optimizer import select_seats

logger = logging.getLogger(__name__)


@dataclass
class _SegmentGroup:
    board: str
    exit: str
    board_index: int
    exit_index: int
    members: list[tuple[Seat, PendingPassenger]] = field(default_factory=list)


def _route(stops: Sequence[str] | None) -> list[str]:
    return [stop for stop in stops or [] if stop]


def _is_candidate(passenger: PendingPassenger) -> bool:
    return passenger.reservation_id is None and passenger.origin == "auto"


def _group_candidates(
    candidates: list[tuple[Seat, PendingPassenger]],
    stop_index: dict[str, int],
) -> list[_SegmentGroup] | ReoptimizationResult:
    groups: dict[tuple[str, str], _SegmentGroup] = {}
    for seat, passenger in candidates:
        if not passenger.board_at or not passenger.exit_at:
            return ReoptimizationResult(status="missing-segment")
        key = (normalize_stop(passenger.board_at), normalize_stop(passenger.exit_at))
        board_index = stop_index.get(key[0])
        exit_index = stop_index.get(key[1])
        if board_index is None or exit_index is None:
            return ReoptimizationResult(status="segment-not-on-route")
        if board_index >= exit_index:
            return ReoptimizationResult(status="invalid-segment")
        if key not in groups:
            groups[key] = _SegmentGroup(
                board=passenger.board_at,
                exit=passenger.exit_at,
                board_index=board_index,
                exit_index=exit_index,
            )
        groups[key].members.append((seat, passenger))

    return sorted(
        groups.values(),
        key=lambda g: (g.board_index, g.exit_index, -len(g.members)),
    )


def _signature(assignments: list[SeatAssignment]) -> str:
    parts = [
        f"{a.from_seat.id}:{normalize_stop(a.board)}>{normalize_stop(a.exit)}->{a.to_seat.id}"
        for a in assignments
    ]
    return ";".join(sorted(parts))


def suggest_reoptimization(
    seats: Sequence[Seat] | None,
    stops: Sequence[str] | None,
    pending: Sequence[PendingPassenger],
    held_seat_ids: Collection[int | str] = (),
    params: SelectionParams = DEFAULT_PARAMS,
) -> ReoptimizationResult:
    """
    Propose better seats for automatically assigned, unsaved passengers.

    ``held_seat_ids`` are seats held by someone else and are never proposed.
    Groups are processed one at a time in route order, so an earlier group
    may take seats a later group would have used better.
    """
    route = _route(stops)
    if len(route) < 2:
        return ReoptimizationResult(status="no-route")
    stop_index = build_stop_index(route)

    seats_by_id = {seat.id: seat for seat in seats or [] if seat is not None}
    candidates = [
        (seats_by_id[p.seat_id], p)
        for p in pending
        if _is_candidate(p) and p.seat_id in seats_by_id
    ]
    if not candidates:
        return ReoptimizationResult(status="no-candidates")

    groups = _group_candidates(candidates, stop_index)
    if isinstance(groups, ReoptimizationResult):
        logger.debug("Reoptimization aborted: %s", groups.status)
        return groups

    candidate_ids = {seat.id for seat, _ in candidates}
    # Seats of other unsaved passengers (manual picks) are taken too.
    held = (set(held_seat_ids) | {p.seat_id for p in pending}) - candidate_ids
    working = [
        seat
        for seat in seats_by_id.values()
        if seat.id in candidate_ids
        or (
            seat.id not in held
            and any(is_seat_free_for_interval(seat, g.board_index, g.exit_index, route) for g in groups)
        )
    ]
    if not working:
        return ReoptimizationResult(status="no-availability")

    assignments: list[SeatAssignment] = []
    for group in groups:
        wanted = len(group.members)
        suggestion = select_seats(working, group.board, group.exit, route, wanted, params)
        if len(suggestion) < wanted:
            logger.debug("No room for %d passengers on %s -> %s", wanted, group.board, group.exit)
            return ReoptimizationResult(status="no-availability")

        current = sorted((seat for seat, _ in group.members), key=seat_sort_key)
        proposed = sorted(suggestion, key=seat_sort_key)
        for from_seat, to_seat in zip(current, proposed):
            assignments.append(SeatAssignment(from_seat, to_seat, group.board, group.exit))

        taken = {seat.id for seat in suggestion}
        working = [seat for seat in working if seat.id not in taken]

    if not any(a.changed for a in assignments):
        return ReoptimizationResult(status="already-optimal")

    moves = [
        Move(
            from_label=a.from_seat.label or f"#{a.from_seat.id}",
            to_label=a.to_seat.label or f"#{a.to_seat.id}",
            board=a.board,
            exit=a.exit,
        )
        for a in assignments
        if a.changed
    ]
    segments: list[tuple[str, str]] = []
    seen: set[tuple[str, str]] = set()
    for a in assignments:
        key = (normalize_stop(a.board), normalize_stop(a.exit))
        if key not in seen:
            seen.add(key)
            segments.append((a.board, a.exit))

    result = ReoptimizationResult(
        status="needs-reopt",
        assignments=assignments,
        moves=moves,
        segments=segments,
        signature=_signature(assignments),
    )
    logger.debug("Reoptimization proposes %d moves (%s)", len(moves), result.signature)
    return result


def apply_reoptimization(
    pending: Sequence[PendingPassenger],
    result: ReoptimizationResult,
) -> list[PendingPassenger]:
    """
    Rebind passengers to their proposed seats.

    Returns a new list; passengers the proposal does not mention are kept as
    they are.
    """
    if not result.needs_reopt:
        return list(pending)

    targets = {a.from_seat.id: a for a in result.assignments}
    updated: list[PendingPassenger] = []
    for passenger in pending:
        assignment = targets.get(passenger.seat_id)
        if assignment is None or not _is_candidate(passenger):
            updated.append(passenger)
            continue
        updated.append(
            replace(
                passenger,
                seat_id=assignment.to_seat.id,
                board_at=assignment.board,
                exit_at=assignment.exit,
                origin="auto",
            )
        )
    return updated


class ProposalTracker:
    """Keeps the last proposal so an unchanged one is not re-announced."""

    def __init__(self) -> None:
        self.current: ReoptimizationResult | None = None

    @property
    def signature(self) -> str | None:
        return self.current.signature if self.current else None

    def offer(self, result: ReoptimizationResult) -> ReoptimizationResult | None:
        """Record a fresh result and return the proposal to display, if any."""
        if not result.needs_reopt:
            self.current = None
        elif self.current is None or self.current.signature != result.signature:
            self.current = result
        return self.current


def auto_add_passengers(
    seats: Sequence[Seat] | None,
    stops: Sequence[str] | None,
    pending: Sequence[PendingPassenger],
    add: int = 1,
    held_seat_ids: Collection[int | str] = (),
    params: SelectionParams = DEFAULT_PARAMS,
) -> AutoAddResult:
    """
    Grow the unsaved selection by ``add`` passengers and reselect all of it.

    The segment defaults to the whole route, or to the first unsaved
    passenger's segment when that one lies on the route. Every returned
    pending passenger is marked as automatically placed.
    """
    route = _route(stops)
    if len(route) < 2:
        return AutoAddResult(status="no-route")
    if not seats:
        return AutoAddResult(status="no-seats")

    board, exit_ = route[0], route[-1]
    unsaved = [p for p in pending if p.reservation_id is None]
    if unsaved:
        anchor = unsaved[0]
        if anchor.board_at in route:
            board = anchor.board_at
        if anchor.exit_at in route:
            exit_ = anchor.exit_at

    wanted = len(unsaved) + max(1, add)
    held = set(held_seat_ids)
    available = [seat for seat in seats if seat is not None and seat.id not in held]
    chosen = select_seats(available, board, exit_, route, wanted, params)
    if not chosen:
        return AutoAddResult(status="no-availability")
    if len(chosen) < wanted:
        return AutoAddResult(status="insufficient", seats=chosen)

    return AutoAddResult(
        status="ok",
        seats=chosen,
        pending=[
            PendingPassenger(seat_id=seat.id, board_at=board, exit_at=exit_, origin="auto")
            for seat in chosen
        ],
    )
