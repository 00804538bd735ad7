"""Segment and frontness scores for free seats."""

from collections.abc import Sequence

from seatalloc.availability import active_intervals, seat_sort_key
from seatalloc.config import DEFAULT_PARAMS, SelectionParams
from seatalloc.models import MISSING_POSITION, Candidate, Seat


def segment_score(
    seat: Seat,
    b: int,
    e: int,
    stops: Sequence[str],
    params: SelectionParams = DEFAULT_PARAMS,
) -> int:
    """
    Score how well ``[b, e)`` dovetails with the seat's existing bookings.

    Every seat starts at the base score. Each active booking adds the
    hand-off bonus when it ends where we board or starts where we exit,
    and the disjoint bonus when it lies entirely before or after us.
    """
    score = params.base_score
    for pb, pe in active_intervals(seat, stops):
        if pe == b:
            score += params.handoff_bonus
        if pb == e:
            score += params.handoff_bonus
        if pe <= b:
            score += params.disjoint_bonus
        if pb >= e:
            score += params.disjoint_bonus
    return score


def front_score(seat: Seat, params: SelectionParams = DEFAULT_PARAMS) -> int:
    """Linearly decreasing with row; zero from row 20 onwards with default params."""
    row = seat.row if seat.row is not None else MISSING_POSITION
    return max(0, params.front_origin - row * params.front_step)


def build_candidates(
    seats: Sequence[Seat],
    b: int,
    e: int,
    stops: Sequence[str],
    params: SelectionParams = DEFAULT_PARAMS,
) -> list[Candidate]:
    """Score free seats and rank them by segment score, frontness, then seat order."""
    candidates = [
        Candidate(
            seat=seat,
            row=seat.row,
            col=seat.seat_col,
            segment_score=segment_score(seat, b, e, stops, params),
            front_score=front_score(seat, params),
            order_key=seat_sort_key(seat),
        )
        for seat in seats
    ]
    candidates.sort(key=lambda c: (-c.segment_score, -c.front_score, c.order_key))
    return candidates
