"""Combination search and the seat selection entry points."""

import logging
from collections.abc import Collection, Sequence
from itertools import combinations

from seatalloc.arrangement import ComboMetrics, evaluate_combination
from seatalloc.availability import build_free_seats, seat_sort_key
from seatalloc.config import DEFAULT_PARAMS, SelectionParams
from seatalloc.models import Candidate, Seat
from seatalloc.scoring import build_candidates

logger = logging.getLogger(__name__)


def choose_best_combination(
    candidates: Sequence[Candidate],
    count: int,
    params: SelectionParams = DEFAULT_PARAMS,
) -> list[Seat] | None:
    """
    Find the best group of ``count`` seats among the top-ranked candidates.

    ``candidates`` must already be ranked (see ``build_candidates``). Only the
    first ``params.pool_size(count)`` of them are searched; every subset of
    that pool is evaluated. Returns None if there are fewer candidates than
    requested.
    """
    if len(candidates) < count:
        return None

    pool = candidates[: params.pool_size(count)]
    best: tuple[Candidate, ...] | None = None
    best_metrics: ComboMetrics | None = None
    for combo in combinations(pool, count):
        metrics = evaluate_combination(combo)
        if metrics.is_better_than(best_metrics):
            best = combo
            best_metrics = metrics

    if best is None:
        return None
    logger.debug("Best combination %s with %s", [c.seat.label for c in best], best_metrics)
    return [c.seat for c in best]


def select_seats(
    seats: Sequence[Seat] | None,
    board_at: str,
    exit_at: str,
    stops: Sequence[str] | None,
    count: int,
    params: SelectionParams = DEFAULT_PARAMS,
) -> list[Seat]:
    """
    Choose ``count`` seats for passengers travelling ``board_at`` -> ``exit_at``.

    Returns the seats in physical seat order, or an empty list when the
    segment is invalid or not enough seats are free. Guide seats are offered
    only when no ordinary seat is free, in which case fewer than ``count``
    seats may be returned.
    """
    if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
        raise ValueError(f"count must be a positive integer, got {count!r}")
    if not stops or len(stops) < 2:
        logger.debug("No route to select seats on")
        return []

    free = build_free_seats(seats, board_at, exit_at, stops)
    if not free.valid:
        return []

    available = free.flatten()
    if len(available) < count:
        if not available and free.guides:
            logger.debug("Only guide seats free for %s -> %s", board_at, exit_at)
            return free.guides[:count]
        logger.debug("Only %d seats free, %d requested", len(available), count)
        return []

    candidates = build_candidates(available, free.b, free.e, stops, params)
    chosen = choose_best_combination(candidates, count, params)
    if chosen is None or len(chosen) != count:
        chosen = [c.seat for c in candidates[:count]]
        logger.debug("Falling back to top-scored seats %s", [s.label for s in chosen])

    ordered = sorted(chosen, key=seat_sort_key)
    logger.debug("Selected %s for %s -> %s", [s.label for s in ordered], board_at, exit_at)
    return ordered


def get_best_available_seat(
    seats: Sequence[Seat] | None,
    board_at: str,
    exit_at: str,
    stops: Sequence[str] | None,
    exclude_ids: Collection[int | str] = (),
    params: SelectionParams = DEFAULT_PARAMS,
) -> Seat | None:
    """Best single seat for the segment, ignoring seats whose id is in ``exclude_ids``."""
    excluded = set(exclude_ids or ())
    remaining = [seat for seat in seats or [] if seat is not None and seat.id not in excluded]
    chosen = select_seats(remaining, board_at, exit_at, stops, 1, params)
    return chosen[0] if chosen else None
