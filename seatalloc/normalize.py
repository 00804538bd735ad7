"""Stop name normalization and segment resolution for seatalloc."""

from collections.abc import Sequence


def normalize_stop(name: object) -> str:
    """Trim and case-fold a stop name. ``None`` becomes the empty string."""
    if name is None:
        return ""
    return str(name).strip().casefold()


def index_of_stop(stops: Sequence[str] | None, name: object) -> int:
    """
    Return the position of ``name`` in ``stops``, or -1.

    Duplicate names resolve to their first occurrence, so a route that
    revisits a stop can only board or exit at the first visit.
    """
    if not stops:
        return -1
    key = normalize_stop(name)
    for idx, stop in enumerate(stops):
        if normalize_stop(stop) == key:
            return idx
    return -1


def resolve_segment(
    stops: Sequence[str] | None,
    board_at: object,
    exit_at: object,
) -> tuple[int, int] | None:
    """
    Resolve a (board, exit) pair to a half-open interval ``(b, e)``.

    Returns None when either stop is off the route or the stops are not in
    travel order.
    """
    b = index_of_stop(stops, board_at)
    e = index_of_stop(stops, exit_at)
    if b == -1 or e == -1 or b >= e:
        return None
    return b, e


def build_stop_index(stops: Sequence[str]) -> dict[str, int]:
    """Map normalized stop names to their first position."""
    index: dict[str, int] = {}
    for idx, stop in enumerate(stops):
        index.setdefault(normalize_stop(stop), idx)
    return index


def intervals_overlap(b1: int, e1: int, b2: int, e2: int) -> bool:
    """Half-open intervals ``[b1, e1)`` and ``[b2, e2)`` share a leg."""
    return not (e2 <= b1 or b2 >= e1)
