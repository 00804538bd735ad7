"""
Physical arrangement scoring for groups of seats.

Seats are laid out on a grid of ``row`` and ``seat_col``. Columns that are
not consecutive within a row are separated by the aisle. Each group size
has its own evaluator returning an ``Arrangement`` where rank 0 is the best
tier and a higher score wins within a tier.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from itertools import combinations

from seatalloc.models import MISSING_POSITION, Candidate

PAIR_ADJACENT = 0  # same row, neighbouring columns
PAIR_ACROSS = 1  # same row, across the aisle
PAIR_STACKED = 2  # same column, front/back
PAIR_NONE = 3

PAIR_WEIGHTS = {PAIR_ADJACENT: 200, PAIR_ACROSS: 120, PAIR_STACKED: 80}
FOUR_SEAT_PAIRINGS = (((0, 1), (2, 3)), ((0, 2), (1, 3)), ((0, 3), (1, 2)))


@dataclass(frozen=True)
class Arrangement:
    rank: int
    score: int


@dataclass(frozen=True)
class ComboMetrics:
    """Everything needed to compare two seat groups of the same size."""

    segment_score: int
    arrangement_rank: int
    arrangement_score: int
    front_score: int
    order_key: tuple

    def sort_key(self) -> tuple:
        """Smaller is better."""
        return (
            -self.segment_score,
            self.arrangement_rank,
            -self.arrangement_score,
            -self.front_score,
            self.order_key,
        )

    def is_better_than(self, other: "ComboMetrics | None") -> bool:
        return other is None or self.sort_key() < other.sort_key()


def _has_position(c: Candidate) -> bool:
    return c.row is not None and c.col is not None


def determine_pair_type(a: Candidate, b: Candidate) -> int:
    if not (_has_position(a) and _has_position(b)):
        return PAIR_NONE
    if a.row == b.row:
        return PAIR_ADJACENT if abs(a.col - b.col) == 1 else PAIR_ACROSS
    if a.col == b.col:
        return PAIR_STACKED
    return PAIR_NONE


def _sort_col(c: Candidate) -> int:
    return c.col if c.col is not None else MISSING_POSITION


def _row_total(combo: Sequence[Candidate]) -> int:
    return sum(c.sort_row for c in combo)


def split_by_aisle(row_seats: Sequence[Candidate]) -> list[list[Candidate]]:
    """Split seats of one row into blocks of consecutive columns."""
    groups: list[list[Candidate]] = []
    current: list[Candidate] = []
    prev_col: int | None = None
    for c in sorted(row_seats, key=_sort_col):
        col = _sort_col(c)
        if prev_col is not None and col - prev_col > 1 and current:
            groups.append(current)
            current = []
        current.append(c)
        prev_col = col
    if current:
        groups.append(current)
    return groups


def _evaluate_single(combo: Sequence[Candidate]) -> Arrangement:
    return Arrangement(rank=0, score=sum(c.front_score for c in combo))


def _evaluate_pair(combo: Sequence[Candidate]) -> Arrangement:
    a, b = combo
    pair_type = determine_pair_type(a, b)
    row_diff = abs(a.sort_row - b.sort_row)
    col_diff = abs(_sort_col(a) - _sort_col(b))
    if pair_type == PAIR_ADJACENT:
        return Arrangement(0, 400 - min(a.sort_row, b.sort_row) * 10)
    if pair_type == PAIR_ACROSS:
        return Arrangement(1, 250 - col_diff * 5)
    if pair_type == PAIR_STACKED:
        return Arrangement(2, 180 - row_diff * 10)
    return Arrangement(3, 100 - row_diff)


def _evaluate_trio(combo: Sequence[Candidate]) -> Arrangement:
    # Classic 2+1: two neighbours plus one across the aisle, all in one row.
    if all(_has_position(c) for c in combo) and len({c.row for c in combo}) == 1:
        ordered = sorted(combo, key=_sort_col)
        has_adjacent = any(nxt.col - cur.col == 1 for cur, nxt in zip(ordered, ordered[1:]))
        if has_adjacent and len(split_by_aisle(ordered)) >= 2:
            return Arrangement(0, 500 - ordered[0].row * 10)

    # A same-row pair with the third seat directly in front of or behind one of them.
    best: int | None = None
    for i, j in combinations(range(3), 2):
        a, b = combo[i], combo[j]
        pair_type = determine_pair_type(a, b)
        if pair_type > PAIR_ACROSS:
            continue
        third = combo[3 - i - j]
        if not _has_position(third):
            continue
        row_diff = min(abs(third.row - a.row), abs(third.row - b.row))
        if third.col in (a.col, b.col) and row_diff >= 1:
            score = 320 - row_diff * 15 - pair_type * 30
            if best is None or score > best:
                best = score
    if best is not None:
        return Arrangement(1, best)

    return Arrangement(2, -_row_total(combo))


def _evaluate_quad(combo: Sequence[Candidate]) -> Arrangement:
    best: Arrangement | None = None
    for pairing in FOUR_SEAT_PAIRINGS:
        counts = {PAIR_ADJACENT: 0, PAIR_ACROSS: 0, PAIR_STACKED: 0}
        score = 0
        for i, j in pairing:
            a, b = combo[i], combo[j]
            pair_type = determine_pair_type(a, b)
            if pair_type == PAIR_NONE:
                break
            counts[pair_type] += 1
            score += a.segment_score + b.segment_score + PAIR_WEIGHTS[pair_type]
        else:
            adjacent = counts[PAIR_ADJACENT]
            if adjacent == 2:
                rank = 0
            elif adjacent == 1:
                rank = 1
            else:
                rank = 2
            total = score + adjacent * 50 - counts[PAIR_ACROSS] * 10 - counts[PAIR_STACKED] * 20
            candidate = Arrangement(rank, total)
            if best is None or (candidate.rank, -candidate.score) < (best.rank, -best.score):
                best = candidate

    if best is None:
        return Arrangement(3, -_row_total(combo))
    return best


def _evaluate_group(combo: Sequence[Candidate]) -> Arrangement:
    """Greedy matching for five or more seats: adjacent, then across, then stacked."""
    edges: dict[int, list[tuple[int, int, int]]] = {
        PAIR_ADJACENT: [],
        PAIR_ACROSS: [],
        PAIR_STACKED: [],
    }
    for i, j in combinations(range(len(combo)), 2):
        pair_type = determine_pair_type(combo[i], combo[j])
        if pair_type in edges:
            edges[pair_type].append((i, j, combo[i].segment_score + combo[j].segment_score))

    used: set[int] = set()
    matched = {PAIR_ADJACENT: 0, PAIR_ACROSS: 0, PAIR_STACKED: 0}
    for pair_type in (PAIR_ADJACENT, PAIR_ACROSS, PAIR_STACKED):
        for i, j, _ in sorted(edges[pair_type], key=lambda edge: -edge[2]):
            if i in used or j in used:
                continue
            used.update((i, j))
            matched[pair_type] += 1

    leftover = len(combo) - len(used)
    score = (
        matched[PAIR_ADJACENT] * 200
        + matched[PAIR_ACROSS] * 80
        + matched[PAIR_STACKED] * 40
        - leftover * 50
    )
    return Arrangement(-matched[PAIR_ADJACENT], score)


EVALUATORS: dict[int, Callable[[Sequence[Candidate]], Arrangement]] = {
    1: _evaluate_single,
    2: _evaluate_pair,
    3: _evaluate_trio,
    4: _evaluate_quad,
}


def evaluate_arrangement(combo: Sequence[Candidate]) -> Arrangement:
    return EVALUATORS.get(len(combo), _evaluate_group)(combo)


def evaluate_combination(combo: Sequence[Candidate]) -> ComboMetrics:
    arrangement = evaluate_arrangement(combo)
    return ComboMetrics(
        segment_score=sum(c.segment_score for c in combo),
        arrangement_rank=arrangement.rank,
        arrangement_score=arrangement.score,
        front_score=sum(c.front_score for c in combo),
        order_key=tuple(sorted(c.order_key for c in combo)),
    )
