"""Per-seat occupancy along the route."""

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from seatalloc.availability import active_intervals, is_seat_driver, is_seat_guide, label_number
from seatalloc.models import Seat


def is_service_seat(seat: Seat) -> bool:
    return is_seat_driver(seat) or is_seat_guide(seat)


def timeline_order_key(seat: Seat) -> tuple:
    """Service seats last, then by label number, row, column and label."""
    return (
        is_service_seat(seat),
        label_number(seat.label),
        seat.sort_row,
        seat.sort_col,
        seat.label or "",
    )


@dataclass
class SeatOccupancy:
    """
    Active booking counts per seat and leg.

    ``matrix[i, j]`` is the number of active bookings on ``seats[i]`` that
    cover leg ``j``, the stretch between ``stops[j]`` and ``stops[j + 1]``.
    """

    stops: list[str]
    seats: list[Seat]
    matrix: np.ndarray

    @property
    def legs(self) -> list[str]:
        return [f"{a} → {b}" for a, b in zip(self.stops, self.stops[1:])]

    def _passenger_rows(self) -> np.ndarray:
        return np.array([not is_service_seat(seat) for seat in self.seats], dtype=bool)

    def leg_loads(self) -> np.ndarray:
        """Number of occupied seats on each leg."""
        return (self.matrix > 0).sum(axis=0)

    def utilization(self) -> float:
        """Fraction of passenger seat-legs that are occupied."""
        passenger = self.matrix[self._passenger_rows()]
        if passenger.size == 0:
            return 0.0
        return float((passenger > 0).mean())

    def conflicts(self) -> list[int | str]:
        """Ids of seats carrying overlapping active bookings."""
        overbooked = (self.matrix > 1).any(axis=1)
        return [seat.id for seat, flag in zip(self.seats, overbooked) if flag]

    def free_runs(self, seat_id: int | str) -> list[tuple[str, str]]:
        """Maximal free stretches of a seat as (board, exit) stop pairs."""
        idx = next((i for i, seat in enumerate(self.seats) if seat.id == seat_id), None)
        if idx is None:
            raise KeyError(seat_id)

        runs: list[tuple[str, str]] = []
        start: int | None = None
        for leg, count in enumerate(self.matrix[idx]):
            if count == 0 and start is None:
                start = leg
            elif count > 0 and start is not None:
                runs.append((self.stops[start], self.stops[leg]))
                start = None
        if start is not None:
            runs.append((self.stops[start], self.stops[-1]))
        return runs


def build_occupancy(seats: Sequence[Seat], stops: Sequence[str]) -> SeatOccupancy:
    """Build the occupancy matrix for a route with at least two stops."""
    route = list(stops or [])
    if len(route) < 2:
        raise ValueError("An occupancy timeline needs a route with at least two stops")

    ordered = sorted((seat for seat in seats if seat is not None), key=timeline_order_key)
    matrix = np.zeros((len(ordered), len(route) - 1), dtype=np.int32)
    for i, seat in enumerate(ordered):
        for b, e in active_intervals(seat, route):
            matrix[i, b:e] += 1

    return SeatOccupancy(stops=route, seats=ordered, matrix=matrix)
