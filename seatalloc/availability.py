"""Seat classification and segment availability for seatalloc."""

import logging
import math
import re
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field

from seatalloc.models import Booking, Seat
from seatalloc.normalize import intervals_overlap, resolve_segment

logger = logging.getLogger(__name__)

DRIVER_LABEL = re.compile(r"driver|șofer|sofer", re.IGNORECASE)
GUIDE_LABEL = re.compile(r"guide|ghid", re.IGNORECASE)
LABEL_NUMBER = re.compile(r"\d+")


def is_seat_driver(seat: Seat) -> bool:
    return seat.seat_type == "driver" or bool(DRIVER_LABEL.search(seat.label or ""))


def is_seat_guide(seat: Seat) -> bool:
    return bool(GUIDE_LABEL.search(seat.label or "")) or bool(GUIDE_LABEL.search(seat.seat_type or ""))


def label_number(label: str | None) -> float:
    """First run of digits in a seat label, or infinity when there is none."""
    match = LABEL_NUMBER.search(label or "")
    if not match:
        return math.inf
    return int(match.group())


def seat_sort_key(seat: Seat) -> tuple:
    """Physical seat order: row, column, label number, then label and id."""
    return (seat.sort_row, seat.sort_col, label_number(seat.label), seat.label or "", str(seat.id))


def is_active(booking: Booking) -> bool:
    """Only bookings with status "active" (or no status) occupy a seat."""
    status = booking.status
    if status is None:
        return True
    if not isinstance(status, str):
        raise TypeError(f"Booking status must be a string, got {type(status).__name__}")
    return status == "active"


def active_intervals(seat: Seat, stops: Sequence[str]) -> Iterator[tuple[int, int]]:
    """Yield the resolved intervals of a seat's active bookings, skipping unresolvable ones."""
    for booking in seat.passengers or []:
        if not is_active(booking):
            continue
        interval = resolve_segment(stops, booking.board_at, booking.exit_at)
        if interval is None:
            continue
        yield interval


def is_seat_free_for_interval(seat: Seat, b: int, e: int, stops: Sequence[str]) -> bool:
    for pb, pe in active_intervals(seat, stops):
        if intervals_overlap(pb, pe, b, e):
            return False
    return True


def is_seat_available_for_segment(
    seat: Seat,
    board_at: str,
    exit_at: str,
    stops: Sequence[str],
) -> bool:
    """True when no active booking on the seat overlaps the requested segment."""
    interval = resolve_segment(stops, board_at, exit_at)
    if interval is None:
        return False
    return is_seat_free_for_interval(seat, *interval, stops)


@dataclass
class FreeSeats:
    """Seats free for one segment, split into ordinary rows and guide seats."""

    b: int
    e: int
    rows: dict[int, list[Seat]] = field(default_factory=dict)
    guides: list[Seat] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return self.b != -1

    def flatten(self) -> list[Seat]:
        return [seat for row_seats in self.rows.values() for seat in row_seats]


def build_free_seats(
    seats: Iterable[Seat] | None,
    board_at: str,
    exit_at: str,
    stops: Sequence[str],
) -> FreeSeats:
    """
    Collect the seats free for ``[board_at, exit_at)``.

    Driver seats are never offered. Guide seats go to a separate pool.
    Ordinary seats are grouped by row (ascending) and ordered left to right
    within each row.
    """
    interval = resolve_segment(stops, board_at, exit_at)
    if interval is None:
        logger.debug("Segment invalid: %r -> %r on %r", board_at, exit_at, stops)
        return FreeSeats(b=-1, e=-1)
    b, e = interval

    usable: list[Seat] = []
    guides: list[Seat] = []
    for seat in seats or []:
        if seat is None or is_seat_driver(seat):
            continue
        if not is_seat_free_for_interval(seat, b, e, stops):
            continue
        if is_seat_guide(seat):
            guides.append(seat)
        else:
            usable.append(seat)

    rows: dict[int, list[Seat]] = {}
    for seat in sorted(usable, key=seat_sort_key):
        rows.setdefault(seat.sort_row, []).append(seat)
    guides.sort(key=seat_sort_key)

    logger.debug(
        "Free seats for %s -> %s: %s; guides: %s",
        board_at,
        exit_at,
        {row: [s.label for s in row_seats] for row, row_seats in rows.items()},
        [g.label for g in guides],
    )
    return FreeSeats(b=b, e=e, rows=rows, guides=guides)
