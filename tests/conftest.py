"""
pytest configuration and shared fixtures
"""
import sys
from pathlib import Path

import pytest

# Make the package importable without installing it
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from seatalloc.models import Booking, Seat  # noqa: E402
from seatalloc.parser import build_layout, parse_snapshot_data  # noqa: E402


def _make_seat(seat_id, row=None, col=None, label=None, bookings=(), seat_type="normal"):
    passengers = []
    for booking in bookings:
        if len(booking) == 3:
            board_at, exit_at, status = booking
        else:
            (board_at, exit_at), status = booking, "active"
        passengers.append(Booking(board_at=board_at, exit_at=exit_at, status=status))
    return Seat(
        id=seat_id,
        label=str(seat_id) if label is None else label,
        row=row,
        seat_col=col,
        seat_type=seat_type,
        passengers=passengers,
    )


@pytest.fixture
def make_seat():
    """Factory for seats; bookings are (board, exit) or (board, exit, status) tuples."""
    return _make_seat


@pytest.fixture
def stops():
    """A four-stop route"""
    return ["A", "B", "C", "D"]


@pytest.fixture
def coach(stops):
    """Empty 2+1 coach with seven passenger rows (ids 1-21) plus driver and guide"""
    snapshot = parse_snapshot_data({"stops": stops, "seats": build_layout(7, "2+1")})
    return snapshot.seats


@pytest.fixture
def seat_by_id(coach):
    return {seat.id: seat for seat in coach}
