"""Segment-aware seat allocation for bus trips."""

from seatalloc.availability import is_seat_available_for_segment
from seatalloc.normalize import index_of_stop
from seatalloc.optimizer import get_best_available_seat, select_seats
from seatalloc.reoptimize import apply_reoptimization, auto_add_passengers, suggest_reoptimization

__all__ = [
    "apply_reoptimization",
    "auto_add_passengers",
    "get_best_available_seat",
    "index_of_stop",
    "is_seat_available_for_segment",
    "select_seats",
    "suggest_reoptimization",
]
