"""Segment availability and seat classification tests"""
import math
from itertools import combinations

import pytest

from seatalloc.availability import (
    build_free_seats,
    is_seat_available_for_segment,
    is_seat_driver,
    is_seat_guide,
    label_number,
    seat_sort_key,
)
from seatalloc.models import Booking


class TestSeatAvailability:
    def test_free_seat_is_available(self, make_seat, stops):
        assert is_seat_available_for_segment(make_seat(1), "A", "C", stops)

    def test_handoff_at_exit_stop_is_available(self, make_seat, stops):
        """A passenger boarding at B does not block a passenger leaving at B."""
        seat = make_seat("S1", bookings=[("B", "D")])
        assert is_seat_available_for_segment(seat, "A", "B", stops)

    def test_overlapping_booking_blocks(self, make_seat, stops):
        seat = make_seat("S1", bookings=[("A", "D")])
        assert not is_seat_available_for_segment(seat, "B", "C", stops)

    def test_cancelled_booking_is_ignored(self, make_seat, stops):
        seat = make_seat("S1", bookings=[("A", "D", "cancelled")])
        assert is_seat_available_for_segment(seat, "B", "C", stops)

    def test_missing_status_counts_as_active(self, make_seat, stops):
        seat = make_seat("S1")
        seat.passengers.append(Booking(board_at="A", exit_at="D", status=None))
        assert not is_seat_available_for_segment(seat, "B", "C", stops)

    def test_unresolvable_booking_is_ignored(self, make_seat, stops):
        seat = make_seat("S1", bookings=[("X", "Y"), ("D", "A")])
        assert is_seat_available_for_segment(seat, "A", "D", stops)

    def test_invalid_request_is_never_available(self, make_seat, stops):
        seat = make_seat("S1")
        assert not is_seat_available_for_segment(seat, "C", "A", stops)
        assert not is_seat_available_for_segment(seat, "A", "Z", stops)

    def test_non_string_status_is_a_programming_error(self, make_seat, stops):
        seat = make_seat("S1")
        seat.passengers.append(Booking(board_at="A", exit_at="B", status=1))
        with pytest.raises(TypeError):
            is_seat_available_for_segment(seat, "A", "D", stops)

    def test_conflict_matches_half_open_overlap(self, make_seat):
        """Available iff not (e2 <= b1 or b2 >= e1) fails for every booking."""
        route = ["A", "B", "C", "D", "E"]
        intervals = list(combinations(range(len(route)), 2))
        for b1, e1 in intervals:
            seat = make_seat("S", bookings=[(route[b1], route[e1])])
            for b2, e2 in intervals:
                conflict = not (e2 <= b1 or b2 >= e1)
                available = is_seat_available_for_segment(seat, route[b2], route[e2], route)
                assert available is not conflict, (b1, e1, b2, e2)


class TestSeatClassification:
    def test_driver_by_type_or_label(self, make_seat):
        assert is_seat_driver(make_seat("d", seat_type="driver"))
        assert is_seat_driver(make_seat("d", label="Șofer"))
        assert not is_seat_driver(make_seat(1))

    def test_guide_by_type_or_label(self, make_seat):
        assert is_seat_guide(make_seat("g", seat_type="guide"))
        assert is_seat_guide(make_seat("g", label="Ghid"))
        assert not is_seat_guide(make_seat(1))

    def test_label_number(self):
        assert label_number("A12b") == 12
        assert label_number("7") == 7
        assert label_number("Guide") == math.inf
        assert label_number(None) == math.inf

    def test_sort_key_compares_numbers_not_strings(self, make_seat):
        seats = [make_seat("x", label="10"), make_seat("y", label="2")]
        assert [s.label for s in sorted(seats, key=seat_sort_key)] == ["2", "10"]

    def test_missing_position_sorts_last(self, make_seat):
        seats = [make_seat(1), make_seat(2, row=3, col=1)]
        assert [s.id for s in sorted(seats, key=seat_sort_key)] == [2, 1]


class TestBuildFreeSeats:
    def test_partitions_and_orders_seats(self, make_seat, stops):
        seats = [
            make_seat(10, row=2, col=1, label="10"),
            make_seat(2, row=1, col=2, label="2"),
            make_seat(1, row=1, col=1, label="1"),
            make_seat("busy", row=1, col=4, bookings=[("A", "D")]),
            make_seat("driver", row=0, col=1, seat_type="driver"),
            make_seat("guide", row=0, col=4, seat_type="guide"),
        ]
        free = build_free_seats(seats, "A", "C", stops)

        assert (free.b, free.e) == (0, 2)
        assert list(free.rows) == [1, 2]
        assert [s.id for s in free.rows[1]] == [1, 2]
        assert [s.id for s in free.flatten()] == [1, 2, 10]
        assert [s.id for s in free.guides] == ["guide"]

    def test_invalid_segment_yields_nothing(self, make_seat, stops):
        free = build_free_seats([make_seat(1, row=1, col=1)], "D", "A", stops)
        assert not free.valid
        assert free.flatten() == []
        assert free.guides == []

    def test_does_not_mutate_input(self, make_seat, stops):
        seats = [make_seat(2, row=1, col=2), make_seat(1, row=1, col=1)]
        build_free_seats(seats, "A", "B", stops)
        assert [s.id for s in seats] == [2, 1]
