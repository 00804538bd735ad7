"""Command-line interface tests"""
import json

import pytest

from seatalloc.cli import main
from seatalloc.parser import build_layout


@pytest.fixture
def trip(tmp_path):
    """Snapshot with a 2+1 coach, one booking and three scattered auto passengers"""
    seats = build_layout(7, "2+1")
    seats[2]["passengers"] = [{"board_at": "A", "exit_at": "D"}]  # seat 1 is taken
    data = {
        "stops": ["A", "B", "C", "D"],
        "seats": seats,
        "pending": [
            {"seat_id": 13, "board_at": "A", "exit_at": "D", "origin": "auto"},
            {"seat_id": 18, "board_at": "A", "exit_at": "D", "origin": "auto"},
        ],
    }
    path = tmp_path / "trip.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_template_then_select(tmp_path, capsys):
    path = tmp_path / "coach.yaml"
    assert main(["template", str(path), "--rows", "3", "--layout", "2+1", "--stops", "A", "B", "C"]) == 0
    assert main(["select", str(path), "--board", "A", "--exit", "C", "--count", "3"]) == 0

    out = capsys.readouterr().out
    assert "Created snapshot template" in out
    assert "  - 1 (row 1, col 1)" in out
    assert "  - 3 (row 1, col 4)" in out


def test_select_skips_booked_seat(trip, capsys):
    assert main(["select", str(trip), "--board", "A", "--exit", "B"]) == 0
    assert "  - 2 (row 1, col 2)" in capsys.readouterr().out


def test_best_with_exclusion(trip, capsys):
    assert main(["best", str(trip), "--board", "A", "--exit", "D", "--exclude", "2"]) == 0
    assert "  - 3 (row 1, col 4)" in capsys.readouterr().out


def test_reoptimize(trip, capsys):
    assert main(["reoptimize", str(trip)]) == 0
    out = capsys.readouterr().out
    assert "Status: needs-reopt" in out
    assert "13 → 4" in out
    assert "18 → 5" in out


def test_reoptimize_csv(trip, capsys):
    assert main(["reoptimize", str(trip), "--csv"]) == 0
    assert capsys.readouterr().out.startswith("from_seat,to_seat,board,exit,changed")


def test_auto_add(trip, capsys):
    assert main(["auto-add", str(trip), "--add", "1"]) == 0
    out = capsys.readouterr().out
    assert "Status: ok" in out
    assert "=== Seats for A → D ===" in out


def test_timeline(trip, capsys):
    assert main(["timeline", str(trip)]) == 0
    assert "=== Seat Timeline ===" in capsys.readouterr().out


def test_params_file(trip, tmp_path, capsys):
    params = tmp_path / "params.yaml"
    params.write_text("handoff_bonus: 0\n", encoding="utf-8")
    assert main(["--params", str(params), "select", str(trip), "--board", "A", "--exit", "B"]) == 0


def test_missing_snapshot(tmp_path, capsys):
    assert main(["select", str(tmp_path / "nope.yaml"), "--board", "A", "--exit", "B"]) == 1
    assert "Snapshot file not found" in capsys.readouterr().err


def test_bad_count(trip, capsys):
    assert main(["select", str(trip), "--board", "A", "--exit", "B", "--count", "0"]) == 1


def test_no_seats_exit_code(trip, capsys):
    assert main(["select", str(trip), "--board", "D", "--exit", "A"]) == 2
    assert "No seats available" in capsys.readouterr().out
