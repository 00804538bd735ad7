"""Snapshot parsing and template tests"""
import json

import pytest

from seatalloc.parser import (
    build_layout,
    create_snapshot_template,
    layout_columns,
    parse_snapshot,
    parse_snapshot_data,
)

SNAPSHOT_YAML = """\
stops: [Cluj, Turda, Alba Iulia, Sibiu]
seats:
  - id: 1
    label: "1"
    row: 1
    seat_col: 1
    passengers:
      - board_at: Cluj
        exit_at: Turda
        name: Ana
      - board_at: Turda
        exit_at: Sibiu
        status: cancelled
  - id: 2
    label: "2"
    row: 1
    seat_col: 2
  - id: d
    label: Driver
    seat_type: driver
pending:
  - seat_id: 2
    board_at: Cluj
    exit_at: Sibiu
    origin: auto
held_seat_ids: [1]
"""


def test_parse_yaml_snapshot(tmp_path):
    path = tmp_path / "trip.yaml"
    path.write_text(SNAPSHOT_YAML, encoding="utf-8")

    snapshot = parse_snapshot(path)

    assert snapshot.stops == ["Cluj", "Turda", "Alba Iulia", "Sibiu"]
    assert [s.id for s in snapshot.seats] == [1, 2, "d"]
    first = snapshot.seats[0]
    assert (first.row, first.seat_col, first.seat_type) == (1, 1, "normal")
    assert [(p.board_at, p.status) for p in first.passengers] == [("Cluj", "active"), ("Turda", "cancelled")]
    assert first.passengers[0].name == "Ana"
    assert snapshot.seats[2].row is None
    assert snapshot.pending[0].origin == "auto"
    assert snapshot.held_seat_ids == {1}


def test_parse_json_snapshot(tmp_path):
    path = tmp_path / "trip.json"
    path.write_text(json.dumps({"stops": ["A", "B"], "seats": [{"id": 5, "row": 2}]}), encoding="utf-8")

    snapshot = parse_snapshot(path)

    assert snapshot.seats[0].id == 5
    assert snapshot.seats[0].seat_col is None
    assert snapshot.pending == []


@pytest.mark.parametrize(
    "data, message",
    [
        ([], "mapping"),
        ({"seats": [{"label": "1"}]}, "seat 1"),
        ({"seats": [{"id": 1, "row": -1}]}, "row"),
        ({"seats": [{"id": 1, "passengers": [{"board_at": "A"}]}]}, "exit_at"),
        ({"seats": [{"id": 1, "passengers": [{"board_at": "A", "exit_at": "B", "status": 3}]}]}, "status"),
        ({"pending": [{"seat_id": 1, "origin": "robot"}]}, "origin"),
    ],
)
def test_malformed_snapshots(data, message):
    with pytest.raises(ValueError, match=message):
        parse_snapshot_data(data)


def test_layout_columns():
    assert layout_columns("2+2") == [1, 2, 4, 5]
    assert layout_columns("2+1") == [1, 2, 4]
    assert layout_columns("3") == [1, 2, 3]
    with pytest.raises(ValueError):
        layout_columns("2+x")
    with pytest.raises(ValueError):
        layout_columns("2+0")


def test_build_layout_numbers_seats_row_by_row():
    seats = build_layout(2, "2+1")
    assert [(s["id"], s["row"], s["seat_col"]) for s in seats[2:]] == [
        (1, 1, 1), (2, 1, 2), (3, 1, 4), (4, 2, 1), (5, 2, 2), (6, 2, 4),
    ]
    assert seats[0]["seat_type"] == "driver"
    assert seats[1]["seat_type"] == "guide"


def test_template_round_trip(tmp_path):
    path = tmp_path / "template.yaml"
    create_snapshot_template(path, rows=3, layout="2+2", stops=["X", "Y", "Z"])

    assert path.read_text(encoding="utf-8").startswith("# Trip snapshot for seatalloc")
    snapshot = parse_snapshot(path)
    assert snapshot.stops == ["X", "Y", "Z"]
    assert len(snapshot.seats) == 3 * 4 + 2
