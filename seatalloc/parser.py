"""YAML snapshot parsing for seatalloc."""

from pathlib import Path
from typing import Any

import yaml

from seatalloc.models import Booking, PendingPassenger, Seat, Snapshot

PENDING_ORIGINS = {"auto", "manual"}


def _optional_int(entry: dict[str, Any], key: str, where: str) -> int | None:
    value = entry.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{where}: {key} must be a non-negative integer, got {value!r}")
    return value


def _parse_booking(entry: Any, where: str) -> Booking:
    if not isinstance(entry, dict):
        raise ValueError(f"{where}: expected a mapping, got {entry!r}")
    try:
        board_at = str(entry["board_at"])
        exit_at = str(entry["exit_at"])
    except KeyError as e:
        raise ValueError(f"{where}: missing {e.args[0]}") from e
    status = entry.get("status", "active")
    if status is not None and not isinstance(status, str):
        raise ValueError(f"{where}: status must be a string, got {status!r}")
    return Booking(
        board_at=board_at,
        exit_at=exit_at,
        status=status,
        name=str(entry.get("name", "")),
        reservation_id=entry.get("reservation_id"),
    )


def _parse_seat(entry: Any, where: str) -> Seat:
    if not isinstance(entry, dict) or "id" not in entry:
        raise ValueError(f"{where}: every seat needs an id")
    passengers = entry.get("passengers") or []
    return Seat(
        id=entry["id"],
        label=str(entry.get("label", "")),
        row=_optional_int(entry, "row", where),
        seat_col=_optional_int(entry, "seat_col", where),
        seat_type=str(entry.get("seat_type") or "normal"),
        passengers=[
            _parse_booking(p, f"{where}, passenger {i + 1}") for i, p in enumerate(passengers)
        ],
    )


def _parse_pending(entry: Any, where: str) -> PendingPassenger:
    if not isinstance(entry, dict) or "seat_id" not in entry:
        raise ValueError(f"{where}: every pending passenger needs a seat_id")
    origin = entry.get("origin", "manual")
    if origin not in PENDING_ORIGINS:
        raise ValueError(f"{where}: origin must be one of {sorted(PENDING_ORIGINS)}, got {origin!r}")
    return PendingPassenger(
        seat_id=entry["seat_id"],
        board_at=entry.get("board_at"),
        exit_at=entry.get("exit_at"),
        origin=origin,
        reservation_id=entry.get("reservation_id"),
        name=str(entry.get("name", "")),
    )


def parse_snapshot_data(data: Any) -> Snapshot:
    """Build a Snapshot from already-loaded YAML/JSON data."""
    if not isinstance(data, dict):
        raise ValueError("Snapshot must be a mapping with 'stops' and 'seats'")

    stops = [str(s) for s in data.get("stops") or []]
    seats = [_parse_seat(s, f"seat {i + 1}") for i, s in enumerate(data.get("seats") or [])]
    pending = [
        _parse_pending(p, f"pending {i + 1}") for i, p in enumerate(data.get("pending") or [])
    ]
    held = set(data.get("held_seat_ids") or [])

    return Snapshot(stops=stops, seats=seats, pending=pending, held_seat_ids=held)


def parse_snapshot(snapshot_path: Path) -> Snapshot:
    """Parse a snapshot file. JSON files are accepted too, being valid YAML."""
    with snapshot_path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return parse_snapshot_data(data)


def layout_columns(layout: str) -> list[int]:
    """
    Seat columns for a layout such as "2+2" or "2+1".

    Each "+" is an aisle and takes up one column number, so "2+1" gives
    columns 1, 2 and 4.
    """
    try:
        blocks = [int(part) for part in layout.split("+")]
    except ValueError as e:
        raise ValueError(f"Invalid layout {layout!r}, expected something like 2+2") from e
    if not blocks or any(b <= 0 for b in blocks):
        raise ValueError(f"Invalid layout {layout!r}, expected something like 2+2")

    columns: list[int] = []
    col = 1
    for block in blocks:
        columns.extend(range(col, col + block))
        col += block + 1
    return columns


def build_layout(rows: int, layout: str = "2+2") -> list[dict[str, Any]]:
    """Seat entries for a coach: driver and guide on row 0, passengers from row 1."""
    columns = layout_columns(layout)
    seats: list[dict[str, Any]] = [
        {"id": "driver", "label": "Driver", "row": 0, "seat_col": columns[0], "seat_type": "driver"},
        {"id": "guide", "label": "Guide", "row": 0, "seat_col": columns[-1], "seat_type": "guide"},
    ]
    number = 1
    for row in range(1, rows + 1):
        for col in columns:
            seats.append(
                {"id": number, "label": str(number), "row": row, "seat_col": col, "passengers": []}
            )
            number += 1
    return seats


def create_snapshot_template(
    output_path: Path,
    rows: int,
    layout: str = "2+2",
    stops: list[str] | None = None,
):
    """Write an empty snapshot for a coach layout."""
    template = {
        "stops": stops or ["Start", "Middle", "End"],
        "seats": build_layout(rows, layout),
        "pending": [],
        "held_seat_ids": [],
    }

    header = f"""\
# Trip snapshot for seatalloc
# Layout: {layout}, {rows} passenger rows
#
# stops: route stops in travel order
# seats: physical seats; add bookings under "passengers":
#   - board_at: Start
#     exit_at: Middle
#     status: active        # anything else is ignored
# pending: unsaved passengers currently bound to a seat:
#   - seat_id: 3
#     board_at: Start
#     exit_at: End
#     origin: auto          # auto (engine placed) or manual
# held_seat_ids: seats held by other operators

"""

    with output_path.open("w", encoding="utf-8") as f:
        f.write(header)
        yaml.dump(template, f, default_flow_style=False, sort_keys=False, allow_unicode=True)
