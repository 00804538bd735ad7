"""Data models for seatalloc."""

from dataclasses import dataclass, field
from typing import Literal

# Sort position used when a seat has no row or column.
MISSING_POSITION = 9999

ReoptimizationStatus = Literal[
    "no-route",
    "no-candidates",
    "missing-segment",
    "segment-not-on-route",
    "invalid-segment",
    "no-availability",
    "already-optimal",
    "needs-reopt",
]

AutoAddStatus = Literal["no-route", "no-seats", "no-availability", "insufficient", "ok"]


@dataclass
class Booking:
    """A passenger occupying a seat between two stops."""

    board_at: str
    exit_at: str
    status: str | None = "active"  # anything other than "active" is ignored
    name: str = ""
    reservation_id: int | str | None = None


@dataclass
class Seat:
    """A physical seat on the vehicle."""

    id: int | str
    label: str = ""
    row: int | None = None
    seat_col: int | None = None
    seat_type: str = "normal"
    passengers: list[Booking] = field(default_factory=list)

    @property
    def sort_row(self) -> int:
        return self.row if self.row is not None else MISSING_POSITION

    @property
    def sort_col(self) -> int:
        return self.seat_col if self.seat_col is not None else MISSING_POSITION


@dataclass
class PendingPassenger:
    """An unsaved passenger bound to a currently selected seat."""

    seat_id: int | str
    board_at: str | None = None
    exit_at: str | None = None
    origin: Literal["auto", "manual"] = "manual"
    reservation_id: int | str | None = None
    name: str = ""


@dataclass
class Candidate:
    """A free seat scored for one selection call."""

    seat: Seat
    row: int | None
    col: int | None
    segment_score: int
    front_score: int
    order_key: tuple

    @property
    def sort_row(self) -> int:
        return self.row if self.row is not None else MISSING_POSITION


@dataclass
class SeatAssignment:
    """One passenger's current seat paired with its proposed seat."""

    from_seat: Seat
    to_seat: Seat
    board: str
    exit: str

    @property
    def changed(self) -> bool:
        return self.from_seat.id != self.to_seat.id


@dataclass
class Move:
    """Human-readable seat change."""

    from_label: str
    to_label: str
    board: str
    exit: str


@dataclass
class ReoptimizationResult:
    """Outcome of one reoptimization pass."""

    status: ReoptimizationStatus
    assignments: list[SeatAssignment] = field(default_factory=list)
    moves: list[Move] = field(default_factory=list)
    segments: list[tuple[str, str]] = field(default_factory=list)
    signature: str | None = None

    @property
    def needs_reopt(self) -> bool:
        return self.status == "needs-reopt"


@dataclass
class AutoAddResult:
    """Outcome of adding passengers with automatic seat selection."""

    status: AutoAddStatus
    seats: list[Seat] = field(default_factory=list)
    pending: list[PendingPassenger] = field(default_factory=list)


@dataclass
class Snapshot:
    """Point-in-time view of a trip's seats and in-progress selection."""

    stops: list[str]
    seats: list[Seat]
    pending: list[PendingPassenger] = field(default_factory=list)
    held_seat_ids: set[int | str] = field(default_factory=set)
