"""Output formatting for seatalloc."""

from seatalloc.models import ReoptimizationResult, Seat
from seatalloc.timeline import SeatOccupancy, is_service_seat

REOPT_MESSAGES = {
    "no-route": "Select a route before reassigning seats.",
    "no-candidates": "No automatically assigned seats to reoptimize.",
    "missing-segment": "Fill in the segment for automatically assigned seats first.",
    "segment-not-on-route": "The selected segment is not on the current route.",
    "invalid-segment": "The selected segment is invalid. Check the stop order.",
    "no-availability": "No seat arrangement is available for the selected segments.",
    "already-optimal": "Automatically assigned seats are already optimal.",
    "needs-reopt": "A better seat arrangement is available.",
}


def _seat_position(seat: Seat) -> str:
    row = "?" if seat.row is None else seat.row
    col = "?" if seat.seat_col is None else seat.seat_col
    return f"row {row}, col {col}"


def format_selection(seats: list[Seat], board_at: str, exit_at: str, count: int) -> str:
    """Format the seats chosen for a segment."""
    lines: list[str] = [f"=== Seats for {board_at} → {exit_at} ==="]
    if not seats:
        lines.append("No seats available for this segment.")
        return "\n".join(lines)

    for seat in seats:
        kind = "" if seat.seat_type == "normal" else f" [{seat.seat_type}]"
        lines.append(f"  - {seat.label or f'#{seat.id}'} ({_seat_position(seat)}){kind}")
    if len(seats) < count:
        lines.append(f"Only {len(seats)} of {count} requested seats could be assigned.")
    return "\n".join(lines)


def format_reoptimization(result: ReoptimizationResult) -> str:
    """Format a reoptimization result with its proposed moves."""
    lines: list[str] = [f"Status: {result.status}", REOPT_MESSAGES.get(result.status, "")]
    if result.needs_reopt:
        lines.append("")
        lines.append("=== Proposed Moves ===")
        for move in result.moves:
            lines.append(f"  {move.from_label} → {move.to_label}  ({move.board} → {move.exit})")
        lines.append("")
        lines.append(f"Signature: {result.signature}")
    return "\n".join(lines)


def format_moves_csv(result: ReoptimizationResult) -> str:
    """Format every assignment of a proposal as CSV for export."""
    lines: list[str] = ["from_seat,to_seat,board,exit,changed"]
    for a in result.assignments:
        lines.append(
            f"{a.from_seat.id},{a.to_seat.id},{a.board},{a.exit},{'yes' if a.changed else 'no'}"
        )
    return "\n".join(lines)


def format_timeline(occupancy: SeatOccupancy) -> str:
    """Format the occupancy matrix as a grid, one column per leg."""
    labels = [seat.label or f"#{seat.id}" for seat in occupancy.seats]
    label_width = max([len("Seat")] + [len(label) for label in labels])

    lines = ["=== Seat Timeline ==="]
    lines.append("Legs: " + ", ".join(f"{i + 1}={leg}" for i, leg in enumerate(occupancy.legs)))
    header = "Seat".ljust(label_width) + " | " + " ".join(
        str(i + 1).rjust(2) for i in range(len(occupancy.legs))
    )
    lines.append(header)
    lines.append("-" * len(header))

    for seat, label, row in zip(occupancy.seats, labels, occupancy.matrix):
        cells = []
        for count in row:
            if count == 0:
                cells.append(" .")
            elif count == 1:
                cells.append(" #")
            else:
                cells.append(" !")  # overlapping bookings
        suffix = "  (service)" if is_service_seat(seat) else ""
        lines.append(label.ljust(label_width) + " | " + " ".join(cells) + suffix)

    loads = occupancy.leg_loads()
    lines.append("-" * len(header))
    lines.append("Load".ljust(label_width) + " | " + " ".join(str(int(n)).rjust(2) for n in loads))
    lines.append(f"Utilization: {occupancy.utilization():.0%}")

    conflicts = occupancy.conflicts()
    if conflicts:
        lines.append("Overlapping bookings on seats: " + ", ".join(str(c) for c in conflicts))
    return "\n".join(lines)
