"""
Availability grid for the calendar week view.
Turns the rooms of one location and their bookings into a per-room,
per-day occupancy grid.

Pure functions: no database access, no hidden state.
"""

from dataclasses import dataclass
from datetime import date, timedelta

from models.entities import (
    OccupancyCell, STATUS_AVAILABLE, STATUS_BOOKED, STATUS_MAINTENANCE, STATUS_PENDING
)
from utils.datetime_helpers import start_of_day


# Most serious condition first. A day covered by several bookings displays
# the first status in this order that any of them carries.
CELL_STATUS_PRIORITY = (STATUS_BOOKED, STATUS_MAINTENANCE, STATUS_PENDING)


# =============================================================================
# VISIBLE DAYS
# =============================================================================

def start_of_week(anchor: date, week_start: int = 0) -> date:
    """
    Get the first day of the week containing anchor.

    Args:
        anchor: Any day in the week
        week_start: Weekday the week starts on (0 = Monday ... 6 = Sunday)

    Returns:
        date of the week start
    """
    day = start_of_day(anchor)
    offset = (day.weekday() - week_start) % 7
    return day - timedelta(days=offset)


def week_days(anchor: date, week_start: int = 0, days: int = 7) -> list:
    """
    Get the consecutive days shown for the week containing anchor.

    Args:
        anchor: Any day in the week
        week_start: Weekday the week starts on (0 = Monday)
        days: Number of days to show

    Returns:
        list of date
    """
    first = start_of_week(anchor, week_start)
    return [first + timedelta(days=i) for i in range(days)]


# =============================================================================
# GRID
# =============================================================================

@dataclass(frozen=True)
class GridRow:
    room: object
    cells: tuple

    def to_dict(self) -> dict:
        return {
            'room': self.room.to_dict(),
            'cells': [cell.to_dict() for cell in self.cells],
        }


@dataclass(frozen=True)
class AvailabilityGrid:
    days: tuple
    rows: tuple

    @property
    def is_empty(self) -> bool:
        """True when there are no rooms to show (explicit 'no rooms' state)."""
        return not self.rows

    def summary(self) -> dict:
        """
        Per-day occupancy counts.

        Returns:
            dict: {
                date: {'total': int, 'available': int, 'occupied': int,
                       'occupancy_rate': float}
            }
        """
        summary = {}
        for index, day in enumerate(self.days):
            total = len(self.rows)
            available = sum(1 for row in self.rows if row.cells[index].status == STATUS_AVAILABLE)
            occupied = total - available
            summary[day] = {
                'total': total,
                'available': available,
                'occupied': occupied,
                'occupancy_rate': round(occupied / total * 100, 1) if total > 0 else 0,
            }
        return summary

    def to_dict(self) -> dict:
        return {
            'days': [day.isoformat() for day in self.days],
            'rows': [row.to_dict() for row in self.rows],
            'is_empty': self.is_empty,
            'summary': {day.isoformat(): counts for day, counts in self.summary().items()},
        }


def resolve_cell(room_id: str, day: date, bookings: list) -> OccupancyCell:
    """
    Compute the displayed status of one room on one day.

    Args:
        room_id: Room ID
        day: Calendar day
        bookings: Candidate bookings (any room, any order)

    Returns:
        OccupancyCell with the winning status and its first booking
    """
    day = start_of_day(day)
    covering = [
        booking for booking in bookings
        if booking.room_id == room_id
        and start_of_day(booking.start_date) <= day <= start_of_day(booking.end_date)
    ]

    for status in CELL_STATUS_PRIORITY:
        for booking in covering:
            if booking.status == status:
                return OccupancyCell(date=day, room_id=room_id, status=status, booking=booking)

    return OccupancyCell(date=day, room_id=room_id, status=STATUS_AVAILABLE)


def build_availability_grid(rooms: list, bookings: list, days: list) -> AvailabilityGrid:
    """
    Build the occupancy grid: one row per room, one cell per day.

    Always rebuilt from scratch; callers recompute whenever the room set,
    the booking set or the visible week changes.

    Args:
        rooms: Rooms of the selected location, in display order
        bookings: Bookings for those rooms
        days: Visible days (see week_days)

    Returns:
        AvailabilityGrid
    """
    visible = tuple(start_of_day(day) for day in days)

    by_room = {}
    for booking in bookings:
        by_room.setdefault(booking.room_id, []).append(booking)

    rows = tuple(
        GridRow(
            room=room,
            cells=tuple(resolve_cell(room.id, day, by_room.get(room.id, [])) for day in visible),
        )
        for room in rooms
    )
    return AvailabilityGrid(days=visible, rows=rows)
