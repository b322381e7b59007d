"""
Tests for the availability grid builder.
"""

from datetime import date, datetime

from models.availability import (
    AvailabilityGrid, build_availability_grid, resolve_cell, start_of_week, week_days
)
from models.entities import Booking, Room


ROOM_A = Room(id='r1', name='Sunrise Suite', location_id='l1')
ROOM_B = Room(id='r2', name='Garden Retreat', location_id='l1')


def make_booking(booking_id, room_id, start, end, status='booked', guest='Guest'):
    return Booking(
        id=booking_id, room_id=room_id, guest_name=guest,
        start_date=start, end_date=end, status=status
    )


class TestWeekDays:
    """Tests for visible day computation."""

    def test_monday_start(self):
        """Week containing a Wednesday starts on the Monday before."""
        days = week_days(date(2024, 5, 15))
        assert days[0] == date(2024, 5, 13)
        assert days[-1] == date(2024, 5, 19)
        assert len(days) == 7

    def test_sunday_start(self):
        """Week start is configurable."""
        assert start_of_week(date(2024, 5, 15), week_start=6) == date(2024, 5, 12)

    def test_anchor_on_week_start(self):
        """Anchor that is already the first day stays put."""
        assert start_of_week(date(2024, 5, 13)) == date(2024, 5, 13)

    def test_datetime_anchor(self):
        """Time of day is ignored."""
        assert start_of_week(datetime(2024, 5, 15, 23, 59)) == date(2024, 5, 13)


class TestResolveCell:
    """Tests for single cell status."""

    def test_available_when_no_booking(self):
        cell = resolve_cell('r1', date(2024, 5, 15), [])
        assert cell.status == 'available'
        assert cell.booking is None

    def test_inclusive_end_day(self):
        """Both start and end days are occupied."""
        booking = make_booking('b1', 'r1', date(2024, 5, 14), date(2024, 5, 16))
        assert resolve_cell('r1', date(2024, 5, 14), [booking]).status == 'booked'
        assert resolve_cell('r1', date(2024, 5, 16), [booking]).status == 'booked'
        assert resolve_cell('r1', date(2024, 5, 17), [booking]).status == 'available'

    def test_booked_beats_maintenance_and_pending(self):
        """Priority is booked > maintenance > pending regardless of input order."""
        pending = make_booking('b1', 'r1', date(2024, 5, 15), date(2024, 5, 15), 'pending')
        maintenance = make_booking('b2', 'r1', date(2024, 5, 15), date(2024, 5, 15), 'maintenance')
        booked = make_booking('b3', 'r1', date(2024, 5, 15), date(2024, 5, 15), 'booked')

        cell = resolve_cell('r1', date(2024, 5, 15), [pending, maintenance, booked])
        assert cell.status == 'booked'
        assert cell.booking is booked

        cell = resolve_cell('r1', date(2024, 5, 15), [pending, maintenance])
        assert cell.status == 'maintenance'
        assert cell.booking is maintenance

    def test_first_booking_with_winning_status(self):
        """Ties on status pick the first booking in input order."""
        first = make_booking('b1', 'r1', date(2024, 5, 14), date(2024, 5, 15), guest='First')
        second = make_booking('b2', 'r1', date(2024, 5, 15), date(2024, 5, 16), guest='Second')

        cell = resolve_cell('r1', date(2024, 5, 15), [first, second])
        assert cell.booking is first

    def test_other_room_ignored(self):
        booking = make_booking('b1', 'r2', date(2024, 5, 15), date(2024, 5, 15))
        assert resolve_cell('r1', date(2024, 5, 15), [booking]).status == 'available'

    def test_datetime_endpoints_normalized(self):
        """Datetime endpoints are compared by calendar day."""
        booking = make_booking(
            'b1', 'r1', datetime(2024, 5, 15, 14, 0), datetime(2024, 5, 16, 10, 0)
        )
        assert resolve_cell('r1', date(2024, 5, 16), [booking]).status == 'booked'


class TestBuildAvailabilityGrid:
    """Tests for full grid construction."""

    def test_shape_and_order(self):
        """One row per room in input order, one cell per day."""
        days = week_days(date(2024, 5, 15))
        grid = build_availability_grid([ROOM_B, ROOM_A], [], days)

        assert [row.room for row in grid.rows] == [ROOM_B, ROOM_A]
        assert all(len(row.cells) == 7 for row in grid.rows)
        assert grid.rows[0].cells[0].date == date(2024, 5, 13)

    def test_scenario(self):
        """Booking spanning part of the week marks only its days."""
        days = week_days(date(2024, 5, 15))
        booking = make_booking('b1', 'r1', date(2024, 5, 12), date(2024, 5, 14), guest='Alice')

        grid = build_availability_grid([ROOM_A, ROOM_B], [booking], days)

        statuses = [cell.status for cell in grid.rows[0].cells]
        assert statuses == ['booked', 'booked'] + ['available'] * 5
        assert all(cell.status == 'available' for cell in grid.rows[1].cells)

    def test_deterministic(self):
        """Same inputs produce equal grids."""
        days = week_days(date(2024, 5, 15))
        bookings = [make_booking('b1', 'r1', date(2024, 5, 13), date(2024, 5, 20), 'pending')]

        first = build_availability_grid([ROOM_A], bookings, days)
        second = build_availability_grid([ROOM_A], bookings, days)
        assert first == second

    def test_empty_rooms(self):
        """No rooms gives an explicit empty grid."""
        grid = build_availability_grid([], [], week_days(date(2024, 5, 15)))
        assert isinstance(grid, AvailabilityGrid)
        assert grid.is_empty is True
        assert grid.to_dict()['is_empty'] is True

    def test_summary(self):
        """Per-day counts of available and occupied rooms."""
        days = week_days(date(2024, 5, 15))
        booking = make_booking('b1', 'r1', date(2024, 5, 13), date(2024, 5, 13), 'maintenance')

        summary = build_availability_grid([ROOM_A, ROOM_B], [booking], days).summary()

        assert summary[date(2024, 5, 13)] == {
            'total': 2, 'available': 1, 'occupied': 1, 'occupancy_rate': 50.0
        }
        assert summary[date(2024, 5, 14)]['occupied'] == 0

    def test_to_dict_uses_iso_dates(self):
        days = week_days(date(2024, 5, 15))
        data = build_availability_grid([ROOM_A], [], days).to_dict()

        assert data['days'][0] == '2024-05-13'
        assert data['rows'][0]['room']['name'] == 'Sunrise Suite'
        assert '2024-05-13' in data['summary']
