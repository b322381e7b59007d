"""
Database tests.
Tests database initialization, seed data and the model functions.
"""

from datetime import date

import pytest

from database import get_db, seed_initial_data
from models.booking import (
    create_booking, get_booking_by_id, get_bookings, get_bookings_by_location, update_booking
)
from models.location import create_location, delete_location, get_all_locations
from models.room import create_room, get_all_rooms
from models.user import get_user_by_username, check_password, create_user
from utils.errors import ReferentialIntegrityError


class TestSchema:
    """Tests for schema creation."""

    def test_database_tables(self, app):
        """Test that all required tables exist."""
        cursor = get_db().cursor()
        cursor.execute("SELECT name FROM sqlite_master WHERE type='table' ORDER BY name")
        tables = [row[0] for row in cursor.fetchall()]

        for table in ['users', 'locations', 'rooms', 'bookings']:
            assert table in tables, f"Table {table} should exist"

    def test_admin_user(self, app):
        """init-db creates the configured admin account."""
        admin = get_user_by_username('admin')
        assert admin is not None, "Admin user should exist"
        assert admin['is_admin'] == 1
        assert check_password(admin, 'admin123')


class TestSeedData:
    """Tests for sample data seeding."""

    def test_seed_counts(self, app):
        result = seed_initial_data(get_db(), date(2024, 5, 15))

        assert result == {'seeded': True, 'locations': 2, 'rooms': 5, 'bookings': 3}
        assert [loc['name'] for loc in get_all_locations()] == ['1M House', 'Hillside Annex']

    def test_seed_is_idempotent(self, app):
        seed_initial_data(get_db(), date(2024, 5, 15))
        result = seed_initial_data(get_db(), date(2024, 5, 15))

        assert result['seeded'] is False
        assert len(get_all_locations()) == 2

    def test_seed_bookings_relative_to_today(self, app):
        seed_initial_data(get_db(), date(2024, 5, 15))
        alice = next(b for b in get_bookings() if b['guest_name'] == 'Alice Wonderland')

        assert alice['start_date'] == '2024-05-13'
        assert alice['end_date'] == '2024-05-16'


class TestModels:
    """Tests for row-level model functions."""

    def test_booking_dates_stored_as_iso_text(self, app):
        location_id = create_location('1M House')
        room_id = create_room('Sunrise Suite', location_id)
        booking_id = create_booking(room_id, 'Alice', date(2024, 5, 10), '2024-05-12')

        booking = get_booking_by_id(booking_id)
        assert booking['start_date'] == '2024-05-10'
        assert booking['end_date'] == '2024-05-12'
        assert booking['status'] == 'booked'

    def test_update_booking(self, app):
        location_id = create_location('1M House')
        room_id = create_room('Sunrise Suite', location_id)
        booking_id = create_booking(room_id, 'Alice', '2024-05-10', '2024-05-12')

        assert update_booking(booking_id, guest_name='Alice Smith', end_date=date(2024, 5, 13)) is True
        assert update_booking('missing', guest_name='x') is False
        assert update_booking(booking_id) is False

        booking = get_booking_by_id(booking_id)
        assert booking['guest_name'] == 'Alice Smith'
        assert booking['end_date'] == '2024-05-13'

    def test_bookings_by_location_batches(self, app):
        location_id = create_location('Big House')
        for index in range(4):
            room_id = create_room(f'Room {index}', location_id)
            create_booking(room_id, f'Guest {index}', f'2024-05-1{index}', '2024-05-19')

        bookings = get_bookings_by_location(location_id, batch_size=3)
        assert [b['guest_name'] for b in bookings] == ['Guest 0', 'Guest 1', 'Guest 2', 'Guest 3']

    def test_room_listing_includes_location_name(self, app):
        location_id = create_location('1M House')
        create_room('Sunrise Suite', location_id)

        rooms = get_all_rooms(location_id)
        assert rooms[0]['location_name'] == '1M House'
        assert get_all_locations()[0]['room_count'] == 1

    def test_delete_location_with_rooms(self, app):
        location_id = create_location('1M House')
        create_room('Sunrise Suite', location_id)

        with pytest.raises(ReferentialIntegrityError):
            delete_location(location_id)

    def test_create_regular_user(self, app):
        user_id = create_user('staff', 'staff@example.com', 'secret1')
        user = get_user_by_username('staff')

        assert user['id'] == user_id
        assert user['is_admin'] == 0
