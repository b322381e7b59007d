"""
Database seed data.
Admin account for fresh installations and the sample property data used to
populate an empty store.
"""

from datetime import date, timedelta

from flask import current_app
from werkzeug.security import generate_password_hash

from utils.helpers import generate_id


# Sample property: locations with their rooms, in display order
DEFAULT_LOCATIONS = [
    ('1M House', ['Sunrise Suite', 'Ocean View Deluxe', 'Garden Retreat']),
    ('Hillside Annex', ['Mountain Hideaway', 'City Lights Loft']),
]

# (room name, guest name, start offset, end offset, status), offsets in days from today
DEFAULT_BOOKINGS = [
    ('Sunrise Suite', 'Alice Wonderland', -2, 1, 'booked'),
    ('Garden Retreat', 'Bob The Builder', 0, 3, 'pending'),
    ('City Lights Loft', 'Charlie Brown', 2, 4, 'booked'),
]


def iter_seed_bookings(today: date):
    """
    Yield sample bookings anchored on today.

    Args:
        today: Reference day

    Yields:
        tuple: (room_name, guest_name, start_date, end_date, status)
    """
    for room_name, guest_name, start_offset, end_offset, status in DEFAULT_BOOKINGS:
        yield (
            room_name,
            guest_name,
            today + timedelta(days=start_offset),
            today + timedelta(days=end_offset),
            status,
        )


def seed_database(db):
    """Insert the initial admin account."""
    config = current_app.config

    db.execute('''
        INSERT INTO users (username, email, password_hash, full_name, is_admin)
        VALUES (?, ?, ?, ?, 1)
    ''', (
        config.get('ADMIN_USERNAME', 'admin'),
        config.get('ADMIN_EMAIL', 'admin@example.com'),
        generate_password_hash(config.get('ADMIN_PASSWORD', 'admin123')),
        'Administrator'
    ))


def seed_initial_data(db, today: date) -> dict:
    """
    Idempotently seed sample locations, rooms and bookings.
    Does nothing if any location already exists.

    Args:
        db: Database connection
        today: Reference day for sample bookings

    Returns:
        dict: {'seeded': bool, 'locations': int, 'rooms': int, 'bookings': int}
    """
    existing = db.execute('SELECT COUNT(*) FROM locations').fetchone()[0]
    if existing > 0:
        return {'seeded': False, 'locations': 0, 'rooms': 0, 'bookings': 0}

    room_ids = {}
    for location_name, room_names in DEFAULT_LOCATIONS:
        location_id = generate_id()
        db.execute('INSERT INTO locations (id, name) VALUES (?, ?)', (location_id, location_name))

        for room_name in room_names:
            room_id = generate_id()
            db.execute('''
                INSERT INTO rooms (id, name, location_id)
                VALUES (?, ?, ?)
            ''', (room_id, room_name, location_id))
            room_ids[room_name] = room_id

    booking_count = 0
    for room_name, guest_name, start_date, end_date, status in iter_seed_bookings(today):
        db.execute('''
            INSERT INTO bookings (id, room_id, guest_name, start_date, end_date, status)
            VALUES (?, ?, ?, ?, ?, ?)
        ''', (generate_id(), room_ids[room_name], guest_name,
              start_date.isoformat(), end_date.isoformat(), status))
        booking_count += 1

    db.commit()

    return {
        'seeded': True,
        'locations': len(DEFAULT_LOCATIONS),
        'rooms': len(room_ids),
        'bookings': booking_count,
    }
