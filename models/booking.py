"""
Booking data access functions.
Handles booking CRUD operations and room/location scoped listings.

Dates are stored as YYYY-MM-DD text and returned as stored; conversion to
datetime.date happens in the data access layer.
"""

from database import get_db
from utils.datetime_helpers import parse_day
from utils.helpers import chunked, generate_id


# Maximum room IDs per "room_id IN (...)" query
DEFAULT_BATCH_SIZE = 30


def _iso_day(value) -> str:
    """Store any accepted day value as YYYY-MM-DD."""
    return parse_day(value).isoformat()


# =============================================================================
# READ
# =============================================================================

def get_bookings(room_id: str = None) -> list:
    """
    Get bookings, optionally limited to one room.

    Args:
        room_id: Filter by room (optional)

    Returns:
        List of booking dicts ordered by start date
    """
    db = get_db()
    cursor = db.cursor()

    query = 'SELECT * FROM bookings'
    params = []

    if room_id:
        query += ' WHERE room_id = ?'
        params.append(room_id)

    query += ' ORDER BY start_date, rowid'

    cursor.execute(query, params)
    return [dict(row) for row in cursor.fetchall()]


def get_bookings_for_rooms(room_ids: list, batch_size: int = DEFAULT_BATCH_SIZE) -> list:
    """
    Get bookings for a set of rooms.
    Queries in chunks of batch_size room IDs to respect the store's
    limit on "IN (...)" parameters.

    Args:
        room_ids: Room IDs
        batch_size: Maximum room IDs per query

    Returns:
        List of booking dicts ordered by start date
    """
    if not room_ids:
        return []

    db = get_db()
    cursor = db.cursor()

    bookings = []
    for chunk in chunked(room_ids, batch_size):
        placeholders = ','.join('?' * len(chunk))
        cursor.execute(f'''
            SELECT * FROM bookings
            WHERE room_id IN ({placeholders})
            ORDER BY start_date, rowid
        ''', chunk)
        bookings.extend(dict(row) for row in cursor.fetchall())

    bookings.sort(key=lambda b: b['start_date'])
    return bookings


def get_bookings_by_location(location_id: str, batch_size: int = DEFAULT_BATCH_SIZE) -> list:
    """
    Get all bookings for the rooms of a location.

    Args:
        location_id: Location ID
        batch_size: Maximum room IDs per query

    Returns:
        List of booking dicts ordered by start date
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT id FROM rooms WHERE location_id = ?', (location_id,))
    room_ids = [row['id'] for row in cursor.fetchall()]

    return get_bookings_for_rooms(room_ids, batch_size=batch_size)


def get_booking_by_id(booking_id: str) -> dict:
    """
    Get booking by ID.

    Args:
        booking_id: Booking ID

    Returns:
        Booking dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM bookings WHERE id = ?', (booking_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


# =============================================================================
# CREATE / UPDATE / DELETE
# =============================================================================

def create_booking(
    room_id: str,
    guest_name: str,
    start_date,
    end_date,
    status: str = 'booked'
) -> str:
    """
    Create new booking. Overlaps are not checked here.

    Args:
        room_id: Room ID
        guest_name: Guest name
        start_date: First day (date or YYYY-MM-DD)
        end_date: Last day, inclusive (date or YYYY-MM-DD)
        status: 'booked', 'pending' or 'maintenance'

    Returns:
        New booking ID
    """
    db = get_db()
    booking_id = generate_id()

    db.execute('''
        INSERT INTO bookings (id, room_id, guest_name, start_date, end_date, status)
        VALUES (?, ?, ?, ?, ?, ?)
    ''', (booking_id, room_id, guest_name, _iso_day(start_date), _iso_day(end_date), status))

    db.commit()
    return booking_id


def update_booking(booking_id: str, **kwargs) -> bool:
    """
    Update booking fields.

    Args:
        booking_id: Booking ID to update
        **kwargs: Fields to update (room_id, guest_name, start_date, end_date, status)

    Returns:
        True if a row was updated
    """
    db = get_db()

    allowed_fields = ['room_id', 'guest_name', 'start_date', 'end_date', 'status']
    updates = []
    values = []

    for field in allowed_fields:
        if field in kwargs:
            value = kwargs[field]
            if field in ('start_date', 'end_date'):
                value = _iso_day(value)
            updates.append(f'{field} = ?')
            values.append(value)

    if not updates:
        return False

    updates.append('updated_at = CURRENT_TIMESTAMP')
    values.append(booking_id)
    query = f'UPDATE bookings SET {", ".join(updates)} WHERE id = ?'

    cursor = db.cursor()
    cursor.execute(query, values)
    db.commit()

    return cursor.rowcount > 0


def delete_booking(booking_id: str) -> bool:
    """
    Delete booking permanently.

    Args:
        booking_id: Booking ID

    Returns:
        True if deleted
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('DELETE FROM bookings WHERE id = ?', (booking_id,))
    db.commit()
    return cursor.rowcount > 0
