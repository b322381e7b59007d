"""
Room data access functions.
Handles room CRUD operations.
"""

from database import get_db
from utils.errors import ReferentialIntegrityError
from utils.helpers import generate_id
from utils.messages import MESSAGES


def get_all_rooms(location_id: str = None) -> list:
    """
    Get rooms, optionally limited to one location.

    Args:
        location_id: Filter by location (optional)

    Returns:
        List of room dicts in creation order, each with location_name
    """
    db = get_db()
    cursor = db.cursor()

    query = '''
        SELECT r.*, l.name as location_name
        FROM rooms r
        LEFT JOIN locations l ON r.location_id = l.id
    '''
    params = []

    if location_id:
        query += ' WHERE r.location_id = ?'
        params.append(location_id)

    query += ' ORDER BY r.created_at, r.rowid'

    cursor.execute(query, params)
    return [dict(row) for row in cursor.fetchall()]


def get_room_by_id(room_id: str) -> dict:
    """
    Get room by ID.

    Args:
        room_id: Room ID

    Returns:
        Room dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM rooms WHERE id = ?', (room_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def create_room(name: str, location_id: str) -> str:
    """
    Create new room.

    Args:
        name: Room name
        location_id: Owning location ID

    Returns:
        New room ID
    """
    db = get_db()
    room_id = generate_id()

    db.execute('''
        INSERT INTO rooms (id, name, location_id)
        VALUES (?, ?, ?)
    ''', (room_id, name, location_id))

    db.commit()
    return room_id


def update_room(room_id: str, **kwargs) -> bool:
    """
    Update room fields.

    Args:
        room_id: Room ID to update
        **kwargs: Fields to update (name, location_id)

    Returns:
        True if a row was updated
    """
    db = get_db()

    allowed_fields = ['name', 'location_id']
    updates = []
    values = []

    for field in allowed_fields:
        if field in kwargs:
            updates.append(f'{field} = ?')
            values.append(kwargs[field])

    if not updates:
        return False

    updates.append('updated_at = CURRENT_TIMESTAMP')
    values.append(room_id)
    query = f'UPDATE rooms SET {", ".join(updates)} WHERE id = ?'

    cursor = db.cursor()
    cursor.execute(query, values)
    db.commit()

    return cursor.rowcount > 0


def delete_room(room_id: str) -> bool:
    """
    Delete room permanently.
    Only allowed if no booking references it.

    Args:
        room_id: Room ID to delete

    Returns:
        True if deleted

    Raises:
        ReferentialIntegrityError: If the room has bookings
    """
    db = get_db()
    cursor = db.cursor()

    cursor.execute('''
        SELECT COUNT(*) as count
        FROM bookings
        WHERE room_id = ?
    ''', (room_id,))

    if cursor.fetchone()['count'] > 0:
        raise ReferentialIntegrityError(MESSAGES['room_has_bookings'])

    cursor.execute('DELETE FROM rooms WHERE id = ?', (room_id,))

    db.commit()
    return cursor.rowcount > 0
