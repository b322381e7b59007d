"""
Location data access functions.
Handles location CRUD operations.
"""

from database import get_db
from utils.errors import ReferentialIntegrityError
from utils.helpers import generate_id
from utils.messages import MESSAGES


def get_all_locations() -> list:
    """
    Get all locations.

    Returns:
        List of location dicts in creation order, each with room_count
    """
    db = get_db()
    cursor = db.cursor()

    cursor.execute('''
        SELECT l.*,
               (SELECT COUNT(*) FROM rooms WHERE location_id = l.id) as room_count
        FROM locations l
        ORDER BY l.created_at, l.rowid
    ''')
    rows = cursor.fetchall()
    return [dict(row) for row in rows]


def get_location_by_id(location_id: str) -> dict:
    """
    Get location by ID.

    Args:
        location_id: Location ID

    Returns:
        Location dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM locations WHERE id = ?', (location_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def create_location(name: str) -> str:
    """
    Create new location.

    Args:
        name: Location name

    Returns:
        New location ID
    """
    db = get_db()
    location_id = generate_id()

    db.execute('INSERT INTO locations (id, name) VALUES (?, ?)', (location_id, name))
    db.commit()
    return location_id


def update_location(location_id: str, **kwargs) -> bool:
    """
    Update location fields.

    Args:
        location_id: Location ID to update
        **kwargs: Fields to update (name)

    Returns:
        True if a row was updated
    """
    db = get_db()

    allowed_fields = ['name']
    updates = []
    values = []

    for field in allowed_fields:
        if field in kwargs:
            updates.append(f'{field} = ?')
            values.append(kwargs[field])

    if not updates:
        return False

    updates.append('updated_at = CURRENT_TIMESTAMP')
    values.append(location_id)
    query = f'UPDATE locations SET {", ".join(updates)} WHERE id = ?'

    cursor = db.cursor()
    cursor.execute(query, values)
    db.commit()

    return cursor.rowcount > 0


def delete_location(location_id: str) -> bool:
    """
    Delete location permanently.
    Only allowed if no room references it.

    Args:
        location_id: Location ID to delete

    Returns:
        True if deleted

    Raises:
        ReferentialIntegrityError: If the location has rooms
    """
    db = get_db()
    cursor = db.cursor()

    cursor.execute('''
        SELECT COUNT(*) as count
        FROM rooms
        WHERE location_id = ?
    ''', (location_id,))

    if cursor.fetchone()['count'] > 0:
        raise ReferentialIntegrityError(MESSAGES['location_has_rooms'])

    cursor.execute('DELETE FROM locations WHERE id = ?', (location_id,))

    db.commit()
    return cursor.rowcount > 0
