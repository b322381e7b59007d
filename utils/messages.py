"""
Centralized UI messages.
All user-facing text in one place for consistency.
"""

MESSAGES = {
    # Success messages
    'login_success': 'Welcome {name}',
    'logout_success': 'Logged out',
    'location_created': 'Location created',
    'location_updated': 'Location updated',
    'location_deleted': 'Location deleted',
    'room_created': 'Room created',
    'room_updated': 'Room updated',
    'room_deleted': 'Room deleted',
    'booking_created': 'Booking created',
    'booking_updated': 'Booking updated',
    'booking_deleted': 'Booking deleted',

    # Error messages
    'invalid_credentials': 'Invalid username or password',
    'account_disabled': 'This account has been disabled',
    'login_required': 'Please log in to access this page',
    'permission_denied': 'You do not have permission for this action',
    'not_found': 'Resource not found',
    'server_error': 'Internal server error',
    'invalid_request': 'Invalid request data',
    'location_not_found': 'Location not found',
    'room_not_found': 'Room not found',
    'booking_not_found': 'Booking not found',
    'location_has_rooms': 'Cannot delete a location that still has rooms',
    'room_has_bookings': 'Cannot delete a room that still has bookings',
    'booking_conflict': 'Booking overlaps an existing booking; resubmit with confirm_overlap to save anyway',
    'invalid_week': 'Week must be a date in YYYY-MM-DD format',
    'no_locations': 'No locations found',
}


def get_message(key: str, **kwargs) -> str:
    """
    Get message with optional formatting.

    Args:
        key: Message key
        **kwargs: Format parameters

    Returns:
        Formatted message or key if not found
    """
    message = MESSAGES.get(key, key)
    if kwargs:
        return message.format(**kwargs)
    return message
