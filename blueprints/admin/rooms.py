"""
Room management routes.
"""

import asyncio

from flask import current_app, request

from models.entities import Room
from services.data_access import get_data_access
from utils.api_response import api_success, api_error, api_validation_error
from utils.decorators import admin_required, login_required
from utils.helpers import run_async
from utils.messages import MESSAGES
from utils.validators import sanitize_input, validate_name


async def rooms_with_location_names(data_access, location_id=None) -> list:
    """Rooms in store order, each with the name of its location."""
    rooms, locations = await asyncio.gather(
        data_access.list_rooms(location_id), data_access.list_locations()
    )
    names = {location.id: location.name for location in locations}
    return [dict(room.to_dict(), location_name=names.get(room.location_id)) for room in rooms]


def register_routes(bp):
    """Register room routes on the admin blueprint."""

    @bp.route('/rooms')
    @login_required
    @admin_required
    def rooms_list():
        """Rooms, optionally filtered by location_id."""
        location_id = request.args.get('location_id') or None
        return api_success(data=run_async(rooms_with_location_names(get_data_access(), location_id)))

    @bp.route('/rooms', methods=['POST'])
    @login_required
    @admin_required
    def rooms_create():
        """Create a room in a location."""
        data = request.get_json(silent=True) or {}
        name = data.get('name')
        location_id = data.get('location_id')

        errors = {}
        error = validate_name(name)
        if error:
            errors['name'] = error
        if not location_id:
            errors['location_id'] = 'Location is required'
        if errors:
            return api_validation_error(errors)

        room = run_async(get_data_access().add_room(sanitize_input(name), location_id))
        current_app.logger.info('Room created: %s', room.name)

        return api_success(data=room.to_dict(), message=MESSAGES['room_created'], status=201)

    @bp.route('/rooms/<room_id>', methods=['PUT'])
    @login_required
    @admin_required
    def rooms_update(room_id):
        """Rename a room or move it to another location."""
        data_access = get_data_access()
        existing = run_async(data_access.get_room(room_id))
        if existing is None:
            return api_error(MESSAGES['room_not_found'], 404)

        data = request.get_json(silent=True) or {}
        name = data.get('name', existing.name)

        error = validate_name(name)
        if error:
            return api_validation_error({'name': error})

        room = run_async(data_access.update_room(Room(
            id=room_id,
            name=sanitize_input(name),
            location_id=data.get('location_id') or existing.location_id,
        )))

        return api_success(data=room.to_dict(), message=MESSAGES['room_updated'])

    @bp.route('/rooms/<room_id>', methods=['DELETE'])
    @login_required
    @admin_required
    def rooms_delete(room_id):
        """Delete a room with no bookings."""
        run_async(get_data_access().delete_room(room_id))
        current_app.logger.info('Room deleted: %s', room_id)

        return api_success(message=MESSAGES['room_deleted'])
