"""
Location management routes.
"""

import asyncio
from collections import Counter

from flask import current_app, request

from models.entities import Location
from services.data_access import get_data_access
from utils.api_response import api_success, api_validation_error
from utils.decorators import admin_required, login_required
from utils.helpers import run_async
from utils.messages import MESSAGES
from utils.validators import sanitize_input, validate_name


async def locations_with_room_counts(data_access) -> list:
    """Locations in store order, each with the number of rooms it holds."""
    locations, rooms = await asyncio.gather(
        data_access.list_locations(), data_access.list_rooms()
    )
    counts = Counter(room.location_id for room in rooms)
    return [dict(location.to_dict(), room_count=counts[location.id]) for location in locations]


def register_routes(bp):
    """Register location routes on the admin blueprint."""

    @bp.route('/locations')
    @login_required
    @admin_required
    def locations_list():
        """All locations with their room counts."""
        return api_success(data=run_async(locations_with_room_counts(get_data_access())))

    @bp.route('/locations', methods=['POST'])
    @login_required
    @admin_required
    def locations_create():
        """Create a location."""
        data = request.get_json(silent=True) or {}
        name = data.get('name')

        error = validate_name(name)
        if error:
            return api_validation_error({'name': error})

        location = run_async(get_data_access().add_location(sanitize_input(name)))
        current_app.logger.info('Location created: %s', location.name)

        return api_success(data=location.to_dict(), message=MESSAGES['location_created'], status=201)

    @bp.route('/locations/<location_id>', methods=['PUT'])
    @login_required
    @admin_required
    def locations_update(location_id):
        """Rename a location."""
        data = request.get_json(silent=True) or {}
        name = data.get('name')

        error = validate_name(name)
        if error:
            return api_validation_error({'name': error})

        location = run_async(get_data_access().update_location(
            Location(id=location_id, name=sanitize_input(name))
        ))

        return api_success(data=location.to_dict(), message=MESSAGES['location_updated'])

    @bp.route('/locations/<location_id>', methods=['DELETE'])
    @login_required
    @admin_required
    def locations_delete(location_id):
        """Delete a location with no rooms."""
        run_async(get_data_access().delete_location(location_id))
        current_app.logger.info('Location deleted: %s', location_id)

        return api_success(message=MESSAGES['location_deleted'])
