"""
Admin blueprint initialization.
Registers the admin console routes (locations, rooms, bookings).

Route logic lives in:
- locations.py - Location CRUD
- rooms.py - Room CRUD
- bookings.py - Booking listing and the create/edit workflow
"""

from flask import Blueprint

from services.data_access import get_data_access
from utils.api_response import api_success
from utils.decorators import admin_required, login_required
from utils.helpers import run_async

admin_bp = Blueprint('admin', __name__)


@admin_bp.route('/dashboard')
@login_required
@admin_required
def dashboard():
    """Admin dashboard with summary counts."""
    data_access = get_data_access()

    async def counts():
        locations = await data_access.list_locations()
        rooms = await data_access.list_rooms()
        bookings = await data_access.list_bookings()
        return {
            'locations': len(locations),
            'rooms': len(rooms),
            'bookings': len(bookings),
        }

    return api_success(data=run_async(counts()))


# =============================================================================
# REGISTER ROUTE MODULES
# =============================================================================

from blueprints.admin import locations, rooms, bookings  # noqa: E402

locations.register_routes(admin_bp)
rooms.register_routes(admin_bp)
bookings.register_routes(admin_bp)
