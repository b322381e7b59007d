"""
Public API routes for JSON endpoints.
Provides the read-only calendar view of the property.
"""

from flask import current_app, request, Blueprint

from services.calendar_view import CalendarWeekView
from services.data_access import get_data_access
from services.location_sync import LocationSyncController
from utils.api_response import api_success, api_error
from utils.datetime_helpers import get_today, parse_day
from utils.helpers import run_async
from utils.messages import MESSAGES

api_bp = Blueprint('api', __name__)


@api_bp.route('/health')
def health_check():
    """
    Health check endpoint (no authentication required).

    Returns:
        JSON with status and version
    """
    return api_success(data={
        'status': 'ok',
        'version': current_app.config.get('APP_VERSION', '1.0.0'),
        'app': current_app.config.get('APP_NAME', 'RoomBoard')
    })


@api_bp.route('/locations')
def api_locations():
    """
    Get all locations as JSON.

    Returns:
        JSON list of locations
    """
    locations = run_async(get_data_access().list_locations())
    return api_success(data=[location.to_dict() for location in locations], count=len(locations))


@api_bp.route('/calendar')
def api_calendar():
    """
    Occupancy grid for one location and one week.

    Seeds an empty store on first use, like opening the calendar page.

    Query params:
        location_id: Location to show (optional, defaults to the configured
            default location, then the first one)
        week: Any day of the week to show, YYYY-MM-DD (optional, default today)

    Returns:
        JSON with the selected location, the location list and the grid
    """
    try:
        anchor = parse_day(request.args.get('week')) or get_today()
    except ValueError:
        return api_error(MESSAGES['invalid_week'], 400)

    location_id = request.args.get('location_id') or None
    controller = LocationSyncController(
        get_data_access(),
        default_location_name=current_app.config.get('DEFAULT_LOCATION_NAME')
    )

    async def load():
        await controller.mount()
        if location_id and location_id != controller.state.selected_location_id:
            await controller.select_location(location_id)
        return controller.state

    try:
        state = run_async(load())
    except ValueError:
        return api_error(MESSAGES['location_not_found'], 404)

    if state.error:
        return api_error(state.error, 500)

    view = CalendarWeekView.from_config(controller, current_app.config, anchor=anchor)
    selected = state.selected_location

    return api_success(data={
        'location': selected.to_dict() if selected else None,
        'locations': [location.to_dict() for location in state.locations],
        'title': view.title,
        'week_start': view.week_start.isoformat(),
        'grid': view.grid.to_dict(),
    })
