"""
Booking management routes.

Create and edit run the booking workflow: an overlap is reported with 409 and
the conflicting booking unless the request sets confirm_overlap, in which
case the candidate is saved unchanged.
"""

from flask import current_app, request

from models.entities import STATUS_BOOKED, BookingDraft
from services.booking_workflow import BookingWorkflow
from services.data_access import get_data_access
from utils.api_response import api_success, api_error
from utils.decorators import admin_required, login_required
from utils.helpers import run_async
from utils.messages import MESSAGES


async def save_booking(data_access, draft, editing_booking_id=None, confirm_overlap=False):
    """
    Submit a draft and, if asked, confirm through an overlap warning.

    Returns:
        WorkflowResult
    """
    workflow = BookingWorkflow(data_access)
    result = await workflow.submit(draft, editing_booking_id=editing_booking_id)
    if result.needs_confirmation and confirm_overlap:
        result = await workflow.confirm()
    return result


def draft_from_request(data: dict, base: BookingDraft = None) -> BookingDraft:
    """Build a draft from a JSON body, falling back to base for missing fields."""
    base = base or BookingDraft(room_id=None, guest_name=None, start_date=None, end_date=None)
    return BookingDraft(
        room_id=data.get('room_id', base.room_id),
        guest_name=data.get('guest_name', base.guest_name),
        start_date=data.get('start_date', base.start_date),
        end_date=data.get('end_date', base.end_date),
        status=data.get('status') or base.status or STATUS_BOOKED,
    )


def workflow_response(result, success_message: str, status: int = 200):
    if result.needs_confirmation:
        return api_error(MESSAGES['booking_conflict'], 409, conflict=result.warning.to_dict())

    if not result.saved:
        return api_error(result.error, 500)

    return api_success(data=result.booking.to_dict(), message=success_message, status=status)


def register_routes(bp):
    """Register booking routes on the admin blueprint."""

    @bp.route('/bookings')
    @login_required
    @admin_required
    def bookings_list():
        """Bookings, filtered by room_id or location_id."""
        data_access = get_data_access()
        room_id = request.args.get('room_id') or None
        location_id = request.args.get('location_id') or None

        if location_id:
            bookings = run_async(data_access.list_bookings_by_location(location_id))
        else:
            bookings = run_async(data_access.list_bookings(room_id))

        return api_success(data=[booking.to_dict() for booking in bookings], count=len(bookings))

    @bp.route('/bookings', methods=['POST'])
    @login_required
    @admin_required
    def bookings_create():
        """Create a booking."""
        data = request.get_json(silent=True) or {}

        result = run_async(save_booking(
            get_data_access(),
            draft_from_request(data),
            confirm_overlap=bool(data.get('confirm_overlap'))
        ))

        if result.saved:
            current_app.logger.info('Booking created: %s for %s', result.booking.id, result.booking.guest_name)

        return workflow_response(result, MESSAGES['booking_created'], status=201)

    @bp.route('/bookings/<booking_id>', methods=['PUT'])
    @login_required
    @admin_required
    def bookings_update(booking_id):
        """Edit a booking. Fields missing from the body keep their current value."""
        data_access = get_data_access()
        existing = run_async(data_access.get_booking(booking_id))
        if existing is None:
            return api_error(MESSAGES['booking_not_found'], 404)

        data = request.get_json(silent=True) or {}

        result = run_async(save_booking(
            data_access,
            draft_from_request(data, base=existing.to_draft()),
            editing_booking_id=booking_id,
            confirm_overlap=bool(data.get('confirm_overlap'))
        ))

        return workflow_response(result, MESSAGES['booking_updated'])

    @bp.route('/bookings/<booking_id>', methods=['DELETE'])
    @login_required
    @admin_required
    def bookings_delete(booking_id):
        """Delete a booking."""
        run_async(get_data_access().delete_booking(booking_id))
        current_app.logger.info('Booking deleted: %s', booking_id)
        return api_success(message=MESSAGES['booking_deleted'])
