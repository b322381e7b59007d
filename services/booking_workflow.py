"""
Booking mutation workflow.

Drives a create or edit from a submitted draft to a persisted booking:

    idle -> validating -> checking_conflict -> awaiting_confirmation -> persisting -> done
                                            +-> persisting -> done | failed

Overlaps never block a save. They pause the workflow in awaiting_confirmation
until the caller confirms (persist the candidate unchanged) or cancels.
"""

import inspect
import logging
from dataclasses import dataclass

from models.booking_conflicts import detect_overlap
from models.entities import BOOKING_STATUSES, Booking, BookingDraft
from utils.datetime_helpers import parse_day
from utils.errors import ConflictWarning, PersistenceError, ValidationError

logger = logging.getLogger(__name__)


STATE_IDLE = 'idle'
STATE_VALIDATING = 'validating'
STATE_CHECKING_CONFLICT = 'checking_conflict'
STATE_AWAITING_CONFIRMATION = 'awaiting_confirmation'
STATE_PERSISTING = 'persisting'
STATE_DONE = 'done'
STATE_FAILED = 'failed'


# =============================================================================
# VALIDATION
# =============================================================================

def validate_booking_draft(draft: BookingDraft) -> dict:
    """
    Check a draft for missing or malformed fields.

    Args:
        draft: BookingDraft (dates may be date, datetime or ISO strings)

    Returns:
        dict: {field: message}, empty when the draft is valid
    """
    errors = {}

    if not draft.room_id:
        errors['room_id'] = 'Room is required'

    if not draft.guest_name or not str(draft.guest_name).strip():
        errors['guest_name'] = 'Guest name is required'

    dates = {}
    for field in ('start_date', 'end_date'):
        value = getattr(draft, field)
        try:
            dates[field] = parse_day(value)
        except ValueError:
            errors[field] = 'Invalid date'
            continue
        if dates[field] is None:
            errors[field] = 'Date is required'

    if draft.status not in BOOKING_STATUSES:
        errors['status'] = f'Status must be one of: {", ".join(BOOKING_STATUSES)}'

    start_date = dates.get('start_date')
    end_date = dates.get('end_date')
    if start_date and end_date and end_date < start_date:
        errors['end_date'] = 'End date cannot be before start date'

    return errors


def clean_draft(draft: BookingDraft) -> BookingDraft:
    """Return a validated draft with parsed dates and a stripped guest name."""
    return BookingDraft(
        room_id=draft.room_id,
        guest_name=str(draft.guest_name).strip(),
        start_date=parse_day(draft.start_date),
        end_date=parse_day(draft.end_date),
        status=draft.status,
    )


# =============================================================================
# RESULT
# =============================================================================

@dataclass(frozen=True)
class WorkflowResult:
    """Outcome of submit() or confirm()."""

    state: str
    draft: BookingDraft | None = None
    booking: Booking | None = None
    warning: ConflictWarning | None = None
    error: str | None = None

    @property
    def saved(self) -> bool:
        return self.state == STATE_DONE

    @property
    def needs_confirmation(self) -> bool:
        return self.state == STATE_AWAITING_CONFIRMATION


# =============================================================================
# WORKFLOW
# =============================================================================

class BookingWorkflow:
    """
    One create/edit interaction against a data access layer.

    Args:
        data_access: DataAccess implementation
        on_data_changed: Called (or awaited, if it returns an awaitable) after
            every successful write
    """

    def __init__(self, data_access, on_data_changed=None):
        self._data_access = data_access
        self._on_data_changed = on_data_changed
        self._state = STATE_IDLE
        self._pending_draft = None
        self._editing_booking_id = None

    @property
    def state(self) -> str:
        return self._state

    @property
    def pending_draft(self):
        """Candidate waiting for confirmation, if any."""
        return self._pending_draft

    def _reset(self):
        self._state = STATE_IDLE
        self._pending_draft = None
        self._editing_booking_id = None

    async def submit(self, draft: BookingDraft, editing_booking_id: str = None) -> WorkflowResult:
        """
        Validate a draft, check it for overlaps and persist it if clear.

        Args:
            draft: Candidate booking data
            editing_booking_id: ID of the booking being edited (None to create)

        Returns:
            WorkflowResult in state done, failed or awaiting_confirmation

        Raises:
            ValidationError: If the draft is malformed (nothing is read or written)
        """
        self._reset()
        self._state = STATE_VALIDATING

        errors = validate_booking_draft(draft)
        if errors:
            self._reset()
            raise ValidationError(errors)

        draft = clean_draft(draft)
        self._state = STATE_CHECKING_CONFLICT

        try:
            existing = await self._data_access.list_bookings(draft.room_id)
        except PersistenceError as exc:
            logger.error('Could not load bookings for room %s: %s', draft.room_id, exc)
            self._state = STATE_FAILED
            return WorkflowResult(state=STATE_FAILED, draft=draft, error=str(exc))

        conflict = detect_overlap(draft, editing_booking_id, existing)
        if conflict is not None:
            warning = ConflictWarning(conflict)
            logger.info('Booking for %s needs confirmation: %s', draft.guest_name, warning)
            self._state = STATE_AWAITING_CONFIRMATION
            self._pending_draft = draft
            self._editing_booking_id = editing_booking_id
            return WorkflowResult(state=STATE_AWAITING_CONFIRMATION, draft=draft, warning=warning)

        return await self._persist(draft, editing_booking_id)

    async def confirm(self) -> WorkflowResult:
        """
        Save the candidate that triggered the overlap warning, unchanged.

        Raises:
            RuntimeError: If no candidate is awaiting confirmation
        """
        if self._state != STATE_AWAITING_CONFIRMATION:
            raise RuntimeError(f'Nothing to confirm (state: {self._state})')
        return await self._persist(self._pending_draft, self._editing_booking_id)

    def cancel(self) -> None:
        """Drop the pending candidate without writing anything."""
        if self._state == STATE_AWAITING_CONFIRMATION:
            logger.debug('Discarding unconfirmed booking for %s', self._pending_draft.guest_name)
        self._reset()

    async def _persist(self, draft: BookingDraft, editing_booking_id: str | None) -> WorkflowResult:
        self._state = STATE_PERSISTING
        try:
            if editing_booking_id is None:
                booking = await self._data_access.add_booking(draft)
            else:
                booking = await self._data_access.update_booking(
                    Booking.from_draft(editing_booking_id, draft)
                )
        except PersistenceError as exc:
            logger.error('Could not save booking for %s: %s', draft.guest_name, exc)
            self._state = STATE_FAILED
            self._pending_draft = None
            return WorkflowResult(state=STATE_FAILED, draft=draft, error=str(exc))
        except Exception:
            self._reset()
            raise

        self._state = STATE_DONE
        self._pending_draft = None
        self._editing_booking_id = None

        if self._on_data_changed is not None:
            outcome = self._on_data_changed()
            if inspect.isawaitable(outcome):
                await outcome

        return WorkflowResult(state=STATE_DONE, draft=draft, booking=booking)
