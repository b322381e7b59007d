"""
Domain records for locations, rooms and bookings.
Rows leaving the data access layer are converted into these immutable records,
so every date field here is already a datetime.date.
"""

from dataclasses import dataclass
from datetime import date


# =============================================================================
# STATUSES
# =============================================================================

STATUS_BOOKED = 'booked'
STATUS_PENDING = 'pending'
STATUS_MAINTENANCE = 'maintenance'
STATUS_AVAILABLE = 'available'

BOOKING_STATUSES = (STATUS_BOOKED, STATUS_PENDING, STATUS_MAINTENANCE)


# =============================================================================
# RECORDS
# =============================================================================

@dataclass(frozen=True)
class Location:
    id: str
    name: str

    def to_dict(self) -> dict:
        return {'id': self.id, 'name': self.name}


@dataclass(frozen=True)
class Room:
    id: str
    name: str
    location_id: str

    def to_dict(self) -> dict:
        return {'id': self.id, 'name': self.name, 'location_id': self.location_id}


@dataclass(frozen=True)
class BookingDraft:
    """Booking data submitted for create or update (no id yet)."""

    room_id: str | None
    guest_name: str | None
    start_date: date | None
    end_date: date | None
    status: str = STATUS_BOOKED


@dataclass(frozen=True)
class Booking:
    id: str
    room_id: str
    guest_name: str
    start_date: date
    end_date: date
    status: str = STATUS_BOOKED

    @classmethod
    def from_draft(cls, booking_id: str, draft: BookingDraft) -> 'Booking':
        return cls(
            id=booking_id,
            room_id=draft.room_id,
            guest_name=draft.guest_name,
            start_date=draft.start_date,
            end_date=draft.end_date,
            status=draft.status,
        )

    def to_draft(self) -> BookingDraft:
        return BookingDraft(
            room_id=self.room_id,
            guest_name=self.guest_name,
            start_date=self.start_date,
            end_date=self.end_date,
            status=self.status,
        )

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'room_id': self.room_id,
            'guest_name': self.guest_name,
            'start_date': self.start_date.isoformat(),
            'end_date': self.end_date.isoformat(),
            'status': self.status,
        }


@dataclass(frozen=True)
class OccupancyCell:
    """Derived (room, day) status. Computed on demand, never stored."""

    date: date
    room_id: str
    status: str
    booking: Booking | None = None

    def to_dict(self) -> dict:
        return {
            'date': self.date.isoformat(),
            'room_id': self.room_id,
            'status': self.status,
            'booking': self.booking.to_dict() if self.booking else None,
        }
