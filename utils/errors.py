"""
Domain error types.

ValidationError and ConflictWarning never reach the store: the first is raised
before any read, the second is returned to the caller for confirmation.
ReferentialIntegrityError, NotFoundError and PersistenceError come out of the
data access layer.
"""


class RoomBoardError(Exception):
    """Base error type for booking console errors."""


class ValidationError(RoomBoardError):
    """Raised when submitted booking data is malformed."""

    def __init__(self, errors: dict):
        self.errors = dict(errors)
        super().__init__('; '.join(f'{field}: {msg}' for field, msg in self.errors.items()))


class ReferentialIntegrityError(RoomBoardError):
    """Raised when a delete is blocked by dependent records."""


class NotFoundError(RoomBoardError):
    """Raised when an update or delete targets a missing record."""


class PersistenceError(RoomBoardError):
    """Raised when the underlying store fails a read or a write."""


class ConflictWarning(UserWarning):
    """
    A candidate booking overlaps an existing booking on the same room.

    Not an error: the admin may confirm and save anyway.
    """

    def __init__(self, booking):
        self.booking = booking
        super().__init__(
            f'Overlaps booking for {booking.guest_name} '
            f'({booking.start_date.isoformat()} to {booking.end_date.isoformat()})'
        )

    def to_dict(self) -> dict:
        return {
            'message': str(self),
            'booking': self.booking.to_dict(),
        }
