"""
Booking overlap detection.

Ranges are closed intervals at day granularity: two bookings that share only
a turnover day overlap. Overlaps are reported for confirmation, never blocked.
"""

from datetime import date

from utils.datetime_helpers import start_of_day


def ranges_overlap(start_a: date, end_a: date, start_b: date, end_b: date) -> bool:
    """Check whether two inclusive day ranges share at least one day."""
    return (
        start_of_day(start_a) <= start_of_day(end_b)
        and start_of_day(end_a) >= start_of_day(start_b)
    )


def detect_overlap(candidate, editing_booking_id: str | None, existing_bookings: list):
    """
    Find the first existing booking that overlaps a candidate.

    Args:
        candidate: Object with room_id, start_date and end_date
            (BookingDraft or Booking)
        editing_booking_id: ID of the booking being edited, excluded from the
            check so it cannot conflict with itself
        existing_bookings: Bookings to check against, in priority order

    Returns:
        The first overlapping Booking, or None
    """
    for booking in existing_bookings:
        if editing_booking_id is not None and booking.id == editing_booking_id:
            continue
        if booking.room_id != candidate.room_id:
            continue
        if ranges_overlap(candidate.start_date, candidate.end_date,
                          booking.start_date, booking.end_date):
            return booking
    return None


def find_overlapping_pairs(bookings: list) -> list:
    """
    List every pair of overlapping bookings on the same room.

    Args:
        bookings: Bookings of any rooms

    Returns:
        list of (Booking, Booking) tuples, earlier input first
    """
    pairs = []
    for index, first in enumerate(bookings):
        for second in bookings[index + 1:]:
            if first.room_id != second.room_id:
                continue
            if ranges_overlap(first.start_date, first.end_date,
                              second.start_date, second.end_date):
                pairs.append((first, second))
    return pairs
