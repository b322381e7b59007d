"""
Data access layer consumed by the booking workflow and the sync controller.

All operations are coroutines. Records leave this layer as the immutable
types in models.entities, with every date converted to datetime.date; nothing
above this layer branches on how a date was stored.

Two implementations:
- SqliteDataAccess: wraps the models/* functions in an app context
- InMemoryDataAccess: in-process store with the same contract
"""

import asyncio
import logging
import sqlite3
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import date

from flask import current_app

from models import booking as booking_model
from models import location as location_model
from models import room as room_model
from models.entities import Booking, BookingDraft, Location, Room
from utils.datetime_helpers import parse_day
from utils.errors import NotFoundError, PersistenceError, ReferentialIntegrityError
from utils.helpers import chunked, generate_id
from utils.messages import MESSAGES

logger = logging.getLogger(__name__)


# =============================================================================
# ROW CONVERSION (date normalization boundary)
# =============================================================================

def location_from_row(row: dict) -> Location:
    return Location(id=row['id'], name=row['name'])


def room_from_row(row: dict) -> Room:
    return Room(id=row['id'], name=row['name'], location_id=row['location_id'])


def booking_from_row(row: dict) -> Booking:
    return Booking(
        id=row['id'],
        room_id=row['room_id'],
        guest_name=row['guest_name'],
        start_date=parse_day(row['start_date']),
        end_date=parse_day(row['end_date']),
        status=row['status'],
    )


def normalize_draft(draft: BookingDraft) -> BookingDraft:
    """Return the draft with both dates as datetime.date."""
    return BookingDraft(
        room_id=draft.room_id,
        guest_name=draft.guest_name,
        start_date=parse_day(draft.start_date),
        end_date=parse_day(draft.end_date),
        status=draft.status,
    )


# =============================================================================
# INTERFACE
# =============================================================================

class DataAccess(ABC):
    """Async store contract for locations, rooms and bookings."""

    @abstractmethod
    async def list_locations(self) -> list:
        ...

    @abstractmethod
    async def add_location(self, name: str) -> Location:
        ...

    @abstractmethod
    async def update_location(self, location: Location) -> Location:
        ...

    @abstractmethod
    async def delete_location(self, location_id: str) -> None:
        """Raises ReferentialIntegrityError while rooms reference the location."""

    @abstractmethod
    async def list_rooms(self, location_id: str = None) -> list:
        ...

    @abstractmethod
    async def add_room(self, name: str, location_id: str) -> Room:
        ...

    @abstractmethod
    async def update_room(self, room: Room) -> Room:
        ...

    @abstractmethod
    async def get_room(self, room_id: str) -> Room | None:
        ...

    @abstractmethod
    async def delete_room(self, room_id: str) -> None:
        """Raises ReferentialIntegrityError while bookings reference the room."""

    @abstractmethod
    async def get_booking(self, booking_id: str) -> Booking | None:
        ...

    @abstractmethod
    async def list_bookings(self, room_id: str = None) -> list:
        ...

    @abstractmethod
    async def list_bookings_by_location(self, location_id: str) -> list:
        ...

    @abstractmethod
    async def add_booking(self, draft: BookingDraft) -> Booking:
        ...

    @abstractmethod
    async def update_booking(self, booking: Booking) -> Booking:
        ...

    @abstractmethod
    async def delete_booking(self, booking_id: str) -> None:
        ...

    @abstractmethod
    async def seed_initial_data(self) -> bool:
        """Populate sample data if the store has no locations. Returns True if seeded."""


# =============================================================================
# SQLITE
# =============================================================================

class SqliteDataAccess(DataAccess):
    """
    Data access backed by the SQLite models.

    The blocking sqlite3 work runs in a worker thread through
    asyncio.to_thread, inside a fresh app context, so every call gets (and
    closes) its own connection and concurrent calls overlap.
    """

    def __init__(self, app, batch_size: int = None):
        self._app = app
        self.batch_size = batch_size or app.config.get(
            'BOOKING_ID_BATCH_SIZE', booking_model.DEFAULT_BATCH_SIZE
        )

    @contextmanager
    def _session(self, action: str):
        with self._app.app_context():
            try:
                yield
            except sqlite3.Error as exc:
                logger.error('Store failure while trying to %s: %s', action, exc)
                raise PersistenceError(f'Could not {action}') from exc

    def _call(self, action: str, func, *args):
        with self._session(action):
            return func(*args)

    async def _run(self, action: str, func, *args):
        """Run a blocking store call in a worker thread."""
        return await asyncio.to_thread(self._call, action, func, *args)

    # Locations

    def _list_locations(self) -> list:
        return [location_from_row(row) for row in location_model.get_all_locations()]

    async def list_locations(self) -> list:
        return await self._run('list locations', self._list_locations)

    async def add_location(self, name: str) -> Location:
        location_id = await self._run('add location', location_model.create_location, name)
        return Location(id=location_id, name=name)

    def _update_location(self, location: Location) -> None:
        if not location_model.update_location(location.id, name=location.name):
            raise NotFoundError(f'Location {location.id} not found')

    async def update_location(self, location: Location) -> Location:
        await self._run('update location', self._update_location, location)
        return location

    def _delete_location(self, location_id: str) -> None:
        if not location_model.delete_location(location_id):
            raise NotFoundError(f'Location {location_id} not found')

    async def delete_location(self, location_id: str) -> None:
        await self._run('delete location', self._delete_location, location_id)

    # Rooms

    def _list_rooms(self, location_id: str = None) -> list:
        return [room_from_row(row) for row in room_model.get_all_rooms(location_id)]

    async def list_rooms(self, location_id: str = None) -> list:
        return await self._run('list rooms', self._list_rooms, location_id)

    def _add_room(self, name: str, location_id: str) -> str:
        if location_model.get_location_by_id(location_id) is None:
            raise NotFoundError(f'Location {location_id} not found')
        return room_model.create_room(name, location_id)

    async def add_room(self, name: str, location_id: str) -> Room:
        room_id = await self._run('add room', self._add_room, name, location_id)
        return Room(id=room_id, name=name, location_id=location_id)

    def _update_room(self, room: Room) -> None:
        if location_model.get_location_by_id(room.location_id) is None:
            raise NotFoundError(f'Location {room.location_id} not found')
        if not room_model.update_room(room.id, name=room.name, location_id=room.location_id):
            raise NotFoundError(f'Room {room.id} not found')

    async def update_room(self, room: Room) -> Room:
        await self._run('update room', self._update_room, room)
        return room

    def _delete_room(self, room_id: str) -> None:
        if not room_model.delete_room(room_id):
            raise NotFoundError(f'Room {room_id} not found')

    async def delete_room(self, room_id: str) -> None:
        await self._run('delete room', self._delete_room, room_id)

    # Bookings

    def _list_bookings(self, room_id: str = None) -> list:
        return [booking_from_row(row) for row in booking_model.get_bookings(room_id)]

    async def list_bookings(self, room_id: str = None) -> list:
        return await self._run('list bookings', self._list_bookings, room_id)

    def _list_bookings_by_location(self, location_id: str) -> list:
        rows = booking_model.get_bookings_by_location(location_id, batch_size=self.batch_size)
        return [booking_from_row(row) for row in rows]

    async def list_bookings_by_location(self, location_id: str) -> list:
        return await self._run(
            'list bookings for location', self._list_bookings_by_location, location_id
        )

    def _add_booking(self, draft: BookingDraft) -> str:
        if room_model.get_room_by_id(draft.room_id) is None:
            raise NotFoundError(f'Room {draft.room_id} not found')
        return booking_model.create_booking(
            room_id=draft.room_id,
            guest_name=draft.guest_name,
            start_date=draft.start_date,
            end_date=draft.end_date,
            status=draft.status
        )

    async def add_booking(self, draft: BookingDraft) -> Booking:
        draft = normalize_draft(draft)
        booking_id = await self._run('add booking', self._add_booking, draft)
        return Booking.from_draft(booking_id, draft)

    def _update_booking(self, booking: Booking) -> None:
        if room_model.get_room_by_id(booking.room_id) is None:
            raise NotFoundError(f'Room {booking.room_id} not found')
        updated = booking_model.update_booking(
            booking.id,
            room_id=booking.room_id,
            guest_name=booking.guest_name,
            start_date=booking.start_date,
            end_date=booking.end_date,
            status=booking.status
        )
        if not updated:
            raise NotFoundError(f'Booking {booking.id} not found')

    async def update_booking(self, booking: Booking) -> Booking:
        booking = Booking.from_draft(booking.id, normalize_draft(booking.to_draft()))
        await self._run('update booking', self._update_booking, booking)
        return booking

    def _delete_booking(self, booking_id: str) -> None:
        if not booking_model.delete_booking(booking_id):
            raise NotFoundError(f'Booking {booking_id} not found')

    async def delete_booking(self, booking_id: str) -> None:
        await self._run('delete booking', self._delete_booking, booking_id)

    # Single-record reads

    def _get_room(self, room_id: str) -> Room | None:
        row = room_model.get_room_by_id(room_id)
        return room_from_row(row) if row else None

    async def get_room(self, room_id: str) -> Room | None:
        return await self._run('get room', self._get_room, room_id)

    def _get_booking(self, booking_id: str) -> Booking | None:
        row = booking_model.get_booking_by_id(booking_id)
        return booking_from_row(row) if row else None

    async def get_booking(self, booking_id: str) -> Booking | None:
        return await self._run('get booking', self._get_booking, booking_id)

    def _seed_initial_data(self) -> dict:
        from database import get_db, seed_initial_data
        from utils.datetime_helpers import get_today

        return seed_initial_data(get_db(), get_today())

    async def seed_initial_data(self) -> bool:
        result = await self._run('seed initial data', self._seed_initial_data)

        if result['seeded']:
            logger.info(
                'Seeded %d locations, %d rooms, %d bookings',
                result['locations'], result['rooms'], result['bookings']
            )
        return result['seeded']


# =============================================================================
# IN-MEMORY
# =============================================================================

class InMemoryDataAccess(DataAccess):
    """
    In-process store with the same contract as SqliteDataAccess.

    Like a document store, it rejects "room_id in set" queries larger than
    batch_size, so listing bookings by location has to chunk.
    """

    def __init__(self, batch_size: int = booking_model.DEFAULT_BATCH_SIZE, today: date = None):
        self.batch_size = batch_size
        self._today = today
        self._locations = {}
        self._rooms = {}
        self._bookings = {}

    async def _suspend(self):
        # Every call yields to the event loop, like a remote round trip
        await asyncio.sleep(0)

    # Locations

    async def list_locations(self) -> list:
        await self._suspend()
        return list(self._locations.values())

    async def add_location(self, name: str) -> Location:
        await self._suspend()
        location = Location(id=generate_id(), name=name)
        self._locations[location.id] = location
        return location

    async def update_location(self, location: Location) -> Location:
        await self._suspend()
        if location.id not in self._locations:
            raise NotFoundError(f'Location {location.id} not found')
        self._locations[location.id] = location
        return location

    async def delete_location(self, location_id: str) -> None:
        await self._suspend()
        if location_id not in self._locations:
            raise NotFoundError(f'Location {location_id} not found')
        if any(room.location_id == location_id for room in self._rooms.values()):
            raise ReferentialIntegrityError(MESSAGES['location_has_rooms'])
        del self._locations[location_id]

    # Rooms

    async def list_rooms(self, location_id: str = None) -> list:
        await self._suspend()
        return [
            room for room in self._rooms.values()
            if location_id is None or room.location_id == location_id
        ]

    async def add_room(self, name: str, location_id: str) -> Room:
        await self._suspend()
        if location_id not in self._locations:
            raise NotFoundError(f'Location {location_id} not found')
        room = Room(id=generate_id(), name=name, location_id=location_id)
        self._rooms[room.id] = room
        return room

    async def update_room(self, room: Room) -> Room:
        await self._suspend()
        if room.id not in self._rooms:
            raise NotFoundError(f'Room {room.id} not found')
        if room.location_id not in self._locations:
            raise NotFoundError(f'Location {room.location_id} not found')
        self._rooms[room.id] = room
        return room

    async def delete_room(self, room_id: str) -> None:
        await self._suspend()
        if room_id not in self._rooms:
            raise NotFoundError(f'Room {room_id} not found')
        if any(booking.room_id == room_id for booking in self._bookings.values()):
            raise ReferentialIntegrityError(MESSAGES['room_has_bookings'])
        del self._rooms[room_id]

    # Bookings

    def _sorted(self, bookings) -> list:
        return sorted(bookings, key=lambda b: b.start_date)

    def _bookings_in_rooms(self, room_ids: list) -> list:
        if len(room_ids) > self.batch_size:
            raise PersistenceError(
                f'Query limited to {self.batch_size} room ids, got {len(room_ids)}'
            )
        wanted = set(room_ids)
        return [b for b in self._bookings.values() if b.room_id in wanted]

    async def list_bookings(self, room_id: str = None) -> list:
        await self._suspend()
        return self._sorted(
            b for b in self._bookings.values() if room_id is None or b.room_id == room_id
        )

    async def list_bookings_by_location(self, location_id: str) -> list:
        await self._suspend()
        room_ids = [room.id for room in self._rooms.values() if room.location_id == location_id]
        bookings = []
        for chunk in chunked(room_ids, self.batch_size):
            await self._suspend()
            bookings.extend(self._bookings_in_rooms(chunk))
        return self._sorted(bookings)

    async def add_booking(self, draft: BookingDraft) -> Booking:
        await self._suspend()
        draft = normalize_draft(draft)
        if draft.room_id not in self._rooms:
            raise NotFoundError(f'Room {draft.room_id} not found')
        booking = Booking.from_draft(generate_id(), draft)
        self._bookings[booking.id] = booking
        return booking

    async def update_booking(self, booking: Booking) -> Booking:
        await self._suspend()
        if booking.id not in self._bookings:
            raise NotFoundError(f'Booking {booking.id} not found')
        if booking.room_id not in self._rooms:
            raise NotFoundError(f'Room {booking.room_id} not found')
        booking = Booking.from_draft(booking.id, normalize_draft(booking.to_draft()))
        self._bookings[booking.id] = booking
        return booking

    async def delete_booking(self, booking_id: str) -> None:
        await self._suspend()
        if booking_id not in self._bookings:
            raise NotFoundError(f'Booking {booking_id} not found')
        del self._bookings[booking_id]

    async def get_room(self, room_id: str) -> Room | None:
        await self._suspend()
        return self._rooms.get(room_id)

    async def get_booking(self, booking_id: str) -> Booking | None:
        await self._suspend()
        return self._bookings.get(booking_id)

    async def seed_initial_data(self) -> bool:
        from database.seed import DEFAULT_LOCATIONS, iter_seed_bookings

        await self._suspend()
        if self._locations:
            return False

        rooms_by_name = {}
        for location_name, room_names in DEFAULT_LOCATIONS:
            location = await self.add_location(location_name)
            for room_name in room_names:
                rooms_by_name[room_name] = await self.add_room(room_name, location.id)

        today = self._today or date.today()
        for room_name, guest_name, start_date, end_date, status in iter_seed_bookings(today):
            await self.add_booking(BookingDraft(
                room_id=rooms_by_name[room_name].id,
                guest_name=guest_name,
                start_date=start_date,
                end_date=end_date,
                status=status,
            ))

        logger.info('Seeded in-memory store with %d locations', len(DEFAULT_LOCATIONS))
        return True


def get_data_access() -> SqliteDataAccess:
    """SqliteDataAccess bound to the current Flask app."""
    return SqliteDataAccess(current_app._get_current_object())
