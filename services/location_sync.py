"""
Location-scoped sync controller.

Keeps the calendar's working set (locations, the selected location, its rooms
and its bookings) in step with the store:

    idle -> seeding -> loading_locations -> loading_location_data -> ready

State is an immutable SyncState replaced wholesale on every transition, so a
listener never sees rooms from one load next to bookings from another.
Loads are keyed by a generation counter plus the location id they were issued
for; results that arrive after a newer load was issued are dropped.
"""

import asyncio
import logging
from dataclasses import dataclass, replace

from utils.errors import PersistenceError

logger = logging.getLogger(__name__)


PHASE_IDLE = 'idle'
PHASE_SEEDING = 'seeding'
PHASE_LOADING_LOCATIONS = 'loading_locations'
PHASE_LOADING_LOCATION_DATA = 'loading_location_data'
PHASE_READY = 'ready'


@dataclass(frozen=True)
class SyncState:
    locations: tuple = ()
    selected_location_id: str | None = None
    rooms: tuple = ()
    bookings: tuple = ()
    phase: str = PHASE_IDLE
    error: str | None = None

    @property
    def selected_location(self):
        for location in self.locations:
            if location.id == self.selected_location_id:
                return location
        return None


def choose_location(locations, current_id: str | None, default_name: str | None = None):
    """
    Pick the location to show after the location list changes.

    Keeps the current selection if it still exists, else the location named
    default_name, else the first location. Returns None for an empty list.
    """
    if current_id is not None and any(loc.id == current_id for loc in locations):
        return current_id
    if default_name:
        for location in locations:
            if location.name == default_name:
                return location.id
    return locations[0].id if locations else None


class LocationSyncController:
    """
    Args:
        data_access: DataAccess implementation
        default_location_name: Name of the location preferred on first load
    """

    def __init__(self, data_access, default_location_name: str = None):
        self._data_access = data_access
        self._default_location_name = default_location_name
        self._state = SyncState()
        self._listeners = []
        self._locations_generation = 0
        self._data_generation = 0

    @property
    def state(self) -> SyncState:
        return self._state

    def subscribe(self, callback):
        """
        Register a listener called with every new SyncState.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _set_state(self, **changes):
        previous = self._state
        self._state = replace(previous, **changes)
        if self._state.phase != previous.phase:
            logger.debug('Sync phase %s -> %s', previous.phase, self._state.phase)
        for listener in list(self._listeners):
            listener(self._state)

    @property
    def _locations_pending(self) -> bool:
        return self._state.phase in (PHASE_SEEDING, PHASE_LOADING_LOCATIONS)

    # =========================================================================
    # ENTRY POINTS
    # =========================================================================

    async def mount(self) -> SyncState:
        """Seed an empty store, then load locations and the selected location's data."""
        self._set_state(phase=PHASE_SEEDING, error=None)
        try:
            await self._data_access.seed_initial_data()
        except PersistenceError as exc:
            logger.error('Seeding initial data failed: %s', exc)

        await self._load_locations()
        return self._state

    async def select_location(self, location_id: str) -> SyncState:
        """
        Switch the selected location.

        While the location list is loading the choice is only recorded; the
        pending load validates it and loads its data.

        Raises:
            ValueError: If location_id is not in the loaded location list
        """
        if self._locations_pending:
            self._set_state(selected_location_id=location_id, rooms=(), bookings=())
            return self._state

        if not any(loc.id == location_id for loc in self._state.locations):
            raise ValueError(f'Unknown location: {location_id}')

        if location_id == self._state.selected_location_id and self._state.phase == PHASE_READY \
                and self._state.error is None:
            return self._state

        self._set_state(selected_location_id=location_id, rooms=(), bookings=())
        await self._load_location_data(location_id)
        return self._state

    async def notify_data_changed(self) -> SyncState:
        """Re-fetch locations, re-validate the selection and reload its data."""
        await self._load_locations()
        return self._state

    # =========================================================================
    # LOADS
    # =========================================================================

    async def _load_locations(self):
        self._locations_generation += 1
        generation = self._locations_generation
        # Any data load issued before this point is now obsolete
        self._data_generation += 1

        self._set_state(phase=PHASE_LOADING_LOCATIONS, error=None)

        try:
            locations = await self._data_access.list_locations()
        except PersistenceError as exc:
            if generation != self._locations_generation:
                logger.debug('Dropping failed locations load %d', generation)
                return
            logger.error('Could not load locations: %s', exc)
            self._set_state(
                locations=(), selected_location_id=None, rooms=(), bookings=(),
                phase=PHASE_READY, error=str(exc)
            )
            return

        if generation != self._locations_generation:
            logger.debug('Dropping stale locations load %d', generation)
            return

        current_id = self._state.selected_location_id
        selected_id = choose_location(locations, current_id, self._default_location_name)

        if selected_id is None:
            self._set_state(
                locations=tuple(locations), selected_location_id=None,
                rooms=(), bookings=(), phase=PHASE_READY
            )
            return

        changes = {'locations': tuple(locations), 'selected_location_id': selected_id}
        if selected_id != current_id:
            changes.update(rooms=(), bookings=())
        self._set_state(**changes)

        await self._load_location_data(selected_id)

    async def _load_location_data(self, location_id: str):
        self._data_generation += 1
        generation = self._data_generation

        self._set_state(phase=PHASE_LOADING_LOCATION_DATA, error=None)

        try:
            rooms, bookings = await asyncio.gather(
                self._data_access.list_rooms(location_id),
                self._data_access.list_bookings_by_location(location_id),
            )
        except PersistenceError as exc:
            if not self._is_current(generation, location_id):
                logger.debug('Dropping failed data load for location %s', location_id)
                return
            logger.error('Could not load rooms and bookings for location %s: %s', location_id, exc)
            self._set_state(rooms=(), bookings=(), phase=PHASE_READY, error=str(exc))
            return

        if not self._is_current(generation, location_id):
            logger.debug('Dropping stale data load for location %s', location_id)
            return

        self._set_state(rooms=tuple(rooms), bookings=tuple(bookings), phase=PHASE_READY)

    def _is_current(self, generation: int, location_id: str) -> bool:
        return (
            generation == self._data_generation
            and location_id == self._state.selected_location_id
        )
