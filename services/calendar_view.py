"""
Week view over the sync controller's working set.
"""

from datetime import timedelta

from models.availability import build_availability_grid, start_of_week, week_days
from models.entities import STATUS_AVAILABLE
from utils.datetime_helpers import get_today, parse_day


# One-character cell markers for text output
CELL_MARKERS = {
    STATUS_AVAILABLE: '.',
    'booked': 'B',
    'pending': 'P',
    'maintenance': 'M',
}


class CalendarWeekView:
    """
    Displayed week plus the occupancy grid derived from the controller state.

    The grid is rebuilt only when the room set, the booking set or the visible
    week changes; otherwise the previous grid object is returned.
    """

    def __init__(self, controller, anchor=None, week_start: int = 0, days: int = 7):
        self._controller = controller
        self._week_start = week_start
        self._days = days
        self._anchor = start_of_week(parse_day(anchor) or get_today(), week_start)
        self._grid = None
        self._grid_key = None

    @classmethod
    def from_config(cls, controller, config, anchor=None) -> 'CalendarWeekView':
        return cls(
            controller,
            anchor=anchor,
            week_start=config.get('WEEK_START_DAY', 0),
            days=config.get('CALENDAR_DAYS', 7),
        )

    @property
    def week_start(self):
        return self._anchor

    @property
    def days(self) -> list:
        return week_days(self._anchor, self._week_start, self._days)

    @property
    def title(self) -> str:
        return self._anchor.strftime('%B %Y')

    def next_week(self):
        self._anchor += timedelta(days=7)

    def previous_week(self):
        self._anchor -= timedelta(days=7)

    def go_to(self, day):
        self._anchor = start_of_week(parse_day(day), self._week_start)

    @property
    def grid(self):
        state = self._controller.state
        key = (state.rooms, state.bookings, self._anchor)
        if self._grid is None or key != self._grid_key:
            self._grid = build_availability_grid(state.rooms, state.bookings, self.days)
            self._grid_key = key
        return self._grid


def format_grid_text(grid, title: str = '') -> str:
    """Render a grid as a fixed-width text table."""
    lines = [title] if title else []

    if grid.is_empty:
        lines.append('No rooms found for this location.')
        return '\n'.join(lines)

    name_width = max(len(row.room.name) for row in grid.rows)
    header = ' ' * name_width + ' ' + ' '.join(day.strftime('%a %d') for day in grid.days)
    lines.append(header)

    for row in grid.rows:
        cells = ' '.join(CELL_MARKERS[cell.status].center(6) for cell in row.cells)
        lines.append(f'{row.room.name.ljust(name_width)} {cells}')

    lines.append('')
    lines.append('Legend: . available  B booked  P pending  M maintenance')
    return '\n'.join(lines)
