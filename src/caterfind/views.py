"""Calendar view models for the caterer (editable) and client (read-only) pages."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Callable

from apscheduler.schedulers.base import BaseScheduler

from caterfind.availability_store import AvailabilityStore
from caterfind.core.availability import AvailabilityStatus
from caterfind.core.calendar_grid import (
    date_key,
    format_date_key,
    generate_days,
    is_past,
    month_bounds,
    month_title,
    normalize_month,
)
from caterfind.core.events import CalendarEvent, EventDraft, count_by_date
from caterfind.errors import NetworkError, PastDateError, ValidationError
from caterfind.event_store import EventStore
from caterfind.messages import FlashMessage

logger = logging.getLogger(__name__)

PAST_DATE_MESSAGE = "Cannot add events to past dates"
TOGGLE_FAILED_MESSAGE = "Failed to update availability"
SAVE_SUCCESS_MESSAGE = "Event added successfully"
SAVE_FAILED_MESSAGE = "Failed to save event"
DELETE_SUCCESS_MESSAGE = "Event deleted"
DELETE_FAILED_MESSAGE = "Failed to delete event"


class DayKind(Enum):
    """How a day cell is drawn."""

    PAST = "past"
    AVAILABLE = "available"
    BUSY = "busy"
    NEUTRAL = "neutral"


_KIND_BY_STATUS = {
    AvailabilityStatus.AVAILABLE: DayKind.AVAILABLE,
    AvailabilityStatus.BUSY: DayKind.BUSY,
    AvailabilityStatus.UNSET: DayKind.NEUTRAL,
}


@dataclass
class DayCell:
    """A rendered day in the month grid."""

    day: int
    key: str
    kind: DayKind
    selected: bool = False
    event_count: int = 0


class MonthCalendar:
    """Month cursor and availability loading shared by both views."""

    def __init__(
        self,
        owner_id: int,
        availability: AvailabilityStore,
        initial_month: date | None = None,
        today: Callable[[], date] = date.today,
    ):
        self.owner_id = owner_id
        self.availability = availability
        self._today = today
        start = initial_month or today()
        self.year = start.year
        self.month = start.month - 1

    @property
    def title(self) -> str:
        return month_title(self.year, self.month)

    def days(self) -> list[int | None]:
        return generate_days(self.year, self.month)

    def key_for(self, day: int | None) -> str | None:
        return format_date_key(day, self.month, self.year)

    def date_for(self, day: int) -> date:
        return date(self.year, self.month + 1, day)

    def status_for(self, day: int) -> AvailabilityStatus:
        return self.availability.status_for(self.key_for(day))

    async def load_month(self) -> None:
        """Reload availability for the displayed month."""
        start_key, end_key = month_bounds(self.year, self.month)
        await self.availability.load_range(self.owner_id, start_key, end_key)

    async def go_to_month(self, year: int, month: int) -> None:
        self.year, self.month = normalize_month(year, month)
        await self.load_month()

    async def prev_month(self) -> None:
        await self.go_to_month(self.year, self.month - 1)

    async def next_month(self) -> None:
        await self.go_to_month(self.year, self.month + 1)


class ReadOnlyAvailabilityView(MonthCalendar):
    """
    A caterer's availability as clients see it.

    No interaction changes any data. ``embedded`` and ``show_back`` only
    affect how the calendar is laid out by a renderer.
    """

    def __init__(
        self,
        owner_id: int,
        availability: AvailabilityStore,
        embedded: bool = False,
        show_back: bool = True,
        initial_month: date | None = None,
        today: Callable[[], date] = date.today,
    ):
        super().__init__(owner_id, availability, initial_month, today)
        self.embedded = embedded
        self.show_back = show_back

    def day_cells(self) -> list[DayCell | None]:
        cells: list[DayCell | None] = []
        for day in self.days():
            if day is None:
                cells.append(None)
                continue
            cells.append(DayCell(day=day, key=self.key_for(day), kind=_KIND_BY_STATUS[self.status_for(day)]))
        return cells


class AvailabilityView(MonthCalendar):
    """
    The caterer's editable calendar.

    Clicking a day selects it (opening the event panel) and cycles its
    availability. Past days can't be selected or changed.
    """

    def __init__(
        self,
        owner_id: int,
        availability: AvailabilityStore,
        events: EventStore,
        scheduler: BaseScheduler | None = None,
        message_timeout: float = 3.0,
        initial_month: date | None = None,
        selected_date: date | None = None,
        today: Callable[[], date] = date.today,
    ):
        super().__init__(owner_id, availability, initial_month, today)
        self.events = events
        self.selected_date = selected_date
        self.error = FlashMessage("error", scheduler, message_timeout)
        self.success = FlashMessage("success", scheduler, message_timeout)
        self.clear_form()

    # Form

    def clear_form(self) -> None:
        self.host_name = ""
        self.managed_by = ""
        self.location = ""

    def clear_messages(self) -> None:
        self.error.clear()
        self.success.clear()

    # Loading

    async def open(self) -> None:
        """Load the displayed month and the owner's events."""
        await asyncio.gather(self.load_month(), self.load_events())

    async def load_events(self) -> None:
        await self.events.load_all(self.owner_id)

    async def change_owner(self, owner_id: int) -> None:
        """Switch to another caterer, dropping all state tied to the old one."""
        self.owner_id = owner_id
        self.availability.reset()
        self.events.reset()
        self.close_panel()
        await self.open()

    # Selection

    @property
    def is_panel_open(self) -> bool:
        return self.selected_date is not None

    @property
    def selected_key(self) -> str | None:
        return date_key(self.selected_date) if self.selected_date else None

    @property
    def events_for_selected_date(self) -> list[CalendarEvent]:
        return self.events.for_date(self.selected_key)

    def is_past_day(self, day: int) -> bool:
        return is_past(self.date_for(day), self._today())

    def _check_not_past(self, d: date) -> None:
        if is_past(d, self._today()):
            raise PastDateError(PAST_DATE_MESSAGE)

    async def click_day(self, day: int | None) -> bool:
        """
        Handle a click on a day cell.

        Returns True if the day was selected. Past days only raise a
        transient error; nothing else changes.
        """
        if not day:
            return False

        clicked = self.date_for(day)
        try:
            self._check_not_past(clicked)
        except PastDateError as e:
            self.error.flash(str(e))
            return False

        self.selected_date = clicked
        self.clear_form()
        self.clear_messages()

        try:
            await self.availability.cycle(self.owner_id, self.key_for(day))
        except NetworkError:
            self.error.flash(TOGGLE_FAILED_MESSAGE)
        return True

    def close_panel(self) -> None:
        self.selected_date = None
        self.clear_form()
        self.clear_messages()

    # Events

    async def save_event(self) -> CalendarEvent | None:
        """Create an event on the selected date from the form fields."""
        if self.selected_date is None:
            return None

        try:
            self._check_not_past(self.selected_date)
        except PastDateError as e:
            self.error.flash(str(e))
            return None

        draft = EventDraft(
            event_date=self.selected_key,
            event_host_name=self.host_name,
            managed_by=self.managed_by,
            location=self.location,
        )
        try:
            created = await self.events.create(self.owner_id, draft)
        except ValidationError as e:
            self.success.clear()
            self.error.show(str(e))
            return None
        except NetworkError as e:
            logger.warning(f"Failed to save event: {e}")
            self.error.flash(SAVE_FAILED_MESSAGE)
            return None

        self.clear_form()
        self.error.clear()
        self.success.flash(SAVE_SUCCESS_MESSAGE)
        return created

    async def delete_event(
        self,
        event_id: int,
        confirm: Callable[[CalendarEvent | None], bool],
    ) -> bool:
        """Delete an event after confirmation. Declining changes nothing."""
        try:
            deleted = await self.events.delete(self.owner_id, event_id, confirm)
        except NetworkError as e:
            logger.warning(f"Failed to delete event {event_id}: {e}")
            self.error.flash(DELETE_FAILED_MESSAGE)
            return False

        if deleted:
            self.success.flash(DELETE_SUCCESS_MESSAGE)
        return deleted

    # Rendering

    def day_cells(self) -> list[DayCell | None]:
        """Classify each day of the displayed month. Past days are never shown as selected."""
        counts = count_by_date(self.events.events)
        cells: list[DayCell | None] = []
        for day in self.days():
            if day is None:
                cells.append(None)
                continue

            key = self.key_for(day)
            if self.is_past_day(day):
                kind = DayKind.PAST
                selected = False
            else:
                kind = _KIND_BY_STATUS[self.status_for(day)]
                selected = self.selected_date == self.date_for(day)
            cells.append(DayCell(day=day, key=key, kind=kind, selected=selected, event_count=counts.get(key, 0)))
        return cells
