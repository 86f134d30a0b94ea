"""Calendar event repository interface."""

from typing import Protocol

from caterfind.core.events import CalendarEvent


class EventRepository(Protocol):
    """Interface for catering events on any backend."""

    def fetch_events(self, owner_id: int) -> list[CalendarEvent]:
        """Fetch every event for an owner."""
        ...

    def create_event(self, owner_id: int, payload: dict) -> CalendarEvent:
        """Create an event. The backend assigns the id."""
        ...

    def delete_event(self, event_id: int) -> None:
        """Delete an event by id."""
        ...
