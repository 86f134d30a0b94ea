"""Catering events for one owner, reloaded from the server after every change."""

import asyncio
import logging
from typing import Callable

from caterfind.core.events import CalendarEvent, EventDraft, events_for_date
from caterfind.errors import NetworkError
from caterfind.ports import EventRepository

logger = logging.getLogger(__name__)


class EventStore:
    """
    Event list with server-authoritative create and delete.

    Nothing is inserted or removed locally; successful writes trigger a full
    reload so ids and ordering always come from the backend.
    """

    def __init__(self, repo: EventRepository):
        self._repo = repo
        self.events: list[CalendarEvent] = []
        self.last_error: NetworkError | None = None
        self._load_generation = 0
        self._owner_generation = 0

    def for_date(self, key: str | None) -> list[CalendarEvent]:
        return events_for_date(self.events, key)

    def find(self, event_id: int) -> CalendarEvent | None:
        return next((e for e in self.events if e.id == event_id), None)

    def reset(self) -> None:
        """Forget all events, e.g. when the owner changes."""
        self.events = []
        self.last_error = None
        self._load_generation += 1
        self._owner_generation += 1

    async def load_all(self, owner_id: int) -> list[CalendarEvent]:
        """
        Reload every event. A failed load is logged and keeps the old list.

        Only the most recently started load may change the list.
        """
        self._load_generation += 1
        generation = self._load_generation

        try:
            events = await asyncio.to_thread(self._repo.fetch_events, owner_id)
        except NetworkError as e:
            if generation != self._load_generation:
                logger.debug(f"Ignoring failed stale event load for owner {owner_id}: {e}")
                return self.events
            logger.warning(f"Failed to load events for owner {owner_id}: {e}")
            self.last_error = e
            return self.events

        if generation != self._load_generation:
            logger.debug(f"Discarding stale events for owner {owner_id}")
            return self.events

        self.events = events
        self.last_error = None
        return self.events

    async def create(self, owner_id: int, draft: EventDraft) -> CalendarEvent:
        """
        Submit a new event, then reload.

        Raises ValidationError before any request if the host name is blank,
        and NetworkError if the backend rejects the event.
        """
        payload = draft.to_api()
        owner_generation = self._owner_generation
        created = await asyncio.to_thread(self._repo.create_event, owner_id, payload)
        logger.info(f"Created event {created.id} on {created.event_date}")
        await self._reload_after_write(owner_id, owner_generation)
        return created

    async def delete(
        self,
        owner_id: int,
        event_id: int,
        confirm: Callable[[CalendarEvent | None], bool],
    ) -> bool:
        """
        Delete an event once the user confirms.

        Returns False without touching anything if confirmation is declined.
        """
        if not confirm(self.find(event_id)):
            return False

        owner_generation = self._owner_generation
        await asyncio.to_thread(self._repo.delete_event, event_id)
        logger.info(f"Deleted event {event_id}")
        await self._reload_after_write(owner_id, owner_generation)
        return True

    async def _reload_after_write(self, owner_id: int, owner_generation: int) -> None:
        if owner_generation != self._owner_generation:
            logger.debug(f"Not reloading events for owner {owner_id}, which is no longer shown")
            return
        await self.load_all(owner_id)
