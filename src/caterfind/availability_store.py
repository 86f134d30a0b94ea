"""Availability cache for the visible month, backed by a remote repository."""

import asyncio
import logging

from caterfind.core.availability import (
    AvailabilityMap,
    AvailabilityStatus,
    build_availability_map,
    next_status,
    status_for,
    with_status,
)
from caterfind.errors import NetworkError
from caterfind.ports import AvailabilityRepository

logger = logging.getLogger(__name__)


class AvailabilityStore:
    """
    Local availability map plus the remote writes that keep it honest.

    ``availability`` always reflects what the user should see: confirmed
    server state with any in-flight optimistic changes applied on top.
    ``_confirmed`` tracks the last state the server acknowledged and is what
    a failed write rolls back to.

    Concurrency rules:
    - Each load takes a generation number; a load that resolves after a newer
      one started is discarded, including its failure.
    - A load that lands keeps local writes its snapshot may predate: dates
      with a write still in flight keep their optimistic status, and writes
      confirmed after the load started stay confirmed.
    - Writes to the same date run one at a time. A queued write that has been
      superseded by a newer click on the same date is skipped, and only the
      newest write for a date may roll it back.
    - ``reset`` starts a new owner; writes still in flight for the previous
      owner no longer touch any local state.
    """

    def __init__(self, repo: AvailabilityRepository):
        self._repo = repo
        self.availability: AvailabilityMap = {}
        self._confirmed: AvailabilityMap = {}
        self._load_generation = 0
        self._owner_generation = 0
        self._write_generation: dict[str, int] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        # Latest clicked status for dates whose newest write hasn't resolved
        self._pending: AvailabilityMap = {}
        # Date -> (load generation when confirmed, status)
        self._confirmed_since: dict[str, tuple[int, AvailabilityStatus]] = {}
        self.last_error: NetworkError | None = None

    def status_for(self, key: str) -> AvailabilityStatus:
        return status_for(self.availability, key)

    def reset(self) -> None:
        """Forget everything, e.g. when the owner changes."""
        self.availability = {}
        self._confirmed = {}
        self._pending = {}
        self._confirmed_since = {}
        self._load_generation += 1
        self._owner_generation += 1
        self._write_generation.clear()
        self._locks.clear()
        self.last_error = None

    async def load_range(self, owner_id: int, start_key: str, end_key: str) -> AvailabilityMap:
        """
        Replace the map with the server's entries for [start_key, end_key].

        A failed load is logged and leaves the previous map in place.
        """
        self._load_generation += 1
        generation = self._load_generation

        try:
            items = await asyncio.to_thread(self._repo.fetch_range, owner_id, start_key, end_key)
        except NetworkError as e:
            if generation != self._load_generation:
                logger.debug(f"Ignoring failed stale load for {start_key}..{end_key}: {e}")
                return self.availability
            logger.warning(f"Failed to load availability {start_key}..{end_key}: {e}")
            self.last_error = e
            return self.availability

        if generation != self._load_generation:
            logger.debug(f"Discarding stale availability for {start_key}..{end_key}")
            return self.availability

        confirmed = build_availability_map(items)
        for key, (since, status) in self._confirmed_since.items():
            if since >= generation and start_key <= key <= end_key:
                confirmed = with_status(confirmed, key, status)
        self._confirmed_since = {
            key: entry for key, entry in self._confirmed_since.items() if entry[0] >= generation
        }

        shown = dict(confirmed)
        for key, status in self._pending.items():
            if start_key <= key <= end_key:
                shown = with_status(shown, key, status)

        self._confirmed = confirmed
        self.availability = shown
        self.last_error = None
        return self.availability

    async def set_status(self, owner_id: int, key: str, status: AvailabilityStatus) -> None:
        """Persist one date's status. Raises NetworkError on failure."""
        await asyncio.to_thread(self._repo.put_status, owner_id, key, status)

    async def cycle(self, owner_id: int, key: str) -> AvailabilityStatus:
        """
        Advance a date to its next status and persist it.

        The new status is visible in ``availability`` before the write
        resolves. If the write fails, the date reverts to its last confirmed
        status and the NetworkError propagates.
        """
        status = next_status(self.status_for(key))
        self.availability = with_status(self.availability, key, status)
        self._pending[key] = status

        generation = self._write_generation.get(key, 0) + 1
        self._write_generation[key] = generation
        owner_generation = self._owner_generation
        lock = self._locks.setdefault(key, asyncio.Lock())

        async with lock:
            if owner_generation != self._owner_generation:
                logger.debug(f"Skipping write for {key}, owner {owner_id} is no longer shown")
                return status
            if self._write_generation.get(key) != generation:
                logger.debug(f"Skipping superseded write for {key}")
                return status

            try:
                await self.set_status(owner_id, key, status)
            except NetworkError as e:
                if owner_generation != self._owner_generation:
                    logger.warning(f"Failed to save {key} for owner {owner_id}: {e}")
                    raise
                self.last_error = e
                if self._write_generation.get(key) == generation:
                    self._pending.pop(key, None)
                    confirmed = status_for(self._confirmed, key)
                    logger.warning(f"Failed to save {key}, rolling back to {confirmed.value}: {e}")
                    self.availability = with_status(self.availability, key, confirmed)
                else:
                    logger.warning(f"Failed to save superseded change for {key}: {e}")
                raise

            if owner_generation != self._owner_generation:
                logger.debug(f"Saved {key} for owner {owner_id}, which is no longer shown")
                return status

            self._confirmed = with_status(self._confirmed, key, status)
            self._confirmed_since[key] = (self._load_generation, status)
            if self._write_generation.get(key) == generation:
                self._pending.pop(key, None)

        return status
