"""Availability repository interface."""

from typing import Protocol

from caterfind.core.availability import AvailabilityStatus


class AvailabilityRepository(Protocol):
    """Interface for reading and writing per-date availability on any backend."""

    def fetch_range(self, owner_id: int, start_key: str, end_key: str) -> list[dict]:
        """Fetch ``{date, status}`` items between two date keys, inclusive."""
        ...

    def put_status(self, owner_id: int, date_key: str, status: AvailabilityStatus) -> None:
        """Persist one date's status. UNSET clears the date."""
        ...
