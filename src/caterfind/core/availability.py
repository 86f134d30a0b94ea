"""Pure availability domain logic - no I/O dependencies."""

from enum import Enum


class AvailabilityStatus(Enum):
    """Per-date status. UNSET is never stored; it is the absence of an entry."""

    AVAILABLE = "available"
    BUSY = "busy"
    UNSET = "neutral"

    @classmethod
    def from_api(cls, value: str | None) -> "AvailabilityStatus":
        """Parse a wire status. Empty or unknown values are treated as UNSET."""
        if not value:
            return cls.UNSET
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.UNSET


AvailabilityMap = dict[str, AvailabilityStatus]

_CYCLE = {
    AvailabilityStatus.UNSET: AvailabilityStatus.AVAILABLE,
    AvailabilityStatus.AVAILABLE: AvailabilityStatus.BUSY,
    AvailabilityStatus.BUSY: AvailabilityStatus.UNSET,
}


def next_status(current: AvailabilityStatus) -> AvailabilityStatus:
    """Click cycle: unset -> available -> busy -> unset."""
    return _CYCLE[current]


def status_for(availability: AvailabilityMap, key: str) -> AvailabilityStatus:
    return availability.get(key, AvailabilityStatus.UNSET)


def with_status(
    availability: AvailabilityMap,
    key: str,
    status: AvailabilityStatus,
) -> AvailabilityMap:
    """
    Return a copy of the map with one date changed.

    Setting UNSET removes the entry. Pure function - no I/O.
    """
    updated = dict(availability)
    if status is AvailabilityStatus.UNSET:
        updated.pop(key, None)
    else:
        updated[key] = status
    return updated


def build_availability_map(items: list[dict]) -> AvailabilityMap:
    """Key API items by their ``date`` field, dropping unset entries."""
    availability: AvailabilityMap = {}
    for item in items:
        key = item.get("date")
        status = AvailabilityStatus.from_api(item.get("status"))
        if not key or status is AvailabilityStatus.UNSET:
            continue
        availability[key] = status
    return availability
