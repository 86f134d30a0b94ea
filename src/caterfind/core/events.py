"""Pure catering event logic - no I/O dependencies."""

from dataclasses import dataclass

from caterfind.errors import ValidationError


@dataclass
class CalendarEvent:
    """A catering event attached to one date."""

    id: int
    event_date: str
    event_host_name: str
    managed_by: str | None = None
    location: str | None = None

    def format_line(self) -> str:
        """One-line summary for listings."""
        parts = [self.event_host_name]
        if self.managed_by:
            parts.append(f"managed by {self.managed_by}")
        if self.location:
            parts.append(f"@ {self.location}")
        return " ".join(parts)

    @classmethod
    def from_api(cls, data: dict) -> "CalendarEvent":
        """Create CalendarEvent from an API response item."""
        return cls(
            id=data["id"],
            event_date=data["eventDate"],
            event_host_name=data.get("eventHostName") or "",
            managed_by=data.get("managedBy"),
            location=data.get("location"),
        )


@dataclass
class EventDraft:
    """Form fields for an event that has not been submitted yet."""

    event_date: str
    event_host_name: str = ""
    managed_by: str = ""
    location: str = ""

    def to_api(self) -> dict:
        """
        Validate and build the create payload.

        Raises ValidationError if the host name is blank. Optional fields that
        are blank after trimming are sent as null.
        """
        host = (self.event_host_name or "").strip()
        if not host:
            raise ValidationError("Event host name is required")
        return {
            "eventDate": self.event_date,
            "eventHostName": host,
            "managedBy": _blank_to_none(self.managed_by),
            "location": _blank_to_none(self.location),
        }


def _blank_to_none(value: str | None) -> str | None:
    value = (value or "").strip()
    return value or None


def events_for_date(events: list[CalendarEvent], key: str | None) -> list[CalendarEvent]:
    """Events on a given date key. Pure function - no I/O."""
    if not key:
        return []
    return [e for e in events if e.event_date == key]


def count_by_date(events: list[CalendarEvent]) -> dict[str, int]:
    """Number of events per date key, for day-cell indicators."""
    counts: dict[str, int] = {}
    for event in events:
        counts[event.event_date] = counts.get(event.event_date, 0) + 1
    return counts
