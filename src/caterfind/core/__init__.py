"""Functional core - pure business logic with no I/O."""

from .calendar_grid import (
    generate_days,
    format_date_key,
    parse_date_key,
    month_bounds,
    is_past,
)
from .availability import AvailabilityStatus, AvailabilityMap, next_status
from .events import CalendarEvent, EventDraft, events_for_date

__all__ = [
    # Grid
    "generate_days",
    "format_date_key",
    "parse_date_key",
    "month_bounds",
    "is_past",
    # Availability
    "AvailabilityStatus",
    "AvailabilityMap",
    "next_status",
    # Events
    "CalendarEvent",
    "EventDraft",
    "events_for_date",
]
