"""Ports - interfaces/protocols for external dependencies."""

from .availability_repo import AvailabilityRepository
from .event_repo import EventRepository

__all__ = [
    "AvailabilityRepository",
    "EventRepository",
]
