"""Shared fixtures: an in-memory backend standing in for the REST API."""

import asyncio
import threading
from datetime import date

import pytest

from caterfind.availability_store import AvailabilityStore
from caterfind.core.availability import AvailabilityStatus
from caterfind.core.events import CalendarEvent
from caterfind.errors import NetworkError
from caterfind.event_store import EventStore


class Gate:
    """Holds a backend call after it has read its data, until released."""

    def __init__(self):
        self.reached = threading.Event()
        self.released = threading.Event()

    def pass_through(self):
        self.reached.set()
        self.released.wait(timeout=5)

    async def wait_reached(self):
        await asyncio.to_thread(self.reached.wait, 5)

    def release(self):
        self.released.set()


class FakeBackend:
    """
    In-memory availability and event backend.

    Implements AvailabilityRepository and EventRepository. Records every call
    so tests can assert on what was (or wasn't) sent. ``gates`` hold calls
    mid-flight: ("range", start_key), ("events", owner_id), ("put", owner_id).
    """

    def __init__(self):
        self.availability: dict[str, str] = {}
        self.events: list[CalendarEvent] = []
        self.events_by_owner: dict[int, list[CalendarEvent]] = {}
        self.fetch_range_calls: list[tuple[int, str, str]] = []
        self.put_calls: list[tuple[str, AvailabilityStatus]] = []
        self.created: list[dict] = []
        self.deleted: list[int] = []
        self.fetch_events_calls = 0
        self.fail_loads = False
        self.fail_writes = False
        self.fail_put_numbers: set[int] = set()
        self.on_put = None
        self.gates: dict[tuple, Gate] = {}
        self._next_id = 100

    def _pass_gate(self, *name):
        gate = self.gates.get(name)
        if gate is not None:
            gate.pass_through()

    def fetch_range(self, owner_id: int, start_key: str, end_key: str) -> list[dict]:
        self.fetch_range_calls.append((owner_id, start_key, end_key))
        failing = self.fail_loads
        items = [
            {"date": key, "status": status}
            for key, status in sorted(self.availability.items())
            if start_key <= key <= end_key
        ]
        self._pass_gate("range", start_key)
        if failing:
            raise NetworkError("connection refused")
        return items

    def put_status(self, owner_id: int, date_key: str, status: AvailabilityStatus) -> None:
        self.put_calls.append((date_key, status))
        if self.on_put:
            self.on_put(date_key, status)
        self._pass_gate("put", owner_id)
        if self.fail_writes or len(self.put_calls) in self.fail_put_numbers:
            raise NetworkError("Failed to update availability", status_code=500)
        if status is AvailabilityStatus.UNSET:
            self.availability.pop(date_key, None)
        else:
            self.availability[date_key] = status.value

    def fetch_events(self, owner_id: int) -> list[CalendarEvent]:
        self.fetch_events_calls += 1
        failing = self.fail_loads
        events = list(self.events_by_owner.get(owner_id, self.events))
        self._pass_gate("events", owner_id)
        if failing:
            raise NetworkError("connection refused")
        return events

    def create_event(self, owner_id: int, payload: dict) -> CalendarEvent:
        self.created.append(payload)
        if self.fail_writes:
            raise NetworkError("Failed to create event", status_code=500)
        self._next_id += 1
        event = CalendarEvent(
            id=self._next_id,
            event_date=payload["eventDate"],
            event_host_name=payload["eventHostName"],
            managed_by=payload["managedBy"],
            location=payload["location"],
        )
        self.events.append(event)
        return event

    def delete_event(self, event_id: int) -> None:
        self.deleted.append(event_id)
        if self.fail_writes:
            raise NetworkError("Failed to delete event", status_code=500)
        self.events = [e for e in self.events if e.id != event_id]


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def availability_store(backend):
    return AvailabilityStore(backend)


@pytest.fixture
def event_store(backend):
    return EventStore(backend)


@pytest.fixture
def today():
    return date(2026, 2, 13)


@pytest.fixture
def hold(backend):
    """Gate a backend call by name, e.g. ``hold("put", 7)``."""

    def hold(*name) -> Gate:
        gate = backend.gates[name] = Gate()
        return gate

    return hold
