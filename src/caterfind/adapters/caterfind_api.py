"""CaterFind REST adapter - HTTP client for availability and events."""

import logging

import requests

from caterfind.config import Config, load_config
from caterfind.core.availability import AvailabilityStatus
from caterfind.core.events import CalendarEvent
from caterfind.errors import NetworkError

logger = logging.getLogger(__name__)

AVAILABILITY_PATH = "/api/availability"
EVENTS_PATH = "/api/calendar/events"


class CaterfindAPIAdapter:
    """
    CaterFind backend adapter.

    Implements the AvailabilityRepository and EventRepository protocols.
    Every transport or HTTP failure is raised as NetworkError. No business
    logic - just I/O.
    """

    def __init__(self, config: Config | None = None, session: requests.Session | None = None):
        self.config = config or load_config()
        self.base_url = self.config.api_base_url.rstrip("/")
        self._session = session or requests.Session()

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        """Make an API request, translating failures into NetworkError."""
        url = f"{self.base_url}{path}"
        try:
            resp = self._session.request(
                method,
                url,
                timeout=self.config.request_timeout,
                **kwargs,
            )
        except requests.RequestException as e:
            raise NetworkError(f"{method} {path} failed: {e}") from e

        if not resp.ok:
            raise NetworkError(
                f"{method} {path} failed: {_error_message(resp)}",
                status_code=resp.status_code,
            )
        return resp

    def _json(self, resp: requests.Response):
        try:
            return resp.json()
        except ValueError as e:
            raise NetworkError(f"Invalid JSON from {resp.url}") from e

    # Availability

    def fetch_range(self, owner_id: int, start_key: str, end_key: str) -> list[dict]:
        """Fetch availability items between two dates, inclusive."""
        resp = self._request(
            "GET",
            AVAILABILITY_PATH,
            params={"userId": owner_id, "startDate": start_key, "endDate": end_key},
        )
        return self._json(resp)

    def put_status(self, owner_id: int, date_key: str, status: AvailabilityStatus) -> None:
        """Persist a date's status. The backend deletes the record for 'neutral'."""
        self._request(
            "POST",
            AVAILABILITY_PATH,
            params={"userId": owner_id},
            json={"date": date_key, "status": status.value},
        )
        logger.debug(f"Saved {date_key} as {status.value} for owner {owner_id}")

    # Events

    def fetch_events(self, owner_id: int) -> list[CalendarEvent]:
        """Fetch all events for an owner."""
        resp = self._request("GET", EVENTS_PATH, params={"userId": owner_id})
        return [CalendarEvent.from_api(item) for item in self._json(resp)]

    def create_event(self, owner_id: int, payload: dict) -> CalendarEvent:
        """Create an event and return it with its assigned id."""
        resp = self._request("POST", EVENTS_PATH, params={"userId": owner_id}, json=payload)
        return CalendarEvent.from_api(self._json(resp))

    def delete_event(self, event_id: int) -> None:
        """Delete an event."""
        self._request("DELETE", f"{EVENTS_PATH}/{event_id}")


def _error_message(resp: requests.Response) -> str:
    """Pull the backend's {"error": ...} message, falling back to the status."""
    try:
        data = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("error"):
        return data["error"]
    return f"HTTP {resp.status_code}"
