from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)

GOOGLE_CALENDAR_API_BASE = "https://www.googleapis.com/calendar/v3"


class GoogleCalendarError(RuntimeError):
    """
    Raised when the Google Calendar API cannot be reached or returns an
    unusable response.
    """


class GoogleCalendarClient:
    """
    Minimal read-only client for public Google calendars.

    Responsibilities
    ----------------
    - Expand recurring entries server-side (singleEvents=true) ordered by start.
    - Follow nextPageToken pagination until the listing is exhausted.
    - Keep httpx details out of the sync pipeline.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = GOOGLE_CALENDAR_API_BASE,
        timeout_seconds: float = 30.0,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds

    def events_url(self, calendar_id: str) -> str:
        return f"{self._base_url}/calendars/{quote(calendar_id, safe='')}/events"

    async def get_events(
        self,
        calendar_id: str,
        time_min: datetime,
        time_max: datetime,
    ) -> List[Dict[str, Any]]:
        """
        Fetch every event instance of `calendar_id` within [time_min, time_max).

        Raises GoogleCalendarError on non-2xx responses or malformed JSON.
        """
        url = self.events_url(calendar_id)
        all_events: List[Dict[str, Any]] = []
        page_token: Optional[str] = None

        async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
            while True:
                params: Dict[str, Any] = {
                    "timeMin": time_min.isoformat(),
                    "timeMax": time_max.isoformat(),
                    "singleEvents": "true",
                    "orderBy": "startTime",
                }
                if self._api_key:
                    params["key"] = self._api_key
                if page_token:
                    params["pageToken"] = page_token

                logger.info("Requesting events for calendar %s (page=%s)", calendar_id, page_token)
                try:
                    resp = await client.get(url, params=params)
                except httpx.HTTPError as exc:
                    raise GoogleCalendarError(f"Failed to fetch events: {exc}") from exc

                if resp.status_code // 100 != 2:
                    raise GoogleCalendarError(
                        f"Google Calendar request failed (status={resp.status_code}): {resp.text}"
                    )

                try:
                    payload = resp.json()
                except ValueError as exc:
                    raise GoogleCalendarError(f"Failed to decode response: {exc}") from exc

                all_events.extend(payload.get("items") or [])

                page_token = payload.get("nextPageToken")
                if not page_token:
                    break

        return all_events
