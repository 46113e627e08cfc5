import logging
import math
from typing import Optional

import requests

from alarms.evaluator import ElapsedTimeReading

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://hackatime.hackclub.com/api/hackatime/v1"
TODAY_PATH = "/users/current/statusbar/today"


class TimeSourceError(Exception):
    pass


class AuthError(TimeSourceError):
    pass


class NetworkError(TimeSourceError):
    pass


class HackatimeClient:
    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def today_url(self) -> str:
        return self.base_url + TODAY_PATH

    def fetch_elapsed_time(self, api_key: str) -> ElapsedTimeReading:
        """Fetch today's coding total for the key's owner."""
        if not api_key:
            raise AuthError("Hackatime API key is not set")
        try:
            response = self.session.get(
                self.today_url,
                headers={"Authorization": f"Bearer {api_key}"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise NetworkError(f"Request to Hackatime failed: {exc}") from exc

        if response.status_code in (401, 403):
            raise AuthError(f"Hackatime rejected the API key (status {response.status_code})")
        if not response.ok:
            raise NetworkError(f"HTTP error! status: {response.status_code}")

        try:
            grand_total = response.json()["data"]["grand_total"]
            total_seconds = float(grand_total["total_seconds"])
            if not math.isfinite(total_seconds) or total_seconds < 0:
                raise ValueError(f"total_seconds out of range: {total_seconds}")
            reading = ElapsedTimeReading.from_total_seconds(total_seconds, str(grand_total.get("text") or ""))
        except (AttributeError, ValueError, KeyError, TypeError) as exc:
            raise NetworkError(f"Unexpected Hackatime response: {exc}") from exc

        logger.debug(
            "Fetched coding stats: %sh %sm (%s)", reading.hours, reading.minutes, reading.label or "no label"
        )
        return reading
