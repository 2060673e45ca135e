"""
Async client for the Home Assistant Health Connect sensor.

requests is synchronous; the GET runs in the default thread pool executor so
it doesn't block the asyncio event loop.

Response handling:
    200  -> the sensor state's `attributes`, parsed into SensorData (per-date
            readings are validated later, one date at a time)
    404  -> NoNewDataError (the sensor has nothing published yet)
    else -> SensorFetchError
"""
import asyncio
import logging
from typing import Dict, Optional

import requests
from pydantic import ValidationError

from healthnotes.config import Settings
from healthnotes.models.readings import SensorData

logger = logging.getLogger(__name__)


class SensorFetchError(RuntimeError):
    """Raised when the sensor state could not be fetched or parsed."""


class NoNewDataError(RuntimeError):
    """Raised when Home Assistant reports no state for the sensor (HTTP 404)."""


class SensorClient:
    """Fetches the Health Connect sensor snapshot from Home Assistant."""

    def __init__(
        self,
        instance_uri: str,
        token: str,
        sensor: str = "health_connect",
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self.instance_uri = instance_uri
        self.token = token
        self.sensor = sensor
        self.timeout = timeout
        self._session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings) -> "SensorClient":
        return cls(
            instance_uri=settings.instance_uri,
            token=settings.token,
            sensor=settings.sensor,
            timeout=settings.request_timeout,
        )

    def sensor_url(self) -> str:
        separator = "" if self.instance_uri.endswith("/") else "/"
        prefix = "" if self.sensor.startswith("sensor.") else "sensor."
        return f"{self.instance_uri}{separator}api/states/{prefix}{self.sensor}"

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
        }

    async def fetch_snapshot(self) -> SensorData:
        """
        Fetch and parse the current sensor snapshot.

        Raises:
            NoNewDataError: on HTTP 404.
            SensorFetchError: on any other non-200 status, a network error,
                or a body that isn't a sensor state.
        """
        loop = asyncio.get_event_loop()
        response = await loop.run_in_executor(None, self._get)

        if response.status_code == 404:
            raise NoNewDataError(f"no state for sensor {self.sensor!r}")
        if response.status_code != 200:
            raise SensorFetchError(
                f"Home Assistant returned HTTP {response.status_code} for {self.sensor_url()}"
            )

        try:
            body = response.json()
            attributes = body.get("attributes") or {}
            return SensorData.model_validate(attributes)
        except (ValueError, AttributeError, ValidationError) as exc:
            raise SensorFetchError(f"unexpected sensor state payload: {exc}") from exc

    def _get(self) -> requests.Response:
        url = self.sensor_url()
        logger.info("Fetching %s", url)
        try:
            return self._session.get(url, headers=self._headers(), timeout=self.timeout)
        except requests.RequestException as exc:
            raise SensorFetchError(f"request to {url} failed: {exc}") from exc
