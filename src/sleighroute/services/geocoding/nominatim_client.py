"""HTTP client for Nominatim-compatible geocoding services."""

from __future__ import annotations

import logging
import time
from typing import Optional

import httpx

from ...config import settings

logger = logging.getLogger(__name__)


class GeocodingError(RuntimeError):
    """Raised when the geocoding service cannot be queried."""


class NominatimClient:
    def __init__(
        self,
        base_url: str | None = None,
        user_agent: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.geocoder_base_url).rstrip("/")
        if not self.base_url:
            raise ValueError("Geocoder base URL is not configured.")
        self.user_agent = user_agent or settings.geocoder_user_agent
        self.timeout = timeout if timeout is not None else settings.geocoder_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.geocoder_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.geocoder_backoff_seconds
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        # A fresh client per lookup; lookups run from worker threads.
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=5.0),
            headers={"User-Agent": self.user_agent, "Accept": "application/json"},
            transport=self._transport,
        )

    def _wait(self, attempt: int) -> None:
        wait_time = self.backoff_seconds * (2 ** (attempt - 1))
        if wait_time > 0:
            time.sleep(wait_time)

    def geocode(self, address: str) -> Optional[tuple[float, float]]:
        """Return ``(lat, lon)`` of the best match for ``address``, or None when nothing matches."""
        if not address or not address.strip():
            return None

        params = {"format": "json", "q": address, "limit": 1}
        url = f"{self.base_url}/search"

        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.get(url, params=params)
                    response.raise_for_status()
                    return _parse_search_results(response.json(), address)
                except httpx.HTTPStatusError as e:
                    status_code = e.response.status_code
                    if status_code < 500 and status_code != 429:
                        raise GeocodingError(
                            f"Geocoder rejected lookup for '{address}' (HTTP {status_code})."
                        ) from e
                    attempt += 1
                    if attempt > self.max_retries:
                        raise GeocodingError(
                            f"Geocoder kept failing for '{address}' (HTTP {status_code}) after {self.max_retries} retries."
                        ) from e
                    logger.debug(f"Geocoder returned HTTP {status_code}, retrying (attempt {attempt}/{self.max_retries})")
                    self._wait(attempt)
                except (httpx.TimeoutException, httpx.NetworkError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise GeocodingError(
                            f"Failed to reach geocoder at {self.base_url}: {e}"
                        ) from e
                    logger.debug(f"Geocoder network error, retrying (attempt {attempt}/{self.max_retries}): {e}")
                    self._wait(attempt)
                except ValueError as e:
                    raise GeocodingError(f"Geocoder returned invalid JSON for '{address}'.") from e
        finally:
            client.close()


def _parse_search_results(data: object, address: str) -> Optional[tuple[float, float]]:
    if not isinstance(data, list):
        raise GeocodingError(f"Unexpected geocoder response for '{address}'.")
    if not data:
        return None
    first = data[0]
    try:
        return float(first["lat"]), float(first["lon"])
    except (KeyError, TypeError, ValueError) as e:
        raise GeocodingError(f"Geocoder result for '{address}' has no usable coordinates.") from e


def check_health(base_url: str | None = None) -> bool:
    """Check geocoder reachability with a lookup of a well-known place."""
    base = (base_url or settings.geocoder_base_url).rstrip("/")
    if not base:
        return False
    try:
        response = httpx.get(
            f"{base}/search",
            params={"format": "json", "q": "Rovaniemi, Finland", "limit": 1},
            headers={"User-Agent": settings.geocoder_user_agent},
            timeout=5.0,
        )
        response.raise_for_status()
        return isinstance(response.json(), list)
    except (httpx.HTTPError, ValueError):
        return False
