"""Attach coordinates to stops that do not have them yet."""

from __future__ import annotations

import dataclasses
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional, Protocol, Sequence

from ...config import settings
from ...models.domain import Stop, stop_label
from .cache import Coordinates, GeocodeCache
from .nominatim_client import GeocodingError

logger = logging.getLogger(__name__)


class Geocoder(Protocol):
    def geocode(self, address: str) -> Optional[Coordinates]:
        ...


def format_wish_address(
    street: str | None,
    house_number: str | None,
    postal_code: str | None,
    city: str | None,
    country: str | None,
) -> str | None:
    """Build the single-line address used for lookups and as cache key.

    Street, city and country are required; without them there is nothing
    worth sending to the geocoder.
    """
    if not street or not city or not country:
        return None
    return f"{street} {house_number or ''}, {postal_code or ''} {city}, {country}"


def _resolve(stop: Stop[Any], geocoder: Geocoder, cache: Optional[GeocodeCache]) -> Stop[Any]:
    if stop.has_coordinates:
        return stop

    if cache is not None:
        cached = cache.get(stop.address)
        if cached is not None:
            return dataclasses.replace(stop, latitude=cached[0], longitude=cached[1])

    try:
        coordinates = geocoder.geocode(stop.address)
    except GeocodingError as exc:
        logger.warning(f"Geocoding failed for stop {stop_label(stop)}: {exc}")
        return stop

    if coordinates is None:
        logger.debug(f"No geocoding match for stop {stop_label(stop)}")
        return stop

    if cache is not None:
        cache.set(stop.address, coordinates)
    return dataclasses.replace(stop, latitude=coordinates[0], longitude=coordinates[1])


def geocode_stops(
    stops: Sequence[Stop[Any]],
    geocoder: Geocoder,
    cache: Optional[GeocodeCache] = None,
    max_workers: int | None = None,
) -> list[Stop[Any]]:
    """Return ``stops`` in the same order with coordinates filled in where possible.

    Stops that already have coordinates are returned as is. A failed or empty
    lookup leaves the stop without coordinates.
    """
    pending = [stop for stop in stops if not stop.has_coordinates]
    if not pending:
        return list(stops)

    workers = max_workers or settings.geocoder_max_parallel_requests
    logger.info(f"Geocoding {len(pending)} of {len(stops)} stops ({workers} parallel lookups)")

    with ThreadPoolExecutor(max_workers=workers) as executor:
        resolved = list(executor.map(lambda stop: _resolve(stop, geocoder, cache), stops))

    missing = sum(1 for stop in resolved if not stop.has_coordinates)
    if missing:
        logger.warning(f"{missing} stop(s) still have no coordinates after geocoding")
    return resolved
