"""Geocoding services."""

from .cache import GeocodeCache
from .nominatim_client import GeocodingError, NominatimClient
from .service import format_wish_address, geocode_stops

__all__ = [
    "GeocodeCache",
    "GeocodingError",
    "NominatimClient",
    "format_wish_address",
    "geocode_stops",
]
