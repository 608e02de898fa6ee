#!/usr/bin/env python3
"""Script to verify geocoder connectivity and a small route optimization end to end."""

import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / "src"))

from sleighroute.config import settings
from sleighroute.models.domain import Stop
from sleighroute.services.geocoding import GeocodeCache, GeocodingError, NominatimClient, geocode_stops
from sleighroute.services.geocoding.nominatim_client import check_health
from sleighroute.services.routing import find_shortest_route


def main():
    print("=" * 60)
    print("Geocoder Connection Test")
    print("=" * 60)
    print()

    print("1. Checking geocoder configuration...")
    print(f"   [OK] Base URL: {settings.geocoder_base_url}")
    print(f"   [OK] User-Agent: {settings.geocoder_user_agent}")
    print()

    print("2. Testing geocoder health check...")
    if not check_health():
        print("   [ERROR] Geocoder is not responding")
        return 1
    print("   [OK] Geocoder is reachable")
    print()

    print("3. Geocoding and routing three German cities...")
    stops = [
        Stop(stop_id=1, address="Berlin, Germany"),
        Stop(stop_id=2, address="Hamburg, Germany"),
        Stop(stop_id=3, address="Munich, Germany"),
    ]
    try:
        geocoded = geocode_stops(stops, NominatimClient(), cache=GeocodeCache(), max_workers=1)
    except GeocodingError as e:
        print(f"   [ERROR] Geocoding failed: {e}")
        return 1

    result = find_shortest_route(geocoded)
    for index, stop in enumerate(result.stops, start=1):
        print(f"   {index}. {stop.address} ({stop.latitude}, {stop.longitude})")
    print(f"   Total distance: {result.total_distance_km:.2f} km")
    if not result.is_complete:
        print("   [ERROR] Some stops could not be geocoded")
        return 1
    print()

    print("=" * 60)
    print("[SUCCESS] Geocoder is connected and working!")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
