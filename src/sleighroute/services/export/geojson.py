"""GeoJSON export of optimized routes for map overlays."""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Sequence

from ...models.domain import Stop
from ..routing.models import RouteResult


def linestring_to_wkt(coordinates: List[List[float]]) -> str:
    """Convert linestring coordinates to WKT format.

    Args:
        coordinates: List of [lat, lon] pairs

    Returns:
        WKT LINESTRING string
    """
    if not coordinates or len(coordinates) < 2:
        raise ValueError("LineString must have at least 2 coordinates")

    # WKT uses lon,lat order (x,y)
    coord_pairs = [f"{lon} {lat}" for lat, lon in coordinates]
    return f"LINESTRING({','.join(coord_pairs)})"


def _route_path(stops: Sequence[Stop[Any]], origin: Optional[tuple[float, float]]) -> List[List[float]]:
    path: List[List[float]] = []
    if origin is not None:
        path.append([origin[0], origin[1]])
    for stop in stops:
        coordinates = stop.coordinates
        if coordinates is not None:
            path.append([coordinates[0], coordinates[1]])
    return path


def _stop_feature(sequence: int, stop: Stop[Any]) -> Dict[str, Any]:
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [stop.longitude, stop.latitude]},
        "properties": {
            "kind": "stop",
            "sequence": sequence,
            "stop_id": stop.stop_id,
            "address": stop.address,
        },
    }


def route_to_feature_collection(
    result: RouteResult,
    origin: Optional[tuple[float, float]] = None,
    name: str = "Sleigh route",
) -> Dict[str, Any]:
    """Build a FeatureCollection with the route polyline and one point per stop.

    Stops without coordinates are left out of both. The line is omitted when
    fewer than two positions remain.
    """
    features: List[Dict[str, Any]] = []

    path = _route_path(result.stops, origin)
    if len(path) >= 2:
        features.append(
            {
                "type": "Feature",
                "geometry": {
                    "type": "LineString",
                    "coordinates": [[lon, lat] for lat, lon in path],
                },
                "properties": {
                    "kind": "route",
                    "name": name,
                    "wkt": linestring_to_wkt(path),
                    "total_distance_km": result.total_distance_km if math.isfinite(result.total_distance_km) else None,
                    "stop_count": len(result.stops),
                    "complete": result.is_complete,
                },
            }
        )

    for sequence, stop in enumerate(result.stops, start=1):
        if stop.has_coordinates:
            features.append(_stop_feature(sequence, stop))

    return {"type": "FeatureCollection", "features": features}
