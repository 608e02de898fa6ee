"""Routing orchestration service."""

from __future__ import annotations

import logging
import math
from typing import Any, Optional, Sequence

from ...config import settings
from ...models.domain import Stop
from ...schemas.routing import (
    FlightLegModel,
    FlightPlanModel,
    RouteOptimizationRequest,
    RouteOptimizationResponse,
    StartReference,
    StopModel,
)
from ..export.geojson import route_to_feature_collection
from ..geocoding.cache import GeocodeCache
from ..geocoding.nominatim_client import NominatimClient
from ..geocoding.service import Geocoder, geocode_stops
from .flight_plan import NORTH_POLE, build_flight_plan, format_co2, format_flight_time
from .models import FlightPlan, RouteResult
from .optimizer import find_shortest_route

logger = logging.getLogger(__name__)


def _finite_or_none(value: float) -> Optional[float]:
    return value if math.isfinite(value) else None


def _to_domain(model: StopModel) -> Stop[dict]:
    return Stop(
        address=model.address,
        stop_id=model.stop_id,
        latitude=model.latitude,
        longitude=model.longitude,
        payload=model.payload,
    )


def _to_model(stop: Stop[Any]) -> StopModel:
    return StopModel(
        stop_id=stop.stop_id,
        address=stop.address,
        latitude=stop.latitude,
        longitude=stop.longitude,
        payload=stop.payload or {},
    )


def _start_probe(start: Optional[StartReference]) -> Optional[Stop[Any]]:
    if start is None:
        return None
    # Addresses are never empty, so an id-only reference cannot match by address.
    return Stop(address=start.address or "", stop_id=start.stop_id)


def _flight_plan_model(plan: FlightPlan) -> FlightPlanModel:
    return FlightPlanModel(
        origin=list(plan.origin) if plan.origin is not None else None,
        total_distance_km=plan.total_distance_km,
        total_flight_time_min=plan.total_flight_time_min,
        total_co2_kg=plan.total_co2_kg,
        total_flight_time_label=format_flight_time(plan.total_flight_time_min / 60.0),
        total_co2_label=format_co2(plan.total_co2_kg),
        legs=[
            FlightLegModel(
                sequence=leg.sequence,
                stop_id=leg.stop.stop_id,
                address=leg.stop.address,
                distance_from_prev_km=leg.distance_from_prev_km,
                cumulative_distance_km=leg.cumulative_distance_km,
                flight_time_min=leg.flight_time_min,
                co2_kg=leg.co2_kg,
            )
            for leg in plan.legs
        ],
    )


def _prepare_stops(
    payload: RouteOptimizationRequest,
    geocoder: Optional[Geocoder],
    cache: Optional[GeocodeCache],
) -> list[Stop[Any]]:
    stops = [_to_domain(model) for model in payload.stops]
    missing = [stop for stop in stops if not stop.has_coordinates]
    if missing and payload.geocode:
        stops = geocode_stops(stops, geocoder or NominatimClient(), cache=cache)
        missing = [stop for stop in stops if not stop.has_coordinates]
    if missing:
        logger.warning(
            f"{len(missing)} of {len(stops)} stops have no coordinates; "
            "they are unreachable and may be left out of the route."
        )
    return stops


def _solve(payload: RouteOptimizationRequest, stops: Sequence[Stop[Any]]) -> RouteResult:
    result = find_shortest_route(
        stops,
        start=_start_probe(payload.start),
        use_two_opt=payload.use_two_opt,
        max_start_candidates=settings.max_start_candidates,
        max_iterations=settings.two_opt_max_iterations,
    )
    if not result.is_complete:
        logger.warning(f"Route covers {len(result.stops)} of {result.input_count} stops.")
    return result


def optimize_route(
    payload: RouteOptimizationRequest,
    geocoder: Optional[Geocoder] = None,
    cache: Optional[GeocodeCache] = None,
) -> RouteOptimizationResponse:
    stops = _prepare_stops(payload, geocoder, cache)
    result = _solve(payload, stops)

    routed = {id(stop) for stop in result.stops}
    unrouted = [stop for stop in stops if id(stop) not in routed]

    flight_plan = None
    if result.stops and all(stop.has_coordinates for stop in result.stops):
        plan = build_flight_plan(
            result.stops,
            origin=NORTH_POLE if payload.depart_from_north_pole else None,
            speed_kmh=settings.sleigh_speed_kmh,
            cargo_weight_kg=payload.cargo_weight_kg,
        )
        flight_plan = _flight_plan_model(plan)

    metadata = {
        "status": "complete" if result.is_complete else "partial",
        "algorithm": "nearest_neighbor+2opt" if payload.use_two_opt else "nearest_neighbor",
        "stop_count": result.input_count,
        "routed_count": len(result.stops),
        "start_pinned": payload.start is not None,
    }

    return RouteOptimizationResponse(
        stops=[_to_model(stop) for stop in result.stops],
        unrouted=[_to_model(stop) for stop in unrouted],
        total_distance_km=_finite_or_none(result.total_distance_km),
        distance_matrix=[[_finite_or_none(value) for value in row] for row in result.distance_matrix],
        complete=result.is_complete,
        flight_plan=flight_plan,
        metadata=metadata,
    )


def export_route(
    payload: RouteOptimizationRequest,
    geocoder: Optional[Geocoder] = None,
    cache: Optional[GeocodeCache] = None,
) -> dict:
    stops = _prepare_stops(payload, geocoder, cache)
    result = _solve(payload, stops)
    origin = NORTH_POLE if payload.depart_from_north_pole else None
    return route_to_feature_collection(result, origin=origin)
