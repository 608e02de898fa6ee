"""Sleigh flight plan: per-leg distance, flight time and emissions for a route."""

from __future__ import annotations

import math
from typing import Any, Optional, Sequence

from ...models.domain import Stop, stop_label
from ..geospatial import haversine_km
from .models import FlightLeg, FlightPlan

# Santa's air route starts at the geographic North Pole.
NORTH_POLE = (90.0, 0.0)

SLEIGH_SPEED_KMH = 1000.0

# kg CO2 per km flown, reindeer methane after the magic-dust discount
SLEIGH_CO2_PER_KM = 0.045
# kg CO2 per kg of cargo per km
CARGO_CO2_PER_KG_KM = 0.001

KG_PER_LB = 0.453592


def lbs_to_kg(lbs: float) -> float:
    return lbs * KG_PER_LB


def calculate_co2(distance_km: float, cargo_weight_kg: float = 0.0) -> float:
    """Emissions in kg for flying ``distance_km`` with ``cargo_weight_kg`` on board."""
    return distance_km * SLEIGH_CO2_PER_KM + cargo_weight_kg * distance_km * CARGO_CO2_PER_KG_KM


def _round_half_up(value: float) -> int:
    # Halves round up, so 22.5 minutes reads as 23m.
    return math.floor(value + 0.5)


def format_flight_time(hours: float) -> str:
    if hours < 1:
        return f"{_round_half_up(hours * 60)}m"
    whole_hours = int(hours)
    minutes = _round_half_up((hours - whole_hours) * 60)
    return f"{whole_hours}h {minutes}m" if minutes > 0 else f"{whole_hours}h"


def format_co2(kg: float) -> str:
    if kg < 1:
        return f"{_round_half_up(kg * 1000)} g"
    return f"{kg:.1f} kg"


def build_flight_plan(
    route: Sequence[Stop[Any]],
    origin: Optional[tuple[float, float]] = None,
    speed_kmh: float = SLEIGH_SPEED_KMH,
    cargo_weight_kg: float = 0.0,
) -> FlightPlan:
    """Break an ordered route into legs.

    The first leg is flown from ``origin`` when one is given (typically
    :data:`NORTH_POLE`), otherwise the route starts at its first stop and that
    leg has zero length. ``co2_kg`` on each leg is the cumulative emission
    needed to reach that stop.
    """
    if speed_kmh <= 0:
        raise ValueError("Sleigh speed must be positive.")

    legs: list[FlightLeg] = []
    previous = origin
    cumulative = 0.0

    for sequence, stop in enumerate(route, start=1):
        coordinates = stop.coordinates
        if coordinates is None:
            raise ValueError(f"Stop {stop_label(stop)} has no coordinates; geocode it before planning the flight.")

        leg_distance = haversine_km(*previous, *coordinates) if previous is not None else 0.0
        cumulative += leg_distance
        legs.append(
            FlightLeg(
                sequence=sequence,
                stop=stop,
                distance_from_prev_km=leg_distance,
                cumulative_distance_km=cumulative,
                flight_time_min=leg_distance / speed_kmh * 60.0,
                co2_kg=calculate_co2(cumulative, cargo_weight_kg),
            )
        )
        previous = coordinates

    return FlightPlan(
        origin=origin,
        legs=tuple(legs),
        total_distance_km=cumulative,
        total_flight_time_min=cumulative / speed_kmh * 60.0,
        total_co2_kg=calculate_co2(cumulative, cargo_weight_kg),
    )
