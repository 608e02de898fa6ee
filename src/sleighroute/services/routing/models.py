"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from ...models.domain import Stop

DistanceMatrix = list[list[float]]


@dataclass(frozen=True, slots=True)
class Tour:
    stops: Tuple[Stop[Any], ...]
    total_distance_km: float


@dataclass(frozen=True, slots=True)
class RouteResult:
    """Outcome of a route optimization call.

    ``stops`` may be shorter than the input when some stops could not be
    reached (missing coordinates); see :attr:`is_complete`.
    """

    stops: Tuple[Stop[Any], ...]
    total_distance_km: float
    distance_matrix: DistanceMatrix
    input_count: int

    @property
    def is_complete(self) -> bool:
        return len(self.stops) == self.input_count


@dataclass(frozen=True, slots=True)
class FlightLeg:
    sequence: int
    stop: Stop[Any]
    distance_from_prev_km: float
    cumulative_distance_km: float
    flight_time_min: float
    co2_kg: float


@dataclass(frozen=True, slots=True)
class FlightPlan:
    origin: Optional[tuple[float, float]]
    legs: Tuple[FlightLeg, ...]
    total_distance_km: float
    total_flight_time_min: float
    total_co2_kg: float
