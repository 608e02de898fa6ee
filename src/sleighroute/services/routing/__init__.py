"""Route optimization services."""

from .flight_plan import NORTH_POLE, build_flight_plan
from .matrix import build_distance_matrix
from .models import FlightLeg, FlightPlan, RouteResult, Tour
from .optimizer import InvalidStartError, build_tour, find_best_route, find_shortest_route

__all__ = [
    "NORTH_POLE",
    "build_flight_plan",
    "build_distance_matrix",
    "build_tour",
    "find_best_route",
    "find_shortest_route",
    "FlightLeg",
    "FlightPlan",
    "InvalidStartError",
    "RouteResult",
    "Tour",
]
