"""Shortest visiting order over a set of stops.

Nearest-neighbor construction followed by 2-opt refinement, repeated from
several starting stops when the caller does not pin one. Pure computation:
no I/O and no state shared between calls.
"""

from __future__ import annotations

import math
from typing import Any, Optional, Sequence

from ...models.domain import Stop, stop_label
from .construction import nearest_neighbor
from .matrix import build_distance_matrix
from .models import DistanceMatrix, RouteResult, Tour
from .refinement import DEFAULT_MAX_ITERATIONS, StopLocator, route_distance, two_opt

DEFAULT_MAX_START_CANDIDATES = 10


class InvalidStartError(ValueError):
    """Raised when the requested start stop is not part of the input."""

    def __init__(self, start: Stop[Any]) -> None:
        super().__init__(f"Start stop {stop_label(start)} not found in stops.")
        self.start = start


def build_tour(
    stops: Sequence[Stop[Any]],
    distance_matrix: DistanceMatrix,
    start_index: int,
    use_two_opt: bool = True,
    *,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    locator: Optional[StopLocator] = None,
) -> Tour:
    """Nearest-neighbor tour from ``start_index``, optionally refined with 2-opt."""
    locator = locator or StopLocator(stops)
    route = nearest_neighbor(stops, distance_matrix, start_index)
    if use_two_opt and len(route) > 3:
        route = two_opt(route, distance_matrix, stops, max_iterations, locator=locator)
    return Tour(stops=tuple(route), total_distance_km=route_distance(route, distance_matrix, locator))


def find_best_route(
    stops: Sequence[Stop[Any]],
    distance_matrix: DistanceMatrix,
    use_two_opt: bool = True,
    *,
    max_start_candidates: int = DEFAULT_MAX_START_CANDIDATES,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    locator: Optional[StopLocator] = None,
) -> Tour:
    """Try the first ``max_start_candidates`` stops as start and keep the shortest tour.

    On equal distance the earlier start wins.
    """
    if len(stops) <= 1:
        return Tour(stops=tuple(stops), total_distance_km=0.0)

    locator = locator or StopLocator(stops)
    best = Tour(stops=(), total_distance_km=math.inf)

    for start_index in range(min(len(stops), max_start_candidates)):
        tour = build_tour(
            stops,
            distance_matrix,
            start_index,
            use_two_opt,
            max_iterations=max_iterations,
            locator=locator,
        )
        if tour.total_distance_km < best.total_distance_km:
            best = tour

    return best


def find_shortest_route(
    stops: Sequence[Stop[Any]],
    start: Optional[Stop[Any]] = None,
    use_two_opt: bool = True,
    *,
    max_start_candidates: int = DEFAULT_MAX_START_CANDIDATES,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> RouteResult:
    """Find a short visiting order covering ``stops``.

    Args:
        stops: Stops to visit, in caller order. Matrix rows follow this order.
        start: Optional stop to begin with. Matched against ``stops`` by
            ``stop_id`` or exact ``address``.
        use_two_opt: Refine each constructed tour with 2-opt.
        max_start_candidates: How many leading input positions to try as start
            when ``start`` is not given.
        max_iterations: 2-opt sweep budget per tour.

    Returns:
        RouteResult with the ordered stops, total distance in kilometers and
        the distance matrix. Stops without coordinates may be left out of the
        route; check ``RouteResult.is_complete``.

    Raises:
        InvalidStartError: ``start`` does not match any stop.
    """
    locator = StopLocator(stops)
    start_index = -1
    if start is not None:
        start_index = locator.index_of(start)
        if start_index == -1:
            raise InvalidStartError(start)

    if not stops:
        return RouteResult(stops=(), total_distance_km=0.0, distance_matrix=[], input_count=0)

    if len(stops) == 1:
        return RouteResult(
            stops=tuple(stops),
            total_distance_km=0.0,
            distance_matrix=[[0.0]],
            input_count=1,
        )

    distance_matrix = build_distance_matrix(stops)

    if start is not None:
        tour = build_tour(
            stops,
            distance_matrix,
            start_index,
            use_two_opt,
            max_iterations=max_iterations,
            locator=locator,
        )
    else:
        tour = find_best_route(
            stops,
            distance_matrix,
            use_two_opt,
            max_start_candidates=max_start_candidates,
            max_iterations=max_iterations,
            locator=locator,
        )

    return RouteResult(
        stops=tour.stops,
        total_distance_km=tour.total_distance_km,
        distance_matrix=distance_matrix,
        input_count=len(stops),
    )
