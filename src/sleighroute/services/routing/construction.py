"""Nearest-neighbor tour construction."""

from __future__ import annotations

import math
from typing import Any, Sequence

from ...models.domain import Stop
from .models import DistanceMatrix


def nearest_neighbor(
    stops: Sequence[Stop[Any]],
    distance_matrix: DistanceMatrix,
    start_index: int = 0,
) -> list[Stop[Any]]:
    """Greedily build a tour from ``start_index`` by always visiting the closest unvisited stop.

    Ties go to the lowest input index. If every unvisited stop is unreachable
    (infinite distance) the walk stops there, so the returned tour can be
    shorter than the input.
    """
    n = len(stops)
    if n <= 1:
        return list(stops)

    visited = {start_index}
    route = [stops[start_index]]
    current = start_index

    while len(visited) < n:
        nearest = -1
        min_distance = math.inf

        row = distance_matrix[current]
        for candidate in range(n):
            if candidate not in visited and row[candidate] < min_distance:
                min_distance = row[candidate]
                nearest = candidate

        if nearest == -1:
            break

        visited.add(nearest)
        route.append(stops[nearest])
        current = nearest

    return route
