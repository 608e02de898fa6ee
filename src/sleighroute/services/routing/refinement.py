"""2-opt local search over a constructed tour.

Candidate tours are scored against the distance matrix of the *original*
input, so every stop in a tour is mapped back to its input position first.
That mapping matches a stop by ``stop_id`` when both sides have one, or by
exact ``address`` otherwise, and resolves to the first matching input
position.
"""

from __future__ import annotations

from typing import Any, Hashable, Optional, Sequence

from ...models.domain import Stop
from .models import DistanceMatrix

DEFAULT_MAX_ITERATIONS = 100


class StopLocator:
    """Resolve stops to their position in the original input."""

    def __init__(self, stops: Sequence[Stop[Any]]) -> None:
        self._by_id: dict[Hashable, int] = {}
        self._by_address: dict[str, int] = {}
        for index, stop in enumerate(stops):
            if stop.stop_id is not None:
                self._by_id.setdefault(stop.stop_id, index)
            self._by_address.setdefault(stop.address, index)

    def index_of(self, stop: Stop[Any]) -> int:
        """Return the first input index matching ``stop``, or -1."""
        matches: list[int] = []
        if stop.stop_id is not None and stop.stop_id in self._by_id:
            matches.append(self._by_id[stop.stop_id])
        if stop.address in self._by_address:
            matches.append(self._by_address[stop.address])
        return min(matches) if matches else -1


def route_distance(
    route: Sequence[Stop[Any]],
    distance_matrix: DistanceMatrix,
    locator: StopLocator,
) -> float:
    """Sum of consecutive leg distances; legs touching an unknown stop count as 0."""
    if len(route) <= 1:
        return 0.0

    total = 0.0
    for current, following in zip(route, route[1:]):
        idx1 = locator.index_of(current)
        idx2 = locator.index_of(following)
        if idx1 >= 0 and idx2 >= 0:
            total += distance_matrix[idx1][idx2]
    return total


def _reverse_segment(route: list[Stop[Any]], i: int, j: int) -> list[Stop[Any]]:
    return route[:i] + route[i : j + 1][::-1] + route[j + 1 :]


def two_opt(
    route: Sequence[Stop[Any]],
    distance_matrix: DistanceMatrix,
    original_stops: Sequence[Stop[Any]],
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    *,
    locator: Optional[StopLocator] = None,
) -> list[Stop[Any]]:
    """Shorten ``route`` by reversing segments until no reversal helps.

    Each sweep scans segment bounds ``(i, j)`` with ``i >= 1`` and
    ``j >= i + 2``; the first strictly shorter candidate is accepted and the
    next sweep starts over from it. At most ``max_iterations`` sweeps run.
    The first stop never moves.
    """
    n = len(route)
    best_route = list(route)
    if n <= 3:
        return best_route

    locator = locator or StopLocator(original_stops)
    best_distance = route_distance(best_route, distance_matrix, locator)

    for _ in range(max_iterations):
        improved = False
        for i in range(1, n - 2):
            for j in range(i + 2, n):
                candidate = _reverse_segment(best_route, i, j)
                candidate_distance = route_distance(candidate, distance_matrix, locator)
                if candidate_distance < best_distance:
                    best_route = candidate
                    best_distance = candidate_distance
                    improved = True
                    break
            if improved:
                break
        if not improved:
            break

    return best_route
