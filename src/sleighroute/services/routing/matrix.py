"""Pairwise great-circle distance matrix for a list of stops."""

from __future__ import annotations

import math
from typing import Any, Sequence

from ...models.domain import Stop
from ..geospatial import haversine_km
from .models import DistanceMatrix


def build_distance_matrix(stops: Sequence[Stop[Any]]) -> DistanceMatrix:
    """Return an N x N matrix of Haversine distances in kilometers.

    Rows and columns follow the input order. Any pair involving a stop
    without coordinates is ``math.inf``; the diagonal is always 0.
    """

    n = len(stops)
    matrix: DistanceMatrix = [[0.0] * n for _ in range(n)]

    for i, origin in enumerate(stops):
        for j, destination in enumerate(stops):
            if i == j:
                continue
            if origin.has_coordinates and destination.has_coordinates:
                matrix[i][j] = haversine_km(
                    origin.latitude,  # type: ignore[arg-type]
                    origin.longitude,  # type: ignore[arg-type]
                    destination.latitude,  # type: ignore[arg-type]
                    destination.longitude,  # type: ignore[arg-type]
                )
            else:
                matrix[i][j] = math.inf

    return matrix
