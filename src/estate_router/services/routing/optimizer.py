"""Nearest-neighbor construction and 2-opt improvement for open driving routes.

Tours are lists of indices into the stop list. Index 0 is the start and stays
first: neither phase ever moves position 0. Routes are open paths, so there is
no leg back to the start.
"""

from __future__ import annotations

import logging
from typing import Sequence

from ...models.domain import Coordinate
from ..geospatial import distance_matrix

DEFAULT_EPSILON = 1e-6

logger = logging.getLogger(__name__)


def tour_length(tour: Sequence[int], matrix: Sequence[Sequence[float]]) -> float:
    """Sum of consecutive leg distances along the tour."""
    return sum(matrix[tour[pos]][tour[pos + 1]] for pos in range(len(tour) - 1))


def nearest_neighbor_tour(matrix: Sequence[Sequence[float]]) -> list[int]:
    """Greedy tour from index 0, always moving to the closest unvisited index.

    Ties go to the lowest index since only a strictly smaller distance replaces
    the current best during the left-to-right scan.
    """
    n = len(matrix)
    if n == 0:
        return []

    tour = [0]
    visited = [False] * n
    visited[0] = True
    current = 0
    for _ in range(n - 1):
        best_index = -1
        best_distance = 0.0
        for candidate in range(n):
            if visited[candidate]:
                continue
            candidate_distance = matrix[current][candidate]
            if best_index == -1 or candidate_distance < best_distance:
                best_index = candidate
                best_distance = candidate_distance
        visited[best_index] = True
        tour.append(best_index)
        current = best_index
    return tour


def two_opt(
    tour: list[int],
    matrix: Sequence[Sequence[float]],
    *,
    include_endpoint: bool = False,
    epsilon: float = DEFAULT_EPSILON,
    max_passes: int | None = None,
) -> int:
    """Improve ``tour`` in place by reversing segments until no move helps.

    Segment bounds are ``1 <= i < k <= n - 2``, keeping both ends fixed. With
    ``include_endpoint`` the segment may also run to the last position, which
    has no outgoing leg to pay for.

    Returns the number of reversals applied.
    """
    n = len(tour)
    last_k = n - 1 if include_endpoint else n - 2
    if last_k < 2:
        return 0

    moves = 0
    passes = 0
    improved = True
    while improved:
        if max_passes is not None and passes >= max_passes:
            logger.debug(f"2-opt stopped after {passes} passes without converging")
            break
        improved = False
        passes += 1
        for i in range(1, last_k):
            for k in range(i + 1, last_k + 1):
                before = tour[i - 1]
                first = tour[i]
                last = tour[k]
                removed = matrix[before][first]
                added = matrix[before][last]
                if k + 1 < n:
                    after = tour[k + 1]
                    removed += matrix[last][after]
                    added += matrix[first][after]
                if removed - added > epsilon:
                    tour[i : k + 1] = tour[i : k + 1][::-1]
                    moves += 1
                    improved = True
    return moves


def optimize_route(
    coordinates: Sequence[Coordinate],
    *,
    include_endpoint: bool = False,
    epsilon: float = DEFAULT_EPSILON,
    max_passes: int | None = None,
) -> list[int]:
    """Return a short visiting order over ``coordinates`` starting at index 0."""
    n = len(coordinates)
    if n <= 1:
        return list(range(n))

    matrix = distance_matrix(coordinates)
    tour = nearest_neighbor_tour(matrix)
    initial_length = tour_length(tour, matrix)
    moves = two_opt(
        tour,
        matrix,
        include_endpoint=include_endpoint,
        epsilon=epsilon,
        max_passes=max_passes,
    )
    logger.info(
        f"Optimized {n} stops: nearest-neighbor {initial_length:.3f} km, "
        f"2-opt {tour_length(tour, matrix):.3f} km ({moves} moves)"
    )
    return tour
