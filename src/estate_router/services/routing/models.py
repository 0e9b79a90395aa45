"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ...models.domain import Coordinate


@dataclass(frozen=True, slots=True)
class RouteLeg:
    address: str
    sequence: int
    coordinate: Coordinate
    distance_from_prev_km: float


@dataclass(frozen=True, slots=True)
class RouteResult:
    optimized_route: List[str]
    maps_url: str
    legs: List[RouteLeg]
    total_distance_km: float
    starting_address: Optional[str] = None
    dropped_addresses: List[str] = field(default_factory=list)
