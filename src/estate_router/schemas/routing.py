"""Routing request/response schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, StrictStr


class RoutingRequest(BaseModel):
    addresses: List[StrictStr] = Field(..., description="Estate sale addresses to visit.")
    starting_address: Optional[StrictStr] = Field(
        default=None,
        description="If provided, the route starts here. Otherwise the first address anchors the route.",
    )


class CoordinateModel(BaseModel):
    latitude: float
    longitude: float


class RouteLegModel(BaseModel):
    address: str
    sequence: int
    coordinate: CoordinateModel
    distance_from_prev_km: float


class RoutingResponse(BaseModel):
    optimized_route: List[str]
    maps_url: str
    starting_address: Optional[str] = None
    dropped_addresses: List[str]
    total_distance_km: float
    total_distance_miles: float
    legs: List[RouteLegModel]
    metadata: dict
