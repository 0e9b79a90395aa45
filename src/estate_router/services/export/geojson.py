"""GeoJSON export of planned routes for map overlays."""

from __future__ import annotations

from typing import Any, Dict, List

from shapely.geometry import LineString, Point, mapping

from ..routing.models import RouteResult


def route_linestring(result: RouteResult) -> LineString:
    """Path through the ordered stops (x = longitude, y = latitude)."""
    if len(result.legs) < 2:
        raise ValueError("LineString must have at least 2 coordinates")
    return LineString([(leg.coordinate.longitude, leg.coordinate.latitude) for leg in result.legs])


def route_to_feature_collection(result: RouteResult) -> Dict[str, Any]:
    """Render a planned route as a GeoJSON FeatureCollection.

    The first feature is the driving path; it is followed by one point per stop
    carrying its address and 1-based visiting sequence.
    """
    path = route_linestring(result)
    features: List[Dict[str, Any]] = [
        {
            "type": "Feature",
            "geometry": mapping(path),
            "properties": {
                "kind": "route",
                "total_distance_km": round(result.total_distance_km, 3),
                "stop_count": len(result.legs),
            },
        }
    ]
    for leg in result.legs:
        features.append(
            {
                "type": "Feature",
                "geometry": mapping(Point(leg.coordinate.longitude, leg.coordinate.latitude)),
                "properties": {
                    "kind": "stop",
                    "sequence": leg.sequence,
                    "address": leg.address,
                    "is_start": leg.sequence == 1 and result.starting_address is not None,
                    "distance_from_prev_km": round(leg.distance_from_prev_km, 3),
                },
            }
        )
    return {"type": "FeatureCollection", "bbox": list(path.bounds), "features": features}
