"""Routing endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ...schemas.routing import CoordinateModel, RouteLegModel, RoutingRequest, RoutingResponse
from ...services.export.geojson import route_to_feature_collection
from ...services.geocoding import Geocoder, GeocodingTimeout, build_geocoder
from ...services.geospatial import km_to_miles
from ...services.routing.models import RouteResult
from ...services.routing.service import RoutePlanningError, plan_route

router = APIRouter(prefix="/routes", tags=["routes"])

logger = logging.getLogger(__name__)


def get_geocoder() -> Geocoder:
    """Build a geocoder for the current request from settings."""
    try:
        return build_geocoder()
    except ValueError as exc:
        logger.error(f"Geocoder initialization failed: {exc}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Geocoding service is not configured: {exc}",
        ) from exc


def _to_response(result: RouteResult) -> RoutingResponse:
    legs = [
        RouteLegModel(
            address=leg.address,
            sequence=leg.sequence,
            coordinate=CoordinateModel(latitude=leg.coordinate.latitude, longitude=leg.coordinate.longitude),
            distance_from_prev_km=leg.distance_from_prev_km,
        )
        for leg in result.legs
    ]
    metadata = {
        "status": "complete",
        "algorithm": "nearest_neighbor+2opt",
        "stop_count": len(result.legs),
        "dropped_count": len(result.dropped_addresses),
        "map_overlays": {"route": route_to_feature_collection(result)},
    }
    return RoutingResponse(
        optimized_route=result.optimized_route,
        maps_url=result.maps_url,
        starting_address=result.starting_address,
        dropped_addresses=result.dropped_addresses,
        total_distance_km=result.total_distance_km,
        total_distance_miles=km_to_miles(result.total_distance_km),
        legs=legs,
        metadata=metadata,
    )


@router.post("/optimize", response_model=RoutingResponse, status_code=status.HTTP_200_OK)
def optimize(payload: RoutingRequest, geocoder: Geocoder = Depends(get_geocoder)) -> RoutingResponse:
    try:
        result = plan_route(
            payload.addresses,
            starting_address=payload.starting_address,
            geocoder=geocoder,
        )
    except RoutePlanningError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except GeocodingTimeout as exc:
        raise HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error optimizing route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to optimize route: {str(exc)}",
        ) from exc
    return _to_response(result)
