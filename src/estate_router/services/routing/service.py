"""Routing orchestration service."""

from __future__ import annotations

import logging
from typing import Sequence
from urllib.parse import quote

from ...config import Settings, settings as default_settings
from ...models.domain import Coordinate, Stop
from ..geocoding import Geocoder, geocode_many
from ..geospatial import distance_km
from .models import RouteLeg, RouteResult
from .optimizer import optimize_route

MIN_ROUTE_STOPS = 2

logger = logging.getLogger(__name__)


class RoutePlanningError(ValueError):
    """Base class for route requests that cannot be planned."""


class InvalidRouteRequest(RoutePlanningError):
    """The request was malformed and nothing was geocoded."""


class InsufficientStops(RoutePlanningError):
    """Fewer than two addresses could be geocoded."""


class StartingAddressNotFound(RoutePlanningError):
    """The explicit starting address could not be geocoded."""


def build_maps_url(addresses: Sequence[str], base_url: str | None = None) -> str:
    """Google Maps driving-directions link visiting ``addresses`` in order."""
    base = (base_url or default_settings.maps_directions_base_url).rstrip("/")
    return "/".join([base, *(quote(address, safe="") for address in addresses)])


def _validate_addresses(addresses: object, starting_address: object) -> tuple[list[str], str | None]:
    if not isinstance(addresses, (list, tuple)):
        raise InvalidRouteRequest("Addresses must be provided as a list of strings.")
    if not addresses:
        raise InvalidRouteRequest("At least one address is required.")
    cleaned: list[str] = []
    for position, address in enumerate(addresses):
        if not isinstance(address, str):
            raise InvalidRouteRequest(f"Address at position {position} is not a string.")
        if not address.strip():
            raise InvalidRouteRequest(f"Address at position {position} is blank.")
        cleaned.append(address.strip())

    if starting_address is None:
        return cleaned, None
    if not isinstance(starting_address, str) or not starting_address.strip():
        raise InvalidRouteRequest("Starting address must be a non-blank string when provided.")
    return cleaned, starting_address.strip()


def _build_legs(stops: Sequence[Stop], tour: Sequence[int]) -> list[RouteLeg]:
    legs: list[RouteLeg] = []
    previous: Coordinate | None = None
    for sequence, index in enumerate(tour, start=1):
        stop = stops[index]
        step = distance_km(previous, stop.coordinate) if previous is not None else 0.0
        legs.append(
            RouteLeg(
                address=stop.address,
                sequence=sequence,
                coordinate=stop.coordinate,
                distance_from_prev_km=step,
            )
        )
        previous = stop.coordinate
    return legs


def plan_route(
    addresses: Sequence[str],
    *,
    geocoder: Geocoder,
    starting_address: str | None = None,
    settings: Settings | None = None,
) -> RouteResult:
    """Geocode addresses and order them into a short driving route.

    With ``starting_address`` the route begins there; otherwise the first
    address that geocodes anchors the route. Addresses the geocoder cannot
    resolve are left out of the route and listed in ``dropped_addresses``.
    """
    config = settings or default_settings
    destinations, start = _validate_addresses(addresses, starting_address)
    candidates = [start, *destinations] if start is not None else destinations

    logger.info(f"Planning route for {len(destinations)} addresses (explicit start: {start is not None})")
    coordinates = geocode_many(
        geocoder,
        candidates,
        max_workers=config.geocode_max_parallel_requests,
        timeout=config.geocode_timeout_seconds,
    )

    if start is not None and coordinates[0] is None:
        raise StartingAddressNotFound(f"Starting address '{start}' could not be geocoded.")

    stops: list[Stop] = []
    dropped: list[str] = []
    for address, coordinate in zip(candidates, coordinates):
        if coordinate is None:
            dropped.append(address)
        else:
            stops.append(Stop(address=address, coordinate=coordinate))

    if dropped:
        logger.warning(f"Dropped {len(dropped)} address(es) that could not be geocoded: {dropped}")
    if len(stops) < MIN_ROUTE_STOPS:
        raise InsufficientStops(
            f"Not enough valid addresses to build a route: {len(stops)} of {len(candidates)} "
            f"could be geocoded (need at least {MIN_ROUTE_STOPS})."
        )

    tour = optimize_route(
        [stop.coordinate for stop in stops],
        include_endpoint=config.two_opt_include_endpoint,
        epsilon=config.two_opt_epsilon,
        max_passes=config.two_opt_max_passes,
    )
    legs = _build_legs(stops, tour)
    ordered = [leg.address for leg in legs]

    return RouteResult(
        optimized_route=ordered,
        maps_url=build_maps_url(ordered, config.maps_directions_base_url),
        legs=legs,
        total_distance_km=sum(leg.distance_from_prev_km for leg in legs),
        starting_address=start,
        dropped_addresses=dropped,
    )
