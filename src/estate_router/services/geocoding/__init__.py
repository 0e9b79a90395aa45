"""Geocoding services."""

from .batch import GeocodingTimeout, geocode_many
from .client import (
    Geocoder,
    GeocodingError,
    GoogleGeocoder,
    MapboxGeocoder,
    build_geocoder,
    check_health,
)

__all__ = [
    "Geocoder",
    "GeocodingError",
    "GeocodingTimeout",
    "GoogleGeocoder",
    "MapboxGeocoder",
    "build_geocoder",
    "check_health",
    "geocode_many",
]
