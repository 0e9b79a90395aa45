"""Listing helpers."""

from .address import (
    city_state_zip_rule,
    extract_address,
    extract_addresses,
    known_city_rule,
    street_address_rule,
)
from .markdown import parse_distance_miles, parse_estate_sales, parse_listing

__all__ = [
    "extract_address",
    "extract_addresses",
    "street_address_rule",
    "city_state_zip_rule",
    "known_city_rule",
    "parse_estate_sales",
    "parse_listing",
    "parse_distance_miles",
]
