#!/usr/bin/env python3
"""Verify geocoder credentials and plan a small sample route."""

import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / "src"))

from estate_router.config import settings
from estate_router.services.geocoding import build_geocoder, check_health
from estate_router.services.routing.service import RoutePlanningError, plan_route

SAMPLE_ADDRESSES = [
    "Flint, MI 48502",
    "Davison, MI 48423",
    "Burton, MI 48509",
]


def main():
    print("=" * 60)
    print(f"Geocoder Check ({settings.geocoder})")
    print("=" * 60)
    print()

    print("1. Building geocoder from settings...")
    try:
        geocoder = build_geocoder()
    except ValueError as e:
        print(f"   [ERROR] {e}")
        print("   Set ESTATE_MAPBOX_TOKEN or ESTATE_GOOGLE_MAPS_API_KEY in your .env file")
        return 1
    print("   [OK] Geocoder configured")
    print()

    print("2. Probing geocoder...")
    if not check_health(geocoder):
        print("   [ERROR] Geocoder did not resolve the probe address")
        return 1
    print("   [OK] Geocoder is reachable")
    print()

    print("3. Planning a sample route...")
    try:
        result = plan_route(SAMPLE_ADDRESSES, starting_address="Grand Blanc, MI", geocoder=geocoder)
    except RoutePlanningError as e:
        print(f"   [ERROR] {e}")
        return 1
    for leg in result.legs:
        print(f"   {leg.sequence}. {leg.address} (+{leg.distance_from_prev_km:.1f} km)")
    print(f"   [OK] Total distance: {result.total_distance_km:.1f} km")
    print(f"   [OK] Maps link: {result.maps_url}")
    print()

    print("=" * 60)
    print("[SUCCESS] Geocoding and route planning are working!")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
