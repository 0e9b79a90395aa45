"""Concurrent geocoding of address lists."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Sequence

import httpx

from ...models.domain import Coordinate
from .client import Geocoder, GeocodingError

logger = logging.getLogger(__name__)


class GeocodingTimeout(TimeoutError):
    """Raised when addresses are still unresolved at the batch deadline."""


def _geocode_one(geocoder: Geocoder, address: str) -> Coordinate | None:
    try:
        return geocoder.geocode(address)
    except (GeocodingError, ConnectionError, httpx.HTTPError) as e:
        logger.warning(f"Geocoding failed for '{address}': {e}")
        return None


def geocode_many(
    geocoder: Geocoder,
    addresses: Sequence[str],
    *,
    max_workers: int = 8,
    timeout: float | None = None,
) -> list[Coordinate | None]:
    """Geocode every address in parallel and return results in input order.

    Addresses the provider cannot resolve, or that fail with a provider error,
    come back as None. If ``timeout`` seconds pass before all lookups finish,
    lookups that have not started are cancelled and ``GeocodingTimeout`` is
    raised.
    """
    results: list[Coordinate | None] = [None] * len(addresses)
    if not addresses:
        return results

    executor = ThreadPoolExecutor(max_workers=min(max_workers, len(addresses)))
    futures: dict[Future, int] = {
        executor.submit(_geocode_one, geocoder, address): position for position, address in enumerate(addresses)
    }
    try:
        for future in as_completed(futures, timeout=timeout):
            results[futures[future]] = future.result()
    except FuturesTimeoutError as e:
        pending = sum(1 for future in futures if not future.done())
        logger.warning(f"Geocoding deadline of {timeout}s reached with {pending} of {len(addresses)} addresses pending")
        raise GeocodingTimeout(f"Geocoding did not finish within {timeout} seconds.") from e
    finally:
        executor.shutdown(wait=False, cancel_futures=True)
    return results
