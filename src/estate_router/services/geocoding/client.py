"""HTTP clients for forward geocoding providers."""

from __future__ import annotations

import logging
import time
from typing import Protocol
from urllib.parse import quote

import httpx

from ...config import Settings, settings as default_settings
from ...models.domain import Coordinate

MAPBOX_GEOCODING_URL = "https://api.mapbox.com/geocoding/v5/mapbox.places"
GOOGLE_GEOCODING_URL = "https://maps.googleapis.com/maps/api/geocode/json"
HEALTH_PROBE_ADDRESS = "Flint, MI"
# Worth retrying: rate limiting and upstream failures
RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})

logger = logging.getLogger(__name__)


class GeocodingError(Exception):
    """Raised when a geocoding provider rejects a request or returns garbage."""


class Geocoder(Protocol):
    def geocode(self, address: str) -> Coordinate | None:
        """Resolve an address, returning None when the provider finds nothing."""
        ...


class HTTPGeocoder:
    """Shared retry handling for JSON geocoding APIs."""

    provider = "http"

    def __init__(
        self,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.timeout = timeout if timeout is not None else default_settings.geocode_request_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else default_settings.geocode_max_retries
        self.backoff_seconds = (
            backoff_seconds if backoff_seconds is not None else default_settings.geocode_backoff_seconds
        )
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        # A client per call keeps the geocoder safe to share across worker threads.
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=5.0),
            transport=self._transport,
        )

    def _get_json(self, url: str, params: dict) -> dict:
        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.get(url, params=params)
                    response.raise_for_status()
                    data = response.json()
                    if not isinstance(data, dict):
                        raise GeocodingError(f"{self.provider} returned an unexpected payload.")
                    return data
                except httpx.HTTPStatusError as e:
                    status_code = e.response.status_code
                    if status_code not in RETRYABLE_STATUS_CODES:
                        raise GeocodingError(
                            f"{self.provider} geocoding request failed with HTTP {status_code}."
                        ) from e
                    attempt += 1
                    if attempt > self.max_retries:
                        raise GeocodingError(
                            f"{self.provider} geocoding still failing with HTTP {status_code} "
                            f"after {self.max_retries} retries."
                        ) from e
                    time.sleep(self.backoff_seconds * (2 ** (attempt - 1)))
                except httpx.TimeoutException as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"{self.provider} geocoding timed out after {self.max_retries} retries: {e}")
                        raise
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(
                        f"{self.provider} geocoding timeout, retrying in {wait_time:.1f}s "
                        f"(attempt {attempt}/{self.max_retries})"
                    )
                    time.sleep(wait_time)
                except (httpx.ConnectError, httpx.NetworkError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise ConnectionError(f"Failed to reach {self.provider} geocoding service: {e}") from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(
                        f"{self.provider} network error, retrying in {wait_time:.1f}s "
                        f"(attempt {attempt}/{self.max_retries}): {e}"
                    )
                    time.sleep(wait_time)
                except ValueError as e:
                    raise GeocodingError(f"{self.provider} returned invalid JSON.") from e
        finally:
            client.close()


class MapboxGeocoder(HTTPGeocoder):
    """Forward geocoding through the Mapbox Places API."""

    provider = "mapbox"

    def __init__(
        self,
        access_token: str,
        country: str | None = None,
        proximity: tuple[float, float] | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        if not access_token:
            raise ValueError("Mapbox access token is not configured.")
        self.access_token = access_token
        self.country = country
        self.proximity = proximity

    def geocode(self, address: str) -> Coordinate | None:
        params: dict[str, str | int] = {"access_token": self.access_token, "limit": 1}
        if self.country:
            params["country"] = self.country
        if self.proximity:
            lon, lat = self.proximity
            params["proximity"] = f"{lon},{lat}"
        url = f"{MAPBOX_GEOCODING_URL}/{quote(address, safe='')}.json"

        data = self._get_json(url, params)
        features = data.get("features") or []
        if not features:
            return None
        try:
            center = features[0].get("center")
            if not center or len(center) < 2:
                raise GeocodingError(f"Mapbox feature for '{address}' has no center.")
            # Mapbox returns [lon, lat]
            return Coordinate(latitude=float(center[1]), longitude=float(center[0]))
        except (AttributeError, TypeError, ValueError, KeyError, IndexError) as e:
            raise GeocodingError(f"Mapbox returned a malformed feature for '{address}'.") from e


class GoogleGeocoder(HTTPGeocoder):
    """Forward geocoding through the Google Geocoding API."""

    provider = "google"

    def __init__(self, api_key: str, region: str | None = None, **kwargs) -> None:
        super().__init__(**kwargs)
        if not api_key:
            raise ValueError("Google Maps API key is not configured.")
        self.api_key = api_key
        self.region = region

    def geocode(self, address: str) -> Coordinate | None:
        params = {"address": address, "key": self.api_key}
        if self.region:
            params["region"] = self.region

        data = self._get_json(GOOGLE_GEOCODING_URL, params)
        status = data.get("status")
        if status == "ZERO_RESULTS":
            return None
        if status != "OK":
            message = data.get("error_message") or "no error message"
            raise GeocodingError(f"Google geocoding returned status {status}: {message}")
        results = data.get("results") or []
        if not results:
            return None
        try:
            location = results[0].get("geometry", {}).get("location", {})
            if "lat" not in location or "lng" not in location:
                raise GeocodingError(f"Google result for '{address}' has no location.")
            return Coordinate(latitude=float(location["lat"]), longitude=float(location["lng"]))
        except (AttributeError, TypeError, ValueError, KeyError, IndexError) as e:
            raise GeocodingError(f"Google returned a malformed result for '{address}'.") from e


def build_geocoder(config: Settings | None = None) -> Geocoder:
    """Create the configured geocoder. Raises ValueError if its credential is missing."""
    config = config or default_settings
    common = {
        "timeout": config.geocode_request_timeout_seconds,
        "max_retries": config.geocode_max_retries,
        "backoff_seconds": config.geocode_backoff_seconds,
    }
    if config.geocoder == "google":
        return GoogleGeocoder(api_key=config.google_maps_api_key or "", region=config.geocode_country, **common)
    return MapboxGeocoder(
        access_token=config.mapbox_token or "",
        country=config.geocode_country,
        proximity=config.geocode_proximity,
        **common,
    )


def check_health(geocoder: Geocoder, probe_address: str = HEALTH_PROBE_ADDRESS) -> bool:
    """Check the geocoder by resolving a well-known address."""
    try:
        return geocoder.geocode(probe_address) is not None
    except (GeocodingError, ConnectionError, httpx.HTTPError) as e:
        logger.warning(f"Geocoder health probe failed: {e}")
        return False
