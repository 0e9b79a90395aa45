import threading
import time

import httpx
import pytest

from estate_router.config import Settings
from estate_router.models.domain import Coordinate
from estate_router.services.geocoding import (
    GeocodingError,
    GeocodingTimeout,
    GoogleGeocoder,
    MapboxGeocoder,
    build_geocoder,
    check_health,
    geocode_many,
)


def _mapbox(handler, **kwargs) -> MapboxGeocoder:
    return MapboxGeocoder(
        access_token="test-token",
        country="us",
        proximity=(-83.6129, 42.9270),
        transport=httpx.MockTransport(handler),
        max_retries=kwargs.pop("max_retries", 1),
        backoff_seconds=0.0,
        **kwargs,
    )


def _google(handler) -> GoogleGeocoder:
    return GoogleGeocoder(
        api_key="test-key",
        region="us",
        transport=httpx.MockTransport(handler),
        max_retries=1,
        backoff_seconds=0.0,
    )


def test_mapbox_returns_first_feature_center():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"features": [{"center": [-83.6875, 43.0125]}, {"center": [0, 0]}]})

    coordinate = _mapbox(handler).geocode("123 Main St, Flint, MI")

    assert coordinate == Coordinate(latitude=43.0125, longitude=-83.6875)
    request = seen[0]
    assert "mapbox.places" in request.url.path
    assert request.url.params["access_token"] == "test-token"
    assert request.url.params["country"] == "us"
    assert request.url.params["proximity"] == "-83.6129,42.927"


def test_mapbox_no_features_is_not_found():
    geocoder = _mapbox(lambda request: httpx.Response(200, json={"features": []}))

    assert geocoder.geocode("nowhere") is None


def test_mapbox_retries_server_errors():
    responses = iter(
        [
            httpx.Response(503, json={"message": "busy"}),
            httpx.Response(200, json={"features": [{"center": [-83.0, 42.0]}]}),
        ]
    )

    geocoder = _mapbox(lambda request: next(responses))

    assert geocoder.geocode("Detroit, MI") == Coordinate(42.0, -83.0)


def test_mapbox_rejected_token_raises():
    geocoder = _mapbox(lambda request: httpx.Response(401, json={"message": "Not Authorized"}))

    with pytest.raises(GeocodingError):
        geocoder.geocode("Flint, MI")


def test_mapbox_network_failure_raises_connection_error():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ConnectionError):
        _mapbox(handler, max_retries=2).geocode("Flint, MI")
    assert len(attempts) == 3


@pytest.mark.parametrize(
    "payload",
    [
        {"features": ["oops"]},
        {"features": [{"center": ["n/a", None]}]},
        {"features": [{"center": ["west", "north"]}]},
        {"features": [{"center": 7}]},
    ],
)
def test_mapbox_malformed_feature_raises_geocoding_error(payload):
    geocoder = _mapbox(lambda request: httpx.Response(200, json=payload))

    with pytest.raises(GeocodingError):
        geocoder.geocode("Flint, MI")


def test_mapbox_backoff_doubles_on_retryable_status(monkeypatch):
    sleeps = []
    monkeypatch.setattr("estate_router.services.geocoding.client.time.sleep", sleeps.append)
    geocoder = MapboxGeocoder(
        access_token="test-token",
        transport=httpx.MockTransport(lambda request: httpx.Response(503)),
        max_retries=3,
        backoff_seconds=0.5,
    )

    with pytest.raises(GeocodingError):
        geocoder.geocode("Flint, MI")
    assert sleeps == [0.5, 1.0, 2.0]


def test_mapbox_requires_token():
    with pytest.raises(ValueError):
        MapboxGeocoder(access_token="")


def test_google_ok_result():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["address"] == "Flint, MI"
        assert request.url.params["key"] == "test-key"
        return httpx.Response(
            200,
            json={"status": "OK", "results": [{"geometry": {"location": {"lat": 43.0125, "lng": -83.6875}}}]},
        )

    assert _google(handler).geocode("Flint, MI") == Coordinate(43.0125, -83.6875)


def test_google_zero_results_is_not_found():
    geocoder = _google(lambda request: httpx.Response(200, json={"status": "ZERO_RESULTS", "results": []}))

    assert geocoder.geocode("nowhere") is None


def test_google_denied_request_raises():
    geocoder = _google(
        lambda request: httpx.Response(200, json={"status": "REQUEST_DENIED", "error_message": "bad key"})
    )

    with pytest.raises(GeocodingError, match="REQUEST_DENIED"):
        geocoder.geocode("Flint, MI")


@pytest.mark.parametrize(
    "result",
    [
        "oops",
        {"geometry": "nowhere"},
        {"geometry": {"location": {"lat": None, "lng": -83.6875}}},
        {"geometry": {"location": {"lat": "north", "lng": "west"}}},
    ],
)
def test_google_malformed_result_raises_geocoding_error(result):
    geocoder = _google(lambda request: httpx.Response(200, json={"status": "OK", "results": [result]}))

    with pytest.raises(GeocodingError):
        geocoder.geocode("Flint, MI")


def test_build_geocoder_selects_provider():
    mapbox = build_geocoder(Settings(_env_file=None, geocoder="mapbox", mapbox_token="tok"))
    google = build_geocoder(Settings(_env_file=None, geocoder="google", google_maps_api_key="key"))

    assert isinstance(mapbox, MapboxGeocoder)
    assert isinstance(google, GoogleGeocoder)


def test_build_geocoder_without_credentials_fails():
    with pytest.raises(ValueError):
        build_geocoder(Settings(_env_file=None, geocoder="mapbox", mapbox_token=None))


class StaticGeocoder:
    def __init__(self, result):
        self.result = result

    def geocode(self, address):
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def test_check_health():
    assert check_health(StaticGeocoder(Coordinate(43.0, -83.7))) is True
    assert check_health(StaticGeocoder(None)) is False
    assert check_health(StaticGeocoder(ConnectionError("down"))) is False


def test_geocode_many_restores_input_order():
    delays = {"a": 0.06, "b": 0.03, "c": 0.0}
    coordinates = {"a": Coordinate(1, 1), "b": None, "c": Coordinate(3, 3)}

    class SlowGeocoder:
        def geocode(self, address):
            time.sleep(delays[address])
            return coordinates[address]

    results = geocode_many(SlowGeocoder(), ["a", "b", "c"], max_workers=3)

    assert results == [Coordinate(1, 1), None, Coordinate(3, 3)]


def test_geocode_many_empty():
    assert geocode_many(StaticGeocoder(None), []) == []


def test_geocode_many_turns_provider_errors_into_none():
    results = geocode_many(StaticGeocoder(GeocodingError("quota")), ["a", "b"])

    assert results == [None, None]


def test_geocode_many_deadline_raises_timeout():
    release = threading.Event()

    class BlockedGeocoder:
        def geocode(self, address):
            release.wait(5)
            return None

    try:
        with pytest.raises(GeocodingTimeout):
            geocode_many(BlockedGeocoder(), ["a", "b", "c"], max_workers=1, timeout=0.05)
    finally:
        release.set()
