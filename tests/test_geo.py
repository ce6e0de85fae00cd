import pytest
import requests

from sunswitch_core import geo
from sunswitch_core.exceptions import NetworkError, ParseError


class FakeResponse:
    def __init__(self, payload=None, status_code=200, bad_json=False):
        self.payload = payload
        self.status_code = status_code
        self.bad_json = bad_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if self.bad_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self.payload


@pytest.fixture
def fake_get(monkeypatch):
    calls = []

    def install(response=None, error=None):
        def _get(url, timeout=None):
            calls.append((url, timeout))
            if error is not None:
                raise error
            return response

        monkeypatch.setattr(geo.requests, "get", _get)
        return calls

    return install


@pytest.mark.parametrize(
    "payload, expected",
    [
        ({"latitude": 43.65, "longitude": -79.38}, (43.65, -79.38)),
        ({"lat": "51.5", "lon": "-0.12"}, (51.5, -0.12)),
        ({"ip": "1.2.3.4", "loc": "37.3860,-122.0838"}, (37.386, -122.0838)),
        ({"status": "ok", "location": {"lat": 48.85, "lng": 2.35}}, (48.85, 2.35)),
        ({"result": {"geo": {"latitude": -33.87, "longitude": 151.21}}}, (-33.87, 151.21)),
    ],
)
def test_resolve_accepts_known_schemas(fake_get, payload, expected):
    fake_get(FakeResponse(payload))
    assert geo.GeoResolver().resolve() == pytest.approx(expected)


def test_resolve_passes_url_and_timeout(fake_get):
    calls = fake_get(FakeResponse({"latitude": 1, "longitude": 2}))
    geo.GeoResolver("https://geo.example/json", timeout=3.5).resolve()
    assert calls == [("https://geo.example/json", 3.5)]


@pytest.mark.parametrize(
    "payload",
    [
        {"ip": "1.2.3.4", "city": "Nowhere"},
        {"latitude": "north", "longitude": 3},
        {"latitude": True, "longitude": False},
        {"loc": "37.3860"},
        {"loc": "nan,nan"},
        {"latitude": "inf", "longitude": 0},
        {"a": {"b": {"c": {"lat": 1, "lon": 2}}}},
        [43.65, -79.38],
        None,
    ],
)
def test_resolve_rejects_unusable_payloads(fake_get, payload):
    fake_get(FakeResponse(payload))
    with pytest.raises(ParseError):
        geo.GeoResolver().resolve()


def test_invalid_json_is_parse_error(fake_get):
    fake_get(FakeResponse(bad_json=True))
    with pytest.raises(ParseError):
        geo.GeoResolver().resolve()


def test_http_error_status_is_network_error(fake_get):
    fake_get(FakeResponse({"latitude": 1, "longitude": 2}, status_code=503))
    with pytest.raises(NetworkError):
        geo.GeoResolver().resolve()


@pytest.mark.parametrize("error", [requests.ConnectionError("refused"), requests.Timeout("slow")])
def test_unreachable_service_is_network_error(fake_get, error):
    fake_get(error=error)
    with pytest.raises(NetworkError):
        geo.GeoResolver().resolve()


def test_manual_location():
    assert geo.ManualLocation("43.65N", "79.38W").resolve() == pytest.approx((43.65, -79.38))
    assert geo.ManualLocation("-33.87", "151.21").resolve() == pytest.approx((-33.87, 151.21))


def test_manual_location_rejects_bad_values():
    with pytest.raises(ParseError):
        geo.ManualLocation("95N", "10E")
