import pytest
import requests

from imot_backend.exceptions import ConfigurationError, ProviderError
from imot_backend.services.maps_client import GoogleMapsClient, ensure_valid_status


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse({"status": "OK", "results": []})
        self.error = error
        self.requests = []

    def get(self, url, params=None, timeout=None):
        self.requests.append({"url": url, "params": params, "timeout": timeout})
        if self.error:
            raise self.error
        return self.response


def build_client(session, api_key="test-key"):
    return GoogleMapsClient(api_key=api_key, base_url="https://maps.example/api", session=session, timeout=5)


def test_geocode_is_restricted_to_bulgaria():
    session = FakeSession()
    build_client(session).geocode("ул. Оборище 5")

    request = session.requests[0]
    assert request["url"] == "https://maps.example/api/geocode/json"
    assert request["params"]["address"] == "ул. Оборище 5"
    assert request["params"]["region"] == "bg"
    assert request["params"]["language"] == "bg"
    assert request["params"]["components"] == "country:BG"
    assert request["params"]["key"] == "test-key"
    assert request["timeout"] == 5


def test_places_nearby_params():
    session = FakeSession()
    build_client(session).places_nearby(42.7, 23.3, place_type="school", radius=1500)

    request = session.requests[0]
    assert request["url"] == "https://maps.example/api/place/nearbysearch/json"
    assert request["params"]["location"] == "42.7,23.3"
    assert request["params"]["type"] == "school"
    assert request["params"]["radius"] == 1500


def test_missing_api_key_raises_configuration_error():
    session = FakeSession()
    with pytest.raises(ConfigurationError):
        build_client(session, api_key=None).geocode("София")
    assert session.requests == []


def test_transport_failure_raises_provider_error():
    session = FakeSession(error=requests.exceptions.ConnectionError("connection refused"))
    with pytest.raises(ProviderError):
        build_client(session).geocode("София")


def test_http_error_raises_provider_error():
    session = FakeSession(response=FakeResponse({}, status_code=503))
    with pytest.raises(ProviderError):
        build_client(session).reverse_geocode(42.7, 23.3)


def test_invalid_json_raises_provider_error():
    session = FakeSession(response=FakeResponse(ValueError("Expecting value")))
    with pytest.raises(ProviderError):
        build_client(session).geocode("София")


@pytest.mark.parametrize("status", ["OK", "ZERO_RESULTS"])
def test_valid_statuses_pass(status):
    data = {"status": status, "results": []}
    assert ensure_valid_status(data, "Geocoding") is data


def test_invalid_status_raises_with_details():
    with pytest.raises(ProviderError) as exc_info:
        ensure_valid_status({"status": "OVER_QUERY_LIMIT", "error_message": "quota"}, "Geocoding")
    assert exc_info.value.details == {"status": "OVER_QUERY_LIMIT", "message": "quota"}
