import pytest
from fastapi.testclient import TestClient

from imot_backend.app_factory import create_app
from imot_backend.config.db_connection import build_engine
from imot_backend.dependencies import build_services
from imot_backend.services.record_store import EvaluationRecordStore
from imot_backend.services.valuation_service import ValuationEngine

CURRENT_YEAR = 2024

SOFIA_ADDRESS = "гр. София, ул. Оборище 5"
SOFIA_LAT, SOFIA_LNG = 42.6977, 23.3219


def geocode_ok(lat, lng, formatted_address):
    return {
        "status": "OK",
        "results": [{
            "geometry": {"location": {"lat": lat, "lng": lng}},
            "formatted_address": formatted_address,
            "address_components": [],
        }],
    }


def place(place_id, name, lat, lng, rating=None):
    result = {"place_id": place_id, "name": name, "geometry": {"location": {"lat": lat, "lng": lng}}}
    if rating is not None:
        result["rating"] = rating
    return result


class FakeMapsClient:
    """Stands in for GoogleMapsClient, answers from in-memory tables"""

    def __init__(self, api_key="test-key", geocode_responses=None, places=None, places_status="OK"):
        self.api_key = api_key
        self.geocode_responses = geocode_responses or {}
        self.places = places or {}
        self.places_status = places_status
        self.calls = []

    def geocode(self, address):
        self.calls.append(("geocode", address))
        return self.geocode_responses.get(address, {"status": "ZERO_RESULTS", "results": []})

    def reverse_geocode(self, lat, lng):
        self.calls.append(("reverse_geocode", lat, lng))
        return geocode_ok(lat, lng, SOFIA_ADDRESS)

    def places_nearby(self, lat, lng, place_type=None, radius=1000):
        self.calls.append(("places_nearby", place_type, radius))
        if self.places_status not in ("OK", "ZERO_RESULTS"):
            return {"status": self.places_status, "results": [], "error_message": "The provided API key is invalid."}
        results = self.places.get(place_type, [])
        return {"status": "OK" if results else "ZERO_RESULTS", "results": results}


@pytest.fixture
def sofia_places():
    return {
        "subway_station": [place("m1", "Метростанция Сердика", SOFIA_LAT + 0.002, SOFIA_LNG, 4.5)],
        "bus_station": [place("b1", "Автобусна спирка", SOFIA_LAT, SOFIA_LNG + 0.002, 3.5)],
        "school": [place("s1", "125 СУ", SOFIA_LAT + 0.003, SOFIA_LNG + 0.001, 4.0)],
        "park": [place("p1", "Докторска градина", SOFIA_LAT + 0.004, SOFIA_LNG, 4.8)],
    }


@pytest.fixture
def maps_client(sofia_places):
    return FakeMapsClient(
        geocode_responses={SOFIA_ADDRESS: geocode_ok(SOFIA_LAT, SOFIA_LNG, "ул. „Оборище“ 5, 1504 София")},
        places=sofia_places,
    )


@pytest.fixture
def store():
    store = EvaluationRecordStore(build_engine("sqlite://"))
    store.init_schema()
    return store


@pytest.fixture
def services(maps_client):
    services = build_services(
        database_url="sqlite://",
        maps_client=maps_client,
        valuation_engine=ValuationEngine(current_year=CURRENT_YEAR),
    )
    services.store.init_schema()
    return services


@pytest.fixture
def client(services):
    with TestClient(create_app(services)) as test_client:
        yield test_client
