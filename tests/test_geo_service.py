import threading

import pytest

from conftest import SOFIA_ADDRESS, SOFIA_LAT, SOFIA_LNG, FakeMapsClient, geocode_ok
from imot_backend.exceptions import ProviderError
from imot_backend.services.geo_service import (
    GeocodeCache,
    GeocodeResult,
    GeocodingGateway,
    calculate_distance,
    parse_latlng,
)


def geocode_calls(client):
    return [call for call in client.calls if call[0] == "geocode"]


def test_geocode_returns_first_result(maps_client):
    result = GeocodingGateway(maps_client).geocode(SOFIA_ADDRESS)

    assert result == GeocodeResult(lat=SOFIA_LAT, lng=SOFIA_LNG, display_name="ул. „Оборище“ 5, 1504 София")


def test_successful_geocode_is_cached(maps_client):
    gateway = GeocodingGateway(maps_client)

    first = gateway.geocode(SOFIA_ADDRESS)
    second = gateway.geocode(SOFIA_ADDRESS)

    assert first == second
    assert len(geocode_calls(maps_client)) == 1
    assert SOFIA_ADDRESS in gateway.cache


def test_blank_address_skips_provider(maps_client):
    gateway = GeocodingGateway(maps_client)

    assert gateway.geocode("") is None
    assert gateway.geocode("   ") is None
    assert maps_client.calls == []


def test_failures_are_not_cached():
    client = FakeMapsClient()
    gateway = GeocodingGateway(client)

    assert gateway.geocode("ул. Неизвестна 1") is None
    assert gateway.geocode("ул. Неизвестна 1") is None
    assert len(geocode_calls(client)) == 2
    assert len(gateway.cache) == 0


def test_provider_error_returns_none():
    class FailingClient(FakeMapsClient):
        def geocode(self, address):
            raise ProviderError("Maps provider request failed: timeout")

    assert GeocodingGateway(FailingClient()).geocode(SOFIA_ADDRESS) is None


def test_resolve_propagates_provider_errors():
    denied = {"status": "REQUEST_DENIED", "results": [], "error_message": "The provided API key is invalid."}
    gateway = GeocodingGateway(FakeMapsClient(geocode_responses={SOFIA_ADDRESS: denied}))

    with pytest.raises(ProviderError) as exc_info:
        gateway.resolve(SOFIA_ADDRESS)

    assert exc_info.value.details["status"] == "REQUEST_DENIED"
    assert gateway.geocode(SOFIA_ADDRESS) is None


def test_resolve_returns_none_for_zero_results():
    assert GeocodingGateway(FakeMapsClient()).resolve("ул. Неизвестна 1") is None


def test_injected_cache_is_used(maps_client):
    cache = GeocodeCache(max_size=10)
    cache.set("кеширан адрес", GeocodeResult(1.0, 2.0, "кеширан"))

    result = GeocodingGateway(maps_client, cache).geocode("кеширан адрес")

    assert result.display_name == "кеширан"
    assert maps_client.calls == []


def test_cache_evicts_least_recently_used():
    cache = GeocodeCache(max_size=2)
    cache.set("a", GeocodeResult(1, 1, "a"))
    cache.set("b", GeocodeResult(2, 2, "b"))
    cache.get("a")
    cache.set("c", GeocodeResult(3, 3, "c"))

    assert "a" in cache
    assert "b" not in cache
    assert "c" in cache
    assert len(cache) == 2


@pytest.mark.parametrize("read", [len, lambda cache: "a" in cache])
def test_cache_reads_wait_for_the_lock(read):
    cache = GeocodeCache(max_size=2)
    cache.set("a", GeocodeResult(1, 1, "a"))
    reader = threading.Thread(target=read, args=(cache,))

    with cache._lock:
        reader.start()
        reader.join(timeout=0.1)
        assert reader.is_alive()

    reader.join(timeout=1)
    assert not reader.is_alive()


def test_reverse_geocode(maps_client):
    assert GeocodingGateway(maps_client).reverse_geocode(SOFIA_LAT, SOFIA_LNG) == SOFIA_ADDRESS


def test_calculate_distance_one_degree_of_longitude_at_equator():
    assert calculate_distance(0, 0, 0, 1) == pytest.approx(111195, abs=1)


def test_parse_latlng():
    assert parse_latlng("42.6977, 23.3219") == (42.6977, 23.3219)


@pytest.mark.parametrize("value", ["42.6977", "abc,def", "95,23", "42,200", "1,2,3"])
def test_parse_latlng_rejects_malformed_values(value):
    with pytest.raises(ValueError):
        parse_latlng(value)
