import pytest

from conftest import SOFIA_ADDRESS, SOFIA_LAT, SOFIA_LNG, FakeMapsClient, geocode_ok, place
from imot_backend.exceptions import AreaAnalysisError, ProviderError
from imot_backend.services.geo_service import GeocodingGateway
from imot_backend.services.proximity_service import LocationPoint, ProximityScorer, score_category


def build_scorer(client):
    return ProximityScorer(GeocodingGateway(client), client)


def test_no_points_scores_zero():
    assert score_category([]) == 0


def test_score_rounds_half_up():
    # (min(10, 1*2) + 3.0) / 2 = 2.5
    assert score_category([LocationPoint("transport", "Спирка", 100, 3.0)]) == 3


def test_score_ignores_points_without_rating():
    points = [
        LocationPoint("education", "Училище", 100, 4.0),
        LocationPoint("education", "Университет", 200, 5.0),
        LocationPoint("education", "Детска градина", 300, None),
    ]
    # (6 + 4.5) / 2 = 5.25
    assert score_category(points) == 5


def test_count_part_is_capped_at_ten():
    points = [LocationPoint("shopping", f"Магазин {i}", i, None) for i in range(8)]
    assert score_category(points) == 5


def test_area_without_nearby_places_scores_zero(maps_client):
    maps_client.places = {}
    analysis = build_scorer(maps_client).score_area(SOFIA_ADDRESS)

    assert analysis.scores == {"transport": 0, "education": 0, "shopping": 0, "leisure": 0}
    assert analysis.nearby_points == []
    assert analysis.average_price == 2200
    assert analysis.price_change == 5.2
    assert "Разширение на метрото" in analysis.infrastructure_projects


def test_area_scores_from_nearby_places(maps_client):
    analysis = build_scorer(maps_client).score_area(SOFIA_ADDRESS)

    # transport: two points rated 4.5 and 3.5 -> (4 + 4) / 2
    assert analysis.transport_score == 4
    assert analysis.education_score == 3
    assert analysis.shopping_score == 0
    assert analysis.leisure_score == 3
    assert analysis.display_name == "ул. „Оборище“ 5, 1504 София"
    distances = [point.distance for point in analysis.nearby_points]
    assert distances == sorted(distances)


def test_unresolvable_address_fails_whole_analysis():
    client = FakeMapsClient()
    with pytest.raises(AreaAnalysisError):
        build_scorer(client).score_area("несъществуващ адрес 123")
    assert not any(call[0] == "places_nearby" for call in client.calls)


def test_geocoding_provider_failure_propagates():
    denied = {"status": "OVER_QUERY_LIMIT", "results": []}
    client = FakeMapsClient(geocode_responses={SOFIA_ADDRESS: denied})

    with pytest.raises(ProviderError) as exc_info:
        build_scorer(client).score_area(SOFIA_ADDRESS)

    assert exc_info.value.details["status"] == "OVER_QUERY_LIMIT"
    assert not any(call[0] == "places_nearby" for call in client.calls)


def test_places_provider_failure_propagates():
    client = FakeMapsClient(
        geocode_responses={SOFIA_ADDRESS: geocode_ok(SOFIA_LAT, SOFIA_LNG, SOFIA_ADDRESS)},
        places_status="REQUEST_DENIED",
    )
    with pytest.raises(ProviderError) as exc_info:
        build_scorer(client).score_area(SOFIA_ADDRESS)
    assert exc_info.value.details["status"] == "REQUEST_DENIED"


def test_places_are_deduplicated_within_a_category():
    station = place("st-1", "Сердика", SOFIA_LAT + 0.001, SOFIA_LNG, 4.0)
    client = FakeMapsClient(places={"subway_station": [station], "transit_station": [station]})

    points = build_scorer(client).get_category_points(SOFIA_LAT, SOFIA_LNG, "transport")

    assert [point.name for point in points] == ["Сердика"]


def test_places_outside_radius_are_dropped():
    client = FakeMapsClient(places={
        # ~1.2 km north
        "supermarket": [place("far", "Билла", SOFIA_LAT + 0.011, SOFIA_LNG, 4.0)],
        "park": [place("park", "Южен парк", SOFIA_LAT + 0.011, SOFIA_LNG, 4.0)],
    })
    scorer = build_scorer(client)

    assert scorer.get_category_points(SOFIA_LAT, SOFIA_LNG, "shopping") == []
    assert len(scorer.get_category_points(SOFIA_LAT, SOFIA_LNG, "leisure")) == 1


def test_each_category_uses_its_radius():
    client = FakeMapsClient()
    build_scorer(client).get_nearby_points(SOFIA_LAT, SOFIA_LNG)

    radius_by_type = {call[1]: call[2] for call in client.calls if call[0] == "places_nearby"}
    assert radius_by_type["park"] == 1500
    assert radius_by_type["school"] == 1000
    assert len(radius_by_type) == 9
