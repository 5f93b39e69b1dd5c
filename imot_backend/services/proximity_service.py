"""
Servicio de análisis de zona - Puntajes 0-10 por categoría de servicios cercanos
"""
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
import logging
from typing import Any, Dict, List, Optional

from imot_backend.config import maps_config
from imot_backend.exceptions import AreaAnalysisError
from imot_backend.services.geo_service import GeocodingGateway, calculate_distance
from imot_backend.services.maps_client import GoogleMapsClient, ensure_valid_status
from imot_backend.services.market_data import MarketDataSource, StaticMarketDataSource
from imot_backend.services.utils import mean, round_half_up
from imot_backend.services.valuation_service import find_city

logger = logging.getLogger(__name__)

DEFAULT_RADIUS = 1000

CATEGORY_PLACE_TYPES = {
    "transport": ["subway_station", "bus_station", "transit_station"],
    "education": ["school", "university"],
    "shopping": ["shopping_mall", "supermarket"],
    "leisure": ["park", "gym"],
}

CATEGORY_RADIUS = {
    "leisure": 1500,
}


@dataclass
class LocationPoint:
    type: str
    name: str
    distance: int
    rating: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "name": self.name, "distance": self.distance, "rating": self.rating}


@dataclass
class AreaAnalysis:
    transport_score: int
    education_score: int
    shopping_score: int
    leisure_score: int
    average_price: int
    price_change: float
    infrastructure_projects: List[str] = field(default_factory=list)
    nearby_points: List[LocationPoint] = field(default_factory=list)
    lat: Optional[float] = None
    lng: Optional[float] = None
    display_name: Optional[str] = None

    @property
    def scores(self) -> Dict[str, int]:
        return {
            "transport": self.transport_score,
            "education": self.education_score,
            "shopping": self.shopping_score,
            "leisure": self.leisure_score,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "transportScore": self.transport_score,
            "educationScore": self.education_score,
            "shoppingScore": self.shopping_score,
            "leisureScore": self.leisure_score,
            "averagePrice": self.average_price,
            "priceChange": self.price_change,
            "infrastructureProjects": list(self.infrastructure_projects),
            "nearbyPoints": [point.to_dict() for point in self.nearby_points],
            "location": {"lat": self.lat, "lng": self.lng} if self.lat is not None else None,
            "displayName": self.display_name,
        }


def score_category(points: List[LocationPoint]) -> int:
    """round((min(10, cantidad*2) + rating promedio) / 2), 0 sin puntos"""
    if not points:
        return 0
    average_rating = mean(point.rating for point in points if point.rating is not None) or 0
    return round_half_up((min(10, len(points) * 2) + average_rating) / 2)


def _place_key(place: Dict[str, Any]) -> str:
    return place.get("place_id") or place.get("name") or ""


class ProximityScorer:
    """Análisis de la zona alrededor de una dirección"""

    def __init__(
        self,
        gateway: GeocodingGateway,
        client: GoogleMapsClient,
        market_source: Optional[MarketDataSource] = None,
        radius_overrides: Optional[Dict[str, int]] = None,
        max_workers: int = maps_config.NEARBY_MAX_WORKERS,
    ):
        self.gateway = gateway
        self.client = client
        self.market_source = market_source or StaticMarketDataSource()
        self.radius_overrides = dict(CATEGORY_RADIUS if radius_overrides is None else radius_overrides)
        self.max_workers = max_workers

    def radius_for(self, category: str) -> int:
        return self.radius_overrides.get(category, DEFAULT_RADIUS)

    def get_category_points(self, lat: float, lng: float, category: str) -> List[LocationPoint]:
        """Puntos de interés de una categoría dentro de su radio"""
        radius = self.radius_for(category)
        seen = set()
        points = []
        for place_type in CATEGORY_PLACE_TYPES[category]:
            data = ensure_valid_status(
                self.client.places_nearby(lat, lng, place_type=place_type, radius=radius),
                f"Nearby search ({place_type})"
            )
            for place in data.get("results", []):
                key = _place_key(place)
                if key and key in seen:
                    continue
                location = place.get("geometry", {}).get("location")
                if not location:
                    continue
                distance = calculate_distance(lat, lng, location["lat"], location["lng"])
                if distance > radius:
                    continue
                if key:
                    seen.add(key)
                points.append(LocationPoint(
                    type=category,
                    name=place.get("name", ""),
                    distance=distance,
                    rating=place.get("rating"),
                ))
        points.sort(key=lambda point: point.distance)
        return points

    def get_nearby_points(self, lat: float, lng: float) -> Dict[str, List[LocationPoint]]:
        """Puntos por categoría; las categorías se consultan en paralelo"""
        categories = list(CATEGORY_PLACE_TYPES)
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {
                category: executor.submit(self.get_category_points, lat, lng, category)
                for category in categories
            }
            # result() re-raises ProviderError, no partial scores
            return {category: futures[category].result() for category in categories}

    def score_location(self, lat: float, lng: float, city: Optional[str] = None) -> AreaAnalysis:
        """Análisis de zona para un origen ya resuelto"""
        points_by_category = self.get_nearby_points(lat, lng)
        market = self.market_source.get_market_snapshot(city)

        nearby_points = sorted(
            (point for points in points_by_category.values() for point in points),
            key=lambda point: point.distance
        )
        return AreaAnalysis(
            transport_score=score_category(points_by_category["transport"]),
            education_score=score_category(points_by_category["education"]),
            shopping_score=score_category(points_by_category["shopping"]),
            leisure_score=score_category(points_by_category["leisure"]),
            average_price=market.average_price,
            price_change=market.price_change,
            infrastructure_projects=market.infrastructure_projects,
            nearby_points=nearby_points,
            lat=lat,
            lng=lng,
        )

    def score_area(self, address: str) -> AreaAnalysis:
        """Analizar la zona de una dirección"""
        origin = self.gateway.resolve(address)
        if origin is None:
            raise AreaAnalysisError(f"Could not resolve address: {address}")

        city = find_city(address) or find_city(origin.display_name)
        analysis = self.score_location(origin.lat, origin.lng, city=city)
        analysis.display_name = origin.display_name
        logger.info(f"Area analysis for {address!r}: {analysis.scores}")
        return analysis
