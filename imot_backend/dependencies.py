"""
Contenedor de servicios compartidos por los routers
"""
from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from imot_backend.config import maps_config
from imot_backend.config.db_connection import DATABASE_URL, build_engine
from imot_backend.services.evaluation_service import EvaluationService
from imot_backend.services.geo_service import GeocodeCache, GeocodingGateway
from imot_backend.services.maps_client import GoogleMapsClient
from imot_backend.services.market_data import MarketDataSource, StaticMarketDataSource
from imot_backend.services.proximity_service import ProximityScorer
from imot_backend.services.record_store import EvaluationRecordStore
from imot_backend.services.room_classifier import RoomClassifier, WeightedObjectRoomClassifier
from imot_backend.services.valuation_service import ValuationEngine


@dataclass
class ServiceContainer:
    store: EvaluationRecordStore
    maps_client: GoogleMapsClient
    gateway: GeocodingGateway
    scorer: ProximityScorer
    valuation_engine: ValuationEngine
    classifier: RoomClassifier
    evaluation_service: EvaluationService


def build_services(
    database_url: str = DATABASE_URL,
    maps_client: Optional[GoogleMapsClient] = None,
    market_source: Optional[MarketDataSource] = None,
    classifier: Optional[RoomClassifier] = None,
    valuation_engine: Optional[ValuationEngine] = None,
) -> ServiceContainer:
    """Armar los servicios; los tests pasan dobles en lugar del cliente de mapas"""
    store = EvaluationRecordStore(build_engine(database_url))
    maps_client = maps_client or GoogleMapsClient()
    gateway = GeocodingGateway(maps_client, GeocodeCache(maps_config.GEOCODE_CACHE_SIZE))
    scorer = ProximityScorer(gateway, maps_client, market_source or StaticMarketDataSource())
    valuation_engine = valuation_engine or ValuationEngine()
    return ServiceContainer(
        store=store,
        maps_client=maps_client,
        gateway=gateway,
        scorer=scorer,
        valuation_engine=valuation_engine,
        classifier=classifier or WeightedObjectRoomClassifier(),
        evaluation_service=EvaluationService(store, valuation_engine, scorer),
    )


def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services


def get_store(request: Request) -> EvaluationRecordStore:
    return get_services(request).store


def get_maps_client(request: Request) -> GoogleMapsClient:
    return get_services(request).maps_client


def get_scorer(request: Request) -> ProximityScorer:
    return get_services(request).scorer


def get_valuation_engine(request: Request) -> ValuationEngine:
    return get_services(request).valuation_engine


def get_classifier(request: Request) -> RoomClassifier:
    return get_services(request).classifier


def get_evaluation_service(request: Request) -> EvaluationService:
    return get_services(request).evaluation_service
