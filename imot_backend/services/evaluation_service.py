"""
Servicio de evaluación - Orquesta datos de documentos, avalúo y análisis de zona
"""
import logging
from typing import Optional

from imot_backend.exceptions import (
    AreaAnalysisError,
    ConfigurationError,
    EntityNotFoundError,
    ProviderError,
)
from imot_backend.models import Evaluation, EvaluationStatus, EvaluationType, Property
from imot_backend.services.document_extractor import ExtractedFields, consolidate
from imot_backend.services.market_data import MarketDataSource
from imot_backend.services.proximity_service import AreaAnalysis, ProximityScorer
from imot_backend.services.record_store import EvaluationRecordStore
from imot_backend.services.utils import clamp, mean, round_half_up
from imot_backend.services.valuation_service import (
    AGE_FACTORS,
    ValuationEngine,
    ValuationEstimate,
)

logger = logging.getLogger(__name__)

MAX_LOCATION_FACTOR = 1.2
MAX_CONSTRUCTION_FACTOR = 1.2
MAX_AGE_FACTOR = AGE_FACTORS[0][1]
NEUTRAL_MARKET_SCORE = 5


def to_percent(confidence: float) -> int:
    """Confianza 0-1 del motor a la escala 0-100 que se guarda"""
    return round_half_up(confidence * 100)


def _score(value: float) -> float:
    return round_half_up(clamp(value), 1)


class EvaluationService:
    """Crea evaluaciones completas para propiedades guardadas"""

    def __init__(
        self,
        store: EvaluationRecordStore,
        engine: ValuationEngine,
        scorer: ProximityScorer,
        market: Optional[MarketDataSource] = None,
    ):
        self.store = store
        self.engine = engine
        self.scorer = scorer
        self.market = market or scorer.market_source

    def get_extracted_data(self, property_id: int) -> Optional[ExtractedFields]:
        """Datos consolidados de todos los documentos de la propiedad"""
        documents = self.store.list_documents(property_id)
        pairs = [(data, document.confidence) for document, data in documents if data is not None]
        if not pairs:
            return None
        return consolidate(pairs)

    def analyze_area(self, prop: Property, city: Optional[str]) -> Optional[AreaAnalysis]:
        """Análisis de zona; si falla la evaluación sigue sin puntajes de zona"""
        try:
            if prop.latitude is not None and prop.longitude is not None:
                return self.scorer.score_location(prop.latitude, prop.longitude, city=city)
            return self.scorer.score_area(prop.address)
        except (AreaAnalysisError, ProviderError, ConfigurationError) as e:
            logger.warning(f"Area analysis unavailable for property {prop.id}: {e}")
            return None

    def evaluate_property(
        self,
        property_id: int,
        evaluation_type: EvaluationType = EvaluationType.quick,
        include_area_analysis: bool = True,
    ) -> Evaluation:
        prop = self.store.get_property(property_id)
        if prop is None:
            raise EntityNotFoundError(f"Property {property_id} not found")

        extracted = self.get_extracted_data(property_id)
        estimate = self.engine.estimate(prop, extracted)

        area = self.analyze_area(prop, estimate.city) if include_area_analysis else None
        market = self.market.get_market_snapshot(estimate.city)

        evaluation = Evaluation(
            property_id=property_id,
            estimated_value=estimate.estimated_value,
            confidence=to_percent(estimate.confidence),
            evaluation_type=EvaluationType(evaluation_type),
            status=EvaluationStatus.completed,
            factors=dict(estimate.factors),
            recommendations=list(estimate.recommendations),
            nearby_amenities=[point.to_dict() for point in area.nearby_points] if area else [],
            market_trends=market.to_dict(),
            **self.build_scores(estimate, area, market.price_change),
        )
        return self.store.create_evaluation(evaluation)

    @staticmethod
    def build_scores(estimate: ValuationEstimate, area: Optional[AreaAnalysis], price_change: float) -> dict:
        """Puntajes 0-10 con un decimal"""
        location_factor = estimate.location_factor.factor if estimate.location_factor else 1.0
        infrastructure = mean(area.scores.values()) if area else None
        return {
            "location_score": _score(location_factor / MAX_LOCATION_FACTOR * 10),
            "infrastructure_score": _score(infrastructure or 0),
            "market_score": _score(NEUTRAL_MARKET_SCORE + price_change / 2),
            "building_score": _score(
                estimate.construction_factor * estimate.age_factor
                / (MAX_CONSTRUCTION_FACTOR * MAX_AGE_FACTOR) * 10
            ),
        }
