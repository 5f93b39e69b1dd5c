"""
Servicio de avalúo - Estimación del valor de mercado de un inmueble

Fórmula multiplicativa:
    valor = precio_base_m2 * m2 * factor_construcción * factor_edad * factor_ubicación
"""
from dataclasses import dataclass, field
import logging
from typing import Any, Dict, List, Optional

from imot_backend.services.time_service import get_current_year
from imot_backend.services.utils import mean, round_half_up

logger = logging.getLogger(__name__)

# Precio base en EUR/m² por ciudad
CITY_BASE_PRICES = {
    "софия": 2200,
    "пловдив": 1500,
    "варна": 1700,
    "бургас": 1400,
}
DEFAULT_BASE_PRICE = 1000

# Nombres latinos de las mismas ciudades
CITY_ALIASES = {
    "sofia": "софия",
    "plovdiv": "пловдив",
    "varna": "варна",
    "burgas": "бургас",
}

CONSTRUCTION_FACTORS = {
    "тухла": 1.2,
    "brick": 1.2,
    "стоманобетон": 1.15,
    "reinforced concrete": 1.15,
    "епк": 0.95,
    "epk": 0.95,
    "панел": 0.9,
    "panel": 0.9,
    "гредоред": 0.85,
}
DEFAULT_CONSTRUCTION_FACTOR = 1.0

# (edad máxima exclusiva, factor)
AGE_FACTORS = [
    (5, 1.3),
    (15, 1.1),
    (30, 0.9),
    (50, 0.7),
]
OLD_BUILDING_FACTOR = 0.5
UNKNOWN_AGE_FACTOR = 0.9

PREMIUM_LOCATIONS = ["витоша", "лозенец", "иван вазов", "докторски паметник"]
GOOD_LOCATIONS = ["младост", "студентски град", "център"]

# Confianzas fijas de condición y mercado hasta tener fuentes reales
CONDITION_CONFIDENCE = 0.8
MARKET_CONFIDENCE = 0.9

RENOVATION_RECOMMENDATION = "Препоръчва се основен ремонт за подобряване на състоянието"
EFFICIENCY_RECOMMENDATION = "Препоръчва се инвестиция в енергийна ефективност на сградата"
AREA_OUTLOOK_RECOMMENDATION = "Районът има силни перспективи за развитие и поскъпване"


@dataclass
class LocationFactor:
    factor: float
    confidence: float
    tier: str


@dataclass
class ValuationEstimate:
    estimated_value: int
    confidence: float
    factors: Dict[str, int]
    recommendations: List[str] = field(default_factory=list)
    base_price_per_sqm: int = DEFAULT_BASE_PRICE
    square_meters: float = 0
    construction_factor: float = DEFAULT_CONSTRUCTION_FACTOR
    age_factor: float = UNKNOWN_AGE_FACTOR
    location_factor: Optional[LocationFactor] = None
    city: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "estimatedValue": self.estimated_value,
            "confidence": self.confidence,
            "factors": dict(self.factors),
            "recommendations": list(self.recommendations),
            "basePricePerSqm": self.base_price_per_sqm,
            "squareMeters": self.square_meters,
            "constructionFactor": self.construction_factor,
            "ageFactor": self.age_factor,
            "locationFactor": self.location_factor.factor if self.location_factor else None,
            "locationConfidence": self.location_factor.confidence if self.location_factor else None,
            "city": self.city,
        }


def normalize_city(city: str) -> str:
    key = city.strip().lower()
    return CITY_ALIASES.get(key, key)


def find_city(address: Optional[str]) -> Optional[str]:
    """Primera ciudad de la tabla contenida en la dirección"""
    if not address:
        return None
    lower_address = address.lower()
    for name in list(CITY_BASE_PRICES) + list(CITY_ALIASES):
        if name in lower_address:
            return normalize_city(name)
    return None


def get_base_price(city: Optional[str]) -> int:
    """Precio base por m² de la ciudad, o el precio por defecto"""
    if not city:
        return DEFAULT_BASE_PRICE
    return CITY_BASE_PRICES.get(normalize_city(city), DEFAULT_BASE_PRICE)


def get_construction_factor(construction_type: Optional[str]) -> float:
    """Factor por tipo de construcción, sin distinguir mayúsculas"""
    if not construction_type:
        return DEFAULT_CONSTRUCTION_FACTOR
    key = " ".join(construction_type.strip().lower().replace("_", " ").replace("-", " ").split())
    return CONSTRUCTION_FACTORS.get(key, DEFAULT_CONSTRUCTION_FACTOR)


def get_age_factor(construction_year: Optional[int], current_year: int) -> float:
    """Factor por antigüedad del edificio"""
    if not construction_year:
        return UNKNOWN_AGE_FACTOR
    age = current_year - construction_year
    for max_age, factor in AGE_FACTORS:
        if age < max_age:
            return factor
    return OLD_BUILDING_FACTOR


def get_location_factor(address: Optional[str]) -> LocationFactor:
    """Factor de ubicación por coincidencia de barrios premium/buenos"""
    if not address:
        return LocationFactor(factor=1.0, confidence=0.6, tier="unknown")
    lower_address = address.lower()
    if any(name in lower_address for name in PREMIUM_LOCATIONS):
        return LocationFactor(factor=1.2, confidence=0.9, tier="premium")
    if any(name in lower_address for name in GOOD_LOCATIONS):
        return LocationFactor(factor=1.1, confidence=0.85, tier="good")
    return LocationFactor(factor=1.0, confidence=0.75, tier="standard")


def _pick(extracted: Any, prop: Any, name: str):
    """Los datos del documento tienen prioridad sobre los del formulario"""
    value = getattr(extracted, name, None) if extracted is not None else None
    if value is None or value == "":
        value = getattr(prop, name, None)
    return value


class ValuationEngine:
    """Motor de avalúo determinístico"""

    def __init__(self, current_year: Optional[int] = None):
        self._current_year = current_year

    @property
    def current_year(self) -> int:
        return self._current_year or get_current_year()

    def estimate(self, prop: Any, extracted_data: Any = None) -> ValuationEstimate:
        """
        Estimar el valor de un inmueble
        prop: objeto con address, square_meters y opcionalmente city,
              construction_type, construction_year
        extracted_data: datos extraídos de documentos (mismos nombres de campos)
        """
        address = _pick(extracted_data, prop, "address")
        square_meters = _pick(extracted_data, prop, "square_meters") or 0
        construction_type = _pick(extracted_data, prop, "construction_type")
        construction_year = _pick(extracted_data, prop, "construction_year")

        city = getattr(prop, "city", None) or find_city(address) or find_city(getattr(prop, "address", None))
        base_price = get_base_price(city)
        construction_factor = get_construction_factor(construction_type)
        age_factor = get_age_factor(construction_year, self.current_year)
        location = get_location_factor(address)

        estimated_value = round_half_up(
            base_price * square_meters * construction_factor * age_factor * location.factor
        )
        confidence = round(mean([location.confidence, CONDITION_CONFIDENCE, MARKET_CONFIDENCE]), 2)

        logger.debug(
            f"Estimate: base={base_price} sqm={square_meters} construction={construction_factor} "
            f"age={age_factor} location={location.factor} -> {estimated_value}"
        )

        return ValuationEstimate(
            estimated_value=estimated_value,
            confidence=confidence,
            factors={
                "location": round_half_up(location.factor * 100),
                "condition": round_half_up(age_factor * 100),
                "market": round_half_up(construction_factor * 100),
                "potential": round_half_up(mean([location.factor, age_factor, construction_factor]) * 100),
            },
            recommendations=self.build_recommendations(age_factor, construction_factor, location),
            base_price_per_sqm=base_price,
            square_meters=square_meters,
            construction_factor=construction_factor,
            age_factor=age_factor,
            location_factor=location,
            city=city,
        )

    @staticmethod
    def build_recommendations(age_factor: float, construction_factor: float, location: LocationFactor) -> List[str]:
        recommendations = []
        if age_factor < 0.8:
            recommendations.append(RENOVATION_RECOMMENDATION)
        if construction_factor < 1:
            recommendations.append(EFFICIENCY_RECOMMENDATION)
        if location.factor > 1.1:
            recommendations.append(AREA_OUTLOOK_RECOMMENDATION)
        return recommendations
