"""
Fuentes de datos de mercado por ciudad
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

from imot_backend.services.time_service import get_local_now
from imot_backend.services.utils import round_half_up
from imot_backend.services.valuation_service import get_base_price, normalize_city

# Cambio de precio anual en %
CITY_PRICE_CHANGE = {
    "софия": 5.2,
    "пловдив": 4.1,
    "варна": 4.6,
    "бургас": 3.8,
}
DEFAULT_PRICE_CHANGE = 2.5

CITY_INFRASTRUCTURE_PROJECTS = {
    "софия": ["Разширение на метрото", "Нов парк", "Ремонт на булевард"],
    "пловдив": ["Обновяване на централната градска част", "Нов пътен възел"],
    "варна": ["Реконструкция на крайбрежната алея", "Нова линия на градския транспорт"],
    "бургас": ["Разширение на пристанището", "Нов велосипеден маршрут"],
}

HISTORY_MONTHS = 12


@dataclass
class MarketSnapshot:
    city: Optional[str]
    average_price: int
    price_change: float
    infrastructure_projects: List[str] = field(default_factory=list)
    price_history: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "city": self.city,
            "averagePrice": self.average_price,
            "priceChange": self.price_change,
            "infrastructureProjects": list(self.infrastructure_projects),
            "priceHistory": list(self.price_history),
        }


class MarketDataSource(Protocol):
    def get_market_snapshot(self, city: Optional[str]) -> MarketSnapshot:
        ...


class StaticMarketDataSource:
    """Datos de mercado fijos por ciudad, sin llamadas externas"""

    def get_market_snapshot(self, city: Optional[str]) -> MarketSnapshot:
        key = normalize_city(city) if city else None
        average_price = get_base_price(key)
        price_change = CITY_PRICE_CHANGE.get(key, DEFAULT_PRICE_CHANGE)
        return MarketSnapshot(
            city=key,
            average_price=average_price,
            price_change=price_change,
            infrastructure_projects=list(CITY_INFRASTRUCTURE_PROJECTS.get(key, [])),
            price_history=self.build_price_history(average_price, price_change),
        )

    @staticmethod
    def build_price_history(average_price: int, price_change: float) -> List[Dict[str, Any]]:
        """Historia mensual lineal que termina en el precio actual"""
        now = get_local_now()
        history = []
        for months_ago in range(HISTORY_MONTHS - 1, -1, -1):
            year, month = now.year, now.month - months_ago
            while month <= 0:
                month += 12
                year -= 1
            ratio = 1 - (price_change / 100) * months_ago / HISTORY_MONTHS
            history.append({
                "date": f"{year:04d}-{month:02d}",
                "value": round_half_up(average_price * ratio),
            })
        return history
