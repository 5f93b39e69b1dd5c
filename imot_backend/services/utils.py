"""
Utilidades numéricas compartidas por los servicios de puntuación
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional


def round_half_up(value: float, ndigits: int = 0):
    """Redondear .5 hacia arriba (round() de Python redondea al par)"""
    quantum = Decimal(1).scaleb(-ndigits)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    if ndigits == 0:
        return int(rounded)
    return float(rounded)


def clamp(value: float, lower: float = 0.0, upper: float = 10.0) -> float:
    """Limitar un valor al rango [lower, upper]"""
    return max(lower, min(upper, value))


def mean(values: Iterable[float]) -> Optional[float]:
    """Promedio, None si no hay valores"""
    values = list(values)
    if not values:
        return None
    return sum(values) / len(values)
