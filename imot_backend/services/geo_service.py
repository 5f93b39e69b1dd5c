"""
Servicio de geolocalización reutilizable
"""
from collections import OrderedDict
from dataclasses import dataclass
from math import radians, cos, sin, asin, sqrt
import logging
import threading
from typing import Optional

from imot_backend.config import maps_config
from imot_backend.exceptions import ImotError
from imot_backend.services.maps_client import GoogleMapsClient, ensure_valid_status

logger = logging.getLogger(__name__)


def calculate_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> int:
    """Calcula distancia entre dos puntos en metros usando Haversine"""
    R = 6371000  # Radio de la Tierra en metros
    lat1, lng1, lat2, lng2 = map(radians, [float(lat1), float(lng1), float(lat2), float(lng2)])
    dlat = lat2 - lat1
    dlng = lng2 - lng1
    a = sin(dlat/2)**2 + cos(lat1) * cos(lat2) * sin(dlng/2)**2
    c = 2 * asin(sqrt(a))
    return round(R * c)


def parse_latlng(value: str) -> tuple:
    """Convertir 'lat,lng' en una tupla de floats"""
    parts = [part.strip() for part in value.split(",")]
    if len(parts) != 2:
        raise ValueError(f"Invalid coordinates: {value!r}")
    lat, lng = float(parts[0]), float(parts[1])
    if not (-90 <= lat <= 90 and -180 <= lng <= 180):
        raise ValueError(f"Coordinates out of range: {value!r}")
    return lat, lng


@dataclass(frozen=True)
class GeocodeResult:
    lat: float
    lng: float
    display_name: str


class GeocodeCache:
    """Bounded LRU cache of successful geocode results, keyed by the exact address"""

    def __init__(self, max_size: int = maps_config.GEOCODE_CACHE_SIZE):
        self.max_size = max_size
        self._entries: "OrderedDict[str, GeocodeResult]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[GeocodeResult]:
        with self._lock:
            result = self._entries.get(key)
            if result is not None:
                self._entries.move_to_end(key)
            return result

    def set(self, key: str, value: GeocodeResult) -> None:
        with self._lock:
            self._entries[key] = value
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_size:
                self._entries.popitem(last=False)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries


class GeocodingGateway:
    """Geocodificación de direcciones con caché inyectable"""

    def __init__(self, client: GoogleMapsClient, cache: Optional[GeocodeCache] = None):
        self.client = client
        self.cache = cache if cache is not None else GeocodeCache()

    def resolve(self, address: str) -> Optional[GeocodeResult]:
        """
        Geocodificar una dirección sin ocultar fallas del proveedor
        Returns: GeocodeResult o None si la dirección no existe
        Raises: ProviderError, ConfigurationError
        """
        if not address or not address.strip():
            logger.warning("Geocoding skipped: empty address")
            return None

        cached = self.cache.get(address)
        if cached is not None:
            logger.debug(f"Geocode cache hit for {address!r}")
            return cached

        data = ensure_valid_status(self.client.geocode(address), "Geocoding")
        if data.get("status") == "OK" and data.get("results"):
            first = data["results"][0]
            location = first["geometry"]["location"]
            result = GeocodeResult(
                lat=location["lat"],
                lng=location["lng"],
                display_name=first.get("formatted_address", address)
            )
            self.cache.set(address, result)
            return result

        logger.warning(f"No se pudo geocodificar {address!r}: {data.get('status', 'Error')}")
        return None

    def geocode(self, address: str) -> Optional[GeocodeResult]:
        """
        Geocodificar una dirección
        Returns: GeocodeResult o None si no se encontró o el proveedor falló
        """
        try:
            return self.resolve(address)
        except ImotError as e:
            logger.error(f"Error en geocodificación de {address!r}: {e.message}")
            return None

    def reverse_geocode(self, lat: float, lng: float) -> Optional[str]:
        """Obtener la dirección formateada de unas coordenadas"""
        try:
            data = self.client.reverse_geocode(lat, lng)
        except ImotError as e:
            logger.error(f"Error en geocodificación inversa ({lat}, {lng}): {e.message}")
            return None

        if data.get("status") == "OK" and data.get("results"):
            return data["results"][0].get("formatted_address")

        logger.warning(f"No se pudo determinar la dirección de ({lat}, {lng}): {data.get('status', 'Error')}")
        return None
