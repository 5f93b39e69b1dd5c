"""
Cliente HTTP para los servicios web de Google Maps (Geocoding y Places)
"""
import logging
from typing import Any, Dict, Optional

import requests

from imot_backend.config import maps_config
from imot_backend.exceptions import ConfigurationError, ProviderError

logger = logging.getLogger(__name__)

# Statuses that carry a valid (possibly empty) answer
VALID_STATUSES = ("OK", "ZERO_RESULTS")


class GoogleMapsClient:
    """Client for the Google Maps geocoding and nearby search APIs"""

    def __init__(
        self,
        api_key: Optional[str] = maps_config.GOOGLE_MAPS_API_KEY,
        base_url: str = maps_config.MAPS_BASE_URL,
        region: str = maps_config.MAPS_REGION,
        language: str = maps_config.MAPS_LANGUAGE,
        country: str = maps_config.MAPS_COUNTRY,
        timeout: float = maps_config.MAPS_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.region = region
        self.language = language
        self.country = country
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get(self, endpoint: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """GET contra el proveedor, devuelve el JSON tal cual"""
        if not self.api_key:
            raise ConfigurationError("API key not configured")

        url = f"{self.base_url}/{endpoint}/json"
        try:
            response = self.session.get(url, params={**params, "key": self.api_key}, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"Maps request to {endpoint} failed: {e}")
            raise ProviderError(f"Maps provider request failed: {e}")
        except ValueError as e:
            logger.error(f"Maps response from {endpoint} is not JSON: {e}")
            raise ProviderError("Maps provider returned an invalid response")

        if not isinstance(data, dict):
            raise ProviderError("Maps provider returned an invalid response")
        return data

    def geocode(self, address: str) -> Dict[str, Any]:
        """Geocodificar una dirección dentro del país configurado"""
        return self._get("geocode", {
            "address": address,
            "region": self.region,
            "language": self.language,
            "components": f"country:{self.country}",
        })

    def reverse_geocode(self, lat: float, lng: float) -> Dict[str, Any]:
        """Obtener direcciones para unas coordenadas"""
        return self._get("geocode", {
            "latlng": f"{lat},{lng}",
            "language": self.language,
        })

    def places_nearby(self, lat: float, lng: float, place_type: Optional[str] = None, radius: int = 1000) -> Dict[str, Any]:
        """Buscar lugares cercanos a un punto"""
        params: Dict[str, Any] = {
            "location": f"{lat},{lng}",
            "radius": radius,
            "language": self.language,
        }
        if place_type:
            params["type"] = place_type
        return self._get("place/nearbysearch", params)


def ensure_valid_status(data: Dict[str, Any], operation: str) -> Dict[str, Any]:
    """Fallar con ProviderError si el proveedor no respondió OK/ZERO_RESULTS"""
    status = data.get("status")
    if status not in VALID_STATUSES:
        message = data.get("error_message") or status or "unknown status"
        logger.warning(f"{operation} failed with status {status}: {message}")
        raise ProviderError(f"{operation} failed: {status}", details={"status": status, "message": message})
    return data
