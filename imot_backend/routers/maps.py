"""
Router de Mapas - Proxy de geocodificación y lugares cercanos
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from imot_backend.dependencies import get_maps_client
from imot_backend.exceptions import ConfigurationError
from imot_backend.services.geo_service import parse_latlng
from imot_backend.services.maps_client import GoogleMapsClient, ensure_valid_status

router = APIRouter(prefix="/api", tags=["maps"])


@router.get("/geocode")
def geocode(
    address: Optional[str] = None,
    latlng: Optional[str] = None,
    client: GoogleMapsClient = Depends(get_maps_client)
):
    """Geocodificar una dirección o unas coordenadas 'lat,lng'"""
    if not address and not latlng:
        raise HTTPException(status_code=400, detail="Address or latlng parameter is required")

    if address:
        data = client.geocode(address)
    else:
        try:
            lat, lng = parse_latlng(latlng)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        data = client.reverse_geocode(lat, lng)

    return ensure_valid_status(data, "Geocoding")


@router.get("/places/nearby")
def places_nearby(
    location: Optional[str] = None,
    type: Optional[str] = None,
    radius: int = Query(1000, gt=0, le=50000),
    client: GoogleMapsClient = Depends(get_maps_client)
):
    """Lugares cercanos a 'lat,lng', opcionalmente filtrados por tipo"""
    if not location:
        raise HTTPException(status_code=400, detail="Location parameter is required")

    try:
        lat, lng = parse_latlng(location)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    data = ensure_valid_status(
        client.places_nearby(lat, lng, place_type=type, radius=radius),
        "Nearby search"
    )
    return {"results": data.get("results", []), "status": data.get("status")}


@router.get("/maps/config")
def maps_config(client: GoogleMapsClient = Depends(get_maps_client)):
    """Configuración del mapa para el cliente"""
    if not client.api_key:
        raise ConfigurationError("API key not configured")
    return {"apiKey": client.api_key}
