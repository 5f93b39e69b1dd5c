"""
Modelos base y formateo de respuestas compartidos por los routers
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Request model with camelCase names on the wire"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _isoformat(value) -> Optional[str]:
    return value.isoformat() if value else None


def format_property_data(prop) -> Dict[str, Any]:
    """Formatear propiedad para respuesta"""
    maps_link = None
    if prop.latitude is not None and prop.longitude is not None:
        maps_link = f"https://www.google.com/maps?q={prop.latitude},{prop.longitude}"

    return {
        "id": prop.id,
        "address": prop.address,
        "city": prop.city,
        "latitude": prop.latitude,
        "longitude": prop.longitude,
        "squareMeters": prop.square_meters,
        "propertyType": prop.property_type,
        "constructionType": prop.construction_type,
        "constructionYear": prop.construction_year,
        "metroDistance": prop.metro_distance,
        "greenZones": prop.green_zones,
        "priceRangeMin": prop.price_range_min,
        "priceRangeMax": prop.price_range_max,
        "photos": list(prop.photos or []),
        "mapsLink": maps_link,
        "createdAt": _isoformat(prop.created_at),
    }


def format_document_data(data) -> Optional[Dict[str, Any]]:
    """Formatear datos extraídos de un documento"""
    if data is None:
        return None
    return {
        "id": data.id,
        "documentId": data.document_id,
        "squareMeters": data.square_meters,
        "constructionYear": data.construction_year,
        "address": data.address,
        "rooms": data.rooms,
        "floor": data.floor,
        "totalFloors": data.total_floors,
        "owner": data.owner,
        "cadastralNumber": data.cadastral_number,
        "taxAssessmentValue": data.tax_assessment_value,
        "constructionType": data.construction_type,
        "price": data.price,
    }


def format_document(document, data=None) -> Dict[str, Any]:
    return {
        "id": document.id,
        "propertyId": document.property_id,
        "type": document.type,
        "filename": document.filename,
        "status": document.status,
        "confidence": document.confidence,
        "createdAt": _isoformat(document.created_at),
        "extractedData": format_document_data(data),
    }


def format_evaluation(evaluation, prop=None) -> Dict[str, Any]:
    """Formatear evaluación; con prop incluye la propiedad evaluada"""
    result = {
        "id": evaluation.id,
        "propertyId": evaluation.property_id,
        "estimatedValue": evaluation.estimated_value,
        "currency": evaluation.currency,
        "confidence": evaluation.confidence,
        "evaluationType": evaluation.evaluation_type,
        "status": evaluation.status,
        "scores": {
            "location": evaluation.location_score,
            "infrastructure": evaluation.infrastructure_score,
            "market": evaluation.market_score,
            "building": evaluation.building_score,
        },
        "factors": evaluation.factors or {},
        "recommendations": evaluation.recommendations or [],
        "nearbyAmenities": evaluation.nearby_amenities or [],
        "marketTrends": evaluation.market_trends or {},
        "verifiedBy": evaluation.verified_by,
        "verificationDate": _isoformat(evaluation.verification_date),
        "createdAt": _isoformat(evaluation.created_at),
    }
    if prop is not None:
        result["property"] = format_property_data(prop)
    return result
