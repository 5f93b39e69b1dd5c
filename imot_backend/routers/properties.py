"""
Router de Propiedades - Alta y consulta de propiedades a evaluar
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import Field

from imot_backend.dependencies import get_store
from imot_backend.models import Property, PropertyType
from imot_backend.routers.common import CamelModel, format_document, format_property_data
from imot_backend.services.record_store import EvaluationRecordStore

router = APIRouter(prefix="/api", tags=["properties"])


class CreatePropertyRequest(CamelModel):
    address: str = Field(min_length=5)
    square_meters: float = Field(gt=0)
    city: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    property_type: PropertyType = PropertyType.apartment
    construction_type: Optional[str] = None
    construction_year: Optional[int] = Field(default=None, gt=1800, le=2100)
    metro_distance: Optional[int] = Field(default=None, ge=0)
    green_zones: Optional[int] = Field(default=None, ge=0)
    price_range_min: Optional[int] = Field(default=None, ge=0)
    price_range_max: Optional[int] = Field(default=None, ge=0)
    photos: List[str] = []


@router.post("/properties")
def create_property(data: CreatePropertyRequest, store: EvaluationRecordStore = Depends(get_store)):
    """Registrar una propiedad"""
    prop = store.create_property(Property(**data.model_dump()))
    return format_property_data(prop)


@router.get("/properties")
def list_properties(
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    store: EvaluationRecordStore = Depends(get_store)
):
    """Listar propiedades, las más recientes primero"""
    properties = store.list_properties(limit=limit, offset=offset)
    return {"properties": [format_property_data(prop) for prop in properties], "count": len(properties)}


@router.get("/properties/{property_id}")
def get_property(property_id: int, store: EvaluationRecordStore = Depends(get_store)):
    prop = store.get_property(property_id)
    if not prop:
        raise HTTPException(status_code=404, detail="Property not found")
    return format_property_data(prop)


@router.get("/properties/{property_id}/documents")
def list_property_documents(property_id: int, store: EvaluationRecordStore = Depends(get_store)):
    """Documentos de la propiedad con sus datos extraídos"""
    if not store.get_property(property_id):
        raise HTTPException(status_code=404, detail="Property not found")
    return [format_document(document, data) for document, data in store.list_documents(property_id)]
