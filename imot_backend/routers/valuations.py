"""
Router de Avalúos - Estimación rápida y análisis de zona
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import Field

from imot_backend.dependencies import get_scorer, get_valuation_engine
from imot_backend.routers.common import CamelModel
from imot_backend.services.proximity_service import ProximityScorer
from imot_backend.services.valuation_service import ValuationEngine

router = APIRouter(prefix="/api", tags=["valuations"])


class EstimateExtractedData(CamelModel):
    address: Optional[str] = None
    square_meters: Optional[float] = Field(default=None, gt=0)
    construction_type: Optional[str] = None
    construction_year: Optional[int] = None


class EstimateRequest(CamelModel):
    address: str = Field(min_length=5)
    square_meters: float = Field(ge=0)
    city: Optional[str] = None
    construction_type: Optional[str] = None
    construction_year: Optional[int] = None
    extracted_data: Optional[EstimateExtractedData] = None


@router.post("/valuation/estimate")
def estimate_valuation(data: EstimateRequest, engine: ValuationEngine = Depends(get_valuation_engine)):
    """Estimar el valor sin guardar la propiedad"""
    estimate = engine.estimate(data, data.extracted_data)
    return estimate.to_dict()


@router.get("/area-analysis")
def get_area_analysis(address: Optional[str] = None, scorer: ProximityScorer = Depends(get_scorer)):
    """Puntajes de servicios cercanos y datos de mercado para una dirección"""
    if not address or not address.strip():
        raise HTTPException(status_code=400, detail="Address parameter is required")
    return scorer.score_area(address).to_dict()
