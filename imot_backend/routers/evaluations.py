"""
Router de Evaluaciones - Crear, consultar y verificar evaluaciones
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import Field

from imot_backend.dependencies import get_evaluation_service, get_store
from imot_backend.models import EvaluationType
from imot_backend.routers.common import CamelModel, format_evaluation
from imot_backend.services.evaluation_service import EvaluationService
from imot_backend.services.record_store import DEFAULT_HISTORY_LIMIT, EvaluationRecordStore

router = APIRouter(prefix="/api/evaluations", tags=["evaluations"])


class CreateEvaluationRequest(CamelModel):
    property_id: int
    evaluation_type: EvaluationType = EvaluationType.quick
    include_area_analysis: bool = True


class VerifyEvaluationRequest(CamelModel):
    verified_by: str = Field(min_length=1, max_length=255)


@router.post("")
def create_evaluation(
    data: CreateEvaluationRequest,
    service: EvaluationService = Depends(get_evaluation_service)
):
    """Calcular y guardar la evaluación de una propiedad"""
    evaluation = service.evaluate_property(
        data.property_id,
        evaluation_type=data.evaluation_type,
        include_area_analysis=data.include_area_analysis
    )
    return format_evaluation(evaluation)


@router.get("/history")
def get_evaluation_history(
    limit: int = Query(DEFAULT_HISTORY_LIMIT, ge=1, le=200),
    store: EvaluationRecordStore = Depends(get_store)
):
    """Historial de evaluaciones con su propiedad, las más nuevas primero"""
    history = store.list_evaluation_history(limit=limit)
    return [format_evaluation(evaluation, prop) for evaluation, prop in history]


@router.get("/property/{property_id}")
def get_property_evaluation(property_id: int, store: EvaluationRecordStore = Depends(get_store)):
    """Última evaluación de una propiedad"""
    evaluation = store.get_latest_evaluation(property_id)
    if not evaluation:
        raise HTTPException(status_code=404, detail="Evaluation not found")
    return format_evaluation(evaluation)


@router.get("/{evaluation_id}")
def get_evaluation(evaluation_id: int, store: EvaluationRecordStore = Depends(get_store)):
    evaluation = store.get_evaluation(evaluation_id)
    if not evaluation:
        raise HTTPException(status_code=404, detail="Evaluation not found")
    return format_evaluation(evaluation)


@router.post("/{evaluation_id}/verify")
def verify_evaluation(
    evaluation_id: int,
    data: VerifyEvaluationRequest,
    store: EvaluationRecordStore = Depends(get_store)
):
    """Marcar una evaluación como verificada por un tasador"""
    evaluation = store.verify_evaluation(evaluation_id, data.verified_by)
    return format_evaluation(evaluation)
