"""
Router de Documentos - Documentos escaneados y sus datos extraídos
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import Field

from imot_backend.dependencies import get_store
from imot_backend.models import Document, DocumentStatus, DocumentType
from imot_backend.routers.common import CamelModel, format_document
from imot_backend.services import document_extractor
from imot_backend.services.record_store import EvaluationRecordStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["documents"])


class ExtractedDataRequest(CamelModel):
    square_meters: Optional[float] = Field(default=None, gt=0)
    construction_year: Optional[int] = None
    address: Optional[str] = None
    rooms: Optional[int] = Field(default=None, ge=0)
    floor: Optional[int] = None
    total_floors: Optional[int] = Field(default=None, ge=0)
    owner: Optional[str] = None
    cadastral_number: Optional[str] = None
    tax_assessment_value: Optional[float] = Field(default=None, ge=0)
    construction_type: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)


class CreateDocumentRequest(CamelModel):
    property_id: int
    type: Optional[DocumentType] = None
    filename: Optional[str] = None
    ocr_text: Optional[str] = None
    confidence: Optional[float] = Field(default=None, ge=0, le=1)
    extracted_data: Optional[ExtractedDataRequest] = None


class ExtractRequest(CamelModel):
    text: str


@router.post("/documents")
def create_document(data: CreateDocumentRequest, store: EvaluationRecordStore = Depends(get_store)):
    """
    Guardar un documento con sus datos
    Sin extractedData pero con ocrText, los campos se extraen del texto.
    La respuesta incluye las diferencias con los datos de la propiedad
    """
    document_type = data.type
    confidence = data.confidence
    extracted = data.extracted_data.model_dump(exclude_none=True) if data.extracted_data else None

    if data.ocr_text:
        analysis = document_extractor.analyze(data.ocr_text)
        if extracted is None:
            extracted = analysis.fields.as_dict()
        if document_type is None and analysis.document_type:
            document_type = DocumentType(analysis.document_type)
        if confidence is None:
            confidence = analysis.confidence

    if document_type is None:
        logger.warning(f"Could not determine document type for property {data.property_id}")
        raise HTTPException(status_code=400, detail="Document type could not be determined, provide type")

    document = Document(
        property_id=data.property_id,
        type=document_type,
        filename=data.filename,
        status=DocumentStatus.processed if extracted else DocumentStatus.pending,
        ocr_text=data.ocr_text,
        confidence=confidence if confidence is not None else 0.0,
    )
    document, document_data = store.create_document(document, extracted)

    discrepancies = []
    if document_data is not None:
        prop = store.get_property(document.property_id)
        discrepancies = document_extractor.compare_with_form(prop, document_data)
        if discrepancies:
            logger.info(
                f"Document {document.id} differs from property {document.property_id} in "
                f"{', '.join(item['field'] for item in discrepancies)}"
            )

    result = format_document(document, document_data)
    result["discrepancies"] = discrepancies
    return result


@router.post("/documents/extract")
def extract_document_fields(data: ExtractRequest):
    """Extraer campos del texto OCR sin guardar nada"""
    analysis = document_extractor.analyze(data.text)
    fields = analysis.fields
    return {
        "documentType": analysis.document_type,
        "confidence": analysis.confidence,
        "fields": {
            "address": fields.address,
            "squareMeters": fields.square_meters,
            "rooms": fields.rooms,
            "floor": fields.floor,
            "totalFloors": fields.total_floors,
            "constructionYear": fields.construction_year,
            "price": fields.price,
            "taxAssessmentValue": fields.tax_assessment_value,
            "cadastralNumber": fields.cadastral_number,
            "constructionType": fields.construction_type,
            "owner": fields.owner,
        },
    }
