"""
Router de Fotos - Clasificación de fotos de habitaciones
"""
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from imot_backend.dependencies import get_classifier
from imot_backend.services.room_classifier import RoomClassifier

router = APIRouter(prefix="/api", tags=["photos"])


@router.post("/photos/classify")
async def classify_photo(file: UploadFile = File(...), classifier: RoomClassifier = Depends(get_classifier)):
    """Tipo de habitación de una foto"""
    contents = await file.read()
    if not contents:
        raise HTTPException(status_code=400, detail="Empty image file")
    result = classifier.classify_room(contents).to_dict()
    result["filename"] = file.filename
    return result
