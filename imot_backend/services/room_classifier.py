"""
Clasificación de fotos de habitaciones

El detector de objetos es inyectable; el detector por defecto no encuentra nada,
así que las fotos quedan como 'unknown' hasta conectar un modelo real.
"""
from dataclasses import dataclass, field
import logging
from typing import Any, Callable, Dict, List, Protocol

logger = logging.getLogger(__name__)

CONFIDENCE_THRESHOLD = 0.75

HIGH_IMPORTANCE_OBJECTS = {
    "door", "bed", "toilet", "stove", "sofa", "shower", "sink", "wardrobe", "refrigerator",
}
MEDIUM_IMPORTANCE_OBJECTS = {
    "window", "cabinet", "table", "chair", "mirror", "curtain", "lamp", "shelf",
}

ROOM_OBJECTS = {
    "entrance": {
        "door", "doorway", "entrance", "hallway", "coat_rack", "shoe_rack",
        "doorbell", "security_camera", "welcome_mat", "umbrella_stand",
    },
    "kitchen": {
        "stove", "oven", "refrigerator", "sink", "cabinet", "counter", "microwave",
        "dishwasher", "kitchen_hood", "cooking_utensils", "pots_and_pans",
    },
    "living": {
        "sofa", "couch", "tv", "television", "coffee_table", "bookshelf", "armchair",
        "carpet", "curtains", "paintings", "decorative_plants", "entertainment_center",
    },
    "bathroom": {
        "toilet", "sink", "bath", "shower", "mirror", "towel_rack", "tile",
        "bathroom_cabinet", "toilet_paper_holder", "shower_curtain", "bathtub",
    },
    "bedroom": {
        "bed", "wardrobe", "dresser", "nightstand", "lamp", "pillow", "curtain",
        "closet", "bedside_table", "alarm_clock", "clothes_hangers",
    },
}

ROOM_FEATURES = {
    "entrance": ["входна врата", "антре", "закачалка", "шкаф за обувки", "звънец"],
    "kitchen": ["кухненски плот", "печка", "хладилник", "шкафове", "мивка", "аспиратор"],
    "living": ["диван", "телевизор", "масичка", "библиотека", "осветление", "декорации"],
    "bathroom": ["вана/душ", "тоалетна", "мивка", "плочки", "огледало", "шкаф"],
    "bedroom": ["легло", "гардероб", "нощно шкафче", "прозорец", "осветление", "завеси"],
}

ObjectDetector = Callable[[bytes], List[str]]


@dataclass
class RoomClassification:
    room_type: str
    confidence: float
    features: List[str] = field(default_factory=list)
    detected_objects: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "roomType": self.room_type,
            "confidence": self.confidence,
            "features": list(self.features),
            "detectedObjects": list(self.detected_objects),
        }


class RoomClassifier(Protocol):
    def classify_room(self, image: bytes) -> RoomClassification:
        ...


def no_objects_detector(image: bytes) -> List[str]:
    return []


def object_weight(name: str) -> float:
    if name in HIGH_IMPORTANCE_OBJECTS:
        return 2
    if name in MEDIUM_IMPORTANCE_OBJECTS:
        return 1.5
    return 1


def determine_room_type(detected_objects: List[str]) -> tuple:
    """(tipo de habitación, confianza) a partir de los objetos detectados"""
    if not detected_objects:
        return "unknown", 0.0

    scores = {room: 0.0 for room in ROOM_OBJECTS}
    for name in detected_objects:
        weight = object_weight(name)
        for room, objects in ROOM_OBJECTS.items():
            if name in objects:
                scores[room] += weight

    best_room, best_score = "unknown", 0.0
    for room, score in scores.items():
        if score > best_score:
            best_room, best_score = room, score

    confidence = round(best_score / (len(detected_objects) * 2), 2)
    if confidence < CONFIDENCE_THRESHOLD:
        return "unknown", confidence
    return best_room, confidence


class WeightedObjectRoomClassifier:
    """Clasificador por puntaje ponderado de los objetos detectados"""

    def __init__(self, detector: ObjectDetector = no_objects_detector):
        self.detector = detector

    def classify_room(self, image: bytes) -> RoomClassification:
        detected_objects = self.detector(image)
        room_type, confidence = determine_room_type(detected_objects)
        logger.debug(f"Room classified as {room_type} ({confidence}) from {detected_objects}")
        return RoomClassification(
            room_type=room_type,
            confidence=confidence,
            features=list(ROOM_FEATURES.get(room_type, [])),
            detected_objects=list(detected_objects),
        )
