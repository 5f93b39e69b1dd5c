"""
Extracción de campos estructurados desde el texto OCR de documentos de propiedad

Cada campo tiene una lista ordenada de reglas (campo, patrón, parser). Para cada
campo gana la primera regla que encuentra un valor; sin coincidencia el campo
queda en None. Vocabulario y formatos numéricos en búlgaro (coma decimal).
"""
from dataclasses import dataclass, fields
import re
from typing import Any, Callable, Dict, Iterable, List, Optional, Pattern, Tuple


CORE_FIELDS = ("square_meters", "construction_year", "address")

DOCUMENT_TYPE_KEYWORDS = [
    ("нотариален акт", "notary_act"),
    ("notary act", "notary_act"),
    ("скица", "sketch"),
    ("sketch", "sketch"),
    ("данъчна оценка", "tax_assessment"),
    ("tax assessment", "tax_assessment"),
]

CONSTRUCTION_TYPE_PREFIXES = [
    ("тухл", "тухла"),
    ("стоманобетон", "стоманобетон"),
    ("панел", "панел"),
    ("епк", "епк"),
    ("гредоред", "гредоред"),
]

ADDRESS_SIMILARITY_THRESHOLD = 0.8
AREA_DIFFERENCE_THRESHOLD = 5.0


@dataclass
class ExtractedFields:
    address: Optional[str] = None
    square_meters: Optional[float] = None
    rooms: Optional[int] = None
    floor: Optional[int] = None
    total_floors: Optional[int] = None
    construction_year: Optional[int] = None
    price: Optional[float] = None
    tax_assessment_value: Optional[float] = None
    cadastral_number: Optional[str] = None
    construction_type: Optional[str] = None
    owner: Optional[str] = None
    document_type: Optional[str] = None

    def as_dict(self, include_type: bool = False) -> Dict[str, Any]:
        """Solo los campos encontrados"""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None and (include_type or f.name != "document_type")
        }


@dataclass
class ExtractionResult:
    fields: ExtractedFields
    confidence: float

    @property
    def document_type(self) -> Optional[str]:
        return self.fields.document_type


@dataclass(frozen=True)
class ExtractionRule:
    field: str
    pattern: Pattern
    parser: Callable[[str], Any]


def parse_decimal(raw: str) -> Optional[float]:
    """'85,5' -> 85.5; '12 500' -> 12500.0"""
    cleaned = raw.replace(" ", "").replace("\u00a0", "").replace(",", ".")
    try:
        return float(cleaned)
    except ValueError:
        return None


def parse_int(raw: str) -> Optional[int]:
    try:
        return int(raw)
    except ValueError:
        return None


def parse_year(raw: str) -> Optional[int]:
    year = parse_int(raw)
    if year is None or not 1800 < year <= 2100:
        return None
    return year


def parse_text(raw: str) -> Optional[str]:
    text = raw.strip().rstrip(" ,;")
    return text or None


def parse_cadastral(raw: str) -> Optional[str]:
    return raw.strip().rstrip(".") or None


def parse_construction_type(raw: str) -> Optional[str]:
    lower = raw.lower()
    for prefix, canonical in CONSTRUCTION_TYPE_PREFIXES:
        if lower.startswith(prefix):
            return canonical
    return None


def _rule(field_name: str, pattern: str, parser: Callable[[str], Any]) -> ExtractionRule:
    return ExtractionRule(field_name, re.compile(pattern, re.IGNORECASE), parser)


NUMBER = r"\d+(?:[.,]\d+)?"
# Thousands grouped with spaces, e.g. "120 000,50"
GROUPED_NUMBER = r"\d+(?:[ \u00a0]\d{3})*(?:[.,]\d+)?"

EXTRACTION_RULES: List[ExtractionRule] = [
    _rule(
        "address",
        r"(?:адрес|находящ[аио]?\s+се|разположен[аио]?|address)[:\s]+([^\n]+)",
        parse_text,
    ),
    _rule(
        "square_meters",
        rf"({NUMBER})\s*(?:кв\.\s?м(?:етра)?|квадратни\s+метра|м2|m2|м²|sq\.?\s?m)",
        parse_decimal,
    ),
    _rule("rooms", r"(\d+)[ \t]*-?[ \t]*(?:стаен|стайно|стаи|стая)", parse_int),
    _rule("floor", r"(?:на\s+)?(\d+)[ \t]*(?:-?[ \t]*(?:ви|ри|ти|ми|и))?[ \t]*(?:етаж(?![а-яё])|ет\.)", parse_int),
    _rule("floor", r"етаж[:\s]+(\d+)", parse_int),
    _rule("total_floors", r"(\d+)[ \t]*-?[ \t]*етажна", parse_int),
    _rule("total_floors", r"от\s+(\d+)\s+етажа", parse_int),
    _rule("construction_year", r"построен[аоия]?\s+(?:през\s+|в\s+)?(\d{4})", parse_year),
    _rule("construction_year", r"строителство\s+(?:от\s+|през\s+)?(\d{4})", parse_year),
    _rule("construction_year", r"година\s+на\s+(?:строителство|построяване)[:\s]+(\d{4})", parse_year),
    _rule("price", rf"(?:цена|стойност)[:\s]+(?:лв\.?|BGN|EUR|€)?\s*({GROUPED_NUMBER})", parse_decimal),
    _rule(
        "tax_assessment_value",
        r"данъчна\s+оценка[:\s]*(?:лв\.?|BGN)?\s*(" + GROUPED_NUMBER + ")",
        parse_decimal,
    ),
    _rule(
        "cadastral_number",
        r"(?:кадастрален\s+(?:номер|идентификатор)|идентификатор)[:\s]+(\d+(?:\.\d+)+)",
        parse_cadastral,
    ),
    _rule("construction_type", r"(тухл\w*|стоманобетон\w*|панел\w*|епк|гредоред\w*)", parse_construction_type),
    _rule("owner", r"(?:собственик|собственост\s+на)[:\s]+([^\n,]+)", parse_text),
]


def classify_document(text: str) -> Optional[str]:
    """Tipo de documento por palabras clave, en orden de prioridad"""
    lower_text = text.lower()
    for keyword, document_type in DOCUMENT_TYPE_KEYWORDS:
        if keyword in lower_text:
            return document_type
    return None


def extract(raw_text: str, rules: Iterable[ExtractionRule] = EXTRACTION_RULES) -> ExtractedFields:
    """Extraer campos del texto OCR, sin valores por defecto"""
    result = ExtractedFields()
    if not raw_text:
        return result

    for rule in rules:
        if getattr(result, rule.field) is not None:
            continue
        match = rule.pattern.search(raw_text)
        if not match:
            continue
        value = rule.parser(match.group(1))
        if value is not None:
            setattr(result, rule.field, value)

    result.document_type = classify_document(raw_text)
    return result


def analyze(raw_text: str) -> ExtractionResult:
    """Extracción más confianza en [0, 1] según los campos principales encontrados"""
    extracted = extract(raw_text)
    found = sum(1 for name in CORE_FIELDS if getattr(extracted, name) is not None)
    return ExtractionResult(fields=extracted, confidence=round(found / len(CORE_FIELDS), 2))


def consolidate(documents: Iterable[Tuple[Any, float]]) -> ExtractedFields:
    """
    Combinar los datos de varios documentos
    documents: pares (datos, confianza); por campo gana el documento más confiable
    """
    consolidated = ExtractedFields()
    confidence_by_field: Dict[str, float] = {}
    for data, confidence in documents:
        if data is None:
            continue
        for f in fields(ExtractedFields):
            value = getattr(data, f.name, None)
            if value is None or value == "":
                continue
            if f.name not in confidence_by_field or confidence > confidence_by_field[f.name]:
                setattr(consolidated, f.name, value)
                confidence_by_field[f.name] = confidence
    return consolidated


def _normalize_address(address: str) -> str:
    cleaned = re.sub(r"[^\w\s]", "", address.lower())
    return " ".join(cleaned.split())


def levenshtein(a: str, b: str) -> int:
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def address_similarity(address1: str, address2: str) -> float:
    """Similitud 0-1 entre dos direcciones normalizadas"""
    a, b = _normalize_address(address1), _normalize_address(address2)
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1 - levenshtein(a, b) / longest


def compare_with_form(form: Any, extracted: Any) -> List[Dict[str, Any]]:
    """Diferencias entre los datos del formulario y los del documento"""
    discrepancies = []

    form_address = getattr(form, "address", None)
    doc_address = getattr(extracted, "address", None)
    if form_address and doc_address:
        similarity = address_similarity(form_address, doc_address)
        if similarity < ADDRESS_SIMILARITY_THRESHOLD:
            discrepancies.append({
                "field": "address", "form": form_address, "document": doc_address,
                "similarity": round(similarity, 2),
            })

    form_area = getattr(form, "square_meters", None)
    doc_area = getattr(extracted, "square_meters", None)
    if form_area and doc_area:
        percent_diff = abs(form_area - doc_area) / form_area * 100
        if percent_diff > AREA_DIFFERENCE_THRESHOLD:
            discrepancies.append({
                "field": "square_meters", "form": form_area, "document": doc_area,
                "percentDifference": round(percent_diff, 1),
            })

    for name in ("rooms", "floor"):
        form_value = getattr(form, name, None)
        doc_value = getattr(extracted, name, None)
        if form_value and doc_value and form_value != doc_value:
            discrepancies.append({"field": name, "form": form_value, "document": doc_value})

    return discrepancies
