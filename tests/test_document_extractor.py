from types import SimpleNamespace

import pytest

from imot_backend.services.document_extractor import (
    ExtractedFields,
    address_similarity,
    analyze,
    classify_document,
    compare_with_form,
    consolidate,
    extract,
    levenshtein,
)

NOTARY_ACT = """НОТАРИАЛЕН АКТ
за покупко-продажба на недвижим имот
Апартамент с площ 85 кв.м
Адрес: гр. София, ул. Оборище 5
Сградата е построена през 1998 г. от тухла.
Етаж 3 от 6 етажа.
Собственик: Иван Петров Иванов
"""


def test_notary_act_fields():
    fields = extract(NOTARY_ACT)

    assert fields.square_meters == 85
    assert fields.construction_year == 1998
    assert fields.address == "гр. София, ул. Оборище 5"
    assert fields.construction_type == "тухла"
    assert fields.floor == 3
    assert fields.total_floors == 6
    assert fields.owner == "Иван Петров Иванов"
    assert fields.document_type == "notary_act"


def test_comma_decimal_separator():
    assert extract("Жилищна площ: 85,5 кв.м").square_meters == 85.5
    assert extract("Застроена площ 72.30 м2").square_meters == 72.3


def test_room_count_and_floor_ordinal():
    fields = extract("Продава се 3-стаен апартамент на 4-ти етаж в 8-етажна сграда")
    assert fields.rooms == 3
    assert fields.floor == 4
    assert fields.total_floors == 8


def test_tax_assessment_value_with_grouped_thousands():
    fields = extract("УДОСТОВЕРЕНИЕ ЗА ДАНЪЧНА ОЦЕНКА\nДанъчна оценка: 45 320,50 лв.")
    assert fields.tax_assessment_value == 45320.5
    assert fields.document_type == "tax_assessment"


@pytest.mark.parametrize("text", ["Цена: 120 000 лв.", "Цена: лв. 120 000", "Стойност: 120000"])
def test_price_with_grouped_thousands(text):
    assert extract(text).price == 120000


def test_sketch_cadastral_number():
    fields = extract("СКИЦА НА САМОСТОЯТЕЛЕН ОБЕКТ\nКадастрален идентификатор: 68134.1505.123.4.12")
    assert fields.cadastral_number == "68134.1505.123.4.12"
    assert fields.document_type == "sketch"


def test_missing_fields_stay_unset():
    fields = extract("Текст без полезна информация")
    assert fields == ExtractedFields()
    assert fields.as_dict() == {}


def test_empty_text():
    result = analyze("")
    assert result.fields == ExtractedFields()
    assert result.confidence == 0


def test_implausible_year_is_ignored():
    assert extract("построена през 1234").construction_year is None


@pytest.mark.parametrize("text, expected", [
    ("Нотариален акт № 12", "notary_act"),
    ("Notary act for property", "notary_act"),
    ("Скица на поземлен имот", "sketch"),
    ("Tax assessment certificate", "tax_assessment"),
    ("Договор за наем", None),
])
def test_classify_document(text, expected):
    assert classify_document(text) == expected


def test_confidence_counts_core_fields():
    assert analyze(NOTARY_ACT).confidence == 1.0
    assert analyze("Площ 60 кв.м").confidence == 0.33
    assert analyze("Площ 60 кв.м, построена през 2001").confidence == 0.67


def test_as_dict_keeps_only_found_fields():
    fields = extract(NOTARY_ACT)
    data = fields.as_dict()
    assert "document_type" not in data
    assert "price" not in data
    assert data["square_meters"] == 85
    assert fields.as_dict(include_type=True)["document_type"] == "notary_act"


def test_consolidate_prefers_most_confident_document():
    sketch = ExtractedFields(square_meters=82.0, cadastral_number="68134.1505.123")
    notary = ExtractedFields(square_meters=85.0, address="ул. Оборище 5", construction_year=1998)

    merged = consolidate([(sketch, 0.33), (notary, 1.0), (None, 0.9)])

    assert merged.square_meters == 85.0
    assert merged.cadastral_number == "68134.1505.123"
    assert merged.construction_year == 1998


def test_levenshtein():
    assert levenshtein("kitten", "sitting") == 3
    assert levenshtein("", "abc") == 3


def test_address_similarity_ignores_case_and_punctuation():
    assert address_similarity("ул. Оборище 5", "УЛ ОБОРИЩЕ 5") == 1.0


def test_compare_with_form_reports_discrepancies():
    form = SimpleNamespace(address="ул. Оборище 5", square_meters=100, rooms=3, floor=2)
    extracted = ExtractedFields(address="бул. Витоша 120", square_meters=85, rooms=3, floor=4)

    discrepancies = {item["field"]: item for item in compare_with_form(form, extracted)}

    assert set(discrepancies) == {"address", "square_meters", "floor"}
    assert discrepancies["square_meters"]["percentDifference"] == 15.0


def test_compare_with_form_tolerates_small_area_difference():
    form = SimpleNamespace(address="ул. Оборище 5", square_meters=100)
    extracted = ExtractedFields(address="ул. Оборище 5", square_meters=97)
    assert compare_with_form(form, extracted) == []
