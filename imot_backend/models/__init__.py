"""
Database models for the Imot property valuation project
"""

from .property import Property, PropertyType
from .document import Document, DocumentData, DocumentDataBase, DocumentStatus, DocumentType
from .evaluation import Evaluation, EvaluationStatus, EvaluationType

__all__ = [
    "Property", "PropertyType",
    "Document", "DocumentData", "DocumentDataBase", "DocumentStatus", "DocumentType",
    "Evaluation", "EvaluationStatus", "EvaluationType",
]
