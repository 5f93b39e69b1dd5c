"""
Document models - Scanned property documents and the data extracted from them
"""
from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import SQLModel, Field


class DocumentType(str, Enum):
    """Supported document types"""
    notary_act = "notary_act"
    sketch = "sketch"
    tax_assessment = "tax_assessment"


class DocumentStatus(str, Enum):
    """Upload/processing status"""
    pending = "pending"
    processed = "processed"
    failed = "failed"


class Document(SQLModel, table=True):
    """Document table, each document belongs to exactly one property"""

    __tablename__ = "documents"

    id: Optional[int] = Field(default=None, primary_key=True, description="Unique document ID")
    property_id: int = Field(foreign_key="properties.id", index=True, description="Owning property ID")

    type: DocumentType = Field(description="Document type")
    filename: Optional[str] = Field(default=None, max_length=255, description="Original file name")
    status: DocumentStatus = Field(default=DocumentStatus.pending, description="Processing status")

    # OCR output
    ocr_text: Optional[str] = Field(default=None, description="Raw OCR text")
    confidence: float = Field(default=0.0, description="Extraction confidence in [0, 1]")

    created_at: datetime = Field(default_factory=datetime.utcnow, description="Creation timestamp")


class DocumentDataBase(SQLModel):
    """Structured fields extracted from a document, all optional"""

    square_meters: Optional[float] = Field(default=None, description="Area in square meters")
    construction_year: Optional[int] = Field(default=None, description="Year of construction")
    address: Optional[str] = Field(default=None, description="Address found in the document")
    rooms: Optional[int] = Field(default=None, description="Number of rooms")
    floor: Optional[int] = Field(default=None, description="Floor number")
    total_floors: Optional[int] = Field(default=None, description="Total floors in the building")
    owner: Optional[str] = Field(default=None, description="Owner name")
    cadastral_number: Optional[str] = Field(default=None, max_length=100, description="Cadastral identifier")
    tax_assessment_value: Optional[float] = Field(default=None, description="Tax assessment value in BGN")
    construction_type: Optional[str] = Field(default=None, max_length=50, description="Construction type")
    price: Optional[float] = Field(default=None, description="Price mentioned in the document")


class DocumentData(DocumentDataBase, table=True):
    """Document data table, zero or one row per document"""

    __tablename__ = "document_data"

    id: Optional[int] = Field(default=None, primary_key=True, description="Unique document data ID")
    document_id: int = Field(foreign_key="documents.id", unique=True, index=True, description="Source document ID")

    created_at: datetime = Field(default_factory=datetime.utcnow, description="Creation timestamp")
