"""
Evaluation model - Computed value, confidence and scores of a property
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from sqlmodel import SQLModel, Field, JSON, Column


class EvaluationType(str, Enum):
    """Kind of evaluation"""
    quick = "quick"
    licensed = "licensed"


class EvaluationStatus(str, Enum):
    """Evaluation lifecycle status"""
    pending = "pending"
    completed = "completed"
    failed = "failed"
    verified = "verified"


class Evaluation(SQLModel, table=True):
    """Evaluation table, each evaluation belongs to exactly one property"""

    __tablename__ = "evaluations"

    id: Optional[int] = Field(default=None, primary_key=True, description="Unique evaluation ID")
    property_id: int = Field(foreign_key="properties.id", index=True, description="Evaluated property ID")

    # Result
    estimated_value: int = Field(description="Estimated market value")
    currency: str = Field(default="EUR", max_length=3, description="Currency of the estimated value")
    confidence: int = Field(description="Confidence as a percentage (0-100)")
    evaluation_type: EvaluationType = Field(default=EvaluationType.quick, description="quick or licensed")
    status: EvaluationStatus = Field(default=EvaluationStatus.pending, description="Lifecycle status")

    # Score breakdown (0-10)
    location_score: float = Field(default=0, description="Location score")
    infrastructure_score: float = Field(default=0, description="Infrastructure score")
    market_score: float = Field(default=0, description="Market score")
    building_score: float = Field(default=0, description="Building score")

    # Snapshots
    factors: Dict[str, Any] = Field(default={}, sa_column=Column(JSON), description="Display factors")
    recommendations: List[str] = Field(default=[], sa_column=Column(JSON), description="Recommendations")
    nearby_amenities: List[Dict[str, Any]] = Field(default=[], sa_column=Column(JSON), description="Nearby amenities")
    market_trends: Dict[str, Any] = Field(default={}, sa_column=Column(JSON), description="Market trend snapshot")

    # Verification
    verified_by: Optional[str] = Field(default=None, max_length=255, description="Who verified the evaluation")
    verification_date: Optional[datetime] = Field(default=None, description="When it was verified")

    created_at: datetime = Field(default_factory=datetime.utcnow, description="Creation timestamp")
