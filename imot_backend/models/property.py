"""
Property model - Represents a property submitted for evaluation
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional
from sqlmodel import SQLModel, Field, JSON, Column


class PropertyType(str, Enum):
    """Kind of property"""
    apartment = "apartment"
    house = "house"
    villa = "villa"
    agricultural = "agricultural"


class Property(SQLModel, table=True):
    """Property table, one row per evaluation session"""

    __tablename__ = "properties"

    id: Optional[int] = Field(default=None, primary_key=True, description="Unique property ID")

    # Location
    address: str = Field(description="Address as entered by the user")
    city: Optional[str] = Field(default=None, max_length=100, description="City used for the base price lookup")
    latitude: Optional[float] = Field(default=None, description="Property latitude coordinate")
    longitude: Optional[float] = Field(default=None, description="Property longitude coordinate")

    # Property details
    square_meters: float = Field(description="Property area in square meters")
    property_type: PropertyType = Field(default=PropertyType.apartment, description="Type of property")
    construction_type: Optional[str] = Field(default=None, max_length=50, description="Construction type, e.g. 'тухла'")
    construction_year: Optional[int] = Field(default=None, description="Year of construction")

    # Neighborhood details
    metro_distance: Optional[int] = Field(default=None, description="Distance to the closest metro station in meters")
    green_zones: Optional[int] = Field(default=None, description="Number of green zones nearby")
    price_range_min: Optional[int] = Field(default=None, description="Expected minimum price in EUR")
    price_range_max: Optional[int] = Field(default=None, description="Expected maximum price in EUR")

    photos: List[str] = Field(
        default=[],
        sa_column=Column(JSON),
        description="References to uploaded photos"
    )

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow, description="Creation timestamp")
