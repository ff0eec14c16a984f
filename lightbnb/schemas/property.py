"""
Pydantic schemas for property search filters and new listings.
Values usually arrive as query-string or form text and are coerced here.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from decimal import Decimal


class PropertySearchFilters(BaseModel):
    """
    Optional criteria for property search.

    Prices are in major currency units; the search multiplies them by 100 to
    compare against the stored subunit cost. A filter that is None, empty or
    zero is not applied.
    """

    city: Optional[str] = Field(None, description="Substring of the city name")
    owner_id: Optional[int] = Field(None, description="Only properties owned by this user")
    minimum_price_per_night: Optional[Decimal] = Field(None, description="Lowest nightly price")
    maximum_price_per_night: Optional[Decimal] = Field(None, description="Highest nightly price")
    minimum_rating: Optional[Decimal] = Field(None, description="Lowest average review rating")

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        """Search forms submit untouched fields as empty strings."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


class PropertyCreate(BaseModel):
    """
    A complete new listing. Every field is required; the room counts and the
    owner reference accept numeric text and are stored as integers.
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)

    owner_id: int
    title: str
    description: str
    thumbnail_photo_url: str
    cover_photo_url: str
    cost_per_night: int = Field(..., description="Nightly price in currency subunits")
    street: str
    city: str
    province: str
    post_code: str
    country: str
    parking_spaces: int
    number_of_bathrooms: int
    number_of_bedrooms: int
