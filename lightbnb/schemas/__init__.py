"""
Pydantic schemas for accessor input validation.
"""

from lightbnb.schemas.user import UserCreate
from lightbnb.schemas.property import PropertySearchFilters, PropertyCreate

__all__ = [
    "UserCreate",
    "PropertySearchFilters",
    "PropertyCreate",
]
