"""
Repository layer for data access operations.
Each accessor runs one parameterized statement against an injected session.
"""

from lightbnb.repositories.base import BaseRepository
from lightbnb.repositories.user import UserRepository
from lightbnb.repositories.reservation import ReservationRepository
from lightbnb.repositories.property import PropertyRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "ReservationRepository",
    "PropertyRepository",
]
