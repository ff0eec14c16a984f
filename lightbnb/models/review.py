"""
Property review model. Ratings are averaged per property at query time.
"""

from sqlalchemy import Text, Integer, SmallInteger, ForeignKey, text
from sqlalchemy.orm import Mapped, mapped_column
from lightbnb.database import Base
from typing import Optional


class PropertyReview(Base):
    """A guest's rating of a property, tied to the reservation it followed."""

    __tablename__ = "property_reviews"

    guest_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False
    )

    property_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    reservation_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("reservations.id", ondelete="CASCADE"),
        nullable=False
    )

    rating: Mapped[int] = mapped_column(
        SmallInteger,
        nullable=False,
        server_default=text("0"),
        comment="Star rating"
    )

    message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        """String representation of the review."""
        return f"<PropertyReview(id={self.id}, property_id={self.property_id}, rating={self.rating})>"
