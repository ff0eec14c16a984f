"""
Property model for vacation-rental listings.
Prices are stored as integer subunits (cents) in cost_per_night.
"""

from sqlalchemy import String, Text, Integer, Boolean, Index, ForeignKey, text
from sqlalchemy.orm import Mapped, mapped_column
from lightbnb.database import Base
from typing import Optional


class Property(Base):
    """
    A listing owned by a user, with address, photos, nightly price and room
    counts.
    """

    __tablename__ = "properties"

    owner_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="ID of the user who owns this property"
    )

    # Listing content
    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Listing title"
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Listing description"
    )

    thumbnail_photo_url: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Small photo shown in search results"
    )

    cover_photo_url: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Large photo shown on the listing page"
    )

    # Pricing and specifications
    cost_per_night: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        server_default=text("0"),
        index=True,
        comment="Nightly price in currency subunits"
    )

    parking_spaces: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    number_of_bathrooms: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    number_of_bedrooms: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))

    # Address
    country: Mapped[str] = mapped_column(String(255), nullable=False)
    street: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(255), nullable=False)
    province: Mapped[str] = mapped_column(String(255), nullable=False)
    post_code: Mapped[str] = mapped_column(String(255), nullable=False)

    active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        server_default=text("true"),
        comment="Whether the listing is shown to guests"
    )

    def __repr__(self) -> str:
        """String representation of the property."""
        return f"<Property(id={self.id}, title={self.title[:30]}, cost_per_night={self.cost_per_night})>"


# Supports the city filter combined with price ordering in property search
city_cost_index = Index(
    "idx_properties_city_cost",
    Property.city,
    Property.cost_per_night
)
