"""
Reservation model linking a guest to a property for a date range.
"""

from sqlalchemy import Date, Integer, Index, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from lightbnb.database import Base
from datetime import date


class Reservation(Base):
    """A guest's stay at a property from start_date to end_date."""

    __tablename__ = "reservations"

    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)

    property_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    guest_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False
    )

    def __repr__(self) -> str:
        """String representation of the reservation."""
        return f"<Reservation(id={self.id}, property_id={self.property_id}, {self.start_date} to {self.end_date})>"


# Past-reservation lookups filter by guest and end date
guest_end_date_index = Index(
    "idx_reservations_guest_end_date",
    Reservation.guest_id,
    Reservation.end_date
)
