"""
User model for guests and property owners.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column
from lightbnb.database import Base


class User(Base):
    """
    A LightBnB account. The same user can be a guest on reservations and the
    owner of properties.
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Display name"
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="Login email - unique across users"
    )

    # Stored exactly as supplied by the caller
    password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Opaque credential string"
    )

    def __repr__(self) -> str:
        """String representation of the user."""
        return f"<User(id={self.id}, email={self.email})>"
