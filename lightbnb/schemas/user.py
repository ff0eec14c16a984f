"""
Pydantic schemas for user records.
"""

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    """Input for creating a user. The password is stored as given."""

    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Login email")
    password: str = Field(..., description="Opaque credential string")
