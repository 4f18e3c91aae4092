"""
Pydantic models for user registration and profiles.

Passwords are accepted on input only and never returned, and are kept
exactly as sent.  ``password_confirmation`` is checked by
``core.validation`` and not kept on the models.  Emails are stored in
lower case so that uniqueness does not depend on letter case.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .car import CarProfileRead


def _strip(v: Optional[str]) -> Optional[str]:
    return v.strip() if isinstance(v, str) else v


class RegisterRequest(BaseModel):
    """Schema for registering a user."""

    email: str = Field(..., examples=["user@example.com"])
    password: str = Field(..., examples=["strongpassword"])
    first_name: str = Field(..., examples=["Иван"])
    last_name: Optional[str] = Field(None, examples=["Иванов"])
    phone: Optional[str] = Field(None, examples=["+79991234567"])

    @field_validator("first_name", "last_name", "phone", mode="before")
    @classmethod
    def strip_text(cls, v):
        return _strip(v)

    @field_validator("email", mode="before")
    @classmethod
    def normalise_email(cls, v):
        v = _strip(v)
        return v.lower() if isinstance(v, str) else v


class ProfileUpdateRequest(RegisterRequest):
    """Schema for a partial profile update.

    Fields left out of the request keep their stored values.
    """

    email: Optional[str] = None
    password: Optional[str] = None
    first_name: Optional[str] = None


class ProfileEditRead(BaseModel):
    """Editable profile fields, used to prefill the edit form."""

    email: str
    first_name: str
    last_name: Optional[str] = None
    phone: Optional[str] = None


class ProfileRead(ProfileEditRead):
    """Read‑only profile view with the user's cars."""

    id: int
    created_at: Optional[str] = None
    cars: List[CarProfileRead] = []
