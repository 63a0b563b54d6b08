from typing import Optional

from pydantic import Field, field_validator

from .base import ApiModel


def normalize_email(value: str) -> str:
    value = (value or "").strip().lower()
    if "@" not in value:
        raise ValueError("Invalid email address")
    return value


class SignupRequest(ApiModel):
    name: str = Field(..., min_length=1)
    email: str
    password: str = Field(..., min_length=6)
    user_type: Optional[str] = None
    company_name: Optional[str] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return normalize_email(v)


class LoginRequest(ApiModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.strip().lower()


class ResetPasswordRequest(ApiModel):
    email: str

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return normalize_email(v)


class StaffCreate(ApiModel):
    """A staff member an agency admin adds to its team."""
    name: str = Field(..., min_length=1)
    email: str
    role: str
    password: Optional[str] = Field(None, min_length=6)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("role")
    @classmethod
    def upper_role(cls, v: str) -> str:
        return v.strip().upper().replace(" ", "_")


class PasswordResetConfirm(ApiModel):
    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=6)
