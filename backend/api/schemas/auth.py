"""
Authentication request schemas.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator

from core.security import validate_password_strength


class SignInRequest(BaseModel):
    """Sign-in request schema."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class SignUpRequest(BaseModel):
    """Registration request schema."""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=100)
    full_name: str = Field(..., min_length=1, max_length=255)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        """Reject passwords that fail the strength checks."""
        strength = validate_password_strength(v)
        if not strength.is_valid:
            raise ValueError(" ".join(strength.feedback))
        return v


class PasswordResetRequest(BaseModel):
    email: EmailStr


class PasswordStrengthRequest(BaseModel):
    password: str
