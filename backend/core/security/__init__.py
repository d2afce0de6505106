"""
Security utilities.
"""

from .password import PasswordStrength, validate_password_strength

__all__ = [
    "PasswordStrength",
    "validate_password_strength",
]
