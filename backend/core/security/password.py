"""
Password strength checks used by sign-up and password reset forms.
"""

import re
from dataclasses import dataclass, field

MIN_LENGTH = 8
MIN_SCORE = 4

_SPECIAL_CHARACTERS = re.compile(r'[!@#$%^&*(),.?":{}|<>]')


@dataclass
class PasswordStrength:
    """Result of a password strength check."""

    is_valid: bool
    score: int
    feedback: list[str] = field(default_factory=list)


def validate_password_strength(password: str) -> PasswordStrength:
    """
    Score a password against five checks.

    One point each for: minimum length, an uppercase letter, a lowercase
    letter, a digit, and a special character. A password is valid with a
    score of at least 4. Every failed check adds one feedback message.

    Args:
        password: Candidate password

    Returns:
        PasswordStrength with score and feedback
    """
    checks = [
        (len(password) >= MIN_LENGTH, f"Password must be at least {MIN_LENGTH} characters long"),
        (re.search(r"[A-Z]", password) is not None, "Include at least one uppercase letter"),
        (re.search(r"[a-z]", password) is not None, "Include at least one lowercase letter"),
        (re.search(r"\d", password) is not None, "Include at least one number"),
        (_SPECIAL_CHARACTERS.search(password) is not None, "Include at least one special character"),
    ]

    score = sum(1 for passed, _ in checks if passed)
    feedback = [message for passed, message in checks if not passed]

    return PasswordStrength(is_valid=score >= MIN_SCORE, score=score, feedback=feedback)
