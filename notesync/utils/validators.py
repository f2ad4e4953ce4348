"""
Input validation utilities.

Default credential policy for the sign-in screen. The orchestrator takes
any callable with the Validator signature, so the policy can be swapped.
"""

import re
from typing import Callable

from notesync.models.validation import ValidationResult

Validator = Callable[[str], ValidationResult]

EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')
MIN_PASSWORD_LENGTH = 8


def validate_email(email: str) -> ValidationResult:
    """
    Validate email format.

    Args:
        email: Email address to validate

    Returns:
        ValidationResult with the first rule that failed, if any
    """
    if not email:
        return ValidationResult.fail("Email is required")

    if not EMAIL_PATTERN.match(email):
        return ValidationResult.fail("Invalid email format")

    return ValidationResult.ok()


def validate_password(password: str) -> ValidationResult:
    """
    Validate password strength.

    Requirements:
    - At least 8 characters
    - Contains at least one letter
    - Contains at least one number

    Args:
        password: Password to validate

    Returns:
        ValidationResult with the first rule that failed, if any
    """
    if not password:
        return ValidationResult.fail("Password is required")

    if len(password) < MIN_PASSWORD_LENGTH:
        return ValidationResult.fail(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )

    if not re.search(r'[a-zA-Z]', password):
        return ValidationResult.fail("Password must contain at least one letter")

    if not re.search(r'\d', password):
        return ValidationResult.fail("Password must contain at least one number")

    return ValidationResult.ok()
