"""
Utility modules package.
"""

from notesync.utils.live import ChangeSignal, LiveValue, wait_any
from notesync.utils.validators import Validator, validate_email, validate_password

__all__ = [
    "ChangeSignal",
    "LiveValue",
    "wait_any",
    "Validator",
    "validate_email",
    "validate_password",
]
