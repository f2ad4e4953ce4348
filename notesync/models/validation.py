"""
Result of a credential check.
"""

from typing import Optional
from pydantic import BaseModel, model_validator


class ValidationResult(BaseModel):
    """
    Outcome of validating a single credential field.

    A failed result always carries an error message and a successful one
    never does.
    """
    successful: bool
    error_message: Optional[str] = None

    class Config:
        frozen = True

    @model_validator(mode="after")
    def _message_matches_outcome(self) -> "ValidationResult":
        if self.successful and self.error_message is not None:
            raise ValueError("successful result must not carry an error message")
        if not self.successful and not self.error_message:
            raise ValueError("failed result requires an error message")
        return self

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(successful=True)

    @classmethod
    def fail(cls, message: str) -> "ValidationResult":
        return cls(successful=False, error_message=message)
