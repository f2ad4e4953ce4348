"""
Outcome notices streamed by long-running remote calls.

A remote call yields at most one Loading notice followed by exactly one
terminal outcome, Success or Error.
"""

from dataclasses import dataclass
from typing import Any, Optional, Union


@dataclass(frozen=True)
class Loading:
    """The call is in progress."""


@dataclass(frozen=True)
class Success:
    """The call completed; data carries its payload."""
    data: Any = None


@dataclass(frozen=True)
class Error:
    """The call failed. message is None when the service supplied none."""
    message: Optional[str] = None


Resource = Union[Loading, Success, Error]
