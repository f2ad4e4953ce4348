"""
Sign-in screen event definitions.

SignInEvent values flow from the screen into the orchestrator; UiEffect
values flow back out through the effect channel and are delivered once.
"""

from dataclasses import dataclass
from typing import Union


# ============================================================
# Intake events (screen -> orchestrator)
# ============================================================

@dataclass(frozen=True)
class EmailChanged:
    email: str


@dataclass(frozen=True)
class PasswordChanged:
    password: str


@dataclass(frozen=True)
class RegisterRequested:
    pass


@dataclass(frozen=True)
class SubmitRequested:
    pass


SignInEvent = Union[EmailChanged, PasswordChanged, RegisterRequested, SubmitRequested]


# ============================================================
# Effects (orchestrator -> screen)
# ============================================================

@dataclass(frozen=True)
class ShowSnackbar:
    message: str


@dataclass(frozen=True)
class ShowProgress:
    is_loading: bool


@dataclass(frozen=True)
class NavigateToNoteList:
    pass


@dataclass(frozen=True)
class NavigateToRegister:
    pass


UiEffect = Union[ShowSnackbar, ShowProgress, NavigateToNoteList, NavigateToRegister]
