"""
Pydantic models package.
Each module contains models for a specific domain.
"""

from notesync.models.note import Note, NoteColor, NoteQuery, RemoteNote, SortOrder
from notesync.models.user import TokenResponse, UserLogin, UserResponse
from notesync.models.validation import ValidationResult
from notesync.models.resource import Error, Loading, Resource, Success
from notesync.models.sign_in import (
    EmailChanged,
    NavigateToNoteList,
    NavigateToRegister,
    PasswordChanged,
    RegisterRequested,
    ShowProgress,
    ShowSnackbar,
    SignInEvent,
    SubmitRequested,
    UiEffect,
)

__all__ = [
    "Note", "NoteColor", "NoteQuery", "RemoteNote", "SortOrder",
    "TokenResponse", "UserLogin", "UserResponse",
    "ValidationResult",
    "Error", "Loading", "Resource", "Success",
    "EmailChanged", "PasswordChanged", "RegisterRequested", "SubmitRequested",
    "SignInEvent",
    "ShowSnackbar", "ShowProgress", "NavigateToNoteList", "NavigateToRegister",
    "UiEffect",
]
