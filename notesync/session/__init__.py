"""
Sign-in session: orchestrator, effect channel and keyed storage.
"""

from notesync.session.channel import ChannelClosed, EffectChannel
from notesync.session.orchestrator import SignInOrchestrator, SignInState
from notesync.session.storage import (
    InMemoryStateStore,
    JsonStateStore,
    StateStore,
    UserSessionStorage,
)

__all__ = [
    "ChannelClosed",
    "EffectChannel",
    "SignInOrchestrator",
    "SignInState",
    "InMemoryStateStore",
    "JsonStateStore",
    "StateStore",
    "UserSessionStorage",
]
