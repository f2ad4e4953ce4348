"""
Clients for the remote notes service.
"""

from notesync.services.auth_client import AuthClient
from notesync.services.sync_client import NoteSyncClient

__all__ = ["AuthClient", "NoteSyncClient"]
