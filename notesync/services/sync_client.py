"""
Remote notes synchronization client.
Pulls the signed-in user's notes and refills the local cache with them.
"""

import logging
from typing import List, Optional
import httpx
from pydantic import TypeAdapter

from notesync.exceptions import StorageFault, SynchronizationFault
from notesync.models.note import RemoteNote
from notesync.notes.cache import LocalNoteCache
from notesync.session.storage import UserSessionStorage

logger = logging.getLogger(__name__)

_REMOTE_NOTES = TypeAdapter(List[RemoteNote])


class NoteSyncClient:
    """Client for the service's /api/notes endpoint."""

    def __init__(
        self,
        base_url: str,
        cache: LocalNoteCache,
        session_storage: UserSessionStorage,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._cache = cache
        self._session_storage = session_storage
        self._timeout = timeout
        self._transport = transport

    def _get_headers(self) -> dict:
        """Build request headers with the stored bearer token."""
        headers = {"Content-Type": "application/json"}
        token = self._session_storage.get_user_session_id()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def fetch_notes(self) -> List[RemoteNote]:
        """
        Fetch every note the service holds for the current user.

        Raises:
            SynchronizationFault: On HTTP, transport or payload errors.
        """
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.get("/api/notes", headers=self._get_headers())
                response.raise_for_status()
                return _REMOTE_NOTES.validate_python(response.json())
        except httpx.HTTPStatusError as e:
            raise SynchronizationFault(
                f"Notes request rejected ({e.response.status_code})"
            ) from e
        except httpx.HTTPError as e:
            raise SynchronizationFault(f"Notes request failed: {e}") from e
        except ValueError as e:
            raise SynchronizationFault(f"Malformed notes payload: {e}") from e

    async def synchronize(self) -> None:
        """
        Replace the local cache with the remote notes.

        Raises:
            SynchronizationFault: If fetching or storing fails. The cache is
                left untouched in that case.
        """
        remote_notes = await self.fetch_notes()
        try:
            await self._cache.replace_all(note.to_note() for note in remote_notes)
        except StorageFault as e:
            raise SynchronizationFault(f"Could not store synchronized notes: {e}") from e
        logger.info(f"Synchronized {len(remote_notes)} notes")
