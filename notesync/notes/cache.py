"""
Local note cache.

Single source of truth for notes shown by the client. Screens read it
through observe(), which yields the full matching list right away and
again whenever a write commits or the query parameters change. Writes go
through insert/update/delete/replace_all and are linearized by the row
store; a change is signalled only after its commit, so every emission
reflects a state at least as fresh as the last completed write.

Typical usage:
    cache = LocalNoteCache(NoteRowStore(path))
    await cache.connect()
    query = LiveValue(NoteQuery())
    async for notes in cache.observe(query):
        render(notes)
"""

import logging
from typing import AsyncIterator, Iterable, List, Optional, Union

from notesync.models.note import Note, NoteQuery
from notesync.notes.row_store import NoteRowStore
from notesync.utils.live import ChangeSignal, LiveValue, wait_any

logger = logging.getLogger(__name__)


class LocalNoteCache:
    """Reactive note store over a NoteRowStore."""

    def __init__(self, store: NoteRowStore):
        self._store = store
        self._rows_changed = ChangeSignal()

    async def connect(self) -> None:
        await self._store.connect()

    async def close(self) -> None:
        await self._store.close()

    # ============================================================
    # Queries
    # ============================================================

    async def observe(
        self, query: Union[NoteQuery, LiveValue[NoteQuery]]
    ) -> AsyncIterator[List[Note]]:
        """Stream the notes matching query.

        Args:
            query: Fixed parameters, or a LiveValue whose replacement
                re-derives the result set.

        Yields:
            The complete ordered list of matching notes. Changes landing
            between two emissions are folded into the next one.
        """
        live = query if isinstance(query, LiveValue) else LiveValue(query)
        while True:
            # Grab both events before reading so no change slips between
            # the read and the wait.
            rows_changed = self._rows_changed.changed()
            params_changed = live.changed()
            yield await self._store.select_rows(live.value)
            await wait_any(rows_changed, params_changed)

    async def snapshot(self, query: Optional[NoteQuery] = None) -> List[Note]:
        """One-off read of the current matching list."""
        return await self._store.select_rows(query or NoteQuery())

    async def get(self, note_id: int) -> Optional[Note]:
        return await self._store.get_row(note_id)

    # ============================================================
    # Mutations
    # ============================================================

    async def insert(self, note: Note) -> Note:
        """Insert a note and return it with its assigned id.

        Raises:
            StorageFault: If the id is already taken or storage is down.
        """
        stored = await self._store.insert_row(note)
        logger.debug(f"Inserted note {stored.id}")
        self._rows_changed.notify()
        return stored

    async def update(self, note: Note) -> Note:
        """Overwrite an existing note.

        Raises:
            NotFound: If no note has note.id.
        """
        stored = await self._store.update_row(note)
        logger.debug(f"Updated note {stored.id}")
        self._rows_changed.notify()
        return stored

    async def delete(self, note: Note) -> None:
        """Delete a note. Deleting an absent note is a no-op."""
        if await self._store.delete_row(note):
            logger.debug(f"Deleted note {note.id}")
            self._rows_changed.notify()

    async def replace_all(self, notes: Iterable[Note]) -> List[Note]:
        """Replace every cached note at once (used by synchronization)."""
        stored = await self._store.replace_rows(notes)
        logger.info(f"Note cache refilled with {len(stored)} notes")
        self._rows_changed.notify()
        return stored
