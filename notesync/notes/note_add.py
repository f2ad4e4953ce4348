"""
Note add screen model.
"""

import logging

from notesync.models.note import Note, NoteColor, now_millis
from notesync.notes.cache import LocalNoteCache

logger = logging.getLogger(__name__)


class NoteAddModel:
    def __init__(self, cache: LocalNoteCache):
        self._cache = cache

    async def add_note(
        self,
        title: str,
        content: str = "",
        color: NoteColor = NoteColor.DEFAULT,
    ) -> Note:
        """Stamp a new note with the current time and store it.

        Raises:
            StorageFault: If the cache rejects the insert.
        """
        note = Note(title=title, content=content, timestamp=now_millis(), color=color)
        stored = await self._cache.insert(note)
        logger.info(f"Added note {stored.id}: {stored.title!r}")
        return stored
