"""
Note list screen model.

Owns the live search/sort parameters of the note list and exposes the
cache stream derived from them. The chosen sort order is kept in the
state store so it survives restarts.
"""

import logging
from typing import AsyncIterator, List

from notesync.models.note import Note, NoteQuery, SortOrder
from notesync.notes.cache import LocalNoteCache
from notesync.session.storage import StateStore
from notesync.utils.live import LiveValue

logger = logging.getLogger(__name__)

SORT_ORDER_KEY = "sort_order"


class NoteListModel:
    def __init__(self, cache: LocalNoteCache, state: StateStore):
        self._cache = cache
        self._state = state
        saved = state.get(SORT_ORDER_KEY, SortOrder.DESCENDING.value)
        try:
            sort_order = SortOrder(saved)
        except ValueError:
            logger.warning(f"Ignoring unknown saved sort order: {saved!r}")
            sort_order = SortOrder.DESCENDING
        self._query = LiveValue(NoteQuery(sort_order=sort_order))

    @property
    def query(self) -> NoteQuery:
        return self._query.value

    def notes(self) -> AsyncIterator[List[Note]]:
        """Stream of the visible note list."""
        return self._cache.observe(self._query)

    def search(self, text: str) -> None:
        self._query.value = self._query.value.model_copy(update={"search_text": text})

    def set_sort_order(self, sort_order: SortOrder) -> None:
        self._query.value = self._query.value.model_copy(update={"sort_order": sort_order})
        self._state.set(SORT_ORDER_KEY, sort_order.value)

    async def delete_note(self, note: Note) -> None:
        await self._cache.delete(note)
