"""
Local note cache and the screen models built on it.
"""

from notesync.notes.cache import LocalNoteCache
from notesync.notes.row_store import NoteRowStore

__all__ = ["LocalNoteCache", "NoteRowStore"]
