"""
Local note cache lifecycle.

Provides connect/disconnect and a get_note_cache() accessor for the one
cache the process works with, backed by a single SQLite file.

Typical usage:
    from notesync.database import get_note_cache
    cache = get_note_cache()
    await cache.insert(Note(title="groceries"))
"""

import logging
from typing import Optional

from notesync.config import get_settings
from notesync.notes.cache import LocalNoteCache
from notesync.notes.row_store import NoteRowStore

logger = logging.getLogger(__name__)

# ============================================================
# Global cache instance
# ============================================================
_cache: Optional[LocalNoteCache] = None


async def connect_cache(db_path: Optional[str] = None) -> LocalNoteCache:
    """Open the note cache.

    Called once at startup. Creates the database file if it doesn't exist.

    Args:
        db_path: SQLite file to use; defaults to the configured cache path.
    """
    global _cache

    if _cache is not None:
        return _cache

    path = db_path or str(get_settings().cache_db_path)
    logger.info(f"Opening note cache: {path}")

    cache = LocalNoteCache(NoteRowStore(path))
    await cache.connect()
    _cache = cache
    return cache


async def close_cache() -> None:
    """Close the note cache. Called during shutdown."""
    global _cache
    if _cache:
        await _cache.close()
        _cache = None
        logger.info("Note cache closed")


def get_note_cache() -> LocalNoteCache:
    """Get the note cache.

    Raises:
        RuntimeError: If connect_cache() hasn't been called yet.
    """
    if _cache is None:
        raise RuntimeError("Note cache not initialized. Call connect_cache() first.")
    return _cache
