"""
SQLite row store behind the local note cache.

Architecture:
  - One aiosqlite connection per store, WAL journal
  - notes table with:
    - seq INTEGER PRIMARY KEY AUTOINCREMENT (insertion order, tie-breaker)
    - id INTEGER UNIQUE (the note identifier)
    - title / content / timestamp / color columns
  - note_id_mark table holding the highest id ever assigned, so ids freed
    by deletes are never handed out again
  - Every statement runs under one asyncio.Lock, so writes are linearized
    and a read never sees a state older than the last committed write

Usage:
    store = NoteRowStore("notes.db")
    await store.connect()
    note = await store.insert_row(Note(title="hello"))
    rows = await store.select_rows(NoteQuery(search_text="he"))
"""

import asyncio
import logging
import aiosqlite
from pathlib import Path
from typing import Iterable, List, Optional

from notesync.exceptions import NotFound, StorageFault
from notesync.models.note import Note, NoteColor, NoteQuery, SortOrder

logger = logging.getLogger(__name__)

_COLUMNS = "id, title, content, timestamp, color"

_CREATE_TABLE = """
    CREATE TABLE IF NOT EXISTS notes (
        seq INTEGER PRIMARY KEY AUTOINCREMENT,
        id INTEGER NOT NULL UNIQUE,
        title TEXT NOT NULL,
        content TEXT NOT NULL,
        timestamp INTEGER NOT NULL,
        color TEXT NOT NULL
    )
"""

# Highest id ever handed out; deletes never lower it, so ids are not reused
_CREATE_ID_MARK = """
    CREATE TABLE IF NOT EXISTS note_id_mark (
        singleton INTEGER PRIMARY KEY CHECK (singleton = 1),
        high INTEGER NOT NULL
    )
"""


def _row_to_note(row) -> Note:
    """Build a Note from a (id, title, content, timestamp, color) row."""
    return Note(
        id=row[0],
        title=row[1],
        content=row[2],
        timestamp=row[3],
        color=NoteColor(row[4]),
    )


def _build_select(query: NoteQuery) -> str:
    """Translate a NoteQuery to SQL.

    instr() is used instead of LIKE because LIKE folds ASCII case.
    Ties on timestamp keep insertion order in both directions.
    """
    direction = "DESC" if query.sort_order == SortOrder.DESCENDING else "ASC"
    return (
        f"SELECT {_COLUMNS} FROM notes "
        f"WHERE ? = '' OR instr(title, ?) > 0 "
        f"ORDER BY timestamp {direction}, seq ASC"
    )


class NoteRowStore:
    """Async SQLite table of note rows.

    Raises StorageFault when the connection is missing or a statement
    fails, NotFound when an update targets a missing id.
    """

    def __init__(self, db_path: str):
        self._db_path = db_path
        self._conn: Optional[aiosqlite.Connection] = None
        self._lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        return self._conn is not None

    async def connect(self) -> None:
        """Open the SQLite connection and create the notes table."""
        if self._db_path != ":memory:":
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = await aiosqlite.connect(self._db_path, timeout=30.0)
        # WAL keeps readers from blocking the writer
        await self._conn.execute("PRAGMA journal_mode=WAL")
        await self._conn.execute("PRAGMA busy_timeout=5000")
        await self._conn.execute(_CREATE_TABLE)
        await self._conn.execute(_CREATE_ID_MARK)
        await self._conn.commit()
        logger.info(f"Note store connected: {self._db_path}")

    async def close(self) -> None:
        """Close the SQLite connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None
            logger.info("Note store closed")

    def _get_conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise StorageFault("Note storage is not available")
        return self._conn

    # ============================================================
    # Reads
    # ============================================================

    async def select_rows(self, query: NoteQuery) -> List[Note]:
        """Return the notes matching query, ordered per its sort order."""
        async with self._lock:
            conn = self._get_conn()
            try:
                async with conn.execute(
                    _build_select(query), (query.search_text, query.search_text)
                ) as cursor:
                    return [_row_to_note(row) async for row in cursor]
            except aiosqlite.Error as e:
                raise StorageFault(f"Failed to read notes: {e}") from e

    async def get_row(self, note_id: int) -> Optional[Note]:
        async with self._lock:
            conn = self._get_conn()
            try:
                async with conn.execute(
                    f"SELECT {_COLUMNS} FROM notes WHERE id = ?", (note_id,)
                ) as cursor:
                    row = await cursor.fetchone()
            except aiosqlite.Error as e:
                raise StorageFault(f"Failed to read note {note_id}: {e}") from e
        return _row_to_note(row) if row else None

    # ============================================================
    # Writes
    # ============================================================

    async def _next_id(self, conn: aiosqlite.Connection) -> int:
        async with conn.execute(
            "SELECT MAX(COALESCE((SELECT high FROM note_id_mark), 0), "
            "COALESCE((SELECT MAX(id) FROM notes), 0)) + 1"
        ) as cursor:
            row = await cursor.fetchone()
        return row[0]

    async def _raise_id_mark(self, conn: aiosqlite.Connection, note_id: int) -> None:
        await conn.execute(
            "INSERT INTO note_id_mark (singleton, high) VALUES (1, ?) "
            "ON CONFLICT(singleton) DO UPDATE SET high = MAX(high, excluded.high)",
            (note_id,),
        )

    async def _insert(self, conn: aiosqlite.Connection, note: Note) -> Note:
        note_id = note.id if note.id is not None else await self._next_id(conn)
        await conn.execute(
            f"INSERT INTO notes ({_COLUMNS}) VALUES (?, ?, ?, ?, ?)",
            (note_id, note.title, note.content, note.timestamp, note.color.value),
        )
        await self._raise_id_mark(conn, note_id)
        return note.model_copy(update={"id": note_id})

    async def insert_row(self, note: Note) -> Note:
        """Insert a note, assigning an id when it has none.

        Returns:
            The stored note with its id.

        Raises:
            StorageFault: If the id is taken or storage is unavailable.
        """
        async with self._lock:
            conn = self._get_conn()
            try:
                stored = await self._insert(conn, note)
                await conn.commit()
            except aiosqlite.IntegrityError as e:
                await conn.rollback()
                raise StorageFault(f"Note id {note.id} already exists") from e
            except aiosqlite.Error as e:
                await conn.rollback()
                raise StorageFault(f"Failed to insert note: {e}") from e
        return stored

    async def update_row(self, note: Note) -> Note:
        """Overwrite the row with note.id.

        Raises:
            NotFound: If no row has that id.
            StorageFault: If storage is unavailable.
        """
        if note.id is None:
            raise NotFound("Cannot update a note without an id")
        async with self._lock:
            conn = self._get_conn()
            try:
                cursor = await conn.execute(
                    "UPDATE notes SET title = ?, content = ?, timestamp = ?, color = ? "
                    "WHERE id = ?",
                    (note.title, note.content, note.timestamp, note.color.value, note.id),
                )
                updated = cursor.rowcount
                await cursor.close()
                await conn.commit()
            except aiosqlite.Error as e:
                await conn.rollback()
                raise StorageFault(f"Failed to update note {note.id}: {e}") from e
        if updated == 0:
            raise NotFound(f"Note {note.id} not found")
        return note

    async def delete_row(self, note: Note) -> bool:
        """Delete the row with note.id.

        Returns:
            True if a row was removed, False if it was already absent.
        """
        if note.id is None:
            return False
        async with self._lock:
            conn = self._get_conn()
            try:
                cursor = await conn.execute("DELETE FROM notes WHERE id = ?", (note.id,))
                deleted = cursor.rowcount
                await cursor.close()
                await conn.commit()
            except aiosqlite.Error as e:
                await conn.rollback()
                raise StorageFault(f"Failed to delete note {note.id}: {e}") from e
        return deleted > 0

    async def replace_rows(self, notes: Iterable[Note]) -> List[Note]:
        """Replace the whole table with notes in one transaction."""
        async with self._lock:
            conn = self._get_conn()
            try:
                await conn.execute("DELETE FROM notes")
                stored = [await self._insert(conn, note) for note in notes]
                await conn.commit()
            except aiosqlite.IntegrityError as e:
                await conn.rollback()
                raise StorageFault(f"Duplicate note id in replacement set: {e}") from e
            except aiosqlite.Error as e:
                await conn.rollback()
                raise StorageFault(f"Failed to replace notes: {e}") from e
        return stored
