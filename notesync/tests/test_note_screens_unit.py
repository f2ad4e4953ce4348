import asyncio
from pathlib import Path

from notesync.models.note import NoteColor, SortOrder
from notesync.notes.cache import LocalNoteCache
from notesync.notes.note_add import NoteAddModel
from notesync.notes.note_list import SORT_ORDER_KEY, NoteListModel
from notesync.notes.row_store import NoteRowStore
from notesync.session.storage import InMemoryStateStore


def test_note_list_follows_search_sort_and_additions(tmp_path: Path) -> None:
    async def scenario() -> None:
        cache = LocalNoteCache(NoteRowStore(str(tmp_path / "notes.db")))
        await cache.connect()
        try:
            state = InMemoryStateStore()
            adder = NoteAddModel(cache)
            first = await adder.add_note("Trip plan", "pack bags")
            await asyncio.sleep(0.01)
            second = await adder.add_note("Trip budget", color=NoteColor.YELLOW)
            await adder.add_note("Recipes")

            model = NoteListModel(cache, state)
            assert model.query.sort_order == SortOrder.DESCENDING
            stream = model.notes()
            assert len(await stream.__anext__()) == 3

            model.search("Trip")
            notes = await asyncio.wait_for(stream.__anext__(), 1.0)
            assert [note.id for note in notes] == [second.id, first.id]

            model.set_sort_order(SortOrder.ASCENDING)
            notes = await asyncio.wait_for(stream.__anext__(), 1.0)
            assert [note.id for note in notes] == [first.id, second.id]
            assert state.get(SORT_ORDER_KEY) == "ascending"

            await model.delete_note(first)
            notes = await asyncio.wait_for(stream.__anext__(), 1.0)
            assert [note.id for note in notes] == [second.id]
            assert notes[0].color == NoteColor.YELLOW
            await stream.aclose()
        finally:
            await cache.close()

    asyncio.run(scenario())


def test_note_list_restores_saved_sort_order(tmp_path: Path) -> None:
    cache = LocalNoteCache(NoteRowStore(str(tmp_path / "notes.db")))

    saved = NoteListModel(cache, InMemoryStateStore({SORT_ORDER_KEY: "ascending"}))
    assert saved.query.sort_order == SortOrder.ASCENDING

    unknown = NoteListModel(cache, InMemoryStateStore({SORT_ORDER_KEY: "sideways"}))
    assert unknown.query.sort_order == SortOrder.DESCENDING
