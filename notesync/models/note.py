"""
Note model definitions.
Represents a note as held in the local cache and as received from the
remote notes service during synchronization.
"""

import time
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


def now_millis() -> int:
    """Current wall-clock time in milliseconds."""
    return int(time.time() * 1000)


class NoteColor(str, Enum):
    """Display color of a note card."""
    DEFAULT = "default"
    RED = "red"
    ORANGE = "orange"
    YELLOW = "yellow"
    GREEN = "green"
    BLUE = "blue"
    PURPLE = "purple"


class SortOrder(str, Enum):
    """Direction of the timestamp ordering of the note list."""
    ASCENDING = "ascending"
    DESCENDING = "descending"


class Note(BaseModel):
    """
    Note as stored in the local cache.

    id is None until the cache assigns one on insert. Once assigned it
    never changes and is unique within the cache.
    """
    id: Optional[int] = None
    title: str = ""
    content: str = ""
    timestamp: int = Field(default_factory=now_millis)
    color: NoteColor = NoteColor.DEFAULT


class NoteQuery(BaseModel):
    """Search text and sort order driving the visible note list."""
    search_text: str = ""
    sort_order: SortOrder = SortOrder.DESCENDING

    class Config:
        frozen = True


class RemoteNote(BaseModel):
    """Note payload returned by the remote notes service."""
    id: int
    title: str = ""
    content: str = ""
    timestamp: int
    color: NoteColor = NoteColor.DEFAULT

    def to_note(self) -> Note:
        return Note(
            id=self.id,
            title=self.title,
            content=self.content,
            timestamp=self.timestamp,
            color=self.color,
        )
