"""Pydantic models for fsk."""

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class Note:
    """A note on disk. Content is read on demand through Storage."""

    title: str  # Slash-delimited, no extension (e.g. "linux/kernel")
    path: Path  # Absolute path of the backing .md file


class SearchResult(BaseModel):
    """A search hit."""

    title: str
    match: Literal["title", "content"]
    preview: str | None = None  # First matching line, for content matches only

    @property
    def is_title_match(self) -> bool:
        return self.match == "title"


class ListingNode(BaseModel):
    """A directory or note in the listing tree."""

    name: str  # Last title segment
    kind: Literal["directory", "note"]
    title: str | None = None  # Full title, notes only
    children: list["ListingNode"] = Field(default_factory=list)


class ListingTree(BaseModel):
    """Sorted tree of every note under the database root."""

    children: list[ListingNode] = Field(default_factory=list)
    notes: int = 0
    directories: int = 0

    @property
    def is_empty(self) -> bool:
        return self.notes == 0

    def titles(self) -> list[str]:
        """All note titles in display order."""
        result: list[str] = []
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            if node.kind == "note" and node.title is not None:
                result.append(node.title)
            stack.extend(reversed(node.children))
        return result
