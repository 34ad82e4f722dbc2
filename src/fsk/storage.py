"""Storage layer for fsk.

Translates note titles to files under the database root, reads notes, walks
the directory tree and runs the lazy search.

Design principles:
- The root is passed in explicitly; nothing here reads the environment
- Traversal is iterative with an explicit stack and yields notes one at a time
- A title match never reads the note file (lazy search)
- Entries that cannot be stat'ed or read are skipped, never fatal
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path

from .config import NOTE_EXTENSION, TITLE_SEPARATOR
from .errors import InvalidTitle, NotFound, StorageIOError
from .models import ListingNode, ListingTree, Note, SearchResult

log = logging.getLogger(__name__)


def validate_title(title: str) -> list[str]:
    """Split a title into its segments, rejecting anything that is not a plain relative path.

    Raises:
        InvalidTitle: If the title is empty, has an empty, "." or ".." segment,
            or contains a NUL character.
    """
    if not title:
        raise InvalidTitle(title, "title is empty")
    if "\x00" in title:
        raise InvalidTitle(title, "title contains a NUL character")

    segments = title.split(TITLE_SEPARATOR)
    for segment in segments:
        if not segment:
            raise InvalidTitle(title, "title has an empty path segment")
        if segment in (".", ".."):
            raise InvalidTitle(title, f"'{segment}' is not allowed as a path segment")
    return segments


class Storage:
    """File-backed note database rooted at a single directory."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def resolve(self, title: str) -> Path:
        """Map a title to its note file: <root>/<title>.md."""
        segments = validate_title(title)
        *parents, name = segments
        return self.root.joinpath(*parents, name + NOTE_EXTENSION)

    def exists(self, title: str) -> bool:
        return self.resolve(title).is_file()

    def read(self, title: str) -> str:
        """Return the full text of a note, byte-for-byte decoded as UTF-8.

        Raises:
            InvalidTitle: If the title is malformed.
            NotFound: If the note does not exist.
            StorageIOError: On permission/read failures or non-UTF-8 content.
        """
        path = self.resolve(title)
        try:
            return self._load(path)
        except (FileNotFoundError, NotADirectoryError):
            raise NotFound(title) from None
        except UnicodeDecodeError as e:
            raise StorageIOError(
                f"Note '{title}' is not valid UTF-8 ({e.reason} at byte {e.start})",
                {"path": str(path)},
            ) from e
        except OSError as e:
            raise StorageIOError.from_os_error("read", path, e) from e

    def ensure_parent(self, title: str) -> Path:
        """Create every missing ancestor directory of the note, the root included.

        Returns:
            The resolved note path.
        """
        path = self.resolve(title)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageIOError.from_os_error("create directory", path.parent, e) from e
        return path

    def iter_notes(self) -> Iterator[Note]:
        """Yield every note under the root in lexicographic depth-first order.

        Hidden entries (leading ".") are skipped, symlinked directories are not
        descended into, and anything that cannot be listed or stat'ed is
        omitted. A missing root yields nothing.
        """
        # Stack items: (path, title segments, is_directory)
        stack: list[tuple[Path, tuple[str, ...], bool]] = [(self.root, (), True)]

        while stack:
            path, segments, is_dir = stack.pop()

            if not is_dir:
                yield Note(title=TITLE_SEPARATOR.join(segments), path=path)
                continue

            children = self._scan(path)
            children.sort(key=lambda child: (child[0], not child[2]))
            for name, child_path, child_is_dir in reversed(children):
                stack.append((child_path, segments + (name,), child_is_dir))

    def iter_matches(self, query: str) -> Iterator[SearchResult]:
        """Yield search hits in traversal order.

        The title is checked first; only notes whose title does not contain
        the query are opened and scanned.
        """
        needle = query.casefold()
        if not needle:
            return

        for note in self.iter_notes():
            if needle in note.title.casefold():
                yield SearchResult(title=note.title, match="title")
                continue

            try:
                content = self._load(note.path)
            except (OSError, UnicodeDecodeError) as e:
                log.debug("Skipping unreadable note %s: %s", note.path, e)
                continue

            if needle not in content.casefold():
                continue

            preview = next(
                (line.strip() for line in content.splitlines() if needle in line.casefold()),
                None,
            )
            yield SearchResult(title=note.title, match="content", preview=preview)

    def search(self, query: str) -> list[SearchResult]:
        """Search titles and contents, case-insensitively.

        Returns:
            Title matches first, then content matches, each sorted by title.
            An empty query returns an empty list.
        """
        return sorted(
            self.iter_matches(query),
            key=lambda result: (not result.is_title_match, result.title),
        )

    def list(self) -> ListingTree:
        """Build the sorted listing tree of all notes.

        Directories without any note beneath them do not appear.
        """
        tree = ListingTree()
        directories: dict[tuple[str, ...], ListingNode] = {}

        for note in self.iter_notes():
            *parents, name = note.title.split(TITLE_SEPARATOR)
            siblings = tree.children
            for depth in range(1, len(parents) + 1):
                key = tuple(parents[:depth])
                node = directories.get(key)
                if node is None:
                    node = ListingNode(name=parents[depth - 1], kind="directory")
                    directories[key] = node
                    siblings.append(node)
                siblings = node.children
            siblings.append(ListingNode(name=name, kind="note", title=note.title))
            tree.notes += 1

        tree.directories = len(directories)

        pending = [tree.children]
        while pending:
            nodes = pending.pop()
            nodes.sort(key=lambda node: (node.name, node.kind))
            pending.extend(node.children for node in nodes if node.children)

        return tree

    # ─────────────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────────────

    def _load(self, path: Path) -> str:
        """Single read path for note content."""
        return path.read_bytes().decode("utf-8")

    def _scan(self, directory: Path) -> list[tuple[str, Path, bool]]:
        """List the visible notes and subdirectories of one directory.

        Returns (display name, path, is_directory) tuples; note names have the
        extension removed. Errors are logged and the offending entry (or the
        whole directory) is omitted.
        """
        try:
            with os.scandir(directory) as it:
                entries = list(it)
        except OSError as e:
            if directory == self.root and isinstance(e, FileNotFoundError):
                log.debug("Database root %s does not exist yet", directory)
            else:
                log.debug("Skipping unreadable directory %s: %s", directory, e)
            return []

        children: list[tuple[str, Path, bool]] = []
        for entry in entries:
            if entry.name.startswith("."):
                continue
            try:
                if entry.is_dir(follow_symlinks=False):
                    children.append((entry.name, Path(entry.path), True))
                elif entry.name.endswith(NOTE_EXTENSION) and entry.is_file():
                    stem = entry.name[: -len(NOTE_EXTENSION)]
                    children.append((stem, Path(entry.path), False))
            except OSError as e:
                log.debug("Skipping entry %s: %s", entry.path, e)
        return children
