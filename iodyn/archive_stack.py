"""A stack with a mutable active list and a persistent archive of lists.

Elements are pushed onto a fast, mutable list.  ``archive`` moves that
list, with a name and metadata, into a persistent stack of archived
lists.  Popping past the end of the active list opens the next archive.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional

from .names import Name
from .stack import Stack


class ArchiveStack:
    """Mutable active list over a persistent stack of ``(meta, list)`` archives."""

    __slots__ = ("_current", "_archived")

    def __init__(self, items: Optional[Iterable[Any]] = None):
        self._current: list = list(items) if items is not None else []
        self._archived: Stack = Stack()

    def is_empty(self) -> bool:
        """Whether there is no data, archived or active."""
        return not self._current and self._archived.is_empty()

    def active_len(self) -> int:
        """Number of elements outside the archive."""
        return len(self._current)

    def name(self) -> Optional[Name]:
        """Name of the most recent archive, if any."""
        return self._archived.name()

    def push(self, elm: Any) -> None:
        """Push an element onto the active list."""
        self._current.append(elm)

    def pop(self) -> Any:
        """Remove and return the top element, opening an archive if needed.

        Returns None when the stack is empty.  Metadata of an archive
        opened this way is discarded.
        """
        if self.is_empty():
            return None
        self._retrieve()
        return self._current.pop()

    def pop_meta(self) -> Optional[tuple[Any, Any]]:
        """Remove the top element and return ``(element, meta)``.

        ``meta`` is the metadata of the archive that had to be opened,
        or None if the element was already active.  Returns None when
        the stack is empty.
        """
        if self.is_empty():
            return None
        opened = self._retrieve()
        meta = opened[0] if opened is not None else None
        return self._current.pop(), meta

    def extend(self, extra: Iterable[Any]) -> None:
        """Append elements to the active list."""
        self._current.extend(extra)

    def extend_rev(self, extra: Iterable[Any]) -> None:
        """Append elements to the active list, then reverse the whole list."""
        self._current.extend(extra)
        self._current.reverse()

    def next_archive(self) -> Optional[tuple[list, Any]]:
        """Open the most recent archive.

        Returns the previous active list together with the metadata of
        the opened archive (None if there was no archive to open), or
        None if the stack is empty.
        """
        if self.is_empty():
            return None
        old = self._current
        if self._archived.is_empty():
            self._current = []
            return old, None
        meta, vec = self._archived.peek()
        self._current = list(vec)
        self._archived = self._archived.pull()
        return old, meta

    def active_data(self) -> list:
        """A copy of the active list."""
        return list(self._current)

    def peek(self) -> Any:
        """Return the top element without opening any archive, or None."""
        if self._current:
            return self._current[-1]
        if self._archived.is_empty():
            return None
        _, vec = self._archived.peek()
        return vec[-1]

    def archive(self, name: Optional[Name], meta: Any) -> bool:
        """Move the active list into the archive with ``name`` and ``meta``.

        Returns False, archiving nothing, if the active list is empty.
        """
        if not self._current:
            return False
        archived = tuple(self._current)
        self._current = []
        self._archived = self._archived.push(name, (meta, archived))
        return True

    def copy(self) -> ArchiveStack:
        """Return a copy; the archive is shared, the active list is not."""
        dup = ArchiveStack(self._current)
        dup._archived = self._archived
        return dup

    def _retrieve(self) -> Optional[tuple[Any]]:
        """Load the next archive if the active list is empty.

        Returns a one-element tuple holding the opened archive's
        metadata, or None if no archive was opened.
        """
        if self._current:
            return None
        if self._archived.is_empty():
            raise IndexError("retrieve from an empty archive stack")
        meta, vec = self._archived.peek()
        self._current = list(vec)
        self._archived = self._archived.pull()
        return (meta,)

    def __iter__(self) -> Iterator[Any]:
        """Yield elements from the top down, leaving this stack unchanged."""
        work = self.copy()
        while not work.is_empty():
            yield work.pop()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ArchiveStack):
            return NotImplemented
        return self._current == other._current and self._archived == other._archived

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ArchiveStack({list(self)!r})"


@dataclass(frozen=True)
class AtHead:
    """View of an archive stack as a sequence whose edit point is its head."""

    stack: ArchiveStack


@dataclass(frozen=True)
class AtTail:
    """View of an archive stack as a sequence whose edit point is its tail."""

    stack: ArchiveStack