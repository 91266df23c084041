"""Persistent, optionally named cons-lists."""

from __future__ import annotations

from itertools import zip_longest
from typing import Any, Iterator, Optional

from .names import Name

_MISSING = object()


class Head:
    """A persistent list with at least one element."""

    __slots__ = ("_name", "_elem", "_next")

    def __init__(self, name: Optional[Name], elem: Any, next_head: Optional[Head] = None):
        self._name = name
        self._elem = elem
        self._next = next_head

    def push(self, name: Optional[Name], elem: Any) -> Head:
        """Return a list with ``elem`` in front of this one."""
        return Head(name, elem, self)

    def peek(self) -> Any:
        """Return the head element."""
        return self._elem

    def name(self) -> Optional[Name]:
        """Return the name of this list."""
        return self._name

    def pull(self) -> Optional[Head]:
        """Return the list without its head element."""
        return self._next

    def __iter__(self) -> StackIterator:
        return StackIterator(self)

    def _entries(self) -> Iterator[tuple]:
        node: Optional[Head] = self
        while node is not None:
            yield node._name, node._elem
            node = node._next

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Head):
            return NotImplemented
        if self is other:
            return True
        return all(
            a == b
            for a, b in zip_longest(self._entries(), other._entries(), fillvalue=_MISSING)
        )

    def __hash__(self) -> int:
        return hash(tuple(self._entries()))

    def __repr__(self) -> str:
        return f"Head({[elem for _, elem in self._entries()]!r})"


class Stack:
    """A persistent, possibly empty list."""

    __slots__ = ("_head",)

    def __init__(self, head: Optional[Head] = None):
        self._head = head

    def is_empty(self) -> bool:
        """Whether the stack holds no elements."""
        return self._head is None

    def push(self, name: Optional[Name], elem: Any) -> Stack:
        """Return a stack with ``elem`` on top of this one."""
        return Stack(Head(name, elem, self._head))

    def peek(self) -> Any:
        """Return the top element, or None when empty."""
        return None if self._head is None else self._head.peek()

    def name(self) -> Optional[Name]:
        """Return the name of the top entry, if there is one."""
        return None if self._head is None else self._head.name()

    def pull(self) -> Optional[Stack]:
        """Return the stack without its top element, or None when empty."""
        if self._head is None:
            return None
        return Stack(self._head.pull())

    def __iter__(self) -> StackIterator:
        return StackIterator(self._head)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Stack):
            return NotImplemented
        return self._head == other._head

    def __hash__(self) -> int:
        return hash(self._head)

    def __repr__(self) -> str:
        return f"Stack({list(self)!r})"


class StackIterator:
    """Iterator over list elements, from the top down."""

    __slots__ = ("_next",)

    def __init__(self, head: Optional[Head]):
        self._next = head

    def name(self) -> Optional[Name]:
        """Return the name attached to the next element."""
        return None if self._next is None else self._next.name()

    def __iter__(self) -> StackIterator:
        return self

    def __next__(self) -> Any:
        if self._next is None:
            raise StopIteration
        head = self._next
        self._next = head.pull()
        return head.peek()