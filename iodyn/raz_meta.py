"""Metadata kept in the branches of a raz tree and used to search it.

Each branch node holds two pieces of metadata, one computed from its
left branch and one from its right.  A metadata class also defines the
index type used to focus on a position, how to choose a branch for an
index, and how to split a leaf list at an index.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Sequence

from .names import Name

_USIZE_MAX = 2**64 - 1


class Direction(Enum):
    """Where a search goes next."""

    LEFT = "left"
    RIGHT = "right"
    HERE = "here"
    NOWHERE = "nowhere"


@dataclass(frozen=True)
class Navigation:
    """The outcome of a navigation step, with the index for the chosen branch."""

    direction: Direction
    index: Any = None


@dataclass(frozen=True)
class Position:
    """An index that is the start (LEFT), the end (RIGHT) or a value (HERE)."""

    side: Direction
    value: Any = None

    def __post_init__(self):
        if self.side is Direction.NOWHERE:
            raise ValueError("a position cannot be nowhere")


_FIRST = Position(Direction.LEFT)
_LAST = Position(Direction.RIGHT)


def _position_from(value: Any) -> Position:
    return value if isinstance(value, Position) else Position(Direction.HERE, value)


def _split_at_end(vec: Sequence, index: Position) -> Optional[tuple[list, list]]:
    if index.side is Direction.LEFT:
        return [], list(vec)
    if index.side is Direction.RIGHT:
        return list(vec), []
    return None


class RazMeta(ABC):
    """Interface for raz branch metadata."""

    @classmethod
    @abstractmethod
    def from_none(cls, lev: int, n: Optional[Name]) -> RazMeta:
        """Metadata for an empty branch."""

    @classmethod
    @abstractmethod
    def from_vec(cls, vec: Sequence, lev: int, n: Optional[Name]) -> RazMeta:
        """Metadata for a leaf holding ``vec``."""

    @classmethod
    @abstractmethod
    def from_meta(cls, l: RazMeta, r: RazMeta, lev: int, n: Optional[Name]) -> RazMeta:
        """Metadata combining the pair held by a branch node."""

    @classmethod
    @abstractmethod
    def navigate(cls, l: RazMeta, r: RazMeta, index: Any) -> Navigation:
        """Choose a branch for ``index`` and adjust the index for it."""

    @classmethod
    @abstractmethod
    def split_vec(cls, vec: Sequence, index: Any) -> tuple[list, list]:
        """Split a leaf list at ``index``."""

    @classmethod
    @abstractmethod
    def index_from(cls, value: Any) -> Any:
        """Convert a user value into this metadata's index."""

    @classmethod
    @abstractmethod
    def last_index(cls) -> Any:
        """The index of the end of the sequence."""


@dataclass(frozen=True)
class NoMeta(RazMeta):
    """No metadata; only the start and end of a sequence can be found."""

    @classmethod
    def from_none(cls, lev, n):
        return cls()

    @classmethod
    def from_vec(cls, vec, lev, n):
        return cls()

    @classmethod
    def from_meta(cls, l, r, lev, n):
        return cls()

    @classmethod
    def navigate(cls, l, r, index):
        if index.side is Direction.LEFT:
            return Navigation(Direction.LEFT, _FIRST)
        if index.side is Direction.RIGHT:
            return Navigation(Direction.RIGHT, _LAST)
        raise ValueError("Invalid position")

    @classmethod
    def split_vec(cls, vec, index):
        halves = _split_at_end(vec, index)
        if halves is None:
            raise ValueError("Invalid position")
        return halves

    @classmethod
    def index_from(cls, value):
        return _position_from(value)

    @classmethod
    def last_index(cls):
        return _LAST


@dataclass(frozen=True)
class Count(RazMeta):
    """Element counts; indexes are offsets from the start.

    The largest unsigned machine value, ``Count.last_index()``, stands
    for the end of the sequence.
    """

    value: int = 0

    @classmethod
    def from_none(cls, lev, n):
        return cls(0)

    @classmethod
    def from_vec(cls, vec, lev, n):
        return cls(len(vec))

    @classmethod
    def from_meta(cls, l, r, lev, n):
        return cls(l.value + r.value)

    @classmethod
    def navigate(cls, l, r, index):
        if index == _USIZE_MAX:
            return Navigation(Direction.RIGHT, index)
        if index > l.value + r.value:
            return Navigation(Direction.NOWHERE)
        if index > l.value:
            return Navigation(Direction.RIGHT, index - l.value)
        if index == l.value:
            return Navigation(Direction.HERE)
        return Navigation(Direction.LEFT, index)

    @classmethod
    def split_vec(cls, vec, index):
        if index == _USIZE_MAX:
            return list(vec), []
        if index < 0 or index > len(vec):
            raise IndexError(f"split index {index} is beyond length {len(vec)}")
        return list(vec[:index]), list(vec[index:])

    @classmethod
    def index_from(cls, value):
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"a count index must be an int, got {type(value).__name__}")
        if value < 0 or value > _USIZE_MAX:
            raise ValueError(f"count index {value} is out of range")
        return value

    @classmethod
    def last_index(cls):
        return _USIZE_MAX


@dataclass(frozen=True)
class Names(RazMeta):
    """The set of names found in a branch; indexes are positions or names."""

    names: frozenset = field(default_factory=frozenset)

    @classmethod
    def _with(cls, names, n):
        return cls(frozenset(names) | ({n} if n is not None else set()))

    @classmethod
    def from_none(cls, lev, n):
        return cls._with((), n)

    @classmethod
    def from_vec(cls, vec, lev, n):
        return cls._with((), n)

    @classmethod
    def from_meta(cls, l, r, lev, n):
        return cls._with(l.names | r.names, n)

    @classmethod
    def navigate(cls, l, r, index):
        if index.side is Direction.LEFT:
            return Navigation(Direction.LEFT, _FIRST)
        if index.side is Direction.RIGHT:
            return Navigation(Direction.RIGHT, _LAST)
        in_left = index.value in l.names
        in_right = index.value in r.names
        if in_left and in_right:
            return Navigation(Direction.HERE)
        if in_left:
            return Navigation(Direction.LEFT, index)
        if in_right:
            return Navigation(Direction.RIGHT, index)
        return Navigation(Direction.NOWHERE)

    @classmethod
    def split_vec(cls, vec, index):
        halves = _split_at_end(vec, index)
        if halves is None:
            raise ValueError("There are no names in this region")
        return halves

    @classmethod
    def index_from(cls, value):
        return _position_from(value)

    @classmethod
    def last_index(cls):
        return _LAST