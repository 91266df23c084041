"""A cursor into a level tree, built for splitting and joining trees.

The cursor remembers the nodes above it in two forests: those whose
right branch leads to the cursor (``l_forest``) and those whose left
branch does (``r_forest``).  Structural changes mark the cursor dirty.
Moving up from a dirty position rebuilds the upper node through a
``rebuild`` function, so node data such as sizes can be recomputed.
Because levels fix the shape, trees joined from the same levels always
have the same structure.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Iterator, Optional

from .level_tree import Tree, gen_branch_level
from .names import Name

__all__ = ["Force", "UpResult", "Cursor", "IterR", "Tree", "gen_branch_level"]

Rebuild = Callable[[Any, Any, int, Optional[Name], Any], Any]


def _keep_old(l_branch: Any, old_data: Any, level: int, name: Optional[Name], r_branch: Any) -> Any:
    return old_data


def _peek(tree: Optional[Tree]) -> Any:
    return None if tree is None else tree.peek()


class Force(Enum):
    """How a downward move treats empty branches.

    NO refuses to enter an empty branch, YES enters it, and DISCARD
    enters the branch while dropping the current node from the tree.
    """

    NO = "no"
    YES = "yes"
    DISCARD = "discard"


class UpResult(Enum):
    """The side the cursor came from when moving up, or FAIL at the root."""

    FAIL = "fail"
    LEFT = "left"
    RIGHT = "right"


class Cursor:
    """A position within a persistent level tree.

    ``rebuild(left_data, old_data, level, name, right_data)`` gives the
    data of a node recreated after its branches changed; by default the
    old data is kept.
    """

    __slots__ = ("_dirty", "_l_forest", "_tree", "_r_forest", "_rebuild")

    def __init__(self, tree: Optional[Tree] = None, rebuild: Optional[Rebuild] = None):
        self._dirty = False
        self._l_forest: list[tuple[bool, Tree]] = []
        self._tree = tree
        self._r_forest: list[tuple[bool, Tree]] = []
        self._rebuild: Rebuild = rebuild if rebuild is not None else _keep_old

    @classmethod
    def _make(cls, dirty, l_forest, tree, r_forest, rebuild) -> Cursor:
        cursor = cls(tree, rebuild)
        cursor._dirty = dirty
        cursor._l_forest = l_forest
        cursor._r_forest = r_forest
        return cursor

    def copy(self) -> Cursor:
        """An independent cursor at the same position."""
        return Cursor._make(
            self._dirty, list(self._l_forest), self._tree, list(self._r_forest), self._rebuild
        )

    def split(self) -> tuple[Cursor, Optional[Tree], Cursor]:
        """Split at the focused node.

        Returns a cursor over everything to the left (at the node's left
        branch), the focused node as a tree, and a cursor over everything
        to the right (at the node's right branch).
        """
        l_tree = None if self._tree is None else self._tree.l_tree()
        r_tree = None if self._tree is None else self._tree.r_tree()
        left = Cursor._make(True, list(self._l_forest), l_tree, [], self._rebuild)
        right = Cursor._make(True, [], r_tree, list(self._r_forest), self._rebuild)
        return left, self._tree, right

    def into_iters(self) -> tuple[Cursor, Optional[Tree], IterR]:
        """Split into what lies left and right of the focused node.

        Returns a cursor at the last node to the left, the focused node
        as a tree, and an iterator over the nodes to the right, in order.
        The focused node's own data belongs to neither side.
        """
        l_cursor, tree, r_cursor = self.split()
        if l_cursor._tree is None:
            l_cursor.up_discard()
        else:
            while l_cursor.down_right():
                pass
        if r_cursor._tree is None:
            r_cursor.up_discard()
        else:
            while r_cursor.down_left():
                pass
        return l_cursor, tree, IterR(r_cursor)

    @staticmethod
    def join(l_cursor: Cursor, level: int, name: Optional[Name], data: Any, r_cursor: Cursor) -> Cursor:
        """Make a cursor at a new node holding ``data`` between two cursors' trees.

        The node's data is ``rebuild`` (of the left cursor) applied with
        ``data`` as the old data and the joined branches.  Both cursors
        are consumed.
        """
        rebuild = l_cursor._rebuild
        while l_cursor._r_forest:
            if l_cursor.up() is UpResult.FAIL:
                raise RuntimeError("join: could not clear the left cursor")
        while r_cursor._l_forest:
            if r_cursor.up() is UpResult.FAIL:
                raise RuntimeError("join: could not clear the right cursor")
        while (h := l_cursor._up_left_level()) is not None and h < level:
            if l_cursor.up() is UpResult.FAIL:
                raise RuntimeError("join: left cursor cannot move up")
        while (h := l_cursor.peek_level()) is not None and h >= level:
            if not l_cursor.down_right_force(Force.YES):
                raise RuntimeError("join: left cursor cannot move down")
        while (h := r_cursor._up_right_level()) is not None and h <= level:
            if r_cursor.up() is UpResult.FAIL:
                raise RuntimeError("join: right cursor cannot move up")
        while (h := r_cursor.peek_level()) is not None and h > level:
            if not r_cursor.down_left_force(Force.YES):
                raise RuntimeError("join: right cursor cannot move down")
        new_data = rebuild(_peek(l_cursor._tree), data, level, name, _peek(r_cursor._tree))
        tree = Tree(level, name, new_data, l_cursor._tree, r_cursor._tree)
        return Cursor._make(True, l_cursor._l_forest, tree, r_cursor._r_forest, rebuild)

    def at_tree(self) -> Optional[Tree]:
        """The focused node as a tree."""
        return self._tree

    def left_tree(self) -> Optional[Tree]:
        """The left branch of the focused node."""
        return None if self._tree is None else self._tree.l_tree()

    def right_tree(self) -> Optional[Tree]:
        """The right branch of the focused node."""
        return None if self._tree is None else self._tree.r_tree()

    def peek(self) -> Any:
        """Data of the focused node, or None when there is no node."""
        return _peek(self._tree)

    def peek_level(self) -> Optional[int]:
        """Level of the focused node."""
        return None if self._tree is None else self._tree.level()

    def peek_name(self) -> Optional[Name]:
        """Name of the focused node, if it has one."""
        return None if self._tree is None else self._tree.name()

    def _up_left_level(self) -> Optional[int]:
        return self._l_forest[-1][1].level() if self._l_forest else None

    def _up_right_level(self) -> Optional[int]:
        return self._r_forest[-1][1].level() if self._r_forest else None

    def down_left_force(self, force: Force) -> bool:
        """Move into the left branch as ``force`` allows; return whether it moved."""
        if self._tree is None:
            return False
        new_tree = self._tree.l_tree()
        if new_tree is None and force is Force.NO:
            return False
        old_tree = self._tree
        self._tree = new_tree
        if force is not Force.DISCARD:
            self._r_forest.append((self._dirty, old_tree))
            self._dirty = False
        else:
            self._dirty = True
        return True

    def down_left(self) -> bool:
        """Move into a non-empty left branch."""
        return self.down_left_force(Force.NO)

    def down_right_force(self, force: Force) -> bool:
        """Move into the right branch as ``force`` allows; return whether it moved."""
        if self._tree is None:
            return False
        new_tree = self._tree.r_tree()
        if new_tree is None and force is Force.NO:
            return False
        old_tree = self._tree
        self._tree = new_tree
        if force is not Force.DISCARD:
            self._l_forest.append((self._dirty, old_tree))
            self._dirty = False
        else:
            self._dirty = True
        return True

    def down_right(self) -> bool:
        """Move into a non-empty right branch."""
        return self.down_right_force(Force.NO)

    def _up_side(self) -> Optional[bool]:
        if not self._l_forest and not self._r_forest:
            return None
        if not self._r_forest:
            return True
        if self._l_forest and self._r_forest[-1][1].level() > self._l_forest[-1][1].level():
            return True
        return False

    def up(self) -> UpResult:
        """Move towards the root, rebuilding the upper node if anything changed."""
        to_left = self._up_side()
        if to_left is None:
            return UpResult.FAIL
        if to_left:
            dirty, upper = self._l_forest.pop()
            if self._dirty:
                l_branch = upper.l_tree()
                data = self._rebuild(
                    _peek(l_branch), upper.peek(), upper.level(), upper.name(), _peek(self._tree)
                )
                self._tree = Tree(upper.level(), upper.name(), data, l_branch, self._tree)
            else:
                self._dirty = dirty
                self._tree = upper
            return UpResult.LEFT
        dirty, upper = self._r_forest.pop()
        if self._dirty:
            r_branch = upper.r_tree()
            data = self._rebuild(
                _peek(self._tree), upper.peek(), upper.level(), upper.name(), _peek(r_branch)
            )
            self._tree = Tree(upper.level(), upper.name(), data, self._tree, r_branch)
        else:
            self._dirty = dirty
            self._tree = upper
        return UpResult.RIGHT

    def up_discard(self) -> UpResult:
        """Move towards the root, discarding any changes below."""
        to_left = self._up_side()
        if to_left is None:
            return UpResult.FAIL
        forest = self._l_forest if to_left else self._r_forest
        self._dirty, self._tree = forest.pop()
        return UpResult.LEFT if to_left else UpResult.RIGHT

    def __repr__(self) -> str:
        return f"Cursor(tree={self._tree!r}, dirty={self._dirty!r})"


class IterR:
    """Iterator over node data from a cursor's position rightwards, in order."""

    __slots__ = ("_cursor",)

    def __init__(self, cursor: Cursor):
        self._cursor = cursor

    def __iter__(self) -> Iterator[Any]:
        return self

    def __next__(self) -> Any:
        cursor = self._cursor
        if cursor.at_tree() is None:
            raise StopIteration
        result = cursor.peek()
        if cursor.down_right():
            while cursor.down_left():
                pass
        else:
            while True:
                moved = cursor.up_discard()
                if moved is UpResult.RIGHT:
                    break
                if moved is UpResult.FAIL:
                    self._cursor = Cursor(None, cursor._rebuild)
                    break
        return result

    def fold_out(self, init: Any, bin: Callable[[Any, Any], Any]) -> Any:
        """Fold the remaining data with ``bin(accum, data)``, consuming the iterator."""
        accum = init
        for elem in self:
            accum = bin(accum, elem)
        return accum