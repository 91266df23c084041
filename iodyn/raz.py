"""Gauged random access zipper: an editable cursor into a sequence.

A sequence has two forms.  ``RazTree`` is the whole sequence as a level
tree whose leaves hold lists of elements; it supports folds and maps.
``Raz`` is a cursor for editing; it keeps the elements near the cursor
in two archive stacks and the rest of the tree in two tree cursors.
``RazTree.focus`` turns a tree into a cursor, ``Raz.unfocus`` turns it
back.  Archiving marks a boundary between subsequences with a level and
a name; these become the branch nodes of the tree.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial, reduce
from typing import Any, Callable, Optional, Sequence

from .archive_stack import ArchiveStack
from .level_tree import Tree
from .names import Name, name_of_string, name_pair
from .raz_meta import Count, Direction, RazMeta
from .tree_cursor import Cursor, Force, UpResult

__all__ = [
    "Leaf",
    "Branch",
    "RazTree",
    "Raz",
    "rebuild_tree_data",
    "leaf",
    "branch",
]


@dataclass(frozen=True)
class Leaf:
    """Tree data holding a run of sequence elements."""

    items: tuple = ()

    def __post_init__(self):
        if not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))


@dataclass(frozen=True)
class Branch:
    """Tree data holding the metadata of a node's left and right branches."""

    left: RazMeta
    right: RazMeta


class _Placeholder:
    """Data for a node that is certain to be rebuilt."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "Placeholder"


_PLACEHOLDER = _Placeholder()
_TREE_NAME = name_of_string("tree")


def _branch_meta(meta_type: type, data: Any, level: int, name: Optional[Name]) -> RazMeta:
    if data is None:
        return meta_type.from_none(level, name)
    if isinstance(data, Leaf):
        return meta_type.from_vec(data.items, level, name)
    if isinstance(data, Branch):
        return meta_type.from_meta(data.left, data.right, level, name)
    raise ValueError("placeholder data has no metadata")


def rebuild_tree_data(
    meta_type: type,
    l_branch: Any,
    old_data: Any,
    level: int,
    name: Optional[Name],
    r_branch: Any,
) -> Any:
    """Recompute the data of a node from the data of its branches.

    Leaves keep their elements; any other node becomes a ``Branch`` whose
    metadata is derived from the two branches, the node's level and name.
    """
    if isinstance(old_data, Leaf):
        return old_data
    return Branch(
        _branch_meta(meta_type, l_branch, level, name),
        _branch_meta(meta_type, r_branch, level, name),
    )


def _treetop_meta(meta_type: type, tree: Optional[Tree]) -> RazMeta:
    if tree is None:
        return meta_type.from_none(0, None)
    return _branch_meta(meta_type, tree.peek(), 0, None)


def leaf(vec: Sequence, name: Optional[Name] = None) -> Tree:
    """A level-0 tree holding ``vec`` as a leaf."""
    return Tree(0, name, Leaf(tuple(vec)))


def branch(t1: Tree, level: int, name: Optional[Name], t2: Tree, meta_type: type = Count) -> Tree:
    """Join two trees as the branches of a new node."""
    data = rebuild_tree_data(meta_type, t1.peek(), _PLACEHOLDER, level, name, t2.peek())
    return Tree(level, name, data, t1, t2)


def _tree_name(stack: ArchiveStack) -> Optional[Name]:
    name = stack.name()
    return None if name is None else name_pair(name, _TREE_NAME)


def _fold_items(items: Sequence, init: Callable[[Any], Any], bin: Callable[[Any, Any], Any]) -> Any:
    if not items:
        raise ValueError("leaf with no elements")
    mapped = map(init, items)
    first = next(mapped)
    return reduce(bin, mapped, first)


def _combine(l: Any, r: Any, both: Callable[[Any, Any], Any]) -> Any:
    if l is None and r is None:
        raise ValueError("branch with no data")
    if r is None:
        return l
    if l is None:
        return r
    return both(l, r)


def _require(moved: bool) -> None:
    if not moved:
        raise RuntimeError("expected a branch to move into")


class RazTree:
    """A whole sequence as a tree, for folds, maps and refocusing.

    ``tree`` is the underlying level tree, or None for an empty sequence.
    """

    __slots__ = ("meta_type", "tree", "_meta")

    def __init__(self, meta_type: type = Count, tree: Optional[Tree] = None):
        self.meta_type = meta_type
        self.tree = tree
        self._meta = _treetop_meta(meta_type, tree)

    def meta(self) -> RazMeta:
        """Metadata for the whole sequence."""
        return self._meta

    def is_empty(self) -> bool:
        """Whether the sequence has no tree."""
        return self.tree is None

    @classmethod
    def empty(cls, meta_type: type = Count) -> RazTree:
        """An empty sequence."""
        return cls(meta_type, None)

    @staticmethod
    def join(ltree: RazTree, level: int, name: Optional[Name], rtree: RazTree) -> Optional[RazTree]:
        """Combine two trees left to right; None if either is empty."""
        if ltree.tree is None or rtree.tree is None:
            return None
        meta_type = ltree.meta_type
        return RazTree(meta_type, branch(ltree.tree, level, name, rtree.tree, meta_type))

    @classmethod
    def from_vec(cls, vec: Sequence, meta_type: type = Count) -> Optional[RazTree]:
        """A single-leaf tree holding ``vec``; None if ``vec`` is empty."""
        items = tuple(vec)
        if not items:
            return None
        return cls(meta_type, leaf(items))

    def _rebuild(self) -> Callable:
        return partial(rebuild_tree_data, self.meta_type)

    def fold_up(self, init: Callable[[Any], Any], bin: Callable[[Any, Any], Any]) -> Any:
        """Fold with an associative ``bin`` over ``init`` of each element.

        Returns None for an empty sequence.
        """
        if self.tree is None:
            return None

        def node(l, data, r):
            if isinstance(data, Leaf):
                return _fold_items(data.items, init, bin)
            return _combine(l, r, bin)

        return self.tree.fold_up(node)

    def fold_up_nl(
        self,
        init: Callable[[Any], Any],
        bin: Callable[[Any, Any], Any],
        binnl: Callable[[Any, int, Optional[Name], Any], Any],
    ) -> Any:
        """Like ``fold_up``, but branches combine with ``binnl(l, level, name, r)``."""
        if self.tree is None:
            return None

        def node(l, data, level, name, r):
            if isinstance(data, Leaf):
                return _fold_items(data.items, init, bin)
            return _combine(l, r, lambda a, b: binnl(a, level, name, b))

        return self.tree.fold_up_meta(node)

    def fold_up_gauged(
        self,
        init: Callable[[tuple], Any],
        bin: Callable[[Any, int, Optional[Name], Any], Any],
    ) -> Any:
        """Fold where ``init`` sees whole subsequences and branches use ``bin(l, level, name, r)``."""
        if self.tree is None:
            return None

        def node(l, data, level, name, r):
            if isinstance(data, Leaf):
                return init(data.items)
            return _combine(l, r, lambda a, b: bin(a, level, name, b))

        return self.tree.fold_up_meta(node)

    def fold_lr(self, init: Any, bin: Callable[[Any, Any], Any]) -> Any:
        """Fold the elements left to right."""
        return self.fold_lr_meta(init, bin, lambda a, _meta: a)

    def fold_lr_meta(
        self,
        init: Any,
        bin: Callable[[Any, Any], Any],
        meta: Callable[[Any, tuple], Any],
    ) -> Any:
        """Fold left to right; at each boundary call ``meta(accum, (level, name))``."""
        if self.tree is None:
            return init

        def node(a, data, level, name):
            if isinstance(data, Leaf):
                return reduce(bin, data.items, a)
            return meta(a, (level, name))

        return self.tree.fold_lr_meta(name_of_string("start"), init, node)

    def fold_lr_archive(
        self,
        init: Any,
        bin: Callable[[Any, Any], Any],
        finbin: Callable[[Any, Optional[Name]], Any],
        meta: Callable[[Any, int], Any],
    ) -> Any:
        """Fold left to right; after each leaf call ``finbin(accum, name)``,
        at each boundary ``meta(accum, level)``."""
        if self.tree is None:
            return init

        def node(a, data, level, name):
            if isinstance(data, Leaf):
                return finbin(reduce(bin, data.items, a), name)
            return meta(a, level)

        return self.tree.fold_lr_meta(name_of_string("start"), init, node)

    def map(self, f: Callable[[Any], Any], meta_type: Optional[type] = None) -> RazTree:
        """A tree of the same shape with ``f`` applied to every element."""
        target = meta_type if meta_type is not None else self.meta_type
        if self.tree is None:
            return RazTree(target, None)

        def map_node(data, level, name, l, r):
            if isinstance(data, Leaf):
                return Leaf(tuple(f(e) for e in data.items))
            return rebuild_tree_data(
                target,
                None if l is None else l.peek(),
                _PLACEHOLDER,
                level,
                name,
                None if r is None else r.peek(),
            )

        return RazTree(target, self.tree.map(map_node))

    def focus(self, index: Any) -> Optional[Raz]:
        """A cursor at ``index``, or None if the index is not in the sequence."""
        meta_type = self.meta_type
        index = meta_type.index_from(index)
        if self.tree is None:
            return Raz(meta_type)
        cursor = Cursor(self.tree, self._rebuild())
        while isinstance(data := cursor.peek(), Branch):
            nav = meta_type.navigate(data.left, data.right, index)
            if nav.direction is Direction.LEFT:
                _require(cursor.down_left())
                index = nav.index
            elif nav.direction is Direction.RIGHT:
                _require(cursor.down_right())
                index = nav.index
            elif nav.direction is Direction.HERE:
                _require(cursor.down_left())
                while cursor.down_right():
                    pass
                index = meta_type.last_index()
            else:
                return None
        l_cursor, tree, r_cursor = cursor.split()
        if tree is None or not isinstance(tree.peek(), Leaf):
            raise RuntimeError("focus did not reach a leaf")
        l_slice, r_slice = meta_type.split_vec(tree.peek().items, index)
        raz = Raz(meta_type)
        raz._l_forest = l_cursor
        raz._r_forest = r_cursor
        raz._l_stack.extend(l_slice)
        raz._r_stack.extend_rev(r_slice)
        return raz

    def focus_left(self) -> Raz:
        """A cursor before the first element."""
        raz = Raz(self.meta_type)
        if self.tree is None:
            return raz
        cursor = Cursor(self.tree, self._rebuild())
        while cursor.down_left():
            pass
        l_cursor, tree, r_cursor = cursor.split()
        if tree is None or not isinstance(tree.peek(), Leaf):
            raise RuntimeError("focus did not reach a leaf")
        raz._l_forest = l_cursor
        raz._r_forest = r_cursor
        raz._r_stack.extend_rev(tree.peek().items)
        return raz

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RazTree):
            return NotImplemented
        return self.meta_type is other.meta_type and self.tree == other.tree

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"RazTree(meta={self._meta!r}, tree={self.tree!r})"


class Raz:
    """A cursor into a sequence, for editing around a position."""

    __slots__ = ("_meta_type", "_rebuild", "_l_forest", "_l_stack", "_r_stack", "_r_forest")

    def __init__(self, meta_type: type = Count):
        self._meta_type = meta_type
        self._rebuild = partial(rebuild_tree_data, meta_type)
        self._l_forest = Cursor(None, self._rebuild)
        self._l_stack = ArchiveStack()
        self._r_stack = ArchiveStack()
        self._r_forest = Cursor(None, self._rebuild)

    def unfocus(self) -> RazTree:
        """Rebuild the whole sequence as a tree.

        The cursor's contents are consumed; use the returned tree and
        refocus it instead of using this cursor again.
        """
        rebuild = self._rebuild
        l_stack, r_stack = self._l_stack, self._r_stack
        l_lev = r_lev = None

        l_nm = _tree_name(l_stack)
        l_vec = None
        opened = l_stack.next_archive()
        if opened is not None:
            vec, l_lev = opened
            l_vec = vec or None
        r_nm = _tree_name(r_stack)
        r_vec = None
        opened = r_stack.next_archive()
        if opened is not None:
            vec, r_lev = opened
            r_vec = vec or None

        if l_vec is not None and r_vec is None:
            center = l_vec
        elif l_vec is None and r_vec is not None:
            center = r_vec[::-1]
        elif l_vec is not None and r_vec is not None:
            center = l_vec + r_vec[::-1]
        elif not l_stack.is_empty():
            l_nm = _tree_name(l_stack)
            center, l_lev = l_stack.next_archive()
        elif not r_stack.is_empty():
            r_nm = _tree_name(r_stack)
            vec, r_lev = r_stack.next_archive()
            center = vec[::-1]
        else:
            center = None

        if center is not None:
            cursor = Cursor(leaf(center), rebuild)
            next_nm = _tree_name(l_stack)
            while (opened := l_stack.next_archive()) is not None:
                vec, next_lev = opened
                if l_lev is None:
                    raise RuntimeError("archive boundary without a level")
                cursor = Cursor.join(Cursor(leaf(vec), rebuild), l_lev, l_nm, _PLACEHOLDER, cursor)
                l_lev, l_nm = next_lev, next_nm
                next_nm = _tree_name(l_stack)
            next_nm = _tree_name(r_stack)
            while (opened := r_stack.next_archive()) is not None:
                vec, next_lev = opened
                if r_lev is None:
                    raise RuntimeError("archive boundary without a level")
                cursor = Cursor.join(cursor, r_lev, r_nm, _PLACEHOLDER, Cursor(leaf(vec[::-1]), rebuild))
                r_lev, r_nm = next_lev, next_nm
                next_nm = _tree_name(r_stack)
            while cursor.up() is not UpResult.FAIL:
                pass
            tree = cursor.at_tree()
        elif self._l_forest.up() is not UpResult.FAIL:
            tree = self._l_forest.left_tree()
        elif self._r_forest.up() is not UpResult.FAIL:
            tree = self._r_forest.right_tree()
        else:
            return RazTree(self._meta_type, None)

        join_cursor = Cursor(tree, rebuild)
        l_forest, r_forest = self._l_forest, self._r_forest
        if l_forest.up() is not UpResult.FAIL:
            lev, nm = l_forest.peek_level(), l_forest.peek_name()
            l_forest.down_left_force(Force.DISCARD)
            join_cursor = Cursor.join(l_forest, lev, nm, _PLACEHOLDER, join_cursor)
        if r_forest.up() is not UpResult.FAIL:
            lev, nm = r_forest.peek_level(), r_forest.peek_name()
            r_forest.down_right_force(Force.DISCARD)
            join_cursor = Cursor.join(join_cursor, lev, nm, _PLACEHOLDER, r_forest)
        while join_cursor.up() is not UpResult.FAIL:
            pass
        return RazTree(self._meta_type, join_cursor.at_tree())

    def push_left(self, elm: Any) -> int:
        """Add an element left of the cursor; return the count of unarchived ones."""
        self._l_stack.push(elm)
        return self._l_stack.active_len()

    def push_right(self, elm: Any) -> int:
        """Add an element right of the cursor; return the count of unarchived ones."""
        self._r_stack.push(elm)
        return self._r_stack.active_len()

    def peek_left(self) -> Any:
        """The element left of the cursor, or None."""
        if not self._l_stack.is_empty():
            return self._l_stack.peek()
        forest = self._l_forest.copy()
        if forest.up() is UpResult.FAIL:
            return None
        forest.down_left()
        while forest.down_right():
            pass
        data = forest.peek()
        if not isinstance(data, Leaf):
            raise RuntimeError("peek_left: no left tree leaf")
        return data.items[-1] if data.items else None

    def peek_right(self) -> Any:
        """The element right of the cursor, or None."""
        if not self._r_stack.is_empty():
            return self._r_stack.peek()
        forest = self._r_forest.copy()
        if forest.up() is UpResult.FAIL:
            return None
        forest.down_right()
        while forest.down_left():
            pass
        data = forest.peek()
        if not isinstance(data, Leaf):
            raise RuntimeError("peek_right: no right tree leaf")
        return data.items[0] if data.items else None

    def archive_left(self, level: int, name: Optional[Name]) -> None:
        """Mark a subsequence boundary just left of the cursor."""
        self._l_stack.archive(name, level)

    def archive_right(self, level: int, name: Optional[Name]) -> None:
        """Mark a subsequence boundary just right of the cursor."""
        self._r_stack.archive(name, level)

    def pop_left(self) -> Any:
        """Remove and return the element left of the cursor, or None.

        A boundary passed on the way is removed.
        """
        if self._l_stack.is_empty():
            if self._l_forest.up() is UpResult.FAIL:
                return None
            self._l_forest.down_left_force(Force.DISCARD)
            while self._l_forest.down_right():
                pass
            data = self._l_forest.peek()
            if not isinstance(data, Leaf):
                raise RuntimeError("pop_left: no left tree leaf")
            self._l_stack.extend(data.items)
        return self._l_stack.pop()

    def pop_right(self) -> Any:
        """Remove and return the element right of the cursor, or None.

        A boundary passed on the way is removed.
        """
        if self._r_stack.is_empty():
            if self._r_forest.up() is UpResult.FAIL:
                return None
            self._r_forest.down_right_force(Force.DISCARD)
            while self._r_forest.down_left():
                pass
            data = self._r_forest.peek()
            if not isinstance(data, Leaf):
                raise RuntimeError("pop_right: no right tree leaf")
            self._r_stack.extend_rev(data.items)
        return self._r_stack.pop()

    def __repr__(self) -> str:
        return f"Raz(left={list(self._l_stack)!r}, right={list(self._r_stack)!r})"