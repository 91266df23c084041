"""Persistent binary trees whose shape is fixed by the levels of their nodes.

Every node carries a level.  By convention a left branch never has a
higher level than its parent and a right branch always has a lower one,
so all trees built from the same levels have the same shape, whatever
the data or the order of the operations that built them.
"""

from __future__ import annotations

import random
from typing import Any, Callable, Optional

from .names import Name, name_of_string

_U32_MAX = 2**32 - 1
_U64_MASK = 2**64 - 1
_RNG = random.Random()


class Tree:
    """An immutable tree node with a level, an optional name and data."""

    __slots__ = ("_level", "_name", "_data", "_left", "_right")

    def __init__(
        self,
        level: int,
        name: Optional[Name],
        data: Any,
        l_branch: Optional[Tree] = None,
        r_branch: Optional[Tree] = None,
    ):
        if isinstance(level, bool) or not isinstance(level, int):
            raise TypeError(f"level must be an int, got {type(level).__name__}")
        if level < 0 or level > _U32_MAX:
            raise ValueError(f"level {level} is out of range")
        self._level = level
        self._name = name
        self._data = data
        self._left = l_branch
        self._right = r_branch

    def level(self) -> int:
        """The level of this node."""
        return self._level

    def name(self) -> Optional[Name]:
        """The name of this node, if it has one."""
        return self._name

    def l_tree(self) -> Optional[Tree]:
        """The left subtree, if there is one."""
        return self._left

    def r_tree(self) -> Optional[Tree]:
        """The right subtree, if there is one."""
        return self._right

    def peek(self) -> Any:
        """The data held at this node."""
        return self._data

    def fold_up(self, node_calc: Callable[[Any, Any, Any], Any]) -> Any:
        """Fold from the leaves to the root.

        ``node_calc(left_result, data, right_result)`` is called for every
        node; a missing branch gives None.
        """
        return self.fold_up_meta(lambda l, d, _lv, _n, r: node_calc(l, d, r))

    def fold_up_meta(self, node_calc: Callable[[Any, Any, int, Optional[Name], Any], Any]) -> Any:
        """Fold from the leaves to the root, with levels and names.

        ``node_calc(left_result, data, level, name, right_result)``.
        """
        left = None if self._left is None else self._left.fold_up_meta(node_calc)
        right = None if self._right is None else self._right.fold_up_meta(node_calc)
        return node_calc(left, self._data, self._level, self._name, right)

    def fold_lr(self, accum: Any, node_calc: Callable[[Any, Any], Any]) -> Any:
        """Fold over the nodes in order, left to right."""
        return self.fold_lr_meta(
            name_of_string("start"), accum, lambda a, e, _lv, _n: node_calc(a, e)
        )

    def fold_lr_meta(
        self,
        start_name: Optional[Name],
        accum: Any,
        node_calc: Callable[[Any, Any, int, Optional[Name]], Any],
    ) -> Any:
        """Fold over the nodes in order, with levels and names.

        ``node_calc(accum, data, level, name)``.  A leaf receives the name
        carried from the nearest named node to its left (``start_name``
        for the leftmost leaf); every other node receives its own name.
        """
        if self._left is None and self._right is None:
            return node_calc(accum, self._data, self._level, start_name)
        if self._left is not None:
            accum = self._left.fold_lr_meta(start_name, accum, node_calc)
        accum = node_calc(accum, self._data, self._level, self._name)
        if self._right is not None:
            accum = self._right.fold_lr_meta(self._name, accum, node_calc)
        return accum

    def map(
        self,
        map_val: Callable[[Any, int, Optional[Name], Optional[Tree], Optional[Tree]], Any],
    ) -> Tree:
        """Build a tree of the same shape with mapped data.

        ``map_val(data, level, name, mapped_left, mapped_right)`` gives the
        new data of a node; the branches are mapped first.
        """
        left = None if self._left is None else self._left.map(map_val)
        right = None if self._right is None else self._right.map(map_val)
        new_data = map_val(self._data, self._level, self._name, left, right)
        return Tree(self._level, self._name, new_data, left, right)

    def _key(self) -> tuple:
        return (self._level, self._name, self._data, self._left, self._right)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tree):
            return NotImplemented
        return self is other or self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return (
            f"Tree(level={self._level!r}, name={self._name!r}, data={self._data!r}, "
            f"left={self._left!r}, right={self._right!r})"
        )


def good_levels(tree: Tree) -> bool:
    """Check that levels do not increase to the left and decrease to the right.

    Visits the whole tree and prints a line for each offending branch.
    """
    good = True
    left = tree.l_tree()
    if left is not None:
        if left.level() > tree.level():
            print(f"Tree with level {tree.level()} has left branch with level {left.level()}")
            good = False
        if not good_levels(left):
            good = False
    right = tree.r_tree()
    if right is not None:
        if right.level() >= tree.level():
            print(f"Tree with level {tree.level()} has right branch with level {right.level()}")
            good = False
        if not good_levels(right):
            good = False
    return good


def gen_branch_level(rng: Any) -> int:
    """Draw a level suited to a balanced binary tree.

    Levels follow a negative binomial distribution, like the heights of
    nodes in a balanced tree.  The result is between 1 and 64; 0 is
    never produced, leaving it for leaves.  ``rng`` needs ``getrandbits``.
    """
    num = (rng.getrandbits(64) << 1) & _U64_MASK
    if num == 0:
        return 64
    return (num & -num).bit_length() - 1


def inc_level() -> int:
    """Draw a branch level from a module-wide random generator."""
    return gen_branch_level(_RNG)