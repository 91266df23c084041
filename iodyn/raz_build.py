"""Build raz trees from archive stacks.

An archive stack whose archives carry levels as metadata describes a
sequence split into subsequences.  These functions turn such a stack
into a ``RazTree`` whose branch nodes are the archive boundaries, with
higher levels nearer the root.  A left branch never has the same level
as its parent; a right branch may.
"""

from __future__ import annotations

from typing import Optional

from .archive_stack import ArchiveStack, AtHead, AtTail
from .level_tree import Tree
from .names import Name
from .raz import RazTree, branch, leaf
from .raz_meta import Count

__all__ = ["from_tail_stack", "from_head_stack"]

_U32_MAX = 2**32 - 1

_Partial = tuple[ArchiveStack, Optional[int], Optional[Name], Tree]


def _open_next(stack: ArchiveStack) -> tuple[list, Optional[int]]:
    opened = stack.next_archive()
    if opened is None:
        raise ValueError("stack was unexpectedly empty")
    return opened


def _check_done(result: _Partial) -> Tree:
    stack, level, name, tree = result
    if level is not None or name is not None or not stack.is_empty():
        raise RuntimeError("stack was not fully consumed")
    return tree


def _from_tail(
    stack: ArchiveStack,
    first_level: int,
    first_name: Optional[Name],
    accum_tree: Tree,
    max_level: int,
    meta_type: type,
) -> _Partial:
    if accum_tree.level() > first_level or first_level >= max_level:
        raise ValueError("archive levels are out of order")
    next_name = stack.name()
    vec, next_level = _open_next(stack)
    leaf_tree = leaf(vec)
    if next_level is None:
        shorter, final_level, final_name, small_tree = ArchiveStack(), None, None, leaf_tree
    elif next_level < first_level:
        shorter, final_level, final_name, small_tree = _from_tail(
            stack, next_level, next_name, leaf_tree, first_level, meta_type
        )
    else:
        shorter, final_level, final_name, small_tree = stack, next_level, next_name, leaf_tree
    new_tree = branch(small_tree, first_level, first_name, accum_tree, meta_type)
    if final_level is None:
        return ArchiveStack(), None, None, new_tree
    if final_level < max_level:
        return _from_tail(shorter, final_level, final_name, new_tree, max_level, meta_type)
    return shorter, final_level, final_name, new_tree


def _from_head(
    stack: ArchiveStack,
    first_level: int,
    first_name: Optional[Name],
    accum_tree: Tree,
    max_level: int,
    meta_type: type,
) -> _Partial:
    if accum_tree.level() >= first_level or first_level > max_level:
        raise ValueError("archive levels are out of order")
    next_name = stack.name()
    vec, next_level = _open_next(stack)
    leaf_tree = leaf(vec[::-1])
    if next_level is None:
        shorter, final_level, final_name, small_tree = ArchiveStack(), None, None, leaf_tree
    elif next_level <= first_level:
        shorter, final_level, final_name, small_tree = _from_head(
            stack, next_level, next_name, leaf_tree, first_level, meta_type
        )
    else:
        shorter, final_level, final_name, small_tree = stack, next_level, next_name, leaf_tree
    new_tree = branch(accum_tree, first_level, first_name, small_tree, meta_type)
    if final_level is None:
        return ArchiveStack(), None, None, new_tree
    if final_level <= max_level:
        return _from_head(shorter, final_level, final_name, new_tree, max_level, meta_type)
    return shorter, final_level, final_name, new_tree


def from_tail_stack(tailstack: AtTail, meta_type: type = Count) -> RazTree:
    """Build a tree from a stack whose top is the end of the sequence.

    The given stack is left unchanged.
    """
    stack = tailstack.stack.copy()
    name = stack.name()
    opened = stack.next_archive()
    if opened is None:
        return RazTree(meta_type, None)
    vec, level = opened
    if level is None:
        return RazTree(meta_type, leaf(vec))
    result = _from_tail(stack, level, name, leaf(vec), _U32_MAX, meta_type)
    return RazTree(meta_type, _check_done(result))


def from_head_stack(headstack: AtHead, meta_type: type = Count) -> RazTree:
    """Build a tree from a stack whose top is the start of the sequence.

    Each archived list is reversed, since its last pushed element comes
    first in the sequence.  The given stack is left unchanged.
    """
    stack = headstack.stack.copy()
    name = stack.name()
    opened = stack.next_archive()
    if opened is None:
        return RazTree(meta_type, None)
    vec, level = opened
    if level is None:
        return RazTree(meta_type, leaf(vec[::-1]))
    result = _from_head(stack, level, name, leaf(vec[::-1]), _U32_MAX, meta_type)
    return RazTree(meta_type, _check_done(result))