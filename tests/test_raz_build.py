import pytest

from iodyn.archive_stack import ArchiveStack, AtHead, AtTail
from iodyn.level_tree import good_levels
from iodyn.names import name_of_usize
from iodyn.raz import Leaf
from iodyn.raz_build import from_head_stack, from_tail_stack
from iodyn.raz_meta import Count, NoMeta
from iodyn.tree_cursor import Cursor, UpResult


def _tail_stack():
    stack = ArchiveStack()
    for a, b, lev in [(1, 2, 3), (3, 4, 1), (5, 6, 2), (7, 8, 5), (9, 10, 4)]:
        stack.push(a)
        stack.push(b)
        stack.archive(name_of_usize(lev), lev)
    stack.push(11)
    stack.push(12)
    return stack


def _head_stack():
    stack = ArchiveStack()
    for a, b, lev in [(12, 11, 4), (10, 9, 5), (8, 7, 2), (6, 5, 1), (4, 3, 3)]:
        stack.push(a)
        stack.push(b)
        stack.archive(name_of_usize(lev), lev)
    stack.push(2)
    stack.push(1)
    return stack


def _leaf_items(cursor):
    data = cursor.peek()
    assert isinstance(data, Leaf)
    return data.items


def _check_structure(tree):
    cursor = Cursor(tree)
    assert cursor.down_left()
    assert cursor.down_left()
    assert _leaf_items(cursor) == (1, 2)
    assert cursor.up() is not UpResult.FAIL
    assert cursor.down_right()
    assert cursor.down_left()
    assert cursor.down_left()
    assert _leaf_items(cursor) == (3, 4)
    assert cursor.up() is not UpResult.FAIL
    assert cursor.down_right()
    assert _leaf_items(cursor) == (5, 6)
    assert cursor.up() is not UpResult.FAIL
    assert cursor.up() is not UpResult.FAIL
    assert cursor.down_right()
    assert _leaf_items(cursor) == (7, 8)
    assert cursor.up() is not UpResult.FAIL
    assert cursor.up() is not UpResult.FAIL
    assert cursor.up() is not UpResult.FAIL
    assert cursor.down_right()
    assert cursor.down_right()
    assert _leaf_items(cursor) == (11, 12)
    assert cursor.up() is not UpResult.FAIL
    assert cursor.down_left()
    assert _leaf_items(cursor) == (9, 10)


def _levels_in_order(raz):
    return raz.fold_lr_meta([], lambda a, _e: a, lambda a, meta: a + [meta[0]])


def test_from_tail_stack():
    raz = from_tail_stack(AtTail(_tail_stack()))
    assert good_levels(raz.tree)
    assert raz.fold_up(lambda e: e, lambda a, b: a + b) == sum(range(1, 13))
    _check_structure(raz.tree)


def test_from_head_stack():
    raz = from_head_stack(AtHead(_head_stack()))
    assert good_levels(raz.tree)
    assert raz.fold_up(lambda e: e, lambda a, b: a + b) == sum(range(1, 13))
    _check_structure(raz.tree)


@pytest.mark.parametrize(
    "build",
    [lambda: from_tail_stack(AtTail(_tail_stack())), lambda: from_head_stack(AtHead(_head_stack()))],
)
def test_boundaries_and_root(build):
    raz = build()
    assert _levels_in_order(raz) == [3, 1, 2, 5, 4]
    assert raz.tree.name() == name_of_usize(5)
    assert raz.tree.level() == 5
    assert raz.meta() == Count(12)
    assert raz.fold_lr([], lambda a, e: a + [e]) == list(range(1, 13))


def test_tail_stack_is_left_unchanged():
    stack = _tail_stack()
    before = list(stack)
    from_tail_stack(AtTail(stack))
    assert list(stack) == before
    assert stack.active_len() == 2


def test_head_stack_is_left_unchanged():
    stack = _head_stack()
    before = list(stack)
    from_head_stack(AtHead(stack))
    assert list(stack) == before


def test_empty_stacks_give_empty_trees():
    assert from_tail_stack(AtTail(ArchiveStack())).is_empty()
    assert from_head_stack(AtHead(ArchiveStack())).is_empty()


def test_single_list_tail():
    raz = from_tail_stack(AtTail(ArchiveStack([1, 2, 3])))
    assert raz.tree.peek() == Leaf((1, 2, 3))
    assert raz.meta() == Count(3)


def test_single_list_head_is_reversed():
    raz = from_head_stack(AtHead(ArchiveStack([1, 2, 3])))
    assert raz.tree.peek() == Leaf((3, 2, 1))


def test_focus_after_build():
    raz = from_tail_stack(AtTail(_tail_stack()))
    cursor = raz.focus(6)
    assert cursor.pop_left() == 6
    assert cursor.pop_right() == 7


def test_other_meta_type():
    raz = from_tail_stack(AtTail(_tail_stack()), NoMeta)
    assert raz.meta_type is NoMeta
    assert raz.meta() == NoMeta()
    assert raz.fold_up(lambda e: e, max) == 12
    assert raz.focus_left().pop_right() == 1