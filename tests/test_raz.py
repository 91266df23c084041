import random

import pytest

from iodyn.level_tree import gen_branch_level, good_levels
from iodyn.names import name_of_string, name_of_usize, name_pair
from iodyn.raz import (
    Branch,
    Leaf,
    Raz,
    RazTree,
    branch,
    leaf,
    rebuild_tree_data,
)
from iodyn.raz_meta import Count, Names, NoMeta
from iodyn.tree_cursor import Cursor, UpResult


def example_tree():
    a = leaf([1, 2], None)
    b = leaf([3, 4], None)
    c = leaf([5, 6], None)
    d = leaf([7, 8], None)
    e = leaf([9, 10], None)
    f = leaf([11, 12], None)
    one = branch(b, 1, name_of_usize(1), c, Count)
    two = branch(one, 2, name_of_usize(2), d, Count)
    three = branch(a, 3, name_of_usize(3), two, Count)
    four = branch(e, 4, name_of_usize(4), f, Count)
    five = branch(three, 5, name_of_usize(5), four, Count)
    return RazTree(Count, five)


def built_tree():
    r = Raz(Count)
    r.push_left(3)
    r.push_left(4)
    r.archive_left(1, name_of_usize(1))
    r.push_right(8)
    r.push_right(7)
    r.archive_right(2, name_of_usize(2))
    r.push_left(5)
    r.push_right(6)
    t = r.unfocus()
    r = t.focus(0)
    r.push_left(1)
    r.push_left(2)
    r.archive_left(3, name_of_usize(3))
    t = r.unfocus()
    r = t.focus(8)
    r.archive_left(5, name_of_usize(5))
    r.push_left(9)
    r.push_left(10)
    r.push_right(12)
    r.push_right(11)
    r.archive_right(4, name_of_usize(4))
    return r.unfocus()


def test_push_pop():
    raz = Raz(NoMeta)
    raz.push_left(5)
    raz.push_left(4)
    raz.push_right(8)
    assert raz.pop_left() == 4
    assert raz.pop_right() == 8
    assert raz.pop_left() == 5
    assert raz.pop_right() is None


def test_push_returns_active_count():
    raz = Raz()
    assert raz.push_left(1) == 1
    assert raz.push_left(2) == 2
    raz.archive_left(1, None)
    assert raz.push_left(3) == 1
    assert raz.push_right(9) == 1


def test_tree_focus():
    tree = example_tree()
    assert good_levels(tree.tree)

    left = tree.focus(0)
    deep = tree.focus(5)
    right = tree.focus(12)

    assert left.pop_right() == 1
    assert right.pop_left() == 12
    assert right.pop_right() is None
    assert deep.pop_left() == 5

    for expected in [6, 7, 8, 9, 10, 11, 12]:
        assert deep.pop_right() == expected
    assert deep.pop_right() is None

    assert right.pop_left() == 11
    assert right.pop_left() == 10

    for expected in [4, 3, 2, 1]:
        assert deep.pop_left() == expected
    assert deep.pop_left() is None


def test_focus_out_of_range_is_none():
    assert example_tree().focus(13) is None


def test_focus_left_reads_all():
    raz = example_tree().focus_left()
    assert raz.pop_left() is None
    popped = []
    while (x := raz.pop_right()) is not None:
        popped.append(x)
    assert popped == list(range(1, 13))


def test_unfocus():
    t = built_tree()
    assert good_levels(t.tree)
    assert t.meta() == Count(12)

    r = t.focus(7)
    for expected in [7, 6, 5, 4, 3, 2, 1]:
        assert r.pop_left() == expected
    t = r.unfocus()
    r = t.focus(5)
    assert r.pop_right() is None
    for expected in [12, 11, 10, 9, 8]:
        assert r.pop_left() == expected
    assert r.pop_left() is None


def test_unfocus_empty():
    t = Raz(Count).unfocus()
    assert t.is_empty()
    assert t.meta() == Count(0)


def test_fold_up():
    tree = example_tree()
    assert good_levels(tree.tree)
    assert tree.fold_up(lambda e: e, max) == 12
    assert tree.fold_up(lambda e: e, lambda a, b: a + b) == sum(range(1, 13))
    even_odd = tree.fold_up(
        lambda e: "even" if e % 2 == 0 else "odd",
        lambda a, b: "even" if a == b else "odd",
    )
    assert even_odd == "even"


def test_fold_up_empty_is_none():
    assert RazTree.empty(Count).fold_up(lambda e: e, lambda a, b: a + b) is None


def test_fold_up_nl_adds_levels():
    total = example_tree().fold_up_nl(
        lambda e: e, lambda a, b: a + b, lambda l, lv, n, r: l + lv + r
    )
    assert total == 78 + 15


def test_fold_up_gauged():
    count = example_tree().fold_up_gauged(len, lambda l, lv, n, r: l + r)
    assert count == 12


def test_map():
    tree = example_tree()
    plus1 = tree.map(lambda e: e + 1)
    assert plus1.fold_up(lambda e: e, lambda a, b: a + b) == sum(range(2, 14))

    cursor = Cursor(plus1.tree)
    assert cursor.down_left()
    assert cursor.down_left()
    assert cursor.peek() == Leaf((2, 3))
    assert cursor.up() is not UpResult.FAIL
    assert cursor.down_right()
    assert cursor.down_left()
    assert cursor.down_left()
    assert cursor.peek() == Leaf((4, 5))


def test_fold_lr():
    assert example_tree().fold_lr(0, lambda a, e: a + e) == 78
    assert example_tree().fold_lr([], lambda a, e: a + [e]) == list(range(1, 13))


def test_fold_lr_meta():
    t = built_tree()
    sums = t.fold_lr_meta(
        (0, 0),
        lambda acc, e: (acc[0], acc[1] + e),
        lambda acc, meta: (acc[0] + meta[0], acc[1]),
    )
    assert sums == (sum(range(1, 6)), sum(range(1, 13)))

    raz_string = t.fold_lr_meta("s", lambda l, r: f"{l},{r}", lambda l, _: f"{l},n")
    assert raz_string == "s,1,2,n,3,4,n,5,6,n,7,8,n,9,10,n,11,12"


def test_fold_lr_archive():
    result = example_tree().fold_lr_archive(
        [],
        lambda a, e: a + [e],
        lambda a, n: a + ["|"],
        lambda a, lev: a + [f"L{lev}"],
    )
    assert result == [
        1, 2, "|", "L3", 3, 4, "|", "L1", 5, 6, "|", "L2",
        7, 8, "|", "L5", 9, 10, "|", "L4", 11, 12, "|",
    ]


def test_names_many_edits():
    rng = random.Random(12345)
    r = Raz(Count)
    for i in range(1000):
        r.push_left(i)
        r.archive_left(gen_branch_level(rng), name_of_usize(i))
    t = r.unfocus()

    def collect(tree):
        return tree.fold_lr_meta([], lambda a, _e: a, lambda a, meta: a + [meta[1]])

    original_names = collect(t)
    for i in range(1000):
        r = t.focus(rng.randrange(1000))
        if rng.random() < 0.5:
            r.push_left(i)
        else:
            r.push_right(i)
        t = r.unfocus()
    new_names = collect(t)

    assert len(original_names) == 999
    assert original_names == new_names
    assert t.meta() == Count(2000)


def test_name_indexes():
    rng = random.Random(99)
    r = Raz(Names)
    for i in range(1000):
        r.push_left(i)
        if i % 10 == 0:
            r.archive_left(gen_branch_level(rng), name_of_usize(i))
    t = r.unfocus()

    for _ in range(10):
        val = rng.randrange(100) * 10
        tree_name = name_pair(name_of_usize(val), name_of_string("tree"))
        focused = t.focus(tree_name)
        assert focused.peek_left() == val


def test_name_index_missing_is_none():
    r = Raz(Names)
    for i in range(50):
        r.push_left(i)
        if i % 10 == 0:
            r.archive_left(1 + i % 3, name_of_usize(i))
    t = r.unfocus()
    missing = name_pair(name_of_usize(5), name_of_string("tree"))
    assert t.focus(missing) is None


def test_peek_pop():
    raz = example_tree().focus(6)
    count = 0
    while (peek := raz.peek_left()) is not None:
        assert raz.pop_left() == peek
        count += 1
    assert count == 6
    count = 0
    while (peek := raz.peek_right()) is not None:
        assert raz.pop_right() == peek
        count += 1
    assert count == 6


def test_from_vec_and_join():
    assert RazTree.from_vec([]) is None
    left = RazTree.from_vec([1, 2])
    right = RazTree.from_vec([3])
    assert left.meta() == Count(2)
    joined = RazTree.join(left, 1, None, right)
    assert joined.meta() == Count(3)
    assert joined.fold_lr([], lambda a, e: a + [e]) == [1, 2, 3]
    assert RazTree.join(left, 1, None, RazTree.empty()) is None


def test_empty_tree_focus_gives_empty_raz():
    raz = RazTree.empty(Count).focus(0)
    assert raz.pop_left() is None
    assert raz.pop_right() is None


def test_rebuild_tree_data():
    old_leaf = Leaf((1, 2))
    assert rebuild_tree_data(Count, None, old_leaf, 0, None, None) is old_leaf
    rebuilt = rebuild_tree_data(Count, Leaf((1, 2)), Branch(Count(0), Count(0)), 1, None, None)
    assert rebuilt == Branch(Count(2), Count(0))
    combined = rebuild_tree_data(Count, Branch(Count(1), Count(2)), Branch(Count(0), Count(0)), 2, None, Leaf((5,)))
    assert combined == Branch(Count(3), Count(1))


def test_count_split_index_too_high_raises():
    tree = RazTree.from_vec([1, 2])
    with pytest.raises(IndexError):
        tree.focus(5)