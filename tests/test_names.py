import pytest

from iodyn.names import (
    Name,
    name_fork,
    name_of_string,
    name_of_usize,
    name_pair,
    name_unit,
)


def test_same_construction_is_equal_and_hashes_equal():
    names = {
        name_of_usize(5),
        name_of_usize(5),
        name_of_string("start"),
        name_of_string("start"),
        name_unit(),
        name_unit(),
    }
    assert len(names) == 3
    lookup = {name_of_usize(5): "five", name_of_string("start"): "start"}
    assert lookup[name_of_usize(5)] == "five"
    assert lookup[name_of_string("start")] == "start"


def test_different_parts_differ():
    assert name_of_usize(1) != name_of_usize(2)
    assert name_of_string("tree") != name_of_string("start")
    assert name_of_usize(1) != name_unit()


def test_usable_as_dict_keys():
    table = {name_of_usize(i): i for i in range(10)}
    assert len(table) == 10
    assert table[name_of_usize(7)] == 7


def test_pair_order_matters():
    a = name_of_usize(1)
    b = name_of_string("tree")
    assert name_pair(a, b) == name_pair(a, b)
    assert name_pair(a, b) != name_pair(b, a)


def test_fork_is_deterministic_and_distinct():
    n = name_of_usize(3)
    left, right = name_fork(n)
    assert (left, right) == name_fork(n)
    assert left != right
    assert n not in (left, right)
    assert set(name_fork(left)).isdisjoint({left, right, n})


def test_forks_of_different_names_differ():
    assert name_fork(name_of_usize(1))[0] != name_fork(name_of_usize(2))[0]


def test_str_of_usize_shows_number():
    assert str(name_of_usize(5)) == "5"


def test_name_of_usize_rejects_negative():
    with pytest.raises(ValueError):
        name_of_usize(-1)


def test_name_of_usize_rejects_too_large():
    with pytest.raises(ValueError):
        name_of_usize(2**64)


def test_name_of_usize_rejects_non_int():
    with pytest.raises(TypeError):
        name_of_usize(True)
    with pytest.raises(TypeError):
        name_of_usize("3")


def test_name_of_string_rejects_non_str():
    with pytest.raises(TypeError):
        name_of_string(3)


def test_pair_and_fork_reject_non_names():
    with pytest.raises(TypeError):
        name_pair(name_unit(), "x")
    with pytest.raises(TypeError):
        name_fork("x")


def test_names_are_immutable():
    n = name_of_usize(4)
    with pytest.raises(AttributeError):
        n.key = ("usize", 5)
    assert isinstance(n, Name) and n == name_of_usize(4)