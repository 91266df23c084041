"""Symbolic names that identify archived data and memoized computations."""

from __future__ import annotations

from dataclasses import dataclass

_USIZE_MAX = 2**64 - 1


@dataclass(frozen=True)
class Name:
    """An immutable, hashable identifier.

    Names are built from unsigned numbers, strings, pairs of names and
    forks of names.  Two names are equal exactly when they were built
    the same way from equal parts.
    """

    key: tuple

    def __str__(self) -> str:
        kind = self.key[0]
        if kind == "unit":
            return "()"
        if kind == "usize":
            return str(self.key[1])
        if kind == "string":
            return repr(self.key[1])
        if kind == "pair":
            return f"({self.key[1]},{self.key[2]})"
        _, side, parent = self.key
        return f"{parent}.{side}"


def name_unit() -> Name:
    """Return the unit name."""
    return Name(("unit",))


def name_of_usize(n: int) -> Name:
    """Return the name of an unsigned machine-sized integer."""
    if isinstance(n, bool) or not isinstance(n, int):
        raise TypeError(f"expected a non-negative int, got {type(n).__name__}")
    if n < 0 or n > _USIZE_MAX:
        raise ValueError(f"{n} is out of range for an unsigned name")
    return Name(("usize", n))


def name_of_string(s: str) -> Name:
    """Return the name of a string."""
    if not isinstance(s, str):
        raise TypeError(f"expected a str, got {type(s).__name__}")
    return Name(("string", s))


def name_pair(first: Name, second: Name) -> Name:
    """Combine two names into one; the order of the parts matters."""
    for part in (first, second):
        if not isinstance(part, Name):
            raise TypeError(f"expected a Name, got {type(part).__name__}")
    return Name(("pair", first, second))


def name_fork(name: Name) -> tuple[Name, Name]:
    """Derive two distinct names from one."""
    if not isinstance(name, Name):
        raise TypeError(f"expected a Name, got {type(name).__name__}")
    return Name(("fork", 1, name)), Name(("fork", 2, name))