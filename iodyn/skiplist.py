"""A persistent skip-list keyed by hash bits, used as a finite map.

Every update adds a new path node at the head of the list.  A path
node holds the keys whose masked hash equals its own, and one pointer
for each hash bit.  Following the pointers where the bits of a key's
hash differ from a node's leads to the node for that key, if there is
one.  Each new head node is named by the list's current name and a
counter; ``archive`` switches to a new name and restarts the counter.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Hashable, Optional

from .names import Name, name_of_usize, name_pair

__all__ = ["Skiplist"]

_U64_MASK = 2**64 - 1


def _key_hash(key: Hashable) -> int:
    """A well-mixed 64-bit hash of ``key``."""
    z = (hash(key) + 0x9E3779B97F4A7C15) & _U64_MASK
    z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & _U64_MASK
    z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & _U64_MASK
    return z ^ (z >> 31)


@dataclass(frozen=True, eq=False)
class _Path:
    """A node: the key-value pairs sharing one masked hash, and one pointer per bit."""

    name: Name
    hash: int
    kvs: tuple
    paths: tuple


@dataclass(frozen=True)
class _Step:
    paths: list
    next: Optional[_Path]
    kvs: Optional[tuple]


def _step(path: _Path, path_len: int, key_bits: int, key_biti: int) -> _Step:
    key_bits >>= key_biti
    hsh_bits = path.hash >> key_biti
    if hsh_bits == key_bits:
        return _Step(list(path.paths[key_biti:path_len]), None, path.kvs)
    cur_paths: list = []
    for i in range(key_biti, path_len):
        pointer = path.paths[i]
        if (key_bits & 1) == (hsh_bits & 1):
            cur_paths.append(pointer)
            key_bits >>= 1
            hsh_bits >>= 1
            continue
        cur_paths.append(path)
        if pointer is None:
            cur_paths.extend([None] * (path_len - i - 1))
            return _Step(cur_paths, None, None)
        return _Step(cur_paths, pointer, None)
    raise RuntimeError("no more bits to compare")


def _search(path_len: int, key_hash: int, start: _Path, cursor: list) -> Optional[tuple]:
    """Walk from ``start`` towards ``key_hash``, filling ``cursor`` with pointers.

    Returns the key-value pairs of the node with that hash, or None.
    """
    current = start
    while True:
        res = _step(current, path_len, key_hash, len(cursor))
        cursor.extend(res.paths)
        if res.kvs is not None:
            if len(cursor) != path_len:
                raise RuntimeError("incomplete path for a matching hash")
            return res.kvs
        if res.next is None:
            if len(cursor) != path_len:
                raise RuntimeError("incomplete path for a missing hash")
            return None
        current = res.next


class Skiplist:
    """A persistent finite map from hashable keys to values.

    ``path_len`` is the number of hash bits used.  A stored value of
    None is the same as no mapping.
    """

    __slots__ = ("_path_len", "_mask", "_name", "_cntr", "_head")

    def __init__(self, path_len: int, name: Name):
        if isinstance(path_len, bool) or not isinstance(path_len, int):
            raise TypeError(f"path_len must be an int, got {type(path_len).__name__}")
        if path_len <= 0:
            raise ValueError("path_len must be positive")
        self._path_len = path_len
        self._mask = (1 << path_len) - 1
        self._name = name
        self._cntr = 1
        self._head: Optional[_Path] = None

    def archive(self, name: Name) -> None:
        """Name the nodes created from now on after ``name``."""
        self._name = name
        self._cntr = 0

    def _lookup(self, key: Hashable) -> tuple[int, list, Optional[tuple]]:
        key_hash = _key_hash(key) & self._mask
        cursor: list = []
        kvs = None
        if self._head is not None:
            kvs = _search(self._path_len, key_hash, self._head, cursor)
        return key_hash, cursor, kvs

    def ext(self, k: Hashable, opv: Any) -> Any:
        """Map ``k`` to ``opv`` (None removes it); return the previous value or None."""
        key_hash, cursor, old_kvs = self._lookup(k)
        old_value = None
        if old_kvs is None:
            cursor.extend([None] * (self._path_len - len(cursor)))
            new_kvs = [(k, opv)]
        else:
            new_kvs = []
            found = False
            for k0, v0 in old_kvs:
                if k0 == k:
                    new_kvs.append((k0, opv))
                    old_value = v0
                    found = True
                else:
                    new_kvs.append((k0, v0))
            if not found:
                new_kvs.append((k, opv))
        node_name = name_pair(self._name, name_of_usize(self._cntr))
        self._head = _Path(node_name, key_hash, tuple(new_kvs), tuple(cursor))
        self._cntr += 1
        return old_value

    def put(self, k: Hashable, v: Any) -> None:
        """Map ``k`` to ``v``."""
        self.ext(k, v)

    def rem(self, k: Hashable) -> Any:
        """Remove ``k``; return its previous value or None."""
        return self.ext(k, None)

    def get(self, k: Hashable) -> Any:
        """The value mapped to ``k``, or None."""
        _, _, kvs = self._lookup(k)
        if kvs is None:
            return None
        for k0, value in kvs:
            if k0 == k:
                return value
        return None

    def __repr__(self) -> str:
        return f"Skiplist(path_len={self._path_len!r}, name={self._name!r})"