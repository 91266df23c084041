# iodyn

Sequence data structures built around archived subsequences: an
editable cursor into a sequence (`Raz`), a tree form of the whole
sequence for folds and maps (`RazTree`), and the pieces they are made of.

## Modules

- `iodyn.names`: `Name`, an immutable, hashable identifier, built with
  `name_unit`, `name_of_usize`, `name_of_string`, `name_pair` and
  `name_fork`. Names label archives and tree nodes.
- `iodyn.stack`: a persistent cons-list, `Stack` (possibly empty) and
  `Head` (at least one element), iterated from the top down.
- `iodyn.archive_stack`: `ArchiveStack`, a mutable active list in front
  of a persistent stack of archived lists, each stored with a name and
  metadata. `pop` opens archives as needed; `next_archive` opens the next
  one and returns the previous active list with the opened archive's
  metadata. `AtHead` and `AtTail` say which end of the sequence the stack's
  top stands for.
- `iodyn.level_tree`: `Tree`, an immutable binary tree whose nodes carry
  levels, with `fold_up`, `fold_up_meta`, `fold_lr`, `fold_lr_meta` and
  `map`. `good_levels` checks that levels do not increase to the left and
  decrease to the right, printing each offending branch. `gen_branch_level`
  draws a level (1 to 64) from any object with `getrandbits`; `inc_level`
  does so from a module-wide generator.
- `iodyn.raz_meta`: branch metadata used to find positions in a tree:
  `Count` (element offsets; `Count.last_index()` means the end), `Names`
  (the set of names in a branch; focus on a name or a `Position`) and
  `NoMeta` (start and end only). `RazMeta` is the interface they share.
- `iodyn.tree_cursor`: `Cursor`, a position in a level tree with
  `down_left`, `down_right`, `up`, `split` and `Cursor.join`; moving up
  from a changed position rebuilds the upper node's data. `into_iters`
  gives an `IterR` over the nodes to the right.
- `iodyn.raz`: `Raz` (editing) and `RazTree` (whole sequence), plus the
  tree data types `Leaf` and `Branch` and the helpers `leaf`, `branch` and
  `rebuild_tree_data`.
- `iodyn.raz_build`: `from_tail_stack` and `from_head_stack` build a
  `RazTree` from an `AtTail` or `AtHead` view of an archive stack whose
  archives carry levels as metadata.
- `iodyn.skiplist`: `Skiplist`, a finite map stored as a persistent
  skip-list of hash-bit paths, with `put`, `get`, `rem`, `ext` and
  `archive`.

## Example

```python
from iodyn.raz import Raz
from iodyn.raz_meta import Count
from iodyn.names import name_of_usize
from iodyn.level_tree import inc_level

raz = Raz(Count)
for i in range(100):
    raz.push_left(i)
    if i % 10 == 0:
        raz.archive_left(inc_level(), name_of_usize(i))

tree = raz.unfocus()
total = tree.fold_up(lambda e: e, lambda a, b: a + b)   # 4950

cursor = tree.focus(50)
cursor.pop_left()    # 49
cursor.peek_right()  # 50
```

Build a sequence by pushing into a `Raz`, calling `archive_left` or
`archive_right` now and then to mark subsequence boundaries with a level
and a name. `unfocus` turns the cursor into a `RazTree`; `focus` (or
`focus_left`) turns a tree back into a cursor. A `Raz` is consumed by
`unfocus`; keep working with the returned tree.

```python
from iodyn.skiplist import Skiplist
from iodyn.names import name_unit

m = Skiplist(8, name_unit())
m.put("a", 1)
m.get("a")   # 1
m.rem("a")   # 1
m.get("a")   # None
```

## What it does not do

Names are carried through the structures and handed to fold and map
callbacks, but nothing is memoized: every fold, map and build runs over
the whole tree each time it is called. The package is a library only and
has no command-line program.

## Running the tests

```
pip install -e .[test]
pytest
```