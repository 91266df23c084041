"""Sequence structures: archive stacks, level trees, tree cursors, a random access zipper and a skip-list map."""

__version__ = "0.1.0"