"""Pure functions for computing statistics over declaration trees."""

from __future__ import annotations

from collections import Counter

from bindgen.declarations import DeclarationTree


def count_kinds(tree: DeclarationTree) -> dict[str, int]:
    """Return a frequency map of declaration kinds in the given tree.

    Args:
        tree: A linked declaration tree.

    Returns:
        A dict mapping kind strings (as written in the input, so unsupported
        kinds keep their own names) to their occurrence counts.
        Empty dict for an empty tree.
    """
    return dict(Counter(str(decl.kind) for decl in tree.walk()))
