"""Tag-tree construction for tagged document collections.

``tagtree.tree_model`` builds and orders the tree, ``tagtree.documents`` turns
document records into tree items, and ``tagtree.runtime`` keeps a tree current
while documents change. ``main`` runs the command line front end.
"""

from __future__ import annotations


def main(argv=None) -> None:
    """Run the ``tagtree`` command; the CLI module is imported on first use."""
    from .cli import main as _main

    _main(argv)


__all__ = ["main"]
