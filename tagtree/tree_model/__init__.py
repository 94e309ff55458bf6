"""Domain model for tag trees built from flat tagged documents.

This package contains non-UI tree primitives:
- item/tag-node datatypes and tag-path helpers
- fixpoint tree construction with nested-tag splitting
- redundancy reduction and descendant caches with dirty propagation
- pin-aware sibling ordering and expanded-folder restoration
"""

from __future__ import annotations

from .types import Item, TagInfo, TagInfoDict, TagNode, TagTreeNode
from .tags import (
    ROOT_TAG,
    SUBTREE_MARK,
    UNLINKED_TAG,
    UNTAGGED_TAG,
    ancestor_to_tags,
    canonical_tag,
    fold_tag,
)
from .build import build_tag_tree, expand_tree, find_tag_child, split_tag
from .reduce import merge_redundant_combination, snip_empty
from .descendants import (
    HIDE_ALL_EXCEPT_BOTTOM,
    HIDE_DEDICATED_INTERMEDIATES,
    HIDE_NONE,
    expand_descendants,
    ripple_dirty,
)
from .sorting import compare_items, compare_tag_nodes, sort_tree, tag_info_for
from .expansion import (
    expand_untagged_to_root,
    find_node,
    is_auto_expand_tree,
    omitted_tags,
    open_folder,
    restore_expanded_folders,
)
from .pipeline import build_tree, finalize_tree, resort_tree

__all__ = [
    "Item",
    "TagInfo",
    "TagInfoDict",
    "TagNode",
    "TagTreeNode",
    "ROOT_TAG",
    "SUBTREE_MARK",
    "UNLINKED_TAG",
    "UNTAGGED_TAG",
    "ancestor_to_tags",
    "canonical_tag",
    "fold_tag",
    "build_tag_tree",
    "expand_tree",
    "find_tag_child",
    "split_tag",
    "merge_redundant_combination",
    "snip_empty",
    "HIDE_NONE",
    "HIDE_DEDICATED_INTERMEDIATES",
    "HIDE_ALL_EXCEPT_BOTTOM",
    "expand_descendants",
    "ripple_dirty",
    "compare_items",
    "compare_tag_nodes",
    "sort_tree",
    "tag_info_for",
    "expand_untagged_to_root",
    "find_node",
    "is_auto_expand_tree",
    "omitted_tags",
    "open_folder",
    "restore_expanded_folders",
    "build_tree",
    "finalize_tree",
    "resort_tree",
]
