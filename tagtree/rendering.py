"""Plain-text rendering of built tag trees.

Open folders list their tag folders first and then the documents visible at
that level after the hide policy. Closed folders show only their row.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from .tree_model.expansion import is_auto_expand_tree, omitted_tags
from .tree_model.sorting import tag_info_for
from .tree_model.tags import VIRTUAL_TAG_PREFIX, is_virtual_tag
from .tree_model.types import Item, TagInfo, TagNode


@dataclass(frozen=True)
class TreeTheme:
    """Semantic ANSI palette used by the tree renderer."""

    name: str
    reset: str
    tree_marker: str
    tree_tag: str
    tree_count: str
    tree_item: str
    tree_omitted: str
    tree_pin: str


DEFAULT_THEME = TreeTheme(
    name="default",
    reset="\033[0m",
    tree_marker="\033[38;5;44m",
    tree_tag="\033[1;34m",
    tree_count="\033[38;5;109m",
    tree_item="\033[38;5;252m",
    tree_omitted="\033[2;38;5;250m",
    tree_pin="\033[38;5;214m",
)

PLAIN_THEME = TreeTheme(
    name="plain",
    reset="",
    tree_marker="",
    tree_tag="",
    tree_count="",
    tree_item="",
    tree_omitted="",
    tree_pin="",
)


def tag_label(node: TagNode, tag_info: Mapping[str, TagInfo] | None = None) -> str:
    """Display label: the ``alt`` override, else the segment without virtual prefix."""
    info = tag_info_for(node, tag_info)
    if info is not None and info.alt:
        return info.alt
    if is_virtual_tag(node.tag):
        return node.tag[len(VIRTUAL_TAG_PREFIX):]
    return node.tag


def format_tag_row(
    node: TagNode,
    depth: int,
    is_open: bool,
    tag_info: Mapping[str, TagInfo] | None = None,
    theme: TreeTheme | None = None,
) -> str:
    active_theme = theme or DEFAULT_THEME
    reset = active_theme.reset
    indent = "  " * depth
    marker = "▾ " if is_open else "▸ "
    info = tag_info_for(node, tag_info)
    mark = f"{active_theme.tree_pin}{info.mark}{reset} " if info is not None and info.mark else ""
    omitted = omitted_tags(node)
    omitted_label = f" {active_theme.tree_omitted}[{', '.join(omitted)}]{reset}" if omitted else ""
    return (
        f"{indent}{active_theme.tree_marker}{marker}{reset}{mark}"
        f"{active_theme.tree_tag}{tag_label(node, tag_info)}{reset}"
        f" {active_theme.tree_count}({node.items_count}){reset}{omitted_label}"
    )


def format_item_row(item: Item, depth: int, theme: TreeTheme | None = None) -> str:
    active_theme = theme or DEFAULT_THEME
    indent = "  " * depth
    return f"{indent}  {active_theme.tree_item}{item.display_name or item.path}{active_theme.reset}"


def render_tree_lines(
    root: TagNode,
    expanded_folders: Iterable[str] = (),
    tag_info: Mapping[str, TagInfo] | None = None,
    theme: TreeTheme | None = None,
) -> list[str]:
    """Render ``root`` into display rows.

    A folder is open when its key is recorded as expanded or it unfolds
    automatically (single branch chains).
    """
    expanded = set(expanded_folders)
    lines: list[str] = []

    def walk(node: TagNode, depth: int) -> None:
        for child in node.tag_children():
            is_open = child.key in expanded or is_auto_expand_tree(child)
            lines.append(format_tag_row(child, depth, is_open, tag_info, theme))
            if not is_open:
                continue
            walk(child, depth + 1)
            visible = child.descendants if child.descendants is not None else child.item_children()
            for item in visible:
                lines.append(format_item_row(item, depth + 1, theme))

    walk(root, 0)
    for item in root.item_children():
        lines.append(format_item_row(item, 0, theme))
    return lines


def render_tree(
    root: TagNode,
    expanded_folders: Iterable[str] = (),
    tag_info: Mapping[str, TagInfo] | None = None,
    theme: TreeTheme | None = None,
) -> str:
    return "\n".join(render_tree_lines(root, expanded_folders, tag_info, theme))


__all__ = [
    "TreeTheme",
    "DEFAULT_THEME",
    "PLAIN_THEME",
    "tag_label",
    "format_tag_row",
    "format_item_row",
    "render_tree_lines",
    "render_tree",
]
