"""Tag-tree datatypes shared by builder, cache, and sort modules."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Item:
    """One document leaf as seen by a single build pass.

    ``path`` is the identity used for every de-duplication; two ``Item``
    objects with the same path are the same document.
    """

    path: str
    tags: tuple[str, ...] = ()
    extra_tags: tuple[str, ...] = ()
    links: tuple[str, ...] = ()
    display_name: str = ""
    filename: str = ""
    mtime: float = 0
    ctime: float = 0


@dataclass(eq=False)
class TagNode:
    """Folder-like node for one tag path segment.

    ``descendants``, ``all_descendants`` and ``descendants_memo`` are caches;
    ``None`` means dirty.
    """

    tag: str
    ancestors: list[str]
    children: list["TagTreeNode"] = field(default_factory=list)
    is_dedicated_tree: bool = False
    items_count: int = 0
    extra_tags: tuple[str, ...] = ()
    descendants: list[Item] | None = None
    all_descendants: list[Item] | None = None
    descendants_memo: list[Item] | None = None

    @property
    def key(self) -> str:
        """Ancestor-path key used by the expanded-folder set."""
        return "/".join(self.ancestors)

    def tag_children(self) -> list["TagNode"]:
        return [child for child in self.children if isinstance(child, TagNode)]

    def item_children(self) -> list[Item]:
        return [child for child in self.children if isinstance(child, Item)]

    def invalidate(self) -> None:
        """Mark all three descendant caches dirty."""
        self.descendants = None
        self.all_descendants = None
        self.descendants_memo = None


TagTreeNode = TagNode | Item


@dataclass(frozen=True)
class TagInfo:
    """Pin/override record for one canonical tag string."""

    key: str | None = None
    mark: str | None = None
    alt: str | None = None
    redirect: str | None = None

    @property
    def is_pinned(self) -> bool:
        return self.key is not None

    def to_dict(self) -> dict[str, str]:
        out: dict[str, str] = {}
        for name in ("key", "mark", "alt", "redirect"):
            value = getattr(self, name)
            if value is not None:
                out[name] = value
        return out


TagInfoDict = dict[str, TagInfo]


__all__ = [
    "Item",
    "TagNode",
    "TagTreeNode",
    "TagInfo",
    "TagInfoDict",
]
