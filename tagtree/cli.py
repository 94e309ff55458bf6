"""Command-line front door for tagtree.

Loads document records from JSON, runs the tag-tree pipeline once through the
update controller, and prints the resulting tree.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import load_expanded_folders, load_settings
from .documents.records import load_records
from .logging_config import configure_logging
from .rendering import DEFAULT_THEME, PLAIN_THEME, render_tree
from .runtime import InMemoryDocumentStore, TagTreeController
from .settings import TagTreeSettings
from .tag_info import load_tag_info
from .tree_model.descendants import HIDE_ITEMS_TYPES
from .tree_model.sorting import ITEM_ORDER_KEYS, ORDER_DIRECTIONS, TAG_ORDER_KEYS
from .tree_model.tags import ROOT_TAG, TAG_SEPARATOR, parse_tag_list

logger = logging.getLogger(__name__)

ITEM_SORT_CHOICES = [f"{key}_{direction}" for key in ITEM_ORDER_KEYS for direction in ORDER_DIRECTIONS]
TAG_SORT_CHOICES = [f"{key}_{direction}" for key in TAG_ORDER_KEYS for direction in ORDER_DIRECTIONS]


def _folder_key(value: str) -> str:
    """argparse type turning ``a/b`` into the ancestor key ``root/a/b``."""
    value = value.strip().strip(TAG_SEPARATOR)
    if not value:
        raise argparse.ArgumentTypeError("folder key must not be empty")
    if value == ROOT_TAG or value.startswith(ROOT_TAG + TAG_SEPARATOR):
        return value
    return f"{ROOT_TAG}{TAG_SEPARATOR}{value}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Build a navigable tag tree from tagged documents and print it."
    )
    parser.add_argument("documents", help="JSON file holding a list of document records.")
    parser.add_argument("--config", metavar="PATH", help="Settings/expanded-folder JSON to start from.")
    parser.add_argument("--tag-info", metavar="PATH", help="Markdown pin table with YAML front matter.")
    parser.add_argument("--sort", choices=ITEM_SORT_CHOICES, help="Document order.")
    parser.add_argument("--tag-sort", choices=TAG_SORT_CHOICES, help="Tag folder order.")
    parser.add_argument("--hide-items", choices=HIDE_ITEMS_TYPES, help="Which intermediate documents to hide.")
    parser.add_argument("--archive-tags", metavar="TAGS", help="Comma-separated archive tags.")
    parser.add_argument("--search", default="", help="Tag search ('|' for alternatives, '-x' to exclude).")
    parser.add_argument(
        "--expand",
        metavar="KEY",
        nargs="+",
        type=_folder_key,
        default=[],
        help="Folder keys to show expanded (e.g. project/alpha).",
    )
    parser.add_argument("--links", action="store_true", help="Build the link tree instead of the tag tree.")
    parser.add_argument(
        "--no-reduce-nested-parent",
        action="store_true",
        help="Repeat nested parents instead of folding them into one folder.",
    )
    parser.add_argument("--merge-redundant", action="store_true", help="Drop sibling folders with identical documents.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")
    parser.add_argument("--verbose", action="store_true", help="Log debug output to stderr.")
    return parser


def settings_from_args(args: argparse.Namespace, base: TagTreeSettings) -> TagTreeSettings:
    """Overlay explicit command-line options on ``base``."""
    changes: dict[str, object] = {}
    if args.sort:
        changes["sort_type"] = args.sort
    if args.tag_sort:
        changes["sort_type_tag"] = args.tag_sort
    if args.hide_items:
        changes["hide_items"] = args.hide_items
    if args.archive_tags is not None:
        changes["archive_tags"] = parse_tag_list(args.archive_tags)
    if args.links:
        changes["tree_type"] = "links"
    if args.no_reduce_nested_parent:
        changes["reduce_nested_parent"] = False
    if args.merge_redundant:
        changes["merge_redundant_combination"] = True
    return base.replace(**changes) if changes else base


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments, build the tree, and write it to stdout."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    documents_path = Path(args.documents)
    try:
        records = load_records(documents_path)
    except FileNotFoundError:
        raise SystemExit(f"Path not found: {documents_path}")
    except (OSError, ValueError) as exc:
        raise SystemExit(f"Cannot read documents from {documents_path}: {exc}")

    config_path = Path(args.config) if args.config else None
    base = load_settings(config_path) if config_path is not None else TagTreeSettings()
    expanded = load_expanded_folders(config_path) if config_path is not None else []
    settings = settings_from_args(args, base)
    tag_info = load_tag_info(Path(args.tag_info)) if args.tag_info else {}

    store = InMemoryDocumentStore(records, tag_info)
    controller = TagTreeController(store, settings, expanded_folders=[*expanded, *args.expand])
    try:
        controller.start()
        if args.search:
            controller.set_search_string(args.search)
        root = controller.current_tree()
        if controller.last_error is not None or root is None:
            raise SystemExit(f"Failed to build tag tree: {controller.last_error}")
        use_color = not args.no_color and sys.stdout.isatty()
        theme = DEFAULT_THEME if use_color else PLAIN_THEME
        output = render_tree(root, controller.serialized_expanded_folders(), tag_info, theme)
    finally:
        controller.close()
    logger.debug("rendered tree for %d documents", len(records))
    sys.stdout.write(output + "\n" if output else "")


if __name__ == "__main__":
    main()
