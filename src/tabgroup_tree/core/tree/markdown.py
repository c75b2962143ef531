"""Render tab-group forests as markdown."""

import io
from collections.abc import Iterable

from tabgroup_tree.core.tree.builder import walk_tree
from tabgroup_tree.models.node import TreeNode


def render_forest_as_markdown(
    forest: Iterable[TreeNode],
    *,
    max_depth: int | None = None,
    show_ids: bool = False,
) -> str:
    """Render a forest as an indented markdown outline.

    Args:
        forest: Root tree nodes as returned by ``build_tree``.
        max_depth: Max levels below the roots to include (None = unlimited).
        show_ids: Append ``id=`` and ``pos=`` markers to every line.

    Returns:
        Markdown string with bullet-list hierarchy.
    """
    out = io.StringIO()
    for depth, tree_node in walk_tree(forest):
        if max_depth is not None and depth > max_depth:
            continue

        node = tree_node.node
        indent = "    " * depth

        # Folders get a trailing slash, locked nodes a marker
        title = node.title + "/" if node.is_folder else node.title
        if node.locked:
            title += " [locked]"
        if show_ids:
            title += f"  (id={node.id}, pos={node.position:g})"
        out.write(f"{indent}- {title}\n")

        # Truncation indicator when children are cut off by max_depth
        child_count = len(tree_node.children)
        if max_depth is not None and depth == max_depth and child_count > 0:
            child_indent = "    " * (depth + 1)
            noun = "child" if child_count == 1 else "children"
            out.write(f"{child_indent}- ... ({child_count} more {noun}, id={node.id})\n")

    return out.getvalue()
