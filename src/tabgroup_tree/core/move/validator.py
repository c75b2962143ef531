"""Structural checks for a proposed move."""

from collections.abc import Mapping

from tabgroup_tree.core.tree.builder import is_descendant, is_top_level
from tabgroup_tree.models.node import DropZone, MoveDecision, Node


def resolve_new_parent(target: Node, zone: DropZone | None) -> str | None:
    """Parent the dragged node ends up under for a drop on ``target``."""
    if zone is DropZone.INSIDE and target.is_folder:
        return target.id
    return target.parent_id


def _creates_cycle(nodes_by_id: Mapping[str, Node], dragged: Node, new_parent_id: str | None) -> bool:
    if new_parent_id is None:
        return False
    if new_parent_id == dragged.id:
        return True
    return is_descendant(nodes_by_id, dragged.id, new_parent_id)


def validate_move(
    nodes_by_id: Mapping[str, Node],
    dragged: Node,
    target: Node,
    zone: DropZone | None,
) -> MoveDecision:
    """Accept or reject dropping ``dragged`` on ``target`` in ``zone``.

    Rules, in order: no drop on itself, locked nodes never move, ``inside``
    needs a folder target, and a folder may not end up under itself or any
    of its descendants. A drop next to a node shown at the top level lands
    at the top level, even if that node's stored parent is missing.
    """
    if dragged.id == target.id:
        return MoveDecision(accepted=False, reason="Cannot drop a node onto itself.")
    if dragged.locked:
        return MoveDecision(accepted=False, reason=f"Node {dragged.id!r} is locked.")
    if zone is DropZone.INSIDE and not target.is_folder:
        return MoveDecision(accepted=False, reason=f"Target {target.id!r} is not a folder.")

    new_parent_id = resolve_new_parent(target, zone)
    if new_parent_id != target.id and is_top_level(nodes_by_id, target):
        new_parent_id = None
    if dragged.is_folder and _creates_cycle(nodes_by_id, dragged, new_parent_id):
        return MoveDecision(
            accepted=False,
            reason=f"Cannot move folder {dragged.id!r} into itself or one of its descendants.",
        )

    return MoveDecision(accepted=True, new_parent_id=new_parent_id)


def validate_reparent(
    nodes_by_id: Mapping[str, Node],
    dragged: Node,
    new_parent_id: str | None,
) -> MoveDecision:
    """Validate a move picked from a folder list rather than dragged.

    ``new_parent_id`` of None moves the node to the top level.
    """
    if dragged.locked:
        return MoveDecision(accepted=False, reason=f"Node {dragged.id!r} is locked.")
    if new_parent_id is not None:
        parent = nodes_by_id.get(new_parent_id)
        if parent is None:
            return MoveDecision(accepted=False, reason=f"Folder {new_parent_id!r} not found.")
        if not parent.is_folder:
            return MoveDecision(accepted=False, reason=f"Target {new_parent_id!r} is not a folder.")
    if _creates_cycle(nodes_by_id, dragged, new_parent_id):
        return MoveDecision(
            accepted=False,
            reason=f"Cannot move folder {dragged.id!r} into itself or one of its descendants.",
        )
    return MoveDecision(accepted=True, new_parent_id=new_parent_id)
