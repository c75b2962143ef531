"""Compute new positions for a move and the renumbering it causes."""

from collections.abc import Mapping, Sequence

from tabgroup_tree.core.tree.builder import is_top_level, siblings_of
from tabgroup_tree.models.node import DropZone, MoveDecision, MovePlan, Node, PositionUpdate


def allocate_position(zone: DropZone | None, target: Node, siblings: Sequence[Node]) -> int:
    """Slot for the dragged node among ``siblings`` (dragged node excluded).

    ``inside`` appends after the folder's last child, ``before`` takes the
    target's slot, ``after`` the slot right behind it, and no zone appends
    to the end of the target's group. In a gap-free group the slot is the
    position the node is stored with.
    """
    if zone is DropZone.INSIDE or zone is None:
        return len(siblings)

    index = next((i for i, sibling in enumerate(siblings) if sibling.id == target.id), None)
    if index is None:
        return len(siblings)
    return index if zone is DropZone.BEFORE else index + 1


def renumber(siblings: Sequence[Node], parent_id: str | None) -> list[PositionUpdate]:
    """Assign 0..k-1 in the given order; return only the nodes that change."""
    return [
        PositionUpdate(id=node.id, parent_id=parent_id, position=index)
        for index, node in enumerate(siblings)
        if node.parent_id != parent_id or node.position != index
    ]


def _plan(nodes_by_id: Mapping[str, Node], dragged: Node, new_parent_id: str | None, slot: int,
          siblings: list[Node]) -> MovePlan:
    ordered = [*siblings[:slot], dragged, *siblings[slot:]]
    updates = renumber(ordered, new_parent_id)

    source_parent_id = None if is_top_level(nodes_by_id, dragged) else dragged.parent_id
    if source_parent_id != new_parent_id:
        # Close the gap left in the group the node came from.
        remaining = siblings_of(nodes_by_id, source_parent_id, exclude=dragged.id)
        updates.extend(renumber(remaining, source_parent_id))

    return MovePlan(
        node_id=dragged.id,
        new_parent_id=new_parent_id,
        position=slot,
        updates=tuple(updates),
    )


def plan_move(
    nodes_by_id: Mapping[str, Node],
    dragged: Node,
    target: Node,
    zone: DropZone | None,
    decision: MoveDecision,
) -> MovePlan:
    """Plan the writes for an accepted drop of ``dragged`` on ``target``.

    The destination group is renumbered in its final order and, when the
    node changes parent, the source group is compacted too, so every group
    stays contiguous after the move.
    """
    if not decision.accepted:
        msg = f"Cannot plan a rejected move: {decision.reason}"
        raise ValueError(msg)

    siblings = siblings_of(nodes_by_id, decision.new_parent_id, exclude=dragged.id)
    slot = allocate_position(zone, target, siblings)
    return _plan(nodes_by_id, dragged, decision.new_parent_id, slot, siblings)


def plan_reparent(nodes_by_id: Mapping[str, Node], dragged: Node, decision: MoveDecision) -> MovePlan:
    """Plan a move to the end of another folder (or the top level)."""
    if not decision.accepted:
        msg = f"Cannot plan a rejected move: {decision.reason}"
        raise ValueError(msg)

    siblings = siblings_of(nodes_by_id, decision.new_parent_id, exclude=dragged.id)
    return _plan(nodes_by_id, dragged, decision.new_parent_id, len(siblings), siblings)
