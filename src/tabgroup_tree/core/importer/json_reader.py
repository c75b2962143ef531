"""Convert tab-group service records to nodes and back."""

from typing import Any

from tabgroup_tree.config import LOCKED_TAG
from tabgroup_tree.models.node import Node, PositionUpdate


def parse_node_record(record: dict[str, Any]) -> Node:
    """Parse one tab-group record into a Node.

    The service sends ``is_folder`` as 0/1, may leave ``position`` and
    ``parent_id`` out or null, and marks locked groups with a tag.
    """
    if "id" not in record:
        msg = f"Tab-group record without id: {record!r}"
        raise ValueError(msg)

    tags = record.get("tags") or []
    locked = record.get("locked")
    if locked is None:
        locked = LOCKED_TAG in tags

    parent_id = record.get("parent_id")
    position = record.get("position")
    return Node(
        id=str(record["id"]),
        title=record.get("title") or "",
        parent_id=str(parent_id) if parent_id not in (None, "") else None,
        position=position if position is not None else 0,
        is_folder=bool(record.get("is_folder")),
        locked=bool(locked),
    )


def parse_node_records(records: list[dict[str, Any]]) -> list[Node]:
    """Parse a list of tab-group records."""
    return [parse_node_record(r) for r in records]


def update_to_payload(update: PositionUpdate) -> dict[str, Any]:
    """Request body for persisting one position update."""
    return {"parent_id": update.parent_id, "position": update.position}
