"""Domain models for the tab-group tree."""

from dataclasses import dataclass, field
from enum import StrEnum


@dataclass(frozen=True)
class Node:
    """A single tab group or folder in the tree."""

    id: str
    title: str
    parent_id: str | None = None
    position: float = 0
    is_folder: bool = False
    locked: bool = False


@dataclass(frozen=True)
class TreeNode:
    """A node together with its ordered children, as built from the flat collection."""

    node: Node
    children: tuple["TreeNode", ...] = ()

    @property
    def id(self) -> str:
        return self.node.id


class DropZone(StrEnum):
    """Where a dragged node lands relative to the target."""

    BEFORE = "before"
    AFTER = "after"
    INSIDE = "inside"


@dataclass(frozen=True)
class DragHint:
    """Transient highlight state while a drag is in progress."""

    target_id: str
    zone: DropZone | None


@dataclass(frozen=True)
class PositionUpdate:
    """One persisted reassignment of parent and position."""

    id: str
    parent_id: str | None
    position: int


@dataclass(frozen=True)
class MoveDecision:
    """Result of validating a proposed move."""

    accepted: bool
    new_parent_id: str | None = None
    reason: str = ""


@dataclass(frozen=True)
class MovePlan:
    """Everything that must be written for one move."""

    node_id: str
    new_parent_id: str | None
    position: int
    updates: tuple[PositionUpdate, ...] = ()


class MoveStatus(StrEnum):
    MOVED = "moved"
    REJECTED = "rejected"
    ROLLED_BACK = "rolled_back"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class MoveOutcome:
    """What happened to a move, reported back to the caller."""

    status: MoveStatus
    node_id: str | None = None
    reason: str = ""
    updates: tuple[PositionUpdate, ...] = field(default=())

    @property
    def success(self) -> bool:
        return self.status is MoveStatus.MOVED


@dataclass(frozen=True)
class IntegrityIssue:
    """A structural problem found in a flat node collection."""

    kind: str
    node_id: str
    detail: str
