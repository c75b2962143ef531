"""Protocols for dependency injection in the reorder engine."""

from typing import Protocol, runtime_checkable

from tabgroup_tree.models.node import Node, PositionUpdate


@runtime_checkable
class NodeStoreProtocol(Protocol):
    """Protocol for the persistence collaborator behind the tree."""

    def read_nodes(self) -> list[Node]:
        """Return the full flat collection of nodes."""
        ...

    def write_node(self, update: PositionUpdate) -> None:
        """Persist a new parent and position for one node. Raise on failure."""
        ...
