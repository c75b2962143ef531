"""Fake implementations for testing the reorder engine."""

import threading
from collections.abc import Iterable

from tabgroup_tree.exceptions import PersistenceError
from tabgroup_tree.models.node import Node, PositionUpdate


def make_node(
    node_id: str,
    parent_id: str | None = None,
    position: float = 0,
    *,
    folder: bool = False,
    locked: bool = False,
) -> Node:
    """Build a Node whose title is derived from its id."""
    return Node(
        id=node_id,
        title=f"Title {node_id}",
        parent_id=parent_id,
        position=position,
        is_folder=folder,
        locked=locked,
    )


class FakeStore:
    """In-memory fake for the tab-group service.

    Records every write for assertions. Writes for ids in ``fail_ids`` raise
    PersistenceError, the rest are applied to the stored nodes.
    """

    def __init__(self, nodes: Iterable[Node] = (), *, fail_ids: Iterable[str] = ()) -> None:
        self.nodes: dict[str, Node] = {n.id: n for n in nodes}
        self.fail_ids = set(fail_ids)
        self.writes: list[PositionUpdate] = []
        self.reads = 0
        self._lock = threading.Lock()

    def read_nodes(self) -> list[Node]:
        self.reads += 1
        return list(self.nodes.values())

    def write_node(self, update: PositionUpdate) -> None:
        with self._lock:
            self.writes.append(update)
            if update.id in self.fail_ids:
                msg = f"FakeStore: write of {update.id!r} failed"
                raise PersistenceError(msg)
            node = self.nodes[update.id]
            self.nodes[update.id] = Node(
                id=node.id,
                title=node.title,
                parent_id=update.parent_id,
                position=update.position,
                is_folder=node.is_folder,
                locked=node.locked,
            )


class BarrierStore(FakeStore):
    """Store whose writes only succeed if ``parties`` of them run at the same time."""

    def __init__(self, nodes: Iterable[Node], *, parties: int, timeout: float = 5.0) -> None:
        super().__init__(nodes)
        self.barrier = threading.Barrier(parties, timeout=timeout)

    def write_node(self, update: PositionUpdate) -> None:
        try:
            self.barrier.wait()
        except threading.BrokenBarrierError as e:
            msg = "writes were not issued concurrently"
            raise PersistenceError(msg) from e
        super().write_node(update)


# A folder with one child, a plain group and a locked group, in service format.
SNAPSHOT = {
    "tab_groups": [
        {"id": "work", "title": "Work", "parent_id": None, "position": 0, "is_folder": 1, "tags": []},
        {"id": "docs", "title": "Docs", "parent_id": "work", "position": 0, "is_folder": 0, "tags": []},
        {"id": "news", "title": "News", "parent_id": None, "position": 1, "is_folder": 0, "tags": []},
        {"id": "pinned", "title": "Pinned", "parent_id": None, "position": 2, "is_folder": 0,
         "tags": ["__locked__"]},
    ]
}
