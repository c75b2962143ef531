"""Apply moves optimistically and reconcile them with the store."""

import asyncio
from collections.abc import Iterable
from dataclasses import replace

from loguru import logger

from tabgroup_tree.core.move.allocator import plan_move, plan_reparent
from tabgroup_tree.core.move.validator import validate_move, validate_reparent
from tabgroup_tree.core.tree.builder import build_tree, index_nodes
from tabgroup_tree.exceptions import DragInProgressError
from tabgroup_tree.models.node import (
    DropZone,
    MoveOutcome,
    MovePlan,
    MoveStatus,
    Node,
    PositionUpdate,
    TreeNode,
)
from tabgroup_tree.protocols import NodeStoreProtocol


class OptimisticMutator:
    """Owns the local node collection and keeps it in step with the store.

    Moves are applied to ``nodes`` before the store confirms them. If any
    write fails the whole move is reverted to the snapshot taken just
    before it was applied.
    """

    def __init__(self, store: NodeStoreProtocol, nodes: Iterable[Node] | None = None) -> None:
        self.store = store
        self.nodes: dict[str, Node] = index_nodes(nodes) if nodes is not None else {}
        self.committing = False

    def reload(self) -> None:
        """Replace local state with a full read from the store."""
        self.nodes = index_nodes(self.store.read_nodes())
        logger.debug("Loaded {} nodes from store", len(self.nodes))

    @property
    def forest(self) -> list[TreeNode]:
        return build_tree(self.nodes.values())

    def _apply(self, updates: Iterable[PositionUpdate]) -> None:
        for update in updates:
            node = self.nodes[update.id]
            self.nodes[update.id] = replace(node, parent_id=update.parent_id, position=update.position)

    async def commit(self, plan: MovePlan) -> MoveOutcome:
        """Apply ``plan`` locally, persist every update, roll back on failure.

        Writes run concurrently; a single failure fails the whole move,
        because a half-applied renumbering leaves gaps in a sibling group.
        Only one move may be in flight; a second commit raises
        DragInProgressError.
        """
        if self.committing:
            msg = f"Cannot commit move of {plan.node_id!r} while another move is being committed"
            raise DragInProgressError(msg)
        if not plan.updates:
            logger.info("Node {} is already in place", plan.node_id)
            return MoveOutcome(MoveStatus.MOVED, node_id=plan.node_id)

        snapshot = dict(self.nodes)
        self._apply(plan.updates)
        self.committing = True
        try:
            results = await asyncio.gather(
                *(asyncio.to_thread(self.store.write_node, update) for update in plan.updates),
                return_exceptions=True,
            )
        except BaseException:
            self.nodes = snapshot
            raise
        finally:
            self.committing = False

        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            self.nodes = snapshot
            logger.warning(
                "Move of {} rolled back: {} of {} writes failed ({})",
                plan.node_id,
                len(failures),
                len(plan.updates),
                failures[0],
            )
            return MoveOutcome(
                MoveStatus.ROLLED_BACK,
                node_id=plan.node_id,
                reason=str(failures[0]),
                updates=plan.updates,
            )

        logger.info(
            "Moved {} under {} at position {} ({} writes)",
            plan.node_id,
            plan.new_parent_id or "<root>",
            plan.position,
            len(plan.updates),
        )
        return MoveOutcome(MoveStatus.MOVED, node_id=plan.node_id, updates=plan.updates)

    def plan(self, dragged_id: str, target_id: str, zone: DropZone | None) -> MovePlan | MoveOutcome:
        """Validate and plan a drop; a MoveOutcome means it was rejected."""
        dragged = self.nodes.get(dragged_id)
        target = self.nodes.get(target_id)
        if dragged is None or target is None:
            missing = dragged_id if dragged is None else target_id
            return self._rejected(dragged_id, f"Node {missing!r} not found.")

        decision = validate_move(self.nodes, dragged, target, zone)
        if not decision.accepted:
            return self._rejected(dragged_id, decision.reason)
        return plan_move(self.nodes, dragged, target, zone, decision)

    async def move(self, dragged_id: str, target_id: str, zone: DropZone | None) -> MoveOutcome:
        """Drop ``dragged_id`` on ``target_id`` in ``zone`` and persist it."""
        plan = self.plan(dragged_id, target_id, zone)
        if isinstance(plan, MoveOutcome):
            return plan
        return await self.commit(plan)

    async def move_to_folder(self, dragged_id: str, folder_id: str | None) -> MoveOutcome:
        """Append ``dragged_id`` to ``folder_id`` (None = top level) and persist it."""
        dragged = self.nodes.get(dragged_id)
        if dragged is None:
            return self._rejected(dragged_id, f"Node {dragged_id!r} not found.")

        decision = validate_reparent(self.nodes, dragged, folder_id)
        if not decision.accepted:
            return self._rejected(dragged_id, decision.reason)
        return await self.commit(plan_reparent(self.nodes, dragged, decision))

    @staticmethod
    def _rejected(node_id: str, reason: str) -> MoveOutcome:
        logger.info("Move of {} rejected: {}", node_id, reason)
        return MoveOutcome(MoveStatus.REJECTED, node_id=node_id, reason=reason)
