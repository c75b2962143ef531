"""One drag gesture, from press to commit or cancel."""

from collections.abc import Callable, Mapping
from enum import StrEnum

from loguru import logger

from tabgroup_tree.config import DRAG_ACTIVATION_DISTANCE
from tabgroup_tree.core.drag.collision import detect_collision
from tabgroup_tree.core.drag.zones import classify_drop_zone
from tabgroup_tree.core.move.mutator import OptimisticMutator
from tabgroup_tree.exceptions import DragInProgressError
from tabgroup_tree.models.geometry import Point, Rect
from tabgroup_tree.models.node import DragHint, MoveOutcome, MoveStatus


class DragState(StrEnum):
    IDLE = "idle"
    PENDING = "pending"
    DRAGGING = "dragging"
    RESOLVING = "resolving"
    COMMITTING = "committing"
    ROLLED_BACK = "rolled_back"


class DragSession:
    """Carries a single gesture through hit-testing, validation and commit.

    A press only becomes a drag once the pointer has travelled more than
    ``activation_distance`` pixels, so plain clicks never move anything.
    While dragging, every pointer move produces a ``DragHint`` for the UI to
    highlight; nothing is written until ``release``.

    Attributes:
        mutator: Owner of the node collection and the store.
        state: Current ``DragState``.
        node_id: Id of the node being dragged, if any.
        hint: Latest target and zone under the pointer.
    """

    def __init__(
        self,
        mutator: OptimisticMutator,
        *,
        activation_distance: float = DRAG_ACTIVATION_DISTANCE,
        on_state: Callable[[DragState], None] | None = None,
    ) -> None:
        self.mutator = mutator
        self.activation_distance = activation_distance
        self.on_state = on_state
        self.state = DragState.IDLE
        self.node_id: str | None = None
        self.origin: Point | None = None
        self.hint: DragHint | None = None

    def _set_state(self, state: DragState) -> None:
        self.state = state
        if self.on_state is not None:
            self.on_state(state)

    def _reset(self) -> None:
        self.node_id = None
        self.origin = None
        self.hint = None
        if self.state is not DragState.IDLE:
            self._set_state(DragState.IDLE)

    @property
    def is_active(self) -> bool:
        return self.state is not DragState.IDLE

    def press(self, node_id: str, pointer: Point) -> bool:
        """Arm a drag on ``node_id``. Returns False if the node cannot be dragged."""
        if self.state is DragState.COMMITTING:
            msg = f"Cannot start dragging {node_id!r} while a move is being committed"
            raise DragInProgressError(msg)
        if self.is_active:
            logger.warning("Drag of {} still active, cancelling it", self.node_id)
            self._reset()

        node = self.mutator.nodes.get(node_id)
        if node is None:
            logger.debug("Press on unknown node {}", node_id)
            return False
        if node.locked:
            logger.debug("Node {} is locked, not dragging", node_id)
            return False

        self.node_id = node_id
        self.origin = pointer
        self._set_state(DragState.PENDING)
        return True

    def move(self, pointer: Point | None, rects: Mapping[str, Rect]) -> DragHint | None:
        """Update the drop hint for the current pointer position."""
        if self.state is DragState.PENDING:
            if pointer is None or self.origin is None:
                return None
            if pointer.distance_to(self.origin) <= self.activation_distance:
                return None
            logger.debug("Drag start: {}", self.node_id)
            self._set_state(DragState.DRAGGING)

        if self.state is not DragState.DRAGGING:
            return None

        target_id = detect_collision(pointer, rects, exclude=self.node_id)
        target = self.mutator.nodes.get(target_id) if target_id is not None else None
        if target is None:
            self.hint = None
            return None

        zone = classify_drop_zone(target, rects.get(target.id), pointer)
        self.hint = DragHint(target_id=target.id, zone=zone)
        return self.hint

    async def release(self) -> MoveOutcome:
        """Drop at the current hint: validate, plan and commit the move."""
        if self.state is DragState.COMMITTING:
            msg = "Release received while a move is being committed"
            raise DragInProgressError(msg)
        if self.state is DragState.IDLE:
            return MoveOutcome(MoveStatus.CANCELLED, reason="No drag in progress.")

        node_id, hint = self.node_id, self.hint
        if self.state is DragState.PENDING or node_id is None:
            self._reset()
            return MoveOutcome(MoveStatus.CANCELLED, node_id=node_id, reason="Pointer released before dragging.")
        if hint is None:
            self._reset()
            return MoveOutcome(MoveStatus.CANCELLED, node_id=node_id, reason="Released outside any target.")

        logger.debug("Drag end: {} on {} ({})", node_id, hint.target_id, hint.zone)
        self._set_state(DragState.RESOLVING)
        plan = self.mutator.plan(node_id, hint.target_id, hint.zone)
        if isinstance(plan, MoveOutcome):
            self._reset()
            return plan

        self._set_state(DragState.COMMITTING)
        try:
            outcome = await self.mutator.commit(plan)
            if outcome.status is MoveStatus.ROLLED_BACK:
                self._set_state(DragState.ROLLED_BACK)
        finally:
            self._reset()
        return outcome

    def cancel(self) -> None:
        """Abandon the gesture without touching the tree."""
        if self.state is DragState.COMMITTING:
            msg = "Cannot cancel a move that is being committed"
            raise DragInProgressError(msg)
        if self.is_active:
            logger.debug("Drag cancelled: {}", self.node_id)
        self._reset()
