"""Tests for the drag gesture state machine."""

import asyncio

import pytest

from tabgroup_tree.core.drag.session import DragSession, DragState
from tabgroup_tree.core.move.mutator import OptimisticMutator
from tabgroup_tree.core.tree.builder import walk_tree
from tabgroup_tree.exceptions import DragInProgressError
from tabgroup_tree.models.geometry import Point, Rect
from tabgroup_tree.models.node import DragHint, DropZone, MoveStatus, Node
from tests.unit.fakes import FakeStore

ROW = 20


def _layout(mutator: OptimisticMutator) -> dict[str, Rect]:
    """One row per node in pre-order, indented by depth."""
    return {
        t.id: Rect(depth * 16, index * ROW, 200 - depth * 16, ROW)
        for index, (depth, t) in enumerate(walk_tree(mutator.forest))
    }


def _row_point(rects: dict[str, Rect], node_id: str, ry: float, rx: float = 0.1) -> Point:
    rect = rects[node_id]
    return Point(rect.left + rect.width * rx, rect.top + rect.height * ry)


@pytest.fixture
def states() -> list[DragState]:
    return []


@pytest.fixture
def session(store: FakeStore, sample_nodes: list[Node], states: list[DragState]) -> DragSession:
    return DragSession(OptimisticMutator(store, sample_nodes), on_state=states.append)


def test_small_movement_is_a_click(session: DragSession, store: FakeStore) -> None:
    rects = _layout(session.mutator)
    origin = _row_point(rects, "g1", 0.5)

    assert session.press("g1", origin) is True
    assert session.move(Point(origin.x + 3, origin.y + 3), rects) is None
    assert session.state is DragState.PENDING

    outcome = asyncio.run(session.release())

    assert outcome.status is MoveStatus.CANCELLED
    assert session.state is DragState.IDLE
    assert store.writes == []


def test_full_drag_into_folder(session: DragSession, store: FakeStore, states: list[DragState]) -> None:
    rects = _layout(session.mutator)

    session.press("g1", _row_point(rects, "g1", 0.5))
    hint = session.move(_row_point(rects, "f2", 0.5, rx=0.6), rects)

    assert hint == DragHint(target_id="f2", zone=DropZone.INSIDE)
    assert session.state is DragState.DRAGGING

    outcome = asyncio.run(session.release())

    assert outcome.status is MoveStatus.MOVED
    assert session.mutator.nodes["g1"].parent_id == "f2"
    assert session.mutator.nodes["g1"].position == 2
    assert states == [
        DragState.PENDING,
        DragState.DRAGGING,
        DragState.RESOLVING,
        DragState.COMMITTING,
        DragState.IDLE,
    ]
    assert session.hint is None
    assert session.node_id is None


def test_drag_before_sibling(session: DragSession) -> None:
    rects = _layout(session.mutator)

    session.press("f2", _row_point(rects, "f2", 0.5))
    hint = session.move(_row_point(rects, "f1", 0.05), rects)

    assert hint == DragHint(target_id="f1", zone=DropZone.BEFORE)
    outcome = asyncio.run(session.release())
    assert outcome.success
    assert [t.id for t in session.mutator.forest] == ["f2", "f1", "g1", "lk"]


def test_dragged_node_is_never_its_own_target(session: DragSession) -> None:
    rects = _layout(session.mutator)
    start = _row_point(rects, "g1", 0.5)

    session.press("g1", start)
    hint = session.move(Point(start.x + 1, start.y + 9), rects)

    assert hint is not None
    assert hint.target_id != "g1"


def test_hints_do_not_touch_the_tree(session: DragSession, store: FakeStore) -> None:
    rects = _layout(session.mutator)
    before = dict(session.mutator.nodes)

    session.press("g4", _row_point(rects, "g4", 0.5))
    for node_id in ("f1", "g2", "f3", "lk"):
        session.move(_row_point(rects, node_id, 0.3), rects)
    session.cancel()

    assert session.state is DragState.IDLE
    assert session.mutator.nodes == before
    assert store.writes == []


def test_locked_node_cannot_be_picked_up(session: DragSession) -> None:
    rects = _layout(session.mutator)

    assert session.press("lk", _row_point(rects, "lk", 0.5)) is False
    assert session.state is DragState.IDLE


def test_unknown_node_cannot_be_picked_up(session: DragSession) -> None:
    assert session.press("ghost", Point(0, 0)) is False


def test_release_without_target_is_cancelled(session: DragSession, store: FakeStore) -> None:
    session.press("g1", Point(0, 0))
    session.move(Point(100, 100), {})

    outcome = asyncio.run(session.release())

    assert outcome.status is MoveStatus.CANCELLED
    assert store.writes == []


def test_release_while_idle_is_cancelled(session: DragSession) -> None:
    assert asyncio.run(session.release()).status is MoveStatus.CANCELLED


def test_rejected_drop_returns_to_idle(session: DragSession, store: FakeStore) -> None:
    rects = _layout(session.mutator)

    session.press("f1", _row_point(rects, "f1", 0.5))
    session.move(_row_point(rects, "f3", 0.5), rects)
    outcome = asyncio.run(session.release())

    assert outcome.status is MoveStatus.REJECTED
    assert session.state is DragState.IDLE
    assert store.writes == []


def test_failed_commit_rolls_back(sample_nodes: list[Node], states: list[DragState]) -> None:
    store = FakeStore(sample_nodes, fail_ids={"g1"})
    session = DragSession(OptimisticMutator(store, sample_nodes), on_state=states.append)
    rects = _layout(session.mutator)
    before = list(session.mutator.nodes.items())

    session.press("f2", _row_point(rects, "f2", 0.5))
    session.move(_row_point(rects, "f1", 0.05), rects)
    outcome = asyncio.run(session.release())

    assert outcome.status is MoveStatus.ROLLED_BACK
    assert list(session.mutator.nodes.items()) == before
    assert states[-3:] == [DragState.COMMITTING, DragState.ROLLED_BACK, DragState.IDLE]


def test_new_press_replaces_unfinished_drag(session: DragSession) -> None:
    session.press("g1", Point(0, 0))
    session.move(Point(50, 50), _layout(session.mutator))

    assert session.press("g2", Point(0, 0)) is True
    assert session.node_id == "g2"
    assert session.state is DragState.PENDING
    assert session.hint is None


def test_no_new_gesture_while_committing(session: DragSession) -> None:
    session.state = DragState.COMMITTING

    with pytest.raises(DragInProgressError):
        session.press("g1", Point(0, 0))
    with pytest.raises(DragInProgressError):
        session.cancel()
    with pytest.raises(DragInProgressError):
        asyncio.run(session.release())
