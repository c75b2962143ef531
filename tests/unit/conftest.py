"""Shared test fixtures."""

import json
from pathlib import Path

import pytest

from tabgroup_tree.core.tree.builder import index_nodes
from tabgroup_tree.models.node import Node
from tests.unit.fakes import SNAPSHOT, FakeStore, make_node

# Top level: f1/, g1, f2/, lk (locked)
#   f1/ -> g2, f3/ -> g3
#   f2/ -> g4, g5
SAMPLE_NODES = [
    make_node("g3", "f3", 0),
    make_node("f2", None, 2, folder=True),
    make_node("g1", None, 1),
    make_node("g5", "f2", 1),
    make_node("f1", None, 0, folder=True),
    make_node("lk", None, 3, locked=True),
    make_node("g2", "f1", 0),
    make_node("f3", "f1", 1, folder=True),
    make_node("g4", "f2", 0),
]


@pytest.fixture
def sample_nodes() -> list[Node]:
    return list(SAMPLE_NODES)


@pytest.fixture
def nodes_by_id(sample_nodes: list[Node]) -> dict[str, Node]:
    return index_nodes(sample_nodes)


@pytest.fixture
def store(sample_nodes: list[Node]) -> FakeStore:
    return FakeStore(sample_nodes)


@pytest.fixture
def snapshot_file(tmp_path: Path) -> Path:
    """Write a small tab-group snapshot and return its path."""
    path = tmp_path / "tab-groups.json"
    path.write_text(json.dumps(SNAPSHOT))
    return path
