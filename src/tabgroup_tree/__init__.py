"""Hierarchical drag-and-drop reorder engine for tab-group trees."""

from tabgroup_tree.api import TabGroupsApi
from tabgroup_tree.core.drag.session import DragSession, DragState
from tabgroup_tree.core.move.mutator import OptimisticMutator
from tabgroup_tree.core.tree.builder import build_tree
from tabgroup_tree.protocols import NodeStoreProtocol
from tabgroup_tree.store import JsonFileStore

__all__ = [
    "DragSession",
    "DragState",
    "JsonFileStore",
    "NodeStoreProtocol",
    "OptimisticMutator",
    "TabGroupsApi",
    "build_tree",
]
