"""Build an ordered forest from the flat parent-pointer collection."""

from collections import defaultdict
from collections.abc import Iterable, Iterator, Mapping

from loguru import logger

from tabgroup_tree.models.node import IntegrityIssue, Node, TreeNode


def index_nodes(nodes: Iterable[Node]) -> dict[str, Node]:
    """Map node id to node. Later duplicates replace earlier ones."""
    return {node.id: node for node in nodes}


def build_tree(nodes: Iterable[Node]) -> list[TreeNode]:
    """Build the forest of root nodes, each level sorted by position.

    Nodes whose parent is missing from the collection are kept as roots.
    Nodes caught in a parent cycle never reach a root; they are logged and
    left out. Never raises.
    """
    nodes = list(nodes)
    by_id = index_nodes(nodes)
    children: dict[str, list[Node]] = {node.id: [] for node in nodes}
    roots: list[Node] = []

    for node in nodes:
        if node.parent_id is None:
            roots.append(node)
        elif node.parent_id == node.id:
            logger.warning("Node {} is its own parent, treating as root", node.id)
            roots.append(node)
        elif node.parent_id in by_id:
            children[node.parent_id].append(node)
        else:
            logger.warning("Node {} references missing parent {}, treating as root", node.id, node.parent_id)
            roots.append(node)

    def freeze(node: Node, seen: frozenset[str]) -> TreeNode:
        # `seen` guards against a cycle hanging off a root via a duplicate id.
        kids = sorted(children[node.id], key=lambda n: n.position)
        return TreeNode(
            node=node,
            children=tuple(freeze(kid, seen | {kid.id}) for kid in kids if kid.id not in seen),
        )

    forest = [freeze(root, frozenset({root.id})) for root in sorted(roots, key=lambda n: n.position)]

    reached = {t.id for _depth, t in walk_tree(forest)}
    unreached = sorted(node_id for node_id in by_id if node_id not in reached)
    if unreached:
        logger.warning("Nodes in a parent cycle, not shown: {}", ", ".join(unreached))
    return forest


def walk_tree(forest: Iterable[TreeNode], depth: int = 0) -> Iterator[tuple[int, TreeNode]]:
    """Yield (depth, tree node) pairs in pre-order."""
    for tree_node in forest:
        yield depth, tree_node
        yield from walk_tree(tree_node.children, depth + 1)


def iter_ancestors(nodes_by_id: Mapping[str, Node], node_id: str) -> Iterator[Node]:
    """Walk the parent chain upwards, starting with the node's parent.

    Stops at a root, at a missing parent, or when an id repeats.
    """
    seen = {node_id}
    current = nodes_by_id.get(node_id)
    while current is not None and current.parent_id is not None:
        if current.parent_id in seen:
            return
        parent = nodes_by_id.get(current.parent_id)
        if parent is None:
            return
        seen.add(parent.id)
        yield parent
        current = parent


def is_descendant(nodes_by_id: Mapping[str, Node], ancestor_id: str, node_id: str) -> bool:
    """True if ``node_id`` sits anywhere below ``ancestor_id``."""
    return any(a.id == ancestor_id for a in iter_ancestors(nodes_by_id, node_id))


def is_top_level(nodes_by_id: Mapping[str, Node], node: Node) -> bool:
    """True if ``node`` is shown as a root: no parent, itself, or a missing one."""
    return node.parent_id is None or node.parent_id == node.id or node.parent_id not in nodes_by_id


def siblings_of(
    nodes_by_id: Mapping[str, Node],
    parent_id: str | None,
    *,
    exclude: str | None = None,
) -> list[Node]:
    """Direct children of ``parent_id``, ordered by position.

    ``parent_id`` None means the top level as rendered, so orphans count as
    roots there.
    """
    if parent_id is None:
        siblings = [n for n in nodes_by_id.values() if is_top_level(nodes_by_id, n)]
    else:
        siblings = [n for n in nodes_by_id.values() if n.parent_id == parent_id and n.parent_id != n.id]
    return sorted((n for n in siblings if n.id != exclude), key=lambda n: n.position)


def find_integrity_issues(nodes: Iterable[Node]) -> list[IntegrityIssue]:
    """Report orphans, parent cycles and non-contiguous sibling positions."""
    by_id = index_nodes(nodes)
    issues: list[IntegrityIssue] = []

    for node in by_id.values():
        if node.parent_id is not None and node.parent_id not in by_id:
            issues.append(
                IntegrityIssue("orphan", node.id, f"parent {node.parent_id!r} does not exist")
            )

    reported: set[str] = set()
    for node in by_id.values():
        path = [node.id]
        current = node
        while current.parent_id is not None and current.parent_id in by_id:
            if current.parent_id in path:
                cycle = path[path.index(current.parent_id):]
                if not reported.intersection(cycle):
                    reported.update(cycle)
                    issues.append(IntegrityIssue("cycle", node.id, " -> ".join(cycle)))
                break
            path.append(current.parent_id)
            current = by_id[current.parent_id]

    groups: dict[str | None, list[Node]] = defaultdict(list)
    for node in by_id.values():
        groups[node.parent_id].append(node)
    for parent_id, group in groups.items():
        positions = sorted(n.position for n in group)
        if positions != list(range(len(group))):
            issues.append(
                IntegrityIssue(
                    "positions",
                    parent_id or "<root>",
                    f"expected 0..{len(group) - 1}, found {positions}",
                )
            )

    return issues
