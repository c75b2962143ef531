"""CLI for browsing and reordering the tab-group tree."""

import asyncio
import json
from dataclasses import asdict
from pathlib import Path
from typing import Annotated, Any

import typer
from loguru import logger

from tabgroup_tree.api import TabGroupsApi
from tabgroup_tree.core.move.mutator import OptimisticMutator
from tabgroup_tree.core.tree.builder import find_integrity_issues
from tabgroup_tree.core.tree.markdown import render_forest_as_markdown
from tabgroup_tree.exceptions import PersistenceError
from tabgroup_tree.logging_config import configure_logging
from tabgroup_tree.models.node import DropZone, MoveOutcome, TreeNode
from tabgroup_tree.protocols import NodeStoreProtocol
from tabgroup_tree.store import JsonFileStore

app = typer.Typer(help="Tab-group tree: show and reorder groups and folders.")

FileOption = Annotated[
    Path | None,
    typer.Option("--file", "-f", help="JSON snapshot to use instead of the tab-group service"),
]
JsonOption = Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose=verbose)


def _open_store(file: Path | None) -> NodeStoreProtocol:
    """Open the snapshot file or the service client, exiting on failure."""
    try:
        if file is not None:
            return JsonFileStore(file)
        return TabGroupsApi()
    except RuntimeError as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e


def _load(file: Path | None) -> OptimisticMutator:
    mutator = OptimisticMutator(_open_store(file))
    try:
        mutator.reload()
    except PersistenceError as e:
        logger.error("Cannot load tab groups: {}", e)
        raise typer.Exit(1) from e
    return mutator


def _tree_to_dict(tree_node: TreeNode) -> dict[str, Any]:
    return {**asdict(tree_node.node), "children": [_tree_to_dict(c) for c in tree_node.children]}


def _report(outcome: MoveOutcome, output_json: bool) -> None:
    if output_json:
        data = {
            "status": str(outcome.status),
            "node_id": outcome.node_id,
            "reason": outcome.reason,
            "updates": [asdict(u) for u in outcome.updates],
        }
        typer.echo(json.dumps(data, indent=2))
    elif outcome.success:
        typer.echo(f"Moved {outcome.node_id} ({len(outcome.updates)} nodes updated)")
        for u in outcome.updates:
            typer.echo(f"  {u.id}: parent={u.parent_id or '<root>'} position={u.position}")
    else:
        typer.echo(f"Not moved ({outcome.status}): {outcome.reason}")

    if not outcome.success:
        raise typer.Exit(1)


@app.command()
def tree(
    file: FileOption = None,
    max_depth: Annotated[
        int | None,
        typer.Option("--max-depth", "-m", help="Max depth levels to render"),
    ] = None,
    show_ids: bool = typer.Option(False, "--ids", help="Show node ids and positions"),
    output_json: JsonOption = False,
) -> None:
    """Show the tab-group tree."""
    forest = _load(file).forest
    if output_json:
        typer.echo(json.dumps([_tree_to_dict(t) for t in forest], indent=2))
        return
    if not forest:
        typer.echo("No tab groups.")
        return
    typer.echo(render_forest_as_markdown(forest, max_depth=max_depth, show_ids=show_ids), nl=False)


@app.command()
def move(
    node_id: str = typer.Argument(..., help="Node to move"),
    target_id: str = typer.Argument(..., help="Node to drop on"),
    zone: Annotated[
        DropZone,
        typer.Option("--zone", "-z", help="Drop before, after or inside the target"),
    ] = DropZone.AFTER,
    file: FileOption = None,
    output_json: JsonOption = False,
) -> None:
    """Move a node before, after or inside another node."""
    mutator = _load(file)
    outcome = asyncio.run(mutator.move(node_id, target_id, zone))
    _report(outcome, output_json)


@app.command(name="move-to")
def move_to(
    node_id: str = typer.Argument(..., help="Node to move"),
    folder: Annotated[
        str | None,
        typer.Option("--folder", "-F", help="Destination folder id (omit for top level)"),
    ] = None,
    file: FileOption = None,
    output_json: JsonOption = False,
) -> None:
    """Move a node to the end of a folder, or to the top level."""
    mutator = _load(file)
    outcome = asyncio.run(mutator.move_to_folder(node_id, folder))
    _report(outcome, output_json)


@app.command()
def check(
    file: FileOption = None,
    output_json: JsonOption = False,
) -> None:
    """Report orphans, cycles and gaps in sibling positions."""
    mutator = _load(file)
    issues = find_integrity_issues(mutator.nodes.values())
    if output_json:
        typer.echo(json.dumps({"count": len(issues), "issues": [asdict(i) for i in issues]}, indent=2))
    elif not issues:
        typer.echo(f"OK: {len(mutator.nodes)} nodes, no issues.")
    else:
        typer.echo(f"{len(issues)} issues:\n")
        for issue in issues:
            typer.echo(f"  [{issue.kind}] {issue.node_id}: {issue.detail}")

    if issues:
        raise typer.Exit(1)
