"""Tab-group store backed by a JSON snapshot file."""

import json
import threading
from pathlib import Path
from typing import Any

from loguru import logger

from tabgroup_tree.core.importer.json_reader import parse_node_records, update_to_payload
from tabgroup_tree.exceptions import PersistenceError
from tabgroup_tree.models.node import Node, PositionUpdate


class JsonFileStore:
    """Read and write tab groups in a ``{"tab_groups": [...]}`` file.

    - Do not rewrite the file if contents are the same.
    - Writes may arrive from several threads at once; they are serialized.

    In dry-run mode updates are kept in memory only.
    """

    def __init__(self, path: str | Path, *, dry_run: bool = False) -> None:
        self.path = Path(path).expanduser()
        self.dry_run = dry_run
        self._lock = threading.Lock()
        self._records: list[dict[str, Any]] = self._load()

        self.num_same = 0
        self.num_changed = 0
        logger.debug("Store ready, path {!r}, dry_run {!r}", str(self.path), dry_run)

    def _load(self) -> list[dict[str, Any]]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            msg = f"Snapshot file {str(self.path)!r} not found"
            raise PersistenceError(msg) from e
        except json.JSONDecodeError as e:
            msg = f"Snapshot file {str(self.path)!r} is not valid JSON: {e}"
            raise PersistenceError(msg) from e

        records = data.get("tab_groups") if isinstance(data, dict) else data
        if not isinstance(records, list):
            msg = f"Snapshot file {str(self.path)!r} has no tab_groups list"
            raise PersistenceError(msg)
        return records

    def read_nodes(self) -> list[Node]:
        with self._lock:
            return parse_node_records(self._records)

    def write_node(self, update: PositionUpdate) -> None:
        with self._lock:
            record = next((r for r in self._records if str(r.get("id")) == update.id), None)
            if record is None:
                msg = f"Tab group {update.id!r} not found in {str(self.path)!r}"
                raise PersistenceError(msg)

            if record.get("parent_id") == update.parent_id and record.get("position") == update.position:
                self.num_same += 1
                return

            record.update(update_to_payload(update))
            self.num_changed += 1
            self._flush()

    def _flush(self) -> None:
        contents = json.dumps({"tab_groups": self._records}, indent=2, ensure_ascii=False) + "\n"
        if self.dry_run:
            logger.debug("Dry run, not writing {}", self.path)
            return
        try:
            if self.path.read_text(encoding="utf-8") == contents:
                return
        except FileNotFoundError:
            pass
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(contents, encoding="utf-8")
        tmp.replace(self.path)
