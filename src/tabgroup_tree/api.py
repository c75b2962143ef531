"""HTTP client for the tab-group service."""

import os
from typing import Any

import requests
from loguru import logger

from tabgroup_tree.config import (
    API_BASE_URL,
    API_PAGE_SIZE,
    API_TIMEOUT,
    API_TOKEN_ENV,
    API_TOKEN_FILES,
)
from tabgroup_tree.core.importer.json_reader import parse_node_records, update_to_payload
from tabgroup_tree.exceptions import PersistenceError
from tabgroup_tree.models.node import Node, PositionUpdate


class TabGroupsApi:
    """Tab-group service client implementing NodeStoreProtocol."""

    def __init__(self, *, base_url: str | None = None) -> None:
        self.base_url = (base_url or API_BASE_URL).rstrip("/")
        self.sess = requests.Session()

        token_source: str
        env_token = os.environ.get(API_TOKEN_ENV, "").strip()
        if env_token:
            self.api_token = env_token
            token_source = f"${API_TOKEN_ENV}"
        else:
            for token_path in API_TOKEN_FILES:
                try:
                    self.api_token = token_path.read_text(encoding="utf-8").strip()
                    token_source = str(token_path)
                    break
                except FileNotFoundError:
                    pass
            else:
                msg = f"Cannot find tab-group API token, was looking at ${API_TOKEN_ENV} and {API_TOKEN_FILES!r}"
                raise RuntimeError(msg)

        self.sess.headers["Authorization"] = f"Bearer {self.api_token}"
        logger.debug("API ready: {} (token from {!r})", self.base_url, token_source)

    def call(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        payload: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Invoke the service, return the unwrapped ``data`` object."""
        logger.debug("Making request: {} {} {}", method, path, repr(params or payload)[:48])
        try:
            r = self.sess.request(
                method,
                f"{self.base_url}/{path.lstrip('/')}",
                params=params,
                json=payload,
                timeout=API_TIMEOUT,
            )
            r.raise_for_status()
            rv = r.json()
        except requests.RequestException as e:
            msg = f"API call failed: {method} {path!r}: {e}"
            raise PersistenceError(msg) from e
        except ValueError as e:
            msg = f"API call returned invalid JSON: {method} {path!r}"
            raise PersistenceError(msg) from e

        if not isinstance(rv, dict):
            msg = f"API call returned unexpected body: {method} {path!r} -> {rv!r}"
            raise PersistenceError(msg)
        data = rv.get("data", rv)
        return data if isinstance(data, dict) else {}

    def read_nodes(self) -> list[Node]:
        """Fetch every tab group, following the page cursor."""
        records: list[dict[str, Any]] = []
        cursor: str | None = None
        while True:
            params: dict[str, Any] = {"page_size": API_PAGE_SIZE}
            if cursor:
                params["page_cursor"] = cursor
            page = self.call("GET", "tab-groups", params=params)
            records.extend(page.get("tab_groups", []))
            cursor = (page.get("meta") or {}).get("next_cursor")
            if not cursor:
                break

        logger.debug("Fetched {} tab groups", len(records))
        return parse_node_records(records)

    def write_node(self, update: PositionUpdate) -> None:
        """Persist parent and position of one tab group."""
        self.call("PATCH", f"tab-groups/{update.id}", payload=update_to_payload(update))
