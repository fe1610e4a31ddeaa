"""Shared fixtures: sample snapshots and an in-memory data fetcher."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional, Tuple

import pytest

from auction_console.core.paged_table import PageResult
from auction_console.core.tree_view import TreeNode
from auction_console.errors import FetchError
from auction_console.state import view_store as view_store_module


def node(node_id: int, label: str, *children: TreeNode, **metadata: Any) -> TreeNode:
    return TreeNode(id=node_id, label=label, children=tuple(children), metadata=metadata)


@pytest.fixture
def region_forest() -> List[TreeNode]:
    """Riyadh region with two cities (one with a district) plus a leaf region."""
    return [
        node(
            1,
            "Riyadh Region",
            node(11, "Riyadh", node(111, "Olaya")),
            node(12, "Kharj"),
        ),
        node(2, "Makkah Region", node(21, "Jeddah")),
        node(3, "Tabuk"),
    ]


class FakeFetcher:
    """In-memory DataFetcher: pages keyed by endpoint path, optional gates per page."""

    def __init__(self) -> None:
        self.pages: Dict[str, List[Dict[str, Any]]] = {}
        self.totals: Dict[str, int] = {}
        self.trees: Dict[str, List[TreeNode]] = {}
        self.fail_with: Optional[FetchError] = None
        self.command_error: Optional[FetchError] = None
        self.gates: Dict[int, asyncio.Event] = {}
        self.page_calls: List[Tuple[str, int, int, Optional[str]]] = []
        self.tree_calls: List[Tuple[str, Optional[int]]] = []
        self.commands: List[Tuple[str, str, str, Optional[dict]]] = []

    async def fetch_page(self, endpoint, page, size, search=None):
        self.page_calls.append((endpoint.path, page, size, search))
        gate = self.gates.get(page)
        if gate is not None:
            await gate.wait()
        if self.fail_with is not None:
            raise self.fail_with
        rows = self.pages.get(endpoint.path, [])
        if endpoint.paginated:
            start = (page - 1) * size
            total = self.totals.get(endpoint.path, len(rows))
            return PageResult(rows=rows[start:start + size], total_count=total)
        return PageResult(rows=list(rows), total_count=len(rows))

    async def fetch_tree_snapshot(self, endpoint, root_id=None):
        self.tree_calls.append((endpoint.path, root_id))
        if self.fail_with is not None:
            raise self.fail_with
        key = endpoint.path.replace("{root_id}", str(root_id))
        return self.trees.get(key, [])

    async def send_command(self, service, method, path, json=None):
        self.commands.append((service, method, path, json))
        if self.command_error is not None:
            raise self.command_error
        return "done"


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def fresh_view_store(monkeypatch):
    """Each test gets an empty per-process view state store."""
    store = view_store_module.ViewStateStore()
    monkeypatch.setattr(view_store_module, "view_store", store)
    return store
