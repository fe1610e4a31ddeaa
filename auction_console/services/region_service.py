"""
地区：地区树与地区列表。

地区列表不单独请求后端，而是把地区树快照按前序展开为行，
并补上 parentId / parentName，再在本地分页与搜索。
"""

from __future__ import annotations

from typing import Any, Dict, List

from ..core.columns import Column, status_badge
from ..core.fetcher import DataFetcher
from ..core.paged_table import PageRequest, PageResult, PagingPolicy
from ..core.tree_view import Forest, walk_forest
from ..models.common import TreeEndpoint
from ..models.entities import Region
from .console_service import TableScreen, TreeScreen

REGION_TREE_ENDPOINT = TreeEndpoint(
    service="admin",
    path="/api/admin/regions/tree",
    children_key="subRegions",
)

REGION_TREE = TreeScreen(
    key="regions-tree",
    title="regionsTree",
    endpoint=REGION_TREE_ENDPOINT,
)


def flatten_regions(forest: Forest) -> List[Dict[str, Any]]:
    """前序展开地区树，每行带上上级地区的 id 与名称。"""
    rows: List[Dict[str, Any]] = []
    for node, _, parent in walk_forest(forest):
        rows.append(
            {
                "id": node.id,
                "name": node.label,
                "isActive": bool(node.metadata.get("isActive", True)),
                "parentId": parent.id if parent is not None else None,
                "parentName": parent.label if parent is not None else None,
            }
        )
    return rows


async def _load_regions(fetcher: DataFetcher, request: PageRequest) -> PageResult:
    forest = await fetcher.fetch_tree_snapshot(REGION_TREE_ENDPOINT)
    rows = flatten_regions(forest)
    return PageResult(rows=rows, total_count=len(rows))


REGION_SCREEN = TableScreen(
    key="regions",
    title="regions",
    endpoint=None,
    parse=Region.model_validate,
    columns=(
        Column("name", "name"),
        Column("parentName", "parentName"),
        Column("isActive", "status", formatter=status_badge),
    ),
    policy=PagingPolicy.CLIENT,
    actions=("view", "viewSubRegions"),
    loader=_load_regions,
)
