"""数据获取方约定：视图模型只依赖该接口，不关心传输细节。"""

from __future__ import annotations

from typing import List, Optional, Protocol

from ..models.common import PageEndpoint, TreeEndpoint
from .paged_table import PageResult
from .tree_view import TreeNode


class DataFetcher(Protocol):
    """从拍卖后端加载树快照或一页数据，失败时抛出 FetchError。"""

    async def fetch_tree_snapshot(
        self, endpoint: TreeEndpoint, root_id: Optional[int] = None
    ) -> List[TreeNode]:
        ...

    async def fetch_page(
        self,
        endpoint: PageEndpoint,
        page: int,
        size: int,
        search: Optional[str] = None,
    ) -> PageResult:
        ...

    async def send_command(
        self,
        service: str,
        method: str,
        path: str,
        json: Optional[dict] = None,
    ) -> str:
        ...
