"""
拍卖后端 HTTP 客户端（数据获取方实现）。

说明：
- 每次调用新建 httpx.AsyncClient，超时取自配置；
- 所有失败（网络、非 2xx、success=false、格式错误）统一抛出 FetchError，不自动重试；
- 测试时可注入 httpx.MockTransport。
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..api_response import backend_message, unwrap_backend
from ..config import Settings, get_settings
from ..core.paged_table import PageResult
from ..core.tree_view import TreeNode, validate_forest
from ..errors import FetchError
from ..models.common import PageEndpoint, TreeEndpoint

logger = logging.getLogger(__name__)


def _tree_from_payload(
    items: Any, children_key: str, label_key: str, url: str
) -> List[TreeNode]:
    """把后端嵌套 JSON 转成不可变 TreeNode 森林，children 缺省视为空。"""
    if items is None:
        return []
    if not isinstance(items, list):
        raise FetchError("树数据格式错误：data 不是列表", url=url)

    # 后序构造：先压栈展开，再自底向上生成节点
    order: List[Dict[str, Any]] = []
    stack: List[Any] = list(items)
    while stack:
        raw = stack.pop()
        if not isinstance(raw, dict) or "id" not in raw:
            raise FetchError("树数据格式错误：节点缺少 id", url=url)
        order.append(raw)
        children = raw.get(children_key) or []
        if not isinstance(children, list):
            raise FetchError("树数据格式错误：子节点不是列表", url=url)
        stack.extend(children)

    built: Dict[int, TreeNode] = {}
    for raw in reversed(order):
        children = raw.get(children_key) or []
        try:
            node = TreeNode(
                id=int(raw["id"]),
                label=str(raw.get(label_key) or ""),
                children=tuple(built[id(c)] for c in children),
                metadata={
                    k: v
                    for k, v in raw.items()
                    if k not in ("id", label_key, children_key)
                },
            )
        except (TypeError, ValueError) as exc:
            raise FetchError(f"树数据格式错误：{exc}", url=url) from exc
        built[id(raw)] = node

    forest = [built[id(raw)] for raw in items]
    validate_forest(forest)
    return forest


class BackendClient:
    """拍卖后端客户端，实现 DataFetcher 约定。"""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        language: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._language = language or self._settings.language
        self._transport = transport

    def _base_url(self, service: str) -> str:
        if service == "catalog":
            return self._settings.catalog_api_base.rstrip("/")
        if service == "admin":
            return self._settings.admin_api_base.rstrip("/")
        raise FetchError(f"未知的后端服务：{service}")

    def _client(self) -> httpx.AsyncClient:
        kwargs: Dict[str, Any] = {
            "timeout": self._settings.http_timeout_seconds,
            "headers": {"Accept-Language": self._language},
        }
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return httpx.AsyncClient(**kwargs)

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """发送请求并返回解析后的 JSON，失败统一转换为 FetchError。"""
        try:
            async with self._client() as client:
                response = await client.request(method, url, params=params, json=json)
        except httpx.TimeoutException as exc:
            logger.warning("backend timeout %s %s", method, url)
            raise FetchError("请求后端超时", url=url) from exc
        except httpx.HTTPError as exc:
            logger.warning("backend unreachable %s %s: %s", method, url, exc)
            raise FetchError("无法连接后端服务", url=url) from exc

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if response.status_code >= 400:
            message = backend_message(payload) or "后端返回错误状态"
            logger.warning(
                "backend error %s %s status=%s", method, url, response.status_code
            )
            raise FetchError(message, url=url, status_code=response.status_code)
        if payload is None:
            raise FetchError("后端响应不是合法的 JSON", url=url)
        return payload

    async def fetch_page(
        self,
        endpoint: PageEndpoint,
        page: int,
        size: int,
        search: Optional[str] = None,
    ) -> PageResult:
        """
        获取一页数据。

        - paginated=true：带 pageNumber/pageSize 参数，总数取 data[total_key]；
        - paginated=false：后端返回完整列表，总数为列表长度。
        """
        url = self._base_url(endpoint.service) + endpoint.path
        params: Dict[str, Any] = {}
        if endpoint.paginated:
            params["pageNumber"] = page
            params["pageSize"] = size
        if search:
            params["search"] = search

        payload = await self._request("GET", url, params=params or None)
        data = unwrap_backend(payload, url=url)

        if endpoint.items_key:
            if not isinstance(data, dict):
                raise FetchError("列表数据格式错误：data 不是对象", url=url)
            rows = data.get(endpoint.items_key) or []
            total = data.get(endpoint.total_key, len(rows))
        else:
            rows = data or []
            total = len(rows) if isinstance(rows, list) else 0

        if not isinstance(rows, list):
            raise FetchError("列表数据格式错误：rows 不是列表", url=url)
        try:
            total_count = int(total)
        except (TypeError, ValueError) as exc:
            raise FetchError("列表数据格式错误：totalCount 非整数", url=url) from exc
        if total_count < 0:
            raise FetchError("列表数据格式错误：totalCount 为负数", url=url)

        logger.debug("fetched %s rows=%s total=%s", url, len(rows), total_count)
        return PageResult(rows=rows, total_count=total_count)

    async def fetch_tree_snapshot(
        self, endpoint: TreeEndpoint, root_id: Optional[int] = None
    ) -> List[TreeNode]:
        """获取树快照（整片森林）。"""
        path = endpoint.path
        if "{root_id}" in path:
            if root_id is None:
                raise FetchError("缺少根节点 ID")
            path = path.replace("{root_id}", str(root_id))
        url = self._base_url(endpoint.service) + path

        payload = await self._request("GET", url)
        data = unwrap_backend(payload, url=url)
        return _tree_from_payload(data, endpoint.children_key, endpoint.label_key, url)

    async def send_command(
        self,
        service: str,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
    ) -> str:
        """执行删除、启用/停用等写操作，返回后端提示信息。"""
        url = self._base_url(service) + path
        payload = await self._request(method, url, json=json)
        unwrap_backend(payload, url=url)
        return backend_message(payload)
