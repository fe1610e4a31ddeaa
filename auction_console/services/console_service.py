"""
页面通用流程：加载表格/树、执行写操作后刷新、生成渲染结构。

各实体的 service 只声明页面（接口、列、分页策略、可用操作），流程都在这里。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from ..config import get_settings
from ..core.columns import Column, column_resps, render_cells
from ..core.fetcher import DataFetcher
from ..core.paged_table import PageRequest, PageResult, PagedTable, PagingPolicy
from ..core.tree_view import TreeView
from ..errors import FetchError
from ..models.common import (
    PageEndpoint,
    PaginationResp,
    TableResp,
    TableRowResp,
    TreeEndpoint,
    TreeResp,
    TreeRowResp,
)
from ..models.entities import ConsoleRecord

logger = logging.getLogger(__name__)

PageLoader = Callable[[DataFetcher, PageRequest], Awaitable[PageResult]]


@dataclass(frozen=True)
class TableScreen:
    """表格页面声明。"""

    key: str
    title: str
    endpoint: Optional[PageEndpoint]
    parse: Callable[[Dict[str, Any]], ConsoleRecord]
    columns: Tuple[Column, ...]
    policy: PagingPolicy = PagingPolicy.SERVER
    actions: Tuple[str, ...] = ()
    server_search: bool = False
    loader: Optional[PageLoader] = field(default=None, compare=False)

    def new_table(self, page_size: Optional[int] = None) -> PagedTable:
        size = page_size if page_size is not None else get_settings().page_size
        return PagedTable(
            page_size=size,
            policy=self.policy,
            server_search=self.server_search,
        )


@dataclass(frozen=True)
class BackendCommand:
    """写操作（删除、启用/停用）描述。"""

    service: str
    method: str
    path: str
    json: Optional[dict] = None


@dataclass(frozen=True)
class TreeScreen:
    """树页面声明。"""

    key: str
    title: str
    endpoint: TreeEndpoint


async def _fetch_rows(
    screen: TableScreen, fetcher: DataFetcher, request: PageRequest
) -> PageResult:
    if screen.loader is not None:
        result = await screen.loader(fetcher, request)
    elif screen.endpoint is not None:
        result = await fetcher.fetch_page(
            screen.endpoint, request.page, request.size, request.search
        )
    else:
        raise FetchError(f"页面 {screen.key} 未配置数据接口")

    try:
        rows = [screen.parse(r) for r in result.rows]
    except (KeyError, TypeError, ValueError) as exc:
        raise FetchError(f"{screen.title} 数据格式错误：{exc}") from exc
    return PageResult(rows=rows, total_count=result.total_count)


async def load_table(
    table: PagedTable,
    screen: TableScreen,
    fetcher: DataFetcher,
    request: PageRequest,
) -> bool:
    """
    执行一次页面加载并写回表格。

    - 失败时记录错误状态，保留上一次的行；
    - 过期响应由表格丢弃；
    - server 策略下当前页超出新的总页数时，自动跳到最后一页。
    """
    try:
        result = await _fetch_rows(screen, fetcher, request)
    except FetchError as exc:
        logger.warning("load %s page=%s failed: %s", screen.key, request.page, exc)
        table.apply_error(request, exc)
        return False

    applied = table.apply_result(request, result)
    if applied and table.policy is PagingPolicy.SERVER and table.out_of_range:
        follow_up = table.go_to_page(table.derived_total_pages())
        if follow_up is not None:
            return await load_table(table, screen, fetcher, follow_up)
    return applied


async def show_table(
    table: PagedTable,
    screen: TableScreen,
    fetcher: DataFetcher,
    *,
    page: Optional[int] = None,
    size: Optional[int] = None,
    refresh: bool = False,
    language: Optional[str] = None,
) -> TableResp:
    """
    打开/翻页/刷新表格并返回渲染结构。

    首次打开时加载当前页；指定 page 时翻页；refresh=true 或界面语言变化时整体重新加载。
    后发出的请求取代先发出的请求；内存翻页不发请求，此前的请求仍然有效。
    """
    request: Optional[PageRequest] = None
    if language is not None:
        request = table.set_language(language)
    if size is not None and size != table.page_size:
        request = table.set_page_size(size) or request
    if page is not None:
        request = table.go_to_page(page) or request
    if refresh:
        request = table.refresh()
    elif request is None and not table.has_snapshot and table.pending is None:
        request = table.go_to_page(table.current_page)

    if request is not None:
        await load_table(table, screen, fetcher, request)
    return render_table(table, screen)


async def search_table(
    table: PagedTable,
    screen: TableScreen,
    fetcher: DataFetcher,
    term: Optional[str],
    language: Optional[str] = None,
) -> TableResp:
    """设置搜索词；只有转发给后端的搜索（或界面语言变化）才会触发请求。"""
    request = table.set_language(language) if language is not None else None
    request = table.set_search_term(term) or request
    if request is not None:
        await load_table(table, screen, fetcher, request)
    return render_table(table, screen)


async def run_command(
    table: PagedTable,
    screen: TableScreen,
    fetcher: DataFetcher,
    command: BackendCommand,
    language: Optional[str] = None,
) -> Tuple[str, TableResp]:
    """执行写操作，成功后整体刷新当前页；写操作失败直接抛出 FetchError。"""
    message = await fetcher.send_command(
        command.service, command.method, command.path, json=command.json
    )
    logger.info("%s %s %s done", screen.key, command.method, command.path)
    if language is not None:
        table.set_language(language)
    await load_table(table, screen, fetcher, table.refresh())
    return message, render_table(table, screen)


def render_table(table: PagedTable, screen: TableScreen) -> TableResp:
    """按列声明把可见行渲染为字符串单元格。"""
    rows: List[TableRowResp] = [
        TableRowResp(
            id=r.id,
            isActive=r.isActive,
            cells=render_cells(screen.columns, r),
        )
        for r in table.visible_rows()
    ]
    return TableResp(
        screen=screen.key,
        title=screen.title,
        policy=table.policy.value,
        totalCountSource=table.total_count_source,
        status=table.status.value,
        error=table.error,
        columns=column_resps(screen.columns),
        rows=rows,
        isEmpty=len(rows) == 0,
        currentPage=table.current_page,
        pageSize=table.page_size,
        totalCount=table.total_count(),
        totalPages=table.derived_total_pages(),
        searchTerm=table.search_term,
        pagination=PaginationResp(
            visible=table.show_pagination(),
            pages=table.page_window(),
            hasPrevious=table.has_previous,
            hasNext=table.has_next,
        ),
        actions=list(screen.actions),
    )


async def load_tree(
    view: TreeView,
    screen: TreeScreen,
    fetcher: DataFetcher,
    root_id: Optional[int] = None,
    language: Optional[str] = None,
) -> bool:
    """加载树快照；失败时保留上一次的树。"""
    ticket = view.begin_load(root_id, language=language)
    try:
        forest = await fetcher.fetch_tree_snapshot(screen.endpoint, root_id)
    except FetchError as exc:
        logger.warning("load tree %s failed: %s", screen.key, exc)
        view.apply_error(ticket, exc)
        return False
    return view.apply_snapshot(ticket, forest)


def render_tree(view: TreeView, screen: TreeScreen) -> TreeResp:
    rows = [
        TreeRowResp(
            id=item.node.id,
            label=item.node.label,
            depth=item.depth,
            isExpanded=item.is_expanded,
            hasChildren=item.has_children,
            metadata=dict(item.node.metadata),
        )
        for item in view.render()
    ]
    return TreeResp(
        screen=screen.key,
        title=screen.title,
        status=view.status,
        error=view.error,
        rows=rows,
        isEmpty=len(view.forest) == 0,
        expandedIds=sorted(view.expanded_ids),
    )
