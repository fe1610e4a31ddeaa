"""
分页表格视图模型。

两种分页策略：
- server：rows 为后端返回的一页，totalCount 为后端给出的未过滤总数；
  搜索词默认只在当前页内存中过滤（与原控制台一致，不跨页搜索），
  开启 server_search 时搜索词作为查询参数转发给后端，本地不再过滤；
- client：rows 为内存中的完整集合，本地过滤、本地分页，totalCount 为过滤后条数。
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)


class PagingPolicy(str, Enum):
    SERVER = "server"
    CLIENT = "client"


class LoadStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


@dataclass(frozen=True)
class PageRequest:
    """一次页面加载请求；seq 单调递增，只有最新的请求是有效的。"""

    seq: int
    page: int
    size: int
    search: Optional[str] = None
    language: Optional[str] = None


@dataclass(frozen=True)
class PageResult:
    """数据获取方返回的一页数据。"""

    rows: Sequence[Any]
    total_count: int


def _scalar_values(row: Any) -> Iterable[Any]:
    """取出行内所有标量字段值，嵌套的列表/对象不参与搜索。"""
    if isinstance(row, BaseModel):
        values: Iterable[Any] = row.model_dump().values()
    elif isinstance(row, Mapping):
        values = row.values()
    else:
        values = vars(row).values()
    for v in values:
        if v is None or isinstance(v, (list, tuple, dict, set)):
            continue
        yield v


def _display_str(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def row_matches(row: Any, term: str) -> bool:
    """任一字段的字符串表示包含搜索词（忽略大小写）即匹配。"""
    needle = term.lower()
    return any(needle in _display_str(v).lower() for v in _scalar_values(row))


class PagedTable:
    """分页表格视图模型，仅持有分页所需的最小状态。"""

    def __init__(
        self,
        page_size: int = 10,
        policy: PagingPolicy | str = PagingPolicy.SERVER,
        server_search: bool = False,
    ) -> None:
        self._page_size = self._check_page_size(page_size)
        try:
            self._policy = PagingPolicy(policy)
        except ValueError as exc:
            raise ConfigurationError(f"未知的分页策略：{policy}") from exc
        if server_search and self._policy is not PagingPolicy.SERVER:
            raise ConfigurationError("server_search 仅适用于 server 分页策略")
        self._server_search = server_search

        self._current_page = 1
        self._search_term = ""
        self._rows: Tuple[Any, ...] = ()
        self._total_count = 0
        self._has_snapshot = False

        self._seq = 0
        self._pending: Optional[PageRequest] = None
        self._language: Optional[str] = None
        self.status = LoadStatus.IDLE
        self.error: Optional[str] = None

    @staticmethod
    def _check_page_size(page_size: Any) -> int:
        if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size <= 0:
            raise ConfigurationError(f"pageSize 必须为正整数，当前值：{page_size!r}")
        return page_size

    # ---- 只读状态 ----

    @property
    def policy(self) -> PagingPolicy:
        return self._policy

    @property
    def server_search(self) -> bool:
        return self._server_search

    @property
    def total_count_source(self) -> str:
        """totalCount 的来源：backend（后端总数）或 filtered（本地过滤后条数）。"""
        return "backend" if self._policy is PagingPolicy.SERVER else "filtered"

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def search_term(self) -> str:
        return self._search_term

    @property
    def rows(self) -> Tuple[Any, ...]:
        return self._rows

    @property
    def language(self) -> Optional[str]:
        """最近一次请求使用的界面语言，未设置时为 None。"""
        return self._language

    @property
    def has_snapshot(self) -> bool:
        return self._has_snapshot

    @property
    def pending(self) -> Optional[PageRequest]:
        return self._pending

    @property
    def requires_fetch(self) -> bool:
        """server 策略每次翻页都需请求后端；client 策略仅在没有数据时请求。"""
        return self._policy is PagingPolicy.SERVER or not self._has_snapshot

    # ---- 派生值 ----

    def _applies_local_filter(self) -> bool:
        return bool(self._search_term) and not self._server_search

    def filtered_rows(self) -> List[Any]:
        if not self._applies_local_filter():
            return list(self._rows)
        return [r for r in self._rows if row_matches(r, self._search_term)]

    def total_count(self) -> int:
        if self._policy is PagingPolicy.SERVER:
            return self._total_count
        return len(self.filtered_rows())

    def derived_total_pages(self) -> int:
        return max(1, math.ceil(self.total_count() / self._page_size))

    def visible_rows(self) -> List[Any]:
        """应用搜索过滤后的行，保持获取顺序；client 策略下再按当前页切片。"""
        rows = self.filtered_rows()
        if self._policy is PagingPolicy.CLIENT:
            start = (self._current_page - 1) * self._page_size
            return rows[start:start + self._page_size]
        return rows

    def clamp_page(self, page: int) -> int:
        return min(max(int(page), 1), self.derived_total_pages())

    @property
    def has_previous(self) -> bool:
        return self._current_page > 1

    @property
    def has_next(self) -> bool:
        return self._current_page < self.derived_total_pages()

    @property
    def out_of_range(self) -> bool:
        """当前页超出最新的总页数（如删除后最后一页变空）。"""
        return self._current_page > self.derived_total_pages()

    def page_window(self, max_buttons: int = 5) -> List[int]:
        """分页按钮：展示前 min(max_buttons, 总页数) 个页码。"""
        return list(range(1, min(max_buttons, self.derived_total_pages()) + 1))

    def show_pagination(self) -> bool:
        return self.derived_total_pages() > 1

    # ---- 事件处理 ----

    def _issue(self, page: int) -> PageRequest:
        self._seq += 1
        search = self._search_term if self._server_search and self._search_term else None
        self._pending = PageRequest(
            seq=self._seq,
            page=page,
            size=self._page_size,
            search=search,
            language=self._language,
        )
        self.status = LoadStatus.LOADING
        return self._pending

    def go_to_page(self, page: int) -> Optional[PageRequest]:
        """
        翻页：越界页码截断到 [1, 总页数]，并成为唯一有效的待处理请求。

        返回的请求交给数据获取方；client 策略下已有数据时只在内存中翻页，返回 None。
        """
        target = self.clamp_page(page)
        self._current_page = target
        if not self.requires_fetch:
            return None
        return self._issue(target)

    def refresh(self) -> PageRequest:
        """重新加载当前页（增删改之后整体刷新快照）。"""
        return self._issue(self._current_page)

    def set_search_term(self, term: Optional[str]) -> Optional[PageRequest]:
        """
        设置搜索词。

        本地过滤时不请求后端（仅过滤内存中的行）；client 策略回到第 1 页；
        server_search 时回到第 1 页并返回需要转发给后端的请求。
        """
        self._search_term = (term or "").strip()
        if self._server_search:
            self._current_page = 1
            return self.refresh()
        if self._policy is PagingPolicy.CLIENT:
            self._current_page = 1
        return None

    def set_page_size(self, page_size: int) -> Optional[PageRequest]:
        """显式修改每页条数，回到第 1 页。"""
        self._page_size = self._check_page_size(page_size)
        self._current_page = 1
        if self._policy is PagingPolicy.CLIENT and self._has_snapshot:
            return self.go_to_page(1)
        return self.refresh()

    def set_language(self, language: Optional[str]) -> Optional[PageRequest]:
        """
        切换界面语言。

        行数据由后端本地化，语言变化且已有数据（或有进行中的请求）时重新加载当前页。
        """
        if language == self._language:
            return None
        self._language = language
        if not self._has_snapshot and self._pending is None:
            return None
        return self.refresh()

    def _is_current(self, request: PageRequest) -> bool:
        return self._pending is not None and request.seq == self._pending.seq

    def apply_result(self, request: PageRequest, result: PageResult) -> bool:
        """应用获取结果；不是最新请求的响应直接丢弃并返回 False。"""
        if not self._is_current(request):
            logger.debug(
                "discard stale page response seq=%s page=%s", request.seq, request.page
            )
            return False
        self._rows = tuple(result.rows)
        self._total_count = max(0, int(result.total_count))
        self._has_snapshot = True
        self._pending = None
        self.status = LoadStatus.LOADED
        self.error = None
        if self._policy is PagingPolicy.CLIENT:
            self._current_page = self.clamp_page(self._current_page)
        return True

    def apply_error(self, request: PageRequest, error: Exception) -> bool:
        """记录失败状态，保留之前的行，避免界面闪空。"""
        if not self._is_current(request):
            logger.debug("discard stale page error seq=%s", request.seq)
            return False
        self._pending = None
        self.status = LoadStatus.ERROR
        self.error = str(error)
        return True
