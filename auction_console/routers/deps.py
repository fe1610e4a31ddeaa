"""
路由公共依赖：后端客户端、界面语言、控制台会话与视图模型的获取。
"""

from __future__ import annotations

from fastapi import Depends, Header
from pydantic import BaseModel

from ..clients.backend_client import BackendClient
from ..config import get_settings
from ..core.paged_table import PagedTable
from ..core.tree_view import TreeView
from ..services.console_service import TableScreen
from ..state.view_store import get_view_store


class SearchReq(BaseModel):
    """搜索框输入。"""

    term: str = ""


def get_language(
    accept_language: str | None = Header(default=None, alias="Accept-Language"),
) -> str:
    """前端界面语言，取 Accept-Language 的第一项，缺省使用配置语言。"""
    lang = (accept_language or "").split(",")[0].split(";")[0].strip()
    return lang or get_settings().language


def get_fetcher(language: str = Depends(get_language)) -> BackendClient:
    """构造后端客户端，透传前端语言。"""
    return BackendClient(language=language)


def get_session(
    session: str | None = Header(default=None, alias="X-Console-Session"),
) -> str | None:
    """控制台会话标识，缺省时使用默认会话。"""
    return session


def table_for(session: str | None, screen: TableScreen) -> PagedTable:
    """获取（或创建）当前会话下某个表格页面的视图模型。"""
    return get_view_store().get_or_create(session, screen.key, screen.new_table)


def tree_for(session: str | None, key: str) -> TreeView:
    """获取（或创建）当前会话下某个树页面的视图模型。"""
    return get_view_store().get_or_create(session, key, TreeView)


def replace_tree_for(session: str | None, key: str, root_id: int) -> TreeView:
    """
    获取按根节点加载的树视图；已打开的是另一个根节点时丢弃旧视图重新创建，
    保证每个会话同一 key 下只保留一棵树。
    """
    view = tree_for(session, key)
    if view.root_id is not None and view.root_id != root_id:
        get_view_store().drop(session, key)
        view = tree_for(session, key)
    return view
