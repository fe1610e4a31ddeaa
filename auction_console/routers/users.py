from __future__ import annotations

from fastapi import APIRouter, Body, Depends, Query

from ..api_response import fail, ok
from ..clients.backend_client import BackendClient
from ..errors import ConfigurationError
from ..services.console_service import search_table, show_table
from ..services.user_service import USER_SCREEN
from .deps import SearchReq, get_fetcher, get_language, get_session, table_for

router = APIRouter()


@router.get("/console/users")
async def page_users(
    page: int | None = Query(default=None),
    size: int | None = Query(default=None),
    refresh: bool = Query(default=False),
    session: str | None = Depends(get_session),
    fetcher: BackendClient = Depends(get_fetcher),
    language: str = Depends(get_language),
):
    """用户列表（后端返回全量，本地分页）：GET /console/users。"""
    table = table_for(session, USER_SCREEN)
    try:
        data = await show_table(
            table,
            USER_SCREEN,
            fetcher,
            page=page,
            size=size,
            refresh=refresh,
            language=language,
        )
    except ConfigurationError as e:
        return fail("400", str(e))
    return ok(data.model_dump())


@router.put("/console/users/search")
async def search_users(
    body: SearchReq = Body(...),
    session: str | None = Depends(get_session),
    fetcher: BackendClient = Depends(get_fetcher),
    language: str = Depends(get_language),
):
    """按姓名、邮箱等任意字段搜索用户。"""
    table = table_for(session, USER_SCREEN)
    data = await search_table(
        table, USER_SCREEN, fetcher, body.term, language=language
    )
    return ok(data.model_dump())
