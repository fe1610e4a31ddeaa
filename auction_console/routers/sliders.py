from __future__ import annotations

from fastapi import APIRouter, Body, Depends, Path, Query

from ..api_response import fail, ok
from ..clients.backend_client import BackendClient
from ..errors import ConfigurationError, FetchError
from ..services.console_service import render_table, run_command, search_table, show_table
from ..services.slider_service import (
    SLIDER_SCREEN,
    delete_command,
    toggle_activation_command,
)
from .deps import SearchReq, get_fetcher, get_language, get_session, table_for

router = APIRouter()


@router.get("/console/sliders")
async def page_sliders(
    page: int | None = Query(default=None),
    size: int | None = Query(default=None),
    refresh: bool = Query(default=False),
    session: str | None = Depends(get_session),
    fetcher: BackendClient = Depends(get_fetcher),
    language: str = Depends(get_language),
):
    """轮播图列表（后端分页）：GET /console/sliders。"""
    table = table_for(session, SLIDER_SCREEN)
    try:
        data = await show_table(
            table,
            SLIDER_SCREEN,
            fetcher,
            page=page,
            size=size,
            refresh=refresh,
            language=language,
        )
    except ConfigurationError as e:
        return fail("400", str(e))
    return ok(data.model_dump())


@router.put("/console/sliders/search")
async def search_sliders(
    body: SearchReq = Body(...),
    session: str | None = Depends(get_session),
    fetcher: BackendClient = Depends(get_fetcher),
    language: str = Depends(get_language),
):
    """在当前页内搜索轮播图（不跨页）。"""
    table = table_for(session, SLIDER_SCREEN)
    data = await search_table(
        table, SLIDER_SCREEN, fetcher, body.term, language=language
    )
    return ok(data.model_dump())


@router.delete("/console/sliders/{slider_id}")
async def delete_slider(
    slider_id: int = Path(...),
    session: str | None = Depends(get_session),
    fetcher: BackendClient = Depends(get_fetcher),
    language: str = Depends(get_language),
):
    """删除轮播图后刷新列表。"""
    if slider_id <= 0:
        return fail("400", "ID 参数不正确")
    table = table_for(session, SLIDER_SCREEN)
    try:
        message, data = await run_command(
            table,
            SLIDER_SCREEN,
            fetcher,
            delete_command(slider_id),
            language=language,
        )
    except FetchError as e:
        return fail("502", str(e), render_table(table, SLIDER_SCREEN).model_dump())
    return ok(data.model_dump(), msg=message or "操作成功")


@router.patch("/console/sliders/{slider_id}/activation")
async def toggle_slider_activation(
    slider_id: int = Path(...),
    session: str | None = Depends(get_session),
    fetcher: BackendClient = Depends(get_fetcher),
    language: str = Depends(get_language),
):
    """启用/停用轮播图后刷新列表。"""
    if slider_id <= 0:
        return fail("400", "ID 参数不正确")
    table = table_for(session, SLIDER_SCREEN)
    try:
        message, data = await run_command(
            table,
            SLIDER_SCREEN,
            fetcher,
            toggle_activation_command(slider_id),
            language=language,
        )
    except FetchError as e:
        return fail("502", str(e), render_table(table, SLIDER_SCREEN).model_dump())
    return ok(data.model_dump(), msg=message or "操作成功")
