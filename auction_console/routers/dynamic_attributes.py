from __future__ import annotations

from fastapi import APIRouter, Body, Depends, Path, Query

from ..api_response import fail, ok
from ..clients.backend_client import BackendClient
from ..errors import ConfigurationError, FetchError
from ..services.console_service import render_table, run_command, search_table, show_table
from ..services.dynamic_attribute_service import (
    DYNAMIC_ATTRIBUTE_SCREEN,
    delete_command,
    toggle_activation_command,
)
from .deps import SearchReq, get_fetcher, get_language, get_session, table_for

router = APIRouter()


@router.get("/console/dynamic-attributes")
async def page_dynamic_attributes(
    page: int | None = Query(default=None),
    size: int | None = Query(default=None),
    refresh: bool = Query(default=False),
    session: str | None = Depends(get_session),
    fetcher: BackendClient = Depends(get_fetcher),
    language: str = Depends(get_language),
):
    """动态属性列表（后端返回全量，本地分页）：GET /console/dynamic-attributes。"""
    table = table_for(session, DYNAMIC_ATTRIBUTE_SCREEN)
    try:
        data = await show_table(
            table,
            DYNAMIC_ATTRIBUTE_SCREEN,
            fetcher,
            page=page,
            size=size,
            refresh=refresh,
            language=language,
        )
    except ConfigurationError as e:
        return fail("400", str(e))
    return ok(data.model_dump())


@router.put("/console/dynamic-attributes/search")
async def search_dynamic_attributes(
    body: SearchReq = Body(...),
    session: str | None = Depends(get_session),
    fetcher: BackendClient = Depends(get_fetcher),
    language: str = Depends(get_language),
):
    """搜索动态属性。"""
    table = table_for(session, DYNAMIC_ATTRIBUTE_SCREEN)
    data = await search_table(
        table, DYNAMIC_ATTRIBUTE_SCREEN, fetcher, body.term, language=language
    )
    return ok(data.model_dump())


@router.delete("/console/dynamic-attributes/{attribute_id}")
async def delete_dynamic_attribute(
    attribute_id: int = Path(...),
    session: str | None = Depends(get_session),
    fetcher: BackendClient = Depends(get_fetcher),
    language: str = Depends(get_language),
):
    """删除动态属性后刷新列表。"""
    if attribute_id <= 0:
        return fail("400", "ID 参数不正确")
    table = table_for(session, DYNAMIC_ATTRIBUTE_SCREEN)
    try:
        message, data = await run_command(
            table,
            DYNAMIC_ATTRIBUTE_SCREEN,
            fetcher,
            delete_command(attribute_id),
            language=language,
        )
    except FetchError as e:
        return fail("502", str(e), render_table(table, DYNAMIC_ATTRIBUTE_SCREEN).model_dump())
    return ok(data.model_dump(), msg=message or "操作成功")


@router.patch("/console/dynamic-attributes/{attribute_id}/activation")
async def toggle_dynamic_attribute_activation(
    attribute_id: int = Path(...),
    session: str | None = Depends(get_session),
    fetcher: BackendClient = Depends(get_fetcher),
    language: str = Depends(get_language),
):
    """启用/停用动态属性后刷新列表。"""
    if attribute_id <= 0:
        return fail("400", "ID 参数不正确")
    table = table_for(session, DYNAMIC_ATTRIBUTE_SCREEN)
    try:
        message, data = await run_command(
            table,
            DYNAMIC_ATTRIBUTE_SCREEN,
            fetcher,
            toggle_activation_command(attribute_id),
            language=language,
        )
    except FetchError as e:
        return fail("502", str(e), render_table(table, DYNAMIC_ATTRIBUTE_SCREEN).model_dump())
    return ok(data.model_dump(), msg=message or "操作成功")
