from __future__ import annotations

from fastapi import APIRouter, Body, Depends, Path, Query

from ..api_response import fail, ok
from ..clients.backend_client import BackendClient
from ..errors import ConfigurationError, FetchError
from ..services.category_service import (
    CATEGORY_SCREEN,
    SUBCATEGORY_TREE,
    SUBCATEGORY_VIEW_KEY,
    delete_command,
    toggle_activation_command,
)
from ..services.console_service import (
    load_tree,
    render_table,
    render_tree,
    run_command,
    search_table,
    show_table,
)
from .deps import (
    SearchReq,
    get_fetcher,
    get_language,
    get_session,
    replace_tree_for,
    table_for,
)

router = APIRouter()


@router.get("/console/categories")
async def page_categories(
    page: int | None = Query(default=None),
    size: int | None = Query(default=None),
    refresh: bool = Query(default=False),
    session: str | None = Depends(get_session),
    fetcher: BackendClient = Depends(get_fetcher),
    language: str = Depends(get_language),
):
    """分类列表（后端分页）：GET /console/categories。"""
    table = table_for(session, CATEGORY_SCREEN)
    try:
        data = await show_table(
            table,
            CATEGORY_SCREEN,
            fetcher,
            page=page,
            size=size,
            refresh=refresh,
            language=language,
        )
    except ConfigurationError as e:
        return fail("400", str(e))
    return ok(data.model_dump())


@router.put("/console/categories/search")
async def search_categories(
    body: SearchReq = Body(...),
    session: str | None = Depends(get_session),
    fetcher: BackendClient = Depends(get_fetcher),
    language: str = Depends(get_language),
):
    """在当前页内搜索分类（不跨页）。"""
    table = table_for(session, CATEGORY_SCREEN)
    data = await search_table(
        table, CATEGORY_SCREEN, fetcher, body.term, language=language
    )
    return ok(data.model_dump())


@router.delete("/console/categories/{category_id}")
async def delete_category(
    category_id: int = Path(...),
    session: str | None = Depends(get_session),
    fetcher: BackendClient = Depends(get_fetcher),
    language: str = Depends(get_language),
):
    """删除分类后刷新当前页。"""
    if category_id <= 0:
        return fail("400", "无效的分类 ID")
    table = table_for(session, CATEGORY_SCREEN)
    try:
        message, data = await run_command(
            table,
            CATEGORY_SCREEN,
            fetcher,
            delete_command(category_id),
            language=language,
        )
    except FetchError as e:
        return fail("502", str(e), render_table(table, CATEGORY_SCREEN).model_dump())
    return ok(data.model_dump(), msg=message or "操作成功")


@router.patch("/console/categories/{category_id}/activation")
async def toggle_category_activation(
    category_id: int = Path(...),
    session: str | None = Depends(get_session),
    fetcher: BackendClient = Depends(get_fetcher),
    language: str = Depends(get_language),
):
    """启用/停用分类后刷新当前页。"""
    if category_id <= 0:
        return fail("400", "无效的分类 ID")
    table = table_for(session, CATEGORY_SCREEN)
    try:
        message, data = await run_command(
            table,
            CATEGORY_SCREEN,
            fetcher,
            toggle_activation_command(category_id),
            language=language,
        )
    except FetchError as e:
        return fail("502", str(e), render_table(table, CATEGORY_SCREEN).model_dump())
    return ok(data.model_dump(), msg=message or "操作成功")


@router.get("/console/categories/{category_id}/subcategories")
async def subcategory_tree(
    category_id: int = Path(...),
    refresh: bool = Query(default=False),
    session: str | None = Depends(get_session),
    fetcher: BackendClient = Depends(get_fetcher),
    language: str = Depends(get_language),
):
    """子分类树：首次打开、切换界面语言或 refresh=true 时从后端加载。"""
    if category_id <= 0:
        return fail("400", "无效的分类 ID")
    view = replace_tree_for(session, SUBCATEGORY_VIEW_KEY, category_id)
    if refresh or view.needs_load(language):
        await load_tree(
            view, SUBCATEGORY_TREE, fetcher, root_id=category_id, language=language
        )
    return ok(render_tree(view, SUBCATEGORY_TREE).model_dump())


@router.post("/console/categories/{category_id}/subcategories/toggle/{node_id}")
async def toggle_subcategory(
    category_id: int = Path(...),
    node_id: int = Path(...),
    session: str | None = Depends(get_session),
):
    """展开/收起一个子分类节点。"""
    view = replace_tree_for(session, SUBCATEGORY_VIEW_KEY, category_id)
    view.toggle(node_id)
    return ok(render_tree(view, SUBCATEGORY_TREE).model_dump())


@router.post("/console/categories/{category_id}/subcategories/expand-all")
async def expand_all_subcategories(
    category_id: int = Path(...),
    session: str | None = Depends(get_session),
):
    """全部展开。"""
    view = replace_tree_for(session, SUBCATEGORY_VIEW_KEY, category_id)
    view.expand_all()
    return ok(render_tree(view, SUBCATEGORY_TREE).model_dump())


@router.post("/console/categories/{category_id}/subcategories/collapse-all")
async def collapse_all_subcategories(
    category_id: int = Path(...),
    session: str | None = Depends(get_session),
):
    """全部收起。"""
    view = replace_tree_for(session, SUBCATEGORY_VIEW_KEY, category_id)
    view.collapse_all()
    return ok(render_tree(view, SUBCATEGORY_TREE).model_dump())
