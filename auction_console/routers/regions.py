from __future__ import annotations

from fastapi import APIRouter, Body, Depends, Path, Query

from ..api_response import fail, ok
from ..clients.backend_client import BackendClient
from ..errors import ConfigurationError
from ..services.console_service import load_tree, render_tree, search_table, show_table
from ..services.region_service import REGION_SCREEN, REGION_TREE
from .deps import (
    SearchReq,
    get_fetcher,
    get_language,
    get_session,
    table_for,
    tree_for,
)

router = APIRouter()


@router.get("/console/regions")
async def page_regions(
    page: int | None = Query(default=None),
    size: int | None = Query(default=None),
    refresh: bool = Query(default=False),
    session: str | None = Depends(get_session),
    fetcher: BackendClient = Depends(get_fetcher),
    language: str = Depends(get_language),
):
    """地区列表：由地区树展开而来，本地分页。"""
    table = table_for(session, REGION_SCREEN)
    try:
        data = await show_table(
            table,
            REGION_SCREEN,
            fetcher,
            page=page,
            size=size,
            refresh=refresh,
            language=language,
        )
    except ConfigurationError as e:
        return fail("400", str(e))
    return ok(data.model_dump())


@router.put("/console/regions/search")
async def search_regions(
    body: SearchReq = Body(...),
    session: str | None = Depends(get_session),
    fetcher: BackendClient = Depends(get_fetcher),
    language: str = Depends(get_language),
):
    """搜索地区。"""
    table = table_for(session, REGION_SCREEN)
    data = await search_table(
        table, REGION_SCREEN, fetcher, body.term, language=language
    )
    return ok(data.model_dump())


@router.get("/console/regions/tree")
async def region_tree(
    refresh: bool = Query(default=False),
    session: str | None = Depends(get_session),
    fetcher: BackendClient = Depends(get_fetcher),
    language: str = Depends(get_language),
):
    """地区树：GET /console/regions/tree。"""
    view = tree_for(session, REGION_TREE.key)
    if refresh or view.needs_load(language):
        await load_tree(view, REGION_TREE, fetcher, language=language)
    return ok(render_tree(view, REGION_TREE).model_dump())


@router.post("/console/regions/tree/toggle/{node_id}")
async def toggle_region(
    node_id: int = Path(...),
    session: str | None = Depends(get_session),
):
    """展开/收起一个地区节点。"""
    view = tree_for(session, REGION_TREE.key)
    view.toggle(node_id)
    return ok(render_tree(view, REGION_TREE).model_dump())


@router.post("/console/regions/tree/expand-all")
async def expand_all_regions(session: str | None = Depends(get_session)):
    view = tree_for(session, REGION_TREE.key)
    view.expand_all()
    return ok(render_tree(view, REGION_TREE).model_dump())


@router.post("/console/regions/tree/collapse-all")
async def collapse_all_regions(session: str | None = Depends(get_session)):
    view = tree_for(session, REGION_TREE.key)
    view.collapse_all()
    return ok(render_tree(view, REGION_TREE).model_dump())
