"""
控制台会话：查看与清空当前会话已打开页面的视图状态。
"""

from fastapi import APIRouter, Depends

from ..api_response import ok
from ..state.view_store import get_view_store
from .deps import get_session

router = APIRouter()


@router.get("/console/session")
async def list_session_views(session: str | None = Depends(get_session)):
    """当前会话已打开的页面 key 列表。"""
    return ok(get_view_store().keys(session))


@router.delete("/console/session")
async def clear_session_views(session: str | None = Depends(get_session)):
    """清空当前会话的全部视图状态（展开状态、页码、搜索词）。"""
    removed = get_view_store().clear_session(session)
    return ok({"removed": removed})
