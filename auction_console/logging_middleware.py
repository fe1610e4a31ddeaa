from __future__ import annotations

import logging
import time

from fastapi import Request
from starlette.responses import Response

from .utils.request_utils import get_client_ip, get_session_id

logger = logging.getLogger("auction_console.access")


def _resolve_module(path: str) -> str:
    """根据请求路径推断所属页面，用于日志筛选。"""
    mapping = {
        "/console/categories": "分类管理",
        "/console/dynamic-attributes": "动态属性",
        "/console/regions": "地区管理",
        "/console/sliders": "轮播图管理",
        "/console/users": "用户管理",
        "/console/session": "会话",
    }
    for prefix, name in mapping.items():
        if path.startswith(prefix):
            return name
    return "其它"


async def request_log_middleware(request: Request, call_next):
    """
    请求日志中间件：记录每个控制台请求的模块、状态码与耗时。

    日志失败不影响业务响应。
    """
    path = request.url.path
    if path.startswith("/docs") or path.startswith("/openapi") or path.startswith(
        "/redoc"
    ):
        return await call_next(request)

    start = time.time()
    response: Response = await call_next(request)
    duration_ms = int((time.time() - start) * 1000)

    method = request.method
    if method in {"OPTIONS"}:
        return response

    try:
        logger.info(
            "%s %s module=%s status=%s time=%sms ip=%s session=%s",
            method,
            path,
            _resolve_module(path),
            response.status_code,
            duration_ms,
            get_client_ip(request),
            get_session_id(request.headers),
        )
    except Exception:  # noqa: BLE001
        logger.debug("request log failed", exc_info=True)

    return response
