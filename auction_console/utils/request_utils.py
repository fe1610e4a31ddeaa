from __future__ import annotations

from typing import Mapping

from fastapi import Request

from ..state.view_store import DEFAULT_SESSION


def get_client_ip(request: Request) -> str:
    """从请求头或连接信息中获取客户端 IP。"""
    xff = request.headers.get("x-forwarded-for", "") or request.headers.get(
        "X-Forwarded-For", ""
    )
    if xff:
        return (xff.split(",")[0] or "").strip()
    if request.client:
        return request.client.host or ""
    return ""


def get_session_id(headers: Mapping[str, str]) -> str:
    """从请求头读取控制台会话标识。"""
    sid = headers.get("X-Console-Session") or headers.get("x-console-session")
    return (sid or "").strip() or DEFAULT_SESSION
