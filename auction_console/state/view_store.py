"""
控制台视图状态存储。

按 (会话, 页面 key) 保存 PagedTable / TreeView，会话空闲超时或超出上限时整体淘汰。
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from threading import Lock
from typing import Any, Callable, Dict, List, TypeVar

from ..config import get_settings
from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_SESSION = "default"


@dataclass
class SessionViews:
    """一个控制台会话下已打开的全部视图模型。"""

    views: Dict[str, Any] = field(default_factory=dict)
    last_active_time: datetime = field(default_factory=datetime.now)


def _sid(session: str | None) -> str:
    return (session or "").strip() or DEFAULT_SESSION


class ViewStateStore:
    """
    视图状态内存存储，生命周期与 Python 进程一致。

    说明：
    - 不同会话之间不共享任何状态；
    - 每次访问刷新会话的最后活跃时间，空闲超过 idle_timeout 的会话被移除；
    - 会话数超过 max_sessions 时移除最久未访问的会话；
    - 服务重启后视图状态清空，适用于单进程部署场景。
    """

    def __init__(
        self,
        max_sessions: int = 1000,
        idle_timeout: timedelta = timedelta(hours=1),
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        if max_sessions <= 0:
            raise ConfigurationError(f"max_sessions 必须为正整数，当前值：{max_sessions!r}")
        self._max_sessions = max_sessions
        self._idle_timeout = idle_timeout
        self._clock = clock
        self._sessions: "OrderedDict[str, SessionViews]" = OrderedDict()
        self._lock = Lock()

    def _evict(self, now: datetime) -> None:
        # 调用方持有锁
        expired = [
            sid
            for sid, entry in self._sessions.items()
            if now - entry.last_active_time > self._idle_timeout
        ]
        for sid in expired:
            self._sessions.pop(sid, None)
        overflow = 0
        while len(self._sessions) > self._max_sessions:
            self._sessions.popitem(last=False)
            overflow += 1
        if expired or overflow:
            logger.debug("evicted sessions idle=%s overflow=%s", len(expired), overflow)

    def get_or_create(self, session: str | None, key: str, factory: Callable[[], T]) -> T:
        """获取视图模型，不存在时用 factory 创建。"""
        sid = _sid(session)
        now = self._clock()
        with self._lock:
            entry = self._sessions.get(sid)
            if entry is None:
                entry = SessionViews(last_active_time=now)
                self._sessions[sid] = entry
            else:
                self._sessions.move_to_end(sid)
                entry.last_active_time = now
            view = entry.views.get(key)
            if view is None:
                view = factory()
                entry.views[key] = view
            self._evict(now)
            return view

    def drop(self, session: str | None, key: str) -> None:
        """移除某个页面的视图状态（如切换到其他分类的子分类树）。"""
        with self._lock:
            entry = self._sessions.get(_sid(session))
            if entry is not None:
                entry.views.pop(key, None)

    def clear_session(self, session: str | None) -> int:
        """清空某个会话的全部视图状态，返回移除数量。"""
        with self._lock:
            entry = self._sessions.pop(_sid(session), None)
        return len(entry.views) if entry is not None else 0

    def keys(self, session: str | None) -> List[str]:
        with self._lock:
            entry = self._sessions.get(_sid(session))
            return sorted(entry.views) if entry is not None else []

    def session_count(self) -> int:
        with self._lock:
            return len(self._sessions)


_settings = get_settings()
view_store = ViewStateStore(
    max_sessions=_settings.max_sessions,
    idle_timeout=timedelta(minutes=_settings.session_idle_minutes),
)


def get_view_store() -> ViewStateStore:
    """获取全局视图状态存储实例。"""
    return view_store
