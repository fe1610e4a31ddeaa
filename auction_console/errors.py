"""
控制台异常体系。

说明：
- FetchError：数据获取失败（网络、非成功状态码、success=false、载荷格式错误）；
- ConfigurationError：构造参数非法（如 pageSize <= 0），在构造时立即失败；
- 过期响应（stale response）不是错误，由视图模型静默丢弃。
"""

from __future__ import annotations

from typing import Optional


class ConsoleError(Exception):
    """控制台所有业务异常的基类。"""


class ConfigurationError(ConsoleError):
    """视图模型构造参数非法。"""


class FetchError(ConsoleError):
    """后端数据获取失败，携带请求地址与可选的 HTTP 状态码。"""

    def __init__(
        self,
        message: str,
        *,
        url: str = "",
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.url = url
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.message} (HTTP {self.status_code})"
        return self.message
