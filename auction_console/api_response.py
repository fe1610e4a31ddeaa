import time
from typing import Any, Dict, Optional

from .errors import FetchError


def _now_millis_str() -> str:
    """返回当前时间的毫秒时间戳字符串。"""
    return str(int(time.time() * 1000))


def ok(data: Any, msg: str = "操作成功") -> Dict[str, Any]:
    """控制台成功响应包装。"""
    return {
        "code": "200",
        "data": data,
        "msg": msg,
        "success": True,
        "timestamp": _now_millis_str(),
    }


def fail(code: str, msg: str, data: Optional[Any] = None) -> Dict[str, Any]:
    """控制台失败响应包装，HTTP 层仍返回 200 状态码。"""
    return {
        "code": code,
        "data": data,
        "msg": msg,
        "success": False,
        "timestamp": _now_millis_str(),
    }


def unwrap_backend(payload: Any, url: str = "") -> Any:
    """
    解析拍卖后端的响应信封 `{success, data, message}`，返回 data。

    - 非对象或缺少 success 字段视为格式错误；
    - success=false 时以后端 message 作为错误信息。
    """
    if not isinstance(payload, dict) or "success" not in payload:
        raise FetchError("后端响应格式错误", url=url)
    if not payload.get("success"):
        message = payload.get("message") or "后端返回失败"
        raise FetchError(str(message), url=url)
    return payload.get("data")


def backend_message(payload: Any) -> str:
    """读取后端响应中的提示信息，不存在时返回空串。"""
    if isinstance(payload, dict):
        return str(payload.get("message") or "")
    return ""
