"""通用表格列：列 key 到记录字段的声明式映射。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..models.common import ColumnResp


@dataclass(frozen=True)
class Column:
    key: str
    label: str
    align: str = "left"
    formatter: Optional[Callable[[Any, Any], str]] = None

    def to_resp(self) -> ColumnResp:
        return ColumnResp(key=self.key, label=self.label, align=self.align)


def _get(row: Any, key: str) -> Any:
    getter = getattr(row, "get_field", None)
    if getter is not None:
        return getter(key)
    return row.get(key)


def render_cell(column: Column, row: Any) -> str:
    """有 formatter 时交给 formatter，否则 None 渲染为空串，其余转字符串。"""
    value = _get(row, column.key)
    if column.formatter is not None:
        return column.formatter(value, row)
    if value is None:
        return ""
    return str(value)


def render_cells(columns: Sequence[Column], row: Any) -> Dict[str, str]:
    return {c.key: render_cell(c, row) for c in columns}


def status_badge(value: Any, row: Any) -> str:
    """状态列：布尔值渲染为 active / inactive 翻译键。"""
    if isinstance(value, str):
        return value
    return "active" if value else "inactive"


def upload_url(base: str) -> Callable[[Any, Any], str]:
    """图片列：相对文件名拼接为上传目录的完整地址。"""

    def _fmt(value: Any, row: Any) -> str:
        if not value:
            return ""
        return f"{base.rstrip('/')}/{value}"

    return _fmt


def column_resps(columns: Sequence[Column]) -> List[ColumnResp]:
    return [c.to_resp() for c in columns]
