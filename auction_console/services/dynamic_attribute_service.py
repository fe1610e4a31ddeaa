from __future__ import annotations

from ..core.columns import Column, status_badge
from ..core.paged_table import PagingPolicy
from ..models.common import PageEndpoint
from ..models.entities import DynamicAttribute
from .console_service import BackendCommand, TableScreen

# 后端一次返回全部属性，前端本地分页与搜索
DYNAMIC_ATTRIBUTE_SCREEN = TableScreen(
    key="dynamic-attributes",
    title="dynamicAttributes",
    endpoint=PageEndpoint(
        service="catalog",
        path="/api/dynamic-attributes",
        paginated=False,
    ),
    parse=DynamicAttribute.model_validate,
    columns=(
        Column("name", "name"),
        Column("attributeValueTypeString", "attributeValueType"),
        Column("isActive", "status", formatter=status_badge),
    ),
    policy=PagingPolicy.CLIENT,
    actions=("edit", "delete", "toggleActivation"),
)


def delete_command(attribute_id: int) -> BackendCommand:
    """删除动态属性：DELETE /api/dynamic-attributes，body 携带 id。"""
    return BackendCommand(
        service="catalog",
        method="DELETE",
        path="/api/dynamic-attributes",
        json={"id": attribute_id},
    )


def toggle_activation_command(attribute_id: int) -> BackendCommand:
    return BackendCommand(
        service="catalog",
        method="PUT",
        path=f"/api/dynamic-attributes/toggle-activation/{attribute_id}",
    )
