from __future__ import annotations

from ..config import get_settings
from ..core.columns import Column, status_badge, upload_url
from ..core.paged_table import PagingPolicy
from ..models.common import PageEndpoint
from ..models.entities import Slider
from .console_service import BackendCommand, TableScreen

SLIDER_SCREEN = TableScreen(
    key="sliders",
    title="sliders",
    endpoint=PageEndpoint(
        service="admin",
        path="/api/admin/sliders",
        items_key="items",
    ),
    parse=Slider.model_validate,
    columns=(
        Column("imageUrl", "image", formatter=upload_url(get_settings().uploads_base)),
        Column("name", "name"),
        Column("startDate", "startDate"),
        Column("endDate", "endDate"),
        Column("isActive", "status", formatter=status_badge),
    ),
    policy=PagingPolicy.SERVER,
    actions=("view", "edit", "delete", "toggleActivation"),
)


def delete_command(slider_id: int) -> BackendCommand:
    """删除轮播图：DELETE /api/admin/sliders/delete/{id}。"""
    return BackendCommand(
        service="admin",
        method="DELETE",
        path=f"/api/admin/sliders/delete/{slider_id}",
    )


def toggle_activation_command(slider_id: int) -> BackendCommand:
    """启用/停用轮播图：PATCH /api/admin/sliders/toggle-activation/{id}。"""
    return BackendCommand(
        service="admin",
        method="PATCH",
        path=f"/api/admin/sliders/toggle-activation/{slider_id}",
    )
