from __future__ import annotations

from ..config import get_settings
from ..core.columns import Column, status_badge, upload_url
from ..core.paged_table import PagingPolicy
from ..models.common import PageEndpoint, TreeEndpoint
from ..models.entities import Category
from .console_service import BackendCommand, TableScreen, TreeScreen

CATEGORY_SCREEN = TableScreen(
    key="categories",
    title="categories",
    endpoint=PageEndpoint(
        service="catalog",
        path="/api/categories/list",
        items_key="categories",
    ),
    parse=Category.model_validate,
    columns=(
        Column("name", "name"),
        Column("parentName", "parentName"),
        Column("imageUrl", "image", formatter=upload_url(get_settings().uploads_base)),
        Column("isActive", "status", formatter=status_badge),
    ),
    policy=PagingPolicy.SERVER,
    actions=(
        "viewSubcategories",
        "viewAttributes",
        "edit",
        "delete",
        "toggleActivation",
    ),
)

SUBCATEGORY_TREE = TreeScreen(
    key="subcategories",
    title="subcategories",
    endpoint=TreeEndpoint(
        service="catalog",
        path="/api/categories/tree/{root_id}",
        children_key="children",
    ),
)


# 每个会话只保留当前打开的一棵子分类树
SUBCATEGORY_VIEW_KEY = "categories:subcategories"


def delete_command(category_id: int) -> BackendCommand:
    """删除分类：DELETE /api/categories，body 携带 id。"""
    return BackendCommand(
        service="catalog",
        method="DELETE",
        path="/api/categories",
        json={"id": category_id},
    )


def toggle_activation_command(category_id: int) -> BackendCommand:
    """启用/停用分类：PUT /api/categories/toggle-activation/{id}。"""
    return BackendCommand(
        service="catalog",
        method="PUT",
        path=f"/api/categories/toggle-activation/{category_id}",
    )
