from __future__ import annotations

from ..core.columns import Column, status_badge
from ..core.paged_table import PagingPolicy
from ..models.common import PageEndpoint
from ..models.entities import User
from .console_service import TableScreen

USER_SCREEN = TableScreen(
    key="users",
    title="users",
    endpoint=PageEndpoint(
        service="admin",
        path="/api/admin/users",
        paginated=False,
    ),
    parse=User.from_payload,
    columns=(
        Column("name", "name"),
        Column("email", "email"),
        Column("status", "status", formatter=status_badge),
        Column("createdAt", "createdAt"),
    ),
    policy=PagingPolicy.CLIENT,
    actions=("view", "edit", "delete"),
)
