from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class PageEndpoint(BaseModel):
    """后端列表接口描述。"""

    service: str  # catalog / admin
    path: str
    items_key: Optional[str] = None  # 为空时 data 本身即为列表
    total_key: str = "totalCount"
    paginated: bool = True


class TreeEndpoint(BaseModel):
    """后端树接口描述，path 中可包含 `{root_id}` 占位符。"""

    service: str
    path: str
    children_key: str = "children"
    label_key: str = "name"


class ColumnResp(BaseModel):
    """表头列定义。"""

    key: str
    label: str
    align: str = "left"


class TableRowResp(BaseModel):
    """表格单行：cells 为按列 key 渲染后的字符串。"""

    id: int
    isActive: bool
    cells: Dict[str, str]


class PaginationResp(BaseModel):
    """分页控件状态，visible=false 时不展示分页。"""

    visible: bool
    pages: List[int]
    hasPrevious: bool
    hasNext: bool


class TableResp(BaseModel):
    """表格页面渲染结构。"""

    screen: str
    title: str
    policy: str
    totalCountSource: str
    status: str
    error: Optional[str] = None
    columns: List[ColumnResp]
    rows: List[TableRowResp]
    isEmpty: bool
    currentPage: int
    pageSize: int
    totalCount: int
    totalPages: int
    searchTerm: str
    pagination: PaginationResp
    actions: List[str]


class TreeRowResp(BaseModel):
    """树的一行：depth 用于缩进，hasChildren=false 时不显示展开按钮。"""

    id: int
    label: str
    depth: int
    isExpanded: bool
    hasChildren: bool
    metadata: Dict[str, Any] = {}


class TreeResp(BaseModel):
    """树页面渲染结构，isEmpty=true 时展示“暂无数据”。"""

    screen: str
    title: str
    status: str
    error: Optional[str] = None
    rows: List[TreeRowResp]
    isEmpty: bool
    expandedIds: List[int]
