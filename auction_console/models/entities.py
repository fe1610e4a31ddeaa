"""
拍卖后端实体的类型化记录。

表格渲染通过列 key 调用 get_field 取值，列 key 必须是记录声明过的字段；
后端返回的其余字段原样保留在记录上，参与搜索。
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class ConsoleRecord(BaseModel):
    """所有实体记录的公共字段。"""

    model_config = ConfigDict(extra="allow")

    id: int
    isActive: bool = True

    def get_field(self, key: str) -> Any:
        """按列 key 取字段值，未声明的字段抛出 KeyError。"""
        if key not in type(self).model_fields:
            raise KeyError(f"{type(self).__name__} 没有字段 {key}")
        return getattr(self, key)


class Category(ConsoleRecord):
    """分类。"""

    name: str
    parentName: Optional[str] = None
    imageUrl: str = ""


class DynamicAttribute(ConsoleRecord):
    """动态属性。"""

    name: str
    attributeValueTypeString: str = ""


class Region(ConsoleRecord):
    """地区，parentId/parentName 由地区树展开得到。"""

    name: str
    parentId: Optional[int] = None
    parentName: Optional[str] = None


class Slider(ConsoleRecord):
    """首页轮播图。"""

    name: str
    imageUrl: str = ""
    startDate: str = ""
    endDate: str = ""


class User(ConsoleRecord):
    """控制台用户。"""

    name: str
    email: str = ""
    status: str = "active"
    createdAt: str = ""

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "User":
        """后端只返回 status 字符串时，isActive 由 status 推导。"""
        values = dict(data)
        if "isActive" not in values:
            values["isActive"] = str(values.get("status", "")).lower() == "active"
        return cls.model_validate(values)
