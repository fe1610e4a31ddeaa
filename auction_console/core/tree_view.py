"""
树形视图模型（分类树、子分类树、地区树共用）。

说明：
- 展开状态保存为扁平的 id 集合，与后端快照解耦，快照整体替换时按 id 求交集保留；
- 渲染采用显式栈的迭代遍历，输出 (节点, 深度) 的前序扁平序列，避免深树递归；
- 快照只读，任何操作都不会原地修改节点。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Set, Tuple

from pydantic import BaseModel, ConfigDict

from ..errors import FetchError

logger = logging.getLogger(__name__)


class TreeNode(BaseModel):
    """树节点，label 已由后端本地化，metadata 仅用于展示。"""

    model_config = ConfigDict(frozen=True)

    id: int
    label: str
    children: Tuple["TreeNode", ...] = ()
    metadata: Dict[str, Any] = {}

    @property
    def has_children(self) -> bool:
        return len(self.children) > 0


TreeNode.model_rebuild()

Forest = Sequence[TreeNode]


@dataclass(frozen=True)
class RenderedNode:
    """渲染层使用的一行树节点。"""

    node: TreeNode
    depth: int
    is_expanded: bool
    has_children: bool


@dataclass(frozen=True)
class TreeLoadTicket:
    """一次树快照加载请求的凭证，用于丢弃过期响应。"""

    seq: int
    root_id: Optional[int] = None
    language: Optional[str] = None


def walk_forest(forest: Forest) -> Iterator[Tuple[TreeNode, int, Optional[TreeNode]]]:
    """按前序遍历整片森林，产出 (节点, 深度, 父节点)，不考虑展开状态。"""
    stack: List[Tuple[TreeNode, int, Optional[TreeNode]]] = [
        (node, 0, None) for node in reversed(forest)
    ]
    while stack:
        node, depth, parent = stack.pop()
        yield node, depth, parent
        for child in reversed(node.children):
            stack.append((child, depth + 1, node))


def collect_ids(forest: Forest) -> Set[int]:
    """收集森林中全部节点 id。"""
    return {node.id for node, _, _ in walk_forest(forest)}


def validate_forest(forest: Forest) -> None:
    """校验快照中 id 唯一，重复 id 视为后端载荷格式错误。"""
    seen: Set[int] = set()
    for node, _, _ in walk_forest(forest):
        if node.id in seen:
            raise FetchError(f"树数据中存在重复的节点 ID：{node.id}")
        seen.add(node.id)


class TreeView:
    """树形视图模型：持有森林快照与展开集合。"""

    def __init__(self, forest: Forest = (), expanded: Iterable[int] = ()) -> None:
        self._forest: Tuple[TreeNode, ...] = tuple(forest)
        self._expanded: Set[int] = set(expanded)
        self._seq = 0
        self._pending: Optional[TreeLoadTicket] = None
        self._root_id: Optional[int] = None
        self._language: Optional[str] = None
        self.status = "idle"
        self.error: Optional[str] = None

    @property
    def forest(self) -> Tuple[TreeNode, ...]:
        return self._forest

    @property
    def expanded_ids(self) -> frozenset:
        return frozenset(self._expanded)

    @property
    def root_id(self) -> Optional[int]:
        return self._root_id

    @property
    def language(self) -> Optional[str]:
        return self._language

    def toggle(self, node_id: int) -> None:
        """切换节点展开状态，未知 id 不做校验。"""
        if node_id in self._expanded:
            self._expanded.discard(node_id)
        else:
            self._expanded.add(node_id)

    def expand_all(self, forest: Optional[Forest] = None) -> None:
        """展开全部：展开集合替换为森林中所有可达节点 id。"""
        self._expanded = collect_ids(self._forest if forest is None else forest)

    def collapse_all(self) -> None:
        self._expanded = set()

    def is_expanded(self, node_id: int) -> bool:
        return node_id in self._expanded

    def render(self, forest: Optional[Forest] = None) -> Iterator[RenderedNode]:
        """
        惰性前序遍历，仅在节点展开时访问其子节点。

        每次调用都基于当前状态重新计算，无副作用。
        """
        source = self._forest if forest is None else forest
        stack: List[Tuple[TreeNode, int]] = [(node, 0) for node in reversed(source)]
        while stack:
            node, depth = stack.pop()
            expanded = node.id in self._expanded
            yield RenderedNode(
                node=node,
                depth=depth,
                is_expanded=expanded,
                has_children=node.has_children,
            )
            if expanded:
                for child in reversed(node.children):
                    stack.append((child, depth + 1))

    def load_snapshot(self, forest: Forest, keep_expansion: bool = True) -> None:
        """整体替换快照；保留展开状态时与新快照的 id 集合求交集。"""
        self._forest = tuple(forest)
        if keep_expansion:
            self._expanded &= collect_ids(self._forest)
        else:
            self._expanded = set()

    # ---- 加载生命周期 ----

    def needs_load(self, language: Optional[str] = None) -> bool:
        """从未加载过，或界面语言与上次加载时不同，都需要重新请求快照。"""
        if self.status == "idle":
            return True
        return language is not None and language != self._language

    def begin_load(
        self, root_id: Optional[int] = None, language: Optional[str] = None
    ) -> TreeLoadTicket:
        """登记一次新的加载请求，之前未完成的请求随之过期。"""
        self._seq += 1
        self._root_id = root_id
        if language is not None:
            self._language = language
        self._pending = TreeLoadTicket(seq=self._seq, root_id=root_id, language=language)
        self.status = "loading"
        return self._pending

    def _is_current(self, ticket: TreeLoadTicket) -> bool:
        return self._pending is not None and ticket.seq == self._pending.seq

    def apply_snapshot(
        self,
        ticket: TreeLoadTicket,
        forest: Forest,
        keep_expansion: bool = True,
    ) -> bool:
        """应用加载结果，过期结果丢弃并返回 False。"""
        if not self._is_current(ticket):
            logger.debug("discard stale tree snapshot seq=%s", ticket.seq)
            return False
        self.load_snapshot(forest, keep_expansion=keep_expansion)
        self._pending = None
        self.status = "loaded"
        self.error = None
        return True

    def apply_error(self, ticket: TreeLoadTicket, error: Exception) -> bool:
        """记录加载失败，保留上一次的快照。"""
        if not self._is_current(ticket):
            logger.debug("discard stale tree error seq=%s", ticket.seq)
            return False
        self._pending = None
        self.status = "error"
        self.error = str(error)
        return True
