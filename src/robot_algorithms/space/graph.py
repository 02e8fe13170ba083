"""
space/graph.py - 显式加权图离散配置空间

用边列表描述任意图 (路网 / roadmap / 测试用小图), 邻接表按插入顺序保存,
因此 ``neighbors`` 的枚举顺序确定。
"""

from typing import Dict, Hashable, Iterable, Iterator, List, Optional, Tuple


class GraphSpace:
    """显式加权图

    Args:
        edges: (u, v, cost) 三元组序列
        blocked: 视为无效 (被占据) 的节点
        directed: False 时每条边同时加入反向边
        nodes: 额外的孤立节点

    Example:
        >>> g = GraphSpace([("a", "b", 1.0), ("b", "c", 2.0)])
        >>> list(g.neighbors("b"))
        [('a', 1.0), ('c', 2.0)]
    """

    def __init__(
        self,
        edges: Iterable[Tuple[Hashable, Hashable, float]] = (),
        blocked: Iterable[Hashable] = (),
        directed: bool = False,
        nodes: Iterable[Hashable] = (),
    ) -> None:
        self.directed = directed
        self._adj: Dict[Hashable, Dict[Hashable, float]] = {}
        for n in nodes:
            self._adj.setdefault(n, {})
        for u, v, cost in edges:
            self.add_edge(u, v, cost)
        self.blocked = set(blocked)

    def add_edge(self, u: Hashable, v: Hashable, cost: float) -> None:
        """加入一条边; 重复边保留较小代价.

        代价不在这里检查, 负代价留给规划器按 debug 设置处理。
        """
        self._add_arc(u, v, float(cost))
        if not self.directed:
            self._add_arc(v, u, float(cost))

    def _add_arc(self, u, v, cost: float) -> None:
        self._adj.setdefault(v, {})
        arcs = self._adj.setdefault(u, {})
        old = arcs.get(v)
        if old is None or cost < old:
            arcs[v] = cost

    @property
    def nodes(self) -> List[Hashable]:
        return list(self._adj)

    @property
    def n_edges(self) -> int:
        n = sum(len(a) for a in self._adj.values())
        return n if self.directed else n // 2

    def is_valid(self, node: Hashable) -> bool:
        return node in self._adj and node not in self.blocked

    def neighbors(self, node: Hashable) -> Iterator[Tuple[Hashable, float]]:
        for v, cost in self._adj.get(node, {}).items():
            if v not in self.blocked:
                yield v, cost

    def edge_cost(self, u: Hashable, v: Hashable) -> Optional[float]:
        """u → v 的边代价, 不存在时返回 None"""
        return self._adj.get(u, {}).get(v)

    def __repr__(self) -> str:
        return (f"GraphSpace(nodes={len(self._adj)}, edges={self.n_edges}, "
                f"directed={self.directed})")
