"""
planner/nearest.py — 采样树节点存储与最近邻索引

- NodePool: numpy 数组存储树节点 (配置 / 父节点下标 / 代价),
  父指针只用下标, 不保存子节点列表, 因此天然无环
- LinearIndex: 委托配置空间对整个节点池做向量化线性扫描
- KDTreeIndex: scipy cKDTree 批量重建 + 未入树尾部线性扫描
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import numpy as np
from scipy.spatial import cKDTree

from .errors import CapacityExceededError
from .metric import Metric, euclidean


# ═══════════════════════════════════════════════════════════════════════════
# NodePool
# ═══════════════════════════════════════════════════════════════════════════

class NodePool:
    """用 numpy 数组存储树节点, 避免 Python 对象开销.

    Args:
        ndim: 配置维度
        cap: 初始容量
        growable: 满时容量倍增; False 时满则抛出 CapacityExceededError
    """
    __slots__ = ('configs', 'parents', 'costs', 'n', 'cap', 'ndim', 'growable')

    def __init__(self, ndim: int, cap: int = 1024, growable: bool = True):
        self.ndim = ndim
        self.cap = cap
        self.growable = growable
        self.configs = np.empty((cap, ndim), dtype=np.float64)
        self.parents = np.full(cap, -1, dtype=np.int64)
        self.costs = np.zeros(cap, dtype=np.float64)
        self.n = 0

    def _grow(self) -> None:
        self.cap *= 2
        new_c = np.empty((self.cap, self.ndim), dtype=np.float64)
        new_c[:self.n] = self.configs[:self.n]
        self.configs = new_c
        new_p = np.full(self.cap, -1, dtype=np.int64)
        new_p[:self.n] = self.parents[:self.n]
        self.parents = new_p
        new_k = np.zeros(self.cap, dtype=np.float64)
        new_k[:self.n] = self.costs[:self.n]
        self.costs = new_k

    def add(self, config: np.ndarray, parent: int, cost: float) -> int:
        """追加节点, 返回其下标. parent 必须是已存在的下标 (根为 -1)."""
        if parent >= self.n:
            raise IndexError(f"parent {parent} 不存在 (n={self.n})")
        if self.n >= self.cap:
            if not self.growable:
                raise CapacityExceededError(self.cap)
            self._grow()
        idx = self.n
        self.configs[idx] = config
        self.parents[idx] = parent
        self.costs[idx] = cost
        self.n += 1
        return idx

    @property
    def points(self) -> np.ndarray:
        """当前所有节点配置 (只读视图)"""
        view = self.configs[:self.n]
        view.flags.writeable = False
        return view

    def near(self, config: np.ndarray, radius: float,
             metric: Optional[Metric] = None) -> List[int]:
        """度量半径 radius 内的节点下标 (升序); metric 缺省为欧氏距离"""
        if metric is not None and metric is not euclidean:
            return [i for i in range(self.n)
                    if metric(self.configs[i], config) <= radius]
        diffs = self.configs[:self.n] - config
        dists = np.sum(diffs * diffs, axis=1)
        return [int(i) for i in np.flatnonzero(dists <= radius * radius)]

    def extract_path(self, idx: int) -> List[np.ndarray]:
        """沿父指针回溯到根, 返回根 → idx 的配置序列"""
        path = []
        while idx >= 0:
            path.append(self.configs[idx].copy())
            idx = int(self.parents[idx])
        path.reverse()
        return path

    def snapshot(self) -> "TreeSnapshot":
        return TreeSnapshot(configs=self.configs[:self.n].copy(),
                            parents=self.parents[:self.n].copy(),
                            costs=self.costs[:self.n].copy())

    def __len__(self) -> int:
        return self.n


@dataclass
class TreeSnapshot:
    """规划结束时的树 (用于确定性检查与绘图)"""
    configs: np.ndarray
    parents: np.ndarray
    costs: np.ndarray

    @property
    def n_nodes(self) -> int:
        return self.configs.shape[0]

    def edges(self):
        """(parent_config, child_config) 迭代器"""
        for i in range(1, self.n_nodes):
            p = int(self.parents[i])
            if p >= 0:
                yield self.configs[p], self.configs[i]

    def __eq__(self, other) -> bool:
        if not isinstance(other, TreeSnapshot):
            return NotImplemented
        return (np.array_equal(self.configs, other.configs)
                and np.array_equal(self.parents, other.parents))


# ═══════════════════════════════════════════════════════════════════════════
# 最近邻索引
# ═══════════════════════════════════════════════════════════════════════════

class LinearIndex:
    """线性扫描: 直接使用配置空间自己的 nearest (支持任意度量)."""

    def __init__(self, pool: NodePool, space):
        self.pool = pool
        self.space = space

    def notify_added(self, idx: int) -> None:
        pass

    def nearest(self, target: np.ndarray) -> int:
        return self.space.nearest(self.pool.configs[:self.pool.n], target)


class KDTreeIndex:
    """cKDTree 最近邻 (仅欧氏度量, 其他度量请用 LinearIndex).

    cKDTree 不支持增量插入, 因此每插入 ``rebuild_every`` 个节点批量重建一次,
    其间新增的尾部节点做线性扫描; 两部分结果取较近者, 距离相同时取较小下标,
    与 LinearIndex 的结果一致。
    """

    def __init__(self, pool: NodePool, rebuild_every: int = 64):
        self.pool = pool
        self.rebuild_every = rebuild_every
        self._tree = None
        self._n_indexed = 0

    def _rebuild(self) -> None:
        self._n_indexed = self.pool.n
        self._tree = cKDTree(self.pool.configs[:self._n_indexed].copy())

    def notify_added(self, idx: int) -> None:
        if self.pool.n - self._n_indexed >= self.rebuild_every:
            self._rebuild()

    def nearest(self, target: np.ndarray) -> int:
        best_idx, best_d2 = -1, np.inf
        if self._tree is not None and self._n_indexed > 0:
            _, i = self._tree.query(target, k=1)
            i = int(i)
            d = self.pool.configs[i] - target
            best_idx, best_d2 = i, float(np.dot(d, d))
            # 与线性扫描保持相同的并列规则: 取所有等距点中的最小下标
            ties = self._tree.query_ball_point(target, np.sqrt(best_d2) + 1e-12)
            for j in sorted(ties):
                dj = self.pool.configs[j] - target
                if float(np.dot(dj, dj)) <= best_d2:
                    best_idx, best_d2 = int(j), float(np.dot(dj, dj))
                    break
        tail = self.pool.configs[self._n_indexed:self.pool.n]
        if tail.shape[0]:
            diffs = tail - target
            d2 = np.sum(diffs * diffs, axis=1)
            k = int(np.argmin(d2))
            if d2[k] < best_d2:
                best_idx = self._n_indexed + k
        return best_idx
