"""
planner/rrt.py — RRT 系列采样树规划器

在连续配置空间 (ContinuousSpace) 上增量生长一棵以起点为根的树:

    采样 (以 goal_bias 概率直接取目标) → 最近节点 → steer ≤ step_size
    → 有效且有进展则插入 (父节点 = 最近节点)
    → 新节点距目标 ≤ goal_tolerance 且与目标直连无碰撞 → 成功

- RRTPlanner(RRTConfig(algorithm="rrt"))      : 首次到达即返回
- RRTPlanner(RRTConfig(algorithm="rrt_star")) : choose-parent + rewire,
  跑满迭代预算后返回代价最小的目标连接

这是概率完备而非完备的算法: 迭代预算耗尽返回 BUDGET_EXHAUSTED,
不代表无解。所有随机性来自传入的 rng 或 config.seed。
"""

from __future__ import annotations

import logging
import math
import time
from typing import List, Optional, Sequence

import numpy as np

from .base import BasePlanner, FailureReason, PlanningResult
from .errors import CapacityExceededError
from .metric import euclidean
from .models import RRTConfig
from .nearest import KDTreeIndex, LinearIndex, NodePool
from ..utils.seed import SeedLike, make_rng
from ..utils.timing import Timer

logger = logging.getLogger(__name__)


def rrt_rewiring_radius(ndim: int, n_nodes: int,
                        gamma: Optional[float] = None) -> float:
    """RRT* 渐近最优的收缩邻域半径 γ·(log n / n)^(1/d)"""
    if gamma is None:
        unit_ball = math.pi ** (ndim / 2.0) / math.gamma(ndim / 2.0 + 1.0)
        gamma = (2.0 * (1.0 + 1.0 / ndim) ** (1.0 / ndim)
                 * (1.0 / unit_ball) ** (1.0 / ndim) * 2.0)
    if n_nodes < 2:
        return float('inf')
    return gamma * (math.log(n_nodes) / n_nodes) ** (1.0 / ndim)


def path_cost(space, waypoints: Sequence[np.ndarray]) -> float:
    """按配置空间度量计算折线代价"""
    if len(waypoints) < 2:
        return 0.0
    return float(sum(space.distance(waypoints[i - 1], waypoints[i])
                     for i in range(1, len(waypoints))))


# ═══════════════════════════════════════════════════════════════════════════
# RRTPlanner
# ═══════════════════════════════════════════════════════════════════════════

class RRTPlanner(BasePlanner):
    """RRT / RRT* 规划器

    Args:
        config: RRTConfig

    Example:
        >>> space = BoxSpace([(0, 10), (0, 10)], scene)
        >>> planner = RRTPlanner(RRTConfig(step_size=0.5, seed=7))
        >>> result = planner.plan(space, [1, 1], [9, 9])
        >>> result.success, result.reason
    """

    def __init__(self, config: Optional[RRTConfig] = None) -> None:
        self.config = config if config is not None else RRTConfig()

    @property
    def name(self) -> str:
        return "RRT*" if self.config.algorithm == "rrt_star" else "RRT"

    def _make_index(self, pool: NodePool, space):
        if self.config.nn_index == "kdtree":
            if getattr(space, "metric", euclidean) is not euclidean:
                raise ValueError(
                    "nn_index='kdtree' 只支持欧氏度量, 当前空间度量为 "
                    f"{getattr(space.metric, '__name__', space.metric)!r}; "
                    "请改用 nn_index='linear'")
            return KDTreeIndex(pool, rebuild_every=self.config.kdtree_rebuild_every)
        return LinearIndex(pool, space)

    def plan(self, space, start, goal,
             rng: Optional[SeedLike] = None) -> PlanningResult:
        """执行规划.

        Args:
            space: ContinuousSpace
            start: 起点配置
            goal: 目标配置
            rng: np.random.Generator 或整数种子; None 时使用 config.seed

        Returns:
            PlanningResult; ``result.tree`` 为结束时的树快照
        """
        cfg = self.config
        t0 = time.perf_counter()
        q_start = np.asarray(start, dtype=np.float64)
        q_goal = np.asarray(goal, dtype=np.float64)
        checks0 = getattr(space, "n_collision_checks", 0)

        if not (space.is_valid(q_start) and space.is_valid(q_goal)):
            logger.info("%s: 起点或终点无效", self.name)
            return PlanningResult.failure(
                FailureReason.INVALID_START_OR_GOAL,
                planning_time=time.perf_counter() - t0,
                algorithm=self.name)

        if np.array_equal(q_start, q_goal):
            return PlanningResult(
                success=True, path=[q_start.copy()], cost=0.0,
                planning_time=time.perf_counter() - t0, nodes_explored=1,
                metadata={"algorithm": self.name, "degenerate": True})

        rng = make_rng(rng if rng is not None else cfg.seed)
        pool = NodePool(space.ndim, cap=cfg.node_capacity, growable=cfg.growable)
        pool.add(q_start, -1, 0.0)
        index = self._make_index(pool, space)
        timer = Timer()

        goal_idxs: List[int] = []
        n_iter = 0
        reason = FailureReason.BUDGET_EXHAUSTED

        with timer.phase("grow"):
            try:
                # 根节点本身可能已在目标容差内
                if not self._try_connect_goal(space, pool, 0, q_goal, goal_idxs):
                    for n_iter in range(1, cfg.max_iterations + 1):
                        idx_new = self._extend(space, pool, index, rng, q_goal)
                        if idx_new is None:
                            continue
                        if (self._try_connect_goal(space, pool, idx_new,
                                                   q_goal, goal_idxs)
                                and cfg.algorithm == "rrt"):
                            break
            except CapacityExceededError as e:
                logger.info("%s: 节点容量 %d 已满", self.name, e.capacity)
                reason = FailureReason.CAPACITY_EXCEEDED

        checks = getattr(space, "n_collision_checks", 0) - checks0
        dt = time.perf_counter() - t0

        if not goal_idxs:
            logger.info("%s: 失败 (%s), %d 次迭代, %d 个节点",
                        self.name, reason.value, n_iter, pool.n)
            result = PlanningResult.failure(
                reason, planning_time=dt, nodes_explored=pool.n,
                collision_checks=checks, algorithm=self.name,
                iterations=n_iter)
            result.tree = pool.snapshot()
            result.phase_times = timer.to_dict()
            return result

        with timer.phase("extract"):
            # rewire 只更新被改父节点的代价, 这里按实际几何重新计算
            candidates = [pool.extract_path(i) for i in goal_idxs]
            costs = [path_cost(space, p) for p in candidates]
            best = int(np.argmin(costs))
            path = candidates[best]

        logger.info("%s: 找到路径, %d 个点, 代价 %.4f, %d 次迭代, %d 个节点",
                    self.name, len(path), costs[best], n_iter, pool.n)
        return PlanningResult(
            success=True, path=path, cost=costs[best],
            planning_time=time.perf_counter() - t0,
            nodes_explored=pool.n,
            collision_checks=checks,
            phase_times=timer.to_dict(),
            metadata={"algorithm": self.name, "iterations": n_iter,
                      "n_goal_connections": len(goal_idxs)},
            tree=pool.snapshot(),
        )

    # ── 单步扩展 ─────────────────────────────────────────────

    def _sample(self, space, rng: np.random.Generator,
                q_goal: np.ndarray) -> np.ndarray:
        if rng.uniform() < self.config.goal_bias:
            return q_goal.copy()
        return space.sample(rng)

    def _extend(self, space, pool: NodePool, index, rng,
                q_goal: np.ndarray) -> Optional[int]:
        """采样 → 最近 → steer → 插入, 返回新节点下标 (无进展返回 None)"""
        cfg = self.config
        q_rand = self._sample(space, rng, q_goal)
        idx_near = index.nearest(q_rand)
        q_near = pool.configs[idx_near]
        q_new = space.steer(q_near, q_rand, cfg.step_size)
        if q_new is None:
            return None
        d_near = space.distance(q_near, q_new)
        if d_near <= cfg.min_progress:
            return None

        if cfg.algorithm == "rrt":
            idx_new = pool.add(q_new, idx_near, pool.costs[idx_near] + d_near)
        else:
            idx_new = self._insert_star(space, pool, idx_near, q_new, d_near)
        index.notify_added(idx_new)
        return idx_new

    def _insert_star(self, space, pool: NodePool, idx_near: int,
                     q_new: np.ndarray, d_near: float) -> int:
        """RRT*: 在邻域内选择代价最小的父节点, 然后 rewire 邻居"""
        cfg = self.config
        r = min(cfg.step_size * cfg.rewire_factor,
                rrt_rewiring_radius(space.ndim, pool.n))
        near_idxs = pool.near(q_new, r, getattr(space, "metric", None))

        best_parent = idx_near
        best_cost = pool.costs[idx_near] + d_near
        for ni in near_idxs:
            if ni == idx_near:
                continue
            c = pool.costs[ni] + space.distance(pool.configs[ni], q_new)
            if c < best_cost and space.is_valid_segment(pool.configs[ni], q_new):
                best_parent, best_cost = ni, c

        idx_new = pool.add(q_new, best_parent, best_cost)

        for ni in near_idxs:
            if ni == best_parent:
                continue
            c_thru = best_cost + space.distance(q_new, pool.configs[ni])
            if c_thru < pool.costs[ni] and space.is_valid_segment(
                    q_new, pool.configs[ni]):
                pool.parents[ni] = idx_new
                pool.costs[ni] = c_thru
        return idx_new

    def _try_connect_goal(self, space, pool: NodePool, idx: int,
                          q_goal: np.ndarray, goal_idxs: List[int]) -> bool:
        """idx 在目标容差内且能直连目标时, 把目标作为子节点加入树"""
        q = pool.configs[idx]
        d_goal = space.distance(q, q_goal)
        if d_goal > self.config.goal_tolerance:
            return False
        if d_goal == 0.0:
            goal_idxs.append(idx)
            return True
        if not space.is_valid_segment(q, q_goal):
            return False
        goal_idxs.append(pool.add(q_goal, idx, pool.costs[idx] + d_goal))
        return True
