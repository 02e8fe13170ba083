"""
planner/graph_search.py - A* / Dijkstra 图搜索规划器

在离散配置空间 (DiscreteSpace) 上搜索最短路径:

    priority = g(n) + w · h(n, goal)

h 为零函数时退化为 Dijkstra。搜索节点保存在规划器本次调用私有的扁平
数组中 (points / g / parents), 前驱用下标表示。

正确性前提 (文档化, 不做运行时检查):
    - 边代价非负 (负代价按 debug 设置抛出或截断为 0)
    - h 可采纳 (不高估剩余代价) 且 w <= 1 时返回路径保证最短
    - 已弹出 (closed) 的节点不再扩展; 由于边代价非负, 这不会错过更短路径
"""

import logging
import time
from typing import Callable, Dict, Hashable, List, Optional

from .base import BasePlanner, FailureReason, PlanningResult
from .errors import ConfigurationSpaceViolation
from .frontier import PriorityFrontier
from .metric import checked_cost
from .models import GraphSearchConfig
from ..utils.timing import Timer

logger = logging.getLogger(__name__)

Heuristic = Callable[[Hashable, Hashable], float]


class GraphSearchPlanner(BasePlanner):
    """A* / Dijkstra 规划器

    Args:
        heuristic: h(point, goal); None 表示 Dijkstra
        config: GraphSearchConfig

    Example:
        >>> grid = GridSpace.empty(5, 5)
        >>> planner = GraphSearchPlanner(heuristic=manhattan)
        >>> result = planner.plan(grid, (0, 0), (4, 4))
        >>> result.n_edges
        8
    """

    def __init__(
        self,
        heuristic: Optional[Heuristic] = None,
        config: Optional[GraphSearchConfig] = None,
    ) -> None:
        self.heuristic = heuristic
        self.config = config if config is not None else GraphSearchConfig()

    @property
    def name(self) -> str:
        return "A*" if self.heuristic is not None else "Dijkstra"

    def plan(self, space, start: Hashable, goal: Hashable) -> PlanningResult:
        cfg = self.config
        t0 = time.perf_counter()

        if not (space.is_valid(start) and space.is_valid(goal)):
            logger.info("%s: 起点或终点无效 start=%r goal=%r",
                        self.name, start, goal)
            return PlanningResult.failure(
                FailureReason.INVALID_START_OR_GOAL,
                planning_time=time.perf_counter() - t0,
                algorithm=self.name)

        if start == goal:
            return PlanningResult(
                success=True, path=[start], cost=0.0,
                planning_time=time.perf_counter() - t0,
                nodes_explored=0,
                metadata={"algorithm": self.name, "degenerate": True})

        timer = Timer()
        h = self.heuristic
        w = cfg.heuristic_weight
        capacity = cfg.node_capacity

        # 扁平节点存储: 前驱只存下标
        points: List[Hashable] = [start]
        g_costs: List[float] = [0.0]
        parents: List[int] = [-1]
        index: Dict[Hashable, int] = {start: 0}
        closed = set()

        frontier = PriorityFrontier()
        frontier.push(0, w * h(start, goal) if h is not None else 0.0)

        n_expanded = 0
        goal_idx = -1
        reason = FailureReason.NO_PATH_EXISTS

        with timer.phase("search"):
            while goal_idx < 0:
                item = frontier.pop()
                if item is None:
                    break
                idx, _ = item
                point = points[idx]
                if point == goal:
                    goal_idx = idx
                    break
                if cfg.max_expansions is not None and n_expanded >= cfg.max_expansions:
                    reason = FailureReason.BUDGET_EXHAUSTED
                    break
                closed.add(idx)
                n_expanded += 1
                g = g_costs[idx]

                overflow = False
                for nb, raw_cost in space.neighbors(point):
                    if cfg.debug and not space.is_valid(nb):
                        raise ConfigurationSpaceViolation(
                            f"neighbors({point!r}) yielded invalid point {nb!r}")
                    cost = checked_cost(raw_cost, point, nb, debug=cfg.debug)
                    nb_idx = index.get(nb)
                    if nb_idx is not None and nb_idx in closed:
                        continue
                    new_g = g + cost
                    if nb_idx is None:
                        if capacity is not None and len(points) >= capacity:
                            overflow = True
                            break
                        nb_idx = len(points)
                        points.append(nb)
                        g_costs.append(new_g)
                        parents.append(idx)
                        index[nb] = nb_idx
                    elif new_g < g_costs[nb_idx]:
                        g_costs[nb_idx] = new_g
                        parents[nb_idx] = idx
                    else:
                        continue
                    f = new_g + (w * h(nb, goal) if h is not None else 0.0)
                    frontier.push(nb_idx, f)

                if overflow:
                    reason = FailureReason.CAPACITY_EXCEEDED
                    break

        dt = time.perf_counter() - t0
        if goal_idx < 0:
            logger.info("%s: 失败 (%s), 扩展 %d 个节点, 耗时 %.3f ms",
                        self.name, reason.value, n_expanded, dt * 1e3)
            result = PlanningResult.failure(
                reason, planning_time=dt, nodes_explored=n_expanded,
                algorithm=self.name, n_generated=len(points))
            result.phase_times = timer.to_dict()
            return result

        with timer.phase("extract"):
            path = []
            i = goal_idx
            while i >= 0:
                path.append(points[i])
                i = parents[i]
            path.reverse()

        logger.info("%s: 找到路径, %d 个点, 代价 %.4f, 扩展 %d 个节点",
                    self.name, len(path), g_costs[goal_idx], n_expanded)
        return PlanningResult(
            success=True, path=path, cost=g_costs[goal_idx],
            planning_time=time.perf_counter() - t0,
            nodes_explored=n_expanded,
            phase_times=timer.to_dict(),
            metadata={"algorithm": self.name,
                      "n_generated": len(points),
                      "n_stale_pops": frontier.n_stale},
        )


def astar(space, start, goal, heuristic: Heuristic,
          config: Optional[GraphSearchConfig] = None) -> PlanningResult:
    """A* 便捷函数"""
    return GraphSearchPlanner(heuristic, config).plan(space, start, goal)


def dijkstra(space, start, goal,
             config: Optional[GraphSearchConfig] = None) -> PlanningResult:
    """Dijkstra 便捷函数"""
    return GraphSearchPlanner(None, config).plan(space, start, goal)
