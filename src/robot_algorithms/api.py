"""
api.py — 统一入口

``plan(space, start, goal, config)`` 按配置空间的能力分派:
离散空间 → GraphSearchPlanner, 连续空间 → RRTPlanner。
"""

from typing import Callable, Optional, Union

from .planner.base import PlanningResult
from .planner.graph_search import GraphSearchPlanner
from .planner.models import GraphSearchConfig, RRTConfig
from .planner.rrt import RRTPlanner
from .space.base import ContinuousSpace, DiscreteSpace


def plan(
    space,
    start,
    goal,
    config: Optional[Union[GraphSearchConfig, RRTConfig]] = None,
    heuristic: Optional[Callable] = None,
    rng=None,
) -> PlanningResult:
    """规划一条 start → goal 的路径

    Args:
        space: DiscreteSpace 或 ContinuousSpace
        start, goal: 起终点
        config: GraphSearchConfig / RRTConfig (缺省用默认值)
        heuristic: 图搜索启发函数 (仅离散空间)
        rng: 随机源 (仅连续空间)

    Raises:
        TypeError: space 不满足任一协议, 或 config 类型与空间不匹配
    """
    if isinstance(space, ContinuousSpace):
        if config is not None and not isinstance(config, RRTConfig):
            raise TypeError(f"连续空间需要 RRTConfig, got {type(config).__name__}")
        return RRTPlanner(config).plan(space, start, goal, rng=rng)
    if isinstance(space, DiscreteSpace):
        if config is not None and not isinstance(config, GraphSearchConfig):
            raise TypeError(
                f"离散空间需要 GraphSearchConfig, got {type(config).__name__}")
        return GraphSearchPlanner(heuristic, config).plan(space, start, goal)
    raise TypeError(f"{type(space).__name__} 不是可规划的配置空间")
