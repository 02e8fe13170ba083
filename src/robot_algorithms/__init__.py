"""
robot_algorithms - 机器人运动规划算法库

- planner: A* / Dijkstra / RRT / RRT* 与路径后处理
- space: 栅格 / 图 / 连续配置空间与碰撞检测
- curves: Dubins / Reeds–Shepp 路径与五次多项式轨迹
- tracking: 纯追踪路径跟踪
- viz: matplotlib 可视化 (需显式导入)
"""

__version__ = "0.1.0"

from .api import plan
from .planner import (
    FailureReason,
    GraphSearchConfig,
    GraphSearchPlanner,
    PathSmoother,
    PlanningResult,
    RRTConfig,
    RRTPlanner,
    SmootherConfig,
    astar,
    dijkstra,
)
from .space import BoxSpace, GraphSpace, GridSpace, Scene

__all__ = [
    "__version__",
    "plan",
    "PlanningResult",
    "FailureReason",
    "GraphSearchPlanner",
    "GraphSearchConfig",
    "astar",
    "dijkstra",
    "RRTPlanner",
    "RRTConfig",
    "PathSmoother",
    "SmootherConfig",
    "GridSpace",
    "GraphSpace",
    "BoxSpace",
    "Scene",
]
