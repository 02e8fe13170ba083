"""
planner - 运动规划核心

- metric: 距离 / 代价函数
- frontier: 确定性 lazy-deletion 优先队列
- graph_search: A* / Dijkstra (离散空间)
- rrt: RRT / RRT* (连续空间), nearest: 节点池与最近邻索引
- path_smoother: 路径后处理
- base / models / errors: 统一结果、配置与异常
"""

from .base import BasePlanner, FailureReason, PlanningResult
from .errors import (
    CapacityExceededError,
    ConfigurationSpaceViolation,
    PlanningError,
    RobotAlgorithmsError,
)
from .frontier import PriorityFrontier
from .graph_search import GraphSearchPlanner, astar, dijkstra
from .metric import (
    checked_cost,
    chebyshev,
    euclidean,
    manhattan,
    octile,
    summed,
    terrain_cost,
    weighted,
    zero,
)
from .models import GraphSearchConfig, RRTConfig, SmootherConfig
from .nearest import KDTreeIndex, LinearIndex, NodePool, TreeSnapshot
from .path_smoother import PathSmoother, compute_path_length
from .rrt import RRTPlanner, path_cost, rrt_rewiring_radius

__all__ = [
    # 结果与接口
    "BasePlanner",
    "PlanningResult",
    "FailureReason",
    # 异常
    "RobotAlgorithmsError",
    "PlanningError",
    "ConfigurationSpaceViolation",
    "CapacityExceededError",
    # 度量
    "euclidean",
    "manhattan",
    "chebyshev",
    "octile",
    "zero",
    "weighted",
    "summed",
    "terrain_cost",
    "checked_cost",
    # 配置
    "GraphSearchConfig",
    "RRTConfig",
    "SmootherConfig",
    # 核心算法
    "PriorityFrontier",
    "GraphSearchPlanner",
    "astar",
    "dijkstra",
    "RRTPlanner",
    "rrt_rewiring_radius",
    "path_cost",
    "NodePool",
    "TreeSnapshot",
    "LinearIndex",
    "KDTreeIndex",
    "PathSmoother",
    "compute_path_length",
]
