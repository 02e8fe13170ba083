"""
space - 配置空间

- base: DiscreteSpace / ContinuousSpace 协议
- grid: 占据栅格 (GridSpace)
- graph: 显式加权图 (GraphSpace)
- continuous: 有界连续空间 (BoxSpace)
- scene / collision: C-space 障碍物与碰撞检测
"""

from .base import ContinuousSpace, DiscreteSpace
from .collision import CollisionChecker
from .continuous import BoxSpace
from .graph import GraphSpace
from .grid import GridSpace, path_cells_valid
from .scene import AABBObstacle, Scene, SphereObstacle

__all__ = [
    "DiscreteSpace",
    "ContinuousSpace",
    "GridSpace",
    "path_cells_valid",
    "GraphSpace",
    "BoxSpace",
    "Scene",
    "AABBObstacle",
    "SphereObstacle",
    "CollisionChecker",
]
