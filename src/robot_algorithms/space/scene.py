"""
space/scene.py - 障碍物与场景管理

障碍物直接定义在配置空间 (C-space) 中:
- AABBObstacle: 轴对齐超矩形
- SphereObstacle: 超球

Scene 管理一组障碍物, 提供增删查和 dict 列表互转 (用于从配置文件构建场景)。
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

import numpy as np

logger = logging.getLogger(__name__)


@dataclass
class AABBObstacle:
    """轴对齐包围盒障碍物

    Attributes:
        min_point: 最小角点
        max_point: 最大角点
        name: 障碍物名称（可选）
    """
    min_point: np.ndarray
    max_point: np.ndarray
    name: str = ""

    def __post_init__(self) -> None:
        self.min_point = np.asarray(self.min_point, dtype=np.float64)
        self.max_point = np.asarray(self.max_point, dtype=np.float64)
        if self.min_point.shape != self.max_point.shape:
            raise ValueError("min_point 和 max_point 维度不匹配")
        if np.any(self.min_point > self.max_point):
            raise ValueError("min_point 必须逐维不大于 max_point")

    @property
    def ndim(self) -> int:
        return self.min_point.shape[0]

    @property
    def center(self) -> np.ndarray:
        """障碍物中心点"""
        return (self.min_point + self.max_point) / 2.0

    @property
    def size(self) -> np.ndarray:
        """各轴尺寸"""
        return self.max_point - self.min_point

    def contains_point(self, point: np.ndarray) -> bool:
        """检查点是否在障碍物内（含边界）"""
        return bool(np.all(point >= self.min_point)
                    and np.all(point <= self.max_point))

    def contains_batch(self, points: np.ndarray) -> np.ndarray:
        """(N, ndim) → (N,) bool"""
        return np.all((points >= self.min_point) & (points <= self.max_point),
                      axis=1)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': 'aabb',
            'min': self.min_point.tolist(),
            'max': self.max_point.tolist(),
            'name': self.name,
        }


@dataclass
class SphereObstacle:
    """超球障碍物

    Attributes:
        center: 球心
        radius: 半径 (>= 0)
        name: 障碍物名称（可选）
    """
    center: np.ndarray
    radius: float
    name: str = ""

    def __post_init__(self) -> None:
        self.center = np.asarray(self.center, dtype=np.float64)
        self.radius = float(self.radius)
        if self.radius < 0:
            raise ValueError(f"radius 必须非负, got {self.radius}")

    @property
    def ndim(self) -> int:
        return self.center.shape[0]

    def contains_point(self, point: np.ndarray) -> bool:
        d = point - self.center
        return bool(np.dot(d, d) <= self.radius * self.radius)

    def contains_batch(self, points: np.ndarray) -> np.ndarray:
        d = points - self.center
        return np.sum(d * d, axis=1) <= self.radius * self.radius

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': 'sphere',
            'center': self.center.tolist(),
            'radius': self.radius,
            'name': self.name,
        }


Obstacle = Union[AABBObstacle, SphereObstacle]


class Scene:
    """C-space 障碍物场景

    Example:
        >>> scene = Scene()
        >>> _ = scene.add_obstacle([0.4, 0.0], [0.6, 0.8], name="wall")
        >>> _ = scene.add_sphere([0.2, 0.2], 0.1)
        >>> scene.n_obstacles
        2
    """

    def __init__(self) -> None:
        self._obstacles: List[Obstacle] = []

    @property
    def n_obstacles(self) -> int:
        return len(self._obstacles)

    def add_obstacle(self, min_point, max_point, name: str = "") -> AABBObstacle:
        """添加一个 AABB 障碍物

        Returns:
            创建的 AABBObstacle 实例
        """
        if not name:
            name = f"obstacle_{self.n_obstacles}"
        obs = AABBObstacle(min_point=min_point, max_point=max_point, name=name)
        self._check_dim(obs)
        self._obstacles.append(obs)
        logger.debug("添加障碍物 '%s': min=%s, max=%s", name,
                     obs.min_point.tolist(), obs.max_point.tolist())
        return obs

    def add_sphere(self, center, radius: float, name: str = "") -> SphereObstacle:
        """添加一个球形障碍物"""
        if not name:
            name = f"obstacle_{self.n_obstacles}"
        obs = SphereObstacle(center=center, radius=radius, name=name)
        self._check_dim(obs)
        self._obstacles.append(obs)
        logger.debug("添加球形障碍物 '%s': center=%s, r=%.3f", name,
                     obs.center.tolist(), obs.radius)
        return obs

    def _check_dim(self, obs: Obstacle) -> None:
        if self._obstacles and obs.ndim != self._obstacles[0].ndim:
            raise ValueError(
                f"障碍物维度 {obs.ndim} 与场景维度 "
                f"{self._obstacles[0].ndim} 不一致")

    def remove_obstacle(self, name: str) -> bool:
        """按名称移除障碍物

        Returns:
            是否找到并移除
        """
        for i, obs in enumerate(self._obstacles):
            if obs.name == name:
                self._obstacles.pop(i)
                logger.debug("移除障碍物 '%s'", name)
                return True
        return False

    def get_obstacle(self, name: str) -> Optional[Obstacle]:
        for obs in self._obstacles:
            if obs.name == name:
                return obs
        return None

    def get_obstacles(self) -> List[Obstacle]:
        return list(self._obstacles)

    def clear(self) -> None:
        self._obstacles.clear()

    # ── dict 列表互转 ─────────────────────────────────────────

    def to_dict_list(self) -> List[Dict[str, Any]]:
        return [obs.to_dict() for obs in self._obstacles]

    @classmethod
    def from_dict_list(cls, data: List[Dict[str, Any]]) -> 'Scene':
        """从 dict 列表创建场景 (缺省 type 视为 'aabb')"""
        scene = cls()
        for item in data:
            kind = item.get('type', 'aabb')
            if kind == 'aabb':
                scene.add_obstacle(item['min'], item['max'],
                                   name=item.get('name', ''))
            elif kind == 'sphere':
                scene.add_sphere(item['center'], item['radius'],
                                 name=item.get('name', ''))
            else:
                raise ValueError(f"未知障碍物类型: {kind}")
        return scene

    def __len__(self) -> int:
        return len(self._obstacles)

    def __iter__(self):
        return iter(self._obstacles)

    def __repr__(self) -> str:
        return f"Scene(n_obstacles={self.n_obstacles})"
